"""Result records produced by the extraction pipeline"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class OcrReading:
    """Raw output of a single OCR engine call (confidence on the 0-100 engine scale)"""
    text: str
    confidence: Optional[float] = None


@dataclass
class OcrAttempt:
    """One step of the OCR fallback chain, kept for diagnostics"""
    method: str
    engine: str
    text: str = ""
    confidence: str = "low"
    error: Optional[str] = None


@dataclass
class AdapterResult:
    """What a per-file-type adapter hands back to the orchestrator"""
    text: str
    method: str
    confidence: str = "low"
    fallback_used: bool = False


@dataclass
class ContactDetails:
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"phone": self.phone, "email": self.email, "address": self.address}


@dataclass
class StructuredFields:
    """Best-effort parse of the raw text; every field is None or a trimmed string"""
    artist_name: Optional[str] = None
    guru_name: Optional[str] = None
    gharana: Optional[str] = None
    biography: Optional[str] = None
    contact: ContactDetails = field(default_factory=ContactDetails)

    def is_empty(self) -> bool:
        values = [self.artist_name, self.guru_name, self.gharana, self.biography,
                  self.contact.phone, self.contact.email, self.contact.address]
        return all(value is None for value in values)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "artistName": self.artist_name,
            "guruName": self.guru_name,
            "gharana": self.gharana,
            "biography": self.biography,
            "contact": self.contact.to_dict(),
        }


@dataclass
class ExtractionMetadata:
    method: str
    confidence: str
    fallback_used: bool
    processing_time_ms: int
    text_length: int
    word_count: int
    quality_score: int = 0
    engine_confidence: str = "low"
    extracted_at: str = ""
    file_type: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "confidence": self.confidence,
            "fallbackUsed": self.fallback_used,
            "processingTimeMs": self.processing_time_ms,
            "textLength": self.text_length,
            "wordCount": self.word_count,
            "qualityScore": self.quality_score,
            "engineConfidence": self.engine_confidence,
            "extractedAt": self.extracted_at,
            "fileType": self.file_type,
        }


@dataclass
class ExtractionResult:
    raw_text: str
    fields: StructuredFields
    metadata: ExtractionMetadata

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rawText": self.raw_text,
            "fields": self.fields.to_dict(),
            "metadata": self.metadata.to_dict(),
        }
