"""Main extraction orchestrator"""
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from .config import SUPPORTED_FORMATS
from .errors import ExtractionFailed, FileNotFound, UnsupportedFormat
from .models import ExtractionMetadata, ExtractionResult
from .normalizer import TextNormalizer
from .ocr import GoogleVisionClient, ImageOcrAdapter
from .preprocessor import ImagePreprocessor
from .scorer import ConfidenceScorer
from .text_extractor import PdfAdapter, WordAdapter


class DocumentExtractor:
    """Main orchestrator for artist document extraction

    Holds no per-request state, so one instance can serve concurrent calls.
    """

    def __init__(self,
                 cloud_client=None,
                 ocr_engine=None,
                 preprocessor: Optional[ImagePreprocessor] = None):
        self.image_adapter = ImageOcrAdapter(
            engine=ocr_engine, cloud_client=cloud_client, preprocessor=preprocessor
        )
        self.pdf_adapter = PdfAdapter(ocr=self.image_adapter)
        self.word_adapter = WordAdapter(ocr=self.image_adapter)
        self.normalizer = TextNormalizer()
        self.scorer = ConfidenceScorer()

        self.adapters = {
            "pdf": self.pdf_adapter,
            "doc": self.word_adapter,
            "docx": self.word_adapter,
            "jpeg": self.image_adapter,
            "jpg": self.image_adapter,
            "png": self.image_adapter,
        }

    def extract(self, file_path: Union[str, Path], file_type: str) -> ExtractionResult:
        """
        Extract raw text and structured artist fields from a document

        Args:
            file_path: Path to a file already on local disk
            file_type: One of pdf, doc, docx, jpeg, jpg, png (case-insensitive)

        Returns:
            ExtractionResult with raw text, parsed fields and diagnostics

        Raises:
            FileNotFound: file_path does not exist
            UnsupportedFormat: file_type is not supported
            ExtractionFailed: no strategy produced any text (OcrExhausted for images)
        """
        start_ts = time.perf_counter()

        path = Path(file_path)
        if not path.exists():
            raise FileNotFound(path)

        normalized_type = (file_type or "").strip().lower().lstrip(".")
        if normalized_type not in SUPPORTED_FORMATS:
            raise UnsupportedFormat(file_type)

        adapter = self.adapters[normalized_type]
        try:
            adapter_result = adapter.extract_text(path, file_type=normalized_type)
        except ExtractionFailed as e:
            logger.error(f"Extraction of {path.name} failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Extraction of {path.name} failed: {e}")
            raise ExtractionFailed(normalized_type, e) from e

        raw_text = self.normalizer.sanitize(adapter_result.text)
        fields = self.normalizer.normalize(adapter_result.text)
        elapsed_ms = max(0, int((time.perf_counter() - start_ts) * 1000))

        metadata = ExtractionMetadata(
            method=adapter_result.method,
            confidence=self.scorer.score(raw_text),
            fallback_used=adapter_result.fallback_used,
            processing_time_ms=elapsed_ms,
            text_length=len(raw_text),
            word_count=len(raw_text.split()),
            quality_score=self.scorer.quality_score(raw_text),
            engine_confidence=adapter_result.confidence,
            extracted_at=datetime.now(timezone.utc).isoformat(),
            file_type=normalized_type,
        )
        logger.info(
            f"Processed {path.name} in {elapsed_ms}ms using {metadata.method} "
            f"(confidence: {metadata.confidence}, fallback: {metadata.fallback_used})"
        )
        return ExtractionResult(raw_text=raw_text, fields=fields, metadata=metadata)


def create_extractor() -> DocumentExtractor:
    """Build an extractor from configuration; Google Vision is used only when credentials exist"""
    return DocumentExtractor(cloud_client=GoogleVisionClient.from_config())
