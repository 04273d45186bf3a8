"""Artist document extraction: PDF, Word and image documents to structured artist fields"""
from .errors import ExtractionError, ExtractionFailed, FileNotFound, OcrExhausted, UnsupportedFormat
from .extractor import DocumentExtractor, create_extractor
from .models import ContactDetails, ExtractionMetadata, ExtractionResult, StructuredFields
from .normalizer import TextNormalizer
from .scorer import ConfidenceScorer

__all__ = [
    "DocumentExtractor",
    "create_extractor",
    "TextNormalizer",
    "ConfidenceScorer",
    "ExtractionResult",
    "ExtractionMetadata",
    "StructuredFields",
    "ContactDetails",
    "ExtractionError",
    "ExtractionFailed",
    "FileNotFound",
    "OcrExhausted",
    "UnsupportedFormat",
]
