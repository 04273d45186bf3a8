"""Exceptions raised by the extraction pipeline"""
from typing import List, Optional


class ExtractionError(Exception):
    """Base class for every pipeline error"""


class UnsupportedFormat(ExtractionError, ValueError):
    """File type is outside the supported set"""

    def __init__(self, file_type: str):
        self.file_type = file_type
        super().__init__(f"Unsupported file format: {file_type}")


class FileNotFound(ExtractionError, FileNotFoundError):
    """Input path does not exist at call time"""

    def __init__(self, path):
        self.path = str(path)
        super().__init__(f"File not found: {self.path}")


class ExtractionFailed(ExtractionError):
    """Every strategy for a file type failed to produce text"""

    def __init__(self, file_type: str, cause: Optional[BaseException] = None):
        self.file_type = file_type
        self.cause = cause
        reason = str(cause) if cause is not None else "no text could be extracted"
        super().__init__(f"Failed to extract text from {file_type} document: {reason}")


class OcrExhausted(ExtractionFailed):
    """All OCR strategies produced empty text

    Carries one (method, reason) entry per attempted strategy.
    """

    def __init__(self, attempts: List, file_type: str = "image"):
        self.attempts = list(attempts)
        summary = "; ".join(
            f"{attempt.method}: {attempt.error or 'no text detected'}"
            for attempt in self.attempts
        ) or "no OCR strategy available"
        self.file_type = file_type
        self.cause = None
        ExtractionError.__init__(
            self, f"Failed to extract text from {file_type} document: all OCR attempts failed ({summary})"
        )
