"""OCR engines and the image fallback chain

Strategies run strictly one after another:
    1. Google Vision (only when credentials are configured)
    2. Tesseract on a preprocessed temporary copy of the image
    3. Tesseract on the original image
If none yields usable text, the longest non-empty attempt is returned, and if
every attempt is empty OcrExhausted is raised.
"""
from pathlib import Path
from typing import Callable, List, Optional, Union

import pytesseract
from google.cloud import vision
from google.oauth2 import service_account
from loguru import logger
from PIL import Image

from .config import (
    GOOGLE_CLOUD_CLIENT_EMAIL,
    GOOGLE_CLOUD_KEY_FILE,
    GOOGLE_CLOUD_PRIVATE_KEY,
    GOOGLE_CLOUD_PROJECT_ID,
    OCR_ACCEPT_MIN_CHARS,
    TESSERACT_CMD,
    TESSERACT_LANG,
)
from .errors import OcrExhausted
from .models import AdapterResult, OcrAttempt, OcrReading
from .normalizer import collapse_whitespace
from .preprocessor import ImagePreprocessor


PathLike = Union[str, Path]


def confidence_tier(score: Optional[float]) -> str:
    """Map an engine confidence (0-100) to a tier: >80 high, >60 medium, else low"""
    if score is None:
        return "low"
    if score > 80:
        return "high"
    if score > 60:
        return "medium"
    return "low"


class TesseractEngine:
    """Local OCR through pytesseract"""

    name = "Tesseract"

    def __init__(self, language: str = TESSERACT_LANG, tesseract_cmd: Optional[str] = TESSERACT_CMD):
        self.language = language
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def recognize(self, image_path: PathLike) -> OcrReading:
        with Image.open(image_path) as image:
            text = pytesseract.image_to_string(image, lang=self.language)
            data = pytesseract.image_to_data(
                image, lang=self.language, output_type=pytesseract.Output.DICT
            )

        # Tesseract reports -1 for non-word boxes
        confidences = []
        for word, conf in zip(data.get("text", []), data.get("conf", [])):
            try:
                value = float(conf)
            except (TypeError, ValueError):
                continue
            if value >= 0 and str(word).strip():
                confidences.append(value)

        mean_confidence = sum(confidences) / len(confidences) if confidences else None
        return OcrReading(text=text, confidence=mean_confidence)


class GoogleVisionClient:
    """Cloud OCR through the Google Vision text-detection API"""

    name = "Google Vision AI"

    def __init__(self, client: vision.ImageAnnotatorClient):
        self.client = client

    @classmethod
    def from_config(cls) -> Optional["GoogleVisionClient"]:
        """Build a client from environment credentials, or None when not configured"""
        if not (GOOGLE_CLOUD_KEY_FILE or (GOOGLE_CLOUD_PROJECT_ID and GOOGLE_CLOUD_PRIVATE_KEY)):
            logger.info("Google Vision credentials not provided, using Tesseract only")
            return None

        try:
            if GOOGLE_CLOUD_KEY_FILE:
                client = vision.ImageAnnotatorClient.from_service_account_file(GOOGLE_CLOUD_KEY_FILE)
            else:
                credentials = service_account.Credentials.from_service_account_info({
                    "type": "service_account",
                    "project_id": GOOGLE_CLOUD_PROJECT_ID,
                    "client_email": GOOGLE_CLOUD_CLIENT_EMAIL,
                    "private_key": GOOGLE_CLOUD_PRIVATE_KEY.replace("\\n", "\n"),
                    "token_uri": "https://oauth2.googleapis.com/token",
                })
                client = vision.ImageAnnotatorClient(credentials=credentials)
        except Exception as e:
            logger.warning(f"Google Vision initialization failed, falling back to Tesseract: {e}")
            return None

        logger.info("Google Vision API initialized")
        return cls(client)

    def recognize(self, image_path: PathLike) -> OcrReading:
        content = Path(image_path).read_bytes()
        response = self.client.text_detection(image=vision.Image(content=content))
        if response.error.message:
            raise RuntimeError(f"Google Vision API error: {response.error.message}")

        # The first annotation holds the full text
        annotations = response.text_annotations
        return OcrReading(text=annotations[0].description if annotations else "")


class ImageOcrAdapter:
    """Extracts text from JPEG/PNG images through the OCR fallback chain"""

    def __init__(self,
                 engine=None,
                 cloud_client=None,
                 preprocessor: Optional[ImagePreprocessor] = None,
                 accept_min_chars: int = OCR_ACCEPT_MIN_CHARS):
        self.engine = engine or TesseractEngine()
        self.cloud_client = cloud_client
        self.preprocessor = preprocessor or ImagePreprocessor()
        self.accept_min_chars = accept_min_chars

    def extract_text(self, file_path: PathLike, file_type: Optional[str] = None) -> AdapterResult:
        attempts: List[OcrAttempt] = []
        cloud_attempted = False

        # 1. Cloud OCR
        if self.cloud_client is not None:
            cloud_attempted = True
            logger.debug(f"Attempting OCR with {self.cloud_client.name}")
            attempt = self._attempt(
                self.cloud_client.name, self.cloud_client.name,
                self.cloud_client.recognize, file_path, fixed_confidence="high",
            )
            attempts.append(attempt)
            if self._usable(attempt):
                return AdapterResult(attempt.text, attempt.method, "high", fallback_used=False)

        # 2. Local engine on a preprocessed copy
        attempt = self._attempt(
            f"{self.engine.name} (Preprocessed)", self.engine.name,
            self._recognize_preprocessed, file_path,
        )
        attempts.append(attempt)
        if self._usable(attempt):
            return AdapterResult(attempt.text, attempt.method, attempt.confidence,
                                 fallback_used=cloud_attempted)

        # 3. Local engine on the original image
        attempt = self._attempt(
            self.engine.name, self.engine.name, self.engine.recognize, file_path,
        )
        attempts.append(attempt)
        if self._usable(attempt):
            return AdapterResult(attempt.text, attempt.method, attempt.confidence, fallback_used=True)

        candidates = [a for a in attempts if a.text]
        if not candidates:
            logger.error(f"All OCR attempts produced no text for {Path(file_path).name}")
            raise OcrExhausted(attempts, file_type=file_type or "image")

        best = max(candidates, key=lambda a: len(a.text))
        logger.warning(f"No OCR attempt was conclusive, keeping longest text from {best.method}")
        return AdapterResult(
            best.text,
            f"{best.engine} (Best of {len(attempts)})",
            best.confidence,
            fallback_used=True,
        )

    def _recognize_preprocessed(self, file_path: PathLike) -> OcrReading:
        with self.preprocessor.preprocessed_copy(file_path) as preprocessed_path:
            return self.engine.recognize(preprocessed_path)

    def _attempt(self,
                 method: str,
                 engine_name: str,
                 recognize: Callable[[PathLike], OcrReading],
                 file_path: PathLike,
                 fixed_confidence: Optional[str] = None) -> OcrAttempt:
        """Run one strategy, recording its failure instead of raising"""
        try:
            reading = recognize(file_path)
        except Exception as e:
            logger.warning(f"{method} failed: {e}")
            return OcrAttempt(method=method, engine=engine_name, error=str(e))

        text = (reading.text or "").strip()
        if not text:
            logger.warning(f"{method} returned no text")
            return OcrAttempt(method=method, engine=engine_name, error="no text detected")

        confidence = fixed_confidence or confidence_tier(reading.confidence)
        logger.debug(f"{method} extracted {len(text)} characters (confidence: {confidence})")
        return OcrAttempt(method=method, engine=engine_name, text=text, confidence=confidence)

    def _usable(self, attempt: OcrAttempt) -> bool:
        return len(collapse_whitespace(attempt.text)) >= self.accept_min_chars
