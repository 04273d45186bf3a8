"""Text extraction from PDF and Word documents using PyMuPDF, pdfplumber and python-docx"""
import tempfile
from pathlib import Path
from typing import List, Optional, Union

import docx
import fitz  # PyMuPDF
import pdfplumber
from loguru import logger

from .config import MINIMAL_TEXT_LENGTH, PDF_RENDER_DPI
from .errors import ExtractionFailed, OcrExhausted
from .models import AdapterResult


PathLike = Union[str, Path]
TIER_RANK = {"low": 0, "medium": 1, "high": 2}


class DocumentAdapter:
    """Structural text extraction with an OCR fallback for image-only documents

    When the primary text is shorter than the minimal-text threshold and an
    OCR path exists, the fallback is attempted and the longer text wins.
    """

    file_type = "document"
    default_method = "Document Parser"

    def __init__(self, ocr=None, minimal_text_length: int = MINIMAL_TEXT_LENGTH):
        self.ocr = ocr
        self.minimal_text_length = minimal_text_length

    def extract_text(self, file_path: PathLike, file_type: Optional[str] = None) -> AdapterResult:
        file_type = file_type or self.file_type
        primary = None
        primary_error = None
        try:
            primary = self._extract_primary(Path(file_path))
        except Exception as e:
            primary_error = e
            logger.warning(f"{file_type.upper()} text extraction failed: {e}")

        primary_length = len(primary.text.strip()) if primary else 0
        if primary is not None and primary_length >= self.minimal_text_length:
            return primary

        fallback = None
        fallback_attempted = False
        if self.ocr is not None:
            logger.debug(f"Only {primary_length} characters from {file_type.upper()} text layer, trying OCR")
            try:
                fallback = self._extract_fallback(Path(file_path))
                fallback_attempted = fallback is not None
            except Exception as e:
                fallback_attempted = True
                logger.warning(f"OCR fallback for {file_type.upper()} failed: {e}")

        if fallback is not None and len(fallback.text.strip()) > primary_length:
            logger.info(f"OCR fallback recovered {len(fallback.text.strip())} characters")
            return AdapterResult(
                text=fallback.text,
                method=f"{self.method_name(primary)} + OCR Fallback ({fallback.method})",
                confidence=fallback.confidence,
                fallback_used=True,
            )

        if primary is not None:
            return AdapterResult(
                text=primary.text,
                method=primary.method,
                confidence=primary.confidence,
                fallback_used=primary.fallback_used or fallback_attempted,
            )

        raise ExtractionFailed(file_type, primary_error) from primary_error

    def method_name(self, primary: Optional[AdapterResult]) -> str:
        return primary.method if primary else self.default_method

    def _text_layer_confidence(self, text: str) -> str:
        return "high" if len(text.strip()) >= self.minimal_text_length else "low"

    def _ocr_images(self, image_paths: List[Path]) -> Optional[AdapterResult]:
        """OCR each image in order and join the recognized text

        Returns None when there is nothing to OCR. Raises the last OcrExhausted
        when no image produced text.
        """
        if not image_paths:
            return None

        texts, methods, confidences = [], [], []
        last_error = None
        for image_path in image_paths:
            try:
                result = self.ocr.extract_text(image_path)
            except OcrExhausted as e:
                last_error = e
                logger.debug(f"No text recognized in {image_path.name}")
                continue
            texts.append(result.text.strip())
            methods.append(result.method)
            confidences.append(result.confidence)

        if not texts:
            raise last_error

        return AdapterResult(
            text="\n\n".join(texts),
            method=methods[0],
            confidence=min(confidences, key=TIER_RANK.get),
            fallback_used=True,
        )

    def _extract_primary(self, file_path: Path) -> AdapterResult:
        raise NotImplementedError

    def _extract_fallback(self, file_path: Path) -> Optional[AdapterResult]:
        return None


class PdfAdapter(DocumentAdapter):
    """PDF text layer via PyMuPDF (pdfplumber if PyMuPDF fails), OCR of rendered pages as fallback"""

    file_type = "pdf"
    default_method = "PDF Parser"

    def __init__(self, ocr=None, minimal_text_length: int = MINIMAL_TEXT_LENGTH, dpi: int = PDF_RENDER_DPI):
        super().__init__(ocr=ocr, minimal_text_length=minimal_text_length)
        self.dpi = dpi

    def _extract_primary(self, file_path: Path) -> AdapterResult:
        try:
            text = self._extract_pymupdf(file_path)
            return AdapterResult(text, "PDF Parser", self._text_layer_confidence(text))
        except Exception as e:
            logger.warning(f"PyMuPDF failed, retrying with pdfplumber: {e}")
            try:
                text = self._extract_pdfplumber(file_path)
            except Exception:
                raise Exception(f"PDF extraction failed: {e}")
            return AdapterResult(text, "PDF Parser (pdfplumber)",
                                 self._text_layer_confidence(text), fallback_used=True)

    def _extract_pymupdf(self, file_path: Path) -> str:
        with fitz.open(str(file_path)) as doc:
            pages = [page.get_text() for page in doc]
        return "\n\n".join(page.strip() for page in pages if page.strip())

    def _extract_pdfplumber(self, file_path: Path) -> str:
        with pdfplumber.open(str(file_path)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
        return "\n\n".join(page.strip() for page in pages if page.strip())

    def _extract_fallback(self, file_path: Path) -> Optional[AdapterResult]:
        with tempfile.TemporaryDirectory(prefix="pdf_pages_") as temp_dir:
            page_images = self._render_pages(file_path, Path(temp_dir))
            return self._ocr_images(page_images)

    def _render_pages(self, file_path: Path, output_dir: Path) -> List[Path]:
        """Render every page to a PNG (72 is the native PDF DPI)"""
        zoom = self.dpi / 72
        page_images = []
        with fitz.open(str(file_path)) as doc:
            for page_num, page in enumerate(doc, start=1):
                pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom))
                image_path = output_dir / f"page_{page_num}.png"
                pix.save(str(image_path))
                page_images.append(image_path)
        return page_images


class WordAdapter(DocumentAdapter):
    """DOCX paragraphs and tables via python-docx, OCR of embedded images as fallback"""

    file_type = "docx"
    default_method = "Word Parser"

    def _extract_primary(self, file_path: Path) -> AdapterResult:
        document = docx.Document(str(file_path))
        parts = [paragraph.text for paragraph in document.paragraphs]

        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    parts.append("\t".join(cells))

        text = "\n".join(parts).strip()
        return AdapterResult(text, "Word Parser", self._text_layer_confidence(text))

    def _extract_fallback(self, file_path: Path) -> Optional[AdapterResult]:
        document = docx.Document(str(file_path))
        image_parts = [
            part for part in document.part.related_parts.values()
            if part.content_type.startswith("image/")
        ]
        if not image_parts:
            logger.debug(f"No embedded images in {file_path.name}, no OCR fallback available")
            return None

        with tempfile.TemporaryDirectory(prefix="docx_images_") as temp_dir:
            image_paths = []
            for index, part in enumerate(image_parts, start=1):
                suffix = Path(str(part.partname)).suffix or ".png"
                image_path = Path(temp_dir) / f"image_{index}{suffix}"
                image_path.write_bytes(part.blob)
                image_paths.append(image_path)
            return self._ocr_images(image_paths)
