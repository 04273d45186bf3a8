"""Image preprocessing ahead of OCR: grayscale, normalize, sharpen"""
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from loguru import logger
from PIL import Image, ImageFilter, ImageOps

from .config import PREPROCESS_MIN_WIDTH


class ImagePreprocessor:
    """Prepares a cleaner copy of an image for the local OCR engine"""

    def __init__(self, min_width: int = PREPROCESS_MIN_WIDTH, temp_dir: Optional[str] = None):
        self.min_width = min_width
        self.temp_dir = temp_dir

    def preprocess(self, image: Image.Image) -> Image.Image:
        """Return a grayscale, contrast-normalized, sharpened copy of the image"""
        processed = ImageOps.exif_transpose(image)
        processed = ImageOps.grayscale(processed)

        # Tesseract does poorly on small glyphs
        if processed.width < self.min_width:
            scale = self.min_width / processed.width
            processed = processed.resize(
                (self.min_width, max(1, round(processed.height * scale))),
                Image.LANCZOS,
            )

        processed = ImageOps.autocontrast(processed)
        return processed.filter(ImageFilter.SHARPEN)

    @contextmanager
    def preprocessed_copy(self, image_path: Union[str, Path]) -> Iterator[Path]:
        """Write a preprocessed PNG copy and yield its path

        The copy is deleted when the block exits, whether it succeeded or raised.
        """
        fd, temp_name = tempfile.mkstemp(prefix="preprocessed_", suffix=".png", dir=self.temp_dir)
        os.close(fd)
        temp_path = Path(temp_name)
        try:
            with Image.open(image_path) as image:
                self.preprocess(image).save(temp_path, format="PNG")
            logger.debug(f"Preprocessed {Path(image_path).name} -> {temp_path}")
            yield temp_path
        finally:
            temp_path.unlink(missing_ok=True)
            logger.debug(f"Removed temporary image {temp_path}")
