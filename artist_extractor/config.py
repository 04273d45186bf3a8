"""Configuration settings for the artist document extractor"""
import os
from dotenv import load_dotenv

load_dotenv()

SUPPORTED_FORMATS = ("pdf", "doc", "docx", "jpeg", "jpg", "png")

# Text-length heuristics (untuned, see DESIGN.md)
MINIMAL_TEXT_LENGTH = 50        # Below this a PDF/DOCX is treated as image-only
OCR_ACCEPT_MIN_CHARS = 3        # Shortest OCR output accepted without trying the next engine
ADDRESS_MIN_LENGTH = 10
BIO_LABELED_MIN_LENGTH = 100
BIO_PARAGRAPH_MIN_LENGTH = 150

# OCR configuration
TESSERACT_CMD = os.getenv("TESSERACT_CMD")
TESSERACT_LANG = os.getenv("TESSERACT_LANG", "eng")
PDF_RENDER_DPI = int(os.getenv("PDF_RENDER_DPI", "300"))
PREPROCESS_MIN_WIDTH = 1000     # Images narrower than this are upscaled before OCR

# Google Vision (optional cloud OCR)
GOOGLE_CLOUD_PROJECT_ID = os.getenv("GOOGLE_CLOUD_PROJECT_ID")
GOOGLE_CLOUD_CLIENT_EMAIL = os.getenv("GOOGLE_CLOUD_CLIENT_EMAIL")
GOOGLE_CLOUD_PRIVATE_KEY = os.getenv("GOOGLE_CLOUD_PRIVATE_KEY")
GOOGLE_CLOUD_KEY_FILE = os.getenv("GOOGLE_CLOUD_KEY_FILE")

# LLM configuration (optional enhancement)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")
LLM_CONTEXT_CHARS = 2000        # Raw text sent to the LLM is truncated to this

# Upload limits
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
