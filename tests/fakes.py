"""Fakes standing in for OCR engines, the cloud client and the LLM"""
from pathlib import Path

from artist_extractor.models import AdapterResult, OcrReading


SAMPLE_PROFILE = (
    "Artist Name: Ravi Shankar\n"
    "Guru: Ustad Allauddin Khan\n"
    "Gharana: Maihar Gharana\n"
    "Phone: +91-999 888 7777\n"
    "Email: Ravi@Example.COM\n"
    "Address: 12 Music Lane, Varanasi\n"
)


class FakeEngine:
    """Stands in for Tesseract; hands out queued readings and records each path it was given"""

    name = "Tesseract"

    def __init__(self, *readings):
        self.readings = list(readings)
        self.calls = []
        self.existed = []

    def recognize(self, image_path):
        path = Path(image_path)
        self.calls.append(path)
        self.existed.append(path.exists())
        reading = self.readings.pop(0) if self.readings else OcrReading("")
        if isinstance(reading, Exception):
            raise reading
        return reading


class FakeCloudClient(FakeEngine):
    name = "Google Vision AI"


class FakeOcr:
    """Stands in for ImageOcrAdapter inside the PDF/Word adapters"""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []
        self.existed = []

    def extract_text(self, image_path, file_type=None):
        path = Path(image_path)
        self.calls.append(path)
        self.existed.append(path.exists())
        if self.error is not None:
            raise self.error
        return self.result


class FakeLLM:
    """Stands in for LLMClient; returns a canned reply or raises"""

    model = "fake-model"

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def complete_json(self, prompt, temperature=0.1, max_tokens=1024):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply

    def complete_text(self, prompt, temperature=0.1, max_tokens=200):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


def ocr_result(text, method="Tesseract (Preprocessed)", confidence="medium"):
    return AdapterResult(text=text, method=method, confidence=confidence, fallback_used=False)
