"""FastAPI interface for artist document extraction"""
from fastapi import FastAPI, HTTPException, UploadFile, File, Form
from typing import List, Optional
from pydantic import BaseModel
from pathlib import Path
from loguru import logger
import os
import tempfile
from .config import MAX_UPLOAD_BYTES, SUPPORTED_FORMATS
from .enhancer import AIEnhancer
from .errors import ExtractionError, ExtractionFailed, FileNotFound, UnsupportedFormat
from .extractor import create_extractor


app = FastAPI(title="Artist Document Extractor API", version="1.0.0")


class ExtractionRequestItem(BaseModel):
    """Single extraction request item"""
    file_path: str
    file_type: Optional[str] = None


# Initialized on startup
extractor = None
enhancer = None


@app.on_event("startup")
def startup_event():
    """Initialize extractor on startup"""
    global extractor, enhancer
    try:
        extractor = create_extractor()
        enhancer = AIEnhancer()
    except Exception as e:
        logger.warning(f"Failed to initialize extractor: {e}")


def _require_extractor():
    if extractor is None:
        raise HTTPException(status_code=500, detail="Extractor not initialized")
    return extractor


def _error_status(error: ExtractionError) -> int:
    if isinstance(error, UnsupportedFormat):
        return 400
    if isinstance(error, FileNotFound):
        return 404
    if isinstance(error, ExtractionFailed):
        return 422
    return 500


def _build_response(result, enhance: bool) -> dict:
    response = result.to_dict()
    response["success"] = True
    if enhance:
        active_enhancer = enhancer or AIEnhancer(use_llm=False)
        response["enhanced"] = active_enhancer.enhance_structured(result.fields, result.raw_text)
    return response


@app.post("/extract-upload")
def extract_from_upload(
    document: UploadFile = File(...),
    enhance: bool = Form(False)
):
    """
    Extract artist information from an uploaded document.

    Accepts:
    - document: PDF, DOC/DOCX, JPEG or PNG file (max 10 MB)
    - enhance: also return LLM-cleaned fields

    Returns the extraction result.
    """
    doc_extractor = _require_extractor()

    filename = document.filename or ""
    file_type = Path(filename).suffix.lower().lstrip('.')
    if file_type not in SUPPORTED_FORMATS:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type. Only {', '.join(SUPPORTED_FORMATS).upper()} files are allowed"
        )

    content = document.file.read(MAX_UPLOAD_BYTES + 1)
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size is {MAX_UPLOAD_BYTES // (1024 * 1024)} MB"
        )

    fd, temp_name = tempfile.mkstemp(prefix="upload_", suffix=f".{file_type}")
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(content)

        logger.info(f"Processing upload: {filename} ({len(content)} bytes)")
        result = doc_extractor.extract(temp_name, file_type)
        response = _build_response(result, enhance)
        response["filename"] = filename
        return response

    except ExtractionError as e:
        raise HTTPException(status_code=_error_status(e), detail=str(e))
    finally:
        Path(temp_name).unlink(missing_ok=True)


@app.post("/extract")
def extract_from_requests(request: List[ExtractionRequestItem]):
    """
    Extract artist information from documents already on the server.

    Accepts an array of extraction requests, each containing:
    - file_path: Path to the document
    - file_type: pdf, doc, docx, jpeg, jpg or png (defaults to the extension)

    Returns an array of extraction results; failures are reported per item.
    """
    doc_extractor = _require_extractor()

    results = []
    for item in request:
        file_type = item.file_type or Path(item.file_path).suffix.lstrip('.')
        try:
            result = doc_extractor.extract(item.file_path, file_type)
            response = _build_response(result, enhance=False)
            response["file_path"] = item.file_path
            results.append(response)
        except ExtractionError as e:
            results.append({
                "file_path": item.file_path,
                "success": False,
                "status_code": _error_status(e),
                "error": str(e)
            })

    return results


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "extractor_initialized": extractor is not None,
        "cloud_ocr_available": extractor is not None and extractor.image_adapter.cloud_client is not None,
        "llm_available": enhancer is not None and enhancer.llm_client is not None,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
