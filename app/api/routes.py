"""API route definitions for the bill analysis service."""

import logging

from fastapi import APIRouter, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from app.services.analyzer import MAX_FILE_SIZE, analyze_bill, validate_upload

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/analyze")
async def analyze(
    file: UploadFile = File(..., description="Image or PDF of a medical bill"),
) -> JSONResponse:
    """Analyse an uploaded medical bill.

    Answers with ``{"data": ...}`` on success or ``{"error": "..."}`` on
    failure; 400 when the upload itself is invalid, 500 otherwise.
    """
    # One byte past the limit is enough to flag an oversized upload.
    content = await file.read(MAX_FILE_SIZE + 1)
    logger.info(
        "Bill received — file=%s type=%s bytes=%d",
        file.filename,
        file.content_type,
        len(content),
    )

    response = await run_in_threadpool(analyze_bill, content, file.content_type)
    if response.ok:
        status_code = 200
    elif validate_upload(content, file.content_type):
        status_code = 400
    else:
        status_code = 500
    return JSONResponse(status_code=status_code, content=response.to_json())


@router.get("/health", status_code=200)
async def health_check() -> dict[str, str]:
    """Liveness / readiness health check endpoint.

    Returns:
        A dict with the current service status.
    """
    return {"status": "ok"}
