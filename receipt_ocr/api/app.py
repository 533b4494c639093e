"""FastAPI application for the receipt OCR API.

Provides a receipt parsing endpoint and a health check.
"""

import asyncio
import time
from typing import Annotated

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from receipt_ocr.errors import OcrFailure
from receipt_ocr.ocr.receipt_processor import ReceiptProcessor
from receipt_ocr.ocr.tesseract_engine import TesseractEngine
from receipt_ocr.utils.config import load_config
from receipt_ocr.utils.logger import get_logger

from .schemas import ErrorResponse, HealthResponse, LineItemResponse, ParseResponse

logger = get_logger(__name__)

VERSION = "1.0.0"

NO_ITEMS_MESSAGE = (
    "We couldn't detect any items automatically. You can add them manually."
)

app = FastAPI(
    title="Receipt OCR API",
    description="Extract priced line items from photographed receipts",
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_processor() -> ReceiptProcessor:
    """Build a receipt processor for one request."""
    return ReceiptProcessor(load_config())


@app.exception_handler(OcrFailure)
async def ocr_failure_handler(_request: Request, exc: OcrFailure) -> JSONResponse:
    """Report OCR failures with the user-facing retry advice."""
    return JSONResponse(status_code=422, content=exc.to_dict())


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return system health status."""
    ocr_config = load_config().ocr
    engine = TesseractEngine(tesseract_cmd=ocr_config.tesseract_cmd)
    return HealthResponse(
        status="healthy",
        version=VERSION,
        tesseract_available=await asyncio.to_thread(engine.is_available),
    )


@app.post(
    "/receipts/parse",
    response_model=ParseResponse,
    responses={422: {"model": ErrorResponse}},
)
async def parse_receipt_upload(
    file: Annotated[UploadFile, File(...)],
) -> ParseResponse:
    """Extract line items from an uploaded receipt photo.

    Args:
        file: Uploaded receipt image.

    Returns:
        Extracted items in printed order, with a hint when none were found.
    """
    start_time = time.time()

    if not file.content_type or not file.content_type.startswith("image/"):
        raise HTTPException(
            status_code=400,
            detail="Please upload a valid image file.",
        )

    content = await file.read()
    items = await _get_processor().parse_receipt(content)

    processing_time = (time.time() - start_time) * 1000
    logger.info(
        "Parsed %s: %d items in %.0f ms",
        file.filename or "upload",
        len(items),
        processing_time,
    )

    return ParseResponse(
        success=True,
        items=[LineItemResponse(name=i.name, price=i.price) for i in items],
        item_count=len(items),
        message=None if items else NO_ITEMS_MESSAGE,
        processing_time_ms=processing_time,
    )
