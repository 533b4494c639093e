"""Pydantic request/response schemas for the FastAPI endpoints."""

from pydantic import BaseModel


class LineItemResponse(BaseModel):
    """Response schema for a single extracted line item."""

    name: str
    price: float


class ParseResponse(BaseModel):
    """Response schema for a receipt parsing request."""

    success: bool
    items: list[LineItemResponse]
    item_count: int
    message: str | None = None
    processing_time_ms: float


class ErrorResponse(BaseModel):
    """Response schema for a failed receipt parsing request."""

    code: str
    message: str


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    tesseract_available: bool
