"""Exceptions raised by the receipt parsing pipeline."""

OCR_RETRY_MESSAGE = "Failed to read receipt. Please try a clearer image."


class ReceiptOCRError(Exception):
    """Base exception for receipt pipeline errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ImageLoadError(ReceiptOCRError):
    """Raised when input bytes cannot be decoded as an image."""


class OcrFailure(ReceiptOCRError):
    """Raised when the OCR engine fails or returns no usable text."""

    def __init__(self, message: str = OCR_RETRY_MESSAGE):
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for API responses."""
        return {"code": "OCR_FAILURE", "message": self.message}
