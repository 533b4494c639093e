"""Shared test fixtures for the receipt OCR test suite."""

import io
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from receipt_ocr.ocr.engine import OCRResult

BURGER_RECEIPT = (
    "BURGER PLACE\n"
    "Burger........10.00\n"
    "Fries 5,50\n"
    "SUBTOTAL 15.50\n"
    "TAX 1.50\n"
    "TOTAL 17.00\n"
)


class StubOCREngine:
    """OCR engine returning fixed text and recording its lifecycle."""

    def __init__(self, text: str = BURGER_RECEIPT, error: Exception | None = None):
        self.text = text
        self.error = error
        self.acquired = 0
        self.released = 0
        self.seen: list[np.ndarray | bytes] = []

    def acquire(self) -> None:
        self.acquired += 1

    def release(self) -> None:
        self.released += 1

    def recognize(self, image: np.ndarray | bytes) -> OCRResult:
        self.seen.append(image)
        if self.error is not None:
            raise self.error
        return OCRResult(text=self.text, language="eng")


def make_png_bytes(width: int = 200, height: int = 100) -> bytes:
    """Create a PNG image as bytes."""
    image = np.full((height, width, 3), 230, dtype=np.uint8)
    image[40:60, 20:180] = (20, 20, 20)
    buf = io.BytesIO()
    Image.fromarray(image).save(buf, format="PNG")
    return buf.getvalue()


def make_sideways_jpeg_bytes(width: int = 400, height: int = 300) -> bytes:
    """Create a JPEG stored landscape with an EXIF "rotate 90 CW" tag."""
    image = Image.new("RGB", (width, height), (230, 230, 230))
    exif = image.getexif()
    exif[0x0112] = 6
    buf = io.BytesIO()
    image.save(buf, format="JPEG", exif=exif)
    return buf.getvalue()


@pytest.fixture
def sideways_jpeg_bytes() -> bytes:
    """A 400x300 JPEG that displays upright as 300x400."""
    return make_sideways_jpeg_bytes()


@pytest.fixture
def sample_image() -> np.ndarray:
    """Create a simple synthetic grayscale test image."""
    image = np.zeros((200, 300), dtype=np.uint8)
    image[50:150, 50:250] = 255
    return image


@pytest.fixture
def sample_color_image() -> np.ndarray:
    """Create a synthetic RGB test image with dark, mid, and light regions."""
    image = np.full((200, 300, 3), 240, dtype=np.uint8)
    image[50:100, 50:250] = (10, 10, 10)
    image[120:150, 50:250] = (100, 100, 100)
    return image


@pytest.fixture
def burger_receipt() -> str:
    return BURGER_RECEIPT


@pytest.fixture
def png_bytes() -> bytes:
    return make_png_bytes()


@pytest.fixture
def stub_engine() -> StubOCREngine:
    return StubOCREngine()


@pytest.fixture
def stub_engine_factory() -> type[StubOCREngine]:
    """Return the stub engine class for tests needing custom text or errors."""
    return StubOCREngine


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent
