"""OCR engine boundary consumed by the receipt pipeline.

The pipeline only needs text out of an image, plus a lifecycle hook
around each call so engines that hold a worker or session can free it.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import numpy as np

from receipt_ocr.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class OCRResult:
    """Plain-text OCR output for one receipt image."""

    text: str
    language: str


@runtime_checkable
class OCREngine(Protocol):
    """Text recognizer with an explicit acquire/release lifecycle."""

    def acquire(self) -> None: ...

    def release(self) -> None: ...

    def recognize(self, image: np.ndarray | bytes) -> OCRResult: ...


@contextmanager
def ocr_session(engine: OCREngine) -> Iterator[OCREngine]:
    """Hold an OCR engine session, releasing it on every exit path.

    Args:
        engine: Engine to acquire.

    Yields:
        The acquired engine.
    """
    engine.acquire()
    logger.debug("Acquired OCR session on %s", type(engine).__name__)
    try:
        yield engine
    finally:
        engine.release()
        logger.debug("Released OCR session on %s", type(engine).__name__)
