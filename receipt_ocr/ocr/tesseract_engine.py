"""Tesseract OCR engine wrapper for receipt photos.

Provides plain-text extraction with a configurable language and page
segmentation mode.
"""

import io
import threading

import numpy as np
import pytesseract
from PIL import Image, ImageOps

from receipt_ocr.utils.logger import get_logger

from .engine import OCRResult

logger = get_logger(__name__)


class TesseractEngine:
    """Wrapper around Tesseract OCR for receipt text extraction.

    Tesseract runs as a subprocess per call, so a session only checks
    that the binary is usable and guards against calls outside it.

    Args:
        tesseract_cmd: Path to the Tesseract executable.
            If ``None``, uses the system default.
        default_lang: OCR language code.
        psm: Tesseract page segmentation mode. Mode 6 treats the image
            as one uniform block of text, which suits receipts.
    """

    def __init__(
        self,
        tesseract_cmd: str | None = None,
        default_lang: str = "eng",
        psm: int = 6,
    ) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.default_lang = default_lang
        self.psm = psm
        self._sessions = 0
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        return self._sessions > 0

    def is_available(self) -> bool:
        """Return True if the configured Tesseract binary can be run."""
        try:
            pytesseract.get_tesseract_version()
        except OSError as exc:
            logger.warning("Tesseract is not available: %s", exc)
            return False
        return True

    def acquire(self) -> None:
        """Start a recognition session.

        Raises:
            pytesseract.TesseractNotFoundError: If Tesseract is not installed.
        """
        version = pytesseract.get_tesseract_version()
        logger.debug("Using Tesseract %s", version)
        with self._lock:
            self._sessions += 1

    def release(self) -> None:
        """End the recognition session."""
        with self._lock:
            self._sessions = max(0, self._sessions - 1)

    def recognize(self, image: np.ndarray | bytes) -> OCRResult:
        """Extract text from a receipt image.

        Args:
            image: Decoded image array, or encoded image bytes.

        Returns:
            OCRResult containing the recognized text.

        Raises:
            RuntimeError: If called outside an acquired session.
        """
        if not self.active:
            raise RuntimeError("TesseractEngine.recognize called without acquire()")

        if isinstance(image, bytes):
            with Image.open(io.BytesIO(image)) as opened:
                pil_image = ImageOps.exif_transpose(opened)
        else:
            pil_image = Image.fromarray(image)

        text = pytesseract.image_to_string(
            pil_image,
            lang=self.default_lang,
            config=f"--psm {self.psm}",
        )

        logger.info(
            "OCR extracted %d characters in %d lines",
            len(text),
            len(text.splitlines()),
        )
        return OCRResult(text=text, language=self.default_lang)
