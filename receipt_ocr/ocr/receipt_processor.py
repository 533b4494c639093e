"""Receipt processing pipeline.

Combines image normalization, OCR, and line-item extraction into a
single awaitable call: image bytes in, ordered line items out.
"""

import asyncio

import numpy as np

from receipt_ocr.errors import ImageLoadError, OcrFailure
from receipt_ocr.extraction.line_items import LineItem, LineItemExtractor
from receipt_ocr.preprocessing.pipeline import ImageNormalizer
from receipt_ocr.utils.config import AppConfig
from receipt_ocr.utils.logger import get_logger

from .engine import OCREngine, ocr_session
from .tesseract_engine import TesseractEngine

logger = get_logger(__name__)


class ReceiptProcessor:
    """End-to-end receipt parsing pipeline.

    Each call to :meth:`parse_receipt` is independent: it opens its own
    OCR session and shares no mutable state with concurrent calls.

    Args:
        config: Application configuration object.
        engine: OCR engine to use. Defaults to Tesseract built from
            ``config.ocr``.
    """

    def __init__(self, config: AppConfig, engine: OCREngine | None = None) -> None:
        self.config = config
        self.normalizer = ImageNormalizer(config.normalizer)
        self.extractor = LineItemExtractor(config.extraction)
        self.engine = engine or TesseractEngine(
            tesseract_cmd=config.ocr.tesseract_cmd,
            default_lang=config.ocr.default_lang,
            psm=config.ocr.psm,
        )

    async def parse_receipt(self, image_bytes: bytes) -> list[LineItem]:
        """Parse a receipt photo into line items.

        Args:
            image_bytes: Encoded image file contents.

        Returns:
            Line items in printed order. Empty when nothing matched.

        Raises:
            OcrFailure: If OCR fails or yields no text.
        """
        image = await asyncio.to_thread(self._prepare_image, image_bytes)
        text = await asyncio.to_thread(self._recognize, image)
        return self.extractor.extract(text)

    def _prepare_image(self, image_bytes: bytes) -> np.ndarray | bytes:
        """Normalize the image, falling back to the original bytes."""
        if not self.config.normalizer.enabled:
            return image_bytes
        try:
            return self.normalizer.normalize_bytes(image_bytes)
        except ImageLoadError as exc:
            logger.warning("Image normalization failed, using original: %s", exc)
            return image_bytes

    def _recognize(self, image: np.ndarray | bytes) -> str:
        """Run OCR inside a scoped engine session.

        Raises:
            OcrFailure: If the engine raises or returns blank text.
        """
        try:
            with ocr_session(self.engine) as engine:
                result = engine.recognize(image)
        except Exception as exc:
            logger.error("OCR failed: %s", exc)
            raise OcrFailure() from exc

        if not result.text or not result.text.strip():
            logger.error("OCR returned no text")
            raise OcrFailure()

        return result.text


async def parse_receipt(
    image_bytes: bytes,
    config: AppConfig | None = None,
    engine: OCREngine | None = None,
) -> list[LineItem]:
    """Parse a receipt photo into line items.

    Args:
        image_bytes: Encoded image file contents.
        config: Application configuration. Defaults to ``AppConfig()``.
        engine: OCR engine. Defaults to Tesseract.

    Returns:
        Line items in printed order. Empty when nothing matched.

    Raises:
        OcrFailure: If OCR fails or yields no text.
    """
    processor = ReceiptProcessor(config or AppConfig(), engine=engine)
    return await processor.parse_receipt(image_bytes)
