"""Image normalization pipeline run before OCR.

Decodes uploaded bytes, bounds the resolution, converts to luminance,
and clamps contrast so the OCR engine sees crisp dark-on-white text.
"""

import io

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from receipt_ocr.errors import ImageLoadError
from receipt_ocr.utils.config import NormalizerConfig
from receipt_ocr.utils.logger import get_logger

from .contrast import clamp_contrast, to_luminance
from .resize import resize_to_max_width

logger = get_logger(__name__)


def load_image(data: bytes) -> np.ndarray:
    """Decode encoded image bytes into a numpy array.

    Args:
        data: Encoded image file contents (PNG, JPEG, ...).

    Returns:
        RGB image, or a 2-D array for single-channel sources.

    Raises:
        ImageLoadError: If the bytes cannot be decoded as an image.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            # Phone cameras store portrait shots sideways plus an Orientation tag.
            upright = ImageOps.exif_transpose(img)
            if upright.mode != "L":
                upright = upright.convert("RGB")
            return np.array(upright)
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        ValueError,
    ) as exc:
        raise ImageLoadError(f"Could not decode image: {exc}") from exc


def calculate_contrast(image: np.ndarray) -> float:
    """Calculate image contrast as the standard deviation of pixel intensities.

    Args:
        image: Input image (color or grayscale).

    Returns:
        Contrast score (higher means more contrast).
    """
    return float(image.std())


class ImageNormalizer:
    """Bounded-size, high-contrast grayscale normalizer for receipt photos.

    Args:
        config: Normalizer configuration with size and threshold limits.
    """

    def __init__(self, config: NormalizerConfig | None = None) -> None:
        self.config = config or NormalizerConfig()

    def process(self, image: np.ndarray) -> np.ndarray:
        """Normalize a decoded image without modifying it.

        Args:
            image: Input image (RGB, RGBA, or grayscale).

        Returns:
            Grayscale image at most ``max_width`` pixels wide.
        """
        result = resize_to_max_width(image, self.config.max_width)
        result = to_luminance(result)
        result = clamp_contrast(
            result,
            low=self.config.low_threshold,
            high=self.config.high_threshold,
        )

        logger.info(
            "Normalized image %dx%d -> %dx%d, contrast %.1f->%.1f",
            image.shape[1],
            image.shape[0],
            result.shape[1],
            result.shape[0],
            calculate_contrast(image),
            calculate_contrast(result),
        )
        return result

    def normalize_bytes(self, data: bytes) -> np.ndarray:
        """Decode and normalize encoded image bytes.

        Raises:
            ImageLoadError: If the bytes cannot be decoded as an image.
        """
        return self.process(load_image(data))
