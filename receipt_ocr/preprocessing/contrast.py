"""Grayscale conversion and contrast clamping for receipt images.

Receipts are dark text on light paper; pushing near-white pixels to
white and near-black pixels to black makes the text stand out while a
soft middle band keeps faint print readable.
"""

import numpy as np

from receipt_ocr.utils.logger import get_logger

logger = get_logger(__name__)

# Rec. 709 luminosity weights for R, G, B.
LUMINANCE_WEIGHTS = np.array([0.2126, 0.7152, 0.0722])


def to_luminance(image: np.ndarray) -> np.ndarray:
    """Convert an RGB image to a single luminance channel.

    Args:
        image: Input image (RGB, RGBA, or already grayscale).

    Returns:
        Grayscale ``uint8`` image.
    """
    if image.ndim == 2:
        return image.astype(np.uint8, copy=True)

    rgb = image[..., :3].astype(np.float64)
    luminance = rgb @ LUMINANCE_WEIGHTS
    return np.clip(np.rint(luminance), 0, 255).astype(np.uint8)


def clamp_contrast(
    gray: np.ndarray,
    low: int = 80,
    high: int = 120,
) -> np.ndarray:
    """Force bright pixels to white and dark pixels to black.

    Pixels above ``high`` become 255, pixels below ``low`` become 0,
    and values in ``[low, high]`` pass through unchanged.

    Args:
        gray: Grayscale image.
        low: Values below this become black.
        high: Values above this become white.

    Returns:
        Contrast-clamped grayscale image.
    """
    result = np.where(gray > high, 255, gray)
    result = np.where(result < low, 0, result).astype(np.uint8)
    logger.debug("Applied contrast clamp (low=%d, high=%d)", low, high)
    return result
