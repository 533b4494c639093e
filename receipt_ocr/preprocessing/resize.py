"""Resolution bounding for receipt photos.

Phone cameras produce images far larger than OCR needs; shrinking them
to a fixed maximum width keeps recognition fast on small devices.
"""

import cv2
import numpy as np

from receipt_ocr.utils.logger import get_logger

logger = get_logger(__name__)


def scaled_size(width: int, height: int, max_width: int) -> tuple[int, int]:
    """Compute the target size for an image bounded to ``max_width``.

    Args:
        width: Source width in pixels.
        height: Source height in pixels.
        max_width: Maximum allowed width.

    Returns:
        Tuple of (width, height). Unchanged when already narrow enough.
    """
    if width <= max_width:
        return width, height
    new_height = max(1, round(height * max_width / width))
    return max_width, new_height


def resize_to_max_width(image: np.ndarray, max_width: int = 1500) -> np.ndarray:
    """Downscale an image so its width does not exceed ``max_width``.

    Args:
        image: Input image (color or grayscale).
        max_width: Maximum output width in pixels.

    Returns:
        A new image, proportionally resized if it was wider than ``max_width``.
    """
    h, w = image.shape[:2]
    new_w, new_h = scaled_size(w, h, max_width)

    if (new_w, new_h) == (w, h):
        logger.debug("Image width %d within limit, skipping resize", w)
        return image.copy()

    result = cv2.resize(image, (new_w, new_h), interpolation=cv2.INTER_AREA)
    logger.debug("Resized image from %dx%d to %dx%d", w, h, new_w, new_h)
    return result
