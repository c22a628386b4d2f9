"""
Image decoding and validation for the reference engine.

The engine receives encoded bytes over the channel; these helpers turn them
into a BGR array for Ultralytics and reject anything unusable early.
"""

import io
import logging

import cv2
import numpy as np
from PIL import Image


logger = logging.getLogger(__name__)


def decode_image(image_bytes: bytes, filename: str = 'unknown') -> np.ndarray:
    """
    Decode image bytes to a BGR uint8 array.

    OpenCV handles the common formats; PIL is the fallback for the rest
    (WebP variants, palette GIFs, CMYK TIFF, ...).

    Args:
        image_bytes: Encoded image
        filename: Name used in log and error messages

    Returns:
        Array of shape (H, W, 3), BGR

    Raises:
        ValueError: If neither decoder can read the data
    """
    if not image_bytes:
        raise ValueError('Empty image data provided')

    try:
        nparr = np.frombuffer(image_bytes, dtype=np.uint8)
        img = cv2.imdecode(nparr, cv2.IMREAD_COLOR)
        if img is not None and img.size > 0:
            return img
    except cv2.error as e:
        logger.debug(f'OpenCV decode failed for {filename}: {e}')

    try:
        pil_image = Image.open(io.BytesIO(image_bytes))
        if pil_image.mode not in ('RGB', 'L'):
            pil_image = pil_image.convert('RGB')
        img_array = np.array(pil_image)

        if img_array.ndim == 2:
            img = cv2.cvtColor(img_array, cv2.COLOR_GRAY2BGR)
        else:
            img = cv2.cvtColor(img_array, cv2.COLOR_RGB2BGR)

        logger.info(f'Decoded {filename} using PIL fallback (format: {pil_image.format})')
        return img

    except Exception as e:
        raise ValueError(
            f"Failed to decode image '{filename}'. "
            f'Ensure it is a valid image file (JPEG, PNG, WebP, BMP, TIFF, GIF). '
            f'Error details: {e!s}'
        ) from e


def validate_image(
    img: np.ndarray, filename: str = 'unknown', max_dimension: int = 16384, min_dimension: int = 16
) -> None:
    """
    Reject images whose dimensions are degenerate or unreasonably large.

    Raises:
        ValueError: If the image is empty or out of bounds
    """
    if img is None or not isinstance(img, np.ndarray) or img.size == 0:
        raise ValueError(f"Image '{filename}' is empty")

    height, width = img.shape[:2]

    if height > max_dimension or width > max_dimension:
        raise ValueError(
            f"Image '{filename}' dimensions too large: {width}x{height}. "
            f'Maximum supported: {max_dimension}x{max_dimension}.'
        )

    if height < min_dimension or width < min_dimension:
        raise ValueError(
            f"Image '{filename}' dimensions too small: {width}x{height}. "
            f'Minimum supported: {min_dimension}x{min_dimension}.'
        )
