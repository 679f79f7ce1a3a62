"""Image export utilities for rendered buffers.

Supported formats:
    - PNG (8-bit RGBA via Pillow)

Example:
    >>> from spheretrace.preview.buffer import allocate_pixel_buffer
    >>> from spheretrace.preview.export import save_png
    >>>
    >>> buffer = allocate_pixel_buffer(64, 64)
    >>> save_png(buffer, "output.png")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from spheretrace.preview.buffer import PixelBuffer

logger = logging.getLogger(__name__)


def buffer_to_image(buffer: PixelBuffer) -> PILImage.Image:
    """Wrap a pixel buffer's bytes in a Pillow RGBA image."""
    return PILImage.fromarray(np.ascontiguousarray(buffer.data))


def save_png(buffer: PixelBuffer, filepath: str) -> None:
    """Save a pixel buffer as an RGBA PNG file.

    The buffer already holds clamped 8-bit display values, so no tone
    mapping or gamma correction is applied.

    Args:
        buffer: The rendered buffer.
        filepath: Output file path (should end in .png).
    """
    buffer_to_image(buffer).save(filepath)
    logger.info("Saved %dx%d image to %s", buffer.width, buffer.height, filepath)


def save_png_from_array(image: npt.NDArray[np.uint8], filepath: str) -> None:
    """Save a (H, W, 3) or (H, W, 4) uint8 array as a PNG file.

    Raises:
        ValueError: If the array is not an RGB or RGBA uint8 image.
    """
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ValueError(
            f"Expected a (H, W, 3|4) uint8 image, got {image.shape} {image.dtype}"
        )
    PILImage.fromarray(np.ascontiguousarray(image)).save(filepath)


def load_png(filepath: str) -> npt.NDArray[np.uint8]:
    """Load a PNG file as a (H, W, 4) RGBA uint8 array."""
    with PILImage.open(filepath) as img:
        return np.asarray(img.convert("RGBA"), dtype=np.uint8).copy()


def compute_rmse(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar), in the images' own units.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
