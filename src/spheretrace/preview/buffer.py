"""RGBA pixel buffer and presentation dispatch.

The renderer's only contact with the outside world is a pixel buffer it
writes into and a single "present" call once the frame is complete. The
buffer is a row-major ``(height, width, 4)`` uint8 NumPy array, so the row
stride is ``width * 4`` bytes and (0, 0) is the top-left pixel.

present_pixel_buffer() hands the finished buffer to one of three sinks:

    "window"      Taichi GGUI window (blocks until closed)
    "matplotlib"  Matplotlib figure
    "png"         PNG file written with Pillow

Example:
    >>> from spheretrace.preview.buffer import allocate_pixel_buffer, set_pixel
    >>> buffer = allocate_pixel_buffer(4, 3)
    >>> set_pixel(buffer, 0, 0, 255, 0, 0)
    >>> buffer.get_pixel(0, 0)
    (255, 0, 0, 255)
"""

from __future__ import annotations

import logging
from typing import Literal

import numpy as np
import numpy.typing as npt

logger = logging.getLogger(__name__)

# Presentation targets understood by present_pixel_buffer()
PresentMode = Literal["window", "matplotlib", "png"]


class PixelBuffer:
    """A mutable RGBA byte grid.

    Attributes:
        width: Buffer width in pixels.
        height: Buffer height in pixels.
        data: The underlying (height, width, 4) uint8 array.
    """

    def __init__(self, width: int, height: int) -> None:
        """Allocate a zeroed (fully transparent black) buffer.

        Raises:
            ValueError: If either dimension is smaller than 1.
        """
        if width < 1 or height < 1:
            raise ValueError(f"Pixel buffer dimensions ({width}x{height}) must be positive")
        self._width = width
        self._height = height
        self._data = np.zeros((height, width, 4), dtype=np.uint8)

    @property
    def width(self) -> int:
        """Get the buffer width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the buffer height."""
        return self._height

    @property
    def stride(self) -> int:
        """Bytes per row."""
        return self._width * 4

    @property
    def data(self) -> npt.NDArray[np.uint8]:
        """The underlying contiguous (height, width, 4) array."""
        return self._data

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Read back the RGBA value at device coordinates (x, y)."""
        r, g, b, a = self._data[y, x]
        return (int(r), int(g), int(b), int(a))

    def rgb(self) -> npt.NDArray[np.uint8]:
        """Return the RGB channels as a (height, width, 3) array view."""
        return self._data[:, :, :3]

    def to_float(self) -> npt.NDArray[np.float32]:
        """Return the RGB channels scaled to [0, 1] as float32."""
        return self.rgb().astype(np.float32) / 255.0

    def clear(self) -> None:
        """Reset every byte to zero."""
        self._data.fill(0)

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self._width}, height={self._height})"


def allocate_pixel_buffer(width: int, height: int) -> PixelBuffer:
    """Allocate a zeroed RGBA pixel buffer.

    Args:
        width: Width in pixels.
        height: Height in pixels.

    Returns:
        A new PixelBuffer.
    """
    return PixelBuffer(width, height)


def _clamp_channel(value: float) -> int:
    return int(min(255, max(0, round(value))))


def set_pixel(
    buffer: PixelBuffer,
    x: int,
    y: int,
    r: float,
    g: float,
    b: float,
    a: float = 255,
) -> None:
    """Write one pixel at device coordinates (x, y), top-left origin.

    Channels are rounded and clamped to [0, 255]. Coordinates outside the
    buffer are ignored.
    """
    if not (0 <= x < buffer.width and 0 <= y < buffer.height):
        return
    buffer.data[y, x] = (
        _clamp_channel(r),
        _clamp_channel(g),
        _clamp_channel(b),
        _clamp_channel(a),
    )


def present_pixel_buffer(
    buffer: PixelBuffer,
    mode: PresentMode = "window",
    *,
    path: str | None = None,
    title: str = "spheretrace",
    block: bool = True,
) -> None:
    """Present a finished buffer.

    Args:
        buffer: The buffer to present.
        mode: "window", "matplotlib" or "png".
        path: Output file path; required for "png".
        title: Window or figure title.
        block: Whether the window/figure blocks until closed.

    Raises:
        ValueError: If the mode is unknown or "png" is given without a path.
    """
    if mode == "png":
        if path is None:
            raise ValueError("present_pixel_buffer(mode='png') requires a path")
        from spheretrace.preview.export import save_png

        save_png(buffer, path)
    elif mode == "matplotlib":
        from spheretrace.preview.display import show_buffer

        show_buffer(buffer, title=title, block=block)
    elif mode == "window":
        from spheretrace.preview.window import BufferWindow

        window = BufferWindow(buffer.width, buffer.height, title=title)
        window.update_from_buffer(buffer)
        if block:
            window.run()
        else:
            window.show_frame()
    else:
        raise ValueError(f"Unknown presentation mode: {mode}")

    logger.info("Presented %dx%d buffer via %s", buffer.width, buffer.height, mode)
