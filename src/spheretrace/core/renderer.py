"""Frame renderer with progress reporting.

The Renderer owns the canvas size and depth bound, renders the currently
configured scene into a fresh PixelBuffer, and presents the finished frame
exactly once. Rows are rendered in bands so callers can report progress;
the image is never presented partially.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.camera.viewport import setup_camera
    >>> from spheretrace.core.renderer import Renderer
    >>> from spheretrace.scene.presets import create_reflective_scene
    >>>
    >>> scene, camera = create_reflective_scene()
    >>> setup_camera(camera)
    >>>
    >>> renderer = Renderer(512, 512, max_depth=3)
    >>> renderer.render()
    >>> renderer.present(mode="png", path="spheres.png")
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator

from spheretrace.core.tracer import MAX_DEPTH, check_canvas_size, render_rows
from spheretrace.preview.buffer import (
    PixelBuffer,
    PresentMode,
    allocate_pixel_buffer,
    present_pixel_buffer,
)

logger = logging.getLogger(__name__)

# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]

# Rows traced per kernel launch
DEFAULT_ROWS_PER_BATCH = 64


class Renderer:
    """Renders the configured scene into a pixel buffer.

    Attributes:
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        max_depth: Reflection depth bound.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        max_depth: int = MAX_DEPTH,
        rows_per_batch: int = DEFAULT_ROWS_PER_BATCH,
    ) -> None:
        """Initialize the renderer.

        Args:
            width: Canvas width in pixels.
            height: Canvas height in pixels.
            max_depth: Reflection depth bound (0 disables reflections).
            rows_per_batch: Rows traced between progress updates.

        Raises:
            ValueError: If the canvas size, depth or batch size is invalid.
        """
        check_canvas_size(width, height)
        if max_depth < 0:
            raise ValueError(f"max_depth = {max_depth} must be non-negative")
        if rows_per_batch < 1:
            raise ValueError(f"rows_per_batch = {rows_per_batch} must be positive")

        self._width = width
        self._height = height
        self._max_depth = max_depth
        self._rows_per_batch = rows_per_batch
        self._buffer: PixelBuffer | None = None

    @property
    def width(self) -> int:
        """Get the canvas width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the canvas height."""
        return self._height

    @property
    def max_depth(self) -> int:
        """Get the reflection depth bound."""
        return self._max_depth

    @property
    def buffer(self) -> PixelBuffer | None:
        """The last completed frame, or None before the first render."""
        return self._buffer

    def _render_bands(self, buffer: PixelBuffer) -> Generator[tuple[int, int], None, None]:
        logger.debug(
            "Rendering %dx%d (depth %d, %d rows per batch)",
            self._width,
            self._height,
            self._max_depth,
            self._rows_per_batch,
        )

        row = 0
        while row < self._height:
            end = min(row + self._rows_per_batch, self._height)
            render_rows(buffer, row, end, self._max_depth)
            row = end
            yield (row, self._height)

    def render_progressive(self) -> Generator[tuple[int, int], None, None]:
        """Render a new frame band by band, yielding progress.

        The finished buffer becomes available through the ``buffer``
        property once the generator is exhausted.

        Yields:
            Tuple of (rows_done, total_rows).
        """
        buffer = allocate_pixel_buffer(self._width, self._height)
        yield from self._render_bands(buffer)
        self._buffer = buffer

    def render(self, callback: ProgressCallback | None = None) -> PixelBuffer:
        """Render a complete frame.

        Args:
            callback: Optional function called after each band with
                (rows_done, total_rows).

        Returns:
            The finished pixel buffer.

        Example:
            >>> def progress(done, total):
            ...     print(f"{done}/{total} rows")
            >>> buffer = renderer.render(callback=progress)
        """
        buffer = allocate_pixel_buffer(self._width, self._height)
        for done, total in self._render_bands(buffer):
            if callback is not None:
                callback(done, total)

        self._buffer = buffer
        return buffer

    def present(
        self,
        mode: PresentMode = "window",
        *,
        path: str | None = None,
        title: str = "spheretrace",
        block: bool = True,
    ) -> PixelBuffer:
        """Present the last frame, rendering one first if needed.

        Args:
            mode: "window", "matplotlib" or "png".
            path: Output path for "png".
            title: Window or figure title.
            block: Whether the window/figure blocks until closed.

        Returns:
            The presented buffer.
        """
        buffer = self._buffer if self._buffer is not None else self.render()
        present_pixel_buffer(buffer, mode, path=path, title=title, block=block)
        return buffer

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"max_depth={self.max_depth})"
        )
