"""Taichi GGUI window for presenting a finished frame.

Example:
    >>> from spheretrace.preview.window import BufferWindow
    >>>
    >>> window = BufferWindow(512, 512)
    >>> window.update_from_buffer(buffer)
    >>> window.run()
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

if TYPE_CHECKING:
    import numpy.typing as npt

    from spheretrace.preview.buffer import PixelBuffer


class BufferWindow:
    """A GGUI window showing a single static image.

    The window itself is created lazily on first use so that the class can
    be constructed (and its image conversion tested) on headless machines.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
        display_image: Taichi field holding the image as RGB floats in
            [0, 1], indexed (x, y) with the origin at the bottom-left.
    """

    def __init__(self, width: int, height: int, *, title: str = "spheretrace") -> None:
        self.width = width
        self.height = height
        self._title = title

        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None

        self.display_image: ti.MatrixField = ti.Vector.field(
            3, dtype=ti.f32, shape=(width, height)
        )

    def _initialize_window(self) -> None:
        if self._window is not None:
            return
        self._window = ti.ui.Window(
            name=self._title,
            res=(self.width, self.height),
            vsync=True,
        )
        self._canvas = self._window.get_canvas()

    @property
    def window(self) -> ti.ui.Window:
        """Get the Taichi GGUI window, initializing if needed."""
        self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> ti.ui.Canvas:
        """Get the canvas for rendering."""
        self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    @staticmethod
    def buffer_to_field_layout(buffer: PixelBuffer) -> npt.NDArray[np.float32]:
        """Convert a top-left, row-major RGBA buffer to the GGUI layout.

        GGUI images are indexed (x, y) with y pointing up, so rows are flipped
        and the axes swapped. Alpha is dropped.

        Returns:
            A contiguous (width, height, 3) float32 array in [0, 1].
        """
        rgb = buffer.to_float()
        return np.ascontiguousarray(np.transpose(np.flipud(rgb), (1, 0, 2)))

    def update_from_buffer(self, buffer: PixelBuffer) -> None:
        """Copy a pixel buffer into the display image.

        Raises:
            ValueError: If the buffer size doesn't match the window.
        """
        if (buffer.width, buffer.height) != (self.width, self.height):
            raise ValueError(
                f"Buffer size {buffer.width}x{buffer.height} doesn't match "
                f"window size {self.width}x{self.height}"
            )
        self.display_image.from_numpy(self.buffer_to_field_layout(buffer))

    def is_running(self) -> bool:
        """Check if the window is still open."""
        return self.window.running

    def show_frame(self) -> None:
        """Draw the display image and present one frame."""
        self.canvas.set_image(self.display_image)
        self.window.show()

    def run(self) -> None:
        """Show the image until the window is closed."""
        self._initialize_window()
        while self.is_running():
            self.show_frame()

    def close(self) -> None:
        """Ask the event loop to stop."""
        if self._window is not None:
            self._window.running = False

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if os.name == "nt":
            return True

        # On macOS, display is always available if not in SSH
        if os.uname().sysname == "Darwin":
            ssh_connection = os.environ.get("SSH_CONNECTION")
            return not (ssh_connection and not display)

        return bool(display or wayland)
