"""Preview module for output and visualization.

Components:
    buffer: RGBA pixel buffer and presentation dispatch
    export: PNG export and loading via Pillow
    display: Matplotlib-based static preview
    window: Taichi GGUI window for a finished frame

The pixel buffer holds final 8-bit display values, so no tone mapping or
gamma correction is applied on the way out.

Example:
    >>> from spheretrace.preview import allocate_pixel_buffer, present_pixel_buffer
    >>> buffer = allocate_pixel_buffer(256, 256)
    >>> # ... render into buffer ...
    >>> present_pixel_buffer(buffer, "png", path="output.png")
"""

from spheretrace.preview.buffer import (
    PixelBuffer,
    PresentMode,
    allocate_pixel_buffer,
    present_pixel_buffer,
    set_pixel,
)
from spheretrace.preview.display import show_buffer, show_comparison
from spheretrace.preview.export import (
    buffer_to_image,
    compute_rmse,
    load_png,
    save_png,
    save_png_from_array,
)
from spheretrace.preview.window import BufferWindow

__all__ = [
    # Pixel buffer
    "PixelBuffer",
    "PresentMode",
    "allocate_pixel_buffer",
    "set_pixel",
    "present_pixel_buffer",
    # GGUI window
    "BufferWindow",
    # Display functions
    "show_buffer",
    "show_comparison",
    # Export functions
    "buffer_to_image",
    "save_png",
    "save_png_from_array",
    "load_png",
    "compute_rmse",
]
