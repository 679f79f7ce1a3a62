"""Matplotlib-based presentation of rendered buffers.

Example:
    >>> from spheretrace.preview.display import show_buffer
    >>> show_buffer(buffer, title="Reflective spheres")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from spheretrace.preview.buffer import PixelBuffer


def show_buffer(
    buffer: PixelBuffer,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display a pixel buffer as a Matplotlib figure.

    Args:
        buffer: The rendered buffer.
        title: Figure title (default shows the canvas size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until the figure is closed.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(buffer.data)
    ax.axis("off")

    if title is None:
        title = f"Render Preview - {buffer.width}x{buffer.height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)


def show_comparison(
    buffer_a: PixelBuffer,
    buffer_b: PixelBuffer,
    *,
    labels: tuple[str, str] = ("A", "B"),
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 6),
    block: bool = True,
) -> float:
    """Display two renders side by side with an amplified difference view.

    Handy for comparing, say, the same scene at depth 0 and depth 3.

    Args:
        buffer_a: First buffer.
        buffer_b: Second buffer (same size as buffer_a).
        labels: Labels for the two images.
        diff_scale: Scale factor for difference amplification.
        figsize: Figure size in inches.
        block: Whether to block execution until the figure is closed.

    Returns:
        RMSE between the two images on a [0, 1] scale.

    Raises:
        ValueError: If the buffers differ in size.
    """
    import matplotlib.pyplot as plt

    from spheretrace.preview.export import compute_rmse

    image_a = buffer_a.to_float()
    image_b = buffer_b.to_float()
    rmse = compute_rmse(image_a, image_b)

    diff_amplified = np.clip(np.abs(image_a - image_b) * diff_scale, 0.0, 1.0)

    fig, axes = plt.subplots(1, 3, figsize=figsize)

    axes[0].imshow(image_a)
    axes[0].set_title(labels[0])
    axes[0].axis("off")

    axes[1].imshow(image_b)
    axes[1].set_title(labels[1])
    axes[1].axis("off")

    axes[2].imshow(diff_amplified)
    axes[2].set_title(f"Difference ({diff_scale}x) - RMSE: {rmse:.6f}")
    axes[2].axis("off")

    plt.tight_layout()
    plt.show(block=block)

    return rmse
