#!/usr/bin/env python3
"""Render one of the preset sphere scenes.

This script demonstrates end-to-end rendering with spheretrace: it builds a
preset scene, sets up the camera, traces every pixel and presents the
finished frame once, either as a PNG file or in a window.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH       Image width in pixels (default: 600)
    --height HEIGHT     Image height in pixels (default: 600)
    --depth DEPTH       Reflection depth (default: 3)
    --scene NAME        Scene to render: basic or reflective (default: reflective)
    --output OUTPUT     Output file path (default: spheres.png)
    --show              Show the frame in a window instead of saving it
    --quiet             Suppress progress output

Example:
    python -m examples.render_spheres --width 256 --height 256 --depth 0 --scene basic
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a preset sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=600,
        help="Image width in pixels (default: 600)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=600,
        help="Image height in pixels (default: 600)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=3,
        help="Reflection depth (default: 3)",
    )
    parser.add_argument(
        "--scene",
        choices=("basic", "reflective"),
        default="reflective",
        help="Scene to render (default: reflective)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.png",
        help="Output file path (default: spheres.png)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show the frame in a window instead of saving it (saves when headless)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_spheres(
    width: int = 600,
    height: int = 600,
    max_depth: int = 3,
    scene_name: str = "reflective",
    output_path: str | None = "spheres.png",
    quiet: bool = False,
) -> Path | None:
    """Render a preset scene and present it.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Reflection depth bound.
        scene_name: "basic" or "reflective".
        output_path: Output PNG path, or None to show a window instead.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file, or None when shown in a window.
    """
    # Lazy imports to allow Taichi initialization first
    from spheretrace.camera.viewport import setup_camera
    from spheretrace.core.renderer import Renderer
    from spheretrace.scene.presets import create_scene

    if not quiet:
        print(f"Creating {scene_name} scene ({width}x{height})...")

    scene, camera = create_scene(scene_name)
    setup_camera(camera)

    renderer = Renderer(width, height, max_depth=max_depth)

    if not quiet:
        print(
            f"Tracing {scene.get_sphere_count()} spheres, "
            f"{scene.get_light_count()} lights, depth {max_depth}..."
        )

    start_time = time.time()

    def progress_callback(rows_done: int, total_rows: int) -> None:
        if not quiet:
            progress_pct = (rows_done / total_rows) * 100 if total_rows > 0 else 0
            print(
                f"\r  Progress: {rows_done}/{total_rows} rows ({progress_pct:.1f}%)",
                end="",
                flush=True,
            )

    renderer.render(callback=progress_callback)

    if not quiet:
        print()  # Newline after progress
        print(f"Render time: {time.time() - start_time:.2f}s")

    if output_path is None:
        renderer.present(mode="window", title=f"spheretrace - {scene_name}")
        return None

    output_file = Path(output_path)
    renderer.present(mode="png", path=str(output_file))

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Initialize Taichi in double precision
    # Use CUDA if available (the other GPU backends lack f64), fall back to CPU
    try:
        ti.init(arch=ti.cuda, default_fp=ti.f64)
        if not args.quiet:
            print("Using CUDA backend")
    except Exception:
        ti.init(arch=ti.cpu, default_fp=ti.f64)
        if not args.quiet:
            print("Using CPU backend")

    # Import after Taichi initialization
    from spheretrace.preview.window import BufferWindow

    show = args.show
    if show and not BufferWindow.is_display_available():
        print(f"No display available, saving to {args.output} instead", file=sys.stderr)
        show = False

    try:
        render_spheres(
            width=args.width,
            height=args.height,
            max_depth=args.depth,
            scene_name=args.scene,
            output_path=None if show else args.output,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
