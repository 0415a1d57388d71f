#!/usr/bin/env python3
"""Render the Cornell box scene.

This script demonstrates end-to-end rendering of the Cornell box scene with
the path tracer. It builds the scene, shades every row on a thread pool and
writes the finished image as a PNG.

Usage:
    python -m examples.render_cornell_box [options]

Options:
    --width WIDTH       Image width in pixels (default: 128)
    --height HEIGHT     Image height in pixels (default: 128)
    --samples SAMPLES   Anti-aliasing samples per pixel, a perfect square (default: 16)
    --depth DEPTH       Path-tracing recursion depth (default: 5)
    --phong             Use Phong debug shading instead of path tracing
    --output OUTPUT     Output file path (default: cornell_box.png)
    --workers WORKERS   Render threads (default: executor choice)
    --seed SEED         Seed for reproducible renders
    --quiet             Suppress progress output

Example:
    python -m examples.render_cornell_box --width 64 --height 64 --samples 4 --seed 1
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_cornell_box")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the Cornell box scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=128, help="Image width in pixels (default: 128)")
    parser.add_argument("--height", type=int, default=128, help="Image height in pixels (default: 128)")
    parser.add_argument(
        "--samples",
        type=int,
        default=16,
        help="Anti-aliasing samples per pixel, a perfect square (default: 16)",
    )
    parser.add_argument("--depth", type=int, default=5, help="Path-tracing recursion depth (default: 5)")
    parser.add_argument("--phong", action="store_true", help="Use Phong debug shading")
    parser.add_argument(
        "--output",
        type=str,
        default="cornell_box.png",
        help="Output file path (default: cornell_box.png)",
    )
    parser.add_argument("--workers", type=int, default=None, help="Render threads")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible renders")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args()


def render_cornell_box(
    width: int = 128,
    height: int = 128,
    num_samples: int = 16,
    depth: int = 5,
    phong: bool = False,
    output_path: str = "cornell_box.png",
    workers: int | None = None,
    seed: int | None = None,
    quiet: bool = False,
) -> Path:
    """Render the Cornell box scene and save to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        num_samples: Anti-aliasing samples per pixel (perfect square).
        depth: Path-tracing recursion depth.
        phong: If True, use Phong debug shading.
        output_path: Output file path (PNG).
        workers: Render thread count, None for the executor default.
        seed: Seed for the render's random generators.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    import numpy as np

    from pathtracer.camera.thin_lens import ShadingMode
    from pathtracer.core.renderer import Renderer
    from pathtracer.scene.cornell_box import CornellBoxParams, create_cornell_box_scene

    params = CornellBoxParams(
        screen_width=width,
        screen_height=height,
        aa_sample_count=num_samples,
        path_depth=depth,
        shading_mode=ShadingMode.PHONG if phong else ShadingMode.PATH_TRACE,
    )
    logger.info("Creating Cornell box scene (%dx%d)", width, height)
    scene = create_cornell_box_scene(params, rng=np.random.default_rng(seed))
    renderer = Renderer(scene, workers=workers, seed=seed)

    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (current / target) * 100 if target > 0 else 0
            rows_per_sec = current / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {current}/{target} rows "
                f"({progress_pct:.1f}%) - {rows_per_sec:.1f} rows/s",
                end="",
                flush=True,
            )

    output_file = Path(output_path)
    renderer.save_image(str(output_file), callback=progress_callback)

    if not quiet:
        print()  # Newline after progress
    logger.info("Saved to: %s", output_file.absolute())
    logger.info("Total time: %.2fs", time.time() - start_time)

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()
    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # The finishing kernel is small; the CPU backend is always available
    ti.init(arch=ti.cpu)

    try:
        render_cornell_box(
            width=args.width,
            height=args.height,
            num_samples=args.samples,
            depth=args.depth,
            phong=args.phong,
            output_path=args.output,
            workers=args.workers,
            seed=args.seed,
            quiet=args.quiet,
        )
        return 0
    except (ValueError, OSError) as e:
        logger.error("Error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
