"""Parallel render driver.

The image is partitioned into rows. A fixed-size thread pool shades one row
per task; each task owns its slice of the HDR buffer and its own random
generator, so no locks are needed. The scene is only ever read.

Shading is pure Python and holds the GIL, so extra workers give little
throughput on a standard interpreter. The pool exists for row isolation,
cancellation and progress reporting while the caller waits, and it scales on
free-threaded builds.

Per-row generators are spawned from one SeedSequence, so a render with a
fixed seed is reproducible regardless of worker count or scheduling order.

Once every row is shaded, the Taichi finishing kernel desaturates highlights,
gamma-encodes and quantises the whole image in one pass.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.core.renderer import Renderer
    >>> from pathtracer.scene.cornell_box import create_cornell_box_scene
    >>>
    >>> renderer = Renderer(create_cornell_box_scene(), seed=7)
    >>> image = renderer.render()  # (H, W, 3) uint8
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import numpy.typing as npt

from pathtracer.core.integrator import shade
from pathtracer.core.ray import Color
from pathtracer.core.tonemap import finish_image
from pathtracer.scene.scene import Scene

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


class RenderCancelledError(RuntimeError):
    """Raised when a render is stopped through its cancellation event."""


class Renderer:
    """Renders a Scene to an 8-bit RGB image.

    Attributes:
        scene: The scene to render. Must not be mutated while rendering.
        workers: Thread pool size (None lets the executor choose).
        seed: Seed for the per-row random generators. None gives a
            different image every render.
    """

    def __init__(self, scene: Scene, workers: int | None = None, seed: int | None = None) -> None:
        if workers is not None and workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.scene = scene
        self.workers = workers
        self.seed = seed

    @property
    def width(self) -> int:
        return self.scene.camera.screen_width

    @property
    def height(self) -> int:
        return self.scene.camera.screen_height

    def render_pixel(self, pixel_x: int, pixel_y: int, rng: np.random.Generator) -> Color:
        """Average the shaded anti-aliasing rays of one pixel.

        Returns:
            Linear RGB radiance for the pixel.
        """
        rays = self.scene.camera.generate_rays(pixel_x, pixel_y, rng)
        total = np.zeros(3)
        for ray in rays:
            total += shade(self.scene, ray, rng)
        return total / len(rays)

    def _render_row(
        self,
        row: int,
        seed: np.random.SeedSequence,
        buffer: npt.NDArray[np.float32],
        cancel: threading.Event | None,
    ) -> bool:
        if cancel is not None and cancel.is_set():
            return False
        rng = np.random.default_rng(seed)
        for x in range(self.width):
            buffer[row, x] = self.render_pixel(x, row, rng)
        return True

    def render_hdr(
        self,
        callback: ProgressCallback | None = None,
        cancel: threading.Event | None = None,
    ) -> npt.NDArray[np.float32]:
        """Shade every pixel and return linear radiance.

        Args:
            callback: Optional progress callback, called from the calling
                thread after each finished row with (rows_done, total_rows).
            cancel: Optional event checked before each row starts. Rows
                already running are allowed to finish.

        Returns:
            Array of shape (height, width, 3), dtype float32.

        Raises:
            RenderCancelledError: If cancel was set before all rows ran.
        """
        width, height = self.width, self.height
        buffer = np.zeros((height, width, 3), dtype=np.float32)
        row_seeds = np.random.SeedSequence(self.seed).spawn(height)

        logger.info("Rendering %dx%d image (workers=%s)", width, height, self.workers)
        start = time.perf_counter()

        completed = 0
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            futures = [
                pool.submit(self._render_row, row, row_seeds[row], buffer, cancel)
                for row in range(height)
            ]
            try:
                for future in futures:
                    if future.result():
                        completed += 1
                        if callback is not None:
                            callback(completed, height)
            except BaseException:
                # Drop queued rows so the error surfaces without shading the rest
                pool.shutdown(wait=False, cancel_futures=True)
                raise

        if completed < height:
            logger.warning("Render cancelled after %d of %d rows", completed, height)
            raise RenderCancelledError(f"Render cancelled after {completed} of {height} rows")

        logger.info("Done in %.2fs", time.perf_counter() - start)
        return buffer

    def render(
        self,
        callback: ProgressCallback | None = None,
        cancel: threading.Event | None = None,
    ) -> npt.NDArray[np.uint8]:
        """Render the scene to display-ready 8-bit RGB.

        Returns:
            Array of shape (height, width, 3), dtype uint8, row 0 at the top.
        """
        hdr = self.render_hdr(callback=callback, cancel=cancel)
        return finish_image(hdr, gamma=self.scene.camera.gamma)

    def save_image(self, filepath: str, callback: ProgressCallback | None = None) -> None:
        """Render the scene and save it as a PNG file."""
        from pathtracer.preview.export import save_png

        save_png(self.render(callback=callback), filepath)

    def __repr__(self) -> str:
        return f"Renderer(width={self.width}, height={self.height}, workers={self.workers})"
