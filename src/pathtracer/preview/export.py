"""Image export utilities for rendered images.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from pathtracer.preview.export import save_png
    >>> image = renderer.render()
    >>> save_png(image, "output.png")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage


def to_pil_image(image: npt.NDArray[np.uint8]) -> PILImage.Image:
    """Wrap an 8-bit RGB array as a Pillow image.

    Args:
        image: Array of shape (H, W, 3) with dtype uint8, row 0 at the top.

    Raises:
        ValueError: If the array is not an 8-bit RGB image.
    """
    if image.dtype != np.uint8:
        raise ValueError(f"Expected a uint8 image, got dtype {image.dtype}")
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")
    return PILImage.fromarray(np.ascontiguousarray(image))


def save_png(image: npt.NDArray[np.uint8], filepath: str) -> None:
    """Save an 8-bit RGB array as a PNG file."""
    to_pil_image(image).save(filepath, format="PNG")
