"""Image finishing kernel: HDR radiance to 8-bit RGB.

Non-finite channels are first replaced with 0 on the host (the kernel is
compiled with fast math, which assumes finite inputs). The kernel then runs
over every pixel in parallel and applies, per pixel:
    1. Highlight desaturation: any channel above 1.0 bleeds its excess into
       the other two channels, so over-bright colours drift toward white
       instead of clipping to a saturated hue
    2. Clamping to [0, 1] and gamma encoding x^(1/gamma)
    3. Quantisation to 8 bits by truncating x * 255.9999

Taichi must be initialised (ti.init) before finish_image is called.

Example:
    >>> import numpy as np
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.core.tonemap import finish_image
    >>> hdr = np.full((2, 2, 3), 0.25, dtype=np.float32)
    >>> finish_image(hdr, gamma=2.0)[0, 0]
    array([127, 127, 127], dtype=uint8)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

# Scale that maps 1.0 to 255 under truncation
QUANTIZE_SCALE = 255.9999


@ti.kernel
def _finish_pixels(hdr: ti.types.ndarray(), out: ti.types.ndarray(), inv_gamma: ti.f32):
    """Tone map hdr (H, W, 3) float32 into out (H, W, 3) uint8."""
    for i, j in ti.ndrange(hdr.shape[0], hdr.shape[1]):
        color = tm.vec3(hdr[i, j, 0], hdr[i, j, 1], hdr[i, j, 2])

        excess = tm.max(color - 1.0, tm.vec3(0.0, 0.0, 0.0))
        color += tm.vec3(excess.y + excess.z, excess.x + excess.z, excess.x + excess.y)

        for c in ti.static(range(3)):
            encoded = tm.clamp(color[c], 0.0, 1.0) ** inv_gamma
            out[i, j, c] = ti.cast(encoded * QUANTIZE_SCALE, ti.u8)


def finish_image(hdr: npt.ArrayLike, gamma: float = 2.0) -> npt.NDArray[np.uint8]:
    """Convert an HDR radiance image to display-ready 8-bit RGB.

    Args:
        hdr: Linear radiance image of shape (H, W, 3).
        gamma: Display gamma (positive).

    Returns:
        Array of shape (H, W, 3) with dtype uint8.

    Raises:
        ValueError: If the image shape or gamma is invalid.
    """
    image = np.ascontiguousarray(hdr, dtype=np.float32)
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")
    if gamma <= 0.0:
        raise ValueError(f"gamma must be positive, got {gamma}")

    image = np.nan_to_num(image, nan=0.0, posinf=0.0, neginf=0.0)
    out = np.zeros(image.shape, dtype=np.uint8)
    if image.size:
        _finish_pixels(image, out, 1.0 / gamma)
    return out
