"""Preview module for image output.

Components:
    export: PNG export of rendered 8-bit images via Pillow
"""

from pathtracer.preview.export import save_png, to_pil_image

__all__ = [
    "save_png",
    "to_pil_image",
]
