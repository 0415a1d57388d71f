"""Camera module for view and primary ray generation.

Components:
    thin_lens: Perspective/orthographic camera with thin-lens depth of field
        and multi-jittered anti-aliasing

Camera responsibilities:
    - Map (pixel, sample) to a world-space ray
    - Stratify anti-aliasing samples within each pixel
    - Sample the lens aperture for depth of field
    - Carry the per-render settings (resolution, path depth, gamma)
"""

from .thin_lens import Camera, ProjectionMode, ShadingMode

__all__ = [
    "Camera",
    "ProjectionMode",
    "ShadingMode",
]
