"""Thin-lens camera model for primary ray generation.

The camera looks along ``view_dir`` from ``eyepoint``. Camera space has x to
the right, y up and the image plane at z = -focal_length; it is rotated into
world space by the basis (right = view_dir x up, up, -view_dir).

Pixels are square with side 1 / screen_height in image-plane units, so the
image plane is one unit tall. Pixel (0, 0) is the top-left corner.

Anti-aliasing uses multi-jittered sampling: the pixel is divided into a
sqrt(n) x sqrt(n) grid and each sample is jittered uniformly within its own
sub-cell. In perspective mode each sample also picks a point on a disk of
radius ``lens_radius`` and aims through the point at ``focus_dist`` along the
sample direction, producing depth of field. In orthographic mode rays start on
the image plane around the eyepoint and all travel along ``view_dir``.

Example:
    >>> import numpy as np
    >>> from pathtracer.camera.thin_lens import Camera
    >>> camera = Camera(screen_width=64, screen_height=48, aa_sample_count=4)
    >>> rays = camera.generate_rays(10, 20, np.random.default_rng(0))
    >>> len(rays)
    4
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from pathtracer.core.ray import (
    Ray,
    Vec3,
    as_vec3,
    cross,
    length,
    normalize,
    random_in_unit_disk,
    vec3,
)


class ProjectionMode(Enum):
    """How primary rays leave the camera."""

    ORTHOGRAPHIC = "orthographic"
    PERSPECTIVE = "perspective"


class ShadingMode(Enum):
    """Which integrator shades primary rays."""

    PHONG = "phong"
    PATH_TRACE = "path_trace"


@dataclass(frozen=True)
class Camera:
    """Camera and render settings. Immutable for the duration of a render.

    Attributes:
        eyepoint: Camera position in world space.
        view_dir: Direction through the center of the image plane.
        up: Approximate up direction; re-orthogonalised against view_dir.
        projection_mode: Orthographic or perspective projection.
        shading_mode: Phong debug shading or path tracing.
        path_depth: Maximum path-tracing recursion depth.
        path_samples: Scatter samples drawn per recursion step.
        screen_width: Image width in pixels.
        screen_height: Image height in pixels.
        focal_length: Distance from the eyepoint to the image plane.
        focus_dist: Distance from the eyepoint to the in-focus surface.
        lens_radius: Radius of the thin-lens aperture (0 = pinhole).
        aa_sample_count: Samples per pixel; must be a perfect square.
        max_trace_dist: Largest hit distance considered.
        gamma: Display gamma applied when quantising the image.
    """

    eyepoint: tuple[float, float, float] = (0.0, 0.0, 0.0)
    view_dir: tuple[float, float, float] = (0.0, 0.0, -1.0)
    up: tuple[float, float, float] = (0.0, 1.0, 0.0)
    projection_mode: ProjectionMode = ProjectionMode.PERSPECTIVE
    shading_mode: ShadingMode = ShadingMode.PATH_TRACE
    path_depth: int = 10
    path_samples: int = 1
    screen_width: int = 100
    screen_height: int = 100
    focal_length: float = 1.0
    focus_dist: float = 1.0
    lens_radius: float = 0.0
    aa_sample_count: int = 1
    max_trace_dist: float = 100.0
    gamma: float = 2.0

    _origin: Vec3 = field(init=False, repr=False, compare=False)
    _right: Vec3 = field(init=False, repr=False, compare=False)
    _up: Vec3 = field(init=False, repr=False, compare=False)
    _forward: Vec3 = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.screen_width <= 0 or self.screen_height <= 0:
            raise ValueError(
                f"Resolution must be positive, got {self.screen_width}x{self.screen_height}"
            )
        root = math.isqrt(max(self.aa_sample_count, 0))
        if self.aa_sample_count < 1 or root * root != self.aa_sample_count:
            raise ValueError(
                f"aa_sample_count must be a positive perfect square, got {self.aa_sample_count}"
            )
        if self.path_depth < 0:
            raise ValueError(f"path_depth must be non-negative, got {self.path_depth}")
        if self.path_samples < 1:
            raise ValueError(f"path_samples must be at least 1, got {self.path_samples}")
        if self.focal_length <= 0.0 or self.focus_dist <= 0.0:
            raise ValueError("focal_length and focus_dist must be positive")
        if self.lens_radius < 0.0:
            raise ValueError(f"lens_radius must be non-negative, got {self.lens_radius}")
        if self.max_trace_dist <= 0.0:
            raise ValueError(f"max_trace_dist must be positive, got {self.max_trace_dist}")
        if self.gamma <= 0.0:
            raise ValueError(f"gamma must be positive, got {self.gamma}")

        forward = as_vec3(self.view_dir)
        if length(forward) == 0.0:
            raise ValueError("view_dir must be non-zero")
        forward = normalize(forward)
        right = cross(forward, as_vec3(self.up))
        if length(right) < 1e-12:
            raise ValueError("up must not be parallel to view_dir")
        right = normalize(right)

        # Frozen dataclass: cache the derived basis through object.__setattr__
        object.__setattr__(self, "_origin", as_vec3(self.eyepoint))
        object.__setattr__(self, "_right", right)
        object.__setattr__(self, "_up", cross(right, forward))
        object.__setattr__(self, "_forward", forward)

    @property
    def origin(self) -> Vec3:
        return self._origin

    def basis(self) -> tuple[Vec3, Vec3, Vec3]:
        """Return the world-space (right, up, back) camera axes."""
        return self._right, self._up, -self._forward

    def to_world(self, v: Vec3) -> Vec3:
        """Rotate a camera-space vector into world space."""
        return v[0] * self._right + v[1] * self._up - v[2] * self._forward

    def generate_rays(self, pixel_x: int, pixel_y: int, rng: np.random.Generator) -> list[Ray]:
        """Generate the anti-aliasing ray set for one pixel.

        Args:
            pixel_x: Column, 0 at the left edge.
            pixel_y: Row, 0 at the top edge.
            rng: Random source for sub-pixel jitter and lens samples.

        Returns:
            A new list of aa_sample_count world-space rays.
        """
        n = self.aa_sample_count
        root = math.isqrt(n)
        pixel_size = 1.0 / self.screen_height

        center_x = pixel_size * (pixel_x - 0.5 * self.screen_width + 0.5)
        center_y = pixel_size * (0.5 * self.screen_height - pixel_y - 0.5)
        jitter = rng.random((n, 2))

        rays = []
        for i in range(n):
            cell_x, cell_y = divmod(i, root)
            plane_x = center_x + ((cell_x + jitter[i, 0]) / root - 0.5) * pixel_size
            plane_y = center_y + ((cell_y + jitter[i, 1]) / root - 0.5) * pixel_size

            if self.projection_mode is ProjectionMode.ORTHOGRAPHIC:
                origin = self._origin + self.to_world(vec3(plane_x, plane_y, 0.0))
                rays.append(Ray(origin=origin, direction=self._forward))
                continue

            sample_dir = normalize(vec3(plane_x, plane_y, -self.focal_length))
            focus_point = sample_dir * self.focus_dist
            if self.lens_radius > 0.0:
                lens_point = self.lens_radius * random_in_unit_disk(rng)
            else:
                lens_point = np.zeros(3)
            rays.append(
                Ray(
                    origin=self._origin + self.to_world(lens_point),
                    direction=self.to_world(normalize(focus_point - lens_point)),
                )
            )
        return rays
