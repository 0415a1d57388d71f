"""Cornell box scene configuration.

This module assembles a Cornell box test scene from the core primitives:
- A floor plane (unbounded, top-level)
- Left, right, back and ceiling walls, each a pair of triangles
- Red diffuse wall on the left of the image (x = box_size), green on the
  right (x = 0), others white
- A tall block as a BVH-backed mesh, rotated about the vertical axis
- A diffuse sphere and a metal sphere
- An emissive triangle pair on the ceiling acting as the area light

The box spans 0 to box_size on each axis, with the camera outside the open
front (negative Z) looking toward +Z.

Example:
    >>> from pathtracer.scene.cornell_box import CornellBoxParams, create_cornell_box_scene
    >>> scene = create_cornell_box_scene(CornellBoxParams(screen_width=32, screen_height=32))
    >>> len(scene.objects)
    14
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import numpy as np
import numpy.typing as npt

from pathtracer.camera.thin_lens import Camera, ProjectionMode, ShadingMode
from pathtracer.core.ray import as_vec3
from pathtracer.geometry.intersectable import Intersectable
from pathtracer.geometry.mesh import Mesh, MeshBuffer
from pathtracer.geometry.plane import Plane
from pathtracer.geometry.sphere import Sphere
from pathtracer.geometry.triangle import Triangle
from pathtracer.materials.lambertian import Lambertian
from pathtracer.materials.material import Material
from pathtracer.materials.metal import Metal
from pathtracer.scene.scene import Scene

# =============================================================================
# Cornell Box Constants
# =============================================================================

BOX_SIZE = 5.55

# Wall colors (normalized RGB values from the measured Cornell box reflectances)
RED_WALL_ALBEDO = (0.65, 0.05, 0.05)
GREEN_WALL_ALBEDO = (0.12, 0.45, 0.15)
WHITE_WALL_ALBEDO = (0.73, 0.73, 0.73)

DIFFUSE_SPHERE_ALBEDO = (0.73, 0.73, 0.73)
METAL_SPHERE_ALBEDO = (0.95, 0.93, 0.88)
METAL_SPHERE_ROUGHNESS = 0.3

# Vertical field of view of the default camera, in degrees
CAMERA_VFOV = 40.0


@dataclass
class CornellBoxParams:
    """Parameters for configuring a Cornell box scene.

    Attributes:
        light_intensity: Scale applied to light_color for the ceiling emitter.
        light_color: RGB color of the light (each component in [0, 1]).
        left_wall_color: RGB albedo of the left wall.
        right_wall_color: RGB albedo of the right wall.
        back_wall_color: RGB albedo of the back wall, floor and ceiling.
        screen_width: Image width in pixels.
        screen_height: Image height in pixels.
        aa_sample_count: Anti-aliasing samples per pixel (perfect square).
        path_depth: Path-tracing recursion depth.
        shading_mode: Path tracing or Phong debug shading.
    """

    light_intensity: float = 15.0
    light_color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    left_wall_color: tuple[float, float, float] = RED_WALL_ALBEDO
    right_wall_color: tuple[float, float, float] = GREEN_WALL_ALBEDO
    back_wall_color: tuple[float, float, float] = WHITE_WALL_ALBEDO
    screen_width: int = 128
    screen_height: int = 128
    aa_sample_count: int = 16
    path_depth: int = 5
    shading_mode: ShadingMode = ShadingMode.PATH_TRACE


def quad_triangles(q: Any, u: Any, v: Any, material: Material | None = None) -> list[Triangle]:
    """Split the parallelogram Q, Q+u, Q+u+v, Q+v into two triangles.

    Both triangles share the geometric normal cross(u, v).
    """
    q, u, v = as_vec3(q), as_vec3(u), as_vec3(v)
    return [
        Triangle(q, q + u, q + u + v, material),
        Triangle(q, q + u + v, q + v, material),
    ]


def box_mesh_buffer(minimum: Any, maximum: Any) -> MeshBuffer:
    """Build a 12-triangle mesh buffer for an axis-aligned box."""
    lo, hi = as_vec3(minimum), as_vec3(maximum)
    # Corner index bits: 1 = max x, 2 = max y, 4 = max z
    corners = [(x, y, z) for z in (lo[2], hi[2]) for y in (lo[1], hi[1]) for x in (lo[0], hi[0])]
    # Outward winding for each face, two triangles per face
    faces = [
        (0, 4, 6, 2),  # -x
        (1, 3, 7, 5),  # +x
        (0, 1, 5, 4),  # -y
        (2, 6, 7, 3),  # +y
        (0, 2, 3, 1),  # -z
        (4, 5, 7, 6),  # +z
    ]
    indices = []
    for a, b, c, d in faces:
        indices.extend((a, b, c, a, c, d))
    return MeshBuffer(positions=corners, indices=indices)


def transform_matrix(
    translation: Any = (0.0, 0.0, 0.0),
    rotation_y_degrees: float = 0.0,
    scale: float = 1.0,
) -> npt.NDArray[np.float64]:
    """Build translate * rotate_y * scale as a 4x4 affine matrix."""
    theta = math.radians(rotation_y_degrees)
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    m = np.array(
        [
            [cos_t * scale, 0.0, sin_t * scale, 0.0],
            [0.0, scale, 0.0, 0.0],
            [-sin_t * scale, 0.0, cos_t * scale, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )
    m[:3, 3] = as_vec3(translation)
    return m


def create_cornell_box_scene(
    params: CornellBoxParams | None = None,
    box_size: float = BOX_SIZE,
    rng: np.random.Generator | None = None,
) -> Scene:
    """Create a Cornell box scene with standard configuration.

    Args:
        params: Optional CornellBoxParams for colors and render settings.
            If None, uses default CornellBoxParams().
        box_size: The size of the box in each dimension.
        rng: Random source for the block mesh's BVH construction.

    Returns:
        A Scene containing the geometry, materials and camera.
    """
    if params is None:
        params = CornellBoxParams()
    s = box_size

    # =========================================================================
    # Materials
    # =========================================================================

    red = Lambertian(params.left_wall_color)
    green = Lambertian(params.right_wall_color)
    white = Lambertian(params.back_wall_color)
    light = Lambertian(
        (0.0, 0.0, 0.0),
        emission=params.light_intensity * as_vec3(params.light_color),
    )
    diffuse = Lambertian(DIFFUSE_SPHERE_ALBEDO)
    metal = Metal(METAL_SPHERE_ALBEDO, METAL_SPHERE_ROUGHNESS)

    objects: list[Intersectable] = [Plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), white)]

    # =========================================================================
    # Walls
    # =========================================================================

    objects += quad_triangles((0.0, 0.0, 0.0), (0.0, s, 0.0), (0.0, 0.0, s), green)
    objects += quad_triangles((s, 0.0, s), (0.0, s, 0.0), (0.0, 0.0, -s), red)
    objects += quad_triangles((0.0, 0.0, s), (s, 0.0, 0.0), (0.0, s, 0.0), white)
    objects += quad_triangles((0.0, s, s), (s, 0.0, 0.0), (0.0, 0.0, -s), white)

    # =========================================================================
    # Area light, just below the ceiling
    # =========================================================================

    light_width = 0.234 * s
    light_depth = 0.189 * s
    objects += quad_triangles(
        ((s - light_width) / 2.0, s - 0.01, (s - light_depth) / 2.0),
        (light_width, 0.0, 0.0),
        (0.0, 0.0, light_depth),
        light,
    )

    # =========================================================================
    # Tall block (mesh) and spheres
    # =========================================================================

    block = box_mesh_buffer((-0.15 * s, 0.0, -0.15 * s), (0.15 * s, 0.6 * s, 0.15 * s))
    block = block.transformed(transform_matrix((0.3 * s, 0.0, 0.65 * s), rotation_y_degrees=15.0))
    objects.append(Mesh(block, white, rng=rng))

    radius = 0.144 * s
    objects.append(Sphere((0.68 * s, radius, 0.3 * s), radius, diffuse))
    objects.append(Sphere((0.3 * s, 0.8 * radius, 0.22 * s), 0.8 * radius, metal))

    # =========================================================================
    # Camera Setup
    # =========================================================================

    # Image plane is one unit tall, so this focal length gives CAMERA_VFOV
    focal_length = 0.5 / math.tan(math.radians(CAMERA_VFOV) / 2.0)
    camera = Camera(
        eyepoint=(s / 2.0, s / 2.0, -1.44 * s),
        view_dir=(0.0, 0.0, 1.0),
        up=(0.0, 1.0, 0.0),
        projection_mode=ProjectionMode.PERSPECTIVE,
        shading_mode=params.shading_mode,
        path_depth=params.path_depth,
        path_samples=1,
        screen_width=params.screen_width,
        screen_height=params.screen_height,
        focal_length=focal_length,
        focus_dist=1.94 * s,
        lens_radius=0.0,
        aa_sample_count=params.aa_sample_count,
        max_trace_dist=100.0 * s,
        gamma=2.0,
    )

    return Scene(
        camera=camera,
        objects=objects,
        point_light_pos=(s / 2.0, 0.9 * s, s / 2.0),
        ambient=(0.1, 0.1, 0.1),
    )
