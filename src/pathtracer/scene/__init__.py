"""Scene module for scene assembly and ray-scene queries.

Components:
    scene: Scene container holding the camera, top-level objects, the Phong
        debug light and the background
    cornell_box: Cornell box test scene built from triangles, spheres, a
        plane and a BVH-backed mesh

The scene module manages:
    - Ordered top-level objects with closest-hit look-up
    - Background radiance for rays that leave the scene
    - Point light and ambient term for Phong debug shading
"""

# Cornell box scene
from .cornell_box import (
    BOX_SIZE,
    CornellBoxParams,
    box_mesh_buffer,
    create_cornell_box_scene,
    quad_triangles,
    transform_matrix,
)

# Scene container and backgrounds
from .scene import Background, Scene, black_background, sky_background

__all__ = [
    # Scene module
    "Background",
    "Scene",
    "black_background",
    "sky_background",
    # Cornell box module
    "BOX_SIZE",
    "CornellBoxParams",
    "box_mesh_buffer",
    "create_cornell_box_scene",
    "quad_triangles",
    "transform_matrix",
]
