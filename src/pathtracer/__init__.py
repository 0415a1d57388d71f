"""BVH-accelerated Monte Carlo path tracer.

This package renders a 3D scene to an 8-bit RGB raster using stochastic path
tracing:
- Sphere, plane, triangle and indexed-mesh-triangle primitives
- Bounding volume hierarchy over mesh triangles
- Thin-lens camera with multi-jittered anti-aliasing
- Recursive Monte Carlo integrator with a Phong debug mode
- Row-parallel render driver with a Taichi image finishing kernel

Subpackages:
    core: Rays, hit records, vector utilities, integrator and render driver
    geometry: Primitives, bounding boxes, BVH and meshes
    camera: Camera model and primary ray generation
    materials: Reference implementations of the material capability
    scene: Scene container and scene assembly helpers
    preview: Image export
"""

__version__ = "0.1.0"
