"""Unit tests for the Cornell box scene.

Tests cover:
- Scene creation and object counts
- Wall, light and sphere placement and materials
- Camera configuration
- Quad and box mesh helpers
- Rays hitting the expected surfaces
"""

import math

import numpy as np
import pytest

from pathtracer.camera.thin_lens import Camera, ProjectionMode, ShadingMode
from pathtracer.core.ray import dot, length, make_ray
from pathtracer.geometry.mesh import Mesh
from pathtracer.geometry.plane import Plane
from pathtracer.geometry.sphere import Sphere
from pathtracer.geometry.triangle import Triangle
from pathtracer.materials.lambertian import Lambertian
from pathtracer.materials.metal import Metal
from pathtracer.scene.cornell_box import (
    BOX_SIZE,
    GREEN_WALL_ALBEDO,
    RED_WALL_ALBEDO,
    CornellBoxParams,
    box_mesh_buffer,
    create_cornell_box_scene,
    quad_triangles,
)
from pathtracer.scene.scene import Scene


@pytest.fixture
def cornell_box_scene():
    """Create a small Cornell box scene for testing."""
    params = CornellBoxParams(screen_width=16, screen_height=16, aa_sample_count=1)
    return create_cornell_box_scene(params, rng=np.random.default_rng(0))


def _of_type(scene, kind):
    return [obj for obj in scene.objects if isinstance(obj, kind)]


class TestSceneCreation:
    """Tests for basic scene creation."""

    def test_returns_scene(self):
        """Test create_cornell_box_scene returns a Scene with a Camera."""
        scene = create_cornell_box_scene()
        assert isinstance(scene, Scene)
        assert isinstance(scene.camera, Camera)

    def test_object_counts(self, cornell_box_scene):
        """Test 1 floor plane, 10 triangles (4 walls + light), 1 mesh and 2 spheres."""
        assert len(_of_type(cornell_box_scene, Plane)) == 1
        assert len(_of_type(cornell_box_scene, Triangle)) == 10
        assert len(_of_type(cornell_box_scene, Mesh)) == 1
        assert len(_of_type(cornell_box_scene, Sphere)) == 2
        assert len(cornell_box_scene.objects) == 14

    def test_block_is_twelve_triangles(self, cornell_box_scene):
        """Test the tall block mesh holds a box's 12 triangles."""
        (mesh,) = _of_type(cornell_box_scene, Mesh)
        assert mesh.buffer.triangle_count == 12
        assert mesh.bvh.leaf_count == 12


class TestMaterials:
    """Tests for material assignment."""

    def test_light_is_emissive(self, cornell_box_scene):
        """Test exactly two triangles emit, with intensity times color."""
        emitters = [
            tri for tri in _of_type(cornell_box_scene, Triangle) if np.any(tri.material.emission())
        ]
        assert len(emitters) == 2
        np.testing.assert_allclose(emitters[0].material.emission(), [15.0, 15.0, 15.0])

    def test_custom_light(self):
        """Test light intensity and color come from the params."""
        params = CornellBoxParams(light_intensity=2.0, light_color=(1.0, 0.5, 0.25))
        scene = create_cornell_box_scene(params)
        emitters = [tri for tri in _of_type(scene, Triangle) if np.any(tri.material.emission())]
        np.testing.assert_allclose(emitters[0].material.emission(), [2.0, 1.0, 0.5])

    def test_sphere_materials(self, cornell_box_scene):
        """Test one diffuse and one metal sphere."""
        kinds = sorted(type(s.material).__name__ for s in _of_type(cornell_box_scene, Sphere))
        assert kinds == ["Lambertian", "Metal"]

    def test_wall_colors(self, cornell_box_scene):
        """Test the x = 0 wall is green and the x = box_size wall is red."""
        walls = {}
        for tri in _of_type(cornell_box_scene, Triangle):
            xs = {tri.a[0], tri.b[0], tri.c[0]}
            if len(xs) == 1:
                walls.setdefault(xs.pop(), tri.material)
        np.testing.assert_allclose(walls[0.0].albedo, GREEN_WALL_ALBEDO)
        np.testing.assert_allclose(walls[BOX_SIZE].albedo, RED_WALL_ALBEDO)

    def test_wall_albedos_valid(self):
        """Test wall colors are valid Lambertian albedos."""
        for color in (RED_WALL_ALBEDO, GREEN_WALL_ALBEDO):
            Lambertian(color)


class TestCamera:
    """Tests for camera configuration."""

    def test_camera_settings_from_params(self):
        """Test resolution, samples, depth and mode are taken from the params."""
        params = CornellBoxParams(
            screen_width=20,
            screen_height=10,
            aa_sample_count=9,
            path_depth=7,
            shading_mode=ShadingMode.PHONG,
        )
        camera = create_cornell_box_scene(params).camera
        assert (camera.screen_width, camera.screen_height) == (20, 10)
        assert camera.aa_sample_count == 9
        assert camera.path_depth == 7
        assert camera.shading_mode is ShadingMode.PHONG
        assert camera.projection_mode is ProjectionMode.PERSPECTIVE

    def test_camera_outside_open_front(self, cornell_box_scene):
        """Test the camera sits in front of the box looking toward +z."""
        camera = cornell_box_scene.camera
        assert camera.origin[2] < 0.0
        np.testing.assert_allclose(camera.origin[:2], [BOX_SIZE / 2.0, BOX_SIZE / 2.0])
        _, _, back = camera.basis()
        np.testing.assert_allclose(back, [0.0, 0.0, -1.0])

    def test_invalid_sample_count(self):
        """Test a non-square sample count is rejected when building the camera."""
        with pytest.raises(ValueError, match="perfect square"):
            create_cornell_box_scene(CornellBoxParams(aa_sample_count=5))


class TestRayQueries:
    """Tests for rays hitting the expected surfaces."""

    def test_ray_hits_back_wall(self, cornell_box_scene):
        """Test a ray through an empty region reaches the back wall at z = box_size."""
        s = BOX_SIZE
        ray = make_ray((0.5 * s, 0.9 * s, -1.0), (0.0, 0.0, 1.0))
        hit = cornell_box_scene.intersect(ray, 0.001, 1000.0)
        assert hit is not None
        assert hit.point[2] == pytest.approx(s)
        assert tuple(hit.material.albedo) == pytest.approx(tuple(CornellBoxParams().back_wall_color))

    def test_ray_hits_floor(self, cornell_box_scene):
        """Test a downward ray near a corner reaches the floor plane."""
        s = BOX_SIZE
        ray = make_ray((0.05 * s, 0.5 * s, 0.95 * s), (0.0, -1.0, 0.0))
        hit = cornell_box_scene.intersect(ray, 0.001, 1000.0)
        assert hit is not None
        assert hit.t == pytest.approx(0.5 * s)
        np.testing.assert_allclose(hit.normal, [0.0, 1.0, 0.0])

    def test_ray_hits_diffuse_sphere(self, cornell_box_scene):
        """Test a ray aimed at the diffuse sphere's center hits it first."""
        sphere = next(s for s in _of_type(cornell_box_scene, Sphere) if isinstance(s.material, Lambertian))
        origin = np.array([sphere.center[0], sphere.center[1], -1.0])
        hit = cornell_box_scene.intersect(make_ray(origin, (0.0, 0.0, 1.0)), 0.001, 1000.0)
        assert hit.material is sphere.material
        assert hit.t == pytest.approx(sphere.center[2] + 1.0 - sphere.radius)

    def test_ray_hits_metal_sphere(self, cornell_box_scene):
        """Test the metal sphere is reachable from the camera side."""
        sphere = next(s for s in _of_type(cornell_box_scene, Sphere) if isinstance(s.material, Metal))
        origin = np.array([sphere.center[0], sphere.center[1], -1.0])
        hit = cornell_box_scene.intersect(make_ray(origin, (0.0, 0.0, 1.0)), 0.001, 1000.0)
        assert hit.material is sphere.material

    def test_ray_hits_block(self, cornell_box_scene):
        """Test a ray into the block from above lands on its top face."""
        s = BOX_SIZE
        ray = make_ray((0.33 * s, 0.9 * s, 0.65 * s), (0.0, -1.0, 0.0))
        hit = cornell_box_scene.intersect(ray, 0.001, 1000.0)
        assert hit is not None
        assert hit.point[1] == pytest.approx(0.6 * s)

    def test_light_seen_from_below(self, cornell_box_scene):
        """Test an upward ray through the box center reaches the emitter."""
        s = BOX_SIZE
        ray = make_ray((0.5 * s + 0.01, 0.7 * s, 0.5 * s + 0.02), (0.0, 1.0, 0.0))
        hit = cornell_box_scene.intersect(ray, 0.001, 1000.0)
        assert np.any(hit.material.emission())

    def test_custom_size_scales_geometry(self):
        """Test box_size scales the walls."""
        scene = create_cornell_box_scene(box_size=100.0)
        ray = make_ray((50.0, 90.0, -1.0), (0.0, 0.0, 1.0))
        hit = scene.intersect(ray, 0.001, 10000.0)
        assert hit.point[2] == pytest.approx(100.0)


class TestHelpers:
    """Tests for the quad and box helpers."""

    def test_quad_triangles_cover_parallelogram(self):
        """Test the two triangles span Q, Q+u, Q+u+v, Q+v."""
        tris = quad_triangles((0, 0, 0), (2, 0, 0), (0, 3, 0))
        assert len(tris) == 2
        corners = {tuple(v) for t in tris for v in (t.a, t.b, t.c)}
        assert corners == {(0, 0, 0), (2, 0, 0), (2, 3, 0), (0, 3, 0)}
        for point in ((0.5, 2.5), (1.5, 0.5)):
            ray = make_ray((point[0], point[1], 1.0), (0.0, 0.0, -1.0))
            assert any(t.intersect(ray, 0.0, 10.0) is not None for t in tris)

    def test_quad_normals_agree(self):
        """Test both halves share the normal cross(u, v)."""
        tris = quad_triangles((0, 0, 0), (1, 0, 0), (0, 0, 1))
        for tri in tris:
            normal = np.cross(tri.b - tri.a, tri.c - tri.a)
            assert dot(normal / length(normal), np.array([0.0, -1.0, 0.0])) == pytest.approx(1.0)

    def test_box_mesh_buffer_extent(self):
        """Test the box buffer has 8 corners at the given extremes."""
        buffer = box_mesh_buffer((0, 1, 2), (3, 4, 5))
        assert buffer.vertex_count == 8
        assert buffer.triangle_count == 12
        vertices = buffer.positions.reshape(-1, 3)
        np.testing.assert_array_equal(vertices.min(axis=0), [0, 1, 2])
        np.testing.assert_array_equal(vertices.max(axis=0), [3, 4, 5])

    def test_default_focal_length_gives_vfov(self):
        """Test the camera's focal length gives a 40 degree vertical field of view."""
        camera = create_cornell_box_scene().camera
        vfov = 2.0 * math.degrees(math.atan(0.5 / camera.focal_length))
        assert vfov == pytest.approx(40.0)
