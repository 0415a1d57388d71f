"""Unit tests for the ray module.

Tests cover:
- Ray construction and ray_at
- HitRecord normal orientation
- Vector utility functions (dot, cross, normalize, length, reflect)
- Random sampling functions for Monte Carlo
"""

import math

import numpy as np
import pytest

from pathtracer.core.ray import (
    HitRecord,
    Ray,
    as_vec3,
    build_onb_from_normal,
    cross,
    dot,
    length,
    make_ray,
    near_zero,
    normalize,
    random_cosine_direction,
    random_in_unit_disk,
    random_in_unit_sphere,
    ray_at,
    reflect,
    sample_cosine_hemisphere,
    vec3,
)


class TestRayBasics:
    """Tests for Ray and basic operations."""

    def test_ray_at_origin(self):
        """Test ray_at returns origin when t=0."""
        ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, -1.0))
        np.testing.assert_allclose(ray_at(ray, 0.0), [1.0, 2.0, 3.0])

    def test_ray_at_positive_t(self):
        """Test ray_at computes correct point along ray."""
        ray = make_ray((0, 0, 0), (1, 2, 3))
        np.testing.assert_allclose(ray_at(ray, 2.0), [2.0, 4.0, 6.0])

    def test_ray_at_negative_t(self):
        """Test ray_at extends behind the origin for negative t."""
        ray = make_ray((0, 0, 0), (0, 0, -1))
        np.testing.assert_allclose(ray_at(ray, -3.0), [0.0, 0.0, 3.0])

    def test_as_vec3_rejects_wrong_length(self):
        """Test as_vec3 rejects sequences that are not 3 long."""
        with pytest.raises(ValueError, match="3 components"):
            as_vec3((1.0, 2.0))

    def test_ray_is_immutable(self):
        """Test rays are frozen value types."""
        ray = make_ray((0, 0, 0), (0, 0, 1))
        with pytest.raises(AttributeError):
            ray.origin = vec3(1.0, 1.0, 1.0)

    def test_rays_compare_by_identity(self):
        """Test rays holding equal arrays can be compared and hashed."""
        a = make_ray((0, 0, 0), (0, 0, 1))
        b = make_ray((0, 0, 0), (0, 0, 1))
        assert a == a
        assert a != b
        assert len({a, b}) == 2


class TestHitRecord:
    """Tests for HitRecord.from_ray normal orientation."""

    def test_front_face_keeps_normal(self):
        """Test a ray against the normal keeps it and is front-facing."""
        ray = make_ray((0, 0, 5), (0, 0, -1))
        hit = HitRecord.from_ray(4.0, vec3(0.0, 0.0, 1.0), None, ray)
        assert hit.front_face
        np.testing.assert_allclose(hit.normal, [0.0, 0.0, 1.0])
        np.testing.assert_allclose(hit.point, [0.0, 0.0, 1.0])

    def test_back_face_flips_normal(self):
        """Test a ray along the normal flips it to face the ray."""
        ray = make_ray((0, 0, 0), (0, 0, 1))
        hit = HitRecord.from_ray(1.0, vec3(0.0, 0.0, 1.0), None, ray)
        assert not hit.front_face
        np.testing.assert_allclose(hit.normal, [0.0, 0.0, -1.0])
        assert dot(hit.normal, ray.direction) <= 0.0

    def test_optional_fields_default_to_none(self):
        """Test texture and tangent data are absent unless supplied."""
        hit = HitRecord.from_ray(1.0, vec3(0.0, 1.0, 0.0), None, make_ray((0, 2, 0), (0, -1, 0)))
        assert hit.tex_coords is None
        assert hit.tangent is None
        assert hit.bitangent is None

    def test_hit_records_are_hashable(self):
        """Test hit records can be compared and stored in sets."""
        ray = make_ray((0, 2, 0), (0, -1, 0))
        hit = HitRecord.from_ray(1.0, vec3(0.0, 1.0, 0.0), None, ray)
        assert hit == hit
        assert hit != HitRecord.from_ray(1.0, vec3(0.0, 1.0, 0.0), None, ray)
        assert hit in {hit}


class TestVectorUtilities:
    """Tests for vector utility functions."""

    def test_dot_product(self):
        """Test dot product calculation."""
        assert dot(vec3(1.0, 2.0, 3.0), vec3(4.0, 5.0, 6.0)) == pytest.approx(32.0)

    def test_cross_product(self):
        """Test cross product of the x and y axes is z."""
        np.testing.assert_allclose(cross(vec3(1, 0, 0), vec3(0, 1, 0)), [0.0, 0.0, 1.0])

    def test_cross_matches_numpy(self):
        """Test cross agrees with numpy for arbitrary vectors."""
        a, b = vec3(0.3, -1.2, 2.0), vec3(4.0, 0.5, -0.7)
        np.testing.assert_allclose(cross(a, b), np.cross(a, b))

    def test_length(self):
        """Test Euclidean length."""
        assert length(vec3(3.0, 4.0, 0.0)) == pytest.approx(5.0)

    def test_normalize(self):
        """Test normalize produces a unit vector."""
        n = normalize(vec3(3.0, 4.0, 0.0))
        np.testing.assert_allclose(n, [0.6, 0.8, 0.0])

    def test_normalize_zero_vector(self):
        """Test normalize leaves a zero vector unchanged instead of dividing by zero."""
        np.testing.assert_array_equal(normalize(np.zeros(3)), np.zeros(3))

    def test_reflect(self):
        """Test reflection about a normal."""
        r = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))
        np.testing.assert_allclose(r, [1.0, 1.0, 0.0])

    def test_near_zero(self):
        """Test near_zero detection threshold."""
        assert near_zero(vec3(1e-9, -1e-9, 0.0))
        assert not near_zero(vec3(1e-3, 0.0, 0.0))


class TestRandomSampling:
    """Tests for random sampling functions."""

    def test_random_in_unit_sphere(self, rng):
        """Test samples lie inside the unit sphere."""
        for _ in range(200):
            assert length(random_in_unit_sphere(rng)) <= 1.0

    def test_random_in_unit_disk(self, rng):
        """Test disk samples lie in the z=0 unit disk."""
        for _ in range(200):
            p = random_in_unit_disk(rng)
            assert p[2] == 0.0
            assert p[0] ** 2 + p[1] ** 2 <= 1.0

    def test_random_cosine_direction(self, rng):
        """Test cosine directions are unit length in the upper hemisphere."""
        for _ in range(200):
            d = random_cosine_direction(rng)
            assert length(d) == pytest.approx(1.0)
            assert d[2] >= 0.0

    def test_onb_is_orthonormal(self):
        """Test the basis built around a normal is orthonormal."""
        normal = normalize(vec3(0.2, 0.9, -0.4))
        t, b, n = build_onb_from_normal(normal)
        for v in (t, b, n):
            assert length(v) == pytest.approx(1.0)
        assert dot(t, b) == pytest.approx(0.0, abs=1e-12)
        assert dot(t, n) == pytest.approx(0.0, abs=1e-12)
        assert dot(b, n) == pytest.approx(0.0, abs=1e-12)

    def test_sample_cosine_hemisphere_pdf(self, rng):
        """Test hemisphere samples lie around the normal with pdf cos/pi."""
        normal = vec3(0.0, 1.0, 0.0)
        for _ in range(200):
            direction, pdf = sample_cosine_hemisphere(normal, rng)
            cosine = dot(direction, normal)
            assert cosine >= -1e-12
            assert pdf == pytest.approx(max(cosine, 0.0) / math.pi)

    def test_sampling_is_reproducible(self):
        """Test equal seeds produce equal samples."""
        a = random_in_unit_sphere(np.random.default_rng(7))
        b = random_in_unit_sphere(np.random.default_rng(7))
        np.testing.assert_array_equal(a, b)
