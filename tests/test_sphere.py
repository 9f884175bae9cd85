"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside (front face)
- Ray missing sphere
- Ray starting inside sphere (back face)
- Ray tangent to sphere
- Interval boundaries and near-root-first ordering
- Negative radius (hollow) spheres
- Numerical stability edge cases
"""

import numpy as np
import pytest
import taichi as ti


class TestSphereBasics:
    """Tests for Sphere dataclass and basic operations."""

    def test_make_sphere(self):
        """Test make_sphere keeps center, radius and material."""
        from src.pathtracer.geometry.sphere import make_sphere, vec3
        from src.pathtracer.materials.material import make_material

        center_result = ti.field(dtype=ti.math.vec3, shape=())
        radius_result = ti.field(dtype=ti.f32, shape=())
        kind_result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            material = make_material(1, vec3(0.5, 0.5, 0.5), 0.2, 1.0)
            sphere = make_sphere(vec3(1.0, 2.0, 3.0), 0.5, material)
            center_result[None] = sphere.center
            radius_result[None] = sphere.radius
            kind_result[None] = sphere.material.kind

        test_kernel()
        c = center_result[None]
        assert abs(c[0] - 1.0) < 1e-6
        assert abs(c[1] - 2.0) < 1e-6
        assert abs(c[2] - 3.0) < 1e-6
        assert abs(radius_result[None] - 0.5) < 1e-6
        assert kind_result[None] == 1


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def _run(self, origin, direction, center, radius, t_min=0.001, t_max=1000.0):
        """Intersect one ray with one sphere and return the record as a dict."""
        from src.pathtracer.core.interval import make_interval
        from src.pathtracer.core.ray import make_ray
        from src.pathtracer.geometry.sphere import hit_sphere, make_sphere, vec3
        from src.pathtracer.materials.material import make_material

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())
        point = ti.field(dtype=ti.math.vec3, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())
        kind = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel(
            ox: ti.f32, oy: ti.f32, oz: ti.f32,
            dx: ti.f32, dy: ti.f32, dz: ti.f32,
            cx: ti.f32, cy: ti.f32, cz: ti.f32,
            r: ti.f32, lb: ti.f32, ub: ti.f32,
        ):
            ray = make_ray(vec3(ox, oy, oz), vec3(dx, dy, dz))
            material = make_material(2, vec3(1.0, 1.0, 1.0), 0.0, 1.5)
            sphere = make_sphere(vec3(cx, cy, cz), r, material)
            record = hit_sphere(ray, sphere, make_interval(lb, ub))
            hit[None] = record.hit
            t_val[None] = record.t
            point[None] = record.point
            normal[None] = record.normal
            front_face[None] = record.front_face
            kind[None] = record.material.kind

        test_kernel(*origin, *direction, *center, radius, t_min, t_max)
        return {
            "hit": hit[None],
            "t": t_val[None],
            "point": point[None].to_numpy(),
            "normal": normal[None].to_numpy(),
            "front_face": front_face[None],
            "kind": kind[None],
        }

    def test_hit_sphere_direct_hit(self):
        """Test ray hitting sphere head-on from outside."""
        rec = self._run((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0)

        assert rec["hit"] == 1
        # Should hit at z=1 (front of sphere), so t=4
        assert abs(rec["t"] - 4.0) < 1e-5
        np.testing.assert_allclose(rec["point"], [0.0, 0.0, 1.0], atol=1e-5)
        # Normal should point outward: (0, 0, 1)
        np.testing.assert_allclose(rec["normal"], [0.0, 0.0, 1.0], atol=1e-5)
        assert rec["front_face"] == 1
        # The record carries the sphere's material
        assert rec["kind"] == 2

    def test_hit_sphere_miss(self):
        """Test ray missing sphere entirely."""
        rec = self._run((5.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0)
        assert rec["hit"] == 0

    def test_hit_sphere_inside(self):
        """Test ray starting inside sphere (back face hit)."""
        rec = self._run((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0), 1.0)

        assert rec["hit"] == 1
        assert abs(rec["t"] - 1.0) < 1e-5
        # Normal opposes the ray, so it points back toward the center
        np.testing.assert_allclose(rec["normal"], [0.0, 0.0, -1.0], atol=1e-5)
        assert rec["front_face"] == 0

    def test_hit_sphere_tangent(self):
        """Test ray tangent to sphere (grazing hit)."""
        rec = self._run((1.0, 0.0, -5.0), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0), 1.0)

        assert rec["hit"] == 1
        assert abs(rec["t"] - 5.0) < 1e-4
        np.testing.assert_allclose(rec["point"], [1.0, 0.0, 0.0], atol=1e-4)

    def test_near_root_rejected_falls_back_to_far_root(self):
        """A near root outside the interval yields the far root."""
        rec = self._run((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0, t_min=4.5)

        assert rec["hit"] == 1
        assert abs(rec["t"] - 6.0) < 1e-5
        assert rec["front_face"] == 0

    def test_interval_bounds_are_exclusive(self):
        """A root exactly on an interval bound is not accepted."""
        rec = self._run(
            (0.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0, t_min=0.001, t_max=4.0
        )
        assert rec["hit"] == 0

    def test_hit_sphere_t_max_boundary(self):
        """Test that hits after t_max are rejected."""
        rec = self._run((0.0, 0.0, 100.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0, t_max=50.0)
        assert rec["hit"] == 0

    def test_hit_sphere_behind_ray(self):
        """Test that a sphere behind the ray origin is not hit."""
        rec = self._run((0.0, 0.0, 5.0), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0), 1.0)
        assert rec["hit"] == 0

    def test_unnormalized_ray_direction(self):
        """t is measured in units of the direction's length."""
        rec = self._run((0.0, 0.0, 5.0), (0.0, 0.0, -2.0), (0.0, 0.0, 0.0), 1.0)

        assert rec["hit"] == 1
        assert abs(rec["t"] - 2.0) < 1e-5
        np.testing.assert_allclose(rec["point"], [0.0, 0.0, 1.0], atol=1e-5)

    @pytest.mark.parametrize(
        "origin,direction",
        [
            ((0.3, 0.2, 5.0), (0.0, 0.0, -1.0)),
            ((4.0, 3.0, -2.0), (-1.0, -0.7, 0.4)),
            ((-2.0, 0.5, 0.5), (1.0, 0.0, 0.0)),
        ],
    )
    def test_hit_point_lies_on_sphere(self, origin, direction):
        """Returned roots place the hit point on the surface."""
        center = (0.5, 0.5, 0.0)
        radius = 1.5
        rec = self._run(origin, direction, center, radius)

        assert rec["hit"] == 1
        assert 0.001 < rec["t"] < 1000.0
        distance = np.linalg.norm(rec["point"] - np.array(center))
        assert abs(distance - radius) < 1e-4
        assert abs(np.linalg.norm(rec["normal"]) - 1.0) < 1e-5

    def test_normal_always_opposes_ray(self):
        rec = self._run((4.0, 3.0, -2.0), (-1.0, -0.7, 0.4), (0.5, 0.5, 0.0), 1.5)
        assert np.dot(rec["normal"], np.array([-1.0, -0.7, 0.4])) < 0.0


class TestHollowSphere:
    """Tests for negative radius spheres used as the inner wall of a shell."""

    def _run(self, origin, direction, radius):
        return TestSphereIntersection()._run(origin, direction, (0.0, 0.0, 0.0), radius)

    def test_negative_radius_from_center_is_front_face(self):
        """A ray leaving the center meets an inward-facing surface head-on."""
        rec = self._run((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), -0.9)

        assert rec["hit"] == 1
        assert abs(rec["t"] - 0.9) < 1e-5
        assert rec["front_face"] == 1
        # Normal points back toward the center
        np.testing.assert_allclose(rec["normal"], [-1.0, 0.0, 0.0], atol=1e-5)

    def test_negative_radius_from_outside_is_back_face(self):
        rec = self._run((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), -1.0)

        assert rec["hit"] == 1
        assert abs(rec["t"] - 4.0) < 1e-5
        assert rec["front_face"] == 0
        np.testing.assert_allclose(rec["normal"], [0.0, 0.0, 1.0], atol=1e-5)


class TestNumericalStability:
    """Tests for numerical edge cases."""

    def test_large_sphere_large_distance(self):
        """Ground-sized spheres are hit accurately."""
        rec = TestSphereIntersection()._run(
            (0.0, 0.0, 0.0), (0.0, -1.0, 0.0), (0.0, -100.5, -1.0), 100.0
        )

        assert rec["hit"] == 1
        expected_t = 100.5 - np.sqrt(100.0**2 - 1.0)
        assert abs(rec["t"] - expected_t) < 1e-3

    def test_small_sphere(self):
        rec = TestSphereIntersection()._run(
            (0.0, 0.0, 1.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 0.01
        )

        assert rec["hit"] == 1
        assert abs(rec["t"] - 0.99) < 1e-4
