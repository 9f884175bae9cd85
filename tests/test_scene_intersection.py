"""Unit tests for scene-level intersection.

Tests cover:
- Adding spheres and the capacity limit
- Closest-hit selection across overlapping spheres
- Material copies carried by the hit record
- Occlusion queries
"""

import numpy as np
import pytest
import taichi as ti


def _trace(origin, direction):
    """Run intersect_scene for one ray; return (hit, t, kind, albedo, normal)."""
    from src.pathtracer.core.interval import hit_interval
    from src.pathtracer.core.ray import make_ray, vec3
    from src.pathtracer.scene.intersection import intersect_scene

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    kind = ti.field(dtype=ti.i32, shape=())
    albedo = ti.field(dtype=ti.math.vec3, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())

    @ti.kernel
    def test_kernel(ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32):
        rec = intersect_scene(make_ray(vec3(ox, oy, oz), vec3(dx, dy, dz)), hit_interval())
        hit[None] = rec.hit
        t_val[None] = rec.t
        kind[None] = rec.material.kind
        albedo[None] = rec.material.albedo
        normal[None] = rec.normal

    test_kernel(*origin, *direction)
    return hit[None], t_val[None], kind[None], albedo[None].to_numpy(), normal[None].to_numpy()


class TestSceneStorage:
    """Tests for adding and clearing spheres."""

    def test_add_sphere_returns_sequential_indices(self):
        from src.pathtracer.materials.material import Lambertian
        from src.pathtracer.scene.intersection import add_sphere, get_sphere_count

        assert add_sphere((0.0, 0.0, -1.0), 0.5, Lambertian((0.5, 0.5, 0.5))) == 0
        assert add_sphere((0.0, 0.0, -1.0), 0.5, Lambertian((0.5, 0.5, 0.5))) == 1
        # Duplicates are kept
        assert get_sphere_count() == 2

    def test_clear_scene(self):
        from src.pathtracer.materials.material import Dielectric
        from src.pathtracer.scene.intersection import add_sphere, clear_scene, get_sphere_count

        add_sphere((0.0, 0.0, 0.0), 1.0, Dielectric(1.5))
        clear_scene()
        assert get_sphere_count() == 0

    def test_zero_radius_rejected(self):
        from src.pathtracer.materials.material import Lambertian
        from src.pathtracer.scene.intersection import add_sphere

        with pytest.raises(ValueError, match="non-zero"):
            add_sphere((0.0, 0.0, 0.0), 0.0, Lambertian((0.5, 0.5, 0.5)))

    def test_capacity_exceeded(self):
        from src.pathtracer.materials.material import Lambertian
        from src.pathtracer.scene.intersection import MAX_SPHERES, add_sphere, num_spheres

        num_spheres[None] = MAX_SPHERES
        with pytest.raises(RuntimeError, match="Maximum number of spheres"):
            add_sphere((0.0, 0.0, 0.0), 1.0, Lambertian((0.5, 0.5, 0.5)))


class TestClosestHit:
    """Tests for intersect_scene."""

    def test_empty_scene_misses(self):
        hit, _, _, _, _ = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 0

    def test_closest_of_two_spheres_in_line(self):
        from src.pathtracer.materials.material import Lambertian, Metal
        from src.pathtracer.scene.intersection import add_sphere

        # Far sphere added first; insertion order must not matter
        add_sphere((0.0, 0.0, -10.0), 1.0, Lambertian((0.9, 0.1, 0.1)))
        add_sphere((0.0, 0.0, -5.0), 1.0, Metal((0.1, 0.9, 0.1), 0.0))

        hit, t, kind, albedo, _ = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert hit == 1
        assert abs(t - 4.0) < 1e-5
        assert kind == 1
        np.testing.assert_allclose(albedo, [0.1, 0.9, 0.1], atol=1e-6)

    def test_nested_spheres_report_nearest_surface(self):
        """Overlapping spheres: the inner surface is hit first from inside."""
        from src.pathtracer.materials.material import Dielectric, Lambertian
        from src.pathtracer.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 0.0), 2.0, Lambertian((0.5, 0.5, 0.5)))
        add_sphere((0.0, 0.0, 0.0), 1.0, Dielectric(1.5))

        hit, t, kind, _, _ = _trace((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))

        assert hit == 1
        assert abs(t - 1.0) < 1e-5
        assert kind == 2

    def test_hollow_shell_inner_normal_points_to_center(self):
        """A glass shell's inner wall faces a ray leaving the center."""
        from src.pathtracer.materials.material import Dielectric
        from src.pathtracer.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 0.0), 1.0, Dielectric(1.5))
        add_sphere((0.0, 0.0, 0.0), -0.8, Dielectric(1.5))

        hit, t, _, _, normal = _trace((0.0, 0.0, 0.0), (0.0, 1.0, 0.0))

        assert hit == 1
        assert abs(t - 0.8) < 1e-5
        np.testing.assert_allclose(normal, [0.0, -1.0, 0.0], atol=1e-5)

    def test_sphere_behind_origin_ignored(self):
        from src.pathtracer.materials.material import Lambertian
        from src.pathtracer.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 5.0), 1.0, Lambertian((0.5, 0.5, 0.5)))
        hit, _, _, _, _ = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 0
