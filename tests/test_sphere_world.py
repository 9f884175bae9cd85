"""Tests for the standard sphere scenes."""

import numpy as np


class TestTwoSphereScene:
    def test_layout(self):
        from src.pathtracer.materials.material import Lambertian
        from src.pathtracer.scene.sphere_world import create_two_sphere_scene

        scene, camera = create_two_sphere_scene()

        assert scene.get_sphere_count() == 2
        assert scene.spheres[0].center == (0.0, 0.0, -1.0)
        assert scene.spheres[0].radius == 0.5
        assert scene.spheres[1].center == (0.0, -100.5, -1.0)
        assert scene.spheres[1].radius == 100.0
        assert all(isinstance(s.material, Lambertian) for s in scene.spheres)

        assert camera.lookfrom == (0.0, 0.0, 0.0)
        assert camera.lookat == (0.0, 0.0, -1.0)
        assert camera.defocus_angle == 0.0


class TestSphereWorldScene:
    def test_fixed_spheres(self):
        from src.pathtracer.materials.material import Dielectric, Lambertian, Metal
        from src.pathtracer.scene.sphere_world import create_sphere_world_scene

        scene, _ = create_sphere_world_scene(seed=3)
        spheres = scene.spheres

        ground = spheres[0]
        assert ground.center == (0.0, -1000.0, 0.0)
        assert ground.radius == 1000.0
        assert ground.material == Lambertian((0.5, 0.5, 0.5))

        glass, diffuse, metal = spheres[-3:]
        assert glass.center == (0.0, 1.0, 0.0)
        assert glass.material == Dielectric(1.5)
        assert diffuse.center == (-4.0, 1.0, 0.0)
        assert diffuse.material == Lambertian((0.4, 0.2, 0.1))
        assert metal.center == (4.0, 1.0, 0.0)
        assert metal.material == Metal((0.7, 0.6, 0.5), 0.0)

    def test_small_spheres(self):
        from src.pathtracer.materials.material import Lambertian, Metal
        from src.pathtracer.scene.sphere_world import create_sphere_world_scene

        scene, _ = create_sphere_world_scene(seed=3)
        small = scene.spheres[1:-3]

        assert 0 < len(small) <= 22 * 22
        for info in small:
            assert info.radius == 0.2
            assert info.center[1] == 0.2
            assert -11.0 <= info.center[0] < 11.0
            assert -11.0 <= info.center[2] < 11.0
            # Nothing crowds the metal feature sphere
            assert np.linalg.norm(np.array(info.center) - np.array([4.0, 0.2, 0.0])) > 0.9
            if isinstance(info.material, Metal):
                assert all(0.5 <= c < 1.0 for c in info.material.albedo)
                assert 0.0 <= info.material.fuzz < 0.5
            elif isinstance(info.material, Lambertian):
                assert all(0.0 <= c < 1.0 for c in info.material.albedo)

        kinds = [type(s.material).__name__ for s in small]
        # 80 / 15 / 5 split over a few hundred draws
        assert kinds.count("Lambertian") > kinds.count("Metal") > kinds.count("Dielectric")

    def test_seed_reproduces_layout(self):
        from src.pathtracer.scene.sphere_world import create_sphere_world_scene

        first, _ = create_sphere_world_scene(seed=11)
        first_dict = first.to_dict()
        second, _ = create_sphere_world_scene(seed=11)
        assert second.to_dict() == first_dict

        third, _ = create_sphere_world_scene(seed=12)
        assert third.to_dict() != first_dict

    def test_camera(self):
        from src.pathtracer.scene.sphere_world import create_sphere_world_scene

        _, camera = create_sphere_world_scene(seed=0)

        assert camera.image_width == 480
        assert camera.image_height == 270
        assert camera.vfov == 20.0
        assert camera.lookfrom == (13.0, 2.0, 3.0)
        assert camera.lookat == (0.0, 0.0, 0.0)
        assert camera.defocus_angle == 0.6
        assert camera.focus_dist == 10.0
