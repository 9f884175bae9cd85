"""Sphere scene configurations.

This module provides factory functions for the two standard sphere scenes:

- A two-sphere scene: one diffuse sphere resting on a large ground sphere,
  viewed head-on with a pinhole lens. Small and fast, suited to tests.
- The sphere world: a large ground sphere covered by a 22 x 22 grid of
  small randomly placed spheres (80% diffuse, 15% metal, 5% glass) around
  three large feature spheres, viewed through a thin lens with defocus blur.

Scene construction draws from a NumPy Generator so a seed reproduces the
same layout.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.scene.sphere_world import create_sphere_world_scene
    >>> from src.pathtracer.camera.thin_lens import setup_camera
    >>>
    >>> scene, camera = create_sphere_world_scene(seed=7)
    >>> setup_camera(camera)
    >>> # Now render using the scene and camera
"""

import logging

import numpy as np

from src.pathtracer.camera.thin_lens import ThinLensCamera
from src.pathtracer.core.ray import random_vec3
from src.pathtracer.materials.material import Dielectric, Lambertian, Metal
from src.pathtracer.scene.manager import SceneManager

logger = logging.getLogger(__name__)

# =============================================================================
# Two-Sphere Scene Constants
# =============================================================================

CENTER_SPHERE_ALBEDO = (0.1, 0.2, 0.5)
GROUND_ALBEDO = (0.8, 0.8, 0.0)

# =============================================================================
# Sphere World Constants
# =============================================================================

WORLD_GROUND_ALBEDO = (0.5, 0.5, 0.5)
WORLD_GROUND_RADIUS = 1000.0

# Small spheres are placed on a grid spanning [-GRID_EXTENT, GRID_EXTENT)
GRID_EXTENT = 11
SMALL_SPHERE_RADIUS = 0.2

# Cumulative material thresholds for small spheres
DIFFUSE_PROBABILITY = 0.8
METAL_PROBABILITY = 0.95

GLASS_IOR = 1.5

# Small spheres too close to this point would overlap the metal feature sphere
KEEP_OUT_CENTER = (4.0, 0.2, 0.0)
KEEP_OUT_DISTANCE = 0.9

FEATURE_SPHERE_RADIUS = 1.0
FEATURE_DIFFUSE_ALBEDO = (0.4, 0.2, 0.1)
FEATURE_METAL_ALBEDO = (0.7, 0.6, 0.5)


# =============================================================================
# Scene Factories
# =============================================================================


def create_two_sphere_scene(
    image_width: int = 400,
    samples_per_pixel: int = 10,
    max_depth: int = 10,
) -> tuple[SceneManager, ThinLensCamera]:
    """Create a diffuse sphere on a ground sphere.

    The sphere of radius 0.5 sits at (0, 0, -1) on a ground sphere of
    radius 100 centered at (0, -100.5, -1). The camera sits at the origin
    looking down -Z with a 90 degree vertical field of view and no defocus.

    Args:
        image_width: Output width in pixels (16:9 aspect ratio).
        samples_per_pixel: Samples per pixel stored on the camera.
        max_depth: Bounce budget stored on the camera.

    Returns:
        A tuple of (SceneManager, ThinLensCamera).
    """
    scene = SceneManager()
    scene.add_lambertian_sphere((0.0, 0.0, -1.0), 0.5, albedo=CENTER_SPHERE_ALBEDO)
    scene.add_lambertian_sphere((0.0, -100.5, -1.0), 100.0, albedo=GROUND_ALBEDO)

    camera = ThinLensCamera(
        aspect_ratio=16.0 / 9.0,
        image_width=image_width,
        vfov=90.0,
        lookfrom=(0.0, 0.0, 0.0),
        lookat=(0.0, 0.0, -1.0),
        vup=(0.0, 1.0, 0.0),
        defocus_angle=0.0,
        focus_dist=1.0,
        samples_per_pixel=samples_per_pixel,
        max_depth=max_depth,
    )

    return scene, camera


def _add_small_spheres(scene: SceneManager, rng: np.random.Generator) -> None:
    keep_out = np.array(KEEP_OUT_CENTER)

    for a in range(-GRID_EXTENT, GRID_EXTENT):
        for b in range(-GRID_EXTENT, GRID_EXTENT):
            choose_mat = rng.random()
            center = np.array(
                [a + 0.9 * rng.random(), SMALL_SPHERE_RADIUS, b + 0.9 * rng.random()]
            )

            if np.linalg.norm(center - keep_out) <= KEEP_OUT_DISTANCE:
                continue

            if choose_mat < DIFFUSE_PROBABILITY:
                albedo = random_vec3(rng) * random_vec3(rng)
                material = Lambertian(albedo=tuple(albedo))
            elif choose_mat < METAL_PROBABILITY:
                albedo = random_vec3(rng, 0.5, 1.0)
                fuzz = rng.uniform(0.0, 0.5)
                material = Metal(albedo=tuple(albedo), fuzz=fuzz)
            else:
                material = Dielectric(refraction_index=GLASS_IOR)

            scene.add_sphere(tuple(center), SMALL_SPHERE_RADIUS, material)


def create_sphere_world_scene(
    seed: int | None = None,
    image_width: int = 480,
    samples_per_pixel: int = 10,
    max_depth: int = 10,
) -> tuple[SceneManager, ThinLensCamera]:
    """Create the random sphere world.

    Args:
        seed: Seed for the layout generator. None draws fresh entropy.
        image_width: Output width in pixels (16:9 aspect ratio).
        samples_per_pixel: Samples per pixel stored on the camera.
        max_depth: Bounce budget stored on the camera.

    Returns:
        A tuple of (SceneManager, ThinLensCamera). The camera looks from
        (13, 2, 3) at the origin with a 20 degree field of view, a 0.6
        degree defocus angle and focus distance 10.
    """
    rng = np.random.default_rng(seed)
    scene = SceneManager()

    scene.add_lambertian_sphere(
        (0.0, -WORLD_GROUND_RADIUS, 0.0), WORLD_GROUND_RADIUS, albedo=WORLD_GROUND_ALBEDO
    )

    _add_small_spheres(scene, rng)

    scene.add_dielectric_sphere((0.0, 1.0, 0.0), FEATURE_SPHERE_RADIUS, refraction_index=GLASS_IOR)
    scene.add_lambertian_sphere(
        (-4.0, 1.0, 0.0), FEATURE_SPHERE_RADIUS, albedo=FEATURE_DIFFUSE_ALBEDO
    )
    scene.add_metal_sphere(
        (4.0, 1.0, 0.0), FEATURE_SPHERE_RADIUS, albedo=FEATURE_METAL_ALBEDO, fuzz=0.0
    )

    logger.info("Built sphere world with %d spheres (seed=%s)", scene.get_sphere_count(), seed)

    camera = ThinLensCamera(
        aspect_ratio=16.0 / 9.0,
        image_width=image_width,
        vfov=20.0,
        lookfrom=(13.0, 2.0, 3.0),
        lookat=(0.0, 0.0, 0.0),
        vup=(0.0, 1.0, 0.0),
        defocus_angle=0.6,
        focus_dist=10.0,
        samples_per_pixel=samples_per_pixel,
        max_depth=max_depth,
    )

    return scene, camera
