"""Scene-level primitive intersection testing.

The scene is an insertion-ordered collection of spheres stored in Taichi
fields (structure of arrays). Each sphere keeps its material inline so a
hit record can carry a copy of it. There is no spatial index: a query is
a linear scan over every sphere.

The scene is built once before rendering and read-only while kernels run.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.materials.material import Lambertian
    >>> from src.pathtracer.scene.intersection import add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -1.0), 0.5, Lambertian((0.5, 0.5, 0.5)))
    0
    >>> # Use intersect_scene within a Taichi kernel
"""

from collections.abc import Sequence

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.interval import Interval
from src.pathtracer.core.ray import Ray
from src.pathtracer.geometry.sphere import HitRecord, Sphere, hit_sphere, miss_record
from src.pathtracer.materials.material import Material, SurfaceMaterial, material_fields

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Inline material storage, one entry per sphere
material_kinds = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
material_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
material_fuzz = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
material_iors = ti.field(dtype=ti.f32, shape=MAX_SPHERES)


def clear_scene() -> None:
    """Remove all spheres from the scene.

    Resets the sphere count to zero. Field data is overwritten by later
    additions.
    """
    num_spheres[None] = 0


def add_sphere(
    center: Sequence[float],
    radius: float,
    material: SurfaceMaterial,
) -> int:
    """Append a sphere to the scene.

    Args:
        center: The center point of the sphere (x, y, z).
        radius: The radius. Negative values select the inward normal
            convention used for hollow spheres.
        material: The host-side material value.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
        ValueError: If the radius is zero.
    """
    if radius == 0.0:
        raise ValueError("Sphere radius must be non-zero.")

    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

    kind, albedo, fuzz, ior = material_fields(material)

    sphere_centers[idx] = [float(center[0]), float(center[1]), float(center[2])]
    sphere_radii[idx] = radius
    material_kinds[idx] = kind
    material_albedos[idx] = [albedo[0], albedo[1], albedo[2]]
    material_fuzz[idx] = fuzz
    material_iors[idx] = ior
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def get_sphere(i: ti.i32) -> Sphere:
    """Assemble the i-th sphere, including its material, from the fields."""
    material = Material(
        kind=material_kinds[i],
        albedo=material_albedos[i],
        fuzz=material_fuzz[i],
        ior=material_iors[i],
    )
    return Sphere(center=sphere_centers[i], radius=sphere_radii[i], material=material)


@ti.func
def intersect_scene(ray: Ray, interval: Interval) -> HitRecord:
    """Test ray against every sphere in the scene.

    Each sphere is tested against the same interval and the record with
    the smallest t is kept. The scan never stops early.

    Args:
        ray: The ray to test.
        interval: The window of acceptable t values (exclusive bounds).

    Returns:
        The closest HitRecord, or a miss record if nothing was hit.
    """
    result = miss_record()

    n = num_spheres[None]
    for i in range(n):
        rec = hit_sphere(ray, get_sphere(i), interval)
        if rec.hit == 1:
            if result.hit == 0 or rec.t < result.t:
                result = rec

    return result
