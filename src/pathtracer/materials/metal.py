"""Metal (specular reflective) material implementation.

This module implements mirror reflection with optional fuzz. Perfect
metals (fuzz=0) produce mirror-like reflections; fuzzier metals perturb the
reflected direction by a random unit vector scaled by the fuzz.

The reflection formula is:
    R = V - 2(V . N)N

where V is the unit incident direction and N is the surface normal.

A perturbed direction that ends up at or below the surface (R . N <= 0) is
absorbed. This is what darkens glancing reflections on rough metal.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.materials.metal import scatter_metal
    >>> # Use within a Taichi kernel:
    >>> # scattered, attenuation, did_scatter = scatter_metal(albedo, fuzz, ray_in, rec)
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import (
    Ray,
    make_ray,
    random_unit_vector,
    reflect,
    unit_vector,
)
from src.pathtracer.geometry.sphere import HitRecord

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_metal(albedo: vec3, fuzz: ti.f32, ray_in: Ray, rec: HitRecord):
    """Compute the scattered ray for a metal surface.

    Args:
        albedo: The reflective color (RGB).
        fuzz: The roughness, clamped to [0, 1].
        ray_in: The incoming ray.
        rec: The hit record at the scattering point.

    Returns:
        A tuple of (scattered_ray, attenuation, did_scatter) where:
        - scattered_ray: Ray from the hit point along the fuzzed reflection.
        - attenuation: The albedo.
        - did_scatter: 1 if the direction is above the surface, 0 if the
          ray was absorbed.
    """
    reflected = reflect(unit_vector(ray_in.direction), rec.normal)
    reflected = reflected + tm.clamp(fuzz, 0.0, 1.0) * random_unit_vector()

    did_scatter = 1
    if tm.dot(reflected, rec.normal) <= 0.0:
        did_scatter = 0

    return make_ray(rec.point, reflected), albedo, did_scatter
