"""Lambertian (ideal diffuse) material implementation.

A diffuse surface scatters toward normal + u, where u is a unit vector
drawn uniformly from the sphere. Offsetting the unit sphere by the normal
biases directions toward the normal and approximates a cosine-weighted
distribution without building a local frame.

The scatter always succeeds and attenuates by the albedo.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.materials.lambertian import scatter_lambertian
    >>> # Use within a Taichi kernel:
    >>> # scattered, attenuation, did_scatter = scatter_lambertian(albedo, ray_in, rec)
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import Ray, make_ray, near_zero, random_unit_vector
from src.pathtracer.geometry.sphere import HitRecord

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_lambertian(albedo: vec3, ray_in: Ray, rec: HitRecord):
    """Scatter a ray off a diffuse surface.

    Args:
        albedo: The diffuse reflectance color (RGB).
        ray_in: The incoming ray (unused; diffuse scattering ignores it).
        rec: The hit record at the scattering point.

    Returns:
        A tuple of (scattered_ray, attenuation, did_scatter) where:
        - scattered_ray: Ray from the hit point along normal + random unit
          vector, or along the normal if that sum is degenerate.
        - attenuation: The albedo.
        - did_scatter: Always 1.
    """
    scatter_direction = rec.normal + random_unit_vector()

    # Catch a random vector that nearly cancels the normal
    if near_zero(scatter_direction):
        scatter_direction = rec.normal

    return make_ray(rec.point, scatter_direction), albedo, 1
