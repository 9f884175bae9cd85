"""Dielectric (glass/water) material implementation.

Dielectrics either reflect or refract every incoming ray; they never
absorb and never tint (attenuation is always white).

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for the reflect/refract probability
    - Total internal reflection when ratio * sin(theta) > 1

The refraction ratio is 1 / ior when the ray enters through the front
face and ior when it leaves through the back face.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.materials.dielectric import scatter_dielectric
    >>> # Use within a Taichi kernel:
    >>> # scattered, attenuation, did_scatter = scatter_dielectric(ior, ray_in, rec)
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import (
    Ray,
    make_ray,
    reflect,
    refract,
    schlick_reflectance,
    unit_vector,
)
from src.pathtracer.geometry.sphere import HitRecord

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def refraction_ratio_for(ior: ti.f32, front_face: ti.i32) -> ti.f32:
    """Ratio of indices across the boundary for the given facing."""
    ratio = ior
    if front_face == 1:
        ratio = 1.0 / ior
    return ratio


@ti.func
def incidence_angles(ray_in: Ray, rec: HitRecord):
    """Cosine and sine of the angle between the incoming ray and the normal."""
    unit_direction = unit_vector(ray_in.direction)
    cos_theta = tm.min(tm.dot(-unit_direction, rec.normal), 1.0)
    sin_theta = ti.sqrt(tm.max(1.0 - cos_theta * cos_theta, 0.0))
    return cos_theta, sin_theta


@ti.func
def will_reflect(ior: ti.f32, ray_in: Ray, rec: HitRecord) -> ti.i32:
    """Determine if total internal reflection will occur.

    Returns:
        1 if ratio * sin(theta) > 1 (refraction impossible), 0 otherwise.
    """
    ratio = refraction_ratio_for(ior, rec.front_face)
    _, sin_theta = incidence_angles(ray_in, rec)
    return ratio * sin_theta > 1.0


@ti.func
def dielectric_reflectance(ior: ti.f32, ray_in: Ray, rec: HitRecord) -> ti.f32:
    """Schlick reflectance for the given incoming ray and hit record."""
    ratio = refraction_ratio_for(ior, rec.front_face)
    cos_theta, _ = incidence_angles(ray_in, rec)
    return schlick_reflectance(cos_theta, ratio)


@ti.func
def scatter_dielectric(ior: ti.f32, ray_in: Ray, rec: HitRecord):
    """Compute the scattered ray for a dielectric surface.

    Args:
        ior: Index of refraction of the material.
        ray_in: The incoming ray.
        rec: The hit record; front_face selects the refraction ratio.

    Returns:
        A tuple of (scattered_ray, attenuation, did_scatter) where:
        - scattered_ray: The reflected or refracted ray from the hit point.
        - attenuation: White (1, 1, 1).
        - did_scatter: Always 1.
    """
    attenuation = vec3(1.0, 1.0, 1.0)

    ratio = refraction_ratio_for(ior, rec.front_face)
    unit_direction = unit_vector(ray_in.direction)
    cos_theta, sin_theta = incidence_angles(ray_in, rec)

    cannot_refract = ratio * sin_theta > 1.0

    direction = vec3(0.0, 0.0, 0.0)
    if cannot_refract or schlick_reflectance(cos_theta, ratio) > ti.random(ti.f32):
        direction = reflect(unit_direction, rec.normal)
    else:
        direction = refract(unit_direction, rec.normal, ratio)

    return make_ray(rec.point, direction), attenuation, 1
