"""Sphere primitive with ray-sphere intersection.

This module provides the Sphere and HitRecord dataclasses and the closed
form intersection routine. Substituting the ray into the implicit sphere
equation gives the quadratic

    a*t^2 + 2*h*t + c = 0

with a = |direction|^2, h = (origin - center) . direction and
c = |origin - center|^2 - radius^2. The near root is tried first so the
closest intersection inside the interval wins without a second pass.

A negative radius flips the geometric normal (p - center) / radius to
point inward. Nesting a radius -R sphere inside a radius R sphere of the
same material gives a hollow glass shell.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.geometry.sphere import Sphere, hit_sphere
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.interval import Interval, interval_surrounds
from src.pathtracer.core.ray import Ray, ray_at
from src.pathtracer.materials.material import Material

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point, radius and material.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere. Negative values invert the
            normal convention (hollow sphere).
        material: The surface material.
    """

    center: vec3
    radius: ti.f32
    material: Material


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected (1 if hit, 0 if miss). All other
            fields are only valid if hit == 1.
        t: The parameter value along the ray where intersection occurred.
        point: The 3D point where the ray intersected the surface.
        normal: The unit surface normal, flipped at construction so that it
            always opposes the incoming ray.
        front_face: 1 if the ray direction opposed the geometric normal,
            0 if the record's normal had to be flipped.
        material: Copy of the struck primitive's material.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    material: Material


@ti.func
def make_hit_record(
    ray: Ray,
    t: ti.f32,
    point: vec3,
    outward_normal: vec3,
    material: Material,
) -> HitRecord:
    """Build a hit record with the facing-corrected normal.

    Args:
        ray: The ray that produced the intersection.
        t: Distance parameter of the intersection.
        point: Intersection point.
        outward_normal: Geometric normal of the primitive (unit length).
        material: Material of the struck primitive.

    Returns:
        A HitRecord with hit == 1.
    """
    front_face = 1
    normal = outward_normal
    if tm.dot(ray.direction, outward_normal) >= 0.0:
        front_face = 0
        normal = -outward_normal

    return HitRecord(
        hit=1,
        t=t,
        point=point,
        normal=normal,
        front_face=front_face,
        material=material,
    )


@ti.func
def miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material=Material(kind=-1, albedo=vec3(0.0, 0.0, 0.0), fuzz=0.0, ior=1.0),
    )


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, interval: Interval) -> HitRecord:
    """Test for ray-sphere intersection.

    Roots are tried nearest first and accepted only if they lie strictly
    inside the interval.

    Args:
        ray: The ray to test (direction need not be normalized).
        sphere: The sphere to test intersection against.
        interval: The window of acceptable t values (exclusive bounds).

    Returns:
        A HitRecord; check the hit field to determine if intersection
        occurred.
    """
    oc = ray.origin - sphere.center

    a = tm.dot(ray.direction, ray.direction)
    h = tm.dot(oc, ray.direction)  # Half of the traditional 'b'
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius

    discriminant = h * h - a * c

    result = miss_record()

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)

        root = (-h - sqrt_d) / a
        valid = interval_surrounds(interval, root)

        if not valid:
            root = (-h + sqrt_d) / a
            valid = interval_surrounds(interval, root)

        if valid:
            point = ray_at(ray, root)
            # Sign follows the radius: inward for hollow spheres
            outward_normal = (point - sphere.center) / sphere.radius
            result = make_hit_record(ray, root, point, outward_normal, sphere.material)

    return result


@ti.func
def make_sphere(center: vec3, radius: ti.f32, material: Material) -> Sphere:
    """Create a sphere from center, radius and material."""
    return Sphere(center=center, radius=radius, material=material)
