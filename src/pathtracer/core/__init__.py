"""Core rendering module.

Components:
    ray: Ray data structure, vector helpers and random sampling
    interval: Closed/open parameter intervals used for hit windows and clamping
    integrator: Radiance evaluation and per-pixel sample accumulation
    progressive: Renderer facade bound to a camera

All compute-intensive operations use Taichi kernels.
"""

from .interval import (
    T_MAX,
    T_MIN,
    Interval,
    color_interval,
    hit_interval,
    interval_clamp,
    interval_contains,
    interval_surrounds,
    make_interval,
)
from .ray import (
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    near_zero,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_unit_vector,
    random_vec3,
    ray_at,
    reflect,
    refract,
    schlick_reflectance,
    unit_vector,
    vec3,
)

# Note: integrator and progressive are NOT imported here to avoid circular imports.
# Import directly from src.pathtracer.core.integrator or src.pathtracer.core.progressive when needed.
#
# For progressive rendering, use:
#   from src.pathtracer.core.progressive import ProgressiveRenderer

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "unit_vector",
    "dot",
    "cross",
    "reflect",
    "refract",
    "schlick_reflectance",
    "near_zero",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_in_unit_disk",
    "random_vec3",
    "Interval",
    "make_interval",
    "interval_contains",
    "interval_surrounds",
    "interval_clamp",
    "hit_interval",
    "color_interval",
    "T_MIN",
    "T_MAX",
]
