"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive, hit records and ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) returning a
HitRecord whose ``hit`` flag reports whether a root was found inside the
query interval.
"""

from .sphere import HitRecord, Sphere, hit_sphere, make_hit_record, make_sphere, miss_record

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
    "make_hit_record",
    "miss_record",
]
