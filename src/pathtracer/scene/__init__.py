"""Scene module for sphere storage and scene construction.

Components:
    intersection: Sphere storage in Taichi fields and closest-hit queries
    manager: Host-side scene builder with plain-dict serialization
    sphere_world: Factories for the standard sphere scenes

Spheres are stored as a Structure of Arrays with their materials inline.
Queries scan every sphere; there is no acceleration structure.
"""

from .intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
)
from .manager import SceneConfig, SceneManager, SphereInfo
from .sphere_world import create_sphere_world_scene, create_two_sphere_scene

__all__ = [
    # Intersection module
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "SphereInfo",
    "SceneConfig",
    # Standard scenes
    "create_two_sphere_scene",
    "create_sphere_world_scene",
]
