"""Host-side scene builder.

This module provides a high-level API over the sphere storage in
``scene.intersection``. The SceneManager keeps a Python-side record of every
sphere and its material so scenes can be inspected, serialized to plain
dicts and rebuilt.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> scene.add_lambertian_sphere((0.0, 0.0, -1.0), 0.5, albedo=(0.1, 0.2, 0.5))
    0
    >>> scene.add_dielectric_sphere((-1.0, 0.0, -1.0), 0.5, refraction_index=1.5)
    1
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from src.pathtracer.materials.material import (
    Dielectric,
    Lambertian,
    Metal,
    SurfaceMaterial,
    material_from_params,
)
from src.pathtracer.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
)

logger = logging.getLogger(__name__)


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere (negative for hollow shells).
        material: The material assigned to the sphere.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material: SurfaceMaterial


@dataclass
class SceneConfig:
    """Plain-data description of a scene.

    Attributes:
        spheres: One dict per sphere with center, radius and material keys.
    """

    spheres: list[dict[str, Any]] = field(default_factory=list)


class SceneManager:
    """Scene builder coordinating host records with kernel storage.

    Only one scene is live at a time because the storage is global to the
    Taichi runtime; creating a SceneManager clears it.

    Attributes:
        spheres: List of SphereInfo for all spheres in insertion order.
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.spheres: list[SphereInfo] = []
        self.clear()

    def clear(self) -> None:
        """Remove every sphere from the scene."""
        clear_scene()
        self.spheres.clear()

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(
        self,
        center: Sequence[float],
        radius: float,
        material: SurfaceMaterial,
    ) -> int:
        """Add a sphere with the given material.

        Args:
            center: The center of the sphere as (x, y, z).
            radius: The radius; negative values flip the normal convention.
            material: A Lambertian, Metal or Dielectric value.

        Returns:
            The index of the sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If the radius is zero.
        """
        center_tuple = (float(center[0]), float(center[1]), float(center[2]))
        sphere_index = add_sphere(center_tuple, radius, material)
        self.spheres.append(
            SphereInfo(
                sphere_index=sphere_index,
                center=center_tuple,
                radius=float(radius),
                material=material,
            )
        )
        return sphere_index

    def add_lambertian_sphere(
        self,
        center: Sequence[float],
        radius: float,
        albedo: tuple[float, float, float],
    ) -> int:
        """Add a diffuse sphere."""
        return self.add_sphere(center, radius, Lambertian(albedo=albedo))

    def add_metal_sphere(
        self,
        center: Sequence[float],
        radius: float,
        albedo: tuple[float, float, float],
        fuzz: float = 0.0,
    ) -> int:
        """Add a metal sphere; fuzz is clamped to [0, 1]."""
        return self.add_sphere(center, radius, Metal(albedo=albedo, fuzz=fuzz))

    def add_dielectric_sphere(
        self,
        center: Sequence[float],
        radius: float,
        refraction_index: float = 1.5,
    ) -> int:
        """Add a glass-like sphere."""
        return self.add_sphere(center, radius, Dielectric(refraction_index=refraction_index))

    def add_hollow_glass_sphere(
        self,
        center: Sequence[float],
        radius: float,
        thickness: float,
        refraction_index: float = 1.5,
    ) -> tuple[int, int]:
        """Add a glass shell: an outer sphere and an inward-facing inner sphere.

        Args:
            center: The shared center.
            radius: The outer radius (positive).
            thickness: Wall thickness; 0 nests the inner surface exactly on
                the outer one.
            refraction_index: Refractive index of the glass.

        Returns:
            The (outer, inner) sphere indices.

        Raises:
            ValueError: If radius is not positive or thickness is outside
                [0, radius).
        """
        if radius <= 0.0:
            raise ValueError(f"Outer radius = {radius} must be positive.")
        if thickness < 0.0 or thickness >= radius:
            raise ValueError(f"Thickness = {thickness} must be in [0, {radius}).")

        material = Dielectric(refraction_index=refraction_index)
        outer = self.add_sphere(center, radius, material)
        inner = self.add_sphere(center, -(radius - thickness), material)
        return outer, inner

    def get_sphere_count(self) -> int:
        """Get the number of spheres stored for rendering."""
        return get_sphere_count()

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene as a SceneConfig."""
        return SceneConfig(
            spheres=[
                {
                    "center": info.center,
                    "radius": info.radius,
                    "material": info.material.to_params(),
                }
                for info in self.spheres
            ]
        )

    def from_config(self, config: SceneConfig) -> None:
        """Replace the current scene with the one described by config.

        Raises:
            ValueError: If a material description is invalid.
            KeyError: If a sphere entry lacks a required key.
        """
        self.clear()
        for entry in config.spheres:
            material = material_from_params(entry["material"])
            self.add_sphere(tuple(entry["center"]), entry["radius"], material)
        logger.debug("Loaded scene with %d spheres", len(self.spheres))

    def to_dict(self) -> dict[str, Any]:
        """Export the scene as a JSON-compatible dict."""
        config = self.to_config()
        return {
            "spheres": [
                {
                    "center": list(s["center"]),
                    "radius": s["radius"],
                    "material": {
                        k: list(v) if isinstance(v, tuple) else v
                        for k, v in s["material"].items()
                    },
                }
                for s in config.spheres
            ]
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Replace the current scene with the one described by a dict."""
        self.from_config(SceneConfig(spheres=list(data.get("spheres", []))))

    @staticmethod
    def get_max_spheres() -> int:
        """Get the capacity of the sphere storage."""
        return MAX_SPHERES
