"""Material tagged union shared by the scene and the hit records.

Every primitive carries one material drawn from a closed set of three
variants. On the host side each variant is a small frozen dataclass that
validates its parameters; on the kernel side all variants share a single
``Material`` struct whose ``kind`` field selects which parameters are
meaningful. Hit records embed a copy of the struct, so scattering never has
to look anything up.

Example:
    >>> from src.pathtracer.materials.material import Lambertian, Metal, Dielectric
    >>> red = Lambertian(albedo=(0.8, 0.1, 0.1))
    >>> mirror = Metal(albedo=(0.9, 0.9, 0.9), fuzz=0.0)
    >>> glass = Dielectric(refraction_index=1.5)
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Union

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

Color = tuple[float, float, float]


class MaterialKind(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the integrator to determine which
    scattering function to call.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


@ti.dataclass
class Material:
    """Kernel-side material record.

    Attributes:
        kind: The MaterialKind value selecting the scattering model.
        albedo: Reflected color for Lambertian and Metal.
        fuzz: Metal roughness in [0, 1].
        ior: Dielectric refractive index.
    """

    kind: ti.i32
    albedo: vec3
    fuzz: ti.f32
    ior: ti.f32


def _validate_albedo(albedo: Color) -> None:
    if len(albedo) != 3:
        raise ValueError(f"Albedo must have 3 components, got {len(albedo)}")
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )


@dataclass(frozen=True)
class Lambertian:
    """Ideal diffuse material.

    Attributes:
        albedo: The diffuse reflectance color (R, G, B), each in [0, 1].
    """

    albedo: Color

    kind = MaterialKind.LAMBERTIAN

    def __post_init__(self) -> None:
        _validate_albedo(self.albedo)
        object.__setattr__(self, "albedo", tuple(float(c) for c in self.albedo))

    def to_params(self) -> dict[str, Any]:
        return {"type": "lambertian", "albedo": self.albedo}


@dataclass(frozen=True)
class Metal:
    """Specular reflector with optional fuzz.

    Attributes:
        albedo: The reflective color (R, G, B), each in [0, 1].
        fuzz: Reflection roughness; values outside [0, 1] are clamped.
    """

    albedo: Color
    fuzz: float = 0.0

    kind = MaterialKind.METAL

    def __post_init__(self) -> None:
        _validate_albedo(self.albedo)
        object.__setattr__(self, "albedo", tuple(float(c) for c in self.albedo))
        object.__setattr__(self, "fuzz", min(max(float(self.fuzz), 0.0), 1.0))

    def to_params(self) -> dict[str, Any]:
        return {"type": "metal", "albedo": self.albedo, "fuzz": self.fuzz}


@dataclass(frozen=True)
class Dielectric:
    """Clear refractive material such as glass or water.

    Attributes:
        refraction_index: Refractive index relative to the enclosing medium.
            Common values: water 1.33, glass 1.5, diamond 2.4.
    """

    refraction_index: float = 1.5

    kind = MaterialKind.DIELECTRIC

    def __post_init__(self) -> None:
        if self.refraction_index <= 0.0:
            raise ValueError(
                f"Refraction index = {self.refraction_index} must be positive."
            )
        object.__setattr__(self, "refraction_index", float(self.refraction_index))

    def to_params(self) -> dict[str, Any]:
        return {"type": "dielectric", "refraction_index": self.refraction_index}


SurfaceMaterial = Union[Lambertian, Metal, Dielectric]


def material_fields(material: SurfaceMaterial) -> tuple[int, Color, float, float]:
    """Flatten a host material into (kind, albedo, fuzz, ior) storage values.

    Unused slots get neutral values: white albedo, zero fuzz, unit index.
    """
    if isinstance(material, Lambertian):
        return int(MaterialKind.LAMBERTIAN), material.albedo, 0.0, 1.0
    if isinstance(material, Metal):
        return int(MaterialKind.METAL), material.albedo, material.fuzz, 1.0
    if isinstance(material, Dielectric):
        return int(MaterialKind.DIELECTRIC), (1.0, 1.0, 1.0), 0.0, material.refraction_index
    raise TypeError(f"Unsupported material: {material!r}")


def material_from_params(params: dict[str, Any]) -> SurfaceMaterial:
    """Rebuild a host material from the dict produced by to_params().

    Raises:
        ValueError: If the type tag is unknown.
    """
    material_type = params.get("type")
    if material_type == "lambertian":
        return Lambertian(albedo=tuple(params["albedo"]))
    if material_type == "metal":
        return Metal(albedo=tuple(params["albedo"]), fuzz=params.get("fuzz", 0.0))
    if material_type == "dielectric":
        return Dielectric(refraction_index=params.get("refraction_index", 1.5))
    raise ValueError(f"Unknown material type: {material_type!r}")


@ti.func
def make_material(kind: ti.i32, albedo: vec3, fuzz: ti.f32, ior: ti.f32) -> Material:
    """Create a kernel-side material record."""
    return Material(kind=kind, albedo=albedo, fuzz=fuzz, ior=ior)
