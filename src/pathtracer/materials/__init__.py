"""Materials module for light scattering.

Components:
    material: Host-side material values and the kernel-side Material struct
    lambertian: Ideal diffuse reflection
    metal: Specular reflection with optional fuzz
    dielectric: Glass-like refraction with Schlick reflectance
    scatter: Dispatch on the material kind carried by a hit record

Every scatter function returns ``(scattered_ray, attenuation, did_scatter)``;
``did_scatter == 0`` means the ray was absorbed.

Only the material descriptions are re-exported here. The scatter modules
depend on geometry.sphere, which depends on this package, so import them
directly, e.g. ``from src.pathtracer.materials.scatter import scatter``.
"""

from .material import (
    Dielectric,
    Lambertian,
    Material,
    MaterialKind,
    Metal,
    SurfaceMaterial,
    make_material,
    material_fields,
    material_from_params,
)

__all__ = [
    "Material",
    "MaterialKind",
    "Lambertian",
    "Metal",
    "Dielectric",
    "SurfaceMaterial",
    "make_material",
    "material_fields",
    "material_from_params",
]
