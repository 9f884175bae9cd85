"""Material dispatch for the scattering contract.

``scatter(ray_in, rec)`` selects the scattering model from the material
copied into the hit record and returns (scattered_ray, attenuation,
did_scatter). did_scatter == 0 means the ray was absorbed.
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import Ray, make_ray
from src.pathtracer.geometry.sphere import HitRecord
from src.pathtracer.materials.dielectric import scatter_dielectric
from src.pathtracer.materials.lambertian import scatter_lambertian
from src.pathtracer.materials.material import MaterialKind
from src.pathtracer.materials.metal import scatter_metal

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter(ray_in: Ray, rec: HitRecord):
    """Dispatch to the scattering function of the struck material.

    Args:
        ray_in: The incoming ray.
        rec: The hit record carrying the material copy.

    Returns:
        A tuple of (scattered_ray, attenuation, did_scatter). Unknown
        material kinds absorb.
    """
    material = rec.material

    scattered = make_ray(rec.point, rec.normal)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if material.kind == int(MaterialKind.LAMBERTIAN):
        scattered, attenuation, did_scatter = scatter_lambertian(material.albedo, ray_in, rec)

    elif material.kind == int(MaterialKind.METAL):
        scattered, attenuation, did_scatter = scatter_metal(
            material.albedo, material.fuzz, ray_in, rec
        )

    elif material.kind == int(MaterialKind.DIELECTRIC):
        scattered, attenuation, did_scatter = scatter_dielectric(material.ior, ray_in, rec)

    return scattered, attenuation, did_scatter
