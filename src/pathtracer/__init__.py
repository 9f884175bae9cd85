"""Taichi-based Monte Carlo path tracer for sphere scenes.

This package renders scenes made of spheres with diffuse, metal and glass
materials through a thin-lens camera, averaging jittered samples per pixel
and writing the result as a PPM (or PNG) image.

Subpackages:
    core: Vector and ray utilities, intervals, the integrator and the
        progressive renderer
    geometry: Sphere primitive and hit records
    materials: Material descriptions and scattering functions
    scene: Sphere storage, scene builder and standard scenes
    camera: Thin-lens camera with ray generation
    output: Pixel conversion and image file writers
"""

__version__ = "0.1.0"
