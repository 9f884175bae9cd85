"""Thin-lens camera model for primary ray generation.

This module implements a perspective camera with optional depth of field.
The camera supports:
- Look-at positioning (lookfrom, lookat, vup)
- Vertical field of view specification
- Arbitrary aspect ratios
- Jittered sampling for anti-aliasing
- Defocus blur from a lens aperture disk

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The pixel grid lies on the focus plane, focus_dist in front of the camera.
Pixel (0, 0) is the top-left corner; rows grow downward.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.camera.thin_lens import ThinLensCamera, get_ray, setup_camera
    >>>
    >>> camera = ThinLensCamera(
    ...     lookfrom=(13.0, 2.0, 3.0),
    ...     lookat=(0.0, 0.0, 0.0),
    ...     vfov=20.0,
    ...     defocus_angle=0.6,
    ...     focus_dist=10.0,
    ... )
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0, 0)  # Jittered ray through the top-left pixel
"""

import logging
import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from src.pathtracer.core.ray import Ray, make_ray, random_in_unit_disk, vec3

logger = logging.getLogger(__name__)

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class ThinLensCamera:
    """Configuration for a thin-lens (perspective) camera.

    Attributes:
        aspect_ratio: Width divided by height of the output image.
        image_width: Output width in pixels.
        vfov: Vertical field of view in degrees.
        lookfrom: Camera position in world space (x, y, z).
        lookat: Point the camera is looking at in world space (x, y, z).
        vup: Up direction vector for camera orientation.
        defocus_angle: Aperture cone angle in degrees; 0 disables defocus
            blur (pinhole camera).
        focus_dist: Distance from lookfrom to the plane of perfect focus.
        samples_per_pixel: Number of jittered rays per pixel.
        max_depth: Maximum number of bounces per ray.
    """

    aspect_ratio: float = 16.0 / 9.0
    image_width: int = 400
    vfov: float = 90.0
    lookfrom: tuple[float, float, float] = (0.0, 0.0, 0.0)
    lookat: tuple[float, float, float] = (0.0, 0.0, -1.0)
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    defocus_angle: float = 0.0
    focus_dist: float = 1.0
    samples_per_pixel: int = 10
    max_depth: int = 10

    @property
    def image_height(self) -> int:
        """Image height in pixels derived from width and aspect ratio."""
        return int(self.image_width / self.aspect_ratio)

    def validate(self) -> None:
        """Check the parameters before deriving the camera frame.

        Raises:
            ValueError: If a parameter makes the frame degenerate.
        """
        if self.image_width <= 0:
            raise ValueError(f"Image width = {self.image_width} must be positive.")
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"Aspect ratio = {self.aspect_ratio} must be positive.")
        if self.image_height == 0:
            raise ValueError(
                f"Image width {self.image_width} at aspect ratio {self.aspect_ratio} "
                "gives an image height of 0."
            )
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"Vertical FOV = {self.vfov} must be in (0, 180) degrees.")
        if self.focus_dist <= 0.0:
            raise ValueError(f"Focus distance = {self.focus_dist} must be positive.")
        if self.samples_per_pixel <= 0:
            raise ValueError(
                f"Samples per pixel = {self.samples_per_pixel} must be positive."
            )
        if self.max_depth < 0:
            raise ValueError(f"Max depth = {self.max_depth} must not be negative.")
        if np.allclose(self.lookfrom, self.lookat):
            raise ValueError("lookfrom and lookat must differ.")


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

# Camera origin (lens center)
_camera_center = ti.Vector.field(3, dtype=ti.f32, shape=())

# Orthonormal basis vectors
_camera_u = ti.Vector.field(3, dtype=ti.f32, shape=())  # Right
_camera_v = ti.Vector.field(3, dtype=ti.f32, shape=())  # Up
_camera_w = ti.Vector.field(3, dtype=ti.f32, shape=())  # Backward (opposite view)

# Pixel grid: center of pixel (0, 0) and the per-pixel steps
_pixel00_loc = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_delta_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_delta_v = ti.Vector.field(3, dtype=ti.f32, shape=())

# Defocus disk basis scaled by the disk radius
_defocus_angle = ti.field(dtype=ti.f32, shape=())
_defocus_disk_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_defocus_disk_v = ti.Vector.field(3, dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def setup_camera(camera: ThinLensCamera) -> None:
    """Derive the camera frame from its configuration.

    Every derived quantity is recomputed from scratch and written together,
    so changing any framing parameter means calling this again.

    Args:
        camera: Camera configuration with placement, lens and image size.

    Raises:
        ValueError: If the configuration is degenerate.
    """
    camera.validate()

    width = camera.image_width
    height = camera.image_height

    # Viewport dimensions on the focus plane
    theta = math.radians(camera.vfov)
    h = math.tan(theta / 2.0)
    viewport_height = 2.0 * h * camera.focus_dist
    viewport_width = viewport_height * (width / height)

    lookfrom = np.array(camera.lookfrom, dtype=np.float64)
    lookat = np.array(camera.lookat, dtype=np.float64)
    vup = np.array(camera.vup, dtype=np.float64)

    # w points from lookat toward lookfrom (backward)
    w = lookfrom - lookat
    w = w / np.linalg.norm(w)

    # u points right (perpendicular to w and vup)
    u = np.cross(vup, w)
    u_norm = np.linalg.norm(u)
    if u_norm == 0.0:
        raise ValueError("vup must not be parallel to the view direction.")
    u = u / u_norm

    # v points up in the camera's frame
    v = np.cross(w, u)

    # Viewport edges: across the width, and down the height
    viewport_u = viewport_width * u
    viewport_v = viewport_height * -v

    pixel_delta_u = viewport_u / width
    pixel_delta_v = viewport_v / height

    viewport_upper_left = (
        lookfrom - camera.focus_dist * w - viewport_u / 2.0 - viewport_v / 2.0
    )
    pixel00_loc = viewport_upper_left + 0.5 * (pixel_delta_u + pixel_delta_v)

    defocus_radius = camera.focus_dist * math.tan(math.radians(camera.defocus_angle / 2.0))

    _camera_center[None] = lookfrom.tolist()
    _camera_u[None] = u.tolist()
    _camera_v[None] = v.tolist()
    _camera_w[None] = w.tolist()
    _pixel00_loc[None] = pixel00_loc.tolist()
    _pixel_delta_u[None] = pixel_delta_u.tolist()
    _pixel_delta_v[None] = pixel_delta_v.tolist()
    _defocus_angle[None] = camera.defocus_angle
    _defocus_disk_u[None] = (u * defocus_radius).tolist()
    _defocus_disk_v[None] = (v * defocus_radius).tolist()

    logger.debug(
        "Camera set up: %dx%d, vfov=%.1f, defocus_angle=%.2f, focus_dist=%.2f",
        width,
        height,
        camera.vfov,
        camera.defocus_angle,
        camera.focus_dist,
    )


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def get_pixel_center(i: ti.i32, j: ti.i32) -> vec3:
    """World-space center of pixel (i, j) on the focus plane.

    Args:
        i: Column index (0 = left).
        j: Row index (0 = top).
    """
    return (
        _pixel00_loc[None]
        + ti.cast(i, ti.f32) * _pixel_delta_u[None]
        + ti.cast(j, ti.f32) * _pixel_delta_v[None]
    )


@ti.func
def defocus_disk_sample() -> vec3:
    """Random point on the lens disk around the camera center."""
    p = random_in_unit_disk()
    return _camera_center[None] + p.x * _defocus_disk_u[None] + p.y * _defocus_disk_v[None]


@ti.func
def get_ray(i: ti.i32, j: ti.i32) -> Ray:
    """Generate a jittered camera ray for pixel (i, j).

    The pixel center is offset by a uniform random amount in [-0.5, 0.5)
    along both pixel steps for anti-aliasing. With a positive defocus angle
    the origin is sampled on the lens disk, otherwise it is the camera
    center.

    Args:
        i: Column index (0 = left).
        j: Row index (0 = top).

    Returns:
        A Ray from the lens toward the jittered pixel sample. The direction
        is not normalized.
    """
    offset_u = ti.random(ti.f32) - 0.5
    offset_v = ti.random(ti.f32) - 0.5
    pixel_sample = (
        get_pixel_center(i, j)
        + offset_u * _pixel_delta_u[None]
        + offset_v * _pixel_delta_v[None]
    )

    origin = _camera_center[None]
    if _defocus_angle[None] > 0.0:
        origin = defocus_disk_sample()

    return make_ray(origin, pixel_sample - origin)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with center, u, v, w, pixel00, delta_u, delta_v,
        defocus_disk_u and defocus_disk_v.
    """

    def _as_tuple(value) -> tuple[float, float, float]:
        return (float(value[0]), float(value[1]), float(value[2]))

    return {
        "center": _as_tuple(_camera_center[None]),
        "u": _as_tuple(_camera_u[None]),
        "v": _as_tuple(_camera_v[None]),
        "w": _as_tuple(_camera_w[None]),
        "pixel00": _as_tuple(_pixel00_loc[None]),
        "delta_u": _as_tuple(_pixel_delta_u[None]),
        "delta_v": _as_tuple(_pixel_delta_v[None]),
        "defocus_disk_u": _as_tuple(_defocus_disk_u[None]),
        "defocus_disk_v": _as_tuple(_defocus_disk_v[None]),
    }
