"""Camera module for view and ray generation.

Components:
    thin_lens: Perspective camera with optional defocus blur

The camera maps pixel indices (i, j), column then row with row 0 at the
top, to jittered world-space rays. Ray generation runs inside Taichi
kernels, so every pixel can generate its rays in parallel.
"""

from .thin_lens import (
    ThinLensCamera,
    defocus_disk_sample,
    get_camera_info,
    get_pixel_center,
    get_ray,
    setup_camera,
)

__all__ = [
    "ThinLensCamera",
    "setup_camera",
    "get_ray",
    "get_pixel_center",
    "defocus_disk_sample",
    "get_camera_info",
]
