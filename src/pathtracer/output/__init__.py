"""Output module for converting and writing rendered images.

Components:
    ppm: Gamma-2 pixel conversion, ASCII PPM reader/writer and PNG export
"""

from .ppm import (
    gamma2,
    ppm_header,
    quantize,
    read_ppm,
    save_png_from_array,
    to_pixels,
    write_ppm,
    write_ppm_from_array,
)

__all__ = [
    "gamma2",
    "quantize",
    "to_pixels",
    "ppm_header",
    "write_ppm",
    "write_ppm_from_array",
    "read_ppm",
    "save_png_from_array",
]
