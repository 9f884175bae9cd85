"""Image export utilities for rendered images.

This module turns linear colors into 8-bit pixels and writes them out.

Supported formats:
    - PPM P3 (ASCII): header ``P3\\n<width> <height>\\n255\\n`` followed by
      one ``"r g b"`` line per pixel, top row first, left to right.
    - PNG (8-bit via Pillow)

Pixels are produced by a gamma-2 transform (square root) of the clamped
linear color followed by quantization ``int(255.999 * value)``.

Errors from creating or writing the destination file propagate to the
caller as OSError. A partially written file may be left behind.

Example:
    >>> from src.pathtracer.output.ppm import write_ppm
    >>> write_ppm("gradient.ppm", 4, 2, lambda i, j: (i * 60, j * 120, 64))
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from os import PathLike
from pathlib import Path
from typing import Union

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)

PathType = Union[str, "PathLike[str]"]
Pixel = tuple[int, int, int]

# Callback producing the pixel at (column, row)
PixelFunction = Callable[[int, int], Pixel]

MAX_COLOR_VALUE = 255


# =============================================================================
# Color Conversion
# =============================================================================


def gamma2(value: float) -> float:
    """Gamma-2 tone mapping (square root) of a linear value in [0, 1]."""
    return float(np.sqrt(value))


def quantize(value: float) -> int:
    """Map a value in [0, 1] to an integer in [0, 255]."""
    return int(255.999 * value)


def to_pixels(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a linear image to 8-bit pixels.

    Maps NaN to 0, clamps every channel to [0, 1], applies gamma 2 and
    quantizes.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        Array of shape (H, W, 3) with dtype uint8.
    """
    finite = np.nan_to_num(image.astype(np.float64), nan=0.0, posinf=1.0, neginf=0.0)
    clamped = np.clip(finite, 0.0, 1.0)
    corrected = np.sqrt(clamped)
    return (255.999 * corrected).astype(np.uint8)


# =============================================================================
# PPM Writing
# =============================================================================


def ppm_header(width: int, height: int) -> str:
    """Return the P3 header for an image of the given size."""
    return f"P3\n{width} {height}\n{MAX_COLOR_VALUE}\n"


def format_pixel(pixel: Pixel) -> str:
    """Format one pixel as a PPM body line (without newline).

    Raises:
        ValueError: If a channel is outside [0, 255].
    """
    r, g, b = (int(c) for c in pixel)
    for channel in (r, g, b):
        if channel < 0 or channel > MAX_COLOR_VALUE:
            raise ValueError(f"Pixel channel {channel} is outside [0, {MAX_COLOR_VALUE}]")
    return f"{r} {g} {b}"


def write_ppm(
    path: PathType,
    width: int,
    height: int,
    pixel_fn: PixelFunction,
) -> Path:
    """Stream an image to an ASCII PPM file.

    Writes the header, then calls pixel_fn(column, row) for every pixel
    with the row in the outer loop, writing one line per pixel.

    Args:
        path: Destination file path.
        width: Image width in pixels.
        height: Image height in pixels.
        pixel_fn: Callback returning the (r, g, b) pixel at (column, row).

    Returns:
        The path written.

    Raises:
        ValueError: If the dimensions are not positive.
        OSError: If the file cannot be created or written.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")

    output_path = Path(path)
    with output_path.open("w", encoding="ascii", newline="\n") as f:
        f.write(ppm_header(width, height))
        for j in range(height):
            logger.debug("Scanlines remaining: %d", height - j)
            for i in range(width):
                f.write(format_pixel(pixel_fn(i, j)))
                f.write("\n")

    logger.info("Wrote %dx%d PPM to %s", width, height, output_path)
    return output_path


def write_ppm_from_array(path: PathType, pixels: npt.NDArray[np.integer]) -> Path:
    """Write an (H, W, 3) array of 8-bit pixels as an ASCII PPM.

    Args:
        path: Destination file path.
        pixels: Integer pixel array, row 0 at the top.

    Returns:
        The path written.

    Raises:
        ValueError: If the array does not have shape (H, W, 3).
        OSError: If the file cannot be created or written.
    """
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) array, got shape {pixels.shape}")

    height, width = pixels.shape[0], pixels.shape[1]

    def pixel_at(i: int, j: int) -> Pixel:
        r, g, b = pixels[j, i]
        return int(r), int(g), int(b)

    return write_ppm(path, width, height, pixel_at)


def read_ppm(path: PathType) -> npt.NDArray[np.int32]:
    """Read an ASCII (P3) PPM file into an (H, W, 3) array.

    Raises:
        ValueError: If the file is not a well-formed P3 image.
        OSError: If the file cannot be read.
    """
    tokens = Path(path).read_text(encoding="ascii").split()
    if not tokens or tokens[0] != "P3":
        raise ValueError(f"{path} is not an ASCII PPM (P3) file")
    if len(tokens) < 4:
        raise ValueError(f"{path} has a truncated header")

    width, height, max_value = int(tokens[1]), int(tokens[2]), int(tokens[3])
    values = np.array([int(t) for t in tokens[4:]], dtype=np.int32)
    if values.size != width * height * 3:
        raise ValueError(
            f"{path} holds {values.size} values, expected {width * height * 3}"
        )
    if values.size and (values.min() < 0 or values.max() > max_value):
        raise ValueError(f"{path} has channel values outside [0, {max_value}]")

    return values.reshape(height, width, 3)


# =============================================================================
# PNG Writing
# =============================================================================


def save_png_from_array(path: PathType, pixels: npt.NDArray[np.uint8]) -> Path:
    """Save an (H, W, 3) uint8 array as a PNG file using Pillow.

    Raises:
        OSError: If the file cannot be written.
    """
    output_path = Path(path)
    pil_image = PILImage.fromarray(pixels.astype(np.uint8))
    pil_image.save(output_path)
    logger.info("Wrote %dx%d PNG to %s", pixels.shape[1], pixels.shape[0], output_path)
    return output_path
