"""Path tracing integrator for Monte Carlo light transport.

This module implements the rendering kernel: for every pixel it draws a
jittered camera ray, follows it through the scene bouncing off materials
until it escapes to the sky, is absorbed or runs out of bounces, and folds
the result into a running per-pixel mean.

Color evaluation follows the recursive definition

    color(ray, 0)     = black
    color(ray, depth) = attenuation * color(scattered, depth - 1)  on scatter
                      = black                                        on absorb
                      = sky(ray.direction)                           on miss

Taichi functions are inlined and cannot recurse, so ray_color() unrolls the
recursion into a loop of at most ``depth`` iterations carrying the product
of attenuations seen so far.

Key features:
    - Material dispatch (Lambertian, Metal, Dielectric)
    - Bounce budget with black on exhaustion
    - Sky gradient background from white to light blue
    - Progressive running-mean accumulation per pixel

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.core.integrator import render_image, setup_render_target
    >>> from src.pathtracer.scene.sphere_world import create_two_sphere_scene
    >>> from src.pathtracer.camera.thin_lens import setup_camera
    >>>
    >>> scene, camera = create_two_sphere_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(camera.image_width, camera.image_height)
    >>> render_image(num_samples=10, max_depth=10)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.pathtracer.camera.thin_lens import get_ray
from src.pathtracer.core.interval import color_interval, hit_interval, interval_clamp
from src.pathtracer.core.ray import Ray, make_ray, unit_vector
from src.pathtracer.materials.scatter import scatter
from src.pathtracer.scene.intersection import intersect_scene

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Default bounce budget per camera ray
DEFAULT_MAX_DEPTH = 10

# Sky gradient endpoints (horizon and zenith)
SKY_HORIZON_COLOR = (1.0, 1.0, 1.0)
SKY_ZENITH_COLOR = (0.5, 0.7, 1.0)


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Running mean of the samples, indexed [column, row] with row 0 at the top
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Sample count per pixel
_sample_count = ti.field(dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions and clears the buffers.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum
            supported size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffers to zero."""
    _color_buffer.fill(0.0)
    _sample_count.fill(0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Color Evaluation
# =============================================================================


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Background radiance for a ray that escapes the scene.

    Linear blend from white at the horizon (and below) to light blue
    straight up, keyed on the normalized direction's y component.
    """
    unit_direction = unit_vector(direction)
    alpha = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - alpha) * vec3(1.0, 1.0, 1.0) + alpha * vec3(0.5, 0.7, 1.0)


@ti.func
def ray_color(ray: Ray, depth: ti.i32) -> vec3:
    """Estimate the radiance carried back along a ray.

    Args:
        ray: The ray to trace.
        depth: Remaining bounce budget. 0 yields black.

    Returns:
        The radiance (RGB): the sky color scaled by every attenuation along
        the path, or black if the path was absorbed or ran out of bounces.
    """
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    current = make_ray(ray.origin, ray.direction)

    # Active flag for path continuation
    active = 1

    for _ in range(depth):
        if active == 1:
            rec = intersect_scene(current, hit_interval())

            if rec.hit == 0:
                color = throughput * sky_color(current.direction)
                active = 0
            else:
                scattered, attenuation, did_scatter = scatter(current, rec)

                if did_scatter == 0:
                    active = 0
                else:
                    throughput *= attenuation
                    current = scattered

    return color


@ti.func
def accumulate_sample(mean: vec3, sample: vec3, n: ti.i32) -> vec3:
    """Fold the n-th sample into a running mean.

    mean_n = mean_{n-1} + (x_n - mean_{n-1}) / n. Averaging any number of
    identical samples returns that sample exactly.
    """
    return mean + (sample - mean) / ti.cast(n, ti.f32)


@ti.func
def sanitize_sample(color: vec3) -> vec3:
    """Map NaN channels to 0 and clamp the rest into [0, 1].

    +inf becomes 1 and -inf becomes 0, the same policy as the host-side
    readback in get_linear_image_numpy() and output.ppm.to_pixels().
    """
    bounds = color_interval()
    result = vec3(0.0, 0.0, 0.0)
    for c in ti.static(range(3)):
        if not tm.isnan(color[c]):
            result[c] = interval_clamp(bounds, color[c])
    return result


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_one_spp(width: ti.i32, height: ti.i32, max_depth: ti.i32):
    """Render one sample per pixel and accumulate.

    Pixels are independent; the scene and camera are read-only here.
    """
    for i, j in ti.ndrange(width, height):
        ray = get_ray(i, j)
        color = sanitize_sample(ray_color(ray, max_depth))

        _sample_count[i, j] += 1
        n = _sample_count[i, j]
        _color_buffer[i, j] = accumulate_sample(_color_buffer[i, j], color, n)


@ti.kernel
def _render_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32, max_depth: ti.i32) -> vec3:
    """Render a single sample for a specific pixel."""
    return ray_color(get_ray(pixel_i, pixel_j), max_depth)


@ti.kernel
def _trace_single_ray(origin: vec3, direction: vec3, max_depth: ti.i32) -> vec3:
    """Evaluate ray_color for an explicit ray."""
    return ray_color(make_ray(origin, direction), max_depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_sample(
    pixel_i: int,
    pixel_j: int,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[float, float, float]:
    """Render a single sample for a specific pixel.

    Args:
        pixel_i: Column index (0 = left).
        pixel_j: Row index (0 = top).
        max_depth: Bounce budget.

    Returns:
        Tuple of (R, G, B) linear color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    color = _render_single_pixel(pixel_i, pixel_j, max_depth)
    return (float(color[0]), float(color[1]), float(color[2]))


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[float, float, float]:
    """Evaluate the color of one explicit ray against the current scene.

    Args:
        origin: Ray origin.
        direction: Ray direction (need not be normalized).
        max_depth: Bounce budget.

    Returns:
        Tuple of (R, G, B) linear color values.
    """
    color = _trace_single_ray(
        vec3(origin[0], origin[1], origin[2]),
        vec3(direction[0], direction[1], direction[2]),
        max_depth,
    )
    return (float(color[0]), float(color[1]), float(color[2]))


def render_image(num_samples: int = 1, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
    """Render the image with the specified number of samples per pixel.

    Progressively accumulates samples into the color buffer. Can be called
    multiple times to add more samples for convergence.

    Args:
        num_samples: Number of samples to render per pixel.
        max_depth: Bounce budget for every camera ray.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If max_depth is negative.
    """
    _check_render_target_initialized()
    if max_depth < 0:
        raise ValueError(f"Max depth = {max_depth} must not be negative.")

    width, height = get_image_dimensions()

    for _ in range(num_samples):
        _render_one_spp(width, height, max_depth)


def get_total_samples() -> int:
    """Get the number of samples accumulated per pixel so far.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    return int(_sample_count[0, 0])


def get_linear_image_numpy() -> npt.NDArray[np.float32]:
    """Get the accumulated image as a NumPy array.

    Returns the mean color per pixel clamped to [0, 1], without gamma.
    The array shape is (height, width, 3), row 0 at the top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    full_image = _color_buffer.to_numpy()
    image = full_image[:width, :height, :]

    # (width, height, 3) -> (height, width, 3)
    image = np.transpose(image, (1, 0, 2))

    image = np.clip(np.nan_to_num(image, nan=0.0, posinf=1.0, neginf=0.0), 0.0, 1.0)

    return image.astype(np.float32)
