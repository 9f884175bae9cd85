"""Progressive renderer for iterative sample accumulation.

This module wraps the integrator and image sinks behind one object bound
to a camera:
- Sample accumulation that can be continued across calls
- Batch rendering with progress callbacks or a generator
- Conversion to 8-bit pixels and PPM/PNG output

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.core.progressive import ProgressiveRenderer
    >>> from src.pathtracer.scene.sphere_world import create_two_sphere_scene
    >>>
    >>> scene, camera = create_two_sphere_scene(image_width=200)
    >>> renderer = ProgressiveRenderer(camera)
    >>> renderer.render()  # camera.samples_per_pixel samples
    >>> renderer.write_ppm("image.ppm")
"""

import logging
from collections.abc import Callable, Generator
from pathlib import Path

import numpy as np
import numpy.typing as npt

from src.pathtracer.camera.thin_lens import ThinLensCamera, setup_camera
from src.pathtracer.core.integrator import (
    clear_render_target,
    get_linear_image_numpy,
    get_total_samples,
    render_image,
    setup_render_target,
)
from src.pathtracer.output.ppm import PathType, save_png_from_array, to_pixels, write_ppm_from_array

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (current_samples, total_target_samples)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """A renderer that accumulates samples for one camera.

    The renderer derives the camera frame and sizes the render target on
    construction. Samples go into the global integrator buffers, so only
    one renderer should be active at a time.

    Attributes:
        camera: The camera configuration being rendered.
    """

    def __init__(self, camera: ThinLensCamera) -> None:
        """Set up the camera and render target.

        Args:
            camera: Camera configuration (image size, lens, sampling).

        Raises:
            ValueError: If the camera is degenerate or the image exceeds the
                maximum supported size.
        """
        self.camera = camera
        setup_camera(camera)
        setup_render_target(camera.image_width, camera.image_height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.camera.image_width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.camera.image_height

    @property
    def sample_count(self) -> int:
        """Get the current number of accumulated samples per pixel."""
        return get_total_samples()

    def reset(self) -> None:
        """Discard accumulated samples, keeping the camera and image size."""
        clear_render_target()

    def render(
        self,
        num_samples: int | None = None,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Accumulate samples with an optional progress callback.

        Can be called multiple times to continue refining the image.

        Args:
            num_samples: Number of samples to add. Defaults to the camera's
                samples_per_pixel.
            batch_size: Number of samples to render before each callback.
            callback: Called after each batch with
                (current_total_samples, target_total_samples).
        """
        for current, target in self.render_progressive(num_samples, batch_size):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_samples: int | None = None,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Accumulate samples, yielding progress after each batch.

        Args:
            num_samples: Number of samples to add. Defaults to the camera's
                samples_per_pixel.
            batch_size: Number of samples to render before each yield.

        Yields:
            Tuple of (current_total_samples, target_total_samples).

        Raises:
            ValueError: If batch_size is not positive.
        """
        if num_samples is None:
            num_samples = self.camera.samples_per_pixel
        if num_samples <= 0:
            return
        if batch_size <= 0:
            raise ValueError(f"Batch size = {batch_size} must be positive.")

        target_samples = self.sample_count + num_samples
        logger.info(
            "Rendering %dx%d at %d spp, max depth %d",
            self.width,
            self.height,
            num_samples,
            self.camera.max_depth,
        )

        remaining = num_samples
        while remaining > 0:
            batch = min(batch_size, remaining)
            render_image(batch, max_depth=self.camera.max_depth)
            remaining -= batch
            logger.debug("Samples remaining: %d", remaining)
            yield (self.sample_count, target_samples)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the linear image, clamped to [0, 1], shape (height, width, 3)."""
        return get_linear_image_numpy()

    def get_pixels(self) -> npt.NDArray[np.uint8]:
        """Get the gamma-2 corrected 8-bit image, shape (height, width, 3)."""
        return to_pixels(self.get_image_numpy())

    def write_ppm(self, path: PathType) -> Path:
        """Write the current image as an ASCII PPM file.

        Raises:
            OSError: If the file cannot be created or written.
        """
        return write_ppm_from_array(path, self.get_pixels())

    def save_png(self, path: PathType) -> Path:
        """Save the current image as a PNG file."""
        return save_png_from_array(path, self.get_pixels())

    def __repr__(self) -> str:
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count})"
        )
