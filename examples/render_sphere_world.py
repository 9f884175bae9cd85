#!/usr/bin/env python3
"""Render a sphere scene to a PPM image.

This script builds one of the standard sphere scenes, renders it with
progressive accumulation and writes the result as an ASCII PPM file,
optionally also as a PNG.

Usage:
    python -m examples.render_sphere_world [options]

Options:
    --width WIDTH       Image width in pixels, 16:9 aspect (default: 480)
    --samples SAMPLES   Number of samples per pixel (default: 10)
    --depth DEPTH       Maximum bounces per ray (default: 10)
    --scene NAME        "world" or "two-spheres" (default: world)
    --seed SEED         Seed for the scene layout and the kernel RNG
    --output OUTPUT     Output PPM path (default: image.ppm)
    --png PATH          Also save a PNG to this path
    --arch ARCH         Taichi backend: cpu or gpu (default: cpu)
    --batch-size SIZE   Samples per progress update (default: 1)
    --verbose           Log every scanline and batch
    --quiet             Only log errors

Example:
    python -m examples.render_sphere_world --width 320 --samples 50 --seed 7
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_sphere_world")

SCENES = ("world", "two-spheres")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a sphere scene to a PPM image.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=480,
        help="Image width in pixels, 16:9 aspect (default: 480)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=10,
        help="Number of samples per pixel (default: 10)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=10,
        help="Maximum bounces per ray (default: 10)",
    )
    parser.add_argument(
        "--scene",
        choices=SCENES,
        default="world",
        help="Scene to render (default: world)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed for the scene layout and the kernel RNG (default: 0)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="image.ppm",
        help="Output PPM path (default: image.ppm)",
    )
    parser.add_argument(
        "--png",
        type=str,
        default=None,
        help="Also save a PNG to this path",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=1,
        help="Samples per progress update (default: 1)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", action="store_true", help="Log every scanline and batch")
    verbosity.add_argument("--quiet", action="store_true", help="Only log errors")
    return parser.parse_args(argv)


def render_scene(
    scene_name: str = "world",
    width: int = 480,
    num_samples: int = 10,
    max_depth: int = 10,
    seed: int = 0,
    output_path: str = "image.ppm",
    png_path: str | None = None,
    batch_size: int = 1,
) -> Path:
    """Render a standard scene and write it to disk.

    Args:
        scene_name: "world" or "two-spheres".
        width: Image width in pixels.
        num_samples: Number of samples per pixel.
        max_depth: Maximum bounces per ray.
        seed: Seed for the scene layout.
        output_path: PPM output path.
        png_path: Optional PNG output path.
        batch_size: Number of samples to render between progress updates.

    Returns:
        Path to the written PPM file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.pathtracer.core.progressive import ProgressiveRenderer
    from src.pathtracer.scene.sphere_world import (
        create_sphere_world_scene,
        create_two_sphere_scene,
    )

    if scene_name == "world":
        scene, camera = create_sphere_world_scene(
            seed=seed, image_width=width, samples_per_pixel=num_samples, max_depth=max_depth
        )
    else:
        scene, camera = create_two_sphere_scene(
            image_width=width, samples_per_pixel=num_samples, max_depth=max_depth
        )

    logger.info(
        "Scene %r: %d spheres, %dx%d",
        scene_name,
        scene.get_sphere_count(),
        camera.image_width,
        camera.image_height,
    )

    renderer = ProgressiveRenderer(camera)
    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        elapsed = time.time() - start_time
        samples_per_sec = current / elapsed if elapsed > 0 else 0.0
        logger.info("Progress: %d/%d samples (%.1f spp/s)", current, target, samples_per_sec)

    renderer.render(batch_size=batch_size, callback=progress_callback)

    output_file = renderer.write_ppm(output_path)
    if png_path is not None:
        renderer.save_png(png_path)

    logger.info("Total time: %.2fs", time.time() - start_time)
    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    arch = ti.gpu if args.arch == "gpu" else ti.cpu
    ti.init(arch=arch, random_seed=args.seed)

    try:
        render_scene(
            scene_name=args.scene,
            width=args.width,
            num_samples=args.samples,
            max_depth=args.depth,
            seed=args.seed,
            output_path=args.output,
            png_path=args.png,
            batch_size=args.batch_size,
        )
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
