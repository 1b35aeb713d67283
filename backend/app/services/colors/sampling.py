"""
Pixel sampling from already-decoded image buffers.

Decoding and downscaling happen upstream. This module only thins the pixel
grid to every Nth pixel and drops the alpha channel so the clusterer sees a
flat list of RGB points.
"""
from typing import Optional

import numpy as np
from loguru import logger

from app.config import config
from .clustering import InvalidInputError, as_points
from ..observability import performance_tracked


@performance_tracked("pixel_sampling")
def sample_pixels(pixels: np.ndarray, step: Optional[int] = None) -> np.ndarray:
    """
    Keep every ``step``-th pixel in row-major order as RGB points.

    Args:
        pixels: Decoded image as (H, W, 3|4), a (N, 3|4) pixel list, or a
            flat RGBA byte buffer of length 4 * N
        step: Pixel stride (defaults to config.SAMPLE_STEP)

    Returns:
        Sampled RGB points (M, 3) uint8

    Raises:
        InvalidInputError: If the buffer layout is not RGB/RGBA, step < 1,
            or a channel is not a whole number in [0, 255]
    """
    step = config.SAMPLE_STEP if step is None else step
    if not config.validate_sample_step(step):
        raise InvalidInputError(f"Sample step must be >= 1, got {step}")

    arr = np.asarray(pixels)
    if arr.ndim == 1:
        if arr.size % 4 != 0:
            raise InvalidInputError(
                f"Flat buffers must be RGBA (length divisible by 4), got {arr.size}"
            )
        flat = arr.reshape(-1, 4)
    elif arr.ndim == 2:
        flat = arr
    elif arr.ndim == 3:
        flat = arr.reshape(-1, arr.shape[2])
    else:
        raise InvalidInputError(f"Unsupported pixel buffer shape {arr.shape}")

    if flat.shape[1] not in (3, 4):
        raise InvalidInputError(f"Expected 3 or 4 channels, got {flat.shape[1]}")

    # as_points rejects non-finite and out-of-range channels
    rgb = as_points(flat[::step, :3])
    if not np.array_equal(rgb, np.floor(rgb)):
        raise InvalidInputError("Pixel channels must be whole numbers in [0, 255]")

    sampled = rgb.astype(np.uint8)
    logger.debug(f"Sampled {len(sampled)} of {len(flat)} pixels (step={step})")
    return sampled
