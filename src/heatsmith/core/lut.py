"""1D color LUT construction from a single-row source image, and utilities.

All LUTs use the convention: shape (R, 4) uint8, indexed as lut[i, ch]
with channels RGBA.
"""

from __future__ import annotations

import logging

import numpy as np

from heatsmith.config import MIN_SOURCE_WIDTH, OPAQUE_ALPHA, RGBA_CHANNELS
from heatsmith.core.types import LUTData, validate_lut_resolution
from heatsmith.errors import ConfigurationError

logger = logging.getLogger(__name__)


def as_source_row(pixels: np.ndarray) -> np.ndarray:
    """Validate a decoded LUT source image and normalize it to RGBA.

    Args:
        pixels: (1, W, 4) or (1, W, 3) uint8 array. A 3-channel row is
            given an opaque alpha channel.

    Returns:
        (W, 4) uint8 array holding the single source row.

    Raises:
        ConfigurationError: If the image is not exactly one row high,
            is narrower than two pixels, or has an unsupported layout.
    """
    arr = np.asarray(pixels)
    if arr.ndim != 3:
        raise ConfigurationError(
            f"LUT source must be an (H, W, C) image, got shape {arr.shape}"
        )
    height, width, channels = arr.shape
    if height != 1:
        raise ConfigurationError(f"LUT source image height must be 1, got {height}")
    if width < MIN_SOURCE_WIDTH:
        raise ConfigurationError(
            f"LUT source image width must be >= {MIN_SOURCE_WIDTH}, got {width}"
        )
    if arr.dtype != np.uint8:
        raise ConfigurationError(f"LUT source image must be uint8, got {arr.dtype}")

    row = arr[0]
    if channels == RGBA_CHANNELS:
        return row.copy()
    if channels == 3:
        alpha = np.full((width, 1), OPAQUE_ALPHA, dtype=np.uint8)
        return np.concatenate([row, alpha], axis=1)
    raise ConfigurationError(f"Unsupported channel count: {channels}")


def lut_positions(resolution: int, source_width: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Fractional source positions for every LUT entry.

    Entry i samples the source at pos = i / (R - 1) * (W - 1), so the
    first and last entries land exactly on the source endpoints.

    Returns:
        (lower, upper, frac): (R,) int64, (R,) int64, (R,) float64.
    """
    i = np.arange(resolution, dtype=np.float64)
    pos = i / (resolution - 1) * (source_width - 1)
    lower = np.floor(pos).astype(np.int64)
    upper = np.ceil(pos).astype(np.int64)
    frac = pos - lower
    return lower, upper, frac


def build_lut(source: np.ndarray, resolution: int) -> LUTData:
    """Build a discretized RGBA LUT from a single-row source image.

    Each channel is linearly interpolated between the two source pixels
    adjacent to the entry's fractional position, then truncated to a byte.

    Args:
        source: (1, W, 4) or (1, W, 3) uint8 decoded image.
        resolution: Number of LUT entries R (>= 2).

    Returns:
        LUTData with a read-only (R, 4) uint8 array.

    Raises:
        ConfigurationError: On any violated precondition.
    """
    validate_lut_resolution(resolution)
    row = as_source_row(source).astype(np.float64)

    lower, upper, frac = lut_positions(resolution, row.shape[0])
    lo = row[lower]
    hi = row[upper]
    blended = lo + frac[:, np.newaxis] * (hi - lo)

    # Truncate toward zero; blends stay inside [0, 255] by construction
    array = blended.astype(np.uint8)
    array.flags.writeable = False

    logger.debug("Built %d-entry LUT from %d-pixel source row", resolution, row.shape[0])
    return LUTData(array=array, resolution=resolution)


def lut_to_image(lut: LUTData) -> np.ndarray:
    """Return the LUT as a (1, R, 4) uint8 strip image."""
    return lut.array[np.newaxis, :, :].copy()


def lut_stats(lut: LUTData) -> dict:
    """Compute basic statistics of a LUT.

    Returns:
        Dict with min, max, mean per channel, endpoints and monotonicity.
    """
    arr = lut.array.astype(np.int64)
    steps = np.diff(arr, axis=0)
    return {
        "resolution": lut.resolution,
        "min_per_channel": arr.min(axis=0).tolist(),
        "max_per_channel": arr.max(axis=0).tolist(),
        "mean_per_channel": arr.mean(axis=0).tolist(),
        "first": list(lut.first),
        "last": list(lut.last),
        "monotonic_per_channel": [
            bool(np.all(steps[:, ch] >= 0) or np.all(steps[:, ch] <= 0))
            for ch in range(RGBA_CHANNELS)
        ],
    }
