"""Scalar-to-color mapping through a discretized LUT.

A value v is normalized to t = (v - domain_min) / (domain_max - domain_min),
quantized to idx = round(t * (R - 1)) with round-half-up, clamped to
[0, R - 1], and replaced by lut[idx]. Values outside the domain saturate to
the first/last LUT entry; NaN maps to the first entry.
"""

from __future__ import annotations

import numpy as np

from heatsmith.core.types import LUTData, validate_domain


def map_to_indices(
    values: np.ndarray,
    resolution: int,
    domain_min: float,
    domain_max: float,
) -> np.ndarray:
    """Quantize scalar values to LUT indices.

    Args:
        values: Array of any shape, float.
        resolution: Number of LUT entries R.
        domain_min: Value mapped to index 0.
        domain_max: Value mapped to index R - 1.

    Returns:
        int64 array of the same shape with entries in [0, R - 1].
    """
    validate_domain(domain_min, domain_max)
    top = resolution - 1

    t = (np.asarray(values, dtype=np.float64) - domain_min) / (domain_max - domain_min)
    scaled = np.floor(t * top + 0.5)
    scaled = np.nan_to_num(scaled, nan=0.0, posinf=top, neginf=0.0)
    indices = np.clip(scaled, 0, top).astype(np.int64)

    assert indices.size == 0 or (indices.min() >= 0 and indices.max() <= top), \
        "LUT index out of range after clamping"
    return indices


def map_colors(
    resampled: np.ndarray,
    lut: LUTData,
    domain_min: float,
    domain_max: float,
) -> np.ndarray:
    """Map a scalar grid to an RGBA pixel buffer.

    Args:
        resampled: (H, W) float grid.
        lut: Color LUT.
        domain_min: Scalar shown as the first LUT color.
        domain_max: Scalar shown as the last LUT color.

    Returns:
        New (H, W, 4) uint8 array; pixel [y, x] corresponds to grid [y, x].
    """
    indices = map_to_indices(resampled, lut.resolution, domain_min, domain_max)
    return lut.array[indices]
