"""JIT-compiled resampling and color mapping kernels.

Same arithmetic as heatsmith.core.resample and heatsmith.core.colormap,
written as explicit loops. Every kernel is data-parallel over output
rows via numba.prange: each iteration reads the immutable input and writes
a disjoint output row, so no accumulators are shared.
"""

from __future__ import annotations

import numba as nb
import numpy as np

from heatsmith.core.resample import sample_positions
from heatsmith.core.types import LUTData, validate_domain


@nb.njit(parallel=True, cache=True)
def _resample_rows_numba(
    grid: np.ndarray,
    lower: np.ndarray,
    upper: np.ndarray,
    frac: np.ndarray,
) -> np.ndarray:
    """Resample along axis 1 (x).

    Args:
        grid: (H, W) float64.
        lower, upper: (n_out,) int64 clamped neighbor indices.
        frac: (n_out,) float64 blend fractions.

    Returns:
        (H, n_out) float64.
    """
    H = grid.shape[0]
    n_out = lower.shape[0]
    out = np.empty((H, n_out), dtype=np.float64)

    for y in nb.prange(H):
        for x in range(n_out):
            lo = grid[y, lower[x]]
            if lower[x] == upper[x]:
                out[y, x] = lo
            else:
                out[y, x] = lo + frac[x] * (grid[y, upper[x]] - lo)

    return out


@nb.njit(parallel=True, cache=True)
def _resample_cols_numba(
    grid: np.ndarray,
    lower: np.ndarray,
    upper: np.ndarray,
    frac: np.ndarray,
) -> np.ndarray:
    """Resample along axis 0 (y).

    Args:
        grid: (H, W) float64.
        lower, upper: (n_out,) int64 clamped neighbor indices.
        frac: (n_out,) float64 blend fractions.

    Returns:
        (n_out, W) float64.
    """
    W = grid.shape[1]
    n_out = lower.shape[0]
    out = np.empty((n_out, W), dtype=np.float64)

    for y in nb.prange(n_out):
        y0 = lower[y]
        y1 = upper[y]
        f = frac[y]
        for x in range(W):
            lo = grid[y0, x]
            if y0 == y1:
                out[y, x] = lo
            else:
                out[y, x] = lo + f * (grid[y1, x] - lo)

    return out


@nb.njit(parallel=True, cache=True)
def _map_colors_numba(
    values: np.ndarray,
    lut: np.ndarray,
    domain_min: float,
    domain_max: float,
) -> np.ndarray:
    """Quantize (H, W) values through an (R, 4) uint8 LUT.

    Returns:
        (H, W, 4) uint8.
    """
    H = values.shape[0]
    W = values.shape[1]
    R = lut.shape[0]
    top = R - 1
    span = domain_max - domain_min
    out = np.empty((H, W, 4), dtype=np.uint8)

    for y in nb.prange(H):
        for x in range(W):
            t = (values[y, x] - domain_min) / span
            if np.isnan(t):
                idx = 0
            else:
                s = np.floor(t * top + 0.5)
                if s <= 0.0:
                    idx = 0
                elif s >= top:
                    idx = top
                else:
                    idx = int(s)
            for ch in range(4):
                out[y, x, ch] = lut[idx, ch]

    return out


def resample_grid_numba(grid: np.ndarray, out_width: int, out_height: int) -> np.ndarray:
    """Two-pass separable bilinear resampling (Numba JIT).

    Args:
        grid: (H, W) float64 input grid.
        out_width: Target width.
        out_height: Target height.

    Returns:
        (out_height, out_width) float64 grid.
    """
    grid = np.ascontiguousarray(grid, dtype=np.float64)

    lower, upper, frac = sample_positions(out_width, grid.shape[1])
    intermediate = _resample_rows_numba(grid, lower, upper, frac)

    lower, upper, frac = sample_positions(out_height, grid.shape[0])
    return _resample_cols_numba(intermediate, lower, upper, frac)


def map_colors_numba(
    resampled: np.ndarray,
    lut: LUTData,
    domain_min: float,
    domain_max: float,
) -> np.ndarray:
    """Map a scalar grid to an RGBA pixel buffer (Numba JIT).

    Returns:
        New (H, W, 4) uint8 array.
    """
    validate_domain(domain_min, domain_max)
    values = np.ascontiguousarray(resampled, dtype=np.float64)
    return _map_colors_numba(
        values,
        np.ascontiguousarray(lut.array),
        float(domain_min),
        float(domain_max),
    )
