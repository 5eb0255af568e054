"""Separable bilinear resampling of scalar grids.

Two 1D passes replace a full 2D bilinear lookup: pass 1 resamples along x
(width), producing an (in_height, out_width) intermediate; pass 2 resamples
that along y (height), producing the final (out_height, out_width) grid.

Output sample i of an n_out-long axis maps to the source position
    val = (i + 0.5) / n_out * n_in - 0.5
so that pixel centers align. Positions outside [0, n_in - 1] clamp to the
edge value; nothing is extrapolated or wrapped.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np
from scipy.ndimage import map_coordinates

logger = logging.getLogger(__name__)


def source_coordinates(n_out: int, n_in: int) -> np.ndarray:
    """Pixel-center source coordinate for every output sample on one axis."""
    x = np.arange(n_out, dtype=np.float64)
    return (x + 0.5) / n_out * n_in - 0.5


def sample_positions(n_out: int, n_in: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Clamped neighbor indices and blend fractions for one axis.

    Returns:
        (lower, upper, frac): (n_out,) int64, (n_out,) int64, (n_out,) float64.
        lower == upper wherever the position falls outside the source
        range (or n_in == 1), in which case frac is irrelevant.
    """
    val = source_coordinates(n_out, n_in)
    lower = np.maximum(0, np.floor(val)).astype(np.int64)
    upper = np.minimum(n_in - 1, np.ceil(val)).astype(np.int64)
    frac = val - lower
    return lower, upper, frac


def _blend(lo: np.ndarray, hi: np.ndarray, frac: np.ndarray, same: np.ndarray) -> np.ndarray:
    with np.errstate(invalid="ignore"):
        blended = lo + frac * (hi - lo)
    # Edge-replicated samples take the boundary value verbatim, even for inf
    return np.where(same, lo, blended)


def _resample_rows(grid: np.ndarray, lower, upper, frac) -> np.ndarray:
    """Resample every row of grid along axis 1."""
    same = (lower == upper)[np.newaxis, :]
    return _blend(grid[:, lower], grid[:, upper], frac[np.newaxis, :], same)


def _resample_cols(grid: np.ndarray, lower, upper, frac) -> np.ndarray:
    """Resample every column of grid along axis 0."""
    same = (lower == upper)[:, np.newaxis]
    return _blend(grid[lower, :], grid[upper, :], frac[:, np.newaxis], same)


def _split(n: int, workers: int) -> list[slice]:
    """Split range(n) into at most `workers` contiguous, disjoint slices."""
    bounds = np.linspace(0, n, min(workers, n) + 1).astype(int)
    return [slice(a, b) for a, b in zip(bounds[:-1], bounds[1:]) if b > a]


def resample_axis(grid: np.ndarray, n_out: int, axis: int, workers: int = 1) -> np.ndarray:
    """Linearly resample a 2D grid along one axis.

    Args:
        grid: (H, W) float64 array.
        n_out: Output length along `axis`.
        axis: 1 resamples along x (width), 0 along y (height).
        workers: Threads to split the independent rows/columns across.

    Returns:
        New float64 array with grid.shape[axis] replaced by n_out.
    """
    if axis not in (0, 1):
        raise ValueError(f"axis must be 0 or 1, got {axis}")

    n_in = grid.shape[axis]
    lower, upper, frac = sample_positions(n_out, n_in)
    kernel = _resample_rows if axis == 1 else _resample_cols

    if workers <= 1:
        return kernel(grid, lower, upper, frac)

    # Blocks span the axis that is NOT resampled, so each one is independent
    out_shape = (grid.shape[0], n_out) if axis == 1 else (n_out, grid.shape[1])
    out = np.empty(out_shape, dtype=np.float64)
    other = 1 - axis
    blocks = _split(grid.shape[other], workers)

    def run_block(block: slice) -> None:
        if axis == 1:
            out[block, :] = kernel(grid[block, :], lower, upper, frac)
        else:
            out[:, block] = kernel(grid[:, block], lower, upper, frac)

    # numpy releases the GIL inside the gather/blend operations
    with ThreadPoolExecutor(max_workers=len(blocks)) as pool:
        for future in [pool.submit(run_block, b) for b in blocks]:
            future.result()

    return out


def resample_grid(
    grid: np.ndarray,
    out_width: int,
    out_height: int,
    workers: int = 1,
) -> np.ndarray:
    """Two-pass separable bilinear resampling.

    Args:
        grid: (H, W) float64 input grid.
        out_width: Target width.
        out_height: Target height.
        workers: Threads per pass.

    Returns:
        (out_height, out_width) float64 grid.
    """
    logger.debug(
        "Resampling %dx%d -> %dx%d (workers=%d)",
        grid.shape[1], grid.shape[0], out_width, out_height, workers,
    )
    intermediate = resample_axis(grid, out_width, axis=1, workers=workers)
    return resample_axis(intermediate, out_height, axis=0, workers=workers)


def resample_grid_scipy(grid: np.ndarray, out_width: int, out_height: int) -> np.ndarray:
    """Bilinear resampling through scipy's map_coordinates.

    Equivalent to resample_grid: order=1 is bilinear, and mode="nearest"
    replicates edge values like the clamped separable passes. When the grid
    holds non-finite values, samples lying on a source row or column are
    taken from the separable passes instead, since map_coordinates still
    weights the zero-weight neighbor and 0 * inf is nan.

    Args:
        grid: (H, W) float64 input grid.
        out_width: Target width.
        out_height: Target height.

    Returns:
        (out_height, out_width) float64 grid.
    """
    ys = source_coordinates(out_height, grid.shape[0])
    xs = source_coordinates(out_width, grid.shape[1])
    yy, xx = np.meshgrid(ys, xs, indexing="ij")

    result = map_coordinates(
        grid,
        [yy.ravel(), xx.ravel()],
        order=1,
        mode="nearest",
    ).reshape((out_height, out_width))

    if np.isfinite(grid).all():
        return result

    y_lower, y_upper, y_frac = sample_positions(out_height, grid.shape[0])
    x_lower, x_upper, x_frac = sample_positions(out_width, grid.shape[1])

    on_col = x_lower == x_upper
    if on_col.any():
        result[:, on_col] = _resample_cols(grid[:, x_lower[on_col]], y_lower, y_upper, y_frac)
    on_row = y_lower == y_upper
    if on_row.any():
        result[on_row, :] = _resample_rows(grid[y_lower[on_row], :], x_lower, x_upper, x_frac)
    return result
