"""Heatmap renderer: builds the LUT once, then renders scalar grids.

This is the single entry point for both the CLI and library callers.

Two-phase usage:
    renderer = HeatmapRenderer(RenderConfig(640, 480, 0.0, 10.0), lut_pixels)
    pixels = renderer.get_heatmap(values, width, height)

The LUT source must already be decoded; loading it (and encoding the
result) belongs to heatsmith.io.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

import numpy as np

from heatsmith.core.colormap import map_colors
from heatsmith.core.lut import build_lut
from heatsmith.core.resample import resample_grid, resample_grid_scipy
from heatsmith.core.types import (
    Backend,
    LUTData,
    RenderConfig,
    ScalarData,
    as_scalar_grid,
)

logger = logging.getLogger(__name__)

Resampler = Callable[[np.ndarray, int, int], np.ndarray]
ColorMapper = Callable[[np.ndarray, LUTData, float, float], np.ndarray]


def _select_backend(config: RenderConfig) -> tuple[Resampler, ColorMapper]:
    """Return the (resample, map) pair implementing config.backend."""
    if config.backend == Backend.NUMBA:
        # Deferred so numpy-only callers do not pay the JIT import
        from heatsmith._numba_kernels.render import map_colors_numba, resample_grid_numba
        return resample_grid_numba, map_colors_numba

    if config.backend == Backend.SCIPY:
        return resample_grid_scipy, map_colors

    workers = config.workers

    def resample(grid: np.ndarray, out_width: int, out_height: int) -> np.ndarray:
        return resample_grid(grid, out_width, out_height, workers=workers)

    return resample, map_colors


class HeatmapRenderer:
    """Render scalar grids as RGBA heatmaps through a fixed color LUT.

    The LUT and configuration are immutable after construction, so one
    renderer may serve concurrent get_heatmap calls; every call allocates
    its own intermediate and output arrays.

    Args:
        config: Output size, domain, LUT resolution and backend.
        source: Decoded (1, W, 4) or (1, W, 3) uint8 LUT source image.

    Raises:
        ConfigurationError: If the config or the LUT source is invalid.
    """

    def __init__(self, config: RenderConfig, source: np.ndarray):
        self._config = config

        t0 = time.perf_counter()
        self._lut = build_lut(source, config.lut_resolution)
        self._resample, self._map = _select_backend(config)

        logger.info(
            "Renderer ready: %dx%d output, %d-entry LUT, domain [%g, %g], "
            "backend=%s (%.3fs)",
            config.output_width, config.output_height, config.lut_resolution,
            config.domain_min, config.domain_max, config.backend.value,
            time.perf_counter() - t0,
        )

    @property
    def config(self) -> RenderConfig:
        return self._config

    @property
    def lut(self) -> LUTData:
        return self._lut

    def resample(self, data: ScalarData, width: int, height: int) -> np.ndarray:
        """Resample raw data to the output size without color mapping.

        Returns:
            (output_height, output_width) float64 grid.
        """
        grid = as_scalar_grid(data, width, height)
        cfg = self._config
        return self._resample(grid, cfg.output_width, cfg.output_height)

    def get_heatmap(self, data: ScalarData, width: int, height: int) -> np.ndarray:
        """Render a scalar grid as a heatmap.

        Args:
            data: Flat row-major sequence of width*height values, or a
                (height, width) array.
            width: Width of the input grid.
            height: Height of the input grid.

        Returns:
            New (output_height, output_width, 4) uint8 RGBA buffer.
        """
        t0 = time.perf_counter()
        cfg = self._config

        resampled = self.resample(data, width, height)
        pixels = self._map(resampled, self._lut, cfg.domain_min, cfg.domain_max)

        logger.debug(
            "Rendered %dx%d -> %dx%d in %.4fs",
            width, height, cfg.output_width, cfg.output_height,
            time.perf_counter() - t0,
        )
        return pixels


def render_heatmap(
    data: ScalarData,
    width: int,
    height: int,
    source: np.ndarray,
    output_width: int,
    output_height: int,
    domain_min: float,
    domain_max: float,
    **options,
) -> np.ndarray:
    """One-shot helper: build a renderer and render a single grid.

    Extra keyword options (lut_resolution, backend, workers) are passed
    to RenderConfig.
    """
    config = RenderConfig(
        output_width=output_width,
        output_height=output_height,
        domain_min=domain_min,
        domain_max=domain_max,
        **options,
    )
    return HeatmapRenderer(config, source).get_heatmap(data, width, height)
