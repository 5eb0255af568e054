"""Core data types, enums, and grid helpers for HeatSmith.

CRITICAL CONVENTION:
    Scalar grids have shape (height, width) and are C-contiguous, so the
    flat row-major index is flat = x + y * width.
    Pixel buffers have shape (height, width, 4) uint8, channels RGBA.
    This convention MUST be used consistently in ALL modules.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union

import numpy as np

from heatsmith.config import (
    DEFAULT_BACKEND,
    DEFAULT_LUT_RESOLUTION,
    DEFAULT_WORKERS,
    MAX_GRID_DIMENSION,
    MAX_GRID_PIXELS,
    MAX_LUT_RESOLUTION,
    MIN_LUT_RESOLUTION,
    RGBA_CHANNELS,
)
from heatsmith.errors import ConfigurationError


ScalarData = Union[np.ndarray, Sequence[float]]


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Backend(str, Enum):
    """Implementation used for resampling and color mapping."""
    NUMPY = "numpy"
    NUMBA = "numba"
    SCIPY = "scipy"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _is_integer(value) -> bool:
    """True for int-like values (numpy integers included), never for bool or float."""
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def validate_dimensions(width: int, height: int, what: str = "grid") -> None:
    """Check grid dimensions before memory allocation."""
    if not (_is_integer(width) and _is_integer(height)):
        raise ConfigurationError(f"Non-integer {what} dimensions: {width}x{height}")
    if width <= 0 or height <= 0:
        raise ConfigurationError(f"Invalid {what} dimensions: {width}x{height}")
    if width > MAX_GRID_DIMENSION or height > MAX_GRID_DIMENSION:
        raise ConfigurationError(
            f"{what.capitalize()} dimension {max(width, height)} exceeds "
            f"maximum allowed {MAX_GRID_DIMENSION}"
        )
    if width * height > MAX_GRID_PIXELS:
        raise ConfigurationError(
            f"{what.capitalize()} has {width * height:,} cells, exceeds "
            f"maximum allowed {MAX_GRID_PIXELS:,}"
        )


def validate_domain(domain_min: float, domain_max: float) -> None:
    """Require finite bounds with domain_min < domain_max."""
    if not (math.isfinite(domain_min) and math.isfinite(domain_max)):
        raise ConfigurationError(
            f"Domain bounds must be finite, got [{domain_min}, {domain_max}]"
        )
    if domain_min >= domain_max:
        raise ConfigurationError(
            f"domain_min must be < domain_max, got [{domain_min}, {domain_max}]"
        )


def validate_lut_resolution(resolution: int) -> None:
    if not _is_integer(resolution):
        raise ConfigurationError(f"LUT resolution must be an integer, got {resolution}")
    if resolution < MIN_LUT_RESOLUTION or resolution > MAX_LUT_RESOLUTION:
        raise ConfigurationError(
            f"LUT resolution must be {MIN_LUT_RESOLUTION}-{MAX_LUT_RESOLUTION}, "
            f"got {resolution}"
        )


def as_scalar_grid(data: ScalarData, width: int, height: int) -> np.ndarray:
    """Shape raw scalar data into a (height, width) float64 grid.

    Args:
        data: Flat row-major sequence of width*height values, or an
            array already shaped (height, width).
        width: Grid width.
        height: Grid height.

    Returns:
        (height, width) float64 C-contiguous array. Never aliases a
        caller-owned float64 array.

    Raises:
        ConfigurationError: If dimensions are invalid or the data size
            does not match width*height.
    """
    validate_dimensions(width, height, "input")
    arr = np.array(data, dtype=np.float64, copy=True)

    if arr.ndim == 2:
        if arr.shape != (height, width):
            raise ConfigurationError(
                f"Grid shape {arr.shape} != expected {(height, width)}"
            )
        return np.ascontiguousarray(arr)

    if arr.ndim != 1:
        raise ConfigurationError(f"Expected flat or 2D data, got shape {arr.shape}")
    if arr.size != width * height:
        raise ConfigurationError(
            f"Data has {arr.size} values, expected {width}*{height} = {width * height}"
        )
    return arr.reshape(height, width)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass
class LUTData:
    """Container for a discretized 1D color LUT."""
    array: np.ndarray  # (R, 4) uint8, channels RGBA
    resolution: int    # R (number of entries)

    def __post_init__(self):
        expected = (self.resolution, RGBA_CHANNELS)
        if self.array.shape != expected:
            raise ValueError(f"LUT array shape {self.array.shape} != expected {expected}")
        if self.array.dtype != np.uint8:
            raise ValueError(f"LUT array dtype {self.array.dtype} != uint8")

    def __len__(self) -> int:
        return self.resolution

    def __getitem__(self, index: int) -> tuple[int, int, int, int]:
        r, g, b, a = self.array[index]
        return int(r), int(g), int(b), int(a)

    @property
    def first(self) -> tuple[int, int, int, int]:
        return self[0]

    @property
    def last(self) -> tuple[int, int, int, int]:
        return self[self.resolution - 1]


@dataclass(frozen=True)
class RenderConfig:
    """Immutable configuration for a HeatmapRenderer."""
    output_width: int
    output_height: int
    domain_min: float = 0.0
    domain_max: float = 1.0
    lut_resolution: int = DEFAULT_LUT_RESOLUTION
    backend: Backend = Backend(DEFAULT_BACKEND)
    workers: int = DEFAULT_WORKERS

    def __post_init__(self):
        validate_dimensions(self.output_width, self.output_height, "output")
        validate_lut_resolution(self.lut_resolution)
        validate_domain(self.domain_min, self.domain_max)
        try:
            backend = Backend(self.backend)
        except ValueError:
            valid = ", ".join(b.value for b in Backend)
            raise ConfigurationError(
                f"Unknown backend {self.backend!r}. Choose one of: {valid}"
            ) from None
        # frozen dataclass: normalize plain strings to the enum
        object.__setattr__(self, "backend", backend)
        if self.workers < 1:
            raise ConfigurationError(f"workers must be >= 1, got {self.workers}")
