"""File I/O for LUT source images, scalar data, and rendered heatmaps.

This is the boundary collaborator around the renderer: decoding and
encoding are delegated to imageio v3, scalar data to numpy. The core
modules only ever see decoded arrays.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import imageio.v3 as iio
import numpy as np

from heatsmith.config import (
    DATA_EXTENSIONS,
    IMAGE_EXTENSIONS,
    MAX_GRID_DIMENSION,
    MAX_GRID_PIXELS,
    OPAQUE_ALPHA,
    OUTPUT_EXTENSIONS,
)
from heatsmith.errors import DataFormatError, ImageDimensionError, ImageFormatError

logger = logging.getLogger(__name__)


def validate_input_path(filepath: str | Path, allowed: frozenset = IMAGE_EXTENSIONS) -> Path:
    """Validate an input file path.

    Args:
        filepath: Path to validate.
        allowed: Permitted lower-case suffixes.

    Returns:
        Resolved Path object.

    Raises:
        FileNotFoundError: If file does not exist.
        ImageFormatError: If the path is not a file or the extension is
            not allowed.
    """
    path = Path(filepath).resolve()

    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    if not path.is_file():
        raise ImageFormatError(f"Not a regular file: {path}")

    if path.suffix.lower() not in allowed:
        raise ImageFormatError(
            f"Unsupported file format: {path.suffix}. "
            f"Supported: {', '.join(sorted(allowed))}"
        )

    return path


def validate_output_path(filepath: str | Path) -> Path:
    """Validate an output file path.

    Raises:
        FileNotFoundError: If parent directory does not exist.
        PermissionError: If the parent directory is not writable.
    """
    path = Path(filepath).resolve()

    if not path.parent.exists():
        raise FileNotFoundError(f"Output directory does not exist: {path.parent}")

    if not os.access(path.parent, os.W_OK):
        raise PermissionError(f"Cannot write to directory: {path.parent}")

    return path


def _to_rgba8(raw: np.ndarray) -> np.ndarray:
    """Convert a decoded image of any common layout to (H, W, 4) uint8."""
    if raw.dtype == np.uint8:
        data = raw
    elif raw.dtype == np.uint16:
        data = (raw >> 8).astype(np.uint8)
    elif raw.dtype in (np.float32, np.float64):
        data = (np.clip(raw, 0.0, 1.0) * 255).astype(np.uint8)
    else:
        raise ImageFormatError(f"Unsupported image dtype: {raw.dtype}")

    if data.ndim == 2:
        data = np.repeat(data[:, :, np.newaxis], 3, axis=2)
    elif data.ndim == 3 and data.shape[2] == 1:
        data = np.repeat(data, 3, axis=2)
    elif data.ndim == 3 and data.shape[2] == 2:
        # Gray + alpha
        data = np.concatenate([np.repeat(data[:, :, :1], 3, axis=2), data[:, :, 1:]], axis=2)
    elif data.ndim != 3 or data.shape[2] not in (3, 4):
        raise ImageFormatError(f"Unsupported image shape: {data.shape}")

    if data.shape[2] == 3:
        alpha = np.full(data.shape[:2] + (1,), OPAQUE_ALPHA, dtype=np.uint8)
        data = np.concatenate([data, alpha], axis=2)

    return np.ascontiguousarray(data)


def load_lut_image(filepath: str | Path) -> np.ndarray:
    """Load a single-row LUT source image.

    Args:
        filepath: Path to an image exactly one pixel high.

    Returns:
        (1, W, 4) uint8 RGBA array.

    Raises:
        ImageDimensionError: If the image is not one row high.
        ImageFormatError: If the format or pixel layout is unsupported.
    """
    path = validate_input_path(filepath)
    logger.debug("Loading LUT image: %s", path)

    try:
        raw = iio.imread(str(path))
    except (OSError, ValueError) as e:
        raise ImageFormatError(f"Failed to decode {path}: {e}") from e

    rgba = _to_rgba8(np.asarray(raw))
    if rgba.shape[0] != 1:
        raise ImageDimensionError(
            f"LUT image must be exactly 1 pixel high, got {rgba.shape[0]}: {path}"
        )

    logger.info("Loaded LUT image %s (%d px wide)", path.name, rgba.shape[1])
    return rgba


def load_scalar_grid(filepath: str | Path) -> np.ndarray:
    """Load a scalar field from .npy, .csv or whitespace-delimited .txt.

    A 1D array is treated as a single row.

    Returns:
        (H, W) float64 array.

    Raises:
        DataFormatError: If the file cannot be parsed as a 2D numeric grid.
    """
    path = validate_input_path(filepath, allowed=DATA_EXTENSIONS)
    suffix = path.suffix.lower()

    try:
        if suffix == ".npy":
            arr = np.load(path, allow_pickle=False)
        elif suffix == ".csv":
            arr = np.loadtxt(path, delimiter=",", dtype=np.float64, ndmin=2)
        else:
            arr = np.loadtxt(path, dtype=np.float64, ndmin=2)
    except (OSError, ValueError) as e:
        raise DataFormatError(f"Cannot parse scalar data in {path}: {e}") from e

    arr = np.asarray(arr, dtype=np.float64)
    if arr.ndim == 1:
        arr = arr[np.newaxis, :]
    if arr.ndim != 2 or arr.size == 0:
        raise DataFormatError(f"Expected a non-empty 2D grid, got shape {arr.shape}")

    height, width = arr.shape
    if max(width, height) > MAX_GRID_DIMENSION or arr.size > MAX_GRID_PIXELS:
        raise DataFormatError(f"Grid {width}x{height} exceeds size limits")

    logger.info("Loaded %dx%d scalar grid from %s", width, height, path.name)
    return np.ascontiguousarray(arr)


def save_pixels(pixels: np.ndarray, filepath: str | Path) -> Path:
    """Save an RGBA pixel buffer to an image file.

    Args:
        pixels: (H, W, 4) uint8 array.
        filepath: Output path; the format follows the extension.

    Returns:
        Resolved output path.
    """
    path = validate_output_path(filepath)

    if pixels.ndim != 3 or pixels.shape[2] != 4 or pixels.dtype != np.uint8:
        raise ImageFormatError(
            f"Expected (H, W, 4) uint8 pixels, got {pixels.shape} {pixels.dtype}"
        )
    if path.suffix.lower() not in OUTPUT_EXTENSIONS:
        raise ImageFormatError(
            f"Unsupported output format: {path.suffix}. "
            f"Supported: {', '.join(sorted(OUTPUT_EXTENSIONS))}"
        )

    iio.imwrite(str(path), pixels)
    logger.info("Saved image: %s (%dx%d)", path, pixels.shape[1], pixels.shape[0])
    return path
