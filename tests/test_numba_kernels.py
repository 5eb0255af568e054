"""Tests for the JIT-compiled render kernels."""

from __future__ import annotations

import numpy as np
import pytest

from heatsmith._numba_kernels.render import map_colors_numba, resample_grid_numba
from heatsmith.core.colormap import map_colors
from heatsmith.core.lut import build_lut
from heatsmith.core.resample import resample_grid
from heatsmith.errors import ConfigurationError


class TestResampleNumba:
    """JIT resampling matches the vectorized implementation."""

    @pytest.mark.parametrize("out_w,out_h", [(1, 1), (7, 5), (14, 10), (3, 17), (40, 2)])
    def test_matches_numpy(self, random_grid, out_w, out_h):
        ref = resample_grid(random_grid, out_w, out_h)
        out = resample_grid_numba(random_grid, out_w, out_h)
        np.testing.assert_array_equal(out, ref)

    def test_end_to_end_row(self):
        out = resample_grid_numba(np.array([[0.0, 10.0]]), 4, 1)
        np.testing.assert_allclose(out, [[0.0, 2.5, 7.5, 10.0]])

    def test_single_cell(self):
        out = resample_grid_numba(np.array([[-1.25]]), 9, 4)
        assert out.shape == (4, 9)
        assert np.all(out == -1.25)

    def test_non_contiguous_input(self, random_grid):
        """Strided views are copied to contiguous float64 first."""
        view = random_grid[:, ::2]
        np.testing.assert_array_equal(
            resample_grid_numba(view, 8, 8), resample_grid(np.ascontiguousarray(view), 8, 8)
        )

    def test_integer_input(self):
        grid = np.array([[0, 4], [8, 16]], dtype=np.int32)
        out = resample_grid_numba(grid, 4, 4)
        assert out.dtype == np.float64
        assert out[1, 1] == pytest.approx(3.25)


class TestMapColorsNumba:
    """JIT color mapping matches the vectorized implementation."""

    def test_matches_numpy(self, gradient_source, random_grid):
        lut = build_lut(gradient_source, 100)
        np.testing.assert_array_equal(
            map_colors_numba(random_grid, lut, 0.0, 10.0),
            map_colors(random_grid, lut, 0.0, 10.0),
        )

    def test_special_values(self, gradient_source):
        lut = build_lut(gradient_source, 10)
        grid = np.array([[np.nan, -np.inf, np.inf, 0.5]])
        out = map_colors_numba(grid, lut, 0.0, 1.0)
        np.testing.assert_array_equal(out[0, 0], lut.array[0])
        np.testing.assert_array_equal(out[0, 1], lut.array[0])
        np.testing.assert_array_equal(out[0, 2], lut.array[9])
        np.testing.assert_array_equal(out[0, 3], lut.array[5])

    def test_round_half_up(self, red_blue_source):
        lut = build_lut(red_blue_source, 3)
        out = map_colors_numba(np.array([[2.5, 7.5]]), lut, 0.0, 10.0)
        assert tuple(out[0, 0]) == (127, 0, 127, 255)
        assert tuple(out[0, 1]) == (0, 0, 255, 255)

    def test_invalid_domain(self, red_blue_source):
        lut = build_lut(red_blue_source, 3)
        with pytest.raises(ConfigurationError):
            map_colors_numba(np.zeros((1, 1)), lut, 1.0, 1.0)
