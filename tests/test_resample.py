"""Tests for separable bilinear resampling."""

from __future__ import annotations

import warnings

import numpy as np
import pytest

from heatsmith.core.resample import (
    resample_axis,
    resample_grid,
    resample_grid_scipy,
    sample_positions,
    source_coordinates,
)


class TestSamplePositions:
    """Tests for per-axis sampling positions."""

    def test_pixel_center_mapping(self):
        """Output centers map proportionally onto input centers."""
        coords = source_coordinates(4, 2)
        np.testing.assert_allclose(coords, [-0.25, 0.25, 0.75, 1.25])

    def test_clamped_indices(self):
        """Out-of-range positions collapse onto the boundary index."""
        lower, upper, frac = sample_positions(4, 2)
        np.testing.assert_array_equal(lower, [0, 0, 0, 1])
        np.testing.assert_array_equal(upper, [0, 1, 1, 1])
        np.testing.assert_allclose(frac[1:3], [0.25, 0.75])

    def test_indices_in_range(self):
        """Indices always stay inside [0, n_in - 1]."""
        for n_out, n_in in [(1, 1), (1, 9), (9, 1), (17, 5), (5, 17), (100, 3)]:
            lower, upper, _ = sample_positions(n_out, n_in)
            assert lower.min() >= 0 and upper.max() <= n_in - 1
            assert np.all(lower <= upper)
            assert np.all(upper - lower <= 1)

    def test_single_input_broadcasts(self):
        """n_in == 1 gives lower == upper == 0 everywhere."""
        lower, upper, _ = sample_positions(7, 1)
        assert np.all(lower == 0)
        assert np.all(upper == 0)


class TestResampleGrid:
    """Tests for the two-pass resampler."""

    def test_end_to_end_row(self):
        """[0, 10] resampled to width 4 gives [0, 2.5, 7.5, 10]."""
        grid = np.array([[0.0, 10.0]])
        out = resample_grid(grid, 4, 1)
        np.testing.assert_allclose(out, [[0.0, 2.5, 7.5, 10.0]])

    def test_identity(self, random_grid):
        """Resampling to the native size returns the input."""
        h, w = random_grid.shape
        out = resample_grid(random_grid, w, h)
        np.testing.assert_allclose(out, random_grid, rtol=0, atol=1e-12)

    @pytest.mark.parametrize("out_w,out_h", [(1, 1), (3, 8), (64, 33)])
    def test_single_cell_constant(self, out_w, out_h):
        """A 1x1 grid resamples to a constant grid of its value."""
        out = resample_grid(np.array([[3.75]]), out_w, out_h)
        assert out.shape == (out_h, out_w)
        assert np.all(out == 3.75)

    def test_output_shape(self, random_grid):
        out = resample_grid(random_grid, 13, 2)
        assert out.shape == (2, 13)
        assert out.dtype == np.float64

    def test_values_within_input_range(self, random_grid):
        """Interpolation never overshoots the input range."""
        out = resample_grid(random_grid, 31, 23)
        assert out.min() >= random_grid.min() - 1e-12
        assert out.max() <= random_grid.max() + 1e-12

    def test_edges_replicate(self):
        """Upsampled corners equal the input corners."""
        grid = np.array([[1.0, 2.0], [3.0, 4.0]])
        out = resample_grid(grid, 8, 8)
        assert out[0, 0] == 1.0
        assert out[0, -1] == 2.0
        assert out[-1, 0] == 3.0
        assert out[-1, -1] == 4.0

    def test_vertical_pass(self):
        """Column data resamples along y like rows along x."""
        grid = np.array([[0.0], [10.0]])
        out = resample_grid(grid, 1, 4)
        np.testing.assert_allclose(out[:, 0], [0.0, 2.5, 7.5, 10.0])

    def test_separable_matches_bilinear(self):
        """Interior sample equals the direct 4-neighbor bilinear blend."""
        grid = np.array([[0.0, 4.0], [8.0, 16.0]])
        out = resample_grid(grid, 4, 4)
        # Output (1, 1) samples source position (0.25, 0.25)
        fx = fy = 0.25
        expected = ((1 - fy) * ((1 - fx) * 0.0 + fx * 4.0)
                    + fy * ((1 - fx) * 8.0 + fx * 16.0))
        assert out[1, 1] == pytest.approx(expected)

    def test_downsample(self):
        """Halving a linear ramp samples between input centers."""
        grid = np.arange(8, dtype=np.float64)[np.newaxis, :]
        out = resample_grid(grid, 4, 1)
        np.testing.assert_allclose(out[0], [0.5, 2.5, 4.5, 6.5])

    def test_input_not_mutated(self, random_grid):
        before = random_grid.copy()
        resample_grid(random_grid, 11, 9)
        np.testing.assert_array_equal(random_grid, before)

    def test_infinite_edge_replicated(self):
        """Clamped samples copy the boundary value verbatim."""
        grid = np.array([[np.inf, 1.0]])
        out = resample_grid(grid, 4, 1)
        assert out[0, 0] == np.inf
        assert out[0, -1] == 1.0

    def test_infinite_values_do_not_warn(self):
        grid = np.array([[np.inf, 1.0], [2.0, -np.inf]])
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            out = resample_grid(grid, 5, 3)
        assert out[0, 0] == np.inf
        assert out[-1, -1] == -np.inf


class TestResampleWorkers:
    """Threaded resampling must match the serial result exactly."""

    @pytest.mark.parametrize("workers", [2, 3, 8, 64])
    def test_threaded_matches_serial(self, random_grid, workers):
        serial = resample_grid(random_grid, 19, 12)
        threaded = resample_grid(random_grid, 19, 12, workers=workers)
        np.testing.assert_array_equal(serial, threaded)

    def test_axis_validation(self, random_grid):
        with pytest.raises(ValueError):
            resample_axis(random_grid, 4, axis=2)


class TestResampleScipy:
    """scipy map_coordinates backend agrees with the separable passes."""

    @pytest.mark.parametrize("out_w,out_h", [(7, 5), (19, 12), (3, 2), (1, 1)])
    def test_matches_separable(self, random_grid, out_w, out_h):
        ref = resample_grid(random_grid, out_w, out_h)
        out = resample_grid_scipy(random_grid, out_w, out_h)
        np.testing.assert_allclose(out, ref, rtol=0, atol=1e-9)

    def test_single_cell(self):
        out = resample_grid_scipy(np.array([[2.0]]), 5, 3)
        np.testing.assert_allclose(out, np.full((3, 5), 2.0))

    def test_infinite_edge_matches_separable(self):
        grid = np.array([[np.inf, 1.0]])
        out = resample_grid_scipy(grid, 4, 1)
        np.testing.assert_array_equal(out, resample_grid(grid, 4, 1))
        assert out[0, 0] == np.inf
        assert out[0, -1] == 1.0

    @pytest.mark.parametrize("out_w,out_h", [(9, 11), (7, 5), (14, 10)])
    def test_non_finite_borders_match_separable(self, random_grid, out_w, out_h):
        grid = random_grid.copy()
        grid[0, 0] = np.inf
        grid[-1, -1] = -np.inf
        grid[2, 0] = np.nan
        ref = resample_grid(grid, out_w, out_h)
        out = resample_grid_scipy(grid, out_w, out_h)

        for edge in (np.s_[0, :], np.s_[-1, :], np.s_[:, 0], np.s_[:, -1]):
            np.testing.assert_array_equal(out[edge], ref[edge])
        assert out[0, 0] == np.inf
        assert out[-1, -1] == -np.inf

    def test_non_finite_identity(self, random_grid):
        """At the input size every sample sits on a node and is copied."""
        grid = random_grid.copy()
        grid[1, 3] = np.inf
        grid[4, 0] = -np.inf
        h, w = grid.shape
        np.testing.assert_array_equal(resample_grid_scipy(grid, w, h), grid)
