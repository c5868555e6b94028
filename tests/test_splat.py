"""Tests for slope and splat map generation."""

import warnings

import numpy as np
import pytest

from pcgkit.config import SplatConfig
from pcgkit.splat import compute_slope, dominant_layer, generate_splat_map
from pcgkit.tile_types import SplatLayer


def _striped(value: float, size: int = 5) -> np.ndarray:
    """Columns alternating between 0 and ``value``."""
    heightmap = np.zeros((size, size), dtype=np.float32)
    heightmap[:, 1::2] = value
    return heightmap


class TestComputeSlope:
    """Tests for neighbour-difference slope."""

    def test_flat_has_zero_slope(self, flat_heightmap: np.ndarray) -> None:
        np.testing.assert_array_equal(compute_slope(flat_heightmap), 0.0)

    def test_spike_center(self) -> None:
        heightmap = np.zeros((3, 3), dtype=np.float32)
        heightmap[1, 1] = 1.0
        slope = compute_slope(heightmap)
        assert slope[1, 1] == pytest.approx(1.0)

    def test_border_reuses_edge_cells(self) -> None:
        """A corner sees the spike once among its 8 clamped neighbours."""
        heightmap = np.zeros((3, 3), dtype=np.float32)
        heightmap[1, 1] = 1.0
        slope = compute_slope(heightmap)
        assert slope[0, 0] == pytest.approx(1.0 / 8.0)

    def test_shape_preserved(self, noisy_heightmap: np.ndarray) -> None:
        assert compute_slope(noisy_heightmap).shape == noisy_heightmap.shape


class TestGenerateSplatMap:
    """Tests for grass/rock/snow blending."""

    def test_flat_mid_height_is_pure_grass(self) -> None:
        """A 3x3 map of 0.5 has no clear layer and defaults to grass."""
        heightmap = np.full((3, 3), 0.5, dtype=np.float32)
        splat = generate_splat_map(heightmap)
        np.testing.assert_array_equal(splat[..., SplatLayer.GRASS], 1.0)
        np.testing.assert_array_equal(splat[..., SplatLayer.ROCK], 0.0)
        np.testing.assert_array_equal(splat[..., SplatLayer.SNOW], 0.0)

    def test_output_shape(self, noisy_heightmap: np.ndarray) -> None:
        splat = generate_splat_map(noisy_heightmap)
        assert splat.shape == (*noisy_heightmap.shape, 3)
        assert splat.dtype == np.float32

    def test_weights_sum_to_one(self, noisy_heightmap: np.ndarray) -> None:
        splat = generate_splat_map(noisy_heightmap)
        np.testing.assert_allclose(splat.sum(axis=-1), 1.0, atol=1e-4)

    def test_weights_in_unit_interval(self, noisy_heightmap: np.ndarray) -> None:
        splat = generate_splat_map(noisy_heightmap)
        assert splat.min() >= 0.0
        assert splat.max() <= 1.0

    def test_low_flat_ground_is_grass(self) -> None:
        splat = generate_splat_map(np.zeros((4, 4), dtype=np.float32))
        np.testing.assert_allclose(splat[..., SplatLayer.GRASS], 1.0)

    def test_high_flat_ground_is_snow(self) -> None:
        splat = generate_splat_map(np.full((4, 4), 0.9, dtype=np.float32))
        np.testing.assert_allclose(splat[..., SplatLayer.SNOW], 1.0)

    def test_steep_ground_is_rock(self) -> None:
        splat = generate_splat_map(_striped(0.3))
        assert dominant_layer(splat)[2, 2] == SplatLayer.ROCK

    def test_steep_interior_weights(self) -> None:
        """Interior low cell: slope 0.225 gives grass 0.775 and rock 0.9."""
        splat = generate_splat_map(_striped(0.3))
        total = 0.775 + 0.9
        assert splat[2, 2, SplatLayer.GRASS] == pytest.approx(0.775 / total, abs=1e-5)
        assert splat[2, 2, SplatLayer.ROCK] == pytest.approx(0.9 / total, abs=1e-5)

    def test_custom_thresholds(self) -> None:
        """Lowering the snow threshold puts snow on mid heights."""
        heightmap = np.full((3, 3), 0.6, dtype=np.float32)
        splat = generate_splat_map(heightmap, SplatConfig(snow_threshold=0.5))
        np.testing.assert_allclose(splat[..., SplatLayer.SNOW], 1.0)

    @pytest.mark.parametrize(
        "config",
        [
            SplatConfig(grass_threshold=0.0),
            SplatConfig(snow_threshold=1.0),
            SplatConfig(snow_threshold=1.5),
            SplatConfig(slope_threshold=0.0),
            SplatConfig(grass_threshold=-1.0, slope_threshold=-1.0),
        ],
    )
    def test_degenerate_thresholds_clamped(
        self, noisy_heightmap: np.ndarray, config: SplatConfig
    ) -> None:
        """Zero or out-of-range thresholds still give finite weights summing to 1."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            splat = generate_splat_map(noisy_heightmap, config)
        assert np.all(np.isfinite(splat))
        np.testing.assert_allclose(splat.sum(axis=-1), 1.0, atol=1e-4)

    def test_zero_grass_threshold_on_low_ground(self) -> None:
        splat = generate_splat_map(np.zeros((3, 3), dtype=np.float32), SplatConfig(grass_threshold=0.0))
        np.testing.assert_allclose(splat[..., SplatLayer.GRASS], 1.0)

    def test_input_not_mutated(self, noisy_heightmap: np.ndarray) -> None:
        original = noisy_heightmap.copy()
        generate_splat_map(noisy_heightmap)
        np.testing.assert_array_equal(noisy_heightmap, original)


class TestDominantLayer:
    """Tests for dominant layer extraction."""

    def test_argmax(self) -> None:
        splat = np.array([[[0.2, 0.7, 0.1], [0.1, 0.1, 0.8]]], dtype=np.float32)
        np.testing.assert_array_equal(dominant_layer(splat), [[1, 2]])
