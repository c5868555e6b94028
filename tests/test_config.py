"""Tests for configuration models and TOML loading."""

from pathlib import Path

import numpy as np
import pytest
from pydantic import ValidationError

from pcgkit.config import (
    HeightCurve,
    HeightmapConfig,
    HexIslandConfig,
    PcgConfig,
    PlatformerConfig,
    load_config,
)


class TestDefaults:
    """Tests for default parameter values."""

    def test_heightmap_defaults(self) -> None:
        config = HeightmapConfig()
        assert config.seed == 123
        assert config.resolution == 513
        assert config.noise.scale == pytest.approx(0.05)
        assert config.noise.octaves == 4
        assert config.noise.lacunarity == pytest.approx(2.5)
        assert config.smoothing.enabled
        assert config.splat.slope_threshold == pytest.approx(0.25)

    def test_platformer_defaults(self) -> None:
        config = PlatformerConfig()
        assert config.width == 50
        assert config.dirt_depth == 5
        assert config.min_section_width == 3
        assert config.water_spawn_chance == pytest.approx(0.4)

    def test_hex_defaults(self) -> None:
        config = HexIslandConfig()
        assert (config.grid_width, config.grid_height) == (20, 20)
        assert config.tile_size == pytest.approx(0.58)
        assert config.water_threshold > config.sand_threshold > config.dirt_threshold


class TestHeightCurve:
    """Tests for the keyframe curve."""

    def test_default_is_identity(self) -> None:
        values = np.array([0.0, 0.3, 1.0], dtype=np.float32)
        np.testing.assert_allclose(HeightCurve()(values), values, atol=1e-7)

    def test_keys_sorted(self) -> None:
        curve = HeightCurve(keys=[(1.0, 0.0), (0.0, 1.0)])
        assert curve.keys == [(0.0, 1.0), (1.0, 0.0)]

    def test_clamps_outside_keys(self) -> None:
        curve = HeightCurve(keys=[(0.2, 0.1), (0.8, 0.9)])
        result = curve(np.array([0.0, 0.5, 1.0]))
        np.testing.assert_allclose(result, [0.1, 0.5, 0.9], atol=1e-6)

    def test_empty_keys_rejected(self) -> None:
        with pytest.raises(ValidationError):
            HeightCurve(keys=[])


class TestLoadConfig:
    """Tests for TOML loading."""

    def test_partial_file(self, tmp_path: Path) -> None:
        path = tmp_path / "pcg.toml"
        path.write_text(
            "[platformer]\n"
            "seed = 7\n"
            "width = 80\n"
            "\n"
            "[heightmap]\n"
            "resolution = 65\n"
            "\n"
            "[heightmap.noise]\n"
            "octaves = 6\n"
            "\n"
            "[heightmap.curve]\n"
            "keys = [[0.0, 0.0], [0.5, 0.2], [1.0, 1.0]]\n"
        )
        config = load_config(path)
        assert isinstance(config, PcgConfig)
        assert config.platformer.seed == 7
        assert config.platformer.width == 80
        assert config.platformer.dirt_depth == 5
        assert config.heightmap.resolution == 65
        assert config.heightmap.noise.octaves == 6
        assert config.heightmap.curve.keys[1] == (0.5, 0.2)
        assert config.hex == HexIslandConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.toml")

    def test_bad_type_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text('[hex]\ngrid_width = "wide"\n')
        with pytest.raises(ValidationError):
            load_config(path)
