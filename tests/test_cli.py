"""Tests for the command-line interface."""

from pathlib import Path

import numpy as np
import pytest

from pcgkit.cli import build_parser, main
from pcgkit.persistence import load_artifacts


class TestParser:
    """Tests for argument parsing."""

    def test_defaults(self) -> None:
        args = build_parser().parse_args(["hex"])
        assert args.kind == "hex"
        assert args.seed is None
        assert args.output is None
        assert args.tiles == "grass,dirt,sand,water"

    def test_unknown_kind(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["dungeon"])


class TestMain:
    """End-to-end CLI runs on small configs."""

    @pytest.fixture
    def small_config(self, tmp_path: Path) -> Path:
        path = tmp_path / "pcg.toml"
        path.write_text(
            "[platformer]\n"
            "width = 120\n"
            "\n"
            "[heightmap]\n"
            "resolution = 17\n"
            "\n"
            "[hex]\n"
            "grid_width = 6\n"
            "grid_height = 5\n"
        )
        return path

    def test_platformer(self, tmp_path: Path, small_config: Path, capsys) -> None:
        output = tmp_path / "level.npz"
        main(["platformer", "-c", str(small_config), "--seed", "3", "-o", str(output)])

        arrays, metadata = load_artifacts(output)
        assert metadata["kind"] == "platformer"
        assert metadata["seed"] == 3
        assert arrays["heights"].shape == (120,)
        assert "Saved to" in capsys.readouterr().out

    def test_heightmap(self, tmp_path: Path, small_config: Path) -> None:
        output = tmp_path / "terrain.npz"
        main(["heightmap", "-c", str(small_config), "-o", str(output)])

        arrays, metadata = load_artifacts(output)
        assert metadata["seed"] == 123
        assert arrays["final"].shape == (17, 17)
        assert arrays["splat"].shape == (17, 17, 3)

    def test_hex(self, tmp_path: Path, small_config: Path) -> None:
        output = tmp_path / "island.npz"
        main(["hex", "-c", str(small_config), "-o", str(output), "--tiles", "grass, dirt,sand,water"])

        arrays, metadata = load_artifacts(output)
        assert arrays["terrain"].shape == (5, 6)
        assert metadata["tiles"] == ["grass", "dirt", "sand", "water"]
        water_index = metadata["terrain_types"].index("water")
        assert arrays["terrain"][0, 0] == water_index
        assert np.all(arrays["occupants"] < 4)

    def test_hex_negative_grid_size(self, tmp_path: Path) -> None:
        """A negative grid size in the config writes an empty grid."""
        config = tmp_path / "negative.toml"
        config.write_text("[hex]\ngrid_width = -3\ngrid_height = 4\n")
        output = tmp_path / "empty.npz"
        main(["hex", "-c", str(config), "-o", str(output)])

        arrays, _ = load_artifacts(output)
        assert arrays["terrain"].shape == (4, 0)
        assert arrays["occupants"].shape == (4, 0)
