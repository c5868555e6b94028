"""Tests for artifact save/load."""

from pathlib import Path

import numpy as np
import pytest

from pcgkit.exceptions import ArtifactFormatError
from pcgkit.persistence import FORMAT_VERSION, load_artifacts, save_artifacts


class TestSaveLoad:
    """Tests for the .npz artifact format."""

    def test_arrays_and_metadata_survive(self, tmp_path: Path, noisy_heightmap: np.ndarray) -> None:
        water = np.array([False, True, False])
        saved = save_artifacts(
            tmp_path / "terrain.npz",
            {"final": noisy_heightmap, "water": water},
            kind="heightmap",
            seed=42,
            extra={"note": "test"},
        )
        arrays, metadata = load_artifacts(saved)

        np.testing.assert_array_equal(arrays["final"], noisy_heightmap)
        np.testing.assert_array_equal(arrays["water"], water)
        assert arrays["final"].dtype == noisy_heightmap.dtype
        assert metadata["kind"] == "heightmap"
        assert metadata["seed"] == 42
        assert metadata["version"] == FORMAT_VERSION
        assert metadata["note"] == "test"
        assert "generated_at" in metadata
        assert "metadata" not in arrays

    def test_suffix_forced(self, tmp_path: Path) -> None:
        saved = save_artifacts(tmp_path / "profile.dat", {"a": np.zeros(2)}, "platformer", 0)
        assert saved == tmp_path / "profile.npz"
        assert saved.exists()

    def test_reserved_name_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            save_artifacts(tmp_path / "x.npz", {"metadata": np.zeros(1)}, "hex", 0)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_artifacts(tmp_path / "nope.npz")

    def test_missing_metadata(self, tmp_path: Path) -> None:
        path = tmp_path / "bare.npz"
        np.savez_compressed(path, heights=np.arange(3))
        with pytest.raises(ArtifactFormatError):
            load_artifacts(path)

    def test_corrupt_metadata(self, tmp_path: Path) -> None:
        path = tmp_path / "corrupt.npz"
        np.savez_compressed(path, metadata=np.frombuffer(b"{not json", dtype=np.uint8))
        with pytest.raises(ArtifactFormatError):
            load_artifacts(path)

    def test_format_error_is_value_error(self) -> None:
        assert issubclass(ArtifactFormatError, ValueError)
