"""Shared test fixtures for generation tests."""

import numpy as np
import pytest

from pcgkit.config import HeightmapConfig, NoiseConfig, PlatformerConfig, SmoothingConfig
from pcgkit.heightmap import generate_heightmap


@pytest.fixture
def noisy_heightmap() -> np.ndarray:
    """33x33 fractal heightmap with plenty of variation."""
    return generate_heightmap(33, scale=8.0, octaves=4, persistence=0.5, lacunarity=2.0, seed=7)


@pytest.fixture
def flat_heightmap() -> np.ndarray:
    """9x9 heightmap where every cell is 0.5."""
    return np.full((9, 9), 0.5, dtype=np.float32)


@pytest.fixture
def long_level() -> PlatformerConfig:
    """Wide level with frequent water so spacing rules are exercised."""
    return PlatformerConfig(seed=11, width=400, water_spawn_chance=0.6)


@pytest.fixture
def small_heightmap_config() -> HeightmapConfig:
    """Fast heightmap pipeline configuration."""
    return HeightmapConfig(
        seed=99,
        resolution=33,
        noise=NoiseConfig(scale=6.0, octaves=3, persistence=0.5, lacunarity=2.0),
        smoothing=SmoothingConfig(enabled=True, radius=2, iterations=1),
    )
