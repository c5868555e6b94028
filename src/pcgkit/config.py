"""Generation configuration models and TOML loading."""

import tomllib
from pathlib import Path

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, Field, field_validator


class NoiseConfig(BaseModel):
    """Fractal noise parameters for heightmap synthesis."""

    scale: float = Field(default=0.05, description="Noise scale (<=0 is clamped)")
    octaves: int = Field(default=4, description="Number of fBm octaves")
    persistence: float = Field(default=0.5, description="Amplitude multiplier per octave")
    lacunarity: float = Field(default=2.5, description="Frequency multiplier per octave")


class SmoothingConfig(BaseModel):
    """Tent-blur smoothing parameters."""

    enabled: bool = Field(default=True, description="Whether to smooth the heightmap")
    radius: int = Field(default=1, description="Blur half-width in cells")
    iterations: int = Field(default=1, description="Number of sequential blur passes")


class HeightCurve(BaseModel):
    """Piecewise-linear monotonic remap curve.

    Keyframes are ``(time, value)`` pairs; inputs outside the keyed range
    take the value of the nearest end key.
    """

    keys: list[tuple[float, float]] = Field(
        default_factory=lambda: [(0.0, 0.0), (1.0, 1.0)],
        description="Curve keyframes as (time, value)",
    )

    @field_validator("keys")
    @classmethod
    def _sort_keys(cls, keys: list[tuple[float, float]]) -> list[tuple[float, float]]:
        if not keys:
            raise ValueError("HeightCurve needs at least one key")
        return sorted(keys)

    def __call__(self, values: NDArray[np.float32]) -> NDArray[np.float32]:
        times = np.array([k[0] for k in self.keys], dtype=np.float64)
        outputs = np.array([k[1] for k in self.keys], dtype=np.float64)
        return np.interp(values, times, outputs).astype(np.float32)


class SplatConfig(BaseModel):
    """Thresholds for grass/rock/snow blending."""

    grass_threshold: float = Field(default=0.4, description="Height below which grass dominates")
    snow_threshold: float = Field(default=0.7, description="Height above which snow appears")
    slope_threshold: float = Field(default=0.25, description="Slope at which rock saturates")


class HeightmapConfig(BaseModel):
    """Complete heightmap pipeline configuration."""

    seed: int = Field(default=123, description="Random seed for reproducibility")
    resolution: int = Field(default=513, description="Heightmap size (2^n+1 by convention)")
    noise: NoiseConfig = Field(default_factory=NoiseConfig)
    smoothing: SmoothingConfig = Field(default_factory=SmoothingConfig)
    curve: HeightCurve = Field(default_factory=HeightCurve)
    splat: SplatConfig = Field(default_factory=SplatConfig)


class PlatformerConfig(BaseModel):
    """Section-based platformer terrain parameters."""

    seed: int = Field(default=0, description="Random seed for reproducibility")
    width: int = Field(default=50, description="Level width in columns")
    dirt_depth: int = Field(default=5, description="Dirt layers below the top tile")
    min_surface_height: int = Field(default=5, description="Lowest surface row")
    max_surface_height: int = Field(default=10, description="Highest surface row")
    min_section_width: int = Field(default=3, description="Minimum columns per section")
    max_height_variation: int = Field(
        default=2, description="Maximum height change between sections"
    )
    water_spawn_chance: float = Field(
        default=0.4, description="Probability an eligible section becomes water"
    )


class HexIslandConfig(BaseModel):
    """Hex island grid and classification parameters."""

    seed: int = Field(default=123, description="Random seed for reproducibility")
    grid_width: int = Field(default=20, description="Tiles in the x direction")
    grid_height: int = Field(default=20, description="Tiles in the y direction")
    tile_size: float = Field(default=0.58, description="Hex tile size in world units")
    noise_scale: float = Field(default=0.3, description="Perlin sample scale per cell")
    noise_weight: float = Field(default=0.2, description="Weight of the noise term")
    water_threshold: float = Field(default=0.7, description="Value above which a cell is water")
    sand_threshold: float = Field(default=0.6, description="Value above which a cell is sand")
    dirt_threshold: float = Field(default=0.5, description="Value above which a cell is dirt")


class PcgConfig(BaseModel):
    """Configuration for all generators."""

    platformer: PlatformerConfig = Field(default_factory=PlatformerConfig)
    heightmap: HeightmapConfig = Field(default_factory=HeightmapConfig)
    hex: HexIslandConfig = Field(default_factory=HexIslandConfig)


def load_config(config_path: Path) -> PcgConfig:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed PcgConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return PcgConfig.model_validate(data)
