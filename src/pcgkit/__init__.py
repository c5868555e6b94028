"""Deterministic procedural terrain generation.

This package turns a seed and plain parameters into arrays: platformer
height profiles with corner tiles, fractal heightmaps with splat maps, and
hex island classifications.
"""

from .config import (
    HeightCurve,
    HeightmapConfig,
    HexIslandConfig,
    NoiseConfig,
    PcgConfig,
    PlatformerConfig,
    SmoothingConfig,
    SplatConfig,
    load_config,
)
from .exceptions import ArtifactFormatError, MissingTileError, PcgError
from .generator import HeightmapResult, generate_terrain_heightmap
from .heightmap import (
    apply_height_curve,
    generate_heightmap,
    normalize_heightmap,
    smooth_heightmap,
)
from .hexgrid import HexCell, classify_hex_cell, generate_hex_grid, select_tile
from .noise import fractal_noise_2d, perlin_2d, perlin_3d, value_noise_2d
from .persistence import load_artifacts, save_artifacts
from .platformer import Section, TerrainProfile, generate_section_terrain
from .rng import SeededRng
from .splat import compute_slope, generate_splat_map
from .tile_types import HexTerrainType, SplatLayer, TopTileType
from .validation import (
    ValidationResult,
    validate_heightmap,
    validate_profile,
    validate_splat_map,
)

__all__ = [
    # Config
    "HeightCurve",
    "HeightmapConfig",
    "HexIslandConfig",
    "NoiseConfig",
    "PcgConfig",
    "PlatformerConfig",
    "SmoothingConfig",
    "SplatConfig",
    "load_config",
    # Types
    "HexTerrainType",
    "SplatLayer",
    "TopTileType",
    # Randomness and noise
    "SeededRng",
    "fractal_noise_2d",
    "perlin_2d",
    "perlin_3d",
    "value_noise_2d",
    # Heightmap
    "HeightmapResult",
    "apply_height_curve",
    "generate_heightmap",
    "generate_terrain_heightmap",
    "normalize_heightmap",
    "smooth_heightmap",
    # Splat
    "compute_slope",
    "generate_splat_map",
    # Platformer
    "Section",
    "TerrainProfile",
    "generate_section_terrain",
    # Hex
    "HexCell",
    "classify_hex_cell",
    "generate_hex_grid",
    "select_tile",
    # Validation and persistence
    "ValidationResult",
    "validate_heightmap",
    "validate_profile",
    "validate_splat_map",
    "load_artifacts",
    "save_artifacts",
    # Exceptions
    "ArtifactFormatError",
    "MissingTileError",
    "PcgError",
]
