"""Splat maps: slope-aware grass/rock/snow texture weights.

A splat map stores, for every heightmap cell, one blend weight per texture
layer. Low flat ground gets grass, steep ground gets rock and high flat
ground gets snow.
"""

import logging

import numpy as np
from numpy.typing import NDArray

from .config import SplatConfig
from .tile_types import SplatLayer

logger = logging.getLogger(__name__)

LAYER_COUNT = len(SplatLayer)
MIN_TOTAL_WEIGHT = 0.01
MIN_THRESHOLD = 1e-4


def _clamped_config(config: SplatConfig) -> SplatConfig:
    """Clamp thresholds so every blend term stays finite."""
    clamped = config.model_copy(
        update={
            "grass_threshold": max(MIN_THRESHOLD, config.grass_threshold),
            "snow_threshold": min(1.0 - MIN_THRESHOLD, max(0.0, config.snow_threshold)),
            "slope_threshold": max(MIN_THRESHOLD, config.slope_threshold),
        }
    )
    if clamped != config:
        logger.debug(f"Clamped splat thresholds: {clamped}")
    return clamped


def compute_slope(heightmap: NDArray[np.float32]) -> NDArray[np.float32]:
    """Compute slope as the mean absolute height difference to 8 neighbours.

    Neighbours outside the map are clamped to the nearest edge cell.

    Args:
        heightmap: 2D heightmap.

    Returns:
        2D slope array, same shape as the input.
    """
    data = np.asarray(heightmap, dtype=np.float64)
    rows, cols = data.shape
    padded = np.pad(data, 1, mode="edge")

    total = np.zeros_like(data)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if dy == 0 and dx == 0:
                continue
            neighbour = padded[1 + dy : 1 + dy + rows, 1 + dx : 1 + dx + cols]
            total += np.abs(data - neighbour)

    return (total / 8.0).astype(np.float32)


def generate_splat_map(
    heightmap: NDArray[np.float32],
    config: SplatConfig | None = None,
) -> NDArray[np.float32]:
    """Blend grass, rock and snow weights from height and slope.

    Args:
        heightmap: 2D heightmap of normalized heights in [0, 1].
        config: Blend thresholds; defaults to ``SplatConfig()``. Thresholds that
            would divide by zero are clamped.

    Returns:
        Array of shape (rows, cols, 3) whose last axis sums to 1.
    """
    config = _clamped_config(config or SplatConfig())

    height = np.asarray(heightmap, dtype=np.float64)
    slope = compute_slope(heightmap).astype(np.float64)

    grass = np.clip((1.0 - slope) * (1.0 - height / config.grass_threshold), 0.0, 1.0)
    rock = np.clip(slope / config.slope_threshold, 0.0, 1.0)

    snow_ramp = (height - config.snow_threshold) / (1.0 - config.snow_threshold)
    snow = np.where(
        height > config.snow_threshold,
        np.clip(snow_ramp * (1.0 - slope), 0.0, 1.0),
        0.0,
    )

    weights = np.stack([grass, rock, snow], axis=-1)
    total = weights.sum(axis=-1, keepdims=True)

    # Cells with no clear winner default to pure grass
    ambiguous = total[..., 0] < MIN_TOTAL_WEIGHT
    splat = weights / np.where(total < MIN_TOTAL_WEIGHT, 1.0, total)
    splat[ambiguous] = (1.0, 0.0, 0.0)

    return splat.astype(np.float32)


def dominant_layer(splat_map: NDArray[np.float32]) -> NDArray[np.uint8]:
    """Index of the heaviest layer per cell (see ``SplatLayer``)."""
    return np.argmax(splat_map, axis=-1).astype(np.uint8)
