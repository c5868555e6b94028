"""Hex island classification and weighted tile selection.

Each cell is bucketed by its normalized distance from the grid centre plus
a Perlin irregularity term, so the grid reads as an island ringed by sand
and water.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Sequence

from .config import HexIslandConfig
from .exceptions import MissingTileError
from .noise import perlin_2d
from .rng import HEX_NOISE_OFFSET, HEX_TILE_OFFSET, SeededRng
from .tile_types import HexTerrainType

logger = logging.getLogger(__name__)

EXACT_MATCH_WEIGHT = 10.0
PARTIAL_MATCH_WEIGHT = 1.0
NOISE_PLANE_RANGE = 10000


@dataclass(frozen=True)
class HexCell:
    """A classified grid cell and the tile occupying it."""

    x: int
    y: int
    terrain_type: HexTerrainType
    occupant: str
    world_position: tuple[float, float, float]

    def with_occupant(self, occupant: str) -> "HexCell":
        """Return a copy with the occupant swapped; terrain is unchanged."""
        return replace(self, occupant=occupant)


def noise_plane_offset(seed: int) -> tuple[int, int]:
    """Integer offset into the noise plane for a seed."""
    rng = SeededRng(seed + HEX_NOISE_OFFSET)
    ox = rng.next_int(-NOISE_PLANE_RANGE, NOISE_PLANE_RANGE)
    oy = rng.next_int(-NOISE_PLANE_RANGE, NOISE_PLANE_RANGE)
    return ox, oy


def island_value(
    x: int,
    y: int,
    grid_width: int,
    grid_height: int,
    seed: int,
    config: HexIslandConfig | None = None,
    plane_offset: tuple[int, int] | None = None,
) -> float:
    """Normalized centre distance plus weighted noise for one cell.

    Distance is 0 at the grid centre and about 1 at the far corner.
    ``plane_offset`` lets a grid pass reuse ``noise_plane_offset(seed)``.
    """
    if config is None:
        config = HexIslandConfig()

    cx = grid_width / 2.0
    cy = grid_height / 2.0
    max_dist = math.hypot(cx, cy)
    if max_dist == 0:
        max_dist = 1.0

    distance = math.hypot(x - cx, y - cy) / max_dist

    ox, oy = plane_offset if plane_offset is not None else noise_plane_offset(seed)
    noise = perlin_2d(x * config.noise_scale + ox, y * config.noise_scale + oy)
    return distance + noise * config.noise_weight


def bucket_terrain(value: float, config: HexIslandConfig | None = None) -> HexTerrainType:
    """Bucket an island value against the descending thresholds."""
    if config is None:
        config = HexIslandConfig()

    if value > config.water_threshold:
        return HexTerrainType.WATER
    if value > config.sand_threshold:
        return HexTerrainType.SAND
    if value > config.dirt_threshold:
        return HexTerrainType.DIRT
    return HexTerrainType.GRASS


def classify_hex_cell(
    x: int,
    y: int,
    grid_width: int,
    grid_height: int,
    seed: int,
    config: HexIslandConfig | None = None,
    plane_offset: tuple[int, int] | None = None,
) -> HexTerrainType:
    """Classify one cell of a hex island grid.

    Args:
        x: Cell column.
        y: Cell row.
        grid_width: Grid width in cells.
        grid_height: Grid height in cells.
        seed: Seed selecting the noise-plane offset.
        config: Noise and threshold parameters.
        plane_offset: Precomputed ``noise_plane_offset(seed)``; derived from
            the seed when omitted.

    Returns:
        The cell's terrain type.
    """
    value = island_value(x, y, grid_width, grid_height, seed, config, plane_offset)
    return bucket_terrain(value, config)


def select_tile(
    tile_names: Sequence[str],
    terrain_type: HexTerrainType | str,
    rng: SeededRng,
) -> str | None:
    """Pick a tile for a terrain bucket by weighted draw.

    Tiles whose name contains the type are candidates; an exact name match
    weighs 10, a partial match 1. The last candidate is returned if rounding
    leaves the draw past every cumulative weight.

    Args:
        tile_names: Available tile names.
        terrain_type: Bucket to match.
        rng: Stream for the draw; one value is consumed when any tile matches.

    Returns:
        Chosen tile name, or None when no tile matches.
    """
    wanted = str(getattr(terrain_type, "value", terrain_type)).lower()

    candidates: list[tuple[str, float]] = []
    total_weight = 0.0
    for name in tile_names:
        if wanted in name:
            weight = EXACT_MATCH_WEIGHT if name == wanted else PARTIAL_MATCH_WEIGHT
            candidates.append((name, weight))
            total_weight += weight

    if not candidates:
        return None

    draw = rng.next_uniform() * total_weight
    cumulative = 0.0
    for name, weight in candidates:
        cumulative += weight
        if draw <= cumulative:
            return name
    return candidates[-1][0]


def hex_world_position(x: int, y: int, tile_size: float) -> tuple[float, float, float]:
    """World position of a cell in an odd-row-offset hex layout."""
    pos_x = tile_size * math.sqrt(3.0) * (x + 0.5 * (y % 2))
    pos_z = tile_size * 1.5 * y
    return (pos_x, 0.0, pos_z)


def generate_hex_grid(
    config: HexIslandConfig,
    terrain_tiles: Sequence[str],
) -> dict[tuple[int, int], HexCell]:
    """Classify every cell and pick a terrain tile for it.

    Cells are visited column by column; a single tile stream is shared
    across the pass.

    Args:
        config: Grid, seed and classification parameters.
        terrain_tiles: Names of the available terrain tiles.

    Returns:
        Mapping of ``(x, y)`` to HexCell.

    Raises:
        MissingTileError: If no tile matches a classified bucket.
    """
    grid_width = max(0, config.grid_width)
    grid_height = max(0, config.grid_height)
    rng = SeededRng(config.seed + HEX_TILE_OFFSET)
    plane_offset = noise_plane_offset(config.seed)

    logger.info(f"Generating hex grid {grid_width}x{grid_height} with seed {config.seed}")

    cells: dict[tuple[int, int], HexCell] = {}
    counts = {terrain: 0 for terrain in HexTerrainType}

    for x in range(grid_width):
        for y in range(grid_height):
            terrain = classify_hex_cell(
                x, y, grid_width, grid_height, config.seed, config, plane_offset
            )
            tile = select_tile(terrain_tiles, terrain, rng)
            if tile is None:
                raise MissingTileError(terrain.value)

            cells[(x, y)] = HexCell(
                x=x,
                y=y,
                terrain_type=terrain,
                occupant=tile,
                world_position=hex_world_position(x, y, config.tile_size),
            )
            counts[terrain] += 1

    for terrain, count in counts.items():
        logger.debug(f"  {terrain.value}: {count}")

    return cells
