"""Section-based 1D terrain profiles for a side-scrolling platformer.

Columns are grouped into sections of equal height. Some interior sections
become water, their neighbours are flattened into banks, and every column
gets a top tile describing where the terrain edge turns a corner.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator

import numpy as np
from numpy.typing import NDArray

from .config import PlatformerConfig
from .rng import PROFILE_HEIGHT_OFFSET, WATER_SEED_OFFSET, SeededRng
from .tile_types import TopTileType

logger = logging.getLogger(__name__)

WATER_MIN_SPACING = 50
SECTION_WIDTH_SPREAD = 3


@dataclass(frozen=True)
class Section:
    """A maximal run of columns sharing one height and section id."""

    section_id: int
    start: int
    end: int  # inclusive
    height: int
    is_water: bool

    @property
    def width(self) -> int:
        return self.end - self.start + 1


@dataclass
class TerrainProfile:
    """Per-column terrain data, stored as parallel arrays."""

    heights: NDArray[np.int32]
    section_ids: NDArray[np.int32]
    water: NDArray[np.bool_]
    top_tiles: list[TopTileType] = field(default_factory=list)

    @property
    def width(self) -> int:
        return len(self.heights)

    def sections(self) -> Iterator[Section]:
        """Yield sections left to right."""
        bounds = section_bounds(self.section_ids)
        for section_id in sorted(bounds):
            start, end = bounds[section_id]
            yield Section(
                section_id=section_id,
                start=start,
                end=end,
                height=int(self.heights[start]),
                is_water=bool(self.water[start]),
            )

    def water_section_ids(self) -> list[int]:
        """Ids of the water sections in ascending order."""
        return sorted({int(s) for s in self.section_ids[self.water]})

    def arrays(self) -> dict[str, NDArray]:
        """Named arrays for persistence; top tiles stored as enum indices."""
        order = list(TopTileType)
        return {
            "heights": self.heights,
            "section_ids": self.section_ids,
            "water": self.water,
            "top_tiles": np.array([order.index(t) for t in self.top_tiles], dtype=np.uint8),
        }


def _clamped_config(config: PlatformerConfig) -> PlatformerConfig:
    """Clamp out-of-range parameters to the nearest safe value."""
    width = max(1, config.width)
    min_section_width = max(1, config.min_section_width)
    max_surface = max(config.min_surface_height, config.max_surface_height)
    variation = max(0, config.max_height_variation)
    dirt_depth = max(0, config.dirt_depth)
    chance = min(1.0, max(0.0, config.water_spawn_chance))

    clamped = config.model_copy(
        update={
            "width": width,
            "min_section_width": min_section_width,
            "max_surface_height": max_surface,
            "max_height_variation": variation,
            "dirt_depth": dirt_depth,
            "water_spawn_chance": chance,
        }
    )
    if clamped != config:
        logger.debug(f"Clamped platformer parameters: {clamped}")
    return clamped


def generate_heights(
    config: PlatformerConfig,
) -> tuple[NDArray[np.int32], NDArray[np.int32]]:
    """Generate column heights as a sequence of flat sections.

    Args:
        config: Platformer parameters (assumed already clamped).

    Returns:
        Tuple of (heights, section_ids), each of length ``config.width``.
    """
    rng = SeededRng(config.seed + PROFILE_HEIGHT_OFFSET)
    width = config.width
    min_surface = config.min_surface_height
    max_surface = config.max_surface_height
    variation = config.max_height_variation
    min_width = config.min_section_width

    heights = np.zeros(width, dtype=np.int32)
    section_ids = np.zeros(width, dtype=np.int32)

    current_height = rng.next_int(min_surface, max_surface + 1)
    current_section = 0

    i = 0
    while i < width:
        remaining = width - i

        if remaining < min_width:
            section_width = remaining
        else:
            section_width = rng.next_int(
                min_width, min(min_width + SECTION_WIDTH_SPREAD, remaining) + 1
            )

        if i > 0:
            delta = rng.next_int(-variation, variation + 1)
            current_height = int(
                np.clip(heights[i - 1] + delta, min_surface, max_surface)
            )
            current_section += 1

        end = min(i + section_width, width)
        heights[i:end] = current_height
        section_ids[i:end] = current_section
        i = end

    return heights, section_ids


def section_bounds(section_ids: NDArray[np.int32]) -> dict[int, tuple[int, int]]:
    """Map each section id to its first and last column."""
    bounds: dict[int, tuple[int, int]] = {}
    for column, section_id in enumerate(section_ids):
        section_id = int(section_id)
        if section_id in bounds:
            bounds[section_id] = (bounds[section_id][0], column)
        else:
            bounds[section_id] = (column, column)
    return bounds


def mark_water_sections(
    section_ids: NDArray[np.int32],
    water_spawn_chance: float,
    seed: int,
) -> NDArray[np.bool_]:
    """Choose whole interior sections to become water.

    The first and last sections are never water. Candidates are walked left
    to right; a candidate is only rolled for when its first column is at
    least 50 columns past the end of the previous water section.

    Args:
        section_ids: Section id per column.
        water_spawn_chance: Probability an eligible section becomes water.
        seed: Base seed; the roll stream is ``seed + WATER_SEED_OFFSET``.

    Returns:
        Boolean water mask per column.
    """
    water = np.zeros(len(section_ids), dtype=bool)
    if len(section_ids) == 0:
        return water

    bounds = section_bounds(section_ids)
    max_section = max(bounds)
    candidates = sorted(range(1, max_section), key=lambda s: bounds[s][0])

    rng = SeededRng(seed + WATER_SEED_OFFSET)
    last_water_end = -WATER_MIN_SPACING

    for section_id in candidates:
        start, end = bounds[section_id]
        if start - last_water_end < WATER_MIN_SPACING:
            continue
        if rng.next_uniform() < water_spawn_chance:
            water[start : end + 1] = True
            last_water_end = end

    return water


def equalize_shorelines(
    heights: NDArray[np.int32],
    section_ids: NDArray[np.int32],
    water: NDArray[np.bool_],
) -> NDArray[np.int32]:
    """Flatten the sections on either side of each water section.

    Sections ``w - 1`` and ``w + 1`` take the height of water section ``w``.
    Water heights are read from the input, so the result does not depend on
    the order in which water sections are visited.

    Args:
        heights: Column heights before equalization.
        section_ids: Section id per column.
        water: Water mask per column.

    Returns:
        New height array.
    """
    result = heights.copy()
    water_ids = sorted({int(s) for s in section_ids[water]})

    for water_id in water_ids:
        water_height = heights[np.argmax(section_ids == water_id)]
        banks = (section_ids == water_id - 1) | (section_ids == water_id + 1)
        result[banks] = water_height

    return result


def determine_corner_tiles(
    heights: NDArray[np.int32],
    water: NDArray[np.bool_],
    dirt_depth: int,
) -> list[TopTileType]:
    """Classify the top tile of every column.

    A non-water neighbour is occupied when the column's height lies within
    ``[neighbour - dirt_depth, neighbour]``. The first and last columns are
    always left and right corners unless they are water.

    Args:
        heights: Column heights.
        water: Water mask per column.
        dirt_depth: Depth of the dirt band below each top tile.

    Returns:
        One TopTileType per column.
    """
    width = len(heights)
    tiles: list[TopTileType] = []

    for x in range(width):
        if water[x]:
            tiles.append(TopTileType.WATER)
            continue

        h = int(heights[x])
        left_occupied = False
        right_occupied = False

        if x > 0 and not water[x - 1]:
            left_top = int(heights[x - 1])
            left_occupied = left_top - dirt_depth <= h <= left_top

        if x < width - 1 and not water[x + 1]:
            right_top = int(heights[x + 1])
            right_occupied = right_top - dirt_depth <= h <= right_top

        if x == 0:
            tiles.append(TopTileType.LEFT_CORNER)
        elif x == width - 1:
            tiles.append(TopTileType.RIGHT_CORNER)
        elif left_occupied and not right_occupied:
            tiles.append(TopTileType.RIGHT_CORNER)
        elif right_occupied and not left_occupied:
            tiles.append(TopTileType.LEFT_CORNER)
        else:
            # Both occupied, or isolated column with neither
            tiles.append(TopTileType.NORMAL)

    return tiles


def generate_section_terrain(config: PlatformerConfig) -> TerrainProfile:
    """Generate a complete platformer terrain profile.

    Args:
        config: Platformer parameters; out-of-range values are clamped.

    Returns:
        TerrainProfile with heights, section ids, water mask and top tiles.
    """
    config = _clamped_config(config)
    logger.info(f"Generating platformer profile width={config.width} seed={config.seed}")

    heights, section_ids = generate_heights(config)
    water = mark_water_sections(section_ids, config.water_spawn_chance, config.seed)
    heights = equalize_shorelines(heights, section_ids, water)
    top_tiles = determine_corner_tiles(heights, water, config.dirt_depth)

    profile = TerrainProfile(
        heights=heights,
        section_ids=section_ids,
        water=water,
        top_tiles=top_tiles,
    )
    logger.info(
        f"Profile has {int(section_ids[-1]) + 1} sections, "
        f"{len(profile.water_section_ids())} water"
    )
    return profile
