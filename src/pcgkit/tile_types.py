"""Tile and layer types shared by the generators."""

from enum import Enum, IntEnum


class TopTileType(str, Enum):
    """Surface tile of a platformer column."""

    NORMAL = "normal"
    LEFT_CORNER = "left_corner"
    RIGHT_CORNER = "right_corner"
    WATER = "water"

    @property
    def is_corner(self) -> bool:
        """Whether the terrain edge transitions on one side of this tile."""
        return self in _CORNER_TYPES


class HexTerrainType(str, Enum):
    """Terrain bucket of a hex island cell."""

    WATER = "water"
    SAND = "sand"
    DIRT = "dirt"
    GRASS = "grass"

    @property
    def walkable(self) -> bool:
        """Whether a building may stand on this terrain."""
        return self is not HexTerrainType.WATER


class SplatLayer(IntEnum):
    """Texture layer index in a splat map."""

    GRASS = 0
    ROCK = 1
    SNOW = 2


_CORNER_TYPES = frozenset({
    TopTileType.LEFT_CORNER,
    TopTileType.RIGHT_CORNER,
})
