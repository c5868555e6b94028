"""Custom exceptions for procedural generation."""


class PcgError(Exception):
    """Base exception for generation errors."""

    pass


class MissingTileError(PcgError):
    """Raised when no tile reference matches a terrain bucket."""

    def __init__(self, terrain_type: str):
        super().__init__(f"No tile available for terrain type '{terrain_type}'")
        self.terrain_type = terrain_type


class ArtifactFormatError(PcgError, ValueError):
    """Raised when a saved artifact file is missing required data."""

    pass
