"""Post-generation invariant checks."""

import logging

import numpy as np
from numpy.typing import NDArray

from .platformer import WATER_MIN_SPACING, TerrainProfile
from .splat import LAYER_COUNT
from .tile_types import TopTileType

logger = logging.getLogger(__name__)

SPLAT_SUM_TOLERANCE = 1e-4


class ValidationResult:
    """Result of artifact validation."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.passed = True

    def add_error(self, message: str) -> None:
        """Add validation error."""
        self.errors.append(message)
        self.passed = False

    def add_warning(self, message: str) -> None:
        """Add validation warning."""
        self.warnings.append(message)

    def log(self, name: str) -> None:
        """Log the outcome under an artifact name."""
        if self.passed:
            logger.info(f"{name} validation passed")
        else:
            logger.warning(f"{name} validation failed with {len(self.errors)} errors")
            for error in self.errors:
                logger.error(f"  - {error}")

        for warning in self.warnings:
            logger.warning(f"  - {warning}")


def validate_profile(profile: TerrainProfile) -> ValidationResult:
    """Validate a platformer terrain profile.

    Args:
        profile: Generated profile.

    Returns:
        ValidationResult with any errors/warnings.
    """
    result = ValidationResult()
    width = profile.width

    # Check 1: Parallel arrays agree
    lengths = {
        len(profile.heights),
        len(profile.section_ids),
        len(profile.water),
        len(profile.top_tiles),
    }
    if len(lengths) != 1:
        result.add_error(f"Profile arrays have mismatched lengths {sorted(lengths)}")
        return result

    if width == 0:
        result.add_warning("Profile is empty")
        return result

    _check_sections(profile, result)
    _check_water(profile, result)
    _check_shorelines(profile, result)
    _check_endpoints(profile, result)

    return result


def _check_sections(profile: TerrainProfile, result: ValidationResult) -> None:
    """Check section ids step by one and heights only change at boundaries."""
    ids = profile.section_ids
    if ids[0] != 0:
        result.add_error(f"First section id is {ids[0]}, expected 0")

    steps = np.diff(ids)
    if np.any((steps != 0) & (steps != 1)):
        result.add_error("Section ids do not increase by exactly one per transition")

    for section in profile.sections():
        run = profile.heights[section.start : section.end + 1]
        if np.any(run != section.height):
            result.add_error(f"Section {section.section_id} has non-uniform height")


def _check_water(profile: TerrainProfile, result: ValidationResult) -> None:
    """Check water sections are interior, whole, and spaced apart."""
    sections = list(profile.sections())
    last_id = sections[-1].section_id

    previous_end = None
    for section in sections:
        run = profile.water[section.start : section.end + 1]
        if np.any(run) and not np.all(run):
            result.add_error(f"Section {section.section_id} is partially water")
        if not section.is_water:
            continue

        if section.section_id in (0, last_id):
            result.add_error(f"Water in boundary section {section.section_id}")
        if previous_end is not None and section.start - previous_end < WATER_MIN_SPACING:
            result.add_error(
                f"Water section {section.section_id} starts "
                f"{section.start - previous_end} columns after the previous one"
            )
        previous_end = section.end

    for x, tile in enumerate(profile.top_tiles):
        if (tile is TopTileType.WATER) != bool(profile.water[x]):
            result.add_error(f"Column {x} top tile {tile.value} disagrees with water mask")


def _check_shorelines(profile: TerrainProfile, result: ValidationResult) -> None:
    """Check sections adjacent to water share the water height."""
    heights_by_id = {s.section_id: s.height for s in profile.sections()}
    for water_id in profile.water_section_ids():
        water_height = heights_by_id[water_id]
        for bank_id in (water_id - 1, water_id + 1):
            if bank_id in heights_by_id and heights_by_id[bank_id] != water_height:
                result.add_error(
                    f"Bank section {bank_id} height {heights_by_id[bank_id]} "
                    f"differs from water height {water_height}"
                )


def _check_endpoints(profile: TerrainProfile, result: ValidationResult) -> None:
    """Check the first and last columns are corners."""
    first, last = profile.top_tiles[0], profile.top_tiles[-1]
    if not profile.water[0] and first is not TopTileType.LEFT_CORNER:
        result.add_error(f"First column is {first.value}, expected left_corner")
    if profile.width > 1 and not profile.water[-1] and last is not TopTileType.RIGHT_CORNER:
        result.add_error(f"Last column is {last.value}, expected right_corner")


def validate_heightmap(heightmap: NDArray[np.float32]) -> ValidationResult:
    """Validate a heightmap is finite, in [0, 1], and not flat."""
    result = ValidationResult()

    if heightmap.ndim != 2:
        result.add_error(f"Heightmap has {heightmap.ndim} dimensions, expected 2")
        return result

    if not np.all(np.isfinite(heightmap)):
        result.add_error("Heightmap contains non-finite values")
        return result

    lo, hi = float(heightmap.min()), float(heightmap.max())
    if lo < 0.0 or hi > 1.0:
        result.add_error(f"Heightmap range [{lo:.4f}, {hi:.4f}] outside [0, 1]")
    if hi - lo < 0.05:
        result.add_warning(f"Heightmap is nearly flat (range {hi - lo:.4f})")

    return result


def validate_splat_map(splat_map: NDArray[np.float32]) -> ValidationResult:
    """Validate splat weights are in [0, 1] and sum to 1 per cell."""
    result = ValidationResult()

    if splat_map.ndim != 3 or splat_map.shape[-1] != LAYER_COUNT:
        result.add_error(f"Splat map shape {splat_map.shape} is not (rows, cols, {LAYER_COUNT})")
        return result

    out_of_range = int(np.sum((splat_map < 0.0) | (splat_map > 1.0)))
    if out_of_range > 0:
        result.add_error(f"{out_of_range} splat weights outside [0, 1]")

    sums = splat_map.sum(axis=-1)
    bad_sums = int(np.sum(np.abs(sums - 1.0) > SPLAT_SUM_TOLERANCE))
    if bad_sums > 0:
        result.add_error(f"{bad_sums} cells have weights not summing to 1")

    return result
