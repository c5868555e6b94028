"""Heightmap stages: fractal synthesis, normalization, smoothing, curve."""

import logging
from typing import Callable

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage

from .noise import fractal_noise_2d
from .rng import FLAT_REPAIR_SEED_OFFSET, SeededRng

logger = logging.getLogger(__name__)

BASE_OFFSET_RANGE = 10000.0
MIN_RESOLUTION = 2
FLAT_TOLERANCE = 1e-6
LOW_CONTRAST_RANGE = 0.1
LOW_CONTRAST_EXPONENT = 0.7
CONTRAST_EXPONENT = 0.9
MIN_FINAL_RANGE = 0.05

# Parameters of the regenerated heightmap used when normalization sees a flat input
REPAIR_SCALE = 0.03
REPAIR_OCTAVES = 3
REPAIR_PERSISTENCE = 0.4
REPAIR_LACUNARITY = 2.5

HeightCurveFn = Callable[[NDArray[np.float32]], NDArray[np.float32]]


def generate_heightmap(
    resolution: int,
    scale: float,
    octaves: int,
    persistence: float,
    lacunarity: float,
    seed: int,
) -> NDArray[np.float32]:
    """Generate a square fractal-noise heightmap.

    The seed picks a base offset into the noise plane and, through the
    octave jitter stream, the per-octave offsets.

    Args:
        resolution: Side length in samples (2^n+1 by convention).
        scale: Noise scale; lower values give larger features.
        octaves: Number of detail layers.
        persistence: Influence of each successive octave.
        lacunarity: Frequency increase per octave.
        seed: Random seed for reproducible results.

    Returns:
        Array of shape (resolution, resolution) with values in [0, 1].
    """
    if resolution < MIN_RESOLUTION:
        logger.debug(f"Clamping resolution {resolution} to {MIN_RESOLUTION}")
        resolution = MIN_RESOLUTION

    rng = SeededRng(seed)
    offset_x = rng.next_range(-BASE_OFFSET_RANGE, BASE_OFFSET_RANGE)
    offset_y = rng.next_range(-BASE_OFFSET_RANGE, BASE_OFFSET_RANGE)

    return fractal_noise_2d(
        resolution,
        resolution,
        scale,
        octaves,
        persistence,
        lacunarity,
        seed,
        offset_x,
        offset_y,
    )


def normalize_heightmap(
    heightmap: NDArray[np.float32],
    seed: int = 0,
) -> NDArray[np.float32]:
    """Stretch a heightmap into [0, 1], repairing degenerate inputs.

    A completely flat input is replaced by a freshly generated heightmap
    from ``seed + FLAT_REPAIR_SEED_OFFSET``, cropped to the input's shape.
    A low-contrast input (range
    below 0.1) is stretched and then raised to the power 0.7.

    Args:
        heightmap: Input heightmap.
        seed: Base seed for the flat-input repair path.

    Returns:
        New heightmap with values in [0, 1].
    """
    data = np.asarray(heightmap, dtype=np.float64)
    lo = float(data.min())
    hi = float(data.max())
    value_range = hi - lo

    if value_range <= FLAT_TOLERANCE:
        logger.warning("Heightmap is completely flat, regenerating with repair seed")
        rows, cols = data.shape
        repaired = generate_heightmap(
            max(rows, cols),
            REPAIR_SCALE,
            REPAIR_OCTAVES,
            REPAIR_PERSISTENCE,
            REPAIR_LACUNARITY,
            seed + FLAT_REPAIR_SEED_OFFSET,
        )
        return repaired[:rows, :cols].copy()

    stretched = (data - lo) / value_range

    if value_range < LOW_CONTRAST_RANGE:
        logger.warning(
            f"Heightmap has very little variation (range: {value_range:.4f}), enhancing contrast"
        )
        return np.power(stretched, LOW_CONTRAST_EXPONENT).astype(np.float32)

    return stretched.astype(np.float32)


def tent_kernel(radius: int) -> NDArray[np.float64]:
    """Build a tent-weighted kernel of half-width ``radius``.

    Weight is ``max(0, radius - distance) / radius``; the kernel is not
    normalized.
    """
    offsets = np.arange(-radius, radius + 1, dtype=np.float64)
    ky, kx = np.meshgrid(offsets, offsets, indexing="ij")
    distance = np.sqrt(kx**2 + ky**2)
    return np.maximum(0.0, radius - distance) / radius


def smooth_heightmap(
    heightmap: NDArray[np.float32],
    radius: int = 2,
    iterations: int = 2,
) -> NDArray[np.float32]:
    """Blur a heightmap with repeated tent-weighted averages.

    Border samples are clamped (no wraparound). Each pass reads the full
    output of the previous pass.

    Args:
        heightmap: Input heightmap.
        radius: Kernel half-width in cells (clamped to at least 1).
        iterations: Number of passes; zero or fewer returns a copy.

    Returns:
        New smoothed heightmap.
    """
    if radius < 1:
        logger.debug(f"Clamping smoothing radius {radius} to 1")
        radius = 1

    kernel = tent_kernel(radius)
    kernel /= kernel.sum()

    result = np.array(heightmap, dtype=np.float64)
    for _ in range(max(0, iterations)):
        result = ndimage.correlate(result, kernel, mode="nearest")

    return result.astype(np.float32)


def apply_height_curve(
    heightmap: NDArray[np.float32],
    curve: HeightCurveFn | None = None,
) -> NDArray[np.float32]:
    """Remap heights through a curve and boost contrast.

    After the remap every value is raised to the power 0.9. If the result
    spans less than 0.05, a sine/cosine ripple is blended in (80% ripple,
    20% original) so the terrain is never flat.

    Args:
        heightmap: Input heightmap in [0, 1].
        curve: Monotonic remap applied per cell; ``None`` is identity.

    Returns:
        New processed heightmap.
    """
    data = np.asarray(heightmap, dtype=np.float32)
    if curve is not None:
        data = np.asarray(curve(data), dtype=np.float32)

    result = np.power(np.clip(data, 0.0, None), CONTRAST_EXPONENT).astype(np.float64)

    lo = float(result.min())
    hi = float(result.max())
    logger.debug(f"Heightmap range: min={lo:.4f}, max={hi:.4f}, delta={hi - lo:.4f}")

    if hi - lo < MIN_FINAL_RANGE:
        logger.warning("Final heightmap is too flat, adding forced height variation")
        result = result * 0.2 + ripple_pattern(*result.shape) * 0.8

    return result.astype(np.float32)


def ripple_pattern(rows: int, cols: int) -> NDArray[np.float64]:
    """Deterministic sine/cosine hills in [0, 0.8]."""
    x_factor = np.arange(cols, dtype=np.float64) / cols * 10.0
    y_factor = np.arange(rows, dtype=np.float64) / rows * 10.0
    return (np.sin(x_factor)[np.newaxis, :] * np.cos(y_factor)[:, np.newaxis] + 1.0) * 0.4
