"""Noise generation functions for procedural terrain.

Provides single-octave Perlin noise, a crude 3D variant, fractal Brownian
motion (fBm) built from Perlin octaves, and bilinear value noise.
"""

import logging

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .rng import OCTAVE_JITTER_OFFSET, SeededRng

logger = logging.getLogger(__name__)

MIN_SCALE = 0.0001
OCTAVE_OFFSET_RANGE = 100000.0

# Fixed lattice hash, doubled to avoid index wrapping.
_PERM = np.tile(np.random.default_rng(0).permutation(256), 2).astype(np.int64)

_GRADIENTS = np.array(
    [[1, 1], [-1, 1], [1, -1], [-1, -1], [1, 0], [-1, 0], [0, 1], [0, -1]],
    dtype=np.float64,
)


def _fade(t: NDArray[np.float64]) -> NDArray[np.float64]:
    """6t^5 - 15t^4 + 10t^3"""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _lerp(a: NDArray[np.float64], b: NDArray[np.float64], t: NDArray[np.float64]) -> NDArray[np.float64]:
    return a + t * (b - a)


def _grad(h: NDArray[np.int64], dx: NDArray[np.float64], dy: NDArray[np.float64]) -> NDArray[np.float64]:
    g = _GRADIENTS[h & 7]
    return g[..., 0] * dx + g[..., 1] * dy


def _clamped_size(width: int, height: int) -> tuple[int, int]:
    """Clamp negative grid dimensions to zero."""
    if width < 0 or height < 0:
        logger.debug(f"Clamping grid size {width}x{height} to non-negative")
    return max(0, width), max(0, height)


def perlin_2d(x: ArrayLike, y: ArrayLike) -> NDArray[np.float64] | float:
    """Sample coherent gradient noise.

    The lattice is fixed; callers decorrelate patterns by offsetting the
    sample coordinates. Integer lattice points always return 0.5.

    Args:
        x: X coordinate(s).
        y: Y coordinate(s), broadcastable against ``x``.

    Returns:
        Noise in [0, 1], a float for scalar input, otherwise an array.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)

    x_floor = np.floor(x)
    y_floor = np.floor(y)
    xi = x_floor.astype(np.int64) & 255
    yi = y_floor.astype(np.int64) & 255
    dx = x - x_floor
    dy = y - y_floor

    u = _fade(dx)
    v = _fade(dy)

    # Hash the four cell corners
    aa = _PERM[_PERM[xi] + yi]
    ab = _PERM[_PERM[xi] + yi + 1]
    ba = _PERM[_PERM[xi + 1] + yi]
    bb = _PERM[_PERM[xi + 1] + yi + 1]

    x1 = _lerp(_grad(aa, dx, dy), _grad(ba, dx - 1.0, dy), u)
    x2 = _lerp(_grad(ab, dx, dy - 1.0), _grad(bb, dx - 1.0, dy - 1.0), u)
    value = np.clip((_lerp(x1, x2, v) + 1.0) / 2.0, 0.0, 1.0)

    if value.ndim == 0:
        return float(value)
    return value


def perlin_3d(x: ArrayLike, y: ArrayLike, z: ArrayLike, scale: float) -> NDArray[np.float64] | float:
    """Approximate 3D noise by averaging the xy, yz and xz 2D slices.

    Not true 3D Perlin noise, but continuous in all three axes.

    Args:
        x: X coordinate(s).
        y: Y coordinate(s).
        z: Z coordinate(s).
        scale: Divisor applied to every coordinate.

    Returns:
        Noise in [0, 1].
    """
    if scale <= 0:
        scale = MIN_SCALE

    x = np.asarray(x, dtype=np.float64) / scale
    y = np.asarray(y, dtype=np.float64) / scale
    z = np.asarray(z, dtype=np.float64) / scale

    xy = perlin_2d(x, y)
    yz = perlin_2d(y, z)
    xz = perlin_2d(x, z)
    return (xy + yz + xz) / 3.0


def perlin_noise_2d(
    width: int,
    height: int,
    scale: float,
    offset_x: float = 0.0,
    offset_y: float = 0.0,
) -> NDArray[np.float32]:
    """Sample a single Perlin octave over a grid.

    Args:
        width: Number of samples along x.
        height: Number of samples along y.
        scale: Noise scale; larger values change more slowly.
        offset_x: Horizontal sample offset.
        offset_y: Vertical sample offset.

    Returns:
        Array of shape (height, width) with values in [0, 1].
    """
    if scale <= 0:
        scale = MIN_SCALE

    ys, xs = np.meshgrid(
        np.arange(height, dtype=np.float64),
        np.arange(width, dtype=np.float64),
        indexing="ij",
    )
    return perlin_2d((xs + offset_x) / scale, (ys + offset_y) / scale).astype(np.float32)


def octave_offsets(seed: int, octaves: int) -> list[tuple[float, float]]:
    """Draw the per-octave sample offsets for a seed.

    Args:
        seed: Base seed; the jitter stream is ``seed + OCTAVE_JITTER_OFFSET``.
        octaves: Number of octaves.

    Returns:
        One ``(x, y)`` offset per octave.
    """
    rng = SeededRng(seed + OCTAVE_JITTER_OFFSET)
    offsets = []
    for _ in range(octaves):
        ox = rng.next_range(-OCTAVE_OFFSET_RANGE, OCTAVE_OFFSET_RANGE)
        oy = rng.next_range(-OCTAVE_OFFSET_RANGE, OCTAVE_OFFSET_RANGE)
        offsets.append((ox, oy))
    return offsets


def max_amplitude(octaves: int, persistence: float) -> float:
    """Sum of octave amplitudes, used as the fBm normalization constant."""
    total = 0.0
    amplitude = 1.0
    for _ in range(octaves):
        total += amplitude
        amplitude *= persistence
    return total


def fractal_noise_2d(
    width: int,
    height: int,
    scale: float,
    octaves: int,
    persistence: float,
    lacunarity: float,
    seed: int,
    offset_x: float = 0.0,
    offset_y: float = 0.0,
) -> NDArray[np.float32]:
    """Generate fractal Brownian motion noise from Perlin octaves.

    Each octave samples at ``lacunarity`` times the previous frequency with
    ``persistence`` times the previous amplitude, shifted by its own
    seed-derived offset. The sum is mapped into [0, 1] using the maximum
    possible amplitude, not the observed min/max.

    Args:
        width: Output width in samples.
        height: Output height in samples.
        scale: Base noise scale (clamped to a small positive value).
        octaves: Number of noise layers (clamped to at least 1).
        persistence: Amplitude multiplier between octaves.
        lacunarity: Frequency multiplier between octaves.
        seed: Seed for the per-octave offsets.
        offset_x: Extra horizontal offset applied to every octave.
        offset_y: Extra vertical offset applied to every octave.

    Returns:
        Array of shape (height, width) with values in [0, 1].
    """
    if scale <= 0:
        logger.debug(f"Clamping noise scale {scale} to {MIN_SCALE}")
        scale = MIN_SCALE
    if octaves < 1:
        logger.debug(f"Clamping octaves {octaves} to 1")
        octaves = 1
    width, height = _clamped_size(width, height)

    offsets = octave_offsets(seed, octaves)
    normalizer = max_amplitude(octaves, persistence)

    ys, xs = np.meshgrid(
        np.arange(height, dtype=np.float64),
        np.arange(width, dtype=np.float64),
        indexing="ij",
    )
    total = np.zeros((height, width), dtype=np.float64)

    amplitude = 1.0
    frequency = 1.0
    for ox, oy in offsets:
        sample_x = xs / scale * frequency + ox + offset_x
        sample_y = ys / scale * frequency + oy + offset_y
        total += (perlin_2d(sample_x, sample_y) * 2.0 - 1.0) * amplitude
        amplitude *= persistence
        frequency *= lacunarity

    if normalizer == 0:
        return np.full((height, width), 0.5, dtype=np.float32)

    result = (total / normalizer + 1.0) / 2.0
    return np.clip(result, 0.0, 1.0).astype(np.float32)


def value_noise_2d(
    width: int,
    height: int,
    grid_size: int,
    seed: int,
) -> NDArray[np.float32]:
    """Generate value noise by bilinear interpolation of a random lattice.

    Args:
        width: Output width in samples.
        height: Output height in samples.
        grid_size: Lattice cell size in samples (clamped to at least 1).
        seed: Seed for the lattice values.

    Returns:
        Array of shape (height, width) with values in [0, 1).
    """
    if grid_size < 1:
        grid_size = 1
    width, height = _clamped_size(width, height)

    lattice_w = -(-width // grid_size) + 1
    lattice_h = -(-height // grid_size) + 1
    lattice = SeededRng(seed).uniform_array((lattice_h, lattice_w))

    gx = np.arange(width, dtype=np.float64) / grid_size
    gy = np.arange(height, dtype=np.float64) / grid_size
    ix = np.floor(gx).astype(np.int64)
    iy = np.floor(gy).astype(np.int64)
    fx = (gx - ix)[np.newaxis, :]
    fy = (gy - iy)[:, np.newaxis]
    ix1 = np.minimum(ix + 1, lattice_w - 1)
    iy1 = np.minimum(iy + 1, lattice_h - 1)

    v00 = lattice[np.ix_(iy, ix)]
    v10 = lattice[np.ix_(iy, ix1)]
    v01 = lattice[np.ix_(iy1, ix)]
    v11 = lattice[np.ix_(iy1, ix1)]

    top = _lerp(v00, v10, fx)
    bottom = _lerp(v01, v11, fx)
    return _lerp(top, bottom, fy).astype(np.float32)
