"""Seeded random streams for deterministic generation.

Every stochastic step builds its own stream from a base seed plus one of the
fixed offsets below, so sibling computations never consume each other's
values.
"""

import numpy as np
from numpy.typing import NDArray

# Stream offsets added to the base seed.
PROFILE_HEIGHT_OFFSET = 0
WATER_SEED_OFFSET = 12345
OCTAVE_JITTER_OFFSET = 1283
FLAT_REPAIR_SEED_OFFSET = 7919
HEX_NOISE_OFFSET = 4241
HEX_TILE_OFFSET = 0

_SEED_MODULUS = 2**64


class SeededRng:
    """Deterministic uniform stream built from an integer seed.

    Any Python int is accepted; it is reduced modulo 2**64 so negative
    seeds map onto a stable PCG64 state.
    """

    def __init__(self, seed: int):
        self.seed = int(seed)
        self._generator = np.random.default_rng(self.seed % _SEED_MODULUS)

    def next_uniform(self) -> float:
        """Return a float in [0, 1)."""
        return float(self._generator.random())

    def next_int(self, lo: int, hi_exclusive: int) -> int:
        """Return an int in [lo, hi_exclusive).

        Returns ``lo`` when the range is empty.
        """
        if hi_exclusive <= lo:
            return lo
        return int(self._generator.integers(lo, hi_exclusive))

    def next_range(self, lo: float, hi: float) -> float:
        """Return a float in [lo, hi)."""
        return lo + self.next_uniform() * (hi - lo)

    def uniform_array(self, shape: tuple[int, ...]) -> NDArray[np.float64]:
        """Return an array of floats in [0, 1), filled in row-major order."""
        return self._generator.random(shape)

    def derive(self, offset: int) -> "SeededRng":
        """Build an independent stream from this stream's seed plus ``offset``."""
        return SeededRng(self.seed + offset)

    def __repr__(self) -> str:
        return f"SeededRng(seed={self.seed})"
