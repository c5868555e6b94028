"""Heightmap pipeline orchestration."""

import logging
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from .config import HeightmapConfig
from .heightmap import (
    apply_height_curve,
    generate_heightmap,
    normalize_heightmap,
    smooth_heightmap,
)
from .splat import dominant_layer, generate_splat_map
from .tile_types import SplatLayer

logger = logging.getLogger(__name__)


class HeightmapResult:
    """Result of heightmap generation with every intermediate stage."""

    def __init__(
        self,
        raw: NDArray[np.float32],
        normalized: NDArray[np.float32],
        smoothed: NDArray[np.float32] | None,
        final: NDArray[np.float32],
        splat: NDArray[np.float32],
        config: HeightmapConfig,
    ):
        self.raw = raw
        self.normalized = normalized
        self.smoothed = smoothed
        self.final = final
        self.splat = splat
        self.config = config

    def arrays(self) -> dict[str, NDArray]:
        """Named arrays for persistence, skipping stages that did not run."""
        arrays = {
            "raw": self.raw,
            "normalized": self.normalized,
            "final": self.final,
            "splat": self.splat,
        }
        if self.smoothed is not None:
            arrays["smoothed"] = self.smoothed
        return arrays


def generate_terrain_heightmap(
    config: HeightmapConfig,
    debug_output_dir: Path | None = None,
) -> HeightmapResult:
    """Run the full heightmap pipeline.

    raw fractal noise -> normalize -> (optional) smooth -> curve+contrast,
    then the splat map of the final heightmap.

    Args:
        config: Heightmap pipeline configuration.
        debug_output_dir: Directory for debug images (None = disabled).

    Returns:
        HeightmapResult with each stage's output.
    """
    noise = config.noise
    logger.info(
        f"Generating heightmap {config.resolution}x{config.resolution} with seed {config.seed}"
    )

    logger.info("Stage A: Generating fractal noise...")
    raw = generate_heightmap(
        config.resolution,
        noise.scale,
        noise.octaves,
        noise.persistence,
        noise.lacunarity,
        config.seed,
    )

    logger.info("Stage B: Normalizing...")
    normalized = normalize_heightmap(raw, seed=config.seed)

    smoothed = None
    current = normalized
    if config.smoothing.enabled:
        logger.info("Stage C: Smoothing...")
        smoothed = smooth_heightmap(
            normalized,
            radius=config.smoothing.radius,
            iterations=config.smoothing.iterations,
        )
        current = smoothed

    logger.info("Stage D: Applying height curve and contrast...")
    final = apply_height_curve(current, config.curve)

    logger.info("Stage E: Generating splat map...")
    splat = generate_splat_map(final, config.splat)

    _log_heightmap_stats(final, splat)

    if debug_output_dir:
        _dump_debug_images(
            Path(debug_output_dir),
            raw=raw,
            normalized=normalized,
            final=final,
            dominant_layer=dominant_layer(splat),
        )

    return HeightmapResult(
        raw=raw,
        normalized=normalized,
        smoothed=smoothed,
        final=final,
        splat=splat,
        config=config,
    )


def _log_heightmap_stats(final: NDArray[np.float32], splat: NDArray[np.float32]) -> None:
    """Log heightmap and splat statistics."""
    logger.info(
        f"Heightmap range: min={final.min():.3f}, max={final.max():.3f}, "
        f"mean={final.mean():.3f}"
    )

    dominant = dominant_layer(splat)
    total = dominant.size
    for layer in SplatLayer:
        count = int(np.sum(dominant == layer))
        logger.info(f"  {layer.name.lower()}: {count:,} ({count / total * 100:.1f}%)")


def _dump_debug_images(output_dir: Path, **arrays: NDArray) -> None:
    """Save arrays as images for debugging.

    Args:
        output_dir: Directory to save images.
        **arrays: Named arrays to save.
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        logger.warning("matplotlib not available, skipping debug images")
        return

    output_dir.mkdir(parents=True, exist_ok=True)

    for name, arr in arrays.items():
        fig, ax = plt.subplots(figsize=(10, 10))

        if arr.dtype == np.uint8:
            ax.imshow(arr, cmap="tab10")
        else:
            ax.imshow(arr, cmap="terrain")

        ax.set_title(name)
        ax.axis("off")

        fig.savefig(output_dir / f"{name}.png", dpi=150, bbox_inches="tight")
        plt.close(fig)

    logger.info(f"Debug images saved to {output_dir}")
