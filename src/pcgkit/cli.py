"""Command-line interface for procedural generation."""

import argparse
import logging
import time
from pathlib import Path

DEFAULT_HEX_TILES = "grass,dirt,sand,water"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Generate deterministic procedural terrain data"
    )
    parser.add_argument(
        "kind",
        choices=["platformer", "heightmap", "hex"],
        help="Which generator to run",
    )
    parser.add_argument(
        "--config", "-c", type=str, default=None, help="TOML config file (optional)"
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Override the configured seed"
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Output path (default: output/<kind>.npz)",
    )
    parser.add_argument(
        "--tiles",
        type=str,
        default=DEFAULT_HEX_TILES,
        help=f"Comma-separated hex terrain tile names (default: {DEFAULT_HEX_TILES})",
    )
    parser.add_argument(
        "--debug-images",
        type=str,
        default=None,
        help="Directory to save heightmap debug images (optional)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for generation."""
    args = build_parser().parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    # Import here to avoid slow startup for --help
    from .config import PcgConfig, load_config

    config = load_config(Path(args.config)) if args.config else PcgConfig()
    output_path = Path(args.output or f"output/{args.kind}.npz")
    output_path.parent.mkdir(parents=True, exist_ok=True)

    start_time = time.time()
    if args.kind == "platformer":
        saved = _run_platformer(config, args.seed, output_path)
    elif args.kind == "heightmap":
        saved = _run_heightmap(config, args.seed, output_path, args.debug_images)
    else:
        tiles = [name.strip() for name in args.tiles.split(",") if name.strip()]
        saved = _run_hex(config, args.seed, output_path, tiles)
    gen_time = time.time() - start_time

    print()
    print(f"Generation complete in {gen_time:.1f}s")
    print(f"Saved to {saved}")


def _run_platformer(config, seed: int | None, output_path: Path) -> Path:
    from .persistence import save_artifacts
    from .platformer import generate_section_terrain
    from .validation import validate_profile

    settings = config.platformer
    if seed is not None:
        settings = settings.model_copy(update={"seed": seed})

    profile = generate_section_terrain(settings)
    validate_profile(profile).log("Profile")
    return save_artifacts(
        output_path, profile.arrays(), kind="platformer", seed=settings.seed
    )


def _run_heightmap(
    config, seed: int | None, output_path: Path, debug_images: str | None
) -> Path:
    from .generator import generate_terrain_heightmap
    from .persistence import save_artifacts
    from .validation import validate_heightmap, validate_splat_map

    settings = config.heightmap
    if seed is not None:
        settings = settings.model_copy(update={"seed": seed})

    result = generate_terrain_heightmap(
        settings, debug_output_dir=Path(debug_images) if debug_images else None
    )
    validate_heightmap(result.final).log("Heightmap")
    validate_splat_map(result.splat).log("Splat map")
    return save_artifacts(
        output_path, result.arrays(), kind="heightmap", seed=settings.seed
    )


def _run_hex(config, seed: int | None, output_path: Path, tiles: list[str]) -> Path:
    import numpy as np

    from .hexgrid import generate_hex_grid
    from .persistence import save_artifacts
    from .tile_types import HexTerrainType

    settings = config.hex
    if seed is not None:
        settings = settings.model_copy(update={"seed": seed})

    cells = generate_hex_grid(settings, tiles)

    order = list(HexTerrainType)
    # Same clamping as generate_hex_grid
    shape = (max(0, settings.grid_height), max(0, settings.grid_width))
    terrain = np.zeros(shape, dtype=np.uint8)
    occupants = np.zeros(shape, dtype=np.int32)
    for (x, y), cell in cells.items():
        terrain[y, x] = order.index(cell.terrain_type)
        occupants[y, x] = tiles.index(cell.occupant)

    return save_artifacts(
        output_path,
        {"terrain": terrain, "occupants": occupants},
        kind="hex",
        seed=settings.seed,
        extra={"tiles": tiles, "terrain_types": [t.value for t in order]},
    )


if __name__ == "__main__":
    main()
