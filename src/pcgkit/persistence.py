"""Artifact persistence: save and load generated arrays."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from .exceptions import ArtifactFormatError

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


def save_artifacts(
    path: Path,
    arrays: dict[str, NDArray],
    kind: str,
    seed: int,
    extra: dict | None = None,
) -> Path:
    """Save generated arrays to disk.

    Uses numpy's compressed .npz format with a JSON metadata blob.

    Args:
        path: Output path; the suffix is forced to .npz.
        arrays: Named arrays to store.
        kind: Generator that produced the arrays, e.g. "heightmap".
        seed: Seed used for generation.
        extra: Additional JSON-serializable metadata.

    Returns:
        The path actually written.
    """
    path = path.with_suffix(".npz")
    if "metadata" in arrays:
        raise ValueError("'metadata' is reserved and cannot be used as an array name")

    metadata = {
        "version": FORMAT_VERSION,
        "kind": kind,
        "seed": seed,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        **(extra or {}),
    }

    np.savez_compressed(
        path,
        metadata=np.frombuffer(json.dumps(metadata).encode("utf-8"), dtype=np.uint8),
        **arrays,
    )

    file_size = path.stat().st_size / 1024
    logger.info(f"Saved {kind} artifacts to {path} ({file_size:.1f} KB)")
    return path


def load_artifacts(path: Path) -> tuple[dict[str, NDArray], dict]:
    """Load arrays saved by ``save_artifacts``.

    Args:
        path: Path to .npz file.

    Returns:
        Tuple of (arrays by name, metadata dict).

    Raises:
        FileNotFoundError: If file doesn't exist.
        ArtifactFormatError: If the metadata blob is missing or unreadable.
    """
    if not path.exists():
        raise FileNotFoundError(f"Artifact file not found: {path}")

    with np.load(path) as data:
        if "metadata" not in data:
            raise ArtifactFormatError("Invalid artifact file: missing 'metadata'")
        try:
            metadata = json.loads(data["metadata"].tobytes().decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ArtifactFormatError(f"Invalid artifact metadata: {exc}") from exc

        arrays = {name: data[name] for name in data.files if name != "metadata"}

    logger.info(f"Loaded {metadata.get('kind', 'unknown')} artifacts from {path}")
    return arrays, metadata
