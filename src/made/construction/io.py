"""Material save/load for JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from made.model import Material
from made.periodic_table import DEFAULT_PERIODIC_TABLE, PeriodicTable

logger = logging.getLogger(__name__)

_VALID_KEYS = frozenset({
    "name", "basis", "lattice", "isNonPeriodic", "derivedProperties",
    "hash", "src",
})


def save_material(path: str | Path, material: Material) -> None:
    """Save a material configuration to a JSON file.

    The file is human-readable with two-space indentation.

    Args:
        path: Destination file path.
        material: The material to save.
    """
    Path(path).write_text(json.dumps(material.to_dict(), indent=2) + "\n")
    logger.debug("saved %r to %s", material.name, path)


def load_material(
    path: str | Path,
    periodic_table: PeriodicTable = DEFAULT_PERIODIC_TABLE,
) -> Material:
    """Load a material configuration from a JSON file.

    Args:
        path: Source file path.
        periodic_table: Element data for the loaded basis.

    Returns:
        The loaded :class:`Material`.

    Raises:
        ValueError: If the file has unknown top-level keys or no basis.
    """
    data = json.loads(Path(path).read_text())

    unknown = set(data) - _VALID_KEYS
    if unknown:
        raise ValueError(
            f"unknown top-level keys in material file: {sorted(unknown)}"
        )
    if "basis" not in data:
        raise ValueError(f"material file {path} has no basis")

    material = Material.from_dict(data, periodic_table=periodic_table)
    logger.debug("loaded %r from %s", material.name, path)
    return material
