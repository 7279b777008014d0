"""XYZ text: one ``<element> <x> <y> <z>`` line per atom.

The standard two-line header (atom count, then a comment) is written
on output and skipped on input when present.  Lines may carry three
extra ``0``/``1`` movement flags, read as atom constraints.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np

from made.model import Basis, Material, Units
from made.parsers._util import check_element, format_float, parse_floats, read_source


def _strip_header(lines: list[str]) -> list[str]:
    if lines and lines[0].strip().isdigit():
        return lines[2:]
    return lines


def _parse_flag(token: str, line: str) -> bool:
    if token not in ("0", "1"):
        raise ValueError(f"constraint flags must be 0 or 1 in line: {line!r}")
    return token == "1"


def to_basis_config(
    source: str | Path,
    units: Units | str = Units.CARTESIAN,
    cell: object = None,
) -> dict:
    """Parse XYZ text into a basis configuration.

    Args:
        source: Path to an ``.xyz`` file, or the content as a string.
        units: Units of the coordinates in the text.
        cell: Cell for the basis, shape ``(3, 3)``.  Defaults to the
            identity.

    Returns:
        A basis configuration dictionary.

    Raises:
        ValueError: If a line is malformed, or the header count does
            not match the number of atom lines.
    """
    lines = read_source(source).splitlines()
    expected = int(lines[0]) if lines and lines[0].strip().isdigit() else None
    elements: list[str] = []
    coordinates: list[list[float]] = []
    constraints: list[list[bool]] = []

    for line in _strip_header(lines):
        parts = line.split()
        if not parts:
            continue
        if len(parts) not in (4, 7):
            raise ValueError(f"expected 4 or 7 columns in XYZ line: {line!r}")
        elements.append(check_element(parts[0], line))
        coordinates.append(parse_floats(parts[1:4], line))
        if len(parts) == 7:
            constraints.append([_parse_flag(t, line) for t in parts[4:7]])

    if expected is not None and expected != len(elements):
        raise ValueError(
            f"XYZ header declares {expected} atoms but {len(elements)} were found"
        )
    if constraints and len(constraints) != len(elements):
        raise ValueError("constraint flags must be given for every atom or none")

    config: dict = {
        "elements": elements,
        "coordinates": coordinates,
        "units": str(Units(units)),
        "cell": np.eye(3).tolist() if cell is None else np.asarray(cell).tolist(),
    }
    if constraints:
        config["constraints"] = constraints
    return config


def from_basis(basis: Basis, comment: str = "") -> str:
    """Write *basis* as XYZ text in its current units."""
    lines = [str(basis.n_atoms), comment]
    for atom in basis.atoms:
        line = f"{atom.element:<4s}" + "".join(
            format_float(x) for x in atom.coordinate
        )
        if basis.has_constraints:
            line += " " + " ".join(
                "1" if flag else "0"
                for flag in (atom.constraint or (True, True, True))
            )
        lines.append(line)
    return "\n".join(lines) + "\n"


def from_material(config: dict, fractional: bool = False) -> str:
    """Write the basis of a material configuration as XYZ text.

    Args:
        config: Material configuration dictionary.
        fractional: Write crystal coordinates instead of cartesian.
    """
    material = Material.from_dict(config)
    units = Units.CRYSTAL if fractional else Units.CARTESIAN
    return from_basis(material.basis.converted(units), comment=material.name or "")
