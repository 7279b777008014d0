"""Quantum ESPRESSO ``CELL_PARAMETERS`` and ``ATOMIC_POSITIONS`` cards."""

from __future__ import annotations

import re
from pathlib import Path

import numpy as np

from made.model import Lattice, Material, Units
from made.model._util import invert_cell
from made.parsers._util import check_element, format_float, parse_floats, read_source

_CARD_RE = re.compile(r"^\s*(CELL_PARAMETERS|ATOMIC_POSITIONS)\b\s*[({]?\s*(\w*)", re.I)

_BOHR_TO_ANGSTROM = 0.529177210903


def to_espresso_format(config: dict) -> str:
    """Write cell and crystal-unit positions of a material as QE cards::

        CELL_PARAMETERS (angstroms)
            3.867000000    0.000000000    0.000000000
            ...

        ATOMIC_POSITIONS (crystal)
        Si     0.000000000    0.000000000    0.000000000
        Si     0.250000000    0.250000000    0.250000000
    """
    material = Material.from_dict(config)
    basis = material.basis.converted(Units.CRYSTAL)
    vectors = "\n".join(
        "".join(format_float(x) for x in row) for row in material.lattice.vectors
    )
    positions = "\n".join(
        f"{atom.element:<4s}" + "".join(format_float(x) for x in atom.coordinate)
        for atom in basis.atoms
    )
    return (
        "CELL_PARAMETERS (angstroms)\n"
        f"{vectors}\n"
        "\n"
        "ATOMIC_POSITIONS (crystal)\n"
        f"{positions}"
    )


def _card_lines(lines: list[str], start: int, count: int | None) -> list[str]:
    """Non-empty lines after a card header, up to *count* or the next card."""
    body: list[str] = []
    for line in lines[start:]:
        stripped = line.strip()
        if not stripped:
            if body:
                break
            continue
        if _CARD_RE.match(stripped) or stripped.startswith("&"):
            break
        body.append(stripped)
        if count is not None and len(body) == count:
            break
    return body


def from_espresso_format(source: str | Path) -> dict:
    """Parse QE ``CELL_PARAMETERS`` and ``ATOMIC_POSITIONS`` cards.

    Cell units may be ``angstrom`` or ``bohr``; position units may be
    ``crystal``, ``angstrom`` or ``bohr``.  Positions are stored in
    crystal units.

    Raises:
        ValueError: If either card is missing or malformed.
    """
    lines = read_source(source).splitlines()
    vectors = None
    elements: list[str] = []
    coordinates: list[list[float]] = []
    position_units = None

    for i, line in enumerate(lines):
        match = _CARD_RE.match(line)
        if match is None:
            continue
        card, units = match.group(1).upper(), match.group(2).lower()
        if card == "CELL_PARAMETERS":
            rows = _card_lines(lines, i + 1, 3)
            if len(rows) != 3:
                raise ValueError("CELL_PARAMETERS card must have three rows")
            vectors = np.array([parse_floats(r.split()[:3], r) for r in rows])
            if units.startswith("bohr"):
                vectors *= _BOHR_TO_ANGSTROM
            elif units and not units.startswith("angstrom"):
                raise ValueError(f"unsupported CELL_PARAMETERS units: {units!r}")
        else:
            position_units = units or "alat"
            for row in _card_lines(lines, i + 1, None):
                parts = row.split()
                elements.append(check_element(parts[0], row))
                coordinates.append(parse_floats(parts[1:4], row))

    if vectors is None:
        raise ValueError("no CELL_PARAMETERS card found")
    if position_units is None:
        raise ValueError("no ATOMIC_POSITIONS card found")

    coords = np.array(coordinates, dtype=float).reshape(-1, 3)
    if position_units == "bohr":
        coords = coords * _BOHR_TO_ANGSTROM @ invert_cell(vectors)
    elif position_units == "angstrom":
        coords = coords @ invert_cell(vectors)
    elif position_units != "crystal":
        raise ValueError(f"unsupported ATOMIC_POSITIONS units: {position_units!r}")

    return {
        "basis": {
            "elements": elements,
            "coordinates": coords.tolist(),
            "units": str(Units.CRYSTAL),
        },
        "lattice": Lattice.from_vectors(vectors).to_dict(),
    }
