"""VASP POSCAR files."""

from __future__ import annotations

import re
from pathlib import Path

import numpy as np

from made.model import Lattice, Material, Units
from made.model._util import invert_cell
from made.parsers._util import check_element, format_float, parse_floats, read_source


def _is_int_line(line: str) -> bool:
    parts = line.split()
    return bool(parts) and all(p.isdigit() for p in parts)


def to_poscar(config: dict, omit_constraints: bool = False) -> str:
    """Write a material configuration as POSCAR text.

    Elements are grouped by runs in their original order, so an element
    that reappears after another element gets its own entry on the
    species and count lines.

    Args:
        config: Material configuration dictionary.
        omit_constraints: Leave out the selective dynamics block even
            when the basis has constraints.
    """
    material = Material.from_dict(config)
    basis = material.basis.converted(Units.CRYSTAL)
    add_constraints = basis.has_constraints and not omit_constraints
    counts = basis.element_counts

    lines = [material.name or "", "1.0"]
    lines += [
        "\t".join(format_float(x).strip() for x in row)
        for row in material.lattice.vectors
    ]
    lines.append(" ".join(element for element, _ in counts))
    lines.append(" ".join(str(count) for _, count in counts))
    if add_constraints:
        lines.append("Selective dynamics")
    lines.append("direct")
    for atom in basis.atoms:
        line = " ".join(format_float(x) for x in atom.coordinate)
        if add_constraints:
            line += " " + " ".join(
                "T" if flag else "F"
                for flag in (atom.constraint or (True, True, True))
            )
        lines.append(f"{line} {atom.element}")
    return "\n".join(lines)


def from_poscar(source: str | Path) -> dict:
    """Parse POSCAR text into a material configuration.

    VASP 5 files (with a species line) are supported; VASP 4 files
    must carry the element symbol after each coordinate.  Coordinates
    are stored in crystal units.  The original text is kept under
    ``src`` so it can be written back unchanged.

    Raises:
        ValueError: If the text is not a valid POSCAR.
    """
    text = read_source(source)
    lines = [line.strip() for line in text.splitlines()]
    if len(lines) < 7:
        raise ValueError("POSCAR text is too short")

    name = lines[0]
    scale = parse_floats(lines[1].split()[:1], lines[1])[0]
    vectors = np.array([
        parse_floats(line.split()[:3], line) for line in lines[2:5]
    ])
    if scale < 0:
        # A negative scale factor gives the target cell volume.
        scale = (-scale / abs(np.linalg.det(vectors))) ** (1 / 3)
    vectors *= scale

    if _is_int_line(lines[5]):
        species: list[str] | None = None
        count_index = 5
    else:
        species = [check_element(s, lines[5]) for s in lines[5].split()]
        count_index = 6
    counts = [int(c) for c in lines[count_index].split()]
    if species is not None and len(species) != len(counts):
        raise ValueError("POSCAR species and count lines differ in length")

    index = count_index + 1
    selective = lines[index][:1].lower() == "s"
    if selective:
        index += 1
    cartesian = lines[index][:1].lower() in ("c", "k")
    index += 1

    n_atoms = sum(counts)
    position_lines = lines[index:index + n_atoms]
    if len(position_lines) != n_atoms:
        raise ValueError(
            f"POSCAR declares {n_atoms} atoms but has "
            f"{len(position_lines)} position lines"
        )

    if species is not None:
        elements = [s for s, c in zip(species, counts) for _ in range(c)]
    else:
        elements = []
    coordinates: list[list[float]] = []
    constraints: list[list[bool]] = []
    for line in position_lines:
        parts = line.split()
        coordinates.append(parse_floats(parts[:3], line))
        rest = parts[3:]
        if selective:
            constraints.append([flag.upper().startswith("T") for flag in rest[:3]])
            rest = rest[3:]
        if species is None:
            if not rest:
                raise ValueError(f"no element symbol in POSCAR line: {line!r}")
            elements.append(check_element(rest[0], line))

    coords = np.array(coordinates)
    if cartesian:
        coords = (coords * scale) @ invert_cell(vectors)

    basis: dict = {
        "elements": elements,
        "coordinates": coords.tolist(),
        "units": str(Units.CRYSTAL),
    }
    if selective:
        basis["constraints"] = constraints
    return {
        "name": name,
        "basis": basis,
        "lattice": Lattice.from_vectors(vectors).to_dict(),
        "src": {"extension": "poscar", "text": text},
    }


def atoms_count(source: str | Path) -> int:
    """Return the number of atoms declared in POSCAR text."""
    lines = read_source(source).splitlines()
    counts_line = lines[5] if _is_int_line(lines[5]) else lines[6]
    return sum(int(c) for c in counts_line.split())


def get_name_from_contents(source: str | Path) -> str:
    """Return the comment line of POSCAR text, keeping only letters and digits."""
    first_line = read_source(source).splitlines()[0]
    return re.sub(r"[^a-zA-Z0-9]", "", first_line)
