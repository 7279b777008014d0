"""Conventional cells derived from primitive cells by lattice type."""

from __future__ import annotations

import logging

from made.construction.supercell import generate_config
from made.model import LatticeType, Material

logger = logging.getLogger(__name__)

# Rows give the conventional cell vectors as integer combinations of
# the primitive vectors.
PRIMITIVE_TO_CONVENTIONAL_CELL_MULTIPLIERS: dict[LatticeType, tuple[tuple[int, int, int], ...]] = {
    LatticeType.FCC: ((-1, 1, 1), (1, -1, 1), (1, 1, -1)),
    LatticeType.BCC: ((0, 1, 1), (1, 0, 1), (1, 1, 0)),
    LatticeType.BCT: ((0, 1, 1), (1, 0, 1), (1, 1, 0)),
    LatticeType.ORCF: ((-1, 1, 1), (1, -1, 1), (1, 1, -1)),
    LatticeType.ORCI: ((0, 1, 1), (1, 0, 1), (1, 1, 0)),
    LatticeType.ORCC: ((1, 1, 0), (-1, 1, 0), (0, 0, 1)),
    LatticeType.MCLC: ((1, -1, 0), (1, 1, 0), (0, 0, 1)),
}

PRIMITIVE_TO_CONVENTIONAL_CELL_LATTICE_TYPES: dict[LatticeType, LatticeType] = {
    LatticeType.FCC: LatticeType.CUB,
    LatticeType.BCC: LatticeType.CUB,
    LatticeType.BCT: LatticeType.TET,
    LatticeType.ORCF: LatticeType.ORC,
    LatticeType.ORCI: LatticeType.ORC,
    LatticeType.ORCC: LatticeType.ORC,
    LatticeType.MCLC: LatticeType.MCL,
}

CONVENTIONAL_CELL_SAME_AS_PRIMITIVE: dict[LatticeType, bool] = {
    LatticeType.CUB: True,
    LatticeType.BCC: False,
    LatticeType.FCC: False,
    LatticeType.TET: True,
    LatticeType.BCT: False,
    LatticeType.ORC: True,
    LatticeType.ORCF: False,
    LatticeType.ORCI: False,
    LatticeType.ORCC: False,
    LatticeType.HEX: True,
    LatticeType.RHL: True,
    LatticeType.MCL: True,
    LatticeType.MCLC: False,
    LatticeType.TRI: True,
}


def is_conventional_cell_same_as_primitive(lattice_type: LatticeType | str) -> bool:
    return CONVENTIONAL_CELL_SAME_AS_PRIMITIVE[LatticeType(lattice_type)]


def to_conventional_cell(material: Material) -> Material:
    """Return a copy of *material* built on its conventional cell.

    For lattice types whose primitive and conventional cells coincide
    an unmodified copy is returned.  Otherwise the primitive cell is
    expanded with the tabulated multipliers, the lattice type is set to
    the conventional type, and ``" - conventional cell"`` is appended
    to the name.
    """
    lattice_type = material.lattice.type
    if is_conventional_cell_same_as_primitive(lattice_type):
        return material.clone()

    config = generate_config(
        material, PRIMITIVE_TO_CONVENTIONAL_CELL_MULTIPLIERS[lattice_type],
    )
    config["lattice"]["type"] = str(
        PRIMITIVE_TO_CONVENTIONAL_CELL_LATTICE_TYPES[lattice_type]
    )
    config["name"] = f"{material.name} - conventional cell"
    logger.debug(
        "%s cell of %r expanded to %s conventional cell",
        lattice_type, material.name, config["lattice"]["type"],
    )
    return Material.from_dict(config, periodic_table=material.basis.periodic_table)
