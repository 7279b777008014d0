"""Material construction: supercells, conventional cells, builders, and I/O."""

from made.construction.builders import (
    enclose_in_lattice,
    from_pymatgen,
    to_pymatgen,
)
from made.construction.conventional_cell import (
    CONVENTIONAL_CELL_SAME_AS_PRIMITIVE,
    PRIMITIVE_TO_CONVENTIONAL_CELL_LATTICE_TYPES,
    PRIMITIVE_TO_CONVENTIONAL_CELL_MULTIPLIERS,
    is_conventional_cell_same_as_primitive,
    to_conventional_cell,
)
from made.construction.io import load_material, save_material
from made.construction.supercell import (
    generate_config,
    generate_supercell,
    generate_supercell_basis,
    lattice_points_in_supercell,
    validate_supercell_matrix,
)

__all__ = [
    "CONVENTIONAL_CELL_SAME_AS_PRIMITIVE",
    "PRIMITIVE_TO_CONVENTIONAL_CELL_LATTICE_TYPES",
    "PRIMITIVE_TO_CONVENTIONAL_CELL_MULTIPLIERS",
    "enclose_in_lattice",
    "from_pymatgen",
    "generate_config",
    "generate_supercell",
    "generate_supercell_basis",
    "is_conventional_cell_same_as_primitive",
    "lattice_points_in_supercell",
    "load_material",
    "save_material",
    "to_conventional_cell",
    "to_pymatgen",
    "validate_supercell_matrix",
]
