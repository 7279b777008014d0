"""made: materials design primitives for crystal structures.

made models periodic and non-periodic structures and builds canonical,
order-independent representations of them for deduplication, hashing,
and export to simulation file formats.

Example usage::

    from made import Material

    material = Material.default()
    material.formula              # "Si"
    material.calculate_hash()     # MD5 fingerprint
    print(material.get_as_poscar())
"""

from made.construction import (
    enclose_in_lattice,
    from_pymatgen,
    generate_supercell,
    load_material,
    save_material,
    to_conventional_cell,
    to_pymatgen,
)
from made.model import (
    Atom,
    Basis,
    IdentifiedSequence,
    Lattice,
    LatticeType,
    Material,
    MissingIdentifierError,
    Units,
)
from made.periodic_table import (
    COVALENT_RADII,
    DEFAULT_PERIODIC_TABLE,
    ELECTRONEGATIVITIES,
    BuiltinPeriodicTable,
    PeriodicTable,
    PymatgenPeriodicTable,
)

__all__ = [
    "Atom",
    "Basis",
    "BuiltinPeriodicTable",
    "COVALENT_RADII",
    "DEFAULT_PERIODIC_TABLE",
    "ELECTRONEGATIVITIES",
    "IdentifiedSequence",
    "Lattice",
    "LatticeType",
    "Material",
    "MissingIdentifierError",
    "PeriodicTable",
    "PymatgenPeriodicTable",
    "Units",
    "enclose_in_lattice",
    "from_pymatgen",
    "generate_supercell",
    "load_material",
    "save_material",
    "to_conventional_cell",
    "to_pymatgen",
]
