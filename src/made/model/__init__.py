"""Core data model for made: atoms, lattices, and materials.

Everything is re-exported here so that ``from made.model import
Basis`` works without knowing the module layout.
"""

from made.model.basis import Atom, Basis, Units
from made.model.identified_sequence import IdentifiedSequence
from made.model.lattice import Lattice, LatticeType
from made.model.material import (
    DEFAULT_MATERIAL_CONFIG,
    INCHI_PROPERTY,
    Material,
    MissingIdentifierError,
)

__all__ = [
    "Atom",
    "Basis",
    "DEFAULT_MATERIAL_CONFIG",
    "INCHI_PROPERTY",
    "IdentifiedSequence",
    "Lattice",
    "LatticeType",
    "Material",
    "MissingIdentifierError",
    "Units",
]
