"""Convenience constructors for Material."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from made._constants import NON_PERIODIC_LATTICE_SCALING_FACTOR
from made.model import Basis, Lattice, LatticeType, Material, Units

if TYPE_CHECKING:
    from pymatgen.core import Molecule, Structure


def enclose_in_lattice(
    basis: Basis,
    name: str | None = None,
    scaling_factor: float = NON_PERIODIC_LATTICE_SCALING_FACTOR,
) -> Material:
    """Box a molecule in a cubic cell and return it as a non-periodic material.

    The cell edge is :meth:`Basis.get_minimum_lattice_size`, and the
    molecule is shifted so its centre of coordinates sits at the
    centre of the cell.

    Args:
        basis: The molecule.  Any units; the cell of the basis is used
            only to interpret crystal coordinates.
        name: Material name.  Defaults to the formula.
        scaling_factor: Multiple of the largest interatomic distance
            used as the cell edge.

    Raises:
        ValueError: If the basis has no atoms, or all atoms coincide.
    """
    cartesian = basis.converted(Units.CARTESIAN)
    size = cartesian.get_minimum_lattice_size(scaling_factor)
    if size <= 0:
        raise ValueError("cannot box a molecule whose atoms all coincide")
    lattice = Lattice(a=size, b=size, c=size, type=LatticeType.CUB)
    centre = np.asarray(cartesian.center_of_coordinates_point)
    cartesian.translate_by_vector(np.full(3, size / 2) - centre)
    cartesian.cell = lattice.vectors
    cartesian.to_crystal()
    return Material(
        basis=cartesian, lattice=lattice, name=name, is_non_periodic=True,
    )


def from_pymatgen(
    structure: Structure | Molecule,
    name: str | None = None,
) -> Material:
    """Create a Material from a pymatgen ``Structure`` or ``Molecule``.

    Species are reduced to element symbols (``"Fe2+"`` becomes
    ``"Fe"``).  A ``Molecule`` has no lattice, so it is boxed with
    :func:`enclose_in_lattice` and flagged non-periodic.

    Args:
        structure: The pymatgen object to convert.
        name: Material name.  Defaults to the formula.

    Returns:
        A Material in crystal units.

    Raises:
        ImportError: If pymatgen is not installed.
        TypeError: If *structure* is neither a Structure nor a Molecule.
    """
    try:
        from pymatgen.core import Molecule, Structure
    except ImportError:
        raise ImportError(
            "pymatgen is required for from_pymatgen(). "
            "Install it with: pip install pymatgen"
        )

    if not isinstance(structure, (Structure, Molecule)):
        raise TypeError(
            "structure must be a pymatgen Structure or Molecule, "
            f"got {type(structure).__name__}"
        )

    # .symbol works for both Element and Species objects.
    elements = [site.specie.symbol for site in structure]

    if isinstance(structure, Molecule):
        basis = Basis.from_elements(
            elements, structure.cart_coords, units=Units.CARTESIAN,
        )
        return enclose_in_lattice(basis, name=name)

    lattice = Lattice.from_vectors(structure.lattice.matrix)
    basis = Basis.from_elements(
        elements, structure.frac_coords, units=Units.CRYSTAL,
    )
    return Material(basis=basis, lattice=lattice, name=name)


def to_pymatgen(material: Material) -> Structure | Molecule:
    """Convert a Material to a pymatgen object.

    Periodic materials become a ``Structure``; non-periodic ones a
    ``Molecule`` with cartesian coordinates.

    Raises:
        ImportError: If pymatgen is not installed.
    """
    try:
        from pymatgen.core import Lattice as PymatgenLattice
        from pymatgen.core import Molecule, Structure
    except ImportError:
        raise ImportError(
            "pymatgen is required for to_pymatgen(). "
            "Install it with: pip install pymatgen"
        )

    basis = material.basis
    if material.is_non_periodic:
        return Molecule(
            basis.elements, basis.converted(Units.CARTESIAN).coordinates,
        )
    return Structure(
        PymatgenLattice(material.lattice.vectors),
        basis.elements,
        basis.converted(Units.CRYSTAL).coordinates,
    )
