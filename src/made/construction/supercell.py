"""Supercells: integer recombinations of a cell's vectors."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Sequence

import numpy as np

from made._constants import COORDINATE_TOLERANCE, WRAP_TOLERANCE
from made.model import Atom, Basis, Lattice, Material, Units
from made.model._util import wrap_fractional

logger = logging.getLogger(__name__)


def validate_supercell_matrix(matrix: Sequence) -> np.ndarray:
    """Coerce *matrix* to a ``(3, 3)`` integer array with positive determinant.

    Three scalars are read as the diagonal of the matrix.  A negative
    determinant would turn the cell left-handed, and rebuilding the
    lattice from lengths and angles would then mirror the structure,
    so such matrices are rejected.

    Raises:
        ValueError: If *matrix* is not ``(3,)`` or ``(3, 3)``, has
            non-integer entries, is singular, or has a negative
            determinant.
    """
    arr = np.asarray(matrix, dtype=float)
    if arr.shape == (3,):
        arr = np.diag(arr)
    if arr.shape != (3, 3):
        raise ValueError(
            f"supercell matrix must have shape (3, 3) or (3,), got {arr.shape}"
        )
    if not np.allclose(arr, np.round(arr)):
        raise ValueError(
            f"supercell matrix must contain integers, got {arr.tolist()}"
        )
    arr = np.round(arr).astype(int)
    det = round(np.linalg.det(arr))
    if det == 0:
        raise ValueError(f"supercell matrix is singular: {arr.tolist()}")
    if det < 0:
        raise ValueError(
            f"supercell matrix must have a positive determinant, "
            f"got {det} for {arr.tolist()}"
        )
    return arr


def lattice_points_in_supercell(matrix: np.ndarray) -> np.ndarray:
    """Integer translations of the old cell that can land inside the new one.

    Returns every integer point in the bounding box of the transformed
    unit cube, both corners included, shape ``(n_points, 3)``.  An atom
    at fractional ``f`` in ``[0, 1)`` lands in the new cell only for
    translations inside that box.  Some of them place atoms outside
    the new cell; callers filter those out.
    """
    corners = np.array(list(itertools.product((0, 1), repeat=3))) @ matrix
    low = corners.min(axis=0)
    high = corners.max(axis=0)
    ranges = [range(int(lo), int(hi) + 1) for lo, hi in zip(low, high)]
    return np.array(list(itertools.product(*ranges)), dtype=float).reshape(-1, 3)


def _is_duplicate(coord: np.ndarray, accepted: list[np.ndarray]) -> bool:
    for other in accepted:
        diff = coord - other
        diff -= np.round(diff)
        if np.linalg.norm(diff) < COORDINATE_TOLERANCE:
            return True
    return False


def generate_supercell_basis(basis: Basis, matrix: Sequence) -> Basis:
    """Replicate *basis* into the supercell described by *matrix*.

    The rows of the new cell are ``matrix @ basis.cell``.  Every atom is
    placed at each integer translation of the old cell, re-expressed in
    fractional coordinates of the new cell, and kept if it falls inside
    it.  Atoms that coincide across cell boundaries are kept once.

    Atoms stay grouped in their original order: all images of the first
    atom come before any image of the second.

    Args:
        basis: The basis to replicate.
        matrix: Integer ``(3, 3)`` matrix, or three multipliers.

    Returns:
        A basis in crystal units of the new cell.
    """
    matrix = validate_supercell_matrix(matrix)
    standard = basis.standardized()
    inverse = np.linalg.inv(matrix)
    new_cell = matrix @ standard.cell
    points = lattice_points_in_supercell(matrix)

    supercell = standard.clone(atoms=[], units=Units.CRYSTAL, cell=new_cell)
    for atom in standard.atoms:
        accepted: list[np.ndarray] = []
        frac = (np.asarray(atom.coordinate) + points) @ inverse
        inside = np.all(
            (frac >= -WRAP_TOLERANCE) & (frac < 1.0 - WRAP_TOLERANCE), axis=1,
        )
        for coord in wrap_fractional(frac[inside]):
            if _is_duplicate(coord, accepted):
                continue
            accepted.append(coord)
            supercell.atoms.add(Atom(atom.element, tuple(coord), atom.constraint))

    expected = abs(round(np.linalg.det(matrix))) * basis.n_atoms
    if supercell.n_atoms != expected:
        logger.warning(
            "supercell %s holds %d atoms, expected %d",
            matrix.tolist(), supercell.n_atoms, expected,
        )
    else:
        logger.debug(
            "built supercell %s with %d atoms", matrix.tolist(), expected,
        )
    return supercell


def generate_config(material: Material, matrix: Sequence) -> dict:
    """Return the configuration of a supercell of *material*.

    The lattice is rebuilt from the new vectors and keeps the original
    lattice type; callers that change the symmetry set a new type.
    """
    matrix = validate_supercell_matrix(matrix)
    basis = generate_supercell_basis(material.basis, matrix)
    lattice = Lattice.from_vectors(basis.cell, type=material.lattice.type)
    config = material.to_dict()
    config.pop("hash", None)
    config.pop("src", None)
    config.update({
        "name": f"{material.name} - supercell {matrix.tolist()}",
        "basis": basis.to_dict(),
        "lattice": lattice.to_dict(),
    })
    return config


def generate_supercell(material: Material, matrix: Sequence) -> Material:
    """Return a supercell of *material*.

    Args:
        material: The material to expand.
        matrix: Integer ``(3, 3)`` matrix whose rows give the new cell
            vectors as combinations of the old ones, or three
            multipliers along the cell vectors.

    Raises:
        ValueError: If *matrix* is malformed or singular.
    """
    return Material.from_dict(
        generate_config(material, matrix),
        periodic_table=material.basis.periodic_table,
    )
