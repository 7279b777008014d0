"""Tests for Material convenience constructors."""

import numpy as np
import pytest

from made.construction import enclose_in_lattice, from_pymatgen, to_pymatgen
from made.model import Basis, LatticeType, Material, Units

try:
    from pymatgen.core import Lattice as PymatgenLattice
    from pymatgen.core import Molecule, Structure
    _has_pymatgen = True
except ImportError:
    _has_pymatgen = False


def _water():
    return Basis.from_elements(
        ["O", "H", "H"],
        [[0.0, 0.0, 0.0], [0.757, 0.586, 0.0], [-0.757, 0.586, 0.0]],
        units="cartesian",
    )


class TestEncloseInLattice:
    def test_box_size(self):
        material = enclose_in_lattice(_water(), name="Water")
        assert material.is_non_periodic
        assert material.lattice_type == LatticeType.CUB
        assert material.lattice.a == pytest.approx(2 * 1.514)
        assert material.lattice.b == material.lattice.a == material.lattice.c
        assert material.name == "Water"

    def test_molecule_centred(self):
        material = enclose_in_lattice(_water())
        cartesian = material.basis.converted(Units.CARTESIAN)
        centre = np.mean(cartesian.coordinates, axis=0)
        np.testing.assert_allclose(centre, [material.lattice.a / 2] * 3, atol=1e-3)

    def test_result_in_crystal_units(self):
        material = enclose_in_lattice(_water())
        assert material.basis.is_in_crystal_units
        np.testing.assert_allclose(material.basis.cell, material.lattice.vectors)

    def test_name_defaults_to_formula(self):
        assert enclose_in_lattice(_water()).name == "H2O"

    def test_interatomic_distances_kept(self):
        water = _water()
        material = enclose_in_lattice(water)
        assert material.basis.max_pairwise_distance == pytest.approx(
            water.max_pairwise_distance, abs=1e-4,
        )

    def test_single_atom_uses_radius(self):
        basis = Basis.from_elements(["Si"], [[0, 0, 0]], units="cartesian")
        material = enclose_in_lattice(basis)
        assert material.lattice.a == pytest.approx(1.11)

    def test_coincident_atoms_rejected(self):
        basis = Basis.from_elements(
            ["H", "H"], [[0, 0, 0], [0, 0, 0]], units="cartesian",
        )
        with pytest.raises(ValueError, match="coincide"):
            enclose_in_lattice(basis)

    def test_input_not_modified(self):
        water = _water()
        enclose_in_lattice(water)
        assert water.is_in_cartesian_units
        np.testing.assert_allclose(water.coordinates[1], [0.757, 0.586, 0.0])


class TestPymatgenWithoutStructure:
    def test_rejects_other_types(self):
        if not _has_pymatgen:
            with pytest.raises(ImportError, match="pymatgen"):
                from_pymatgen(object())
        else:
            with pytest.raises(TypeError, match="Structure"):
                from_pymatgen(object())


@pytest.mark.skipif(not _has_pymatgen, reason="pymatgen not installed")
class TestFromPymatgen:
    def test_structure(self):
        structure = Structure(
            PymatgenLattice.cubic(5.691694),
            ["Na", "Cl"],
            [[0, 0, 0], [0.5, 0.5, 0.5]],
        )
        material = from_pymatgen(structure, name="NaCl")
        assert material.name == "NaCl"
        assert material.basis.elements == ["Na", "Cl"]
        assert material.lattice.a == pytest.approx(5.691694)
        np.testing.assert_allclose(material.basis.coordinates[1], [0.5, 0.5, 0.5])

    def test_species_reduced_to_elements(self):
        structure = Structure(
            PymatgenLattice.cubic(4.0), ["Fe2+", "O2-"], [[0, 0, 0], [0.5, 0.5, 0.5]],
        )
        assert from_pymatgen(structure).basis.elements == ["Fe", "O"]

    def test_molecule_is_boxed(self):
        molecule = Molecule(
            ["O", "H", "H"],
            [[0.0, 0.0, 0.0], [0.757, 0.586, 0.0], [-0.757, 0.586, 0.0]],
        )
        material = from_pymatgen(molecule)
        assert material.is_non_periodic
        assert material.lattice.a == pytest.approx(2 * 1.514)

    def test_classmethod_delegates(self):
        structure = Structure(PymatgenLattice.cubic(3.0), ["Po"], [[0, 0, 0]])
        assert Material.from_pymatgen(structure).formula == "Po"


@pytest.mark.skipif(not _has_pymatgen, reason="pymatgen not installed")
class TestToPymatgen:
    def test_periodic_round_trip(self, si_config):
        material = Material.from_dict(si_config)
        structure = to_pymatgen(material)
        assert isinstance(structure, Structure)
        assert structure.lattice.a == pytest.approx(3.867)
        restored = from_pymatgen(structure)
        assert restored.calculate_hash() == material.calculate_hash()

    def test_non_periodic_gives_molecule(self):
        material = enclose_in_lattice(_water())
        molecule = material.to_pymatgen()
        assert isinstance(molecule, Molecule)
        assert len(molecule) == 3
