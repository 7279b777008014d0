"""Tests for conventional cell construction."""

import numpy as np
import pytest

from made.construction import (
    CONVENTIONAL_CELL_SAME_AS_PRIMITIVE,
    PRIMITIVE_TO_CONVENTIONAL_CELL_LATTICE_TYPES,
    PRIMITIVE_TO_CONVENTIONAL_CELL_MULTIPLIERS,
    is_conventional_cell_same_as_primitive,
    to_conventional_cell,
)
from made.model import LatticeType, Material

BCC_ANGLE = float(np.degrees(np.arccos(-1.0 / 3.0)))


def _bcc_iron():
    a = 2.87 * np.sqrt(3) / 2
    return Material.from_dict({
        "name": "Iron BCC",
        "basis": {"elements": ["Fe"], "coordinates": [[0, 0, 0]], "units": "crystal"},
        "lattice": {
            "type": "BCC", "a": a, "b": a, "c": a,
            "alpha": BCC_ANGLE, "beta": BCC_ANGLE, "gamma": BCC_ANGLE,
        },
    })


class TestTables:
    def test_every_type_classified(self):
        assert set(CONVENTIONAL_CELL_SAME_AS_PRIMITIVE) == set(LatticeType)

    def test_tables_cover_centred_types(self):
        centred = {
            t for t, same in CONVENTIONAL_CELL_SAME_AS_PRIMITIVE.items() if not same
        }
        assert set(PRIMITIVE_TO_CONVENTIONAL_CELL_MULTIPLIERS) == centred
        assert set(PRIMITIVE_TO_CONVENTIONAL_CELL_LATTICE_TYPES) == centred

    def test_conventional_types_are_primitive(self):
        for target in PRIMITIVE_TO_CONVENTIONAL_CELL_LATTICE_TYPES.values():
            assert CONVENTIONAL_CELL_SAME_AS_PRIMITIVE[target]

    @pytest.mark.parametrize("lattice_type, expected", [
        ("CUB", True), ("FCC", False), ("HEX", True), ("MCLC", False),
    ])
    def test_is_conventional_cell_same_as_primitive(self, lattice_type, expected):
        assert is_conventional_cell_same_as_primitive(lattice_type) is expected


class TestToConventionalCell:
    def test_silicon_fcc(self, si_config):
        material = Material.from_dict(si_config)
        conventional = to_conventional_cell(material)
        assert conventional.basis.n_atoms == 8
        assert conventional.lattice_type == LatticeType.CUB
        assert conventional.lattice.a == pytest.approx(3.867 * np.sqrt(2))
        assert conventional.lattice.a == pytest.approx(5.4687, abs=1e-4)
        for angle in (conventional.lattice.alpha,
                      conventional.lattice.beta,
                      conventional.lattice.gamma):
            assert angle == pytest.approx(90.0)
        assert conventional.name == "Silicon FCC - conventional cell"
        assert conventional.unit_cell_formula == "Si8"

    def test_silicon_positions_are_diamond_sites(self, si_config):
        conventional = to_conventional_cell(Material.from_dict(si_config))
        quarters = conventional.basis.coordinates * 4
        np.testing.assert_allclose(quarters, np.round(quarters), atol=1e-6)

    def test_volume_scales_with_determinant(self, si_config):
        material = Material.from_dict(si_config)
        conventional = to_conventional_cell(material)
        assert conventional.lattice.volume == pytest.approx(4 * material.lattice.volume)

    def test_bcc(self):
        conventional = to_conventional_cell(_bcc_iron())
        assert conventional.basis.n_atoms == 2
        assert conventional.lattice_type == LatticeType.CUB
        assert conventional.lattice.a == pytest.approx(2.87)
        assert conventional.lattice.alpha == pytest.approx(90.0)

    def test_same_as_primitive_returns_copy(self, na4cl4_config):
        material = Material.from_dict(na4cl4_config)
        conventional = to_conventional_cell(material)
        assert conventional is not material
        assert conventional.name == material.name
        assert conventional.calculate_hash() == material.calculate_hash()
        conventional.basis.add_atom("Na", [0.25, 0.25, 0.25])
        assert material.basis.n_atoms == 8

    def test_input_not_modified(self, si_config):
        material = Material.from_dict(si_config)
        before = material.calculate_hash()
        to_conventional_cell(material)
        assert material.calculate_hash() == before
        assert material.lattice_type == LatticeType.FCC
