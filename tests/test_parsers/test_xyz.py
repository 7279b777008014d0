"""Tests for the XYZ parser and writer."""

import numpy as np
import pytest

from made.model import Basis, Material
from made.parsers import xyz


class TestToBasisConfig:
    def test_plain_lines(self):
        config = xyz.to_basis_config("Si 0 0 0\nSi 1.3 1.3 1.3\n")
        assert config["elements"] == ["Si", "Si"]
        assert config["coordinates"][1] == [1.3, 1.3, 1.3]
        assert config["units"] == "cartesian"
        assert config["cell"] == np.eye(3).tolist()
        assert "constraints" not in config

    def test_header_skipped(self):
        config = xyz.to_basis_config("2\nsilicon pair\nSi 0 0 0\nSi 1 1 1\n")
        assert config["elements"] == ["Si", "Si"]

    def test_header_count_mismatch(self):
        with pytest.raises(ValueError, match="declares 3"):
            xyz.to_basis_config("3\ncomment\nSi 0 0 0\nSi 1 1 1\n")

    def test_constraint_flags(self):
        config = xyz.to_basis_config("Si 0 0 0 1 0 1\nO 1 1 1 0 0 0\n")
        assert config["constraints"] == [[True, False, True], [False, False, False]]

    def test_bad_flag(self):
        with pytest.raises(ValueError, match="0 or 1"):
            xyz.to_basis_config("Si 0 0 0 1 2 1\n")

    def test_wrong_column_count(self):
        with pytest.raises(ValueError, match="columns"):
            xyz.to_basis_config("Si 0 0\n")

    def test_bad_number(self):
        with pytest.raises(ValueError, match="cannot parse"):
            xyz.to_basis_config("Si 0 x 0\n")

    def test_bad_element(self):
        with pytest.raises(ValueError, match="element"):
            xyz.to_basis_config("si 0 0 0\n")

    def test_units_and_cell(self):
        config = xyz.to_basis_config(
            "Si 0.5 0.5 0.5\n", units="crystal", cell=np.eye(3) * 2,
        )
        assert config["units"] == "crystal"
        assert config["cell"][0] == [2.0, 0.0, 0.0]

    def test_reads_file(self, tmp_path):
        path = tmp_path / "pair.xyz"
        path.write_text("2\n\nH 0 0 0\nH 0.74 0 0\n")
        assert xyz.to_basis_config(path)["elements"] == ["H", "H"]
        assert xyz.to_basis_config(str(path))["elements"] == ["H", "H"]


class TestFromBasis:
    def test_layout(self):
        basis = Basis.from_elements(
            ["Si", "O"], [[0, 0, 0], [0.25, 0.5, 0.75]], units="crystal",
        )
        lines = xyz.from_basis(basis, comment="pair").splitlines()
        assert lines[0] == "2"
        assert lines[1] == "pair"
        assert lines[2] == "Si     0.000000000   0.000000000   0.000000000"
        assert lines[3].split() == ["O", "0.250000000", "0.500000000", "0.750000000"]

    def test_trailing_newline(self):
        basis = Basis.from_elements(["Si"], [[0, 0, 0]], units="crystal")
        assert xyz.from_basis(basis).endswith("\n")

    def test_constraint_column(self):
        basis = Basis.from_elements(
            ["Si"], [[0, 0, 0]], units="crystal", constraints=[[True, False, True]],
        )
        line = xyz.from_basis(basis).splitlines()[2]
        assert line.split()[-3:] == ["1", "0", "1"]

    def test_round_trip_with_constraints(self):
        basis = Basis.from_elements(
            ["Si", "O"], [[0, 0, 0], [0.25, 0.5, 0.75]], units="cartesian",
            constraints=[[True, False, True], [False, False, False]],
        )
        config = xyz.to_basis_config(xyz.from_basis(basis))
        restored = Basis.from_dict(config)
        assert restored.elements == basis.elements
        np.testing.assert_allclose(restored.coordinates, basis.coordinates)
        assert restored.constraints == basis.constraints


class TestFromMaterial:
    def test_cartesian_by_default(self, si_config):
        material = Material.from_dict(si_config)
        lines = xyz.from_material(material.to_dict()).splitlines()
        expected = material.basis.converted("cartesian").coordinates[1]
        np.testing.assert_allclose(
            [float(x) for x in lines[3].split()[1:]], expected, atol=1e-9,
        )

    def test_fractional(self, si_config):
        lines = xyz.from_material(si_config, fractional=True).splitlines()
        assert lines[1] == "Silicon FCC"
        assert lines[3].split()[1:] == ["0.250000000"] * 3
