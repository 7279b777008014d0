"""Tests for Lattice."""

import numpy as np
import pytest

from made.model import Lattice, LatticeType


class TestLatticeDefaults:
    def test_unit_cube(self):
        lattice = Lattice()
        assert lattice.parameters == (1.0, 1.0, 1.0, 90.0, 90.0, 90.0)
        assert lattice.type == LatticeType.CUB
        np.testing.assert_allclose(lattice.vectors, np.eye(3))

    def test_type_from_string(self):
        assert Lattice(type="FCC").type == LatticeType.FCC

    def test_frozen(self):
        lattice = Lattice()
        with pytest.raises(AttributeError):
            lattice.a = 2.0


class TestLatticeValidation:
    def test_non_positive_length(self):
        with pytest.raises(ValueError, match="positive"):
            Lattice(a=0.0)

    def test_angle_out_of_range(self):
        with pytest.raises(ValueError, match="180"):
            Lattice(gamma=180.0)

    def test_degenerate_angles(self):
        with pytest.raises(ValueError, match="three-dimensional"):
            Lattice(alpha=120.0, beta=120.0, gamma=120.0)

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="lattice type"):
            Lattice(type="XYZ")

    def test_unsupported_units(self):
        with pytest.raises(ValueError, match="angstrom"):
            Lattice(length_units="bohr")


class TestLatticeVectors:
    def test_orthorhombic(self):
        lattice = Lattice(a=2.0, b=3.0, c=4.0, type="ORC")
        np.testing.assert_allclose(lattice.vectors, np.diag([2.0, 3.0, 4.0]))

    def test_fcc_primitive_volume(self):
        lattice = Lattice(a=3.867, b=3.867, c=3.867, alpha=60, beta=60, gamma=60)
        assert lattice.volume == pytest.approx(3.867**3 / np.sqrt(2))

    def test_a_along_x_and_b_in_xy_plane(self):
        lattice = Lattice(a=3.0, b=4.0, c=5.0, alpha=80, beta=95, gamma=105)
        vectors = lattice.vectors
        assert vectors[0, 1] == 0.0 and vectors[0, 2] == 0.0
        assert vectors[1, 2] == 0.0
        np.testing.assert_allclose(np.linalg.norm(vectors, axis=1), [3.0, 4.0, 5.0])

    def test_from_vectors_recovers_parameters(self):
        original = Lattice(a=3.0, b=4.0, c=5.0, alpha=80, beta=95, gamma=105)
        rebuilt = Lattice.from_vectors(original.vectors)
        np.testing.assert_allclose(rebuilt.parameters, original.parameters)
        assert rebuilt.type == LatticeType.TRI

    def test_from_vectors_keeps_given_type(self):
        lattice = Lattice.from_vectors(np.eye(3) * 2, type="CUB")
        assert lattice.type == LatticeType.CUB
        assert lattice.a == pytest.approx(2.0)

    def test_from_singular_vectors(self):
        with pytest.raises(ValueError, match="singular"):
            Lattice.from_vectors([[1, 0, 0], [2, 0, 0], [0, 0, 1]])

    def test_inverse_vectors(self):
        lattice = Lattice(a=3.0, b=4.0, c=5.0, alpha=80, beta=95, gamma=105)
        np.testing.assert_allclose(
            lattice.vectors @ lattice.inverse_vectors, np.eye(3), atol=1e-12,
        )

    def test_reciprocal_vectors(self):
        lattice = Lattice(a=2.0, b=2.0, c=2.0)
        np.testing.assert_allclose(
            lattice.reciprocal_vectors @ lattice.vectors.T, 2 * np.pi * np.eye(3),
            atol=1e-12,
        )

    def test_with_parameters_returns_copy(self):
        lattice = Lattice()
        bigger = lattice.with_parameters(a=2.0)
        assert bigger.a == 2.0
        assert lattice.a == 1.0

    def test_with_parameters_revalidates(self):
        with pytest.raises(ValueError):
            Lattice().with_parameters(b=-1.0)


class TestLatticeHashString:
    def test_hash_string(self):
        lattice = Lattice(a=3.867, b=3.867, c=3.867, alpha=60, beta=60, gamma=60)
        assert lattice.get_hash_string() == "3.867;3.867;3.867;60;60;60;"

    def test_scaled_hash_string(self):
        lattice = Lattice(a=3.867, b=3.867, c=7.734, alpha=60, beta=60, gamma=60)
        assert lattice.get_hash_string(is_scaled=True) == "1;1;2;60;60;60;"

    def test_scaled_hash_invariant_under_uniform_scaling(self):
        small = Lattice(a=3.0, b=4.0, c=5.0)
        large = Lattice(a=6.0, b=8.0, c=10.0)
        assert small.get_hash_string() != large.get_hash_string()
        assert small.get_hash_string(True) == large.get_hash_string(True)

    def test_precision(self):
        lattice = Lattice(a=1.23456)
        assert lattice.get_hash_string(precision=2).startswith("1.23;")
        assert lattice.get_hash_string(precision=4).startswith("1.2346;")


class TestLatticeDict:
    def test_round_trip(self):
        lattice = Lattice(a=3.0, b=4.0, c=5.0, alpha=80, beta=95, gamma=105, type="TRI")
        assert Lattice.from_dict(lattice.to_dict()) == lattice

    def test_units_block(self):
        d = Lattice().to_dict()
        assert d["units"] == {"length": "angstrom", "angle": "degree"}
        assert d["type"] == "CUB"

    def test_from_empty_dict(self):
        assert Lattice.from_dict({}) == Lattice()
