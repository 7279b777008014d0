from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import StrEnum

import numpy as np

from made._constants import ANGLE_UNITS, HASH_PRECISION, LENGTH_UNITS
from made.model._util import format_rounded, invert_cell

_ZERO_SNAP = 1e-12
"""Vector components smaller than this are written as exact zeros."""


class LatticeType(StrEnum):
    """Bravais lattice types.

    Attributes:
        CUB: Simple cubic.
        BCC: Body-centred cubic.
        FCC: Face-centred cubic.
        TET: Simple tetragonal.
        BCT: Body-centred tetragonal.
        ORC: Simple orthorhombic.
        ORCF: Face-centred orthorhombic.
        ORCI: Body-centred orthorhombic.
        ORCC: Base-centred orthorhombic.
        HEX: Hexagonal.
        RHL: Rhombohedral.
        MCL: Simple monoclinic.
        MCLC: Base-centred monoclinic.
        TRI: Triclinic.
    """

    CUB = "CUB"
    BCC = "BCC"
    FCC = "FCC"
    TET = "TET"
    BCT = "BCT"
    ORC = "ORC"
    ORCF = "ORCF"
    ORCI = "ORCI"
    ORCC = "ORCC"
    HEX = "HEX"
    RHL = "RHL"
    MCL = "MCL"
    MCLC = "MCLC"
    TRI = "TRI"


def _vectors_from_parameters(
    a: float, b: float, c: float,
    alpha: float, beta: float, gamma: float,
) -> np.ndarray:
    """Row-vector cell matrix with ``a`` along x and ``b`` in the xy-plane."""
    cos_a, cos_b, cos_g = np.cos(np.radians([alpha, beta, gamma]))
    sin_g = np.sin(np.radians(gamma))
    cx = cos_b
    cy = (cos_a - cos_b * cos_g) / sin_g
    cz_sq = 1.0 - cx**2 - cy**2
    if cz_sq <= _ZERO_SNAP:
        raise ValueError(
            "lattice angles do not describe a three-dimensional cell: "
            f"alpha={alpha}, beta={beta}, gamma={gamma}"
        )
    vectors = np.array([
        [a, 0.0, 0.0],
        [b * cos_g, b * sin_g, 0.0],
        [c * cx, c * cy, c * np.sqrt(cz_sq)],
    ])
    vectors[np.abs(vectors) < _ZERO_SNAP] = 0.0
    return vectors


def _angle_between(u: np.ndarray, v: np.ndarray) -> float:
    cos = np.dot(u, v) / (np.linalg.norm(u) * np.linalg.norm(v))
    return float(np.degrees(np.arccos(np.clip(cos, -1.0, 1.0))))


@dataclass(frozen=True)
class Lattice:
    """A unit cell described by its six parameters.

    The cell vectors follow the usual crystallographic setting: ``a``
    lies along x, ``b`` lies in the xy-plane and ``c`` completes the
    set.  Instances are immutable; use :meth:`with_parameters` to
    obtain a lattice with a different parameter set.

    Attributes:
        a: Length of the first cell vector, in angstroms.
        b: Length of the second cell vector, in angstroms.
        c: Length of the third cell vector, in angstroms.
        alpha: Angle between ``b`` and ``c``, in degrees.
        beta: Angle between ``a`` and ``c``, in degrees.
        gamma: Angle between ``a`` and ``b``, in degrees.
        type: Bravais lattice type.
        length_units: Units of the cell lengths.  Only angstroms
            are supported.
        angle_units: Units of the cell angles.  Only degrees are
            supported.

    Raises:
        ValueError: If a length is not positive, an angle lies outside
            ``(0, 180)``, the type is unknown, or the parameters
            describe a degenerate cell.
    """

    a: float = 1.0
    b: float = 1.0
    c: float = 1.0
    alpha: float = 90.0
    beta: float = 90.0
    gamma: float = 90.0
    type: LatticeType = LatticeType.CUB
    length_units: str = LENGTH_UNITS
    angle_units: str = ANGLE_UNITS

    def __post_init__(self) -> None:
        for name in ("a", "b", "c", "alpha", "beta", "gamma"):
            object.__setattr__(self, name, float(getattr(self, name)))
        try:
            object.__setattr__(self, "type", LatticeType(self.type))
        except ValueError:
            raise ValueError(f"unknown lattice type: {self.type!r}") from None
        for name in ("a", "b", "c"):
            if getattr(self, name) <= 0:
                raise ValueError(
                    f"{name} must be positive, got {getattr(self, name)}"
                )
        for name in ("alpha", "beta", "gamma"):
            if not 0 < getattr(self, name) < 180:
                raise ValueError(
                    f"{name} must be in (0, 180) degrees, "
                    f"got {getattr(self, name)}"
                )
        if self.length_units != LENGTH_UNITS:
            raise ValueError(
                f"length units must be {LENGTH_UNITS!r}, "
                f"got {self.length_units!r}"
            )
        if self.angle_units != ANGLE_UNITS:
            raise ValueError(
                f"angle units must be {ANGLE_UNITS!r}, "
                f"got {self.angle_units!r}"
            )
        # Raises for degenerate angle combinations.
        _vectors_from_parameters(*self.parameters)

    @classmethod
    def from_vectors(
        cls,
        vectors: object,
        type: LatticeType | str = LatticeType.TRI,
    ) -> Lattice:
        """Create a lattice from three cell vectors.

        Only the lengths and mutual angles are kept, so the resulting
        :attr:`vectors` may be a rotated copy of *vectors*.

        Args:
            vectors: Cell vectors as rows, shape ``(3, 3)``.
            type: Bravais lattice type to record.

        Raises:
            ValueError: If *vectors* is not ``(3, 3)`` or is singular.
        """
        vectors = np.asarray(vectors, dtype=float)
        if vectors.shape != (3, 3):
            raise ValueError(
                f"vectors must have shape (3, 3), got {vectors.shape}"
            )
        invert_cell(vectors)
        va, vb, vc = vectors
        return cls(
            a=float(np.linalg.norm(va)),
            b=float(np.linalg.norm(vb)),
            c=float(np.linalg.norm(vc)),
            alpha=_angle_between(vb, vc),
            beta=_angle_between(va, vc),
            gamma=_angle_between(va, vb),
            type=type,
        )

    def with_parameters(self, **params: object) -> Lattice:
        """Return a copy with some parameters replaced (and re-validated)."""
        return dataclasses.replace(self, **params)

    @property
    def parameters(self) -> tuple[float, float, float, float, float, float]:
        """``(a, b, c, alpha, beta, gamma)``."""
        return (self.a, self.b, self.c, self.alpha, self.beta, self.gamma)

    @property
    def vectors(self) -> np.ndarray:
        """Cell vectors as rows, shape ``(3, 3)``."""
        return _vectors_from_parameters(*self.parameters)

    @property
    def inverse_vectors(self) -> np.ndarray:
        return invert_cell(self.vectors)

    @property
    def reciprocal_vectors(self) -> np.ndarray:
        """Reciprocal cell vectors as rows, including the factor of 2π."""
        return 2 * np.pi * self.inverse_vectors.T

    @property
    def volume(self) -> float:
        """Cell volume in cubic angstroms."""
        return float(abs(np.linalg.det(self.vectors)))

    def get_hash_string(
        self,
        is_scaled: bool = False,
        precision: int = HASH_PRECISION,
    ) -> str:
        """Return a canonical string of the six cell parameters.

        Args:
            is_scaled: Divide all three lengths by ``a`` first, so the
                string is unchanged by a uniform rescaling of the cell.
            precision: Decimal places kept for each parameter.

        Returns:
            ``"a;b;c;alpha;beta;gamma;"`` with rounded values.
        """
        scale = self.a if is_scaled else 1.0
        values = (
            self.a / scale, self.b / scale, self.c / scale,
            self.alpha, self.beta, self.gamma,
        )
        return ";".join(format_rounded(v, precision) for v in values) + ";"

    def to_dict(self) -> dict:
        """Serialise to a JSON-compatible dictionary."""
        return {
            "type": str(self.type),
            "a": self.a,
            "b": self.b,
            "c": self.c,
            "alpha": self.alpha,
            "beta": self.beta,
            "gamma": self.gamma,
            "units": {"length": self.length_units, "angle": self.angle_units},
        }

    @classmethod
    def from_dict(cls, d: dict) -> Lattice:
        """Deserialise from a dictionary.

        Missing parameters take their defaults (a unit cube).
        """
        units = d.get("units") or {}
        kwargs = {
            key: d[key]
            for key in ("a", "b", "c", "alpha", "beta", "gamma", "type")
            if key in d
        }
        return cls(
            **kwargs,
            length_units=units.get("length", LENGTH_UNITS),
            angle_units=units.get("angle", ANGLE_UNITS),
        )
