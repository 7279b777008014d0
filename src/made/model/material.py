from __future__ import annotations

import copy
import hashlib
from dataclasses import dataclass
from typing import TYPE_CHECKING

from made._constants import HASH_PRECISION
from made.model.basis import Basis
from made.model.lattice import Lattice, LatticeType
from made.periodic_table import DEFAULT_PERIODIC_TABLE, PeriodicTable

if TYPE_CHECKING:
    from pymatgen.core import Structure

INCHI_PROPERTY = "inchi"
"""Name of the derived property holding a molecule's InChI string."""

DEFAULT_MATERIAL_CONFIG: dict = {
    "name": "Silicon FCC",
    "basis": {
        "elements": [{"id": 1, "value": "Si"}, {"id": 2, "value": "Si"}],
        "coordinates": [
            {"id": 1, "value": [0.0, 0.0, 0.0]},
            {"id": 2, "value": [0.25, 0.25, 0.25]},
        ],
        "units": "crystal",
    },
    # Primitive cell of diamond-structure silicon at ambient conditions.
    "lattice": {
        "type": "FCC",
        "a": 3.867,
        "b": 3.867,
        "c": 3.867,
        "alpha": 60,
        "beta": 60,
        "gamma": 60,
        "units": {"length": "angstrom", "angle": "degree"},
    },
}


class MissingIdentifierError(ValueError):
    """A non-periodic material has no chemical identifier to hash."""


@dataclass(eq=False, init=False)
class Material:
    """A structure: atoms, the lattice they sit in, and metadata.

    The lattice is authoritative for the cell: whenever the basis or
    the lattice is assigned, ``basis.cell`` is reset to the lattice
    vectors.

    Attributes:
        basis: The atoms.
        lattice: The unit cell.
        name: Display name.  Falls back to the reduced formula of the
            current basis when no name was given.
        is_non_periodic: ``True`` for isolated molecules, whose lattice
            is only a bounding box.
        derived_properties: ``{"name": ..., "value": ...}`` entries,
            e.g. an ``"inchi"`` identifier for molecules.
        hash: Cached fingerprint, set by :meth:`update_hash`.
        src: Original source, ``{"extension": ..., "text": ...}``, when
            the material was parsed from a file.
    """

    basis: Basis
    lattice: Lattice
    _name: str | None
    is_non_periodic: bool
    derived_properties: list[dict]
    hash: str | None
    src: dict | None

    def __init__(
        self,
        basis: Basis,
        lattice: Lattice | None = None,
        name: str | None = None,
        is_non_periodic: bool = False,
        derived_properties: list[dict] | None = None,
        hash: str | None = None,
        src: dict | None = None,
    ) -> None:
        self.basis = basis
        self.lattice = lattice if lattice is not None else Lattice()
        self.name = name
        self.is_non_periodic = is_non_periodic
        self.derived_properties = (
            derived_properties if derived_properties is not None else []
        )
        self.hash = hash
        self.src = src

    def __setattr__(self, name: str, value: object) -> None:
        if name == "basis":
            if not isinstance(value, Basis):
                raise TypeError(
                    f"basis must be a Basis, got {type(value).__name__}"
                )
            lattice = self.__dict__.get("lattice")
            if lattice is not None:
                value.cell = lattice.vectors
        elif name == "lattice":
            if not isinstance(value, Lattice):
                raise TypeError(
                    f"lattice must be a Lattice, got {type(value).__name__}"
                )
            basis = self.__dict__.get("basis")
            if basis is not None:
                basis.cell = value.vectors
        super().__setattr__(name, value)

    @property
    def name(self) -> str:
        return self._name or self.basis.formula

    @name.setter
    def name(self, value: str | None) -> None:
        self._name = value or None

    # ---- construction ----------------------------------------------------

    @classmethod
    def from_dict(
        cls,
        d: dict,
        periodic_table: PeriodicTable = DEFAULT_PERIODIC_TABLE,
    ) -> Material:
        """Deserialise from a configuration dictionary.

        Recognised keys: ``name``, ``basis``, ``lattice``,
        ``isNonPeriodic``, ``derivedProperties``, ``hash`` and ``src``.
        """
        lattice = Lattice.from_dict(d.get("lattice") or {})
        basis_config = {**(d.get("basis") or {}), "cell": lattice.vectors}
        return cls(
            basis=Basis.from_dict(basis_config, periodic_table=periodic_table),
            lattice=lattice,
            name=d.get("name"),
            is_non_periodic=bool(d.get("isNonPeriodic", False)),
            derived_properties=copy.deepcopy(d.get("derivedProperties") or []),
            hash=d.get("hash"),
            src=copy.deepcopy(d.get("src")),
        )

    @classmethod
    def default(cls) -> Material:
        """Diamond-structure silicon in its primitive FCC cell."""
        return cls.from_dict(DEFAULT_MATERIAL_CONFIG)

    @classmethod
    def from_pymatgen(cls, structure: Structure, name: str | None = None) -> Material:
        """Create a Material from a pymatgen ``Structure`` or ``Molecule``.

        See Also:
            :func:`made.construction.builders.from_pymatgen`
        """
        from made.construction.builders import from_pymatgen

        return from_pymatgen(structure, name=name)

    def to_pymatgen(self) -> Structure:
        """Convert to a pymatgen ``Structure``.

        See Also:
            :func:`made.construction.builders.to_pymatgen`
        """
        from made.construction.builders import to_pymatgen

        return to_pymatgen(self)

    def to_dict(self) -> dict:
        """Serialise to a JSON-compatible dictionary.

        ``derivedProperties``, ``hash`` and ``src`` are omitted when
        empty.
        """
        d: dict = {
            "name": self.name,
            "basis": self.basis.to_dict(),
            "lattice": self.lattice.to_dict(),
            "isNonPeriodic": self.is_non_periodic,
        }
        if self.derived_properties:
            d["derivedProperties"] = copy.deepcopy(self.derived_properties)
        if self.hash is not None:
            d["hash"] = self.hash
        if self.src is not None:
            d["src"] = copy.deepcopy(self.src)
        return d

    def clone(self, **overrides: object) -> Material:
        """Return an independent copy, optionally replacing fields."""
        fields = {
            "basis": self.basis.clone(),
            "lattice": self.lattice,
            "name": self._name,
            "is_non_periodic": self.is_non_periodic,
            "derived_properties": copy.deepcopy(self.derived_properties),
            "hash": self.hash,
            "src": copy.deepcopy(self.src),
        }
        fields.update(overrides)
        return Material(**fields)

    # ---- composition -----------------------------------------------------

    @property
    def formula(self) -> str:
        return self.basis.formula

    @property
    def unit_cell_formula(self) -> str:
        return self.basis.unit_cell_formula

    def set_basis(
        self,
        source: str | dict | Basis,
        format: str | None = None,
        units: str | None = None,
    ) -> None:
        """Replace the basis.

        Args:
            source: A :class:`Basis`, a basis configuration dictionary,
                or text in *format*.
            format: ``"xyz"`` to parse *source* as XYZ text; ``None``
                when *source* is already a basis or configuration.
            units: Coordinate units of XYZ text.

        Raises:
            ValueError: If *format* is not supported.
        """
        if isinstance(source, Basis):
            basis = source
        elif format == "xyz":
            from made.parsers import xyz

            config = xyz.to_basis_config(
                source, units=units or "cartesian", cell=self.lattice.vectors,
            )
            basis = Basis.from_dict(config, periodic_table=self.basis.periodic_table)
        elif format is None:
            basis = Basis.from_dict(source, periodic_table=self.basis.periodic_table)
        else:
            raise ValueError(f"unsupported basis format: {format!r}")
        self.basis = basis

    def set_basis_constraints(self, constraints: list) -> None:
        self.basis.set_constraints(constraints)

    def get_derived_property_by_name(self, name: str) -> dict | None:
        for prop in self.derived_properties:
            if prop.get("name") == name:
                return prop
        return None

    # ---- hashing ---------------------------------------------------------

    def get_inchi_string_for_hash(self) -> str:
        """Return the stored InChI string.

        Raises:
            MissingIdentifierError: If no ``"inchi"`` derived property
                is present.
        """
        inchi = self.get_derived_property_by_name(INCHI_PROPERTY)
        if inchi is None:
            raise MissingIdentifierError(
                "Hash cannot be created. "
                "Missing InChI string in derivedProperties"
            )
        return inchi["value"]

    def calculate_hash(
        self,
        salt: str = "",
        is_scaled: bool = False,
        bypass_non_periodic_check: bool = False,
        precision: int = HASH_PRECISION,
    ) -> str:
        """Return an MD5 fingerprint of the structure.

        For periodic materials the digest covers the basis hash string,
        the lattice hash string and *salt*, joined by ``"#"``.  For
        non-periodic materials the lattice is only a bounding box, so
        the stored InChI identifier is hashed instead.

        Args:
            salt: Extra text mixed into the periodic digest.
            is_scaled: Scale the lattice to ``a = 1`` before hashing,
                so uniformly rescaled structures share a hash.
            bypass_non_periodic_check: Hash geometry even for a
                non-periodic material.
            precision: Decimal places kept for coordinates and cell
                parameters.

        Raises:
            MissingIdentifierError: If the material is non-periodic,
                the check is not bypassed, and no InChI is stored.
        """
        if not self.is_non_periodic or bypass_non_periodic_check:
            message = "#".join((
                self.basis.get_as_sorted_string(precision),
                self.lattice.get_hash_string(is_scaled, precision),
                salt,
            ))
        else:
            message = self.get_inchi_string_for_hash()
        return hashlib.md5(message.encode("utf-8")).hexdigest()

    @property
    def scaled_hash(self) -> str:
        """Hash of the structure with the lattice scaled to ``a = 1``."""
        return self.calculate_hash("", True)

    def update_hash(self, salt: str = "") -> str:
        """Compute the hash, store it on :attr:`hash`, and return it."""
        self.hash = self.calculate_hash(salt)
        return self.hash

    # ---- unit conversion -------------------------------------------------

    def to_crystal(self) -> None:
        self.basis.to_crystal()

    def to_cartesian(self) -> None:
        self.basis.to_cartesian()

    # ---- formats ---------------------------------------------------------

    def get_basis_as_xyz(self, fractional: bool = False) -> str:
        """Return the basis as XYZ text."""
        from made.parsers import xyz

        return xyz.from_material(self.to_dict(), fractional=fractional)

    def get_as_qe_format(self) -> str:
        """Return cell and positions as Quantum ESPRESSO input cards."""
        from made.parsers import espresso

        return espresso.to_espresso_format(self.to_dict())

    def get_as_poscar(
        self,
        ignore_original: bool = False,
        omit_constraints: bool = False,
    ) -> str:
        """Return the material in VASP POSCAR format.

        Args:
            ignore_original: Re-serialise even when the material was
                read from a POSCAR file.  Otherwise the original text is
                returned unchanged.
            omit_constraints: Leave out the selective dynamics block.
        """
        if (
            self.src is not None
            and self.src.get("extension") == "poscar"
            and not ignore_original
        ):
            return self.src["text"]
        from made.parsers import poscar

        return poscar.to_poscar(self.to_dict(), omit_constraints=omit_constraints)

    # ---- cells -----------------------------------------------------------

    def get_a_copy_with_conventional_cell(self) -> Material:
        """Return a copy built on the conventional cell of the lattice type.

        See Also:
            :func:`made.construction.conventional_cell.to_conventional_cell`
        """
        from made.construction.conventional_cell import to_conventional_cell

        return to_conventional_cell(self)

    @property
    def lattice_type(self) -> LatticeType:
        return self.lattice.type
