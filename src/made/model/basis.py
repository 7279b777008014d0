from __future__ import annotations

import dataclasses
import math
import warnings
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum

import numpy as np
from scipy.spatial.distance import pdist

from made._constants import (
    COORDINATE_TOLERANCE,
    HASH_PRECISION,
    METRIC_PRECISION,
    NON_PERIODIC_LATTICE_SCALING_FACTOR,
    WRAP_TOLERANCE,
)
from made.model._util import (
    as_cell,
    format_rounded,
    invert_cell,
    precise,
    vectors_equal,
    wrap_fractional,
)
from made.model.identified_sequence import IdentifiedSequence
from made.periodic_table import DEFAULT_PERIODIC_TABLE, PeriodicTable


class Units(StrEnum):
    """Unit system of basis coordinates.

    Attributes:
        CRYSTAL: Fractions of the cell vectors.
        CARTESIAN: Absolute positions in angstroms.
    """

    CRYSTAL = "crystal"
    CARTESIAN = "cartesian"


@dataclass(frozen=True)
class Atom:
    """One atom of a basis.

    Attributes:
        element: Chemical element symbol.
        coordinate: Position, in the units of the owning basis.
        constraint: Per-axis flags; ``True`` means the atom may move
            along that axis.  ``None`` when no constraint is set.

    Raises:
        ValueError: If *coordinate* or *constraint* does not have
            three components.
    """

    element: str
    coordinate: tuple[float, float, float]
    constraint: tuple[bool, bool, bool] | None = None

    def __post_init__(self) -> None:
        coordinate = tuple(float(x) for x in np.ravel(self.coordinate))
        if len(coordinate) != 3:
            raise ValueError(
                f"coordinate must have 3 components, got {self.coordinate!r}"
            )
        object.__setattr__(self, "coordinate", coordinate)
        if self.constraint is not None:
            constraint = tuple(bool(x) for x in self.constraint)
            if len(constraint) != 3:
                raise ValueError(
                    f"constraint must have 3 components, got {self.constraint!r}"
                )
            object.__setattr__(self, "constraint", constraint)


def _values(entries: Sequence) -> list:
    return [
        e["value"] if isinstance(e, dict) and "value" in e else e
        for e in entries
    ]


def _ids(entries: Sequence) -> list | None:
    if entries and all(isinstance(e, dict) and "id" in e for e in entries):
        return [e["id"] for e in entries]
    return None


@dataclass(eq=False)
class Basis:
    """The atoms of a structure, with their positions in a given cell.

    Each atom is a single :class:`Atom` record, so an element can never
    become detached from its coordinate.  Coordinates are interpreted
    either as fractions of *cell* (crystal units) or as absolute
    positions (cartesian units); the conversion methods switch between
    the two.

    Canonical forms (:attr:`standard_representation`,
    :attr:`hash_string`) are computed on copies, so reading them never
    changes the basis and is safe from several threads at once.  The
    in-place mutators are not synchronised.

    Attributes:
        atoms: Atoms in order, tagged with stable ids.
        units: Unit system of the coordinates.  Defaults to crystal,
            with a warning, when not given.
        cell: Cell vectors as rows, shape ``(3, 3)``.
        periodic_table: Source of electronegativities and atomic radii.

    Raises:
        ValueError: If *cell* is not ``(3, 3)``, *units* is unknown, or
            *atoms* holds anything other than :class:`Atom` records.
    """

    atoms: IdentifiedSequence[Atom] = field(default_factory=IdentifiedSequence)
    units: Units | None = None
    cell: np.ndarray = field(default_factory=lambda: np.eye(3))
    periodic_table: PeriodicTable = field(
        default=DEFAULT_PERIODIC_TABLE, repr=False,
    )

    def __post_init__(self) -> None:
        if not isinstance(self.atoms, IdentifiedSequence):
            self.atoms = IdentifiedSequence(self.atoms)
        for atom in self.atoms:
            if not isinstance(atom, Atom):
                raise ValueError(f"atoms must be Atom records, got {atom!r}")
        if self.units is None:
            warnings.warn(
                "Basis units are not provided; assuming crystal units",
                stacklevel=3,
            )
            self.units = Units.CRYSTAL
        try:
            self.units = Units(self.units)
        except ValueError:
            raise ValueError(f"unknown coordinate units: {self.units!r}") from None
        self.cell = as_cell(self.cell)

    # ---- construction ----------------------------------------------------

    @classmethod
    def from_elements(
        cls,
        elements: Sequence,
        coordinates: Sequence,
        units: Units | str | None = None,
        cell: object = None,
        constraints: Sequence | None = None,
        periodic_table: PeriodicTable = DEFAULT_PERIODIC_TABLE,
    ) -> Basis:
        """Create a basis from parallel element and coordinate lists.

        Both lists may hold plain values or tagged ``{"id", "value"}``
        entries.  Atom ids are taken from the elements when tagged.

        Raises:
            ValueError: If the lists (or *constraints*) differ in length.
        """
        if len(elements) != len(coordinates):
            raise ValueError(
                f"got {len(elements)} elements but "
                f"{len(coordinates)} coordinates"
            )
        constraint_values = [None] * len(elements)
        if constraints:
            if len(constraints) != len(elements):
                raise ValueError(
                    f"got {len(constraints)} constraints for "
                    f"{len(elements)} atoms"
                )
            constraint_values = _values(constraints)
        atoms = [
            Atom(element, coordinate, constraint)
            for element, coordinate, constraint in zip(
                _values(elements), _values(coordinates), constraint_values,
            )
        ]
        ids = _ids(elements) or _ids(coordinates) or range(len(atoms))
        return cls(
            atoms=IdentifiedSequence.from_pairs(ids, atoms),
            units=units,
            cell=np.eye(3) if cell is None else cell,
            periodic_table=periodic_table,
        )

    @classmethod
    def from_dict(
        cls,
        d: dict,
        periodic_table: PeriodicTable = DEFAULT_PERIODIC_TABLE,
    ) -> Basis:
        """Deserialise from a configuration dictionary.

        Accepts the keys ``elements``, ``coordinates``, ``units``,
        ``cell`` and ``constraints``.
        """
        return cls.from_elements(
            d.get("elements", []),
            d.get("coordinates", []),
            units=d.get("units"),
            cell=d.get("cell"),
            constraints=d.get("constraints"),
            periodic_table=periodic_table,
        )

    def to_dict(self) -> dict:
        """Serialise to a JSON-compatible dictionary.

        ``constraints`` is included only when at least one atom carries
        a constraint; unconstrained atoms are then written as free to
        move along every axis.
        """
        d: dict = {
            "elements": [
                {"id": i, "value": atom.element} for i, atom in self.atoms.items()
            ],
            "coordinates": [
                {"id": i, "value": list(atom.coordinate)}
                for i, atom in self.atoms.items()
            ],
            "units": str(self.units),
            "cell": self.cell.tolist(),
        }
        if self.has_constraints:
            d["constraints"] = [
                {"id": i, "value": list(atom.constraint or (True, True, True))}
                for i, atom in self.atoms.items()
            ]
        return d

    def clone(self, **overrides: object) -> Basis:
        """Return an independent copy, optionally replacing fields."""
        fields = {
            "atoms": self.atoms.copy(),
            "units": self.units,
            "cell": self.cell.copy(),
            "periodic_table": self.periodic_table,
        }
        fields.update(overrides)
        return Basis(**fields)

    def empty(self) -> Basis:
        """Return a basis with no atoms, sharing units and cell."""
        return self.clone(atoms=IdentifiedSequence())

    # ---- accessors -------------------------------------------------------

    @property
    def n_atoms(self) -> int:
        return len(self.atoms)

    @property
    def elements(self) -> list[str]:
        return [atom.element for atom in self.atoms]

    @property
    def coordinates(self) -> np.ndarray:
        """Coordinates as an array of shape ``(n_atoms, 3)``."""
        return np.array(
            [atom.coordinate for atom in self.atoms], dtype=float,
        ).reshape(-1, 3)

    @property
    def constraints(self) -> list[tuple[bool, bool, bool] | None]:
        return [atom.constraint for atom in self.atoms]

    @property
    def has_constraints(self) -> bool:
        return any(atom.constraint is not None for atom in self.atoms)

    @property
    def is_in_crystal_units(self) -> bool:
        return self.units == Units.CRYSTAL

    @property
    def is_in_cartesian_units(self) -> bool:
        return self.units == Units.CARTESIAN

    def get_element_by_index(self, index: int) -> str:
        return self.atoms.get_by_index(index).element

    def get_coordinate_by_index(self, index: int) -> np.ndarray:
        return np.array(self.atoms.get_by_index(index).coordinate)

    @property
    def unique_elements(self) -> list[str]:
        """Element symbols in order of first appearance."""
        return list(dict.fromkeys(self.elements))

    @property
    def elements_and_coordinates(self) -> list[tuple[str, np.ndarray]]:
        return [
            (atom.element, np.array(atom.coordinate)) for atom in self.atoms
        ]

    @property
    def atomic_positions(self) -> list[str]:
        """One ``"<element> <x> <y> <z>"`` line per atom."""
        return [
            f"{atom.element} "
            + " ".join(f"{x:14.9f}".strip() for x in atom.coordinate)
            for atom in self.atoms
        ]

    @property
    def atomic_positions_with_constraints(self) -> list[str]:
        """Atomic positions followed by ``1``/``0`` movement flags."""
        return [
            line + " " + " ".join(
                "1" if flag else "0"
                for flag in (atom.constraint or (True, True, True))
            )
            for line, atom in zip(self.atomic_positions, self.atoms)
        ]

    # ---- mutation --------------------------------------------------------

    def _replace_coordinates(self, coords: np.ndarray) -> IdentifiedSequence[Atom]:
        return IdentifiedSequence.from_pairs(
            self.atoms.ids,
            [
                dataclasses.replace(atom, coordinate=tuple(row))
                for atom, row in zip(self.atoms, coords)
            ],
        )

    def add_atom(
        self,
        element: str = "Si",
        coordinate: Sequence[float] = (0.5, 0.5, 0.5),
        constraint: Sequence[bool] | None = None,
    ) -> int:
        """Append an atom and return its id."""
        return self.atoms.add(Atom(element, tuple(coordinate), constraint))

    def remove_atom(
        self,
        element: str | None = None,
        coordinate: Sequence[float] | None = None,
        id: int | None = None,
    ) -> int:
        """Remove an atom by id, or by element and coordinate.

        Returns:
            The index of the removed atom, or ``-1`` if nothing matched.
        """
        if id is not None:
            return self.atoms.remove(id=id)
        if element is None or coordinate is None or len(coordinate) == 0:
            return -1
        return self.atoms.remove(
            lambda atom: atom.element == element
            and vectors_equal(atom.coordinate, coordinate)
        )

    def remove_atom_at_coordinate(self, coordinate: Sequence[float]) -> int:
        """Remove the first atom located at *coordinate*.

        Returns:
            The index of the removed atom, or ``-1`` if nothing matched.
        """
        if len(coordinate) == 0:
            return -1
        return self.atoms.remove(
            lambda atom: vectors_equal(atom.coordinate, coordinate)
        )

    def set_constraints(self, constraints: Sequence) -> None:
        """Set per-atom constraints, given in atom order.

        Entries may be plain flag triples or tagged ``{"id", "value"}``
        entries.

        Raises:
            ValueError: If the number of constraints differs from the
                number of atoms.
        """
        if len(constraints) != self.n_atoms:
            raise ValueError(
                f"got {len(constraints)} constraints for {self.n_atoms} atoms"
            )
        self.atoms = IdentifiedSequence.from_pairs(
            self.atoms.ids,
            [
                dataclasses.replace(atom, constraint=tuple(value))
                for atom, value in zip(self.atoms, _values(constraints))
            ],
        )

    def translate_by_vector(self, vector: Sequence[float]) -> None:
        """Add *vector* to every coordinate, in the current units."""
        shifted = self.coordinates + np.asarray(vector, dtype=float)
        self.atoms = self._replace_coordinates(shifted)

    # ---- unit conversion -------------------------------------------------

    def converted(self, units: Units | str) -> Basis:
        """Return a copy of this basis expressed in *units*.

        Raises:
            ValueError: If the cell is singular.
        """
        units = Units(units)
        if units == self.units:
            return self.clone()
        if units == Units.CARTESIAN:
            coords = self.coordinates @ self.cell
        else:
            coords = self.coordinates @ invert_cell(self.cell)
        return self.clone(atoms=self._replace_coordinates(coords), units=units)

    def to_cartesian(self) -> None:
        """Convert coordinates to cartesian units in place."""
        if self.is_in_cartesian_units:
            return
        self.atoms = self.converted(Units.CARTESIAN).atoms
        self.units = Units.CARTESIAN

    def to_crystal(self) -> None:
        """Convert coordinates to crystal units in place."""
        if self.is_in_crystal_units:
            return
        self.atoms = self.converted(Units.CRYSTAL).atoms
        self.units = Units.CRYSTAL

    # ---- canonical forms -------------------------------------------------

    def standardized(self, tolerance: float = WRAP_TOLERANCE) -> Basis:
        """Return a copy in crystal units with coordinates in ``[0, 1)``.

        Wrapping removes the periodic-image ambiguity: an atom at
        fractional 1.25 is the same atom as one at 0.25.  Components
        within *tolerance* of 0 or 1 are snapped to 0.
        """
        crystal = self.converted(Units.CRYSTAL)
        crystal.atoms = crystal._replace_coordinates(
            wrap_fractional(crystal.coordinates, tolerance)
        )
        return crystal

    def to_standard_representation(self) -> None:
        """Convert to crystal units and wrap coordinates, in place."""
        standard = self.standardized()
        self.atoms = standard.atoms
        self.units = standard.units

    @property
    def standard_representation(self) -> dict:
        """Configuration of the wrapped, crystal-unit form of this basis."""
        return self.standardized().to_dict()

    def get_as_sorted_string(self, precision: int = HASH_PRECISION) -> str:
        """Return an order-independent string of elements and positions.

        Each atom becomes ``"<element> <c1>,<c2>,<c3>"`` in wrapped
        crystal coordinates rounded to *precision* decimals.  The atom
        strings are sorted, so the result does not depend on atom order::

            "Si 0,0,0;Si 0.25,0.25,0.25;"

        Components closer to a cell boundary than ``10 ** -precision``
        (at most ``WRAP_TOLERANCE``) are snapped onto it, so raising
        *precision* also tightens the snap.

        Args:
            precision: Decimal places kept for each coordinate.
        """
        standard = self.standardized(min(WRAP_TOLERANCE, 10.0 ** -precision))
        rounded = np.mod(np.round(standard.coordinates, precision), 1.0)
        entries = [
            f"{element} " + ",".join(format_rounded(x, precision) for x in row)
            for element, row in zip(standard.elements, rounded)
        ]
        return ";".join(sorted(entries)) + ";"

    @property
    def hash_string(self) -> str:
        """String used for hashing; always built in crystal units."""
        return self.get_as_sorted_string()

    def is_equal_to(self, other: Basis) -> bool:
        """Return ``True`` if both bases have the same hash string."""
        return self.hash_string == other.hash_string

    def has_equivalent_cell_to(
        self,
        other: Basis,
        tolerance: float = COORDINATE_TOLERANCE,
    ) -> bool:
        """Return ``True`` if every cell vector matches within *tolerance*."""
        return all(
            vectors_equal(mine, theirs, tolerance)
            for mine, theirs in zip(self.cell, other.cell)
        )

    # ---- composition -----------------------------------------------------

    @property
    def element_counts(self) -> list[tuple[str, int]]:
        """Run-length counts of elements in their original order.

        The same element separated by another element is counted
        separately, e.g. ``[("Zr", 1), ("H", 23), ("Zr", 1), ("H", 1)]``.
        """
        counts: list[tuple[str, int]] = []
        for element in self.elements:
            if counts and counts[-1][0] == element:
                counts[-1] = (element, counts[-1][1] + 1)
            else:
                counts.append((element, 1))
        return counts

    @property
    def unique_element_counts_sorted_by_electronegativity(self) -> dict[str, int]:
        """Element counts ordered by ascending electronegativity.

        Ties are broken by symbol.  Elements without a defined
        electronegativity come last.
        """
        def key(symbol: str) -> tuple[float, str]:
            value = self.periodic_table.electronegativity(symbol)
            return (math.inf if value is None else value, symbol)

        totals: dict[str, int] = {}
        for element in self.elements:
            totals[element] = totals.get(element, 0) + 1
        return {symbol: totals[symbol] for symbol in sorted(totals, key=key)}

    @property
    def formula(self) -> str:
        """Reduced (empirical) formula, e.g. ``"NaCl"`` for Na4Cl4."""
        counts = self.unique_element_counts_sorted_by_electronegativity
        if not counts:
            return ""
        divisor = math.gcd(*counts.values())
        return _render_formula(
            (symbol, count // divisor) for symbol, count in counts.items()
        )

    @property
    def unit_cell_formula(self) -> str:
        """Formula of the cell contents, e.g. ``"Na4Cl4"``."""
        return _render_formula(
            self.unique_element_counts_sorted_by_electronegativity.items()
        )

    # ---- geometry --------------------------------------------------------

    @property
    def max_pairwise_distance(self) -> float:
        """Largest cartesian distance between any two atoms.

        Every unordered pair is considered.  Returns 0 for fewer than
        two atoms.
        """
        if self.n_atoms < 2:
            return 0.0
        coords = self.converted(Units.CARTESIAN).coordinates
        return precise(pdist(coords).max(), METRIC_PRECISION)

    @property
    def center_of_coordinates_point(self) -> list[float]:
        """Mean of all coordinates, in the current units.

        Raises:
            ValueError: If the basis has no atoms.
        """
        if self.n_atoms == 0:
            raise ValueError("cannot take the centre of an empty basis")
        centre = self.coordinates.mean(axis=0)
        return [precise(x, METRIC_PRECISION) for x in centre]

    def get_minimum_lattice_size(
        self,
        scaling_factor: float = NON_PERIODIC_LATTICE_SCALING_FACTOR,
    ) -> float:
        """Smallest cell size that encloses this basis as a molecule.

        A single atom is sized by its atomic radius; otherwise the
        largest interatomic distance is multiplied by *scaling_factor*.
        """
        if self.n_atoms == 1:
            size = self.periodic_table.atomic_radius(self.get_element_by_index(0))
        else:
            size = self.max_pairwise_distance * scaling_factor
        return precise(size, METRIC_PRECISION)


def _render_formula(counts: Iterable[tuple[str, int]]) -> str:
    return "".join(
        symbol + ("" if count == 1 else str(count)) for symbol, count in counts
    )
