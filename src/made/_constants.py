"""Shared constants used across the model and construction layers."""

LENGTH_UNITS: str = "angstrom"
"""Units in which lattice lengths and cartesian coordinates are stored."""

ANGLE_UNITS: str = "degree"
"""Units in which lattice angles are stored."""

HASH_PRECISION: int = 3
"""Decimal places kept for coordinates and cell parameters in hash strings.

Coarser values conflate distinct structures; finer values fail to
deduplicate numerically noisy copies of the same structure.
"""

WRAP_TOLERANCE: float = 1e-3
"""Fractional components this close to 0 or 1 are snapped to 0 when wrapped."""

COORDINATE_TOLERANCE: float = 1e-4
"""Distance below which two vectors are treated as equal."""

METRIC_PRECISION: int = 4
"""Decimal places kept for derived geometric metrics."""

NON_PERIODIC_LATTICE_SCALING_FACTOR: float = 2.0
"""Multiple of the largest interatomic distance used to box a molecule."""
