"""Shared numeric helpers for model classes."""

from __future__ import annotations

import numpy as np

from made._constants import COORDINATE_TOLERANCE, WRAP_TOLERANCE


def format_rounded(value: float, precision: int) -> str:
    """Round *value* and render it without trailing zeros.

    ``-0`` is rendered as ``"0"`` so that values on either side of zero
    collapse to the same string.
    """
    rounded = round(float(value), precision)
    if rounded == 0:
        rounded = 0.0
    text = f"{rounded:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def precise(value: float, precision: int) -> float:
    """Round *value* to *precision* decimal places as a plain float."""
    return float(round(float(value), precision))


def wrap_fractional(
    coords: np.ndarray,
    tolerance: float = WRAP_TOLERANCE,
) -> np.ndarray:
    """Wrap fractional coordinates into ``[0, 1)``.

    Components within *tolerance* of 0 or 1 are snapped to exactly 0.
    """
    wrapped = np.mod(np.asarray(coords, dtype=float), 1.0)
    snap = (np.abs(wrapped) <= tolerance) | (np.abs(wrapped - 1.0) <= tolerance)
    wrapped[snap] = 0.0
    return wrapped


def vectors_equal(
    a: np.ndarray,
    b: np.ndarray,
    tolerance: float = COORDINATE_TOLERANCE,
) -> bool:
    """Return ``True`` if two vectors differ by less than *tolerance*."""
    diff = np.asarray(a, dtype=float) - np.asarray(b, dtype=float)
    return bool(np.linalg.norm(diff) < tolerance)


def as_cell(cell: object) -> np.ndarray:
    """Coerce *cell* to a float ``(3, 3)`` array.

    Raises:
        ValueError: If *cell* does not have shape ``(3, 3)``.
    """
    arr = np.asarray(cell, dtype=float)
    if arr.shape != (3, 3):
        raise ValueError(f"cell must have shape (3, 3), got {arr.shape}")
    return arr


def invert_cell(cell: np.ndarray) -> np.ndarray:
    """Return the inverse of a cell matrix.

    Raises:
        ValueError: If the cell is singular.
    """
    if abs(np.linalg.det(cell)) < 1e-12:
        raise ValueError(f"cell matrix is singular: {np.asarray(cell).tolist()}")
    try:
        return np.linalg.inv(cell)
    except np.linalg.LinAlgError as exc:
        raise ValueError(f"cell matrix is singular: {cell.tolist()}") from exc
