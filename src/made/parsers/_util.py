"""Helpers shared by the text-format parsers."""

from __future__ import annotations

import re
from pathlib import Path

_ELEMENT_RE = re.compile(r"^[A-Z][a-z]{0,2}$")

FLOAT_FORMAT = "14.9f"
"""Width and precision for coordinates and cell vectors in text output."""


def read_source(source: str | Path) -> str:
    """Read file content from a path or return inline string content."""
    if isinstance(source, Path):
        return source.read_text()
    # If the string has no newlines and the path exists, read it.
    if "\n" not in source:
        path = Path(source)
        if path.is_file():
            return path.read_text()
    return source


def format_float(value: float) -> str:
    return f"{value:{FLOAT_FORMAT}}"


def parse_floats(tokens: list[str], line: str) -> list[float]:
    """Parse *tokens* as floats, naming *line* in the error."""
    try:
        return [float(t) for t in tokens]
    except ValueError:
        raise ValueError(f"cannot parse numbers from line: {line!r}") from None


def check_element(symbol: str, line: str) -> str:
    if not _ELEMENT_RE.match(symbol):
        raise ValueError(f"invalid element symbol {symbol!r} in line: {line!r}")
    return symbol
