"""Text formats: XYZ, VASP POSCAR, and Quantum ESPRESSO input cards.

Each parser is a set of pure functions between text and material or
basis configuration dictionaries.
"""

from made.parsers import espresso, poscar, xyz

__all__ = ["espresso", "poscar", "xyz"]
