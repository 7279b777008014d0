"""Demo script: load H2O from a POSCAR file, then expand silicon to its conventional cell."""

from pathlib import Path

from made import Material, generate_supercell, to_conventional_cell
from made.parsers import poscar

FIXTURES = Path(__file__).resolve().parent.parent / "tests" / "fixtures"


def main():
    water = Material.from_dict(poscar.from_poscar(FIXTURES / "h2o.poscar"))
    print(f"Loaded {water.name!r}: {water.basis.n_atoms} atoms, formula {water.formula}")

    silicon = Material.default()
    print(f"{silicon.name}: {silicon.unit_cell_formula}, hash {silicon.calculate_hash()}")

    conventional = to_conventional_cell(silicon)
    print(f"{conventional.name}: {conventional.unit_cell_formula}, a = {conventional.lattice.a:.4f}")

    supercell = generate_supercell(conventional, [2, 2, 2])
    print(f"{supercell.name}: {supercell.basis.n_atoms} atoms")
    print(supercell.get_as_poscar())


if __name__ == "__main__":
    main()
