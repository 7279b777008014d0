"""Shared test fixtures for made."""

import copy
from pathlib import Path

import pytest

from made.model import DEFAULT_MATERIAL_CONFIG

FIXTURES_DIR = Path(__file__).parent / "fixtures"

NA4CL4_CONFIG = {
    "name": "Sodium chloride",
    "basis": {
        "elements": ["Na", "Na", "Na", "Na", "Cl", "Cl", "Cl", "Cl"],
        "coordinates": [
            [0.0, 0.0, 0.0],
            [0.0, 0.5, 0.5],
            [0.5, 0.0, 0.5],
            [0.5, 0.5, 0.0],
            [0.5, 0.0, 0.0],
            [0.0, 0.5, 0.0],
            [0.0, 0.0, 0.5],
            [0.5, 0.5, 0.5],
        ],
        "units": "crystal",
    },
    "lattice": {
        "type": "CUB",
        "a": 5.691694,
        "b": 5.691694,
        "c": 5.691694,
        "alpha": 90,
        "beta": 90,
        "gamma": 90,
    },
}


def _zr_h_config():
    elements = ["Zr"] + ["H"] * 23 + ["Zr"] + ["H"]
    coordinates = [[i / 26, (2 * i % 26) / 26, 0.5] for i in range(26)]
    return {
        "name": "Zirconium hydride",
        "basis": {
            "elements": elements,
            "coordinates": coordinates,
            "units": "crystal",
        },
        "lattice": {
            "type": "TET", "a": 4.5, "b": 4.5, "c": 6.0,
            "alpha": 90, "beta": 90, "gamma": 90,
        },
    }


H2O_CONFIG = {
    "name": "Water",
    "basis": {
        "elements": ["O", "H", "H"],
        "coordinates": [
            [0.0, 0.0, 0.0],
            [0.757, 0.586, 0.0],
            [-0.757, 0.586, 0.0],
        ],
        "units": "cartesian",
    },
}


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def h2o_poscar_path():
    """Return the path to the H2O POSCAR fixture file."""
    return FIXTURES_DIR / "h2o.poscar"


@pytest.fixture
def h2s_poscar_path():
    """Return the path to the cartesian, selective-dynamics H2S POSCAR."""
    return FIXTURES_DIR / "h2s_cartesian.poscar"


@pytest.fixture
def si_config():
    """Primitive FCC silicon."""
    return copy.deepcopy(DEFAULT_MATERIAL_CONFIG)


@pytest.fixture
def na4cl4_config():
    """Conventional rock-salt NaCl cell with eight atoms."""
    return copy.deepcopy(NA4CL4_CONFIG)


@pytest.fixture
def zr_h_config():
    """Zr1H23Zr1H1: an element that reappears after another element."""
    return _zr_h_config()


@pytest.fixture
def h2o_config():
    """Water molecule in cartesian coordinates, no lattice."""
    return copy.deepcopy(H2O_CONFIG)
