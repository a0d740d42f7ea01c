"""Shared test fixtures."""

from pathlib import Path

import numpy as np
import pytest

from protview.core.model import StructuralModel
from protview.io.parsing.tables import PropertyTables

DATA_DIR = Path(__file__).parent / "data"

COLOR_TABLE_STRING = """\
C;0.2;0.2;0.2
N;0.0;0.0;1.0
O;1.0;0.0;0.0
S;1.0;1.0;0.0
"""

RADIUS_TABLE_STRING = """\
C;170
N;155
O;152
S;180
"""


def _atom_line(
    serial: int,
    x: float,
    y: float,
    z: float,
    element: str = "C",
    atom_name: str = "CA",
    resname: str = "ALA",
    chain: str = "A",
    resnum: int = 1,
    record: str = "ATOM  ",
) -> str:
    """Format a 78-column PDB ATOM record."""
    return (
        f"{record}{serial:>5d} {atom_name:<4s} {resname:>3s} {chain}{resnum:>4d}    "
        f"{x:>8.3f}{y:>8.3f}{z:>8.3f}{1.0:>6.2f}{0.0:>6.2f}          {element:>2s}"
    )


def _pdb_text(*lines: str, header: str = "HEADER    TEST") -> str:
    return "\n".join([header, *lines, "END"]) + "\n"


@pytest.fixture
def color_path() -> Path:
    return DATA_DIR / "colors.txt"


@pytest.fixture
def radius_path() -> Path:
    return DATA_DIR / "radii.txt"


@pytest.fixture
def pdb_path() -> Path:
    return DATA_DIR / "mini.pdb"


@pytest.fixture
def tables() -> PropertyTables:
    """Tables matching the files in tests/data (radii already in Angstrom)."""
    return PropertyTables(
        colors={
            "C": (0.2, 0.2, 0.2),
            "N": (0.0, 0.0, 1.0),
            "O": (1.0, 0.0, 0.0),
            "S": (1.0, 1.0, 0.0),
        },
        radii={"C": 1.7, "N": 1.55, "O": 1.52, "S": 1.8},
    )


@pytest.fixture
def loaded_model(color_path, radius_path, pdb_path) -> StructuralModel:
    """A model with tests/data/mini.pdb loaded and centered."""
    model = StructuralModel()
    model.load(color_path, radius_path, pdb_path)
    return model


@pytest.fixture
def rgba_buffer():
    """Factory for an (H, W, 4) picking buffer filled with background."""

    def _make(height: int = 32, width: int = 32) -> np.ndarray:
        pixels = np.zeros((height, width, 4), dtype=np.uint8)
        pixels[..., 3] = 255
        return pixels

    return _make


@pytest.fixture
def atom_line():
    """Formatter for single ATOM records, see ``_atom_line``."""
    return _atom_line


@pytest.fixture
def pdb_text():
    """Builder joining records into a PDB document with a header and END."""
    return _pdb_text


@pytest.fixture
def color_table_text() -> str:
    return COLOR_TABLE_STRING


@pytest.fixture
def radius_table_text() -> str:
    return RADIUS_TABLE_STRING
