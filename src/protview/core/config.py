"""Default values and configuration containers for loading and picking."""

from __future__ import annotations

import enum
from typing import Final

from flax.struct import dataclass, field

from protview.core.types import Vector3

DEFAULT_COLOR: Final[Vector3] = (0.0, 0.0, 0.0)
DEFAULT_RADIUS: Final[float] = 2.0
# Radius tables are written in hundredths of an Angstrom.
RADIUS_UNIT_SCALE: Final[float] = 100.0

MIN_PDB_LINES: Final[int] = 2
ATOM_RECORD: Final[str] = "ATOM"
# The element column (0-based offset 77) is the last one read from an ATOM line.
MIN_ATOM_LINE_LENGTH: Final[int] = 78

COLOR_TABLE_FIELDS: Final[int] = 4
RADIUS_TABLE_FIELDS: Final[int] = 2
TABLE_DELIMITER: Final[str] = ";"

PICK_WINDOW_SIZE: Final[int] = 5
PICK_MAJORITY: Final[float] = 0.5
# Index 0 is background, so 0xFFFFFF identities leave room for 0xFFFFFF atoms.
MAX_PACKED_COLOR: Final[int] = 0xFFFFFF
MAX_PICKABLE_ATOMS: Final[int] = MAX_PACKED_COLOR


class NumericErrorMode(enum.Enum):
  """How a property table reacts to a line whose numeric field does not parse."""

  ABORT = "abort"
  SKIP = "skip"


@dataclass(frozen=True, kw_only=True)
class LoadConfig:
  """Options applied while loading property tables and structures.

  Attributes:
    numeric_errors: Whether a malformed numeric field aborts the whole table
      (the default) or only drops the offending line.
    default_color: Color assigned to atoms whose name is missing from the color table.
    default_radius: Radius assigned to atoms whose name is missing from the radius table.

  """

  numeric_errors: NumericErrorMode = field(default=NumericErrorMode.ABORT, pytree_node=False)
  default_color: Vector3 = field(default=DEFAULT_COLOR, pytree_node=False)
  default_radius: float = field(default=DEFAULT_RADIUS, pytree_node=False)


@dataclass(frozen=True, kw_only=True)
class PickConfig:
  """Options for color-identity picking.

  Attributes:
    window_size: Edge length in pixels of the square neighborhood sampled around
      the cursor.
    majority: Fraction of the sampled pixels the winning identity must reach.

  """

  window_size: int = field(default=PICK_WINDOW_SIZE, pytree_node=False)
  majority: float = field(default=PICK_MAJORITY, pytree_node=False)
