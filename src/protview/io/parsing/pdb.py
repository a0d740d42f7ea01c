"""Strict fixed-column parser for ATOM records of PDB files.

Only lines starting with ``ATOM`` are read. Fields are taken by character
offset, not by splitting on whitespace:

======== =========== ==================
field    columns     python slice
======== =========== ==================
serial   7-11        ``line[6:11]``
x        31-37       ``line[30:37]``
y        39-45       ``line[38:45]``
z        47-53       ``line[46:53]``
name     78          ``line[77]``
======== =========== ==================

Any malformed ATOM line aborts the whole parse; a failed parse never yields a
partial atom list.
"""

from __future__ import annotations

import logging
import math

from flax.struct import dataclass, field

from protview.core.atoms import AtomRecord
from protview.core.config import ATOM_RECORD, MIN_ATOM_LINE_LENGTH, MIN_PDB_LINES
from protview.core.types import Vector3
from protview.geometry.bounds import EMPTY_LOWER, EMPTY_UPPER, extend_bounds
from protview.io.parsing.registry import InvalidSourceError, register_parser
from protview.io.parsing.sources import Source, read_text, source_label, split_lines
from protview.io.parsing.tables import PropertyTables

logger = logging.getLogger(__name__)

_SERIAL = slice(6, 11)
_X = slice(30, 37)
_Y = slice(38, 45)
_Z = slice(46, 53)
_NAME = 77


@dataclass(frozen=True, kw_only=True)
class ParseDiagnostics:
  """Summary of a successful parse.

  Attributes:
    total_lines: Number of non-empty lines in the source.
    atom_lines: Number of ATOM records turned into atoms.
    skipped_lines: Number of lines that were not ATOM records.
    default_color_names: Atom names that fell back to the default color.
    default_radius_names: Atom names that fell back to the default radius.

  """

  total_lines: int = field(pytree_node=False)
  atom_lines: int = field(pytree_node=False)
  skipped_lines: int = field(pytree_node=False)
  default_color_names: tuple[str, ...] = field(default=(), pytree_node=False)
  default_radius_names: tuple[str, ...] = field(default=(), pytree_node=False)


@dataclass(frozen=True, kw_only=True)
class ParsedStructure:
  """Atoms read from one PDB source together with their bounding extrema.

  Attributes:
    atoms: Atoms in file order; the tuple position is the registry index.
    lower_bound: Component-wise minimum over all positions (``+inf`` if empty).
    upper_bound: Component-wise maximum over all positions (``-inf`` if empty).
    diagnostics: Parse summary.
    source: Label of the source the atoms came from.

  """

  atoms: tuple[AtomRecord, ...] = field(pytree_node=False)
  lower_bound: Vector3 = field(pytree_node=False)
  upper_bound: Vector3 = field(pytree_node=False)
  diagnostics: ParseDiagnostics = field(pytree_node=False)
  source: str | None = field(default=None, pytree_node=False)

  def __len__(self) -> int:
    return len(self.atoms)


def _field(line: str, columns: slice) -> str:
  return line[columns].strip()


def _parse_atom_line(line: str, line_number: int, tables: PropertyTables) -> AtomRecord:
  """Build an AtomRecord from one ATOM line, resolving its properties."""
  if len(line) < MIN_ATOM_LINE_LENGTH:
    msg = (
      f"ATOM record on line {line_number} is {len(line)} characters long, "
      f"at least {MIN_ATOM_LINE_LENGTH} are required."
    )
    raise ValueError(msg)

  serial_id = int(_field(line, _SERIAL))
  position = (float(_field(line, _X)), float(_field(line, _Y)), float(_field(line, _Z)))
  if not all(math.isfinite(c) for c in position):
    msg = f"Non-finite coordinate on line {line_number}: {position}"
    raise ValueError(msg)
  name = line[_NAME]

  return AtomRecord(
    serial_id=serial_id,
    name=name,
    position=position,
    color=tables.color_for(name),
    radius=tables.radius_for(name),
  )


def parse_pdb_string(
  text: str,
  tables: PropertyTables | None = None,
  source: str | None = None,
) -> ParsedStructure:
  """Parse the ATOM records of a PDB document.

  Args:
    text: The complete PDB text.
    tables: Property tables used to resolve colors and radii. ``None`` behaves
      like empty tables, giving every atom the default color and radius.
    source: Label of the source, used in messages.

  Returns:
    The parsed atoms, their bounding extrema and a parse summary.

  Raises:
    InvalidSourceError: If the text has fewer than two lines or any ATOM line
      is too short or holds a non-numeric serial or coordinate.

  """
  tables = tables or PropertyTables.empty()
  label = source or "<string>"
  lines = split_lines(text)
  logger.debug("Parsing %d lines from %s.", len(lines), label)

  if len(lines) < MIN_PDB_LINES:
    msg = (
      f"Failed to parse structure from source: {label}. "
      f"Expected at least {MIN_PDB_LINES} lines, got {len(lines)}."
    )
    logger.error(msg)
    raise InvalidSourceError(msg)

  atoms: list[AtomRecord] = []
  lower, upper = EMPTY_LOWER, EMPTY_UPPER
  missing_colors: set[str] = set()
  missing_radii: set[str] = set()

  for line_number, line in enumerate(lines, start=1):
    if line[:4] != ATOM_RECORD:
      continue
    try:
      atom = _parse_atom_line(line, line_number, tables)
    except ValueError as e:
      msg = f"Failed to parse structure from source: {label}. Line {line_number}: {e}"
      logger.error(msg)
      raise InvalidSourceError(msg) from e

    if not tables.has_color(atom.name):
      missing_colors.add(atom.name)
    if not tables.has_radius(atom.name):
      missing_radii.add(atom.name)

    lower, upper = extend_bounds(lower, upper, atom.position)
    atoms.append(atom)

  diagnostics = ParseDiagnostics(
    total_lines=len(lines),
    atom_lines=len(atoms),
    skipped_lines=len(lines) - len(atoms),
    default_color_names=tuple(sorted(missing_colors)),
    default_radius_names=tuple(sorted(missing_radii)),
  )
  if not atoms:
    logger.warning("No ATOM records found in %s.", label)
  if missing_colors or missing_radii:
    logger.warning(
      "Default properties used in %s: color for %s, radius for %s.",
      label,
      list(diagnostics.default_color_names),
      list(diagnostics.default_radius_names),
    )
  logger.debug("Parsed %d atoms from %s.", len(atoms), label)

  return ParsedStructure(
    atoms=tuple(atoms),
    lower_bound=lower,
    upper_bound=upper,
    diagnostics=diagnostics,
    source=source,
  )


@register_parser(["pdb", "ent"])
def load_pdb(
  source: Source,
  tables: PropertyTables | None = None,
) -> ParsedStructure:
  """Load a PDB file from a path or file object.

  The source is decoded as Latin-1, so any byte sequence is readable; errors
  come from the record layout only.

  Raises:
    InvalidSourceError: If the source cannot be read or parsed.

  """
  label = source_label(source)
  return parse_pdb_string(read_text(source, encoding="latin-1"), tables, source=label)
