"""Color and van der Waals radius lookup tables.

Both tables are plain text with one ``;`` delimited record per line:

- color scheme: ``name;r;g;b`` (channel values are used as given),
- atom radii: ``name;radius`` (radius in hundredths of an Angstrom).

Lines with an unexpected number of fields are skipped. A source that cannot be
read fails the whole table with :class:`InvalidSourceError`; what happens to a
line whose numeric field does not parse is decided by
:class:`~protview.core.config.NumericErrorMode`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TypeVar

from flax.struct import dataclass, field

from protview.core.config import (
  COLOR_TABLE_FIELDS,
  DEFAULT_COLOR,
  DEFAULT_RADIUS,
  RADIUS_TABLE_FIELDS,
  RADIUS_UNIT_SCALE,
  TABLE_DELIMITER,
  LoadConfig,
  NumericErrorMode,
)
from protview.core.types import Vector3
from protview.io.parsing.registry import InvalidSourceError
from protview.io.parsing.sources import Source, read_text, source_label, split_lines

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, kw_only=True)
class TableDiagnostics:
  """Counts collected while loading a single table."""

  records: int = field(default=0, pytree_node=False)
  skipped_field_count: int = field(default=0, pytree_node=False)
  skipped_numeric: int = field(default=0, pytree_node=False)
  duplicates: int = field(default=0, pytree_node=False)


@dataclass(frozen=True, kw_only=True)
class PropertyTables:
  """The two per-name lookup tables consulted while parsing a structure.

  Keys are case-sensitive atom names. A missing key is not an error: lookups
  fall back to the configured defaults.
  """

  colors: Mapping[str, Vector3] = field(default_factory=dict, pytree_node=False)
  radii: Mapping[str, float] = field(default_factory=dict, pytree_node=False)
  default_color: Vector3 = field(default=DEFAULT_COLOR, pytree_node=False)
  default_radius: float = field(default=DEFAULT_RADIUS, pytree_node=False)

  @classmethod
  def empty(cls, config: LoadConfig | None = None) -> PropertyTables:
    """Tables that resolve every name to the defaults."""
    config = config or LoadConfig()
    return cls(default_color=config.default_color, default_radius=config.default_radius)

  def color_for(self, name: str) -> Vector3:
    return self.colors.get(name, self.default_color)

  def radius_for(self, name: str) -> float:
    return self.radii.get(name, self.default_radius)

  def has_color(self, name: str) -> bool:
    return name in self.colors

  def has_radius(self, name: str) -> bool:
    return name in self.radii


def _parse_color(fields: list[str]) -> Vector3:
  r, g, b = (float(value) for value in fields[1:])
  return (r, g, b)


def _parse_radius(fields: list[str]) -> float:
  return float(fields[1]) / RADIUS_UNIT_SCALE


def _parse_table(
  text: str,
  *,
  kind: str,
  num_fields: int,
  convert: Callable[[list[str]], T],
  numeric_errors: NumericErrorMode,
  label: str,
) -> tuple[dict[str, T], TableDiagnostics]:
  """Parse ``;`` delimited records into a name keyed dictionary."""
  table: dict[str, T] = {}
  skipped_field_count = 0
  skipped_numeric = 0
  duplicates = 0

  for line_number, line in enumerate(split_lines(text), start=1):
    fields = line.split(TABLE_DELIMITER)
    if len(fields) != num_fields:
      logger.debug(
        "Skipping %s table line %d with %d fields (expected %d).",
        kind,
        line_number,
        len(fields),
        num_fields,
      )
      skipped_field_count += 1
      continue

    name = fields[0]
    try:
      value = convert(fields)
    except ValueError as e:
      if numeric_errors is NumericErrorMode.SKIP:
        logger.warning("Skipping %s table line %d with a malformed value: %s", kind, line_number, e)
        skipped_numeric += 1
        continue
      msg = f"Malformed {kind} value on line {line_number} of {label}: {line!r}"
      logger.error(msg)
      raise InvalidSourceError(msg) from e

    if name in table:
      duplicates += 1
      continue
    table[name] = value

  diagnostics = TableDiagnostics(
    records=len(table),
    skipped_field_count=skipped_field_count,
    skipped_numeric=skipped_numeric,
    duplicates=duplicates,
  )
  logger.debug("Loaded %d %s records from %s (%s).", len(table), kind, label, diagnostics)
  return table, diagnostics


def parse_color_table(
  text: str,
  config: LoadConfig | None = None,
  label: str = "<string>",
) -> tuple[dict[str, Vector3], TableDiagnostics]:
  """Parse the text of a color scheme table.

  Args:
    text: Table contents, one ``name;r;g;b`` record per line.
    config: Loading options; only ``numeric_errors`` is used here.
    label: Name of the source for messages.

  Returns:
    The ``name -> (r, g, b)`` mapping and the load diagnostics.

  Raises:
    InvalidSourceError: If a channel value is malformed and ``numeric_errors``
      is ``NumericErrorMode.ABORT``.

  """
  config = config or LoadConfig()
  return _parse_table(
    text,
    kind="color",
    num_fields=COLOR_TABLE_FIELDS,
    convert=_parse_color,
    numeric_errors=config.numeric_errors,
    label=label,
  )


def parse_radius_table(
  text: str,
  config: LoadConfig | None = None,
  label: str = "<string>",
) -> tuple[dict[str, float], TableDiagnostics]:
  """Parse the text of a van der Waals radius table.

  Radii are divided by ``RADIUS_UNIT_SCALE`` here, so the returned mapping is in
  Angstrom.
  """
  config = config or LoadConfig()
  return _parse_table(
    text,
    kind="radius",
    num_fields=RADIUS_TABLE_FIELDS,
    convert=_parse_radius,
    numeric_errors=config.numeric_errors,
    label=label,
  )


def load_color_table(
  source: Source,
  config: LoadConfig | None = None,
) -> tuple[dict[str, Vector3], TableDiagnostics]:
  """Read and parse a color scheme table from a path or file object."""
  return parse_color_table(read_text(source), config, label=source_label(source))


def load_radius_table(
  source: Source,
  config: LoadConfig | None = None,
) -> tuple[dict[str, float], TableDiagnostics]:
  """Read and parse a radius table from a path or file object."""
  return parse_radius_table(read_text(source), config, label=source_label(source))


def load_property_tables(
  color_source: Source,
  radius_source: Source,
  config: LoadConfig | None = None,
) -> PropertyTables:
  """Load both lookup tables.

  Args:
    color_source: Color scheme table source.
    radius_source: Radius table source.
    config: Loading options.

  Returns:
    The loaded tables.

  Raises:
    InvalidSourceError: If either table fails to load. No partially loaded
      tables are returned.

  """
  config = config or LoadConfig()
  colors, _ = load_color_table(color_source, config)
  radii, _ = load_radius_table(radius_source, config)
  logger.info("Loaded property tables: %d colors, %d radii.", len(colors), len(radii))
  return PropertyTables(
    colors=colors,
    radii=radii,
    default_color=config.default_color,
    default_radius=config.default_radius,
  )
