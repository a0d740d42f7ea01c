"""Unified dispatch for parsing structure files."""

from __future__ import annotations

import pathlib
from typing import TYPE_CHECKING

from protview.io.parsing import pdb  # noqa: F401  (registers the PDB parser)
from protview.io.parsing.registry import FormatNotSupportedError, get_parser
from protview.io.parsing.sources import Source, source_path

if TYPE_CHECKING:
  from protview.io.parsing.pdb import ParsedStructure
  from protview.io.parsing.tables import PropertyTables


def _infer_format(path: pathlib.Path | None) -> str | None:
  """Infer file format from path suffix."""
  if path is None:
    return None
  suffix = path.suffix.lower()
  if suffix == ".pdb":
    return "pdb"
  if suffix == ".ent":
    return "ent"
  return None


def load_structure(
  source: Source,
  file_format: str | None = None,
  tables: PropertyTables | None = None,
) -> ParsedStructure:
  """Load a structure from a file.

  Args:
      source: Path to the file or file-like object.
      file_format: Format of the file (e.g., "pdb"). If None, inferred from the
          extension; file-like objects without a usable name default to "pdb".
      tables: Property tables used to resolve colors and radii.

  Returns:
      ParsedStructure with the atoms in file order.

  Raises:
      FormatNotSupportedError: If the format cannot be inferred or has no parser.
      InvalidSourceError: If the source cannot be read or parsed.

  """
  is_path = isinstance(source, (str, pathlib.Path))
  path = source_path(source)

  if file_format is None:
    file_format = _infer_format(path)

  # Default to pdb for file-like objects (e.g. StringIO) if format not specified
  if file_format is None and not is_path:
    file_format = "pdb"

  if file_format is None:
    msg = f"Failed to infer file format for: {source}"
    raise FormatNotSupportedError(msg)

  parser = get_parser(file_format.lower())
  if not parser:
    msg = f"Failed to parse structure from source: {source}. Unsupported file format: {file_format}"
    raise FormatNotSupportedError(msg)

  return parser(source, tables)


parse_input = load_structure
