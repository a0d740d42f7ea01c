"""Parsing utilities for structure files and property tables."""

from protview.io.parsing.dispatch import load_structure, parse_input
from protview.io.parsing.pdb import ParsedStructure, ParseDiagnostics, load_pdb, parse_pdb_string
from protview.io.parsing.registry import (
  FormatNotSupportedError,
  InvalidSourceError,
  ParserFunc,
  ParsingError,
  ProtviewError,
  register_parser,
)
from protview.io.parsing.tables import (
  PropertyTables,
  TableDiagnostics,
  load_color_table,
  load_property_tables,
  load_radius_table,
  parse_color_table,
  parse_radius_table,
)

__all__ = [
  "load_structure",
  "parse_input",
  "load_pdb",
  "parse_pdb_string",
  "ParsedStructure",
  "ParseDiagnostics",
  "PropertyTables",
  "TableDiagnostics",
  "load_color_table",
  "load_radius_table",
  "load_property_tables",
  "parse_color_table",
  "parse_radius_table",
  "register_parser",
  "ProtviewError",
  "ParsingError",
  "InvalidSourceError",
  "FormatNotSupportedError",
  "ParserFunc",
]
