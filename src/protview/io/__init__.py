"""Input utilities for structures and property tables."""

from protview.io.parsing import (
  InvalidSourceError,
  PropertyTables,
  load_property_tables,
  load_structure,
)

__all__ = [
  "InvalidSourceError",
  "PropertyTables",
  "load_property_tables",
  "load_structure",
]
