"""protview: structural model and atom selection engine for PDB viewers.

This package parses the ATOM records of PDB files into a dense atom registry,
resolves per-atom colors and van der Waals radii from lookup tables, normalizes
the structure around the origin and maps screen interactions back to atoms,
either by exact ray intersection or by decoding a color-identity picking buffer.
"""

from protview.core.atoms import AtomRecord
from protview.core.config import LoadConfig, NumericErrorMode, PickConfig
from protview.core.model import StructuralModel
from protview.core.selection import SelectionSet
from protview.geometry.camera import PerspectiveCamera, Ray
from protview.geometry.mesh import proxy_sphere
from protview.io.parsing import (
  FormatNotSupportedError,
  InvalidSourceError,
  ParsingError,
  PropertyTables,
  ProtviewError,
  load_property_tables,
  load_structure,
  parse_pdb_string,
)
from protview.picking import (
  ColorIdentityPicker,
  GeometricPicker,
  PickingEngine,
  PickMode,
  color_to_int,
  int_to_color,
)

__version__ = "0.1.0"

__all__ = [
  # Structure model
  "AtomRecord",
  "StructuralModel",
  "SelectionSet",
  # Configuration
  "LoadConfig",
  "NumericErrorMode",
  "PickConfig",
  # Parsing
  "PropertyTables",
  "load_property_tables",
  "load_structure",
  "parse_pdb_string",
  # Geometry
  "PerspectiveCamera",
  "Ray",
  "proxy_sphere",
  # Picking
  "ColorIdentityPicker",
  "GeometricPicker",
  "PickingEngine",
  "PickMode",
  "color_to_int",
  "int_to_color",
  # Errors
  "ProtviewError",
  "ParsingError",
  "InvalidSourceError",
  "FormatNotSupportedError",
]
