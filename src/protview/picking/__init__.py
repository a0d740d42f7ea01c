"""Resolving screen positions to atoms."""

from protview.picking.color_identity import ColorIdentityPicker, majority_vote
from protview.picking.encoding import (
  bytes_to_color,
  bytes_to_int,
  color_to_int,
  colors_to_ints,
  decode_pixels,
  int_to_color,
  ints_to_colors,
  picking_colors,
)
from protview.picking.engine import Picker, PickingEngine
from protview.picking.geometric import GeometricPicker
from protview.picking.modes import PickMode

__all__ = [
  "ColorIdentityPicker",
  "GeometricPicker",
  "PickMode",
  "Picker",
  "PickingEngine",
  "bytes_to_color",
  "bytes_to_int",
  "color_to_int",
  "colors_to_ints",
  "decode_pixels",
  "int_to_color",
  "ints_to_colors",
  "majority_vote",
  "picking_colors",
]
