"""Picking strategy tags."""

import enum


class PickMode(enum.Enum):
  """Which strategy resolved (or should resolve) a pick."""

  GEOMETRIC = "geometric"
  COLOR_IDENTITY = "color_identity"
