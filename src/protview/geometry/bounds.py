"""Axis-aligned bounding box helpers used to normalize a structure."""

from __future__ import annotations

import math
from collections.abc import Iterable

import numpy as np

from protview.core.types import Vector3

EMPTY_LOWER: Vector3 = (math.inf, math.inf, math.inf)
EMPTY_UPPER: Vector3 = (-math.inf, -math.inf, -math.inf)


def extend_bounds(lower: Vector3, upper: Vector3, position: Vector3) -> tuple[Vector3, Vector3]:
  """Grow a bounding box so that it contains ``position``.

  Min and max are taken per component, so feeding the same points in any order
  gives the same box.
  """
  new_lower = (min(lower[0], position[0]), min(lower[1], position[1]), min(lower[2], position[2]))
  new_upper = (max(upper[0], position[0]), max(upper[1], position[1]), max(upper[2], position[2]))
  return new_lower, new_upper


def bounds_of(positions: Iterable[Vector3]) -> tuple[Vector3, Vector3]:
  """Bounding box of a collection of points, sentinel when it is empty."""
  lower, upper = EMPTY_LOWER, EMPTY_UPPER
  for position in positions:
    lower, upper = extend_bounds(lower, upper, position)
  return lower, upper


def is_valid_bounds(lower: Vector3, upper: Vector3) -> bool:
  """Whether the box contains at least one point."""
  return all(lo <= hi for lo, hi in zip(lower, upper, strict=True))


def size_of_bounds(lower: Vector3, upper: Vector3) -> float:
  """Distance between the two extrema taken as homogeneous points (w = 1)."""
  lo = np.array([*lower, 1.0], dtype=np.float64)
  hi = np.array([*upper, 1.0], dtype=np.float64)
  return float(np.linalg.norm(hi - lo))


def center_of_bounds(lower: Vector3, upper: Vector3) -> Vector3:
  center = (np.asarray(lower, dtype=np.float64) + np.asarray(upper, dtype=np.float64)) * 0.5
  return (float(center[0]), float(center[1]), float(center[2]))


def centering_matrix(lower: Vector3, upper: Vector3) -> np.ndarray:
  """Translation that moves the center of the box to the origin."""
  cx, cy, cz = center_of_bounds(lower, upper)
  matrix = np.eye(4, dtype=np.float64)
  matrix[:3, 3] = (-cx, -cy, -cz)
  return matrix
