"""Low-polygon proxy sphere shared by every atom instance."""

from __future__ import annotations

import logging

import jax.numpy as jnp
import numpy as np

from protview.core.types import Triangles

logger = logging.getLogger(__name__)

_GOLDEN = (1.0 + 5.0**0.5) / 2.0

_ICOSAHEDRON_VERTICES = np.array(
  [
    [-1, _GOLDEN, 0],
    [1, _GOLDEN, 0],
    [-1, -_GOLDEN, 0],
    [1, -_GOLDEN, 0],
    [0, -1, _GOLDEN],
    [0, 1, _GOLDEN],
    [0, -1, -_GOLDEN],
    [0, 1, -_GOLDEN],
    [_GOLDEN, 0, -1],
    [_GOLDEN, 0, 1],
    [-_GOLDEN, 0, -1],
    [-_GOLDEN, 0, 1],
  ],
  dtype=np.float64,
)

_ICOSAHEDRON_FACES = np.array(
  [
    [0, 11, 5],
    [0, 5, 1],
    [0, 1, 7],
    [0, 7, 10],
    [0, 10, 11],
    [1, 5, 9],
    [5, 11, 4],
    [11, 10, 2],
    [10, 7, 6],
    [7, 1, 8],
    [3, 9, 4],
    [3, 4, 2],
    [3, 2, 6],
    [3, 6, 8],
    [3, 8, 9],
    [4, 9, 5],
    [2, 4, 11],
    [6, 2, 10],
    [8, 6, 7],
    [9, 8, 1],
  ],
  dtype=np.int32,
)


def _subdivide(triangles: np.ndarray) -> np.ndarray:
  """Split every triangle into four and push the new vertices onto the unit sphere."""
  a, b, c = triangles[:, 0], triangles[:, 1], triangles[:, 2]
  ab = (a + b) / 2.0
  bc = (b + c) / 2.0
  ca = (c + a) / 2.0
  out = np.concatenate(
    [
      np.stack([a, ab, ca], axis=1),
      np.stack([b, bc, ab], axis=1),
      np.stack([c, ca, bc], axis=1),
      np.stack([ab, bc, ca], axis=1),
    ],
  )
  return out / np.linalg.norm(out, axis=-1, keepdims=True)


def proxy_sphere(subdivisions: int = 1, radius: float = 0.5) -> Triangles:
  """Icosphere used as the per-atom proxy mesh.

  The default radius of 0.5 gives a unit-diameter sphere, so scaling an
  instance by ``2 * r`` produces a sphere of radius ``r``.

  Args:
    subdivisions: Number of subdivision passes; each multiplies the triangle
      count by four (20, 80, 320, ...).
    radius: Sphere radius in mesh units.

  Returns:
    Triangle vertices, shape (20 * 4**subdivisions, 3, 3).

  """
  if subdivisions < 0:
    msg = f"subdivisions must be non-negative, got {subdivisions}."
    raise ValueError(msg)
  vertices = _ICOSAHEDRON_VERTICES / np.linalg.norm(_ICOSAHEDRON_VERTICES, axis=-1, keepdims=True)
  triangles = vertices[_ICOSAHEDRON_FACES]
  for _ in range(subdivisions):
    triangles = _subdivide(triangles)
  logger.debug("Built proxy sphere with %d triangles.", len(triangles))
  return jnp.asarray(triangles * radius, dtype=jnp.float32)
