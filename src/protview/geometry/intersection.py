"""Ray/triangle intersection kernels for geometric picking.

Intersections use the Moller-Trumbore test without back-face culling. Only hits
in front of the ray origin (strictly positive distance) count.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import jax
import jax.numpy as jnp

from protview.geometry.transforms import transform_triangles

if TYPE_CHECKING:
  from protview.core.types import HitDistances, InstanceTransforms, Triangles

EPSILON = 1e-6


@jax.jit
def ray_triangle_distance(
  origin: jax.Array,
  direction: jax.Array,
  triangle: jax.Array,
) -> jax.Array:
  """Distance along a ray to a triangle, ``inf`` when it is missed.

  Args:
    origin: Ray origin, shape (3,).
    direction: Ray direction, shape (3,). Distances are in units of its length.
    triangle: Triangle vertices, shape (3, 3).

  Returns:
    Scalar ray parameter of the hit, or ``inf``.

  Example:
    >>> tri = jnp.array([[-1.0, -1.0, 0.0], [1.0, -1.0, 0.0], [0.0, 1.0, 0.0]])
    >>> ray_triangle_distance(jnp.array([0.0, 0.0, 5.0]), jnp.array([0.0, 0.0, -1.0]), tri)
    Array(5., dtype=float32)

  """
  v0, v1, v2 = triangle[0], triangle[1], triangle[2]
  edge1 = v1 - v0
  edge2 = v2 - v0
  pvec = jnp.cross(direction, edge2)
  det = jnp.dot(edge1, pvec)
  parallel = jnp.abs(det) < EPSILON
  inv_det = 1.0 / jnp.where(parallel, 1.0, det)

  tvec = origin - v0
  u = jnp.dot(tvec, pvec) * inv_det
  qvec = jnp.cross(tvec, edge1)
  v = jnp.dot(direction, qvec) * inv_det
  t = jnp.dot(edge2, qvec) * inv_det

  hit = (~parallel) & (u >= 0.0) & (u <= 1.0) & (v >= 0.0) & (u + v <= 1.0) & (t > EPSILON)
  return jnp.where(hit, t, jnp.inf)


@jax.jit
def instance_hit_distances(
  origin: jax.Array,
  direction: jax.Array,
  triangles: Triangles,
  transforms: InstanceTransforms,
) -> HitDistances:
  """Hit distance of every triangle of every instance.

  This is an exhaustive O(instances x triangles) scan with no spatial index.

  Args:
    origin: Ray origin, shape (3,).
    direction: Ray direction, shape (3,).
    triangles: Shared mesh triangles, shape (T, 3, 3).
    transforms: Instance transforms, shape (N, 4, 4).

  Returns:
    Distances, shape (N, T), ``inf`` where a triangle is missed.

  """
  world = transform_triangles(transforms, triangles)
  per_triangle = jax.vmap(ray_triangle_distance, in_axes=(None, None, 0))
  per_instance = jax.vmap(per_triangle, in_axes=(None, None, 0))
  return per_instance(origin, direction, world)


@jax.jit
def closest_instance_hit(
  origin: jax.Array,
  direction: jax.Array,
  triangles: Triangles,
  transforms: InstanceTransforms,
) -> tuple[jax.Array, jax.Array]:
  """Index and distance of the instance whose surface the ray reaches first.

  Returns:
    ``(index, distance)``; ``index`` is -1 and ``distance`` is ``inf`` when
    nothing is hit.

  """
  distances = instance_hit_distances(origin, direction, triangles, transforms)
  per_instance = jnp.min(distances, axis=1)
  index = jnp.argmin(per_instance)
  distance = per_instance[index]
  return jnp.where(jnp.isfinite(distance), index, -1), distance
