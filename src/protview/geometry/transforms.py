"""Homogeneous transforms for atom positions and proxy mesh instances."""

from __future__ import annotations

from typing import TYPE_CHECKING

import jax
import jax.numpy as jnp

if TYPE_CHECKING:
  from protview.core.types import (
    AtomCoordinates,
    AtomRadii,
    InstanceTransforms,
    TransformMatrix,
    Triangles,
  )


def translation_matrix(offset: jax.Array) -> TransformMatrix:
  """Build a 4x4 translation matrix.

  Args:
    offset: Translation vector, shape (3,).

  Returns:
    Homogeneous translation matrix, shape (4, 4).

  Example:
    >>> translation_matrix(jnp.array([1.0, 2.0, 3.0]))[:3, 3]
    Array([1., 2., 3.], dtype=float32)

  """
  offset = jnp.asarray(offset, dtype=jnp.float32)
  return jnp.eye(4, dtype=jnp.float32).at[:3, 3].set(offset)


def scale_matrix(factor: float | jax.Array) -> TransformMatrix:
  """Build a 4x4 uniform scale matrix."""
  factor = jnp.asarray(factor, dtype=jnp.float32)
  diagonal = jnp.stack([factor, factor, factor, jnp.ones_like(factor)])
  return jnp.diag(diagonal)


@jax.jit
def apply_transform(transform: TransformMatrix, points: AtomCoordinates) -> AtomCoordinates:
  """Apply a homogeneous transform to a set of points.

  Points are lifted to ``w = 1``, multiplied and projected back by dividing by
  ``w`` so that projective transforms are handled as well as affine ones.

  Args:
    transform: Homogeneous transform, shape (4, 4).
    points: Points to transform, shape (N, 3).

  Returns:
    Transformed points, shape (N, 3).

  """
  ones = jnp.ones(points.shape[:-1] + (1,), dtype=points.dtype)
  homogeneous = jnp.concatenate([points, ones], axis=-1)
  transformed = homogeneous @ transform.T
  return transformed[..., :3] / transformed[..., 3:]


@jax.jit
def instance_transforms_from_arrays(
  coordinates: AtomCoordinates,
  radii: AtomRadii,
  scale: float = 2.0,
) -> InstanceTransforms:
  """Per-atom ``translate(position) @ scale(scale * radius)`` matrices.

  Args:
    coordinates: Atom positions, shape (N, 3).
    radii: Van der Waals radii, shape (N,).
    scale: Factor applied to every radius. The proxy sphere has radius 0.5, so
      the default of 2 yields spheres of exactly the van der Waals radius.

  Returns:
    Instance transforms, shape (N, 4, 4).

  """
  return jax.vmap(lambda p, r: translation_matrix(p) @ scale_matrix(scale * r))(
    coordinates,
    radii,
  )


@jax.jit
def transform_triangles(transforms: InstanceTransforms, triangles: Triangles) -> jax.Array:
  """Place the shared mesh once per instance.

  Args:
    transforms: Instance transforms, shape (N, 4, 4).
    triangles: Triangle vertices in mesh space, shape (T, 3, 3).

  Returns:
    World-space triangle vertices, shape (N, T, 3, 3).

  """
  return jax.vmap(lambda m: apply_transform(m, triangles))(transforms)
