"""Rays and a perspective camera implementing the ray generation contract."""

from __future__ import annotations

import math
from typing import Protocol

import jax.numpy as jnp
import numpy as np
from flax.struct import dataclass, field

from protview.core.types import Vector3


@dataclass(frozen=True)
class Ray:
  """A world-space ray.

  Attributes:
    origin: Ray origin, shape (3,).
    direction: Unit direction, shape (3,).

  """

  origin: jnp.ndarray
  direction: jnp.ndarray

  def point_at(self, distance: float) -> jnp.ndarray:
    return self.origin + distance * self.direction


class RayGenerator(Protocol):
  """Anything that turns a normalized image-plane coordinate into a ray."""

  def generate_ray(self, u: float, v: float, aspect: float) -> Ray: ...


def _normalize(vec: np.ndarray) -> np.ndarray:
  return vec / np.linalg.norm(vec)


@dataclass(frozen=True, kw_only=True)
class PerspectiveCamera:
  """Pinhole camera looking from ``eye`` towards ``target``.

  Attributes:
    eye: Camera position.
    target: Point the camera looks at.
    up: Approximate up direction.
    fov_degrees: Vertical field of view.
    near: Near clip distance.
    far: Far clip distance.

  """

  eye: Vector3 = field(pytree_node=False)
  target: Vector3 = field(default=(0.0, 0.0, 0.0), pytree_node=False)
  up: Vector3 = field(default=(0.0, 1.0, 0.0), pytree_node=False)
  fov_degrees: float = field(default=40.0, pytree_node=False)
  near: float = field(default=1.0, pytree_node=False)
  far: float = field(default=5000.0, pytree_node=False)

  @classmethod
  def framing(cls, size_of_structure: float, **kwargs: float) -> PerspectiveCamera:
    """Camera on the diagonal at ``(size, size, size)`` looking at the origin."""
    size = float(size_of_structure)
    return cls(eye=(size, size, size), **kwargs)

  def basis(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Orthonormal ``(right, up, forward)`` vectors of the view."""
    forward = _normalize(np.asarray(self.target, dtype=np.float64) - np.asarray(self.eye))
    right = _normalize(np.cross(forward, np.asarray(self.up, dtype=np.float64)))
    up = np.cross(right, forward)
    return right, up, forward

  def generate_ray(self, u: float, v: float, aspect: float) -> Ray:
    """Ray through the image plane point ``(u, v)``.

    Args:
      u: Horizontal coordinate in [0, 1], 0 at the left edge.
      v: Vertical coordinate in [0, 1], 0 at the bottom edge.
      aspect: Width over height of the image plane.

    Returns:
      A ray starting at the eye with a unit direction.

    """
    right, up, forward = self.basis()
    s = (u - 0.5) * aspect
    t = v - 0.5
    view_distance = 1.0 / (2.0 * math.tan(math.radians(self.fov_degrees) / 2.0))
    direction = _normalize(right * s + up * t + forward * view_distance)
    return Ray(
      origin=jnp.asarray(self.eye, dtype=jnp.float32),
      direction=jnp.asarray(direction, dtype=jnp.float32),
    )
