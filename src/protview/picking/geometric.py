"""Picking by exact ray intersection with every atom's proxy mesh."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar

import jax.numpy as jnp

from protview.geometry.intersection import closest_instance_hit
from protview.picking.modes import PickMode

if TYPE_CHECKING:
  from protview.core.types import InstanceTransforms, Triangles
  from protview.geometry.camera import Ray, RayGenerator

logger = logging.getLogger(__name__)


class GeometricPicker:
  """Resolve a screen position to the atom whose proxy mesh the view ray hits first.

  Every triangle of the shared mesh is placed by every instance transform and
  tested against the ray; the globally closest hit wins. The scan is exhaustive
  and runs as one jitted JAX kernel, which is fine at interactive scale but has
  no spatial index for very large structures.

  Args:
    camera: Ray generator, called as ``generate_ray(u, v, aspect)``.
    triangles: Shared proxy mesh, shape (T, 3, 3).
    transforms: Instance transforms in registry order, shape (N, 4, 4).
    window_size: ``(width, height)`` of the window the positions refer to.

  """

  mode: ClassVar[PickMode] = PickMode.GEOMETRIC

  def __init__(
    self,
    camera: RayGenerator,
    triangles: Triangles,
    transforms: InstanceTransforms,
    window_size: tuple[int, int],
  ) -> None:
    self.camera = camera
    self.triangles = jnp.asarray(triangles, dtype=jnp.float32)
    self.transforms = jnp.asarray(transforms, dtype=jnp.float32)
    self.window_size = window_size

  @property
  def aspect(self) -> float:
    width, height = self.window_size
    return width / height

  def pick_ray(self, ray: Ray) -> int | None:
    """Index of the instance hit first by ``ray``, ``None`` on a miss."""
    if self.transforms.shape[0] == 0 or self.triangles.shape[0] == 0:
      return None
    index, distance = closest_instance_hit(
      ray.origin,
      ray.direction,
      self.triangles,
      self.transforms,
    )
    index = int(index)
    if index < 0:
      logger.debug("Geometric picking hit nothing.")
      return None
    logger.debug("Geometric picking resolved atom %d at distance %.3f.", index, float(distance))
    return index

  def pick_normalized(self, u: float, v: float) -> int | None:
    """Pick at an image-plane coordinate in [0, 1] x [0, 1] with a bottom-left origin."""
    return self.pick_ray(self.camera.generate_ray(u, v, self.aspect))

  def pick(self, position: tuple[float, float]) -> int | None:
    """Registry index of the atom under ``position``.

    Args:
      position: Window coordinate in pixels, origin at the top-left corner.

    Returns:
      The atom index, or ``None`` if the ray misses every atom.

    """
    width, height = self.window_size
    x, y = position
    return self.pick_normalized(x / width, 1.0 - y / height)
