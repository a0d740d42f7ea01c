"""Picking by decoding atom identities from a rendered picking buffer."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import ClassVar

import numpy as np

from protview.core.config import PickConfig
from protview.core.types import PackedColors, PixelBuffer
from protview.picking.encoding import decode_pixels
from protview.picking.modes import PickMode

logger = logging.getLogger(__name__)

ReadPixels = Callable[[], "PixelBuffer | None"]


def majority_vote(packed: PackedColors, majority: float = 0.5) -> int | None:
  """Most frequent packed value if it covers at least ``majority`` of the samples.

  Args:
    packed: Packed identities of the sampled pixels, any shape.
    majority: Required fraction of the samples.

  Returns:
    The winning packed value, or ``None`` when there are no samples or no value
    reaches the threshold.

  """
  values = np.asarray(packed).ravel()
  if values.size == 0:
    return None
  unique, counts = np.unique(values, return_counts=True)
  winner = int(np.argmax(counts))
  if counts[winner] < majority * values.size:
    logger.debug(
      "No majority in picking window: best value %d covers %d of %d pixels.",
      int(unique[winner]),
      int(counts[winner]),
      values.size,
    )
    return None
  return int(unique[winner])


class ColorIdentityPicker:
  """Resolve a screen position to an atom by reading the picking buffer.

  The picking buffer is produced by the renderer: every atom instance drawn in
  the flat color ``int_to_color(index + 1)`` into a non anti-aliased target over
  a background of packed zero.

  Args:
    read_pixels: Blocking readback of the picking buffer. Returns an (H, W, 4)
      (or (H, W, 3)) uint8 array whose row 0 is the bottom row, or ``None`` when
      the readback failed.
    window_size: ``(width, height)`` of the window the positions refer to.
    atom_count: Number of atoms encoded in the buffer.
    config: Sampling window size and majority threshold.

  """

  mode: ClassVar[PickMode] = PickMode.COLOR_IDENTITY

  def __init__(
    self,
    read_pixels: ReadPixels,
    window_size: tuple[int, int],
    atom_count: int,
    config: PickConfig | None = None,
  ) -> None:
    self.read_pixels = read_pixels
    self.window_size = window_size
    self.atom_count = atom_count
    self.config = config or PickConfig()

  def _buffer_pixel(
    self,
    position: tuple[float, float],
    buffer_shape: tuple[int, ...],
  ) -> tuple[int, int]:
    """Map a window position (top-left origin) to a buffer pixel (bottom-left origin)."""
    window_width, window_height = self.window_size
    buffer_height, buffer_width = buffer_shape[0], buffer_shape[1]
    x, y = position
    px = int(x * (buffer_width / window_width))
    py = int((window_height - y) * (buffer_height / window_height))
    return px, py

  def contains(self, position: tuple[float, float]) -> bool:
    """Whether ``position`` lies inside the window, edges included."""
    window_width, window_height = self.window_size
    x, y = position
    return 0 <= x <= window_width and 0 <= y <= window_height

  def sample(self, pixels: PixelBuffer, position: tuple[float, float]) -> PackedColors:
    """Packed identities of the square window around ``position``, clipped to the buffer.

    The result is empty when the window lies completely outside the buffer.
    """
    px, py = self._buffer_pixel(position, pixels.shape)
    size = self.config.window_size
    start_x, start_y = px - size // 2, py - size // 2
    height, width = pixels.shape[0], pixels.shape[1]
    x0, x1 = min(max(start_x, 0), width), min(max(start_x + size, 0), width)
    y0, y1 = min(max(start_y, 0), height), min(max(start_y + size, 0), height)
    return decode_pixels(pixels[y0:y1, x0:x1])

  def pick(self, position: tuple[float, float]) -> int | None:
    """Registry index of the atom under ``position``.

    Args:
      position: Window coordinate in pixels, origin at the top-left corner.

    Returns:
      The atom index, or ``None`` for a position outside the window, a failed
      readback, background, a sample without a clear majority or an identity
      outside the registry.

    """
    if not self.contains(position):
      logger.debug("Pick position %s is outside the %s window.", position, self.window_size)
      return None
    pixels = self.read_pixels()
    if pixels is None or np.size(pixels) == 0:
      logger.debug("Picking buffer readback returned no data.")
      return None
    pixels = np.asarray(pixels)

    packed = majority_vote(self.sample(pixels, position), self.config.majority)
    if packed is None or packed == 0:
      return None
    index = packed - 1
    if index >= self.atom_count:
      logger.debug("Decoded atom %d is outside the registry (%d atoms).", index, self.atom_count)
      return None
    logger.debug("Color picking resolved atom %d at %s.", index, position)
    return index
