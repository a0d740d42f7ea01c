"""Packed 24-bit color identities for the picking render target.

Atom ``i`` is drawn with the flat color encoding ``i + 1``; packed zero is the
background. The packing is ``B + (G << 8) + (R << 16)``, which caps the number
of pickable atoms at ``MAX_PICKABLE_ATOMS`` (16,777,215). Values outside the
24-bit range raise instead of wrapping around.
"""

from __future__ import annotations

import numpy as np

from protview.core.config import MAX_PACKED_COLOR, MAX_PICKABLE_ATOMS
from protview.core.types import PackedColors, PixelBuffer, Vector3


def bytes_to_int(r: int, g: int, b: int) -> int:
  """Pack three 8-bit channels into one integer."""
  return int(b) + (int(g) << 8) + (int(r) << 16)


def bytes_to_color(r: int, g: int, b: int) -> Vector3:
  """Normalize three 8-bit channels to floats in [0, 1]."""
  return (r / 255.0, g / 255.0, b / 255.0)


def ints_to_colors(values: np.ndarray | int) -> np.ndarray:
  """Unpack packed integers into float colors in [0, 1].

  Args:
    values: Packed identities, any shape.

  Returns:
    Colors with a trailing channel axis, shape ``values.shape + (3,)``.

  Raises:
    ValueError: If any value is outside the 24-bit range.

  """
  packed = np.asarray(values, dtype=np.int64)
  if packed.size and (packed.min() < 0 or packed.max() > MAX_PACKED_COLOR):
    bad = packed.min() if packed.min() < 0 else packed.max()
    msg = f"Packed color {int(bad)} is outside the 24-bit range [0, {MAX_PACKED_COLOR}]."
    raise ValueError(msg)
  channels = np.stack([(packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF], axis=-1)
  return channels / 255.0


def colors_to_ints(colors: np.ndarray) -> np.ndarray:
  """Pack float colors in [0, 1] back into integers.

  Channels are clamped and rounded to the nearest 8-bit value, so
  ``colors_to_ints(ints_to_colors(x)) == x`` holds despite float error.
  """
  channels = np.rint(np.clip(np.asarray(colors, dtype=np.float64), 0.0, 1.0) * 255.0)
  channels = channels.astype(np.int64)
  return channels[..., 2] + (channels[..., 1] << 8) + (channels[..., 0] << 16)


def int_to_color(value: int) -> Vector3:
  """Unpack an integer into a float color in [0, 1]."""
  r, g, b = ints_to_colors(int(value))
  return (float(r), float(g), float(b))


def color_to_int(color: Vector3) -> int:
  """Pack a float color in [0, 1] back into an integer."""
  return int(colors_to_ints(color))


def decode_pixels(pixels: PixelBuffer) -> PackedColors:
  """Packed identity of every pixel of an RGB or RGBA uint8 buffer.

  Args:
    pixels: Pixel data with channels on the last axis, e.g. shape (H, W, 4).

  Returns:
    Packed integers with the channel axis removed, e.g. shape (H, W).

  """
  data = np.asarray(pixels, dtype=np.uint32)
  return data[..., 2] + (data[..., 1] << 8) + (data[..., 0] << 16)


def picking_colors(atom_count: int) -> np.ndarray:
  """Flat colors encoding ``index + 1`` for every atom, shape (atom_count, 3).

  Raises:
    ValueError: If ``atom_count`` exceeds ``MAX_PICKABLE_ATOMS``.

  """
  if atom_count > MAX_PICKABLE_ATOMS:
    msg = (
      f"Cannot encode {atom_count} atoms, "
      f"the picking buffer holds at most {MAX_PICKABLE_ATOMS}."
    )
    raise ValueError(msg)
  return ints_to_colors(np.arange(1, atom_count + 1)).astype(np.float32)
