"""Dispatch of a pick to one of the strategies and selection toggling."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Union

from protview.picking.color_identity import ColorIdentityPicker
from protview.picking.geometric import GeometricPicker

if TYPE_CHECKING:
  from protview.core.model import StructuralModel

logger = logging.getLogger(__name__)

Picker = Union[GeometricPicker, ColorIdentityPicker]


class PickingEngine:
  """Turn a user interaction into a selection change on a structural model.

  Args:
    model: The model whose selection is toggled. The engine only reads it.

  """

  def __init__(self, model: StructuralModel) -> None:
    self.model = model

  def pick(self, picker: Picker, position: tuple[float, float]) -> int | None:
    """Pick at ``position`` and toggle the result in the model's selection.

    Args:
      picker: The strategy to use.
      position: Window coordinate in pixels, origin at the top-left corner.

    Returns:
      The toggled registry index, or ``None`` when nothing was picked or the
      index was rejected by the selection.

    """
    index = picker.pick(position)
    if index is None:
      logger.debug("%s pick at %s found no atom.", picker.mode.value, position)
      return None
    if not self.model.selection.toggle(index):
      return None
    logger.debug("%s pick toggled atom %d.", picker.mode.value, index)
    return index
