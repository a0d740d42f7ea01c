"""Toggleable set of selected atom indices."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator

logger = logging.getLogger(__name__)


class SelectionSet:
  """Registry indices of the currently selected atoms.

  The set holds no geometry and no references to atoms, only indices into the
  model it was created for. ``atom_count`` is read on every toggle, so the set
  always validates against the current registry size.

  Args:
    atom_count: Callable returning the number of atoms in the owning model.

  """

  def __init__(self, atom_count: Callable[[], int]) -> None:
    self._atom_count = atom_count
    self._selected: set[int] = set()

  def toggle(self, index: int) -> bool:
    """Select ``index`` if it is not selected, deselect it otherwise.

    Returns:
      ``False`` without changing the selection when ``index`` is negative or
      not smaller than the atom count, ``True`` otherwise.

    """
    if index < 0 or index >= self._atom_count():
      logger.debug("Rejected toggle of atom %d (atom count %d).", index, self._atom_count())
      return False
    if index in self._selected:
      self._selected.remove(index)
      logger.debug("Deselected atom %d.", index)
    else:
      self._selected.add(index)
      logger.debug("Selected atom %d.", index)
    return True

  def contains(self, index: int) -> bool:
    return index in self._selected

  def indices(self) -> frozenset[int]:
    """Snapshot of the selected indices."""
    return frozenset(self._selected)

  def clear(self) -> None:
    self._selected.clear()

  def __contains__(self, index: object) -> bool:
    return index in self._selected

  def __len__(self) -> int:
    return len(self._selected)

  def __iter__(self) -> Iterator[int]:
    return iter(sorted(self._selected))

  def __repr__(self) -> str:
    return f"SelectionSet({sorted(self._selected)})"
