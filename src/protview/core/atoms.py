"""Atom records held by the structural model."""

from __future__ import annotations

from flax.struct import dataclass, field

from protview.core.types import Vector3


@dataclass(frozen=True, kw_only=True)
class AtomRecord:
  """A single atom parsed from an ATOM record.

  The position of a record inside its model (the registry index) is the identity
  used by selection and picking. ``serial_id`` is kept for diagnostics only and
  is not required to be unique or contiguous.

  Attributes:
    serial_id: PDB serial number.
    name: Element label used as the property table key.
    position: Cartesian coordinates in Angstrom.
    color: Resolved RGB color.
    radius: Resolved van der Waals radius.

  """

  serial_id: int = field(pytree_node=False)
  name: str = field(pytree_node=False)
  position: Vector3
  color: Vector3
  radius: float

  def __repr__(self) -> str:
    x, y, z = self.position
    return f"<atom {self.serial_id} {self.name} ({x:.3f}, {y:.3f}, {z:.3f})>"
