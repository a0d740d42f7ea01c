"""The structural model: atom registry, bounding box, centering and selection.

The model is the single owner of the atoms of the currently loaded structure.
Atoms are kept in one dense tuple and identified everywhere else by their
position in it (the registry index); selection and picking never hold atom
references, so a reload cannot leave stale state behind.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import jax.numpy as jnp
import numpy as np

from protview.core.config import LoadConfig
from protview.core.selection import SelectionSet
from protview.geometry.bounds import (
  EMPTY_LOWER,
  EMPTY_UPPER,
  bounds_of,
  centering_matrix,
  extend_bounds,
  is_valid_bounds,
  size_of_bounds,
)
from protview.geometry.transforms import instance_transforms_from_arrays
from protview.io.parsing.dispatch import load_structure
from protview.io.parsing.registry import InvalidSourceError
from protview.io.parsing.sources import Source, source_label, source_path
from protview.io.parsing.tables import PropertyTables, load_property_tables

if TYPE_CHECKING:
  from collections.abc import Sequence

  from protview.core.atoms import AtomRecord
  from protview.core.types import (
    AtomColors,
    AtomCoordinates,
    AtomRadii,
    InstanceTransforms,
    Vector3,
  )
  from protview.io.parsing.pdb import ParseDiagnostics

logger = logging.getLogger(__name__)


def structure_name(source: Source) -> str | None:
  """Name of a structure: its file name without directory and extension."""
  path = source_path(source)
  if path is None:
    return None
  return path.stem


def _as_transform(transform: np.ndarray | Sequence[Sequence[float]]) -> np.ndarray:
  matrix = np.asarray(transform, dtype=np.float64)
  if matrix.shape != (4, 4):
    msg = f"Expected a 4x4 transform, got shape {matrix.shape}."
    raise ValueError(msg)
  return matrix


class StructuralModel:
  """Atom registry of one loaded structure together with its spatial extent.

  Attributes:
    selection: Selected registry indices, cleared whenever the registry is reset.

  """

  def __init__(self) -> None:
    self.selection = SelectionSet(lambda: len(self._atoms))
    self.reset()

  # --- Lifecycle ---

  def reset(self) -> None:
    """Drop the atoms, property tables, bounds, transforms and selection."""
    self._atoms: tuple[AtomRecord, ...] = ()
    self._tables = PropertyTables.empty()
    self._name: str | None = None
    self._lower: Vector3 = EMPTY_LOWER
    self._upper: Vector3 = EMPTY_UPPER
    self._size_of_structure = 0.0
    self._centering_transform = np.eye(4, dtype=np.float64)
    self._model_transform = np.eye(4, dtype=np.float64)
    self.selection.clear()
    logger.debug("Structural model reset.")

  def load(
    self,
    color_source: Source,
    radius_source: Source,
    pdb_source: Source,
    config: LoadConfig | None = None,
    file_format: str | None = "pdb",
  ) -> ParseDiagnostics:
    """Load property tables and a structure, then center it at the origin.

    Both tables and the structure are read completely before the model is
    touched. On success the previous structure (and its selection) is replaced;
    on failure the model is left exactly as it was.

    Args:
      color_source: Color scheme table.
      radius_source: Van der Waals radius table.
      pdb_source: Structure file.
      config: Loading options.
      file_format: Structure format; ``None`` infers it from the file extension.

    Returns:
      Diagnostics of the structure parse.

    Raises:
      InvalidSourceError: If any of the three sources fails to load.
      FormatNotSupportedError: If ``file_format`` is ``None`` and the extension
        of ``pdb_source`` is not a known structure format.

    """
    config = config or LoadConfig()
    label = source_label(pdb_source)
    try:
      tables = load_property_tables(color_source, radius_source, config)
      parsed = load_structure(pdb_source, file_format=file_format, tables=tables)
    except InvalidSourceError:
      logger.error("Failed to load structure %s; keeping the previous model.", label)
      raise

    self.reset()
    self._name = structure_name(pdb_source)
    self._tables = tables
    self._atoms = parsed.atoms
    self._lower, self._upper = parsed.lower_bound, parsed.upper_bound
    self.finalize_bounds()
    self.center()
    logger.info(
      "Loaded %s: %d atoms, size of structure %.3f.",
      self._name or label,
      len(self._atoms),
      self._size_of_structure,
    )
    return parsed.diagnostics

  # --- Bounds and centering ---

  def extend(self, position: Vector3) -> None:
    """Grow the bounding box to include ``position``."""
    self._lower, self._upper = extend_bounds(self._lower, self._upper, position)

  def finalize_bounds(self) -> None:
    """Recompute the size metric and centering transform from the current bounds.

    Calling it again without changing the bounds yields identical results. With
    no bounds (empty registry) the size is 0 and the centering transform is the
    identity.
    """
    if not is_valid_bounds(self._lower, self._upper):
      logger.warning("Finalizing bounds of an empty structure.")
      self._size_of_structure = 0.0
      self._centering_transform = np.eye(4, dtype=np.float64)
      return
    self._size_of_structure = size_of_bounds(self._lower, self._upper)
    self._centering_transform = centering_matrix(self._lower, self._upper)

  def recenter(self, transform: np.ndarray | Sequence[Sequence[float]]) -> None:
    """Apply a transform to every atom position.

    The transform is also left-multiplied into ``model_transform`` and the
    bounds are recomputed from the moved atoms. This touches every atom and is
    not meant to run once per frame.

    Args:
      transform: Homogeneous 4x4 transform.

    Raises:
      ValueError: If ``transform`` is not 4x4.

    """
    matrix = _as_transform(transform)
    if self._atoms:
      points = np.array([atom.position for atom in self._atoms], dtype=np.float64)
      homogeneous = np.concatenate([points, np.ones((len(points), 1))], axis=1) @ matrix.T
      moved = homogeneous[:, :3] / homogeneous[:, 3:]
      self._atoms = tuple(
        atom.replace(position=(float(p[0]), float(p[1]), float(p[2])))
        for atom, p in zip(self._atoms, moved, strict=True)
      )
    self._model_transform = matrix @ self._model_transform
    self._lower, self._upper = bounds_of(atom.position for atom in self._atoms)
    self.finalize_bounds()
    logger.debug("Recentered %d atoms.", len(self._atoms))

  def center(self) -> None:
    """Move the bounding-box center to the origin."""
    self.recenter(self._centering_transform)

  def move_to(self, point: Vector3) -> None:
    """Move the bounding-box center to ``point``."""
    translation = np.eye(4, dtype=np.float64)
    translation[:3, 3] = point
    self.recenter(translation @ self._centering_transform)

  # --- Accessors ---

  @property
  def atoms(self) -> tuple[AtomRecord, ...]:
    return self._atoms

  def atom(self, index: int) -> AtomRecord:
    return self._atoms[index]

  @property
  def atom_count(self) -> int:
    return len(self._atoms)

  def __len__(self) -> int:
    return len(self._atoms)

  @property
  def is_empty(self) -> bool:
    return not self._atoms

  @property
  def name(self) -> str | None:
    return self._name

  @property
  def tables(self) -> PropertyTables:
    return self._tables

  @property
  def lower_bound(self) -> Vector3:
    return self._lower

  @property
  def upper_bound(self) -> Vector3:
    return self._upper

  def bounds(self) -> tuple[Vector3, Vector3]:
    """``(lower, upper)`` extrema; sentinel ``(+inf, -inf)`` when empty."""
    return self._lower, self._upper

  @property
  def size_of_structure(self) -> float:
    return self._size_of_structure

  @property
  def centering_transform(self) -> np.ndarray:
    return self._centering_transform.copy()

  @property
  def model_transform(self) -> np.ndarray:
    return self._model_transform.copy()

  @property
  def coordinates(self) -> AtomCoordinates:
    """Atom positions as a (N, 3) array."""
    return jnp.asarray(
      np.array([atom.position for atom in self._atoms], dtype=np.float32).reshape(-1, 3),
    )

  @property
  def colors(self) -> AtomColors:
    """Atom colors as a (N, 3) array."""
    return jnp.asarray(
      np.array([atom.color for atom in self._atoms], dtype=np.float32).reshape(-1, 3),
    )

  @property
  def radii(self) -> AtomRadii:
    """Atom radii as a (N,) array."""
    return jnp.asarray(np.array([atom.radius for atom in self._atoms], dtype=np.float32))

  def instance_transforms(self, scale: float = 2.0) -> InstanceTransforms:
    """Per-atom proxy mesh transforms, ``translate(position) @ scale(scale * radius)``."""
    return instance_transforms_from_arrays(self.coordinates, self.radii, scale)

  def __repr__(self) -> str:
    return f"<StructuralModel {self._name or '?'}: {len(self._atoms)} atoms>"
