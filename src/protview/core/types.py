"""Type definitions for the protview project."""

from __future__ import annotations

import numpy as np
from jaxtyping import Array, Float, UInt8, UInt32

Vector3 = tuple[float, float, float]  # Plain (x, y, z) or (r, g, b) triple
AtomCoordinates = Float[Array, "num_atoms 3"]  # Coordinates of every atom in the registry
AtomColors = Float[Array, "num_atoms 3"]  # Resolved RGB color per atom
AtomRadii = Float[Array, "num_atoms"]  # Resolved van der Waals radius per atom
TransformMatrix = Float[Array, "4 4"]  # Homogeneous transform
InstanceTransforms = Float[Array, "num_instances 4 4"]  # Per-atom proxy mesh placement
Triangles = Float[Array, "num_triangles 3 3"]  # Triangle vertices of the shared proxy mesh
HitDistances = Float[Array, "num_instances num_triangles"]  # Ray parameter per triangle, inf = miss
PackedColors = UInt32[np.ndarray, "*shape"]  # 24-bit packed picking identities
PixelBuffer = UInt8[np.ndarray, "height width channels"]  # RGB(A) readback of the picking target
