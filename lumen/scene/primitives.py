"""
Mesh Data

CPU-side meshes in the shared vertex layout (position 4f, texcoord 2f,
normal 3f). Uploaded once by the ResourceRegistry.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import math

import numpy as np

from ..assets.types import ModelAsset


@dataclass
class MeshData:
    """Interleaved vertices plus an optional uint32 index list."""
    vertices: np.ndarray
    indices: Optional[np.ndarray] = None

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def index_count(self) -> int:
        return 0 if self.indices is None else int(self.indices.shape[0])

    @property
    def indexed(self) -> bool:
        return self.indices is not None

    @property
    def draw_count(self) -> int:
        """Element count passed to the draw call."""
        return self.index_count if self.indexed else self.vertex_count


def _interleave(positions, texcoords, normals) -> np.ndarray:
    p = np.asarray(positions, dtype=np.float32)
    t = np.asarray(texcoords, dtype=np.float32)
    n = np.asarray(normals, dtype=np.float32)
    return np.hstack([p, t, n]).astype(np.float32)


# =============================================================================
# Builders
# =============================================================================

def triangle_mesh() -> MeshData:
    """A single triangle facing -Z."""
    positions = [(-0.5, -0.5, 0.0, 1.0), (0.0, 0.5, 0.0, 1.0), (0.5, -0.5, 0.0, 1.0)]
    texcoords = [(0.0, 1.0), (0.5, 0.0), (1.0, 1.0)]
    normals = [(0.0, 0.0, -1.0)] * 3
    return MeshData(
        vertices=_interleave(positions, texcoords, normals),
        indices=np.array([0, 1, 2], dtype=np.uint32),
    )


def sphere_mesh(subdivision: int = 16) -> MeshData:
    """
    Unit UV sphere.

    (subdivision + 1)^2 vertices; the seam column is duplicated so the
    texture wraps. 6 * subdivision^2 indices.
    """
    k = subdivision
    lon_every = math.pi * 2.0 / k
    lat_every = math.pi / k

    positions = []
    texcoords = []
    for lat in range(k + 1):
        lat_angle = -math.pi / 2.0 + lat * lat_every
        for lon in range(k + 1):
            lon_angle = lon * lon_every
            positions.append((
                math.cos(lat_angle) * math.cos(lon_angle),
                math.sin(lat_angle),
                math.cos(lat_angle) * math.sin(lon_angle),
                1.0,
            ))
            texcoords.append((lon / k, 1.0 - lat / k))

    normals = [p[:3] for p in positions]

    indices = []
    for lat in range(k):
        for lon in range(k):
            a = lat * (k + 1) + lon
            b = (lat + 1) * (k + 1) + lon
            c = a + 1
            d = b + 1
            indices.extend([a, b, c, c, b, d])

    return MeshData(
        vertices=_interleave(positions, texcoords, normals),
        indices=np.array(indices, dtype=np.uint32),
    )


def sprite_mesh(width: float = 640.0, height: float = 360.0) -> MeshData:
    """Screen-space quad with its top-left corner at the origin."""
    positions = [
        (0.0, height, 0.0, 1.0),    # bottom-left
        (0.0, 0.0, 0.0, 1.0),       # top-left
        (width, height, 0.0, 1.0),  # bottom-right
        (width, 0.0, 0.0, 1.0),     # top-right
    ]
    texcoords = [(0.0, 1.0), (0.0, 0.0), (1.0, 1.0), (1.0, 0.0)]
    normals = [(0.0, 0.0, -1.0)] * 4
    return MeshData(
        vertices=_interleave(positions, texcoords, normals),
        indices=np.array([0, 1, 2, 1, 3, 2], dtype=np.uint32),
    )


def model_mesh(model: ModelAsset) -> MeshData:
    """Non-indexed mesh from a parsed OBJ model."""
    vertices = model.to_array()
    return MeshData(vertices=vertices)
