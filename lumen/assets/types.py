"""Type definitions for OBJ/MTL assets."""
from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

# Interleaved vertex layout: position (4f), texcoord (2f), normal (3f)
VERTEX_FORMAT = "4f 2f 3f"
VERTEX_FLOATS = 9
VERTEX_STRIDE = VERTEX_FLOATS * 4


@dataclass(frozen=True)
class Vertex:
    """One mesh vertex."""

    position: Tuple[float, float, float, float]
    texcoord: Tuple[float, float]
    normal: Tuple[float, float, float]

    def to_floats(self) -> Tuple[float, ...]:
        return self.position + self.texcoord + self.normal


@dataclass(frozen=True)
class MaterialAsset:
    """Material library contents; only the diffuse texture is kept."""

    diffuse_texture_path: str = ""


@dataclass
class ModelAsset:
    """Triangle list; every three consecutive vertices form one triangle."""

    vertices: List[Vertex] = field(default_factory=list)
    material: MaterialAsset = field(default_factory=MaterialAsset)

    @property
    def triangle_count(self) -> int:
        return len(self.vertices) // 3

    def to_array(self) -> np.ndarray:
        """Interleaved float32 array of shape (len(vertices), 9)."""
        if not self.vertices:
            return np.zeros((0, VERTEX_FLOATS), dtype=np.float32)
        return np.array([v.to_floats() for v in self.vertices], dtype=np.float32)
