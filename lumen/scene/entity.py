"""
Scene Entity

One record per drawable object. Parameters (transforms, material, light,
visibility) are the source of truth; matrices are derived from them every
frame by update().
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

import numpy as np

from ..core.math3d import Transform, affine, identity, uv_transform, view, world_view_projection
from .primitives import MeshData


class Projection(Enum):
    PERSPECTIVE = auto()
    ORTHOGRAPHIC = auto()


@dataclass
class DirectionalLight:
    """Directional light parameters."""
    color: np.ndarray = field(default_factory=lambda: np.array([1.0, 1.0, 1.0, 1.0], dtype=np.float32))
    direction: np.ndarray = field(default_factory=lambda: np.array([0.0, -1.0, 0.0], dtype=np.float32))
    intensity: float = 1.0

    def copy(self) -> "DirectionalLight":
        return DirectionalLight(
            color=self.color.copy(),
            direction=self.direction.copy(),
            intensity=self.intensity,
        )


@dataclass
class SceneEntity:
    """
    A drawable object and its per-frame derived matrices.

    uv_transform is only meaningful for sprites; light is optional.
    """
    name: str
    mesh: MeshData
    transform: Transform = field(default_factory=Transform)
    camera_transform: Transform = field(default_factory=Transform)
    projection: Projection = Projection.PERSPECTIVE
    color: np.ndarray = field(default_factory=lambda: np.array([1.0, 1.0, 1.0, 1.0], dtype=np.float32))
    lighting_enabled: bool = False
    shininess: float = 0.0
    uv_transform: Optional[Transform] = None
    light: Optional[DirectionalLight] = None
    texture_path: str = ""
    visible: bool = True

    # Derived, rewritten by update()
    world_matrix: np.ndarray = field(default_factory=identity)
    world_view_projection: np.ndarray = field(default_factory=identity)
    uv_matrix: np.ndarray = field(default_factory=identity)

    def __post_init__(self):
        self._initial_transform = self.transform.copy()

    def update(self, projection_matrix: np.ndarray):
        """Recompute world, WVP and UV matrices from current parameters."""
        self.world_matrix = affine(
            self.transform.scale, self.transform.rotate, self.transform.translate
        )
        self.world_view_projection = world_view_projection(
            self.world_matrix, view(self.camera_transform), projection_matrix
        )
        if self.uv_transform is not None:
            self.uv_matrix = uv_transform(
                self.uv_transform.scale,
                float(self.uv_transform.rotate[2]),
                self.uv_transform.translate,
            )

    @property
    def initial_transform(self) -> Transform:
        """Copy of the transform the entity was created with."""
        return self._initial_transform.copy()

    def reset_transform(self):
        self.transform = self.initial_transform

    @property
    def camera_position(self) -> np.ndarray:
        return self.camera_transform.translate

    def __repr__(self) -> str:
        return (f"SceneEntity(name={self.name!r}, projection={self.projection.name}, "
                f"visible={self.visible}, draw_count={self.mesh.draw_count})")
