# lumen/core/math3d.py
"""
Transform math for CPU-side matrix building.

Convention: row vectors (p' = p @ M), row-major storage, left-handed
clip space with depth in [0, 1]. A composite transform reads left to
right: ``scale @ rotate @ translate`` scales first and translates last.

Matrices uploaded as raw row-major bytes are seen transposed by a
column-major shader, so ``u_wvp * v`` there equals ``v @ wvp`` here.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Sequence
import math

import numpy as np

from .errors import SingularCameraTransformError

# Below this the camera matrix is treated as singular
SINGULAR_EPSILON = 1e-10


def _vec3(values: Sequence[float], fill: float) -> np.ndarray:
    """Pad a 2- or 3-component sequence to a float32 3-vector."""
    v = np.full(3, fill, dtype=np.float32)
    n = min(3, len(values))
    v[:n] = np.asarray(values, dtype=np.float32)[:n]
    return v


# =============================================================================
# Transform
# =============================================================================

@dataclass
class Transform:
    """Scale, Euler rotation (radians) and translation."""
    scale: np.ndarray = field(default_factory=lambda: np.array([1.0, 1.0, 1.0], dtype=np.float32))
    rotate: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 0.0], dtype=np.float32))
    translate: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 0.0], dtype=np.float32))

    def __post_init__(self):
        self.scale = _vec3(self.scale, 1.0)
        self.rotate = _vec3(self.rotate, 0.0)
        self.translate = _vec3(self.translate, 0.0)

    def copy(self) -> "Transform":
        return Transform(
            scale=self.scale.copy(),
            rotate=self.rotate.copy(),
            translate=self.translate.copy(),
        )

    def to_matrix(self) -> np.ndarray:
        return affine(self.scale, self.rotate, self.translate)

    def to_dict(self) -> dict:
        return {
            'scale': self.scale.tolist(),
            'rotate': self.rotate.tolist(),
            'translate': self.translate.tolist(),
        }

    @staticmethod
    def from_dict(data: dict) -> "Transform":
        return Transform(
            scale=data.get('scale', (1.0, 1.0, 1.0)),
            rotate=data.get('rotate', (0.0, 0.0, 0.0)),
            translate=data.get('translate', (0.0, 0.0, 0.0)),
        )


# =============================================================================
# Elementary matrices
# =============================================================================

def identity() -> np.ndarray:
    return np.eye(4, dtype=np.float32)


def make_scale(s: Sequence[float]) -> np.ndarray:
    sx, sy, sz = _vec3(s, 1.0)
    return np.array([
        [sx, 0, 0, 0],
        [0, sy, 0, 0],
        [0, 0, sz, 0],
        [0, 0, 0, 1],
    ], dtype=np.float32)


def make_translate(t: Sequence[float]) -> np.ndarray:
    m = identity()
    m[3, :3] = _vec3(t, 0.0)
    return m


def make_rotate_x(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([
        [1, 0, 0, 0],
        [0, c, s, 0],
        [0, -s, c, 0],
        [0, 0, 0, 1],
    ], dtype=np.float32)


def make_rotate_y(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([
        [c, 0, -s, 0],
        [0, 1, 0, 0],
        [s, 0, c, 0],
        [0, 0, 0, 1],
    ], dtype=np.float32)


def make_rotate_z(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([
        [c, s, 0, 0],
        [-s, c, 0, 0],
        [0, 0, 1, 0],
        [0, 0, 0, 1],
    ], dtype=np.float32)


# =============================================================================
# Composition
# =============================================================================

def affine(scale: Sequence[float], rotate: Sequence[float], translate: Sequence[float]) -> np.ndarray:
    """
    Compose ``Scale * RotateX * RotateY * RotateZ * Translate``.

    Args:
        scale: Per-axis scale
        rotate: Euler angles in radians
        translate: Translation

    Returns:
        4x4 float32 world matrix
    """
    rx, ry, rz = (float(a) for a in _vec3(rotate, 0.0))
    rotation = make_rotate_x(rx) @ make_rotate_y(ry) @ make_rotate_z(rz)
    return (make_scale(scale) @ rotation @ make_translate(translate)).astype(np.float32)


def inverse(m: np.ndarray) -> np.ndarray:
    """
    Invert a 4x4 matrix.

    Raises:
        SingularCameraTransformError: If the matrix has no finite inverse
    """
    m64 = np.asarray(m, dtype=np.float64)
    det = np.linalg.det(m64)
    if not np.isfinite(det) or abs(det) < SINGULAR_EPSILON:
        raise SingularCameraTransformError(f"Matrix is singular (det={det!r})")

    inv = np.linalg.inv(m64)
    if not np.all(np.isfinite(inv)):
        raise SingularCameraTransformError("Matrix inverse is not finite")
    return inv.astype(np.float32)


def view(camera: Transform) -> np.ndarray:
    """View matrix: inverse of the camera's world matrix."""
    return inverse(camera.to_matrix())


def world_view_projection(world: np.ndarray, view_m: np.ndarray, projection: np.ndarray) -> np.ndarray:
    """``world * (view * projection)``; view and projection are combined first."""
    return (world @ (view_m @ projection)).astype(np.float32)


def uv_transform(scale: Sequence[float], rotate_z: float, translate: Sequence[float]) -> np.ndarray:
    """Texture-coordinate transform: ``Scale * RotateZ * Translate``."""
    return (make_scale(scale) @ make_rotate_z(rotate_z) @ make_translate(translate)).astype(np.float32)


# =============================================================================
# Projection
# =============================================================================

def perspective(fov_y: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Left-handed perspective projection, depth mapped to [0, 1]."""
    cot = 1.0 / math.tan(fov_y / 2.0)
    depth = far / (far - near)
    return np.array([
        [cot / aspect, 0, 0, 0],
        [0, cot, 0, 0],
        [0, 0, depth, 1],
        [0, 0, -near * depth, 0],
    ], dtype=np.float32)


def orthographic(left: float, top: float, right: float, bottom: float,
                 near: float, far: float) -> np.ndarray:
    """Orthographic projection mapping the (left, top)..(right, bottom) rect to NDC."""
    return np.array([
        [2.0 / (right - left), 0, 0, 0],
        [0, 2.0 / (top - bottom), 0, 0],
        [0, 0, 1.0 / (far - near), 0],
        [(left + right) / (left - right), (top + bottom) / (bottom - top), near / (near - far), 1],
    ], dtype=np.float32)

