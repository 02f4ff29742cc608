"""
Resource Registry

Owns the backend buffers of every entity: geometry uploaded once, constant
buffers rewritten each frame. Also defines the constant-buffer layouts
(16-byte aligned, little-endian, matrices row-major).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional
import logging

import numpy as np

from ..scene.entity import DirectionalLight, SceneEntity
from .backend import BufferHandle, RenderBackend

logger = logging.getLogger(__name__)


# =============================================================================
# Constant Buffer Layouts
# =============================================================================

TRANSFORM_DTYPE = np.dtype([
    ('wvp', '<f4', (4, 4)),
    ('world', '<f4', (4, 4)),
])

MATERIAL_DTYPE = np.dtype([
    ('color', '<f4', (4,)),
    ('enable_lighting', '<i4'),
    ('_pad0', '<f4', (3,)),
    ('uv_transform', '<f4', (4, 4)),
    ('shininess', '<f4'),
    ('_pad1', '<f4', (3,)),
])

LIGHT_DTYPE = np.dtype([
    ('color', '<f4', (4,)),
    ('direction', '<f4', (3,)),
    ('intensity', '<f4'),
])

CAMERA_DTYPE = np.dtype([
    ('world_position', '<f4', (3,)),
    ('_pad0', '<f4'),
])


def pack_transform(entity: SceneEntity) -> bytes:
    block = np.zeros(1, dtype=TRANSFORM_DTYPE)
    block['wvp'][0] = entity.world_view_projection
    block['world'][0] = entity.world_matrix
    return block.tobytes()


def pack_material(entity: SceneEntity) -> bytes:
    block = np.zeros(1, dtype=MATERIAL_DTYPE)
    block['color'][0] = entity.color
    block['enable_lighting'][0] = 1 if entity.lighting_enabled else 0
    block['uv_transform'][0] = entity.uv_matrix
    block['shininess'][0] = entity.shininess
    return block.tobytes()


def pack_light(light: DirectionalLight) -> bytes:
    block = np.zeros(1, dtype=LIGHT_DTYPE)
    block['color'][0] = light.color
    block['direction'][0] = light.direction
    block['intensity'][0] = light.intensity
    return block.tobytes()


def pack_camera(entity: SceneEntity) -> bytes:
    block = np.zeros(1, dtype=CAMERA_DTYPE)
    block['world_position'][0] = entity.camera_position
    return block.tobytes()


# =============================================================================
# Per-entity Resources
# =============================================================================

@dataclass
class DrawBindings:
    """Backend buffers bound for one entity's draw."""
    vertex: BufferHandle
    transform: BufferHandle
    material: BufferHandle
    camera: BufferHandle
    index: Optional[BufferHandle] = None
    light: Optional[BufferHandle] = None
    texture_path: str = ""

    @property
    def indexed(self) -> bool:
        return self.index is not None

    def release(self):
        for handle in (self.vertex, self.transform, self.material, self.camera,
                       self.index, self.light):
            if handle is not None:
                handle.release()


class ResourceRegistry:
    """
    Registry of per-entity backend buffers, keyed by entity name.

    The registry owns the buffers and releases them in cleanup().
    """

    def __init__(self, backend: RenderBackend):
        self.backend = backend
        self.bindings: Dict[str, DrawBindings] = {}

    def register(self, entity: SceneEntity) -> DrawBindings:
        """Create buffers for an entity and upload its geometry."""
        if entity.name in self.bindings:
            raise KeyError(f"Entity already registered: {entity.name}")

        mesh = entity.mesh
        vertex_bytes = mesh.vertices.astype(np.float32).tobytes()
        vertex = self.backend.create_vertex_buffer(len(vertex_bytes))
        vertex.write(vertex_bytes)

        index = None
        if mesh.indexed:
            index_bytes = mesh.indices.astype(np.uint32).tobytes()
            index = self.backend.create_index_buffer(len(index_bytes))
            index.write(index_bytes)

        bindings = DrawBindings(
            vertex=vertex,
            transform=self.backend.create_constant_buffer(TRANSFORM_DTYPE.itemsize),
            material=self.backend.create_constant_buffer(MATERIAL_DTYPE.itemsize),
            camera=self.backend.create_constant_buffer(CAMERA_DTYPE.itemsize),
            index=index,
            light=(self.backend.create_constant_buffer(LIGHT_DTYPE.itemsize)
                   if entity.light is not None else None),
            texture_path=entity.texture_path,
        )
        self.bindings[entity.name] = bindings
        logger.debug(f"Registered {entity.name}: {mesh.vertex_count} vertices, "
                     f"{mesh.index_count} indices")
        return bindings

    def write_constants(self, entity: SceneEntity):
        """Copy the entity's current matrices, material, camera and light to its buffers."""
        bindings = self.get(entity.name)
        bindings.transform.write(pack_transform(entity))
        bindings.material.write(pack_material(entity))
        bindings.camera.write(pack_camera(entity))
        bindings.texture_path = entity.texture_path

        if entity.light is not None:
            if bindings.light is None:
                bindings.light = self.backend.create_constant_buffer(LIGHT_DTYPE.itemsize)
            bindings.light.write(pack_light(entity.light))

    def get(self, name: str) -> DrawBindings:
        """Get bindings by entity name. Raises KeyError if not found."""
        return self.bindings[name]

    def has(self, name: str) -> bool:
        return name in self.bindings

    def cleanup(self):
        """Release all backend buffers."""
        for bindings in self.bindings.values():
            bindings.release()
        self.bindings.clear()
