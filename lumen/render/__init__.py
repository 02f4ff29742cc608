"""
Lumen Render
============

Backend contracts, pure-data draw commands and per-entity GPU buffers.
The moderngl backend lives in lumen.render.gl_backend and is imported
explicitly by hosts that have a GL context.
"""

from .backend import BufferHandle, RenderBackend
from .commands import CmdDraw, CommandList
from .resources import (
    CAMERA_DTYPE,
    LIGHT_DTYPE,
    MATERIAL_DTYPE,
    TRANSFORM_DTYPE,
    DrawBindings,
    ResourceRegistry,
    pack_camera,
    pack_light,
    pack_material,
    pack_transform,
)

__all__ = [
    'BufferHandle',
    'RenderBackend',
    'CmdDraw',
    'CommandList',
    'CAMERA_DTYPE',
    'LIGHT_DTYPE',
    'MATERIAL_DTYPE',
    'TRANSFORM_DTYPE',
    'DrawBindings',
    'ResourceRegistry',
    'pack_camera',
    'pack_light',
    'pack_material',
    'pack_transform',
]
