"""
Lumen Scene
===========

Scene entities, procedural meshes, input bindings and the default scene.
"""

from .entity import DirectionalLight, Projection, SceneEntity
from .input import BOUND_KEYS, DEFAULT_BINDINGS, KeyBinding, apply_input
from .presets import build_default_scene
from .primitives import MeshData, model_mesh, sphere_mesh, sprite_mesh, triangle_mesh

__all__ = [
    'DirectionalLight',
    'Projection',
    'SceneEntity',
    'BOUND_KEYS',
    'DEFAULT_BINDINGS',
    'KeyBinding',
    'apply_input',
    'build_default_scene',
    'MeshData',
    'model_mesh',
    'sphere_mesh',
    'sprite_mesh',
    'triangle_mesh',
]
