"""
Default scene: loaded model, triangle, sphere and sprite.
"""

from __future__ import annotations
from typing import List

from ..assets.types import ModelAsset
from ..core.config import AppConfig
from ..core.math3d import Transform
from .entity import DirectionalLight, Projection, SceneEntity
from .primitives import model_mesh, sphere_mesh, sprite_mesh, triangle_mesh


def build_default_scene(model: ModelAsset, config: AppConfig = None) -> List[SceneEntity]:
    """Create the four demo entities with their starting parameters."""
    config = config or AppConfig()
    texture = config.assets.default_texture

    model_entity = SceneEntity(
        name="model",
        mesh=model_mesh(model),
        transform=Transform(rotate=(0.0, 3.14, 0.0)),
        camera_transform=Transform(translate=(0.0, 0.0, -10.0)),
        light=DirectionalLight(),
        texture_path=model.material.diffuse_texture_path or texture,
        visible=False,
    )

    triangle = SceneEntity(
        name="triangle",
        mesh=triangle_mesh(),
        camera_transform=Transform(translate=(0.0, 0.0, -5.0)),
        light=DirectionalLight(),
        texture_path=texture,
        visible=False,
    )

    sphere = SceneEntity(
        name="sphere",
        mesh=sphere_mesh(config.assets.sphere_subdivision),
        transform=Transform(rotate=(0.0, -1.6, 0.0)),
        camera_transform=Transform(translate=(0.0, 0.0, -10.0)),
        shininess=8.0,
        light=DirectionalLight(),
        texture_path=texture,
        visible=True,
    )

    sprite = SceneEntity(
        name="sprite",
        mesh=sprite_mesh(),
        projection=Projection.ORTHOGRAPHIC,
        uv_transform=Transform(),
        texture_path=texture,
        visible=False,
    )

    return [model_entity, triangle, sphere, sprite]
