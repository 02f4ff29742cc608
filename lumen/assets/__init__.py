"""
Lumen Assets
============

OBJ/MTL parsing into flat triangle lists.
"""

from .mtl import parse_material, parse_material_lines
from .obj import ObjParser, parse_model
from .types import VERTEX_FORMAT, VERTEX_STRIDE, MaterialAsset, ModelAsset, Vertex

__all__ = [
    'parse_material',
    'parse_material_lines',
    'ObjParser',
    'parse_model',
    'VERTEX_FORMAT',
    'VERTEX_STRIDE',
    'MaterialAsset',
    'ModelAsset',
    'Vertex',
]
