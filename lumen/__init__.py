# lumen/__init__.py
"""
Lumen - Asset loading and per-frame transform pipeline.

Core components:
- decode / load_wave: RIFF/WAVE container decoding
- parse_model / parse_material: OBJ/MTL triangle-mesh parsing
- math3d: affine, view, projection and WVP matrices
- SceneEntity: per-object parameters and derived matrices
- FrameOrchestrator: input, matrix updates and draw submission per frame
"""

from .assets import MaterialAsset, ModelAsset, Vertex, parse_material, parse_model
from .audio import AudioEngine, FormatDescriptor, WaveformAsset, decode, load_wave
from .core import (
    AppConfig,
    FrameState,
    SignalBridge,
    Transform,
    configure_logging,
)
from .core.orchestrator import FrameOrchestrator
from .scene import Projection, SceneEntity, build_default_scene

__version__ = '0.1.0'

__all__ = [
    # Assets
    'MaterialAsset', 'ModelAsset', 'Vertex',
    'parse_material', 'parse_model',

    # Audio
    'AudioEngine', 'FormatDescriptor', 'WaveformAsset',
    'decode', 'load_wave',

    # Core
    'AppConfig', 'FrameState', 'SignalBridge', 'Transform',
    'configure_logging',
    'FrameOrchestrator',

    # Scene
    'Projection', 'SceneEntity', 'build_default_scene',
]
