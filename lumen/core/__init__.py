"""
Lumen Core
==========

Transform math, frame state, signals, configuration and errors.
FrameOrchestrator lives in lumen.core.orchestrator (it depends on the
scene and render packages).
"""

from .config import AppConfig, AssetConfig, InputConfig, RenderConfig, configure_logging
from .errors import (
    AssetError,
    AssetNotFoundError,
    BufferReleasedError,
    FormatChunkTooLargeError,
    IndexOutOfRangeError,
    MalformedContainerError,
    MalformedDirectiveError,
    MissingDataChunkError,
    MissingFormatChunkError,
    SingularCameraTransformError,
    WaveFormatError,
)
from .frame import FrameState
from .math3d import (
    Transform,
    affine,
    identity,
    inverse,
    orthographic,
    perspective,
    uv_transform,
    view,
    world_view_projection,
)
from .signal import Connection, SignalBridge
