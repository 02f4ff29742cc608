# lumen/core/orchestrator.py
"""
FrameOrchestrator - Per-frame coordinator.

Each frame, in order:
1. apply queued external edits
2. apply held keys to the input target
3. recompute every entity's matrices
4. write constant buffers
5. submit a draw for every visible entity, then present
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence
import logging
import time as time_module

import numpy as np

from ..render.backend import RenderBackend
from ..render.commands import CmdDraw, CommandList
from ..render.resources import ResourceRegistry
from ..scene.entity import DirectionalLight, Projection, SceneEntity
from ..scene.input import apply_input
from .config import AppConfig
from .frame import FrameState
from .math3d import Transform, orthographic, perspective
from .signal import (
    SignalBridge,
    SIGNAL_CLOSE_REQUESTED,
    SIGNAL_ENTITY_EDITED,
    SIGNAL_ENTITY_REGISTERED,
    SIGNAL_FRAME_BEGIN,
    SIGNAL_FRAME_END,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntityEdit:
    """A pending change to one attribute (dotted path) of one entity."""
    entity_name: str
    path: str
    value: Any


def _resolve_parent(entity: SceneEntity, path: str):
    """Return (owner, attribute name) for a dotted path, checking it exists."""
    parts = path.split('.')
    owner = entity
    for part in parts[:-1]:
        owner = getattr(owner, part)
        if owner is None:
            raise AttributeError(f"{entity.name}.{path}: '{part}' is not set")
    if not hasattr(owner, parts[-1]):
        raise AttributeError(f"{entity.name} has no attribute '{path}'")
    return owner, parts[-1]


# Fixed once the entity's buffers are registered
_READ_ONLY_ATTRIBUTES = frozenset(('name', 'mesh'))

# Entity attributes that only accept these types (None where optional)
_TYPED_ATTRIBUTES = {
    'transform': (Transform,),
    'camera_transform': (Transform,),
    'uv_transform': (Transform, type(None)),
    'light': (DirectionalLight, type(None)),
    'projection': (Projection,),
}


def _check_value(entity: SceneEntity, path: str, owner, attr: str, value: Any):
    """Raise if value cannot be stored at owner.attr without breaking update()."""
    if owner is entity and attr in _READ_ONLY_ATTRIBUTES:
        raise AttributeError(f"{entity.name}.{path} cannot be edited after registration")

    current = getattr(owner, attr)
    if hasattr(current, 'shape'):
        try:
            np.broadcast_to(np.asarray(value, dtype=current.dtype), current.shape)
        except (TypeError, ValueError) as e:
            raise ValueError(
                f"{entity.name}.{path}: value does not fit shape {current.shape}: {e}"
            ) from e
        return

    if owner is entity and attr in _TYPED_ATTRIBUTES:
        allowed = _TYPED_ATTRIBUTES[attr]
        if not isinstance(value, allowed):
            names = ", ".join(t.__name__ for t in allowed)
            raise TypeError(
                f"{entity.name}.{path} expects {names}, got {type(value).__name__}"
            )


class FrameOrchestrator:
    """Drives input, matrix updates and draw submission for a fixed entity list."""

    def __init__(
        self,
        backend: RenderBackend,
        entities: Sequence[SceneEntity],
        config: AppConfig = None,
        bridge: SignalBridge = None,
    ):
        self.backend = backend
        self.config = config or AppConfig()
        self.bridge = bridge or SignalBridge()
        self.registry = ResourceRegistry(backend)

        self.entities: List[SceneEntity] = []
        self._by_name: Dict[str, SceneEntity] = {}
        for entity in entities:
            self.add_entity(entity)

        self._pending_edits: List[EntityEdit] = []
        self._frame_id: int = 0
        self._elapsed: float = 0.0
        self._last_time: float = time_module.perf_counter()
        self.last_commands: Optional[CommandList] = None

    # -------------------------------------------------------------------------
    # Entities
    # -------------------------------------------------------------------------

    def add_entity(self, entity: SceneEntity):
        if entity.name in self._by_name:
            raise KeyError(f"Duplicate entity name: {entity.name}")
        self.registry.register(entity)
        self.entities.append(entity)
        self._by_name[entity.name] = entity
        logger.info(f"Registered entity {entity!r}")
        self.bridge.emit(SIGNAL_ENTITY_REGISTERED, entity.name)

    def entity(self, name: str) -> SceneEntity:
        """Get an entity by name. Raises KeyError if not found."""
        return self._by_name[name]

    def __getitem__(self, index: int) -> SceneEntity:
        return self.entities[index]

    def __len__(self) -> int:
        return len(self.entities)

    # -------------------------------------------------------------------------
    # External edits
    # -------------------------------------------------------------------------

    def queue_edit(self, name: str, **changes: Any):
        """
        Queue attribute changes for the start of the next frame.

        Keys may be dotted paths given with '__' in place of '.', e.g.
        ``queue_edit("sphere", transform__translate=(0, 1, 0))``.

        Every change is checked before any is queued.

        Raises:
            KeyError: Unknown entity
            AttributeError: Unknown or read-only attribute
            ValueError: Array value that does not fit the attribute's shape
            TypeError: Value of the wrong type for a transform, light or projection
        """
        entity = self.entity(name)
        edits = []
        for key, value in changes.items():
            path = key.replace('__', '.')
            owner, attr = _resolve_parent(entity, path)
            _check_value(entity, path, owner, attr, value)
            edits.append(EntityEdit(name, path, value))
        self._pending_edits.extend(edits)

    def set_visible(self, name: str, visible: bool):
        self.queue_edit(name, visible=bool(visible))

    @property
    def pending_edit_count(self) -> int:
        return len(self._pending_edits)

    def _apply_edits(self) -> int:
        edits, self._pending_edits = self._pending_edits, []
        for i, edit in enumerate(edits):
            try:
                self._apply_edit(edit)
            except Exception:
                # Edits after the failed one stay queued for the next frame
                self._pending_edits[:0] = edits[i + 1:]
                logger.error(f"Edit {edit.entity_name}.{edit.path} failed; "
                             f"{len(edits) - i - 1} edits kept for the next frame")
                raise
            self.bridge.emit(SIGNAL_ENTITY_EDITED, edit.entity_name, edit.path, edit.value)
        return len(edits)

    def _apply_edit(self, edit: EntityEdit):
        entity = self._by_name[edit.entity_name]
        owner, attr = _resolve_parent(entity, edit.path)
        current = getattr(owner, attr)
        if hasattr(current, 'shape'):
            # Copy into existing numpy storage, keeping dtype and shape
            current[...] = edit.value
        else:
            setattr(owner, attr, edit.value)
        logger.debug(f"Edit {edit.entity_name}.{edit.path} = {edit.value!r}")

    # -------------------------------------------------------------------------
    # Frame
    # -------------------------------------------------------------------------

    def projection_matrices(self) -> Dict[Projection, Any]:
        rc = self.config.render
        return {
            Projection.PERSPECTIVE: perspective(rc.fov_y, rc.aspect, rc.near_clip, rc.far_clip),
            Projection.ORTHOGRAPHIC: orthographic(
                0.0, 0.0, float(rc.client_width), float(rc.client_height),
                rc.ortho_near, rc.ortho_far,
            ),
        }

    def build_commands(self) -> CommandList:
        cmdlist = CommandList(frame_id=self._frame_id)
        for entity in self.entities:
            if not entity.visible:
                continue
            cmdlist.add(CmdDraw(
                entity_name=entity.name,
                count=entity.mesh.draw_count,
                indexed=entity.mesh.indexed,
                texture_path=entity.texture_path,
            ))
        return cmdlist

    def update_frame(self, dt: float = None) -> FrameState:
        """Run one frame. dt defaults to wall-clock time since the last frame."""
        self._frame_id += 1

        if dt is None:
            now = time_module.perf_counter()
            dt = now - self._last_time
            self._last_time = now
        self._elapsed += dt

        self.bridge.emit(SIGNAL_FRAME_BEGIN, self._frame_id)
        edit_count = self._apply_edits()

        target = self._by_name.get(self.config.input.target)
        if target is not None:
            apply_input(target, self.backend.poll_input(), self.config.input)

        projections = self.projection_matrices()
        for entity in self.entities:
            entity.update(projections[entity.projection])
            self.registry.write_constants(entity)

        cmdlist = self.build_commands()
        for cmd in cmdlist:
            bindings = self.registry.get(cmd.entity_name)
            self.backend.submit_draw(bindings, cmd.count, cmd.instance_count)
        self.backend.present()
        self.last_commands = cmdlist

        frame = FrameState(
            frame_id=self._frame_id,
            dt=dt,
            t=self._elapsed,
            draw_count=cmdlist.get_draw_count(),
            instance_count=cmdlist.get_instance_count(),
            edit_count=edit_count,
        )
        self.bridge.emit(SIGNAL_FRAME_END, frame)
        return frame

    def run(self, max_frames: int = None) -> int:
        """
        Loop until the backend requests close (or max_frames is reached).

        Returns:
            Number of frames run
        """
        logger.info("Frame loop started")
        frames = 0
        while max_frames is None or frames < max_frames:
            if self.backend.poll_close_requested():
                self.bridge.emit(SIGNAL_CLOSE_REQUESTED)
                break
            self.update_frame()
            frames += 1
        logger.info(f"Frame loop stopped after {frames} frames")
        return frames

    def shutdown(self):
        self.registry.cleanup()

    @property
    def frame_id(self) -> int:
        return self._frame_id

    def get_stats(self) -> Dict[str, Any]:
        return {
            'frame_id': self._frame_id,
            'entity_count': len(self.entities),
            'visible_count': sum(1 for e in self.entities if e.visible),
            'pending_edits': len(self._pending_edits),
            'elapsed': self._elapsed,
        }
