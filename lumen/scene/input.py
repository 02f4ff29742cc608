"""
Keyboard bindings applied to an entity's transform while keys are held.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

from ..core.config import InputConfig
from .entity import SceneEntity


@dataclass(frozen=True)
class KeyBinding:
    attribute: str   # 'translate' or 'rotate'
    axis: int        # 0 = x, 1 = y, 2 = z
    sign: float


DEFAULT_BINDINGS: Dict[str, KeyBinding] = {
    'W': KeyBinding('translate', 1, +1.0),
    'S': KeyBinding('translate', 1, -1.0),
    'A': KeyBinding('translate', 0, -1.0),
    'D': KeyBinding('translate', 0, +1.0),
    'Q': KeyBinding('rotate', 1, -1.0),
    'E': KeyBinding('rotate', 1, +1.0),
}

BOUND_KEYS: Tuple[str, ...] = tuple(DEFAULT_BINDINGS)


def apply_input(
    entity: SceneEntity,
    pressed: Mapping[str, bool],
    config: InputConfig,
    bindings: Mapping[str, KeyBinding] = DEFAULT_BINDINGS,
) -> bool:
    """
    Nudge the entity's transform for every held key.

    Returns:
        True if any binding fired
    """
    moved = False
    for key, binding in bindings.items():
        if not pressed.get(key, False):
            continue

        step = config.move_step if binding.attribute == 'translate' else config.rotate_step
        vec = getattr(entity.transform, binding.attribute)
        vec[binding.axis] += binding.sign * step
        moved = True
    return moved
