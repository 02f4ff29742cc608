"""
Command List System

Pure-data description of one frame's draws.
Commands hold NO backend objects - only entity names and counts.
The orchestrator resolves names to buffers through the ResourceRegistry
when the list is submitted.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class CmdDraw:
    """
    Draw one entity.

    count is the index count for indexed meshes, else the vertex count.
    """
    entity_name: str
    count: int
    indexed: bool
    instance_count: int = 1
    texture_path: str = ""


@dataclass
class CommandList:
    """
    An ordered list of draw commands for one frame.

    Safe to build, inspect and replay without touching the backend.
    """
    commands: List[CmdDraw] = field(default_factory=list)
    frame_id: Optional[int] = None

    def add(self, cmd: CmdDraw):
        """Append a command to the list."""
        self.commands.append(cmd)

    def __len__(self) -> int:
        return len(self.commands)

    def __iter__(self):
        return iter(self.commands)

    def validate(self) -> List[str]:
        """
        Check that no command carries a backend object.
        Returns list of error messages (empty = valid).
        """
        errors = []
        for i, cmd in enumerate(self.commands):
            for key, val in cmd.__dict__.items():
                if _looks_like_backend_object(val):
                    errors.append(f"Command {i} ({type(cmd).__name__}): "
                                  f"field '{key}' appears to be a backend object")
        return errors

    def get_draw_count(self) -> int:
        return len(self.commands)

    def get_instance_count(self) -> int:
        return sum(cmd.instance_count for cmd in self.commands)

    def get_stats(self) -> Dict[str, int]:
        """Draw count per entity."""
        stats: Dict[str, int] = {}
        for cmd in self.commands:
            stats[cmd.entity_name] = stats.get(cmd.entity_name, 0) + 1
        return stats


def _looks_like_backend_object(val: Any) -> bool:
    """Heuristic: plain data is fine, anything from moderngl or buffer-like is not."""
    if val is None or isinstance(val, (str, int, float, bool)):
        return False

    module = getattr(type(val), '__module__', '') or ''
    if 'moderngl' in module:
        return True

    return hasattr(val, 'write') and hasattr(val, 'release')
