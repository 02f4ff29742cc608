"""
Frame State

Immutable state produced by the orchestrator each frame.
Contains timing info and what was submitted.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class FrameState:
    """
    Immutable frame information returned by FrameOrchestrator.update_frame().
    """
    frame_id: int        # Monotonically increasing frame counter
    dt: float            # Delta time since last frame (seconds)
    t: float             # Total elapsed time (seconds)
    draw_count: int = 0      # Draws submitted this frame
    instance_count: int = 0  # Instances across all draws
    edit_count: int = 0      # External edits applied at frame start

    @property
    def fps(self) -> float:
        """Estimated FPS from delta time."""
        return 1.0 / max(1e-6, self.dt)
