# lumen/core/signal.py
"""
SignalBridge - Observer pattern hub for routing frame and edit events.
"""

from __future__ import annotations
from typing import Callable, Dict, List
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)

# =============================================================================
# Signal Types
# =============================================================================

SIGNAL_FRAME_BEGIN = 'frame_begin'            # (frame_id,)
SIGNAL_FRAME_END = 'frame_end'                # (FrameState,)
SIGNAL_ENTITY_EDITED = 'entity_edited'        # (entity_name, attribute_path, value)
SIGNAL_ENTITY_REGISTERED = 'entity_registered'  # (entity_name,)
SIGNAL_CLOSE_REQUESTED = 'close_requested'    # ()


# =============================================================================
# Connection Handle
# =============================================================================

@dataclass
class Connection:
    """Handle to a signal connection."""
    signal: str
    callback_id: int
    bridge: SignalBridge = None

    def disconnect(self):
        if self.bridge:
            self.bridge._remove_connection(self.signal, self.callback_id)
            self.bridge = None


# =============================================================================
# Signal Bridge
# =============================================================================

class SignalBridge:
    """Central hub for signal routing."""

    def __init__(self):
        self._connections: Dict[str, Dict[int, Callable]] = {}
        self._next_id: int = 0
        self._blocked: set = set()
        self._emit_depth: int = 0
        self._pending_removes: List[tuple] = []

    def connect(self, signal: str, handler: Callable) -> Connection:
        if signal not in self._connections:
            self._connections[signal] = {}

        callback_id = self._next_id
        self._next_id += 1

        self._connections[signal][callback_id] = handler

        return Connection(signal=signal, callback_id=callback_id, bridge=self)

    def disconnect_all(self, signal: str = None):
        if signal:
            self._connections.pop(signal, None)
        else:
            self._connections.clear()

    def emit(self, signal: str, *args, **kwargs):
        if signal in self._blocked:
            return

        handlers = self._connections.get(signal, {})
        if not handlers:
            return

        self._emit_depth += 1

        try:
            for callback_id, handler in list(handlers.items()):
                try:
                    handler(*args, **kwargs)
                except Exception as e:
                    logger.error(f"Signal handler error [{signal}]: {e}")
        finally:
            self._emit_depth -= 1

            if self._emit_depth == 0 and self._pending_removes:
                for sig, cid in self._pending_removes:
                    self._do_remove(sig, cid)
                self._pending_removes.clear()

    def block(self, signal: str):
        self._blocked.add(signal)

    def unblock(self, signal: str):
        self._blocked.discard(signal)

    def is_connected(self, signal: str) -> bool:
        return bool(self._connections.get(signal))

    def _remove_connection(self, signal: str, callback_id: int):
        if self._emit_depth > 0:
            self._pending_removes.append((signal, callback_id))
        else:
            self._do_remove(signal, callback_id)

    def _do_remove(self, signal: str, callback_id: int):
        if signal in self._connections:
            self._connections[signal].pop(callback_id, None)
