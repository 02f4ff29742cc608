"""
Backend Contracts

What the core needs from a graphics/windowing backend. Device setup,
shaders and presentation belong to the implementation, not to the core.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Mapping, Protocol

if TYPE_CHECKING:
    from .resources import DrawBindings


class BufferHandle(Protocol):
    """A CPU-writable GPU buffer."""

    def write(self, data: bytes, offset: int = 0) -> None: ...

    def release(self) -> None: ...


class RenderBackend(Protocol):
    """Buffer creation, draw submission and per-frame polling."""

    def create_vertex_buffer(self, size_bytes: int) -> BufferHandle: ...

    def create_index_buffer(self, size_bytes: int) -> BufferHandle: ...

    def create_constant_buffer(self, size_bytes: int) -> BufferHandle: ...

    def submit_draw(self, bindings: DrawBindings, count: int, instance_count: int = 1) -> None: ...

    def poll_close_requested(self) -> bool: ...

    def poll_input(self) -> Mapping[str, bool]: ...

    def present(self) -> None: ...
