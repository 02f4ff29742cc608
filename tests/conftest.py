import struct

import numpy as np
import pytest


class FakeBuffer:
    """BufferHandle backed by a bytearray."""

    def __init__(self, kind, size_bytes):
        self.kind = kind
        self.data = bytearray(size_bytes)
        self.writes = 0
        self.released = False

    def write(self, data, offset=0):
        assert not self.released, "write after release"
        assert offset + len(data) <= len(self.data), "write past end of buffer"
        self.data[offset:offset + len(data)] = data
        self.writes += 1

    def release(self):
        self.released = True


class FakeBackend:
    """RenderBackend that records everything and draws nothing."""

    def __init__(self, close_after=None, pressed=None):
        self.buffers = []
        self.draws = []
        self.presents = 0
        self.close_after = close_after
        self.close_polls = 0
        self.pressed = dict(pressed or {})

    def _create(self, kind, size_bytes):
        buf = FakeBuffer(kind, size_bytes)
        self.buffers.append(buf)
        return buf

    def create_vertex_buffer(self, size_bytes):
        return self._create('vertex', size_bytes)

    def create_index_buffer(self, size_bytes):
        return self._create('index', size_bytes)

    def create_constant_buffer(self, size_bytes):
        return self._create('constant', size_bytes)

    def submit_draw(self, bindings, count, instance_count=1):
        self.draws.append((bindings, count, instance_count))

    def poll_close_requested(self):
        self.close_polls += 1
        if self.close_after is None:
            return False
        return self.close_polls > self.close_after

    def poll_input(self):
        return dict(self.pressed)

    def present(self):
        self.presents += 1


class FakeAudioBackend:
    def __init__(self):
        self.voices = []
        self.submitted = []

    def create_audio_voice(self, fmt):
        voice = ('voice', len(self.voices), fmt)
        self.voices.append(voice)
        return voice

    def submit_audio_buffer(self, voice, data):
        self.submitted.append((voice, bytes(data)))


def chunk(tag, payload):
    return struct.pack("<4sI", tag, len(payload)) + payload


def make_wave(samples=b"\x00\x01\x02\x03", channels=1, sample_rate=8000, bits=16,
              fmt_payload=None, extra_chunks=(), riff=b"RIFF", wave=b"WAVE", data_tag=b"data"):
    """Build a WAVE byte stream; every piece can be overridden to make it invalid."""
    if fmt_payload is None:
        block_align = channels * bits // 8
        fmt_payload = struct.pack(
            "<HHIIHH", 1, channels, sample_rate, sample_rate * block_align, block_align, bits
        )
    body = wave + chunk(b"fmt ", fmt_payload)
    for tag, payload in extra_chunks:
        body += chunk(tag, payload)
    body += chunk(data_tag, samples)
    return riff + struct.pack("<I", len(body)) + body


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def audio_backend():
    return FakeAudioBackend()


def transform_point(m, p):
    """Row-vector transform of a 3D point, with the homogeneous divide."""
    v = np.array([p[0], p[1], p[2], 1.0], dtype=np.float32) @ m
    return v[:3] / v[3]
