"""
WAVE decoding - RIFF container parsing into a format descriptor and raw samples.

No resampling or conversion happens here: the PCM (or compressed-format)
payload is passed through unchanged to the audio backend.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple
import logging
import os
import struct

import numpy as np

from ..core.errors import (
    AssetNotFoundError,
    BufferReleasedError,
    FormatChunkTooLargeError,
    MalformedContainerError,
    MissingDataChunkError,
    MissingFormatChunkError,
    WaveFormatError,
)

logger = logging.getLogger(__name__)

CHUNK_HEADER = struct.Struct("<4sI")          # tag, payload size
RIFF_HEADER = struct.Struct("<4sI4s")         # "RIFF", total size, "WAVE"
FORMAT_DESCRIPTOR = struct.Struct("<HHIIHHH")  # WAVEFORMATEX

# Fixed capacity of the format descriptor, in bytes
FORMAT_CAPACITY = FORMAT_DESCRIPTOR.size

DEFAULT_SKIP_TAGS: Tuple[bytes, ...] = (b"JUNK",)

WAVE_FORMAT_PCM = 0x0001
WAVE_FORMAT_IEEE_FLOAT = 0x0003


# =============================================================================
# Types
# =============================================================================

@dataclass(frozen=True)
class ChunkHeader:
    tag: bytes
    size: int


@dataclass(frozen=True)
class FormatDescriptor:
    """WAVEFORMATEX fields, passed through to the audio backend."""
    format_tag: int
    channels: int
    sample_rate: int
    avg_bytes_per_sec: int
    block_align: int
    bits_per_sample: int
    extra_size: int = 0

    @staticmethod
    def from_bytes(payload: bytes) -> FormatDescriptor:
        """Unpack a fmt payload; short payloads are zero-filled to capacity."""
        if len(payload) > FORMAT_CAPACITY:
            raise FormatChunkTooLargeError(
                f"fmt chunk is {len(payload)} bytes, capacity is {FORMAT_CAPACITY}"
            )
        padded = payload.ljust(FORMAT_CAPACITY, b"\x00")
        return FormatDescriptor(*FORMAT_DESCRIPTOR.unpack(padded))

    def to_bytes(self) -> bytes:
        return FORMAT_DESCRIPTOR.pack(
            self.format_tag, self.channels, self.sample_rate,
            self.avg_bytes_per_sec, self.block_align,
            self.bits_per_sample, self.extra_size,
        )


class SampleBuffer:
    """
    Owned raw sample bytes with a single, guaranteed release.

    Use as a context manager, or call release() exactly once.
    """

    __slots__ = ('_data', '_length')

    def __init__(self, data: bytes):
        self._data: Optional[bytes] = bytes(data)
        self._length = len(self._data)

    @property
    def released(self) -> bool:
        return self._data is None

    @property
    def data(self) -> bytes:
        if self._data is None:
            raise BufferReleasedError("Sample buffer has been released")
        return self._data

    def __len__(self) -> int:
        return len(self.data)

    def __eq__(self, other) -> bool:
        if not isinstance(other, SampleBuffer):
            return NotImplemented
        return self._length == other._length and self._data == other._data

    def __hash__(self) -> int:
        # Stable across release()
        return hash(self._length)

    def release(self):
        if self._data is None:
            raise BufferReleasedError("Sample buffer released twice")
        logger.debug(f"Released sample buffer ({self._length} bytes)")
        self._data = None

    def __enter__(self) -> SampleBuffer:
        return self

    def __exit__(self, exc_type, exc, tb):
        if self._data is not None:
            self.release()
        return False


@dataclass(frozen=True)
class WaveformAsset:
    """Decoded WAVE file. Immutable; the sample buffer is released once."""
    format: FormatDescriptor
    sample_buffer: SampleBuffer
    byte_length: int

    @property
    def data(self) -> bytes:
        return self.sample_buffer.data

    @property
    def released(self) -> bool:
        return self.sample_buffer.released

    @property
    def duration(self) -> float:
        """Length in seconds, from the average byte rate."""
        if self.format.avg_bytes_per_sec == 0:
            return 0.0
        return self.byte_length / self.format.avg_bytes_per_sec

    def release(self):
        self.sample_buffer.release()

    def to_array(self) -> np.ndarray:
        return pcm_to_array(self.format, self.data)

    def __enter__(self) -> WaveformAsset:
        return self

    def __exit__(self, exc_type, exc, tb):
        return self.sample_buffer.__exit__(exc_type, exc, tb)


# =============================================================================
# Decoding
# =============================================================================

def _read_chunk_header(data: bytes, offset: int) -> Optional[ChunkHeader]:
    """Read a chunk header at offset, or None at end of stream."""
    if offset >= len(data):
        return None
    if offset + CHUNK_HEADER.size > len(data):
        raise MalformedContainerError(f"Truncated chunk header at offset {offset}")
    tag, size = CHUNK_HEADER.unpack_from(data, offset)
    return ChunkHeader(tag=tag, size=size)


def _read_payload(data: bytes, offset: int, header: ChunkHeader) -> bytes:
    end = offset + header.size
    if end > len(data):
        raise MalformedContainerError(
            f"Chunk {header.tag!r} declares {header.size} bytes, "
            f"only {len(data) - offset} available"
        )
    return data[offset:end]


def decode(data: bytes, skip_tags: Iterable[bytes] = DEFAULT_SKIP_TAGS) -> WaveformAsset:
    """
    Decode a RIFF/WAVE byte stream.

    Args:
        data: Complete file contents
        skip_tags: Chunk tags skipped between 'fmt ' and 'data'

    Returns:
        WaveformAsset owning a copy of the sample bytes

    Raises:
        MalformedContainerError: Bad RIFF/WAVE signature or truncated stream
        MissingFormatChunkError: First chunk is not 'fmt '
        FormatChunkTooLargeError: 'fmt ' payload exceeds FORMAT_CAPACITY
        MissingDataChunkError: No 'data' chunk after the format chunk
    """
    data = bytes(data)
    skip_tags = tuple(skip_tags)

    if len(data) < RIFF_HEADER.size:
        raise MalformedContainerError("Stream too short for a RIFF header")

    riff, _total_size, wave_type = RIFF_HEADER.unpack_from(data, 0)
    if riff != b"RIFF":
        raise MalformedContainerError(f"Not a RIFF stream: {riff!r}")
    if wave_type != b"WAVE":
        raise MalformedContainerError(f"RIFF type is not WAVE: {wave_type!r}")
    offset = RIFF_HEADER.size

    # Format chunk
    header = _read_chunk_header(data, offset)
    if header is None or header.tag != b"fmt ":
        tag = header.tag if header else None
        raise MissingFormatChunkError(f"Expected 'fmt ' chunk, found {tag!r}")
    if header.size > FORMAT_CAPACITY:
        raise FormatChunkTooLargeError(
            f"fmt chunk is {header.size} bytes, capacity is {FORMAT_CAPACITY}"
        )
    offset += CHUNK_HEADER.size
    fmt = FormatDescriptor.from_bytes(_read_payload(data, offset, header))
    offset += header.size

    # Skippable chunks, then data
    header = _read_chunk_header(data, offset)
    while header is not None and header.tag in skip_tags:
        logger.debug(f"Skipping {header.tag!r} chunk ({header.size} bytes)")
        offset += CHUNK_HEADER.size + header.size
        header = _read_chunk_header(data, offset)

    if header is None or header.tag != b"data":
        tag = header.tag if header else None
        raise MissingDataChunkError(f"Expected 'data' chunk, found {tag!r}")
    offset += CHUNK_HEADER.size
    samples = _read_payload(data, offset, header)

    return WaveformAsset(
        format=fmt,
        sample_buffer=SampleBuffer(samples),
        byte_length=header.size,
    )


def load_wave(path: str, skip_tags: Iterable[bytes] = DEFAULT_SKIP_TAGS) -> WaveformAsset:
    """Read and decode a .wav file."""
    try:
        with open(path, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise AssetNotFoundError(f"Cannot open WAVE file {path}: {e}") from e

    asset = decode(data, skip_tags)
    logger.info(
        f"Loaded {os.path.basename(path)}: {asset.byte_length} bytes, "
        f"{asset.format.channels}ch {asset.format.sample_rate}Hz "
        f"{asset.format.bits_per_sample}-bit"
    )
    return asset


# =============================================================================
# PCM view
# =============================================================================

def pcm_to_array(fmt: FormatDescriptor, data: bytes) -> np.ndarray:
    """
    View interleaved PCM bytes as a (frames, channels) numpy array.

    Raises:
        WaveFormatError: For layouts other than 8/16/32-bit PCM or 32-bit float
    """
    if fmt.format_tag == WAVE_FORMAT_IEEE_FLOAT and fmt.bits_per_sample == 32:
        dtype = np.dtype('<f4')
    elif fmt.format_tag == WAVE_FORMAT_PCM and fmt.bits_per_sample == 8:
        dtype = np.dtype('u1')
    elif fmt.format_tag == WAVE_FORMAT_PCM and fmt.bits_per_sample == 16:
        dtype = np.dtype('<i2')
    elif fmt.format_tag == WAVE_FORMAT_PCM and fmt.bits_per_sample == 32:
        dtype = np.dtype('<i4')
    else:
        raise WaveFormatError(
            f"Unsupported sample layout: tag={fmt.format_tag:#06x} bits={fmt.bits_per_sample}"
        )

    channels = max(1, fmt.channels)
    frame_bytes = dtype.itemsize * channels
    usable = len(data) - (len(data) % frame_bytes)
    return np.frombuffer(data[:usable], dtype=dtype).reshape(-1, channels)
