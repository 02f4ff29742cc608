"""
Lumen Audio
===========

WAVE decoding and playback through an audio backend.

Quick Start:
    from lumen.audio import AudioEngine, SoundDeviceBackend, load_wave

    audio = AudioEngine(SoundDeviceBackend())
    with load_wave("resources/audio/Alarm02.wav") as asset:
        audio.play(asset)
"""

from .engine import AudioBackend, AudioEngine, SoundDeviceBackend
from .wave import (
    ChunkHeader,
    FormatDescriptor,
    SampleBuffer,
    WaveformAsset,
    decode,
    load_wave,
    pcm_to_array,
)

__all__ = [
    'AudioBackend',
    'AudioEngine',
    'SoundDeviceBackend',
    'ChunkHeader',
    'FormatDescriptor',
    'SampleBuffer',
    'WaveformAsset',
    'decode',
    'load_wave',
    'pcm_to_array',
]
