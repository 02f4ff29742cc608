"""
AudioEngine - Hands decoded WAVE assets to an audio backend.

The backend owns the device; this module only creates a voice from the
format descriptor and submits the raw sample bytes to it.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, Protocol
import logging

import numpy as np

from .wave import FormatDescriptor, WaveformAsset, pcm_to_array

logger = logging.getLogger(__name__)


class AudioBackend(Protocol):
    """Audio capabilities consumed by AudioEngine."""

    def create_audio_voice(self, fmt: FormatDescriptor) -> Any: ...

    def submit_audio_buffer(self, voice: Any, data: bytes) -> None: ...


class AudioEngine:
    """
    Plays WaveformAssets through an AudioBackend.

    Usage:
        audio = AudioEngine(SoundDeviceBackend())
        with load_wave("resources/audio/Alarm02.wav") as asset:
            audio.play(asset)
    """

    def __init__(self, backend: AudioBackend):
        self.backend = backend
        self._voices: List[Any] = []

    def play(self, asset: WaveformAsset) -> Any:
        """Create a voice for the asset's format and submit its samples."""
        data = asset.data  # raises BufferReleasedError once released
        voice = self.backend.create_audio_voice(asset.format)
        self.backend.submit_audio_buffer(voice, data)
        self._voices.append(voice)
        logger.info(f"AudioEngine: submitted {asset.byte_length} bytes ({asset.duration:.2f}s)")
        return voice

    @property
    def voice_count(self) -> int:
        return len(self._voices)


# =============================================================================
# sounddevice backend
# =============================================================================

@dataclass
class SoundDeviceVoice:
    """A voice bound to one format; sounddevice streams are made per submit."""
    format: FormatDescriptor


class SoundDeviceBackend:
    """AudioBackend on top of sounddevice's non-blocking play()."""

    def __init__(self, device=None):
        self.device = device

    def create_audio_voice(self, fmt: FormatDescriptor) -> SoundDeviceVoice:
        return SoundDeviceVoice(format=fmt)

    def submit_audio_buffer(self, voice: SoundDeviceVoice, data: bytes) -> None:
        # PortAudio is loaded on first use so headless imports stay cheap
        import sounddevice as sd

        samples = pcm_to_array(voice.format, data)
        if samples.dtype == np.uint8:
            # sounddevice has no unsigned 8-bit output
            samples = (samples.astype(np.int16) - 128) << 8
        sd.play(samples, samplerate=voice.format.sample_rate, device=self.device)

    def stop(self):
        import sounddevice as sd
        sd.stop()
