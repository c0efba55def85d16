"""Audio components: latent noise, waveform assembly, and WAV encoding."""

from .noise import GaussianNoiseSampler
from .postprocess import concatenate_with_silence, silence
from .wav import (
    WAV_HEADER_BYTES,
    encode_wav,
    format_duration,
    wav_duration_seconds,
    write_wav,
)

__all__ = [
    "GaussianNoiseSampler",
    "WAV_HEADER_BYTES",
    "concatenate_with_silence",
    "encode_wav",
    "format_duration",
    "silence",
    "wav_duration_seconds",
    "write_wav",
]
