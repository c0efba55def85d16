"""Canonical mono 16-bit PCM WAV encoding.

Responsibilities:
- Convert float waveforms in [-1, 1] to signed 16-bit little-endian PCM.
- Wrap PCM frames in the canonical 44-byte RIFF/WAVE header.
- Write WAV files and read back their durations for diagnostics.
"""

from __future__ import annotations

import io
import wave
from pathlib import Path
from typing import Sequence

import numpy as np


WAV_HEADER_BYTES = 44
_PCM_SAMPLE_WIDTH = 2


def float_to_pcm16(samples: Sequence[float] | np.ndarray) -> np.ndarray:
    """Clamp samples to [-1, 1] and scale to int16 with asymmetric bounds.

    Negative values scale by 32768 and non-negative values by 32767, so
    `-1.0` maps to `-32768` and `1.0` to `32767`. Scaled values truncate
    toward zero. NaN samples encode as silence.
    """

    values = np.nan_to_num(
        np.asarray(samples, dtype=np.float64), nan=0.0, posinf=1.0, neginf=-1.0
    )
    clipped = np.clip(values, -1.0, 1.0)
    scaled = np.where(clipped < 0, clipped * 32768.0, clipped * 32767.0)
    return np.trunc(scaled).astype("<i2")


def encode_wav(samples: Sequence[float] | np.ndarray | None, sample_rate: int) -> bytes:
    """Encode a float waveform as a mono 16-bit PCM WAV payload.

    Raises:
        ValueError: If `samples` is `None`/empty or `sample_rate` is not positive.
    """

    if samples is None or len(samples) == 0:
        raise ValueError("Cannot encode an empty sample buffer.")
    if sample_rate <= 0:
        raise ValueError("`sample_rate` must be a positive integer.")

    frames = float_to_pcm16(samples).tobytes()
    with io.BytesIO() as buffer:
        with wave.open(buffer, "wb") as wav_file:
            wav_file.setnchannels(1)
            wav_file.setsampwidth(_PCM_SAMPLE_WIDTH)
            wav_file.setframerate(int(sample_rate))
            wav_file.writeframes(frames)
        return buffer.getvalue()


def write_wav(path: Path, samples: Sequence[float] | np.ndarray, sample_rate: int) -> Path:
    """Encode `samples` and write them to `path`, creating parent directories."""

    payload = encode_wav(samples, sample_rate)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(payload)
    return path


def wav_duration_seconds(payload: bytes) -> float:
    """Compute WAV duration in seconds from an encoded payload."""

    try:
        with wave.open(io.BytesIO(payload), "rb") as wav_file:
            frame_count = wav_file.getnframes()
            sample_rate = wav_file.getframerate()
    except (wave.Error, EOFError) as exc:
        raise ValueError("Payload is not a readable WAV file.") from exc
    if sample_rate <= 0:
        raise ValueError("WAV payload has an invalid sample rate.")
    return frame_count / float(sample_rate)


def format_duration(seconds: float) -> str:
    """Format a duration as `M:SS`."""

    minutes = int(seconds // 60)
    remainder = int(seconds % 60)
    return f"{minutes}:{remainder:02d}"
