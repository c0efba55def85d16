"""Waveform assembly helpers for multi-chunk synthesis.

Responsibilities:
- Produce silence buffers of a given duration.
- Join per-chunk waveforms in order with silence gaps.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np


def silence(seconds: float, sample_rate: int) -> np.ndarray:
    """Return a float32 zero buffer lasting `seconds` at `sample_rate`."""

    if seconds < 0:
        raise ValueError("Silence duration must not be negative.")
    return np.zeros(int(round(seconds * sample_rate)), dtype=np.float32)


def concatenate_with_silence(
    parts: Sequence[np.ndarray],
    silence_seconds: float,
    sample_rate: int,
) -> np.ndarray:
    """Concatenate waveforms with `silence_seconds` of silence between neighbours.

    No silence is added before the first or after the last part.
    """

    if not parts:
        return np.zeros(0, dtype=np.float32)

    gap = silence(silence_seconds, sample_rate)
    pieces: list[np.ndarray] = []
    for index, part in enumerate(parts):
        if index > 0 and gap.size:
            pieces.append(gap)
        pieces.append(np.asarray(part, dtype=np.float32).reshape(-1))
    return np.concatenate(pieces)
