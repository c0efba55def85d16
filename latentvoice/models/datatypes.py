"""Core datatypes shared across latentvoice modules.

Responsibilities:
- Represent immutable records exchanged between pipeline stages.
- Validate request invariants at construction time.

Key types:
- `VoiceStyle`, `TokenSequence`, `SynthesisRequest`, `SynthesisResult`,
  `SynthesisProgress`, `PipelineState`, and `AudioSettings`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Literal

import numpy as np


SUPPORTED_LANGUAGES: tuple[str, ...] = ("en", "ko", "es", "pt", "fr")

ProgressStage = Literal["loading", "processing", "generating", "complete"]


class PipelineState(str, Enum):
    """Lifecycle states of one synthesis request."""

    IDLE = "idle"
    TOKENIZING = "tokenizing"
    PREDICTING_DURATION = "predicting_duration"
    ENCODING_TEXT = "encoding_text"
    DENOISING = "denoising"
    VOCODING = "vocoding"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class AudioSettings:
    """Model-level audio and latent geometry constants.

    Attributes:
        sample_rate: Output waveform sample rate in Hz.
        latent_dim: Latent channel count before chunk compression.
        chunk_compress_factor: Channel multiplier applied by chunk compression.
        base_chunk_size: Autoencoder base chunk size in samples.
    """

    sample_rate: int = 44100
    latent_dim: int = 24
    chunk_compress_factor: int = 6
    base_chunk_size: int = 512

    @property
    def latent_channels(self) -> int:
        """Return the compressed latent channel count fed to the estimator."""

        return self.latent_dim * self.chunk_compress_factor


@dataclass(frozen=True, slots=True)
class VoiceStyle:
    """Per-voice style tensors flattened with explicit 3-D shapes.

    Attributes:
        style_id: Voice identifier such as `M1` or `F3`.
        gender: `male` when the identifier starts with `M`, otherwise `female`.
        style_ttl: Flat float32 text-to-latent style buffer.
        style_ttl_shape: `[batch, rows, cols]` shape of `style_ttl`.
        style_dp: Flat float32 duration-predictor style buffer.
        style_dp_shape: `[batch, rows, cols]` shape of `style_dp`.
        name: Human-readable voice name.
    """

    style_id: str
    gender: str
    style_ttl: np.ndarray
    style_ttl_shape: tuple[int, int, int]
    style_dp: np.ndarray
    style_dp_shape: tuple[int, int, int]
    name: str = ""

    def __post_init__(self) -> None:
        """Enforce buffer/shape agreement and freeze buffers."""

        for label, buffer, shape in (
            ("style_ttl", self.style_ttl, self.style_ttl_shape),
            ("style_dp", self.style_dp, self.style_dp_shape),
        ):
            if len(shape) != 3:
                raise ValueError(f"`{label}` shape must have three dimensions.")
            if buffer.ndim != 1 or buffer.size != int(np.prod(shape)):
                raise ValueError(
                    f"`{label}` buffer length {buffer.size} does not match shape {list(shape)}."
                )
            buffer.flags.writeable = False

    def ttl_tensor(self) -> np.ndarray:
        """Return the text-to-latent style reshaped to its 3-D shape."""

        return self.style_ttl.reshape(self.style_ttl_shape).copy()

    def dp_tensor(self) -> np.ndarray:
        """Return the duration style reshaped to its 3-D shape."""

        return self.style_dp.reshape(self.style_dp_shape).copy()


TokenSequence = tuple[int, ...]


@dataclass(frozen=True, slots=True)
class SynthesisRequest:
    """Validated inputs for one synthesis run.

    Attributes:
        text: Input text.
        language: Language code from `SUPPORTED_LANGUAGES`.
        voice: Voice style used for duration and timbre.
        total_steps: Denoising step count (quality knob), at least 1.
        speed: Speech speed multiplier; values above 1 shorten audio.
        silence_seconds: Silence inserted between synthesized text chunks.
    """

    text: str
    language: str
    voice: VoiceStyle
    total_steps: int = 5
    speed: float = 1.0
    silence_seconds: float = 0.3

    def __post_init__(self) -> None:
        """Validate numeric request invariants."""

        if isinstance(self.total_steps, bool) or int(self.total_steps) != self.total_steps:
            raise ValueError("`total_steps` must be an integer.")
        if self.total_steps < 1:
            raise ValueError("`total_steps` must be at least 1.")
        object.__setattr__(self, "total_steps", int(self.total_steps))
        if not self.speed > 0:
            raise ValueError("`speed` must be greater than 0.")
        if not self.silence_seconds >= 0:
            raise ValueError("`silence_seconds` must not be negative.")


@dataclass(frozen=True, slots=True)
class SynthesisResult:
    """Output of one completed synthesis run.

    Attributes:
        audio: Raw float32 waveform samples.
        duration_seconds: Waveform duration at `sample_rate`.
        sample_rate: Waveform sample rate in Hz.
        token_counts: Token count per synthesized text chunk.
        latent_lengths: Latent length per synthesized text chunk.
    """

    audio: np.ndarray
    duration_seconds: float
    sample_rate: int
    token_counts: tuple[int, ...] = field(default_factory=tuple)
    latent_lengths: tuple[int, ...] = field(default_factory=tuple)

    @property
    def chunk_count(self) -> int:
        """Return the number of text chunks that produced this waveform."""

        return len(self.latent_lengths)


@dataclass(frozen=True, slots=True)
class SynthesisProgress:
    """One progress notification emitted to callers."""

    stage: ProgressStage
    progress: float
    message: str


ProgressCallback = Callable[[SynthesisProgress], None]
