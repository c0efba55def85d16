"""Synthesis orchestration for latentvoice.

Responsibilities:
- Own the loaded model context and the per-request state machine.
- Sequence duration prediction, text encoding, iterative denoising, and vocoding.
- Derive tensor shapes from model outputs and report progress checkpoints.

Key types:
- `SynthesisPipeline`: orchestration facade.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Mapping, Sequence

import numpy as np

from ..audio.noise import GaussianNoiseSampler
from ..audio.postprocess import concatenate_with_silence
from ..errors import InferenceStageError, NotReadyError, UnsupportedLanguageError
from ..inference.context import ModelContext, SessionFactory, load_model_context
from ..inference.session import CPU_PROVIDER
from ..models.datatypes import (
    SUPPORTED_LANGUAGES,
    PipelineState,
    ProgressCallback,
    SynthesisProgress,
    SynthesisRequest,
    SynthesisResult,
    TokenSequence,
)
from ..telemetry.logger import RunLogger
from ..text.chunking import TextChunker
from ..text.normalizer import TextNormalizer
from ..text.tokenizer import UnicodeTokenizer
from .progress import CancellationToken, ProgressReporter
from .telemetry import PipelineTelemetryMixin


class SynthesisPipeline(PipelineTelemetryMixin):
    """Coordinate all inference stages for text-to-speech synthesis.

    One instance serves one request at a time. Models are loaded explicitly
    with `load` (or an existing `ModelContext` is attached) before
    `synthesize` can run.
    """

    def __init__(
        self,
        context: ModelContext | None = None,
        *,
        noise_sampler: GaussianNoiseSampler | None = None,
        normalization_form: str = "NFD",
        max_chunk_chars: int | None = None,
        run_logger: RunLogger | None = None,
    ) -> None:
        """Initialize optional model context, noise source, and logging hooks."""

        self._context = context
        self._noise_sampler = noise_sampler or GaussianNoiseSampler()
        self._normalizer = TextNormalizer(form=normalization_form)
        self._chunker = TextChunker()
        self._max_chunk_chars = max_chunk_chars
        self._run_logger = run_logger
        self._state = PipelineState.IDLE
        self._busy = False

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._context is not None

    @property
    def backend(self) -> str | None:
        return self._context.backend if self._context is not None else None

    @property
    def sample_rate(self) -> int | None:
        return self._context.audio.sample_rate if self._context is not None else None

    def load(
        self,
        assets_dir: Path,
        providers: Sequence[str] = (CPU_PROVIDER,),
        session_factory: SessionFactory | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        """Load model sessions and tables from an asset directory.

        Loading an already-loaded pipeline is a no-op.

        Returns:
            The execution backend label.
        """

        if self._context is not None:
            return self._context.backend

        context = self._run_stage(
            "load",
            PipelineState.IDLE,
            lambda: load_model_context(
                assets_dir,
                providers=providers,
                session_factory=session_factory,
                on_progress=on_progress,
                run_logger=self._run_logger,
            ),
        )
        self._context = context
        self._state = PipelineState.IDLE
        if on_progress is not None:
            on_progress(SynthesisProgress(stage="complete", progress=100, message="Models loaded."))
        return context.backend

    def attach(self, context: ModelContext) -> None:
        """Use an already-built model context."""

        self._context = context
        self._state = PipelineState.IDLE

    def release(self) -> None:
        """Drop the model context; the pipeline must be loaded again before use."""

        self._context = None
        self._state = PipelineState.IDLE

    def tokenizer(self) -> UnicodeTokenizer:
        """Return a tokenizer bound to the loaded index table (or none when not loaded)."""

        table = self._context.index_table if self._context is not None else None
        return UnicodeTokenizer(table, self._normalizer)

    def tokenize(self, text: str, language: str) -> TokenSequence:
        """Tokenize text with the loaded index table."""

        return self.tokenizer().tokenize(text, language)

    def synthesize(
        self,
        request: SynthesisRequest,
        on_progress: ProgressCallback | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> SynthesisResult:
        """Run the full pipeline for one request and return the waveform.

        Raises:
            NotReadyError: If models are not loaded or another request is running.
            UnsupportedLanguageError: If the language is not supported.
            InferenceStageError: If any inference stage fails.
            SynthesisCancelledError: If cancellation was requested.
        """

        context = self._context
        if context is None:
            raise NotReadyError(
                "Models are not loaded.",
                stage="synthesize",
                hint="Call `load` with a model asset directory first.",
            )
        if self._busy:
            raise NotReadyError(
                "A synthesis request is already running on this pipeline.",
                stage="synthesize",
                hint="Wait for the current request to finish or use another pipeline.",
            )
        if request.language not in SUPPORTED_LANGUAGES:
            self._state = PipelineState.FAILED
            raise UnsupportedLanguageError(request.language, SUPPORTED_LANGUAGES)

        token = cancel_token or CancellationToken()
        chunks = self._chunker.split(request.text, self._max_chunk_chars)
        reporter = ProgressReporter(on_progress, chunk_count=len(chunks))

        self._busy = True
        try:
            waveforms: list[np.ndarray] = []
            token_counts: list[int] = []
            latent_lengths: list[int] = []
            for chunk_index, chunk_text in enumerate(chunks):
                reporter.begin_chunk(chunk_index)
                audio, token_count, latent_length = self._synthesize_chunk(
                    context, chunk_text, request, reporter, token
                )
                waveforms.append(audio)
                token_counts.append(token_count)
                latent_lengths.append(latent_length)
        except Exception:
            self._state = PipelineState.FAILED
            raise
        finally:
            self._busy = False

        sample_rate = context.audio.sample_rate
        audio = concatenate_with_silence(waveforms, request.silence_seconds, sample_rate)
        self._state = PipelineState.COMPLETE
        reporter.emit("complete", 100, "Done.")
        return SynthesisResult(
            audio=audio,
            duration_seconds=audio.size / sample_rate,
            sample_rate=sample_rate,
            token_counts=tuple(token_counts),
            latent_lengths=tuple(latent_lengths),
        )

    def _synthesize_chunk(
        self,
        context: ModelContext,
        text: str,
        request: SynthesisRequest,
        reporter: ProgressReporter,
        cancel_token: CancellationToken,
    ) -> tuple[np.ndarray, int, int]:
        """Run tokenization through vocoding for one text chunk."""

        reporter.emit("processing", 0, "Processing text...")
        cancel_token.raise_if_cancelled("tokenize")
        tokens = self._run_stage(
            "tokenize",
            PipelineState.TOKENIZING,
            lambda: UnicodeTokenizer(context.index_table, self._normalizer).tokenize(
                text, request.language
            ),
        )
        seq_len = len(tokens)
        text_ids = np.asarray(tokens, dtype=np.int64).reshape(1, seq_len)
        text_mask = np.ones((1, 1, seq_len), dtype=np.float32)
        style_ttl = request.voice.ttl_tensor()
        style_dp = request.voice.dp_tensor()

        reporter.emit("processing", 10, "Predicting duration...")
        cancel_token.raise_if_cancelled("duration_predictor")
        durations = self._run_stage(
            "duration_predictor",
            PipelineState.PREDICTING_DURATION,
            lambda: self._call_stage(
                context,
                "duration_predictor",
                {"text_ids": text_ids, "style_dp": style_dp, "text_mask": text_mask},
                "duration",
            ),
        )
        latent_length = self.derive_latent_length(durations, request.speed)

        reporter.emit("processing", 20, "Encoding text...")
        cancel_token.raise_if_cancelled("text_encoder")
        text_emb = self._run_stage(
            "text_encoder",
            PipelineState.ENCODING_TEXT,
            lambda: self._call_stage(
                context,
                "text_encoder",
                {"text_ids": text_ids, "style_ttl": style_ttl, "text_mask": text_mask},
                "text_emb",
            ),
        )

        channels = context.audio.latent_channels
        latent_shape = (1, channels, latent_length)
        latent = self._noise_sampler.sample(channels * latent_length).reshape(latent_shape)
        latent_mask = np.ones((1, 1, latent_length), dtype=np.float32)

        reporter.emit("generating", 30, "Generating speech...")
        latent = self._run_stage(
            "vector_estimator",
            PipelineState.DENOISING,
            lambda: self._denoise(
                context,
                latent,
                {
                    "text_emb": text_emb,
                    "style_ttl": style_ttl,
                    "latent_mask": latent_mask,
                    "text_mask": text_mask,
                },
                request.total_steps,
                reporter,
                cancel_token,
            ),
        )

        reporter.emit("generating", 85, "Converting latent to audio...")
        cancel_token.raise_if_cancelled("vocoder")
        audio = self._run_stage(
            "vocoder",
            PipelineState.VOCODING,
            lambda: self._call_stage(context, "vocoder", {"latent": latent}, "wav_tts"),
        )
        return np.asarray(audio, dtype=np.float32).reshape(-1), seq_len, latent_length

    def _denoise(
        self,
        context: ModelContext,
        latent: np.ndarray,
        conditioning: Mapping[str, np.ndarray],
        total_steps: int,
        reporter: ProgressReporter,
        cancel_token: CancellationToken,
    ) -> np.ndarray:
        """Run the fixed-count denoising loop, replacing the latent each step."""

        total_step = np.array([total_steps], dtype=np.int64)
        for step in range(total_steps):
            cancel_token.raise_if_cancelled("vector_estimator")
            inputs = {
                "noisy_latent": latent,
                **conditioning,
                "current_step": np.array([step], dtype=np.int64),
                "total_step": total_step,
            }
            denoised = self._call_stage(context, "vector_estimator", inputs, "denoised_latent")
            try:
                latent = np.asarray(denoised, dtype=np.float32).reshape(latent.shape)
            except ValueError as exc:
                raise InferenceStageError(
                    f"`denoised_latent` size {np.size(denoised)} does not match latent shape "
                    f"{list(latent.shape)}.",
                    stage="vector_estimator",
                ) from exc
            reporter.emit(
                "generating",
                30 + (step + 1) * 50 / total_steps,
                f"Generating speech... ({step + 1}/{total_steps})",
            )
        return latent

    @staticmethod
    def derive_latent_length(durations: np.ndarray, speed: float) -> int:
        """Return `max(1, ceil(sum(durations) / speed))`.

        Raises:
            InferenceStageError: If the predicted durations are not finite.
        """

        values = np.asarray(durations, dtype=np.float64)
        if not np.all(np.isfinite(values)):
            raise InferenceStageError(
                "Duration predictor returned non-finite durations.",
                stage="duration_predictor",
                hint="Check that the model files match the expected tensor contract.",
            )
        total = float(np.sum(values)) / speed
        return max(1, math.ceil(total))

    @staticmethod
    def _call_stage(
        context: ModelContext,
        stage: str,
        inputs: Mapping[str, np.ndarray],
        output_name: str,
    ) -> np.ndarray:
        """Run one stage session and return one named output.

        Any engine error or missing output surfaces as `InferenceStageError`.
        """

        try:
            outputs = context.session(stage).run(inputs)
        except Exception as exc:
            raise InferenceStageError(
                f"Inference stage `{stage}` failed: {exc}",
                stage=stage,
                hint="Check that the model files match the expected tensor contract.",
            ) from exc
        if output_name not in outputs:
            raise InferenceStageError(
                f"Inference stage `{stage}` returned no `{output_name}` output.",
                stage=stage,
            )
        return np.asarray(outputs[output_name])
