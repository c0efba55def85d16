"""Loaded model state owned by one synthesis pipeline.

Responsibilities:
- Bundle the four stage sessions, the index table, and audio geometry.
- Build that bundle from an asset directory through an injectable session factory.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from ..errors import ConfigurationError
from ..io.assets import AssetLayout, load_audio_settings
from ..models.datatypes import AudioSettings, ProgressCallback, SynthesisProgress
from ..telemetry.logger import RunLogger
from ..text.tokenizer import UnicodeIndexTable, load_unicode_index_table
from .session import (
    CPU_PROVIDER,
    InferenceSession,
    OnnxInferenceSession,
    resolve_execution_providers,
)

SessionFactory = Callable[[Path, Sequence[str]], InferenceSession]

STAGE_NAMES: tuple[str, ...] = (
    "duration_predictor",
    "text_encoder",
    "vector_estimator",
    "vocoder",
)

_STAGE_LABELS = {
    "duration_predictor": "Duration Predictor",
    "text_encoder": "Text Encoder",
    "vector_estimator": "Vector Estimator",
    "vocoder": "Vocoder",
}


@dataclass(frozen=True, slots=True)
class ModelContext:
    """Everything a pipeline needs to run inference.

    Attributes:
        duration_predictor: Stage consuming `text_ids`, `style_dp`, `text_mask`.
        text_encoder: Stage consuming `text_ids`, `style_ttl`, `text_mask`.
        vector_estimator: Stage run once per denoising step.
        vocoder: Stage converting the final latent to `wav_tts`.
        index_table: Codepoint -> token id table.
        audio: Sample rate and latent geometry.
        backend: Label of the execution backend in use.
    """

    duration_predictor: InferenceSession
    text_encoder: InferenceSession
    vector_estimator: InferenceSession
    vocoder: InferenceSession
    index_table: UnicodeIndexTable
    audio: AudioSettings = AudioSettings()
    backend: str = CPU_PROVIDER

    def session(self, stage: str) -> InferenceSession:
        """Return the session for a stage name from `STAGE_NAMES`."""

        return getattr(self, stage)


def load_model_context(
    assets_dir: Path,
    providers: Sequence[str] = (CPU_PROVIDER,),
    session_factory: SessionFactory | None = None,
    on_progress: ProgressCallback | None = None,
    run_logger: RunLogger | None = None,
) -> ModelContext:
    """Load all stage sessions and tables from an asset directory.

    Progress is reported as `loading` at `(i + 1) / 5 * 100` per model, then
    `loading` 100 for the index table. When no `session_factory` is given,
    onnxruntime sessions are created with probed providers.
    """

    layout = AssetLayout(assets_dir)
    layout.require_models()

    if session_factory is None:
        resolved_providers, backend = resolve_execution_providers(
            layout.model_path(STAGE_NAMES[0]), providers, run_logger
        )
        factory: SessionFactory = OnnxInferenceSession
    else:
        resolved_providers, backend = list(providers), (providers[0] if providers else "custom")
        factory = session_factory

    sessions: dict[str, InferenceSession] = {}
    step_total = len(STAGE_NAMES) + 1
    for index, stage in enumerate(STAGE_NAMES):
        if on_progress is not None:
            on_progress(
                SynthesisProgress(
                    stage="loading",
                    progress=(index + 1) * 100 / step_total,
                    message=f"Loading {_STAGE_LABELS[stage]}...",
                )
            )
        model_path = layout.model_path(stage)
        try:
            sessions[stage] = factory(model_path, resolved_providers)
        except Exception as exc:
            raise ConfigurationError(
                f"Failed to load model `{model_path}`: {exc}",
                stage="load",
                hint="Re-download the model assets; the file may be corrupt or incomplete.",
            ) from exc

    if on_progress is not None:
        on_progress(
            SynthesisProgress(stage="loading", progress=100, message="Loading text processor...")
        )
    index_table = load_unicode_index_table(layout.unicode_indexer_path)
    audio = load_audio_settings(layout.tts_config_path)

    return ModelContext(
        duration_predictor=sessions["duration_predictor"],
        text_encoder=sessions["text_encoder"],
        vector_estimator=sessions["vector_estimator"],
        vocoder=sessions["vocoder"],
        index_table=index_table,
        audio=audio,
        backend=backend,
    )
