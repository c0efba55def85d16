"""Shared pytest fixtures for the full latentvoice test suite."""

from __future__ import annotations

from collections.abc import Callable, Mapping
import json
from pathlib import Path

import numpy as np
import pytest

from latentvoice.inference.context import STAGE_NAMES, ModelContext
from latentvoice.models.datatypes import AudioSettings, VoiceStyle
from latentvoice.text.tokenizer import UnicodeIndexTable
from latentvoice.tts.voices import adapt_style

TEST_AUDIO = AudioSettings(sample_rate=1000, latent_dim=2, chunk_compress_factor=3)
VOCODER_SAMPLES_PER_FRAME = 10


class RecordingSession:
    """Inference session stub that records inputs and answers from a callable."""

    def __init__(
        self,
        respond: Callable[[Mapping[str, np.ndarray]], Mapping[str, np.ndarray]],
    ) -> None:
        self.calls: list[dict[str, np.ndarray]] = []
        self._respond = respond

    def run(self, inputs: Mapping[str, np.ndarray]) -> Mapping[str, np.ndarray]:
        self.calls.append(dict(inputs))
        return self._respond(inputs)


def _failing(stage: str) -> Callable[[Mapping[str, np.ndarray]], Mapping[str, np.ndarray]]:
    """Return a responder that raises like a broken model would."""

    def _respond(_: Mapping[str, np.ndarray]) -> Mapping[str, np.ndarray]:
        raise RuntimeError(f"{stage} exploded")

    return _respond


def build_stub_sessions(
    durations: tuple[float, ...] = (2.0, 3.0, 1.0),
    fail_stage: str | None = None,
) -> dict[str, RecordingSession]:
    """Create deterministic stage stubs.

    The estimator adds 1.0 to the latent per step and the vocoder emits
    `VOCODER_SAMPLES_PER_FRAME` samples of 0.25 per latent frame.
    """

    def _duration(_: Mapping[str, np.ndarray]) -> Mapping[str, np.ndarray]:
        return {"duration": np.asarray([durations], dtype=np.float32)}

    def _encoder(inputs: Mapping[str, np.ndarray]) -> Mapping[str, np.ndarray]:
        seq_len = inputs["text_ids"].shape[1]
        return {"text_emb": np.zeros((1, 4, seq_len), dtype=np.float32)}

    def _estimator(inputs: Mapping[str, np.ndarray]) -> Mapping[str, np.ndarray]:
        return {"denoised_latent": inputs["noisy_latent"] + 1.0}

    def _vocoder(inputs: Mapping[str, np.ndarray]) -> Mapping[str, np.ndarray]:
        frames = inputs["latent"].shape[2]
        samples = np.full((1, frames * VOCODER_SAMPLES_PER_FRAME), 0.25, dtype=np.float32)
        return {"wav_tts": samples}

    responders = {
        "duration_predictor": _duration,
        "text_encoder": _encoder,
        "vector_estimator": _estimator,
        "vocoder": _vocoder,
    }
    if fail_stage is not None:
        responders[fail_stage] = _failing(fail_stage)
    return {stage: RecordingSession(responders[stage]) for stage in STAGE_NAMES}


def identity_index_table(size: int = 0x1200) -> UnicodeIndexTable:
    """Map every codepoint below `size` to itself."""

    return UnicodeIndexTable(list(range(size)))


@pytest.fixture
def index_table() -> UnicodeIndexTable:
    """Provide an identity table covering ASCII, Latin-1, and Hangul jamo."""

    return identity_index_table()


@pytest.fixture
def stub_sessions_factory() -> Callable[..., dict[str, RecordingSession]]:
    """Provide the stub-session builder for tests that customize stage behavior."""

    return build_stub_sessions


@pytest.fixture
def model_context_factory(
    index_table: UnicodeIndexTable,
) -> Callable[..., tuple[ModelContext, dict[str, RecordingSession]]]:
    """Provide a builder returning a stubbed `ModelContext` and its sessions."""

    def _build(
        durations: tuple[float, ...] = (2.0, 3.0, 1.0),
        fail_stage: str | None = None,
    ) -> tuple[ModelContext, dict[str, RecordingSession]]:
        sessions = build_stub_sessions(durations=durations, fail_stage=fail_stage)
        context = ModelContext(
            duration_predictor=sessions["duration_predictor"],
            text_encoder=sessions["text_encoder"],
            vector_estimator=sessions["vector_estimator"],
            vocoder=sessions["vocoder"],
            index_table=index_table,
            audio=TEST_AUDIO,
            backend="stub",
        )
        return context, sessions

    return _build


@pytest.fixture
def voice_style() -> VoiceStyle:
    """Provide a small two-row voice style."""

    return adapt_style(
        {
            "style_ttl": [[[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]]],
            "style_dp": [[[1.0, 2.0], [3.0, 4.0]]],
        },
        "F1",
    )


@pytest.fixture
def asset_dir(tmp_path: Path) -> Path:
    """Create a complete asset directory with placeholder model files."""

    root = tmp_path / "assets"
    onnx_dir = root / "onnx"
    onnx_dir.mkdir(parents=True)
    for stage in STAGE_NAMES:
        (onnx_dir / f"{stage}.onnx").write_bytes(b"placeholder")
    (onnx_dir / "unicode_indexer.json").write_text(
        json.dumps(list(range(0x1200))), encoding="utf-8"
    )
    (onnx_dir / "tts.json").write_text(
        json.dumps(
            {
                "ae": {"sample_rate": TEST_AUDIO.sample_rate},
                "ttl": {
                    "latent_dim": TEST_AUDIO.latent_dim,
                    "chunk_compress_factor": TEST_AUDIO.chunk_compress_factor,
                },
            }
        ),
        encoding="utf-8",
    )

    styles_dir = root / "voice_styles"
    styles_dir.mkdir()
    for style_id in ("M1", "F1"):
        (styles_dir / f"{style_id}.json").write_text(
            json.dumps(
                {
                    "style_ttl": {"dims": [1, 2, 3], "data": [0.1, 0.2, 0.3, 0.4, 0.5, 0.6]},
                    "style_dp": {"dims": [1, 2, 2], "data": [1.0, 2.0, 3.0, 4.0]},
                }
            ),
            encoding="utf-8",
        )
    return root
