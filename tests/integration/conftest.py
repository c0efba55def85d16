"""Integration-test fixtures replacing onnxruntime with deterministic stage stubs."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

import pytest


class StubEngine:
    """Hold the stub sessions handed out in place of ONNX models."""

    def __init__(self, build_sessions: Callable[..., dict[str, object]]) -> None:
        self._build_sessions = build_sessions
        self.sessions = build_sessions()
        self.requested_providers: list[list[str]] = []

    def configure(self, **options: object) -> None:
        """Rebuild the stub sessions, e.g. with `fail_stage` or custom durations."""

        self.sessions = self._build_sessions(**options)

    def create_session(self, model_path: Path, providers: Sequence[str]) -> object:
        self.requested_providers.append(list(providers))
        return self.sessions[model_path.stem]


@pytest.fixture(autouse=True)
def stub_engine(monkeypatch: pytest.MonkeyPatch, stub_sessions_factory) -> StubEngine:
    """Serve stub sessions to the CLI without touching onnxruntime."""

    engine = StubEngine(stub_sessions_factory)

    def _resolve(
        model_path: Path, preferred: Sequence[str], logger: object = None
    ) -> tuple[list[str], str]:
        _ = (model_path, logger)
        return list(preferred), preferred[0]

    monkeypatch.setattr("latentvoice.inference.context.resolve_execution_providers", _resolve)
    monkeypatch.setattr(
        "latentvoice.inference.context.OnnxInferenceSession", engine.create_session
    )
    return engine
