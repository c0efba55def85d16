"""Inference session seam and the onnxruntime-backed implementation.

Responsibilities:
- Define the `run(named inputs) -> named outputs` protocol the pipeline calls.
- Adapt `onnxruntime.InferenceSession` to that protocol.
- Resolve execution providers with a CPU fallback when accelerators fail.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Protocol, Sequence

import numpy as np
import onnxruntime as ort

from ..telemetry.logger import RunLogger


CPU_PROVIDER = "CPUExecutionProvider"


class InferenceSession(Protocol):
    """Protocol for one opaque model stage."""

    def run(self, inputs: Mapping[str, np.ndarray]) -> Mapping[str, np.ndarray]:
        """Run the stage on named input tensors and return named output tensors."""


class OnnxInferenceSession:
    """`InferenceSession` backed by one ONNX model file."""

    def __init__(self, model_path: Path, providers: Sequence[str]) -> None:
        """Create the runtime session with full graph optimization."""

        options = ort.SessionOptions()
        options.graph_optimization_level = ort.GraphOptimizationLevel.ORT_ENABLE_ALL
        self.model_path = model_path
        self._session = ort.InferenceSession(
            str(model_path),
            sess_options=options,
            providers=list(providers),
        )
        self._output_names = [output.name for output in self._session.get_outputs()]

    @property
    def providers(self) -> list[str]:
        return list(self._session.get_providers())

    def run(self, inputs: Mapping[str, np.ndarray]) -> Mapping[str, np.ndarray]:
        """Run the model and key every output by its graph name."""

        outputs = self._session.run(self._output_names, dict(inputs))
        return dict(zip(self._output_names, outputs))


def resolve_execution_providers(
    model_path: Path,
    preferred: Sequence[str],
    logger: RunLogger | None = None,
) -> tuple[list[str], str]:
    """Pick execution providers by probing one model, falling back to CPU.

    Returns:
        The provider list to use for every session and the backend label.
    """

    available = set(ort.get_available_providers())
    candidates = [name for name in preferred if name in available and name != CPU_PROVIDER]
    if candidates:
        providers = [*candidates, CPU_PROVIDER]
        try:
            probe = OnnxInferenceSession(model_path, providers)
        except Exception as exc:
            if logger is not None:
                logger.log_event(
                    "WARNING",
                    "provider_fallback",
                    "load",
                    provider=candidates[0],
                    error_type=type(exc).__name__,
                )
        else:
            active = probe.providers
            del probe
            if active and active[0] != CPU_PROVIDER:
                return providers, active[0]
    return [CPU_PROVIDER], CPU_PROVIDER
