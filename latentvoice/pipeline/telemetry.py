"""Stage telemetry helper methods for the synthesis pipeline.

Responsibilities:
- Emit stage start/complete/failure events.
- Wrap stage actions with consistent telemetry hooks and state transitions.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from ..models.datatypes import PipelineState
from ..telemetry.logger import RunLogger

_StageResult = TypeVar("_StageResult")


class PipelineTelemetryMixin:
    """Provide stage-telemetry helper methods."""

    _run_logger: RunLogger | None
    _state: PipelineState

    def _on_stage_start(self, stage_name: str, **context: object) -> None:
        """Emit a start event to the structured logger."""

        if self._run_logger is not None:
            self._run_logger.log_stage_start(stage_name, **context)

    def _on_stage_complete(self, stage_name: str, **context: object) -> None:
        """Emit a stage-complete event to the structured logger."""

        if self._run_logger is not None:
            self._run_logger.log_stage_complete(stage_name, **context)

    def _on_stage_failure(self, stage_name: str, exc: Exception) -> None:
        """Emit a stage-failure event with sanitized exception metadata."""

        if self._run_logger is not None:
            self._run_logger.log_stage_failure(stage_name, type(exc).__name__)

    def _run_stage(
        self,
        stage_name: str,
        state: PipelineState,
        action: Callable[[], _StageResult],
    ) -> _StageResult:
        """Enter `state`, run one named stage, and emit telemetry events."""

        self._state = state
        self._on_stage_start(stage_name)
        try:
            result = action()
        except Exception as exc:
            self._state = PipelineState.FAILED
            self._on_stage_failure(stage_name, exc)
            raise
        self._on_stage_complete(stage_name)
        return result
