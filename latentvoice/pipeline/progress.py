"""Progress reporting and cancellation for synthesis runs.

Responsibilities:
- Forward checkpoint notifications to an optional caller callback.
- Rescale per-chunk checkpoints when long text is synthesized in chunks.
- Carry a cooperative cancellation flag checked at stage boundaries.
"""

from __future__ import annotations

from ..errors import SynthesisCancelledError
from ..models.datatypes import ProgressCallback, ProgressStage, SynthesisProgress


class CancellationToken:
    """Cooperative cancellation flag shared between caller and pipeline."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Request cancellation at the next stage boundary."""

        self._cancelled = True

    def raise_if_cancelled(self, stage: str) -> None:
        """Raise `SynthesisCancelledError` when cancellation was requested."""

        if self._cancelled:
            raise SynthesisCancelledError(
                f"Synthesis cancelled before `{stage}`.",
                hint="Submit the request again to restart synthesis from scratch.",
            )


class ProgressReporter:
    """Emit progress checkpoints, scaled across text chunks."""

    def __init__(self, callback: ProgressCallback | None, chunk_count: int = 1) -> None:
        """Initialize with the caller callback and the number of text chunks."""

        self._callback = callback
        self._chunk_count = max(1, chunk_count)
        self._chunk_index = 0

    def begin_chunk(self, chunk_index: int) -> None:
        """Select the 0-based chunk subsequent checkpoints belong to."""

        self._chunk_index = chunk_index

    def emit(self, stage: ProgressStage, progress: float, message: str) -> None:
        """Emit one checkpoint; `progress` is relative to the current chunk."""

        if self._callback is None:
            return
        if self._chunk_count > 1 and stage != "complete":
            progress = (self._chunk_index * 100 + progress) / self._chunk_count
            message = f"[{self._chunk_index + 1}/{self._chunk_count}] {message}"
        self._callback(SynthesisProgress(stage=stage, progress=progress, message=message))
