"""Structured run logging utilities.

Responsibilities:
- Emit concise, deterministic phase-level runtime logs through `loguru`.
- Keep context values shell-safe so log lines stay grep-friendly.
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger as _loguru_logger

_SAFE_PUNCTUATION = frozenset("-_.:/")


def _token(value: object) -> str:
    """Render one context value as a single whitespace-free token."""

    text = str(value).strip()
    if not text:
        return "none"
    return "".join(char if char.isalnum() or char in _SAFE_PUNCTUATION else "_" for char in text)


def _context_suffix(context: dict[str, object]) -> str:
    """Render `key=value` pairs sorted by key, with a leading space when non-empty."""

    return "".join(f" {key}={_token(context[key])}" for key in sorted(context))


class RunLogger:
    """Emit deterministic phase logs for CLI-observable pipeline activity.

    Constructing a logger replaces existing `loguru` sinks with one plain
    `{message}` sink, so the last constructed logger owns the output.
    """

    def __init__(self, sink: TextIO | None = None, level: str = "INFO") -> None:
        """Initialize logger sink and configure deterministic formatting."""

        self._sink = sink or sys.stderr
        _loguru_logger.remove()
        _loguru_logger.add(self._sink, format="{message}", level=level, colorize=False)

    def log_event(self, level: str, event: str, stage: str, **context: object) -> None:
        """Emit one structured runtime log line."""

        _loguru_logger.log(
            level, f"[phase] level={level} stage={stage} event={event}{_context_suffix(context)}"
        )

    def log_stage_start(self, stage: str, **context: object) -> None:
        self.log_event("INFO", "start", stage, **context)

    def log_stage_complete(self, stage: str, **context: object) -> None:
        self.log_event("INFO", "complete", stage, **context)

    def log_stage_failure(self, stage: str, error_type: str) -> None:
        """Emit a stage-failure event carrying only the exception type."""

        self.log_event("ERROR", "failure", stage, error_type=error_type)
