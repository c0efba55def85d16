"""Telemetry and observability helpers.

This package emits deterministic run events for auditing synthesis runs.
"""

from .logger import RunLogger

__all__ = ["RunLogger"]
