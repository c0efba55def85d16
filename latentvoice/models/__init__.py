"""Shared typed data models for latentvoice.

This package contains dataclasses used across pipeline modules to avoid
cross-module coupling and circular imports.
"""

from .datatypes import (
    SUPPORTED_LANGUAGES,
    AudioSettings,
    PipelineState,
    ProgressCallback,
    SynthesisProgress,
    SynthesisRequest,
    SynthesisResult,
    TokenSequence,
    VoiceStyle,
)

__all__ = [
    "SUPPORTED_LANGUAGES",
    "AudioSettings",
    "PipelineState",
    "ProgressCallback",
    "SynthesisProgress",
    "SynthesisRequest",
    "SynthesisResult",
    "TokenSequence",
    "VoiceStyle",
]
