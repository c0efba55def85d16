"""Domain exceptions for synthesis pipeline and CLI diagnostics."""

from __future__ import annotations


class LatentVoiceError(RuntimeError):
    """Base error carrying the pipeline stage that failed."""

    default_stage = "pipeline"

    def __init__(
        self,
        detail: str,
        *,
        stage: str | None = None,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped pipeline error."""

        super().__init__(detail)
        self.stage = stage or self.default_stage
        self.detail = detail
        self.hint = hint


class ConfigurationError(LatentVoiceError):
    """Raised when runtime configuration or a required table is unusable."""

    default_stage = "config"


class FormatError(LatentVoiceError):
    """Raised when a style, index table, or model config payload is malformed."""

    default_stage = "format"


class UnsupportedLanguageError(LatentVoiceError):
    """Raised when a language code is outside the supported set."""

    default_stage = "language"

    def __init__(self, language: str, supported: tuple[str, ...]) -> None:
        """Initialize with the rejected language and the supported codes."""

        super().__init__(
            f"Unsupported language `{language}`.",
            hint=f"Use one of: {', '.join(supported)}.",
        )
        self.language = language
        self.supported = supported


class InferenceStageError(LatentVoiceError):
    """Raised when one named inference stage call fails."""

    default_stage = "inference"


class NotReadyError(LatentVoiceError):
    """Raised when synthesis is requested before models are loaded or while busy."""

    default_stage = "load"


class SynthesisCancelledError(LatentVoiceError):
    """Raised when a cancellation request is observed at a stage boundary."""

    default_stage = "cancelled"
