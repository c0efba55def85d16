"""Configuration model and loaders for latentvoice.

Responsibilities:
- Define runtime configuration as a typed dataclass.
- Provide loader entry points for file- and environment-based configuration.

Key types:
- `SynthesisConfig`: normalized runtime settings for one synthesis run.
- `ConfigLoader`: static construction helpers for `SynthesisConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .models.datatypes import SUPPORTED_LANGUAGES
from .parsing import normalize_optional_string, parse_non_negative_float, parse_positive_int
from .text.normalizer import SUPPORTED_NORMALIZATION_FORMS


_DEFAULT_ASSETS_DIR = Path("assets")
_DEFAULT_OUTPUT_PATH = Path("output.wav")
_DEFAULT_PROVIDERS = ("CPUExecutionProvider",)


@dataclass(slots=True)
class SynthesisConfig:
    """Runtime configuration for one synthesis run.

    Attributes:
        assets_dir: Directory holding `onnx/` models and `voice_styles/`.
        output_path: Destination WAV file.
        language: Language code, defaulting to Korean (`ko`).
        voice: Voice style identifier.
        total_steps: Denoising step count.
        speed: Speech speed multiplier.
        silence_seconds: Silence inserted between text chunks.
        max_chunk_chars: Chunk size for long text; `None` disables chunking.
        seed: Optional noise seed for reproducible output.
        normalization_form: Unicode decomposition form (`NFD` or `NFKD`).
        providers: Preferred onnxruntime execution providers, in order.
    """

    assets_dir: Path = _DEFAULT_ASSETS_DIR
    output_path: Path = _DEFAULT_OUTPUT_PATH
    language: str = "ko"
    voice: str = "M1"
    total_steps: int = 5
    speed: float = 1.0
    silence_seconds: float = 0.3
    max_chunk_chars: int | None = 300
    seed: int | None = None
    normalization_form: str = "NFD"
    providers: tuple[str, ...] = field(default_factory=lambda: _DEFAULT_PROVIDERS)

    def validate(self) -> None:
        """Validate runtime configuration values before pipeline execution."""

        if self.language not in SUPPORTED_LANGUAGES:
            supported = ", ".join(SUPPORTED_LANGUAGES)
            raise ValueError(f"Unsupported `language` value `{self.language}`; supported: {supported}.")
        if not isinstance(self.voice, str) or not self.voice.strip():
            raise ValueError("`voice` must be a non-empty string.")
        if self.total_steps < 1:
            raise ValueError("`total_steps` must be a positive integer.")
        if not self.speed > 0:
            raise ValueError("`speed` must be a positive number.")
        if self.silence_seconds < 0:
            raise ValueError("`silence_seconds` must be a non-negative number.")
        if self.max_chunk_chars is not None and self.max_chunk_chars <= 0:
            raise ValueError("`max_chunk_chars` must be a positive integer.")
        if self.normalization_form not in SUPPORTED_NORMALIZATION_FORMS:
            supported = ", ".join(sorted(SUPPORTED_NORMALIZATION_FORMS))
            raise ValueError(
                f"Unsupported `normalization_form` value `{self.normalization_form}`; "
                f"supported: {supported}."
            )
        if not self.providers:
            raise ValueError("`providers` must list at least one execution provider.")

    def with_overrides(self, **overrides: object) -> SynthesisConfig:
        """Return a validated copy with non-`None` overrides applied.

        A `max_chunk_chars` override of `0` disables chunking, as in config files.
        """

        applied = {key: value for key, value in overrides.items() if value is not None}
        if applied.get("max_chunk_chars") == 0:
            applied["max_chunk_chars"] = None
        updated = replace(self, **applied)
        updated.validate()
        return updated


class ConfigLoader:
    """Factory methods for creating `SynthesisConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "assets_dir",
            "output_path",
            "language",
            "voice",
            "total_steps",
            "speed",
            "silence_seconds",
            "max_chunk_chars",
            "seed",
            "normalization_form",
            "providers",
        }
    )

    @staticmethod
    def from_yaml(path: Path) -> SynthesisConfig:
        """Create a validated config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        payload = yaml.safe_load(path_text)
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> SynthesisConfig:
        """Create a validated config from `LATENTVOICE_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        payload: dict[str, Any] = {}
        for key in ConfigLoader._SUPPORTED_YAML_KEYS:
            value = normalize_optional_string(env_map.get(f"LATENTVOICE_{key.upper()}"))
            if value is not None:
                payload[key] = value
        return ConfigLoader._build_config_from_mapping(payload, source_label="Environment")

    @staticmethod
    def _build_config_from_mapping(
        payload: Mapping[str, Any], source_label: str
    ) -> SynthesisConfig:
        """Build a validated config from a normalized mapping payload."""

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(str(key) for key in unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        defaults = SynthesisConfig()
        try:
            config = SynthesisConfig(
                assets_dir=ConfigLoader._optional_path(payload, "assets_dir")
                or defaults.assets_dir,
                output_path=ConfigLoader._optional_path(payload, "output_path")
                or defaults.output_path,
                language=ConfigLoader._optional_string(payload, "language") or defaults.language,
                voice=ConfigLoader._optional_string(payload, "voice") or defaults.voice,
                total_steps=ConfigLoader._optional_int(
                    payload, "total_steps", defaults.total_steps
                ),
                speed=ConfigLoader._optional_float(payload, "speed", defaults.speed, strict=True),
                silence_seconds=ConfigLoader._optional_float(
                    payload, "silence_seconds", defaults.silence_seconds
                ),
                max_chunk_chars=ConfigLoader._optional_chunk_size(
                    payload, defaults.max_chunk_chars
                ),
                seed=ConfigLoader._optional_seed(payload),
                normalization_form=(
                    ConfigLoader._optional_string(payload, "normalization_form") or "NFD"
                ).upper(),
                providers=ConfigLoader._optional_providers(payload) or defaults.providers,
            )
        except ValueError as exc:
            raise ValueError(f"{source_label}: {exc}") from exc
        config.validate()
        return config

    @staticmethod
    def _optional_string(payload: Mapping[str, Any], key: str) -> str | None:
        """Read an optional string field and normalize blank values to `None`."""

        if key not in payload:
            return None
        return normalize_optional_string(payload[key])

    @staticmethod
    def _optional_path(payload: Mapping[str, Any], key: str) -> Path | None:
        """Read an optional path-like field."""

        value = ConfigLoader._optional_string(payload, key)
        return Path(value) if value is not None else None

    @staticmethod
    def _optional_int(payload: Mapping[str, Any], key: str, default: int) -> int:
        """Read and validate a positive integer payload field."""

        if key not in payload or normalize_optional_string(payload[key]) is None:
            return default
        return parse_positive_int(payload[key], key)

    @staticmethod
    def _optional_float(
        payload: Mapping[str, Any], key: str, default: float, strict: bool = False
    ) -> float:
        """Read and validate a non-negative (or positive when `strict`) number field."""

        if key not in payload or normalize_optional_string(payload[key]) is None:
            return default
        return parse_non_negative_float(payload[key], key, strict=strict)

    @staticmethod
    def _optional_seed(payload: Mapping[str, Any]) -> int | None:
        """Read an optional non-negative integer seed."""

        raw = ConfigLoader._optional_string(payload, "seed")
        if raw is None:
            return None
        if isinstance(payload["seed"], bool) or not raw.isdigit():
            raise ValueError("`seed` must be a non-negative integer.")
        return int(raw)

    @staticmethod
    def _optional_providers(payload: Mapping[str, Any]) -> tuple[str, ...] | None:
        """Read an optional provider list from a sequence or comma-separated string."""

        if "providers" not in payload:
            return None
        raw = payload["providers"]
        items = raw.split(",") if isinstance(raw, str) else raw
        if not isinstance(items, (list, tuple)):
            raise ValueError("`providers` must be a list of execution provider names.")
        providers = tuple(
            name for name in (normalize_optional_string(item) for item in items) if name
        )
        return providers or None

    @staticmethod
    def _optional_chunk_size(payload: Mapping[str, Any], default: int | None) -> int | None:
        """Read the chunk size; `0` disables chunking."""

        raw = ConfigLoader._optional_string(payload, "max_chunk_chars")
        if raw is None:
            return default
        if raw == "0":
            return None
        return parse_positive_int(payload["max_chunk_chars"], "max_chunk_chars")
