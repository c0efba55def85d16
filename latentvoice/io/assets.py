"""Model asset directory layout.

Responsibilities:
- Resolve model, table, config, and voice style paths inside an asset directory.
- Fail early with actionable errors when required files are missing.
- Read optional audio geometry overrides from `onnx/tts.json`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from ..errors import ConfigurationError, FormatError
from ..models.datatypes import AudioSettings


_MODEL_FILES = {
    "duration_predictor": "onnx/duration_predictor.onnx",
    "text_encoder": "onnx/text_encoder.onnx",
    "vector_estimator": "onnx/vector_estimator.onnx",
    "vocoder": "onnx/vocoder.onnx",
}


class AssetLayout:
    """Path resolution for one model asset directory."""

    def __init__(self, root: Path) -> None:
        """Initialize the layout with the asset root directory."""

        self.root = root

    def model_path(self, stage: str) -> Path:
        """Return the ONNX model path for a stage name."""

        return self.root / _MODEL_FILES[stage]

    @property
    def unicode_indexer_path(self) -> Path:
        return self.root / "onnx" / "unicode_indexer.json"

    @property
    def tts_config_path(self) -> Path:
        return self.root / "onnx" / "tts.json"

    def voice_style_path(self, style_id: str) -> Path:
        """Return the style JSON path for a voice identifier."""

        return self.root / "voice_styles" / f"{style_id}.json"

    def available_voice_ids(self) -> list[str]:
        """Return sorted style ids that have a JSON file under `voice_styles/`."""

        styles_dir = self.root / "voice_styles"
        if not styles_dir.is_dir():
            return []
        return sorted(path.stem for path in styles_dir.glob("*.json"))

    def require_models(self) -> None:
        """Raise `ConfigurationError` when any model file or the index table is missing."""

        required = [self.model_path(stage) for stage in _MODEL_FILES]
        required.append(self.unicode_indexer_path)
        missing = [str(path) for path in required if not path.is_file()]
        if missing:
            raise ConfigurationError(
                f"Missing model assets: {', '.join(missing)}.",
                stage="load",
                hint="Point `--assets` at a directory containing `onnx/` and `voice_styles/`.",
            )


def load_audio_settings(path: Path) -> AudioSettings:
    """Read `tts.json` geometry overrides, or return defaults when the file is absent."""

    if not path.is_file():
        return AudioSettings()
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise FormatError(f"Model config `{path}` is not valid JSON: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise FormatError(f"Model config `{path}` must be a JSON object.")

    defaults = AudioSettings()
    autoencoder = _section(payload, "ae", path)
    text_to_latent = _section(payload, "ttl", path)
    return AudioSettings(
        sample_rate=_positive_int(autoencoder, "sample_rate", defaults.sample_rate, path),
        latent_dim=_positive_int(text_to_latent, "latent_dim", defaults.latent_dim, path),
        chunk_compress_factor=_positive_int(
            text_to_latent, "chunk_compress_factor", defaults.chunk_compress_factor, path
        ),
        base_chunk_size=_positive_int(
            autoencoder, "base_chunk_size", defaults.base_chunk_size, path
        ),
    )


def _section(payload: Mapping[str, Any], key: str, path: Path) -> Mapping[str, Any]:
    """Return a nested config section, treating a missing one as empty."""

    section = payload.get(key, {})
    if not isinstance(section, Mapping):
        raise FormatError(f"Model config `{path}` field `{key}` must be an object.")
    return section


def _positive_int(section: Mapping[str, Any], key: str, default: int, path: Path) -> int:
    """Read an optional positive integer from a config section."""

    if key not in section:
        return default
    value = section[key]
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise FormatError(f"Model config `{path}` field `{key}` must be a positive integer.")
    return value
