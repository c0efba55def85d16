"""Voice style loading and the published voice catalog.

Responsibilities:
- Flatten per-voice 3-D style arrays into float32 buffers with explicit shapes.
- Reject empty, ragged, or non-numeric style payloads.
- Describe the published voice identities.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from numbers import Real
from pathlib import Path
from typing import Any, Mapping

import numpy as np

from ..errors import FormatError
from ..models.datatypes import VoiceStyle


@dataclass(frozen=True, slots=True)
class VoiceProfile:
    """Declarative catalog entry for one published voice.

    Attributes:
        style_id: Style file identifier (`voice_styles/<style_id>.json`).
        name: Human-readable voice name.
        description: Short timbre description.
    """

    style_id: str
    name: str
    description: str

    @property
    def gender(self) -> str:
        return infer_gender(self.style_id)


VOICE_CATALOG: tuple[VoiceProfile, ...] = (
    VoiceProfile("M1", "Minjun", "Lively, confident male voice with a clear standard tone."),
    VoiceProfile("M2", "Seojun", "Deep, low male voice; calm, serious and steady."),
    VoiceProfile("M3", "Doyun", "Polished, authoritative male voice suited to presentations."),
    VoiceProfile("M4", "Yejun", "Soft, neutral male voice with a friendly, young feel."),
    VoiceProfile("M5", "Siu", "Warm, low male voice in a relaxed narration style."),
    VoiceProfile("F1", "Seoyeon", "Calm, slightly low female voice; steady and composed."),
    VoiceProfile("F2", "Seoyun", "Bright, cheerful female voice with youthful energy."),
    VoiceProfile("F3", "Jiwoo", "Clear, professional announcer-style female voice."),
    VoiceProfile("F4", "Hayun", "Crisp, confident and expressive female voice."),
    VoiceProfile("F5", "Haeun", "Kind, soft female voice; quiet and naturally soothing."),
)


def infer_gender(style_id: str) -> str:
    """Infer the gender tag from the style identifier prefix."""

    return "male" if style_id.startswith("M") else "female"


def find_voice_profile(style_id: str) -> VoiceProfile | None:
    """Return the catalog entry for a style id, if published."""

    return next((profile for profile in VOICE_CATALOG if profile.style_id == style_id), None)


def adapt_style(raw: Mapping[str, Any], style_id: str) -> VoiceStyle:
    """Build a `VoiceStyle` from a decoded style JSON object.

    Each of `style_ttl` and `style_dp` is either a nested 3-D numeric array or
    an object whose `data` field holds it. An object may instead carry a flat
    `data` list with a three-entry `dims` field.

    Raises:
        FormatError: If a field is missing, empty, ragged, or non-numeric.
    """

    if not isinstance(raw, Mapping):
        raise FormatError(f"Voice style `{style_id}` must be a JSON object.")

    style_ttl, ttl_shape = _flatten_style_field(raw, "style_ttl", style_id)
    style_dp, dp_shape = _flatten_style_field(raw, "style_dp", style_id)
    profile = find_voice_profile(style_id)
    return VoiceStyle(
        style_id=style_id,
        gender=infer_gender(style_id),
        style_ttl=style_ttl,
        style_ttl_shape=ttl_shape,
        style_dp=style_dp,
        style_dp_shape=dp_shape,
        name=profile.name if profile is not None else style_id,
    )


def load_voice_style(path: Path, style_id: str | None = None) -> VoiceStyle:
    """Load a style JSON file; the style id defaults to the file stem."""

    resolved_id = style_id or path.stem
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise FormatError(f"Voice style `{path}` is not valid JSON: {exc}") from exc
    return adapt_style(payload, resolved_id)


def _flatten_style_field(
    raw: Mapping[str, Any], key: str, style_id: str
) -> tuple[np.ndarray, tuple[int, int, int]]:
    """Flatten one style field into a float32 buffer and its 3-D shape."""

    if key not in raw:
        raise FormatError(f"Voice style `{style_id}` is missing `{key}`.")

    value = raw[key]
    dims = None
    if isinstance(value, Mapping):
        if "data" not in value:
            raise FormatError(f"Voice style `{style_id}` field `{key}` has no `data`.")
        dims = value.get("dims")
        value = value["data"]

    label = f"Voice style `{style_id}` field `{key}`"
    if dims is not None and isinstance(value, list) and value and not isinstance(value[0], list):
        return _flat_with_dims(value, dims, label)
    return _flatten_nested(value, label)


def _flatten_nested(value: object, label: str) -> tuple[np.ndarray, tuple[int, int, int]]:
    """Flatten a `[batch][row][col]` array depth-first with strict uniformity checks."""

    if not isinstance(value, list) or not value:
        raise FormatError(f"{label} must be a non-empty 3-D array.")
    first_batch = value[0]
    if not isinstance(first_batch, list) or not first_batch:
        raise FormatError(f"{label} must be a non-empty 3-D array.")
    first_row = first_batch[0]
    if not isinstance(first_row, list) or not first_row:
        raise FormatError(f"{label} must be a non-empty 3-D array.")

    shape = (len(value), len(first_batch), len(first_row))
    flat: list[float] = []
    for batch_index, batch in enumerate(value):
        if not isinstance(batch, list) or len(batch) != shape[1]:
            raise FormatError(f"{label} batch {batch_index} has a ragged row count.")
        for row_index, row in enumerate(batch):
            if not isinstance(row, list) or len(row) != shape[2]:
                raise FormatError(
                    f"{label} row {batch_index}/{row_index} has a ragged column count."
                )
            for cell in row:
                if isinstance(cell, bool) or not isinstance(cell, Real):
                    raise FormatError(f"{label} contains a non-numeric value.")
                flat.append(float(cell))
    return np.asarray(flat, dtype=np.float32), shape


def _flat_with_dims(
    value: list[object], dims: object, label: str
) -> tuple[np.ndarray, tuple[int, int, int]]:
    """Accept a flat `data` payload shaped by an explicit `dims` triple."""

    if (
        not isinstance(dims, list)
        or len(dims) != 3
        or any(isinstance(dim, bool) or not isinstance(dim, int) or dim <= 0 for dim in dims)
    ):
        raise FormatError(f"{label} `dims` must list three positive integers.")
    shape = (dims[0], dims[1], dims[2])
    if len(value) != shape[0] * shape[1] * shape[2]:
        raise FormatError(f"{label} data length {len(value)} does not match dims {list(shape)}.")
    if any(isinstance(cell, bool) or not isinstance(cell, Real) for cell in value):
        raise FormatError(f"{label} contains a non-numeric value.")
    return np.asarray(value, dtype=np.float32), shape
