"""Voice style components.

This package contains the style adapter and the published voice catalog used
by the synthesis pipeline.
"""

from .voices import (
    VOICE_CATALOG,
    VoiceProfile,
    adapt_style,
    find_voice_profile,
    infer_gender,
    load_voice_style,
)

__all__ = [
    "VOICE_CATALOG",
    "VoiceProfile",
    "adapt_style",
    "find_voice_profile",
    "infer_gender",
    "load_voice_style",
]
