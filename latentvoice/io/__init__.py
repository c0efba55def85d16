"""Filesystem input components for model assets."""

from .assets import AssetLayout, load_audio_settings

__all__ = ["AssetLayout", "load_audio_settings"]
