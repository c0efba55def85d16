"""Inference engine seam.

This package defines the session protocol the pipeline depends on, the
onnxruntime adapter, and the loaded model context.
"""

from .context import STAGE_NAMES, ModelContext, SessionFactory, load_model_context
from .session import (
    CPU_PROVIDER,
    InferenceSession,
    OnnxInferenceSession,
    resolve_execution_providers,
)

__all__ = [
    "CPU_PROVIDER",
    "STAGE_NAMES",
    "InferenceSession",
    "ModelContext",
    "OnnxInferenceSession",
    "SessionFactory",
    "load_model_context",
    "resolve_execution_providers",
]
