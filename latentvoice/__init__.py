"""Top-level package for latentvoice.

This package runs on-device text-to-speech with a four-stage ONNX latent
denoising pipeline. The main orchestration entry point is `SynthesisPipeline`.
"""

from .pipeline import SynthesisPipeline

__all__ = ["SynthesisPipeline", "__version__"]

__version__ = "0.1.0"
