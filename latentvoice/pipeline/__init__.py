"""latentvoice pipeline package.

This package contains the synthesis orchestrator, its stage telemetry
helpers, and the progress/cancellation channel.
"""

from .orchestrator import SynthesisPipeline
from .progress import CancellationToken, ProgressReporter

__all__ = ["CancellationToken", "ProgressReporter", "SynthesisPipeline"]
