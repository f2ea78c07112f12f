"""
ai-coder - Local GPU-accelerated AI coding CLI

Streams answers from a local Ollama model and, in agent mode, runs the
shell blocks it suggests after asking for approval.
"""

__version__ = "0.1.0"

from aicoder.core.pipeline import Pipeline, RunResult
from aicoder.core.runtime import LocalRuntime, ProviderConfig
from aicoder.core.model_profile import ModelProfile

__all__ = [
    "Pipeline",
    "RunResult",
    "LocalRuntime",
    "ProviderConfig",
    "ModelProfile",
]
