"""
Provider layer for ai-coder.
Provides a unified interface for local model backends.
"""

from aicoder.llm.base_client import BaseProvider
from aicoder.llm.ollama_client import OllamaProvider
from aicoder.llm.mock_client import MockProvider
from aicoder.llm.llm_factory import create_provider, create_runtime

__all__ = [
    "BaseProvider",
    "OllamaProvider",
    "MockProvider",
    "create_provider",
    "create_runtime",
]
