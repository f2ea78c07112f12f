"""
Error types for the ai-coder runtime and pipeline.

Fatal pipeline errors (decode, stream, approval I/O) unwind to the CLI.
Provider error frames and failed commands are reported as data instead.
"""

from typing import Optional


class AICoderError(Exception):
    """Base class for all ai-coder runtime errors."""


class ModelNotFoundError(AICoderError):
    """Model was not found or not loaded in the provider."""

    def __init__(self, model: str):
        self.model = model
        super().__init__(f"Model not found: {model}")


class ContextOverflowError(AICoderError):
    """Context window exceeded for the model."""

    def __init__(self, model: str, tokens: int, max_tokens: int):
        self.model = model
        self.tokens = tokens
        self.max_tokens = max_tokens
        super().__init__(
            f"Context overflow for model {model}: {tokens} tokens > {max_tokens} max"
        )


class RequestTimeoutError(AICoderError):
    """Request to the provider timed out."""

    def __init__(self, model: str, duration_secs: float):
        self.model = model
        self.duration_secs = duration_secs
        super().__init__(f"Timeout for model {model} after {duration_secs:g} seconds")


class ProviderConnectionError(AICoderError):
    """Could not reach the provider."""

    def __init__(self, message: str):
        super().__init__(f"Connection error: {message}")


class ProviderError(AICoderError):
    """The provider returned an error."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Provider error: {message}")


class InvalidConfigError(AICoderError):
    """Invalid model profile or provider configuration."""

    def __init__(self, message: str):
        super().__init__(f"Invalid config: {message}")


class DecodeError(AICoderError):
    """A stream line could not be parsed as a frame at end of stream."""

    def __init__(self, message: str, data: Optional[bytes] = None):
        self.data = data
        super().__init__(f"Decode error: {message}")


class StreamError(AICoderError):
    """Reading the response body failed mid-stream."""

    def __init__(self, message: str):
        super().__init__(f"Stream error: {message}")


class ApprovalIOError(AICoderError):
    """Interactive approval input could not be read."""

    def __init__(self, message: str):
        super().__init__(f"Could not read approval input: {message}")
