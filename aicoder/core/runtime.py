"""
Local model runtime.

Validates requests against the model profile, then hands them to a provider
backend (Ollama, or the mock used in tests).
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Optional

from loguru import logger

from aicoder.core.errors import ContextOverflowError
from aicoder.core.frames import Frame
from aicoder.core.model_profile import ModelProfile

if TYPE_CHECKING:
    from aicoder.llm.base_client import BaseProvider

# Rough estimate: ~4 chars per token
CHARS_PER_TOKEN = 4


@dataclass
class ProviderConfig:
    """Configuration for a provider backend."""
    provider: str = "ollama"
    endpoint: str = "http://localhost:11434"
    timeout_secs: float = 300
    # Carried for configuration files; requests are not retried
    max_retries: int = 3


@dataclass
class ResponseMetadata:
    """Metadata about a completion response."""
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    model: Optional[str] = None


@dataclass
class CompletionRequest:
    """Request to generate a completion."""
    prompt: str
    model: ModelProfile
    stream: bool = True

    def estimated_tokens(self) -> int:
        return len(self.prompt) // CHARS_PER_TOKEN + self.model.max_tokens

    def validate(self) -> None:
        """
        Validate the request against the model's constraints.

        Raises:
            InvalidConfigError: If the model profile is invalid
            ContextOverflowError: If prompt plus max output tokens exceed the context window
        """
        self.model.validate()

        estimated = self.estimated_tokens()
        if estimated > self.model.context_window:
            raise ContextOverflowError(
                model=self.model.name,
                tokens=estimated,
                max_tokens=self.model.context_window,
            )


@dataclass
class CompletionResponse:
    """Buffered response from a provider."""
    text: str
    done: bool
    metadata: ResponseMetadata = field(default_factory=ResponseMetadata)


class LocalRuntime:
    """Runtime managing provider interactions."""

    def __init__(self, config: ProviderConfig, provider: "BaseProvider"):
        self.config = config
        self.provider = provider
        logger.debug(f"LocalRuntime initialized: {provider} at {config.endpoint}")

    def _request(self, prompt: str, model: ModelProfile) -> CompletionRequest:
        model.validate()
        request = CompletionRequest(prompt=prompt, model=model)
        request.validate()
        return request

    def generate(self, prompt: str, model: ModelProfile) -> CompletionResponse:
        """Generate text with a buffered response."""
        request = self._request(prompt, model)
        request.stream = False
        return self.provider.generate(request)

    def generate_stream(self, prompt: str, model: ModelProfile) -> Iterator[str]:
        """Generate text with a streaming response."""
        request = self._request(prompt, model)
        return self.provider.generate_stream(request)

    def stream_frames(self, prompt: str, model: ModelProfile) -> Iterator[Frame]:
        """
        Stream raw frames, leaving provider errors to the caller.

        The prompt is sent as-is: no context estimate is applied, and an
        oversized prompt is for the server to reject.
        """
        request = CompletionRequest(prompt=prompt, model=model)
        return self.provider.stream_frames(request)

    def has_model(self, model: str) -> bool:
        return self.provider.has_model(model)

    def close(self) -> None:
        """Release the provider's connections."""
        self.provider.close()
