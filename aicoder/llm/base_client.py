"""
Base provider interface.
All local model backends must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Iterator

from aicoder.core.frames import Frame
from aicoder.core.runtime import CompletionRequest, CompletionResponse


class BaseProvider(ABC):
    """Abstract base class for provider backends."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (e.g. "ollama")."""

    @abstractmethod
    def has_model(self, model: str) -> bool:
        """
        Check if a model is available.

        Args:
            model: Model identifier

        Returns:
            True if the provider can serve the model
        """

    @abstractmethod
    def generate(self, request: CompletionRequest) -> CompletionResponse:
        """
        Generate a completion - buffered response.

        Args:
            request: Validated completion request

        Returns:
            CompletionResponse with the full text
        """

    @abstractmethod
    def generate_stream(self, request: CompletionRequest) -> Iterator[str]:
        """
        Generate a completion - streaming response.

        Args:
            request: Validated completion request

        Yields:
            Text fragments as they arrive
        """

    def stream_frames(self, request: CompletionRequest) -> Iterator[Frame]:
        """
        Stream the completion as frames.

        Default implementation: wrap generate_stream fragments and finish
        with a completion frame.
        """
        for fragment in self.generate_stream(request):
            yield Frame.text_fragment(fragment)
        yield Frame.completion()

    def close(self) -> None:
        """Release any held resources. Nothing to do by default."""

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.__class__.__name__}(name={self.name})"
