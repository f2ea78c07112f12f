"""
Mock provider used for offline mode and tests.
Generates deterministic responses without network access.
"""

import re
from typing import Iterable, Iterator, Optional

from aicoder.core.errors import ProviderConnectionError, ProviderError
from aicoder.core.frames import Frame
from aicoder.core.runtime import CompletionRequest, CompletionResponse, ResponseMetadata
from aicoder.llm.base_client import BaseProvider

DEFAULT_MOCK_RESPONSE = (
    "Here is a command that shows where you are:\n"
    "```bash\n"
    "pwd\n"
    "```\n"
)


class MockProvider(BaseProvider):
    """Provider returning a fixed response, streamed word by word."""

    def __init__(
        self,
        response: str = DEFAULT_MOCK_RESPONSE,
        models: Optional[Iterable[str]] = None,
        should_error: bool = False,
    ):
        self.response = response
        self.models = set(models) if models is not None else {"test-model"}
        self.should_error = should_error
        self.requests = []
        self.closed = False

    @property
    def name(self) -> str:
        return "mock"

    def with_models(self, models: Iterable[str]) -> "MockProvider":
        self.models = set(models)
        return self

    def with_error(self) -> "MockProvider":
        self.should_error = True
        return self

    def close(self) -> None:
        self.closed = True

    def has_model(self, model: str) -> bool:
        if self.should_error:
            raise ProviderConnectionError("mock error")
        return model in self.models

    def generate_stream(self, request: CompletionRequest) -> Iterator[str]:
        if self.should_error:
            raise ProviderError("mock error")
        self.requests.append(request)
        for word in self.response.split():
            yield word + " "

    def stream_frames(self, request: CompletionRequest) -> Iterator[Frame]:
        """
        Stream the response with its whitespace intact.

        generate_stream splits on whitespace like a token stream would, which
        loses line breaks; the pipeline needs them to find code fences.
        """
        if self.should_error:
            raise ProviderError("mock error")
        self.requests.append(request)
        for piece in re.findall(r"\S+\s*|\s+", self.response):
            yield Frame.text_fragment(piece)
        yield Frame.completion()

    def generate(self, request: CompletionRequest) -> CompletionResponse:
        if self.should_error:
            raise ProviderError("mock error")
        self.requests.append(request)
        return CompletionResponse(
            text=self.response,
            done=True,
            metadata=ResponseMetadata(model=request.model.name),
        )
