"""
Ollama provider.

Talks to a local Ollama server over its native API:
    POST {host}/api/generate   newline-delimited JSON stream
    GET  {host}/api/tags       installed models
"""

from typing import Any, Dict, Iterator, List, Optional

import httpx
from loguru import logger

from aicoder.core.errors import (
    AICoderError,
    ModelNotFoundError,
    ProviderConnectionError,
    ProviderError,
    RequestTimeoutError,
    StreamError,
)
from aicoder.core.frames import Frame, iter_frames
from aicoder.core.runtime import (
    CompletionRequest,
    CompletionResponse,
    ProviderConfig,
    ResponseMetadata,
)
from aicoder.llm.base_client import BaseProvider

GENERATE_PATH = "/api/generate"
TAGS_PATH = "/api/tags"


def provider_error(message: str, model: str) -> AICoderError:
    """Map an error message from the server to the matching exception."""
    if "not found" in message.lower():
        return ModelNotFoundError(model)
    return ProviderError(message)


class OllamaProvider(BaseProvider):
    """Provider backed by a local Ollama server."""

    def __init__(
        self,
        config: Optional[ProviderConfig] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the Ollama provider.

        Args:
            config: Provider configuration (endpoint, timeout)
            http_client: Pre-built httpx client (tests pass one with a mock transport)
        """
        self.config = config or ProviderConfig()
        self.endpoint = self.config.endpoint.rstrip("/")

        # Generation can sit idle for a long time between tokens, so only
        # connecting is bounded.
        timeout = httpx.Timeout(self.config.timeout_secs, read=None)
        self.client = http_client or httpx.Client(base_url=self.endpoint, timeout=timeout)
        logger.info(f"Ollama provider initialized: {self.endpoint}")

    @property
    def name(self) -> str:
        return "ollama"

    def close(self) -> None:
        self.client.close()

    def _url(self, path: str) -> str:
        return f"{self.endpoint}{path}"

    def _payload(self, request: CompletionRequest, stream: bool, with_options: bool = False) -> Dict[str, Any]:
        """
        Build the /api/generate body.

        The streaming body is just model, prompt and stream, so the server's
        own limits apply and an answer is never cut off by num_predict.
        Profile options are only sent when asked for.
        """
        payload: Dict[str, Any] = {
            "model": request.model.name,
            "prompt": request.prompt,
            "stream": stream,
        }
        if with_options:
            payload["options"] = request.model.options()
        return payload

    def has_model(self, model: str) -> bool:
        """Check the server's installed models for `model`."""
        try:
            response = self.client.get(self._url(TAGS_PATH))
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(model, self.config.timeout_secs) from e
        except httpx.HTTPStatusError as e:
            raise ProviderError(f"{TAGS_PATH} returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise ProviderConnectionError(f"{self.endpoint}: {e}") from e
        except ValueError as e:
            raise ProviderError(f"invalid JSON from {TAGS_PATH}: {e}") from e

        names: List[str] = []
        for entry in data.get("models") or []:
            if isinstance(entry, dict):
                names.extend(n for n in (entry.get("name"), entry.get("model")) if n)

        if model in names:
            return True
        if ":" not in model:
            return f"{model}:latest" in names
        return False

    def stream_frames(self, request: CompletionRequest) -> Iterator[Frame]:
        """
        Stream frames from /api/generate.

        Raises:
            ProviderConnectionError: If the server cannot be reached
            RequestTimeoutError: If connecting times out
            StreamError: If reading the body fails mid-stream
            DecodeError: If the stream ends on a malformed frame
        """
        payload = self._payload(request, stream=True)
        logger.debug(f"POST {GENERATE_PATH} model={request.model.name} prompt_chars={len(request.prompt)}")

        try:
            with self.client.stream("POST", self._url(GENERATE_PATH), json=payload) as response:
                if response.is_error:
                    # Ollama reports errors as a JSON body with an "error" field
                    logger.warning(f"{GENERATE_PATH} returned HTTP {response.status_code}")
                yield from iter_frames(self._iter_body(response, request))
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(request.model.name, self.config.timeout_secs) from e
        except httpx.HTTPError as e:
            raise ProviderConnectionError(f"{self.endpoint}: {e}") from e

    def _iter_body(self, response: httpx.Response, request: CompletionRequest) -> Iterator[bytes]:
        try:
            yield from response.iter_bytes()
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(request.model.name, self.config.timeout_secs) from e
        except httpx.HTTPError as e:
            raise StreamError(str(e) or e.__class__.__name__) from e

    def generate_stream(self, request: CompletionRequest) -> Iterator[str]:
        """Yield text fragments; an error frame raises."""
        for frame in self.stream_frames(request):
            if frame.is_error:
                raise provider_error(frame.error, request.model.name)
            if frame.is_text and frame.text:
                yield frame.text

    def generate(self, request: CompletionRequest) -> CompletionResponse:
        """Generate a buffered completion (stream=false)."""
        payload = self._payload(request, stream=False, with_options=True)

        try:
            response = self.client.post(self._url(GENERATE_PATH), json=payload)
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(request.model.name, self.config.timeout_secs) from e
        except httpx.HTTPError as e:
            raise ProviderConnectionError(f"{self.endpoint}: {e}") from e

        parts: List[str] = []
        done = False
        for frame in iter_frames([response.content]):
            if frame.is_error:
                raise provider_error(frame.error, request.model.name)
            if frame.is_text:
                parts.append(frame.text)
            elif frame.is_done:
                done = True

        metadata = ResponseMetadata(model=request.model.name)
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            metadata.prompt_tokens = body.get("prompt_eval_count")
            metadata.completion_tokens = body.get("eval_count")
            metadata.model = body.get("model", metadata.model)

        return CompletionResponse(text="".join(parts), done=done, metadata=metadata)
