"""OpenAI-compatible chat completion providers.

OpenRouter and Groq both expose the ``/chat/completions`` endpoint of the
OpenAI API, including server-sent-event streaming where each event is a
``data: {...}`` line and the stream ends with ``data: [DONE]``.

Key features:
- Lazy ``httpx.AsyncClient`` shared across calls
- Uniform error taxonomy (see ``generation_pipeline.errors``)
- Optional streaming, switchable per instance
"""

import json
from collections.abc import AsyncIterator

import httpx

from generation_pipeline.config import settings
from generation_pipeline.errors import MalformedResponseError, MissingCredentialsError
from generation_pipeline.protocols import GenerationParams

from .http_errors import network_error, raise_for_provider_status

SYSTEM_PROMPT = (
    "You are an expert career and training content writer. "
    "Respond with a single JSON object and no additional commentary."
)


class OpenAICompatibleProvider:
    """Implementation of the GenerationProvider protocol for OpenAI-style APIs.

    This class satisfies the GenerationProvider protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        name: str,
        api_key: str | None,
        model: str,
        base_url: str,
        streaming: bool = True,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            name: Identifier used in logs and telemetry.
            api_key: Bearer token. A missing key fails every call immediately.
            model: Model identifier sent with each request.
            base_url: API root, without the ``/chat/completions`` suffix.
            streaming: Whether the orchestrator should use ``stream``.
            timeout: Transport timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self._name = name
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._streaming = streaming
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @property
    def name(self) -> str:
        return self._name

    @property
    def supports_streaming(self) -> bool:
        return self._streaming

    def _headers(self) -> dict[str, str]:
        if not self._api_key:
            raise MissingCredentialsError(self._name, "API key is not configured")
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def _payload(self, prompt: str, params: GenerationParams, stream: bool) -> dict:
        return {
            "model": self._model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": params.temperature,
            "max_tokens": params.max_tokens,
            "stream": stream,
        }

    async def generate(self, prompt: str, params: GenerationParams) -> str:
        headers = self._headers()
        url = f"{self._base_url}/chat/completions"

        try:
            response = await self.client.post(
                url, json=self._payload(prompt, params, stream=False), headers=headers
            )
        except httpx.HTTPError as e:
            raise network_error(self._name, e) from e

        raise_for_provider_status(self._name, response)

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (json.JSONDecodeError, KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError(self._name, f"unexpected response body: {e}") from e

        if not isinstance(content, str):
            raise MalformedResponseError(self._name, "message content is not text")
        return content

    async def stream(self, prompt: str, params: GenerationParams) -> AsyncIterator[str]:
        headers = self._headers()
        url = f"{self._base_url}/chat/completions"

        try:
            async with self.client.stream(
                "POST", url, json=self._payload(prompt, params, stream=True), headers=headers
            ) as response:
                raise_for_provider_status(self._name, response)
                async for line in response.aiter_lines():
                    if not line.startswith("data:"):
                        continue
                    data = line[len("data:"):].strip()
                    if data == "[DONE]":
                        break
                    fragment = self._parse_event(data)
                    if fragment:
                        yield fragment
        except httpx.HTTPError as e:
            raise network_error(self._name, e) from e

    def _parse_event(self, data: str) -> str | None:
        try:
            event = json.loads(data)
            return event["choices"][0].get("delta", {}).get("content")
        except (json.JSONDecodeError, KeyError, IndexError, TypeError, AttributeError) as e:
            raise MalformedResponseError(self._name, f"unparseable stream event: {e}") from e

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class OpenRouterProvider(OpenAICompatibleProvider):
    """OpenRouter (hosted Llama and others), streaming enabled."""

    @classmethod
    def create(
        cls,
        api_key: str | None = None,
        model: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "OpenRouterProvider":
        return cls(
            name="openrouter",
            api_key=api_key or settings.openrouter_api_key,
            model=model or settings.openrouter_model,
            base_url=settings.openrouter_base_url,
            streaming=True,
            transport=transport,
        )


class GroqProvider(OpenAICompatibleProvider):
    """Groq (Mixtral), single-shot by default."""

    @classmethod
    def create(
        cls,
        api_key: str | None = None,
        model: str | None = None,
        streaming: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "GroqProvider":
        return cls(
            name="groq",
            api_key=api_key or settings.groq_api_key,
            model=model or settings.groq_model,
            base_url=settings.groq_base_url,
            streaming=streaming,
            transport=transport,
        )
