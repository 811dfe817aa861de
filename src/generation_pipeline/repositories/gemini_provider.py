"""Google Gemini provider.

Uses the Generative Language REST API directly over httpx:

- ``POST {base}/models/{model}:generateContent`` for single-shot calls
- ``POST {base}/models/{model}:streamGenerateContent?alt=sse`` for streaming,
  where every ``data:`` line carries a partial ``GenerateContentResponse``

Requirements:
    - ``GEMINI_API_KEY`` set in the environment (or passed to ``create``)
"""

import json
from collections.abc import AsyncIterator

import httpx

from generation_pipeline.config import settings
from generation_pipeline.errors import MalformedResponseError, MissingCredentialsError
from generation_pipeline.protocols import GenerationParams

from .http_errors import network_error, raise_for_provider_status


class GeminiProvider:
    """Gemini implementation of the GenerationProvider protocol.

    Example:
        ```python
        provider = GeminiProvider.create()
        text = await provider.generate("Write a plan...", GenerationParams())
        ```
    """

    name = "gemini"

    def __init__(
        self,
        api_key: str | None,
        model: str,
        base_url: str,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def create(
        cls,
        api_key: str | None = None,
        model: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "GeminiProvider":
        """Factory method to create GeminiProvider with defaults from settings."""
        return cls(
            api_key=api_key or settings.gemini_api_key,
            model=model or settings.gemini_model,
            base_url=settings.gemini_base_url,
            transport=transport,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._client

    @property
    def supports_streaming(self) -> bool:
        return True

    def _headers(self) -> dict[str, str]:
        if not self._api_key:
            raise MissingCredentialsError(self.name, "GEMINI_API_KEY is not configured")
        return {"x-goog-api-key": self._api_key, "Content-Type": "application/json"}

    @staticmethod
    def _payload(prompt: str, params: GenerationParams) -> dict:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": params.temperature,
                "maxOutputTokens": params.max_tokens,
                "topK": 40,
                "topP": 0.95,
            },
        }

    def _extract_text(self, data: dict) -> str:
        """Concatenate the text parts of the first candidate."""
        try:
            parts = data["candidates"][0]["content"]["parts"]
            return "".join(part.get("text", "") for part in parts)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise MalformedResponseError(self.name, f"no candidate text in response: {e}") from e

    async def generate(self, prompt: str, params: GenerationParams) -> str:
        headers = self._headers()
        url = f"{self._base_url}/models/{self._model}:generateContent"

        try:
            response = await self.client.post(url, json=self._payload(prompt, params), headers=headers)
        except httpx.HTTPError as e:
            raise network_error(self.name, e) from e

        raise_for_provider_status(self.name, response)

        try:
            data = response.json()
        except json.JSONDecodeError as e:
            raise MalformedResponseError(self.name, f"response is not JSON: {e}") from e
        return self._extract_text(data)

    async def stream(self, prompt: str, params: GenerationParams) -> AsyncIterator[str]:
        headers = self._headers()
        url = f"{self._base_url}/models/{self._model}:streamGenerateContent"

        try:
            async with self.client.stream(
                "POST",
                url,
                params={"alt": "sse"},
                json=self._payload(prompt, params),
                headers=headers,
            ) as response:
                raise_for_provider_status(self.name, response)
                async for line in response.aiter_lines():
                    if not line.startswith("data:"):
                        continue
                    try:
                        event = json.loads(line[len("data:"):].strip())
                    except json.JSONDecodeError as e:
                        raise MalformedResponseError(self.name, f"unparseable stream event: {e}") from e
                    fragment = self._extract_text(event)
                    if fragment:
                        yield fragment
        except httpx.HTTPError as e:
            raise network_error(self.name, e) from e

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
