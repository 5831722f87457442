"""Backend for OpenAI-compatible chat completion endpoints.

Works with any server that speaks the ``/v1/chat/completions`` protocol
(OpenAI, OpenRouter, Ollama, vLLM, LM Studio, ...).
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from lazylatex.errors import BackendError, ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"


class OpenAICompatibleBackend:
    """Calls a chat completion endpoint with httpx.

    Uses the async httpx client for non-blocking requests. Pass ``client`` to
    share a connection pool or to inject a mock transport in tests.
    """

    name = "openai"

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        model: str,
        *,
        timeout: float = 60.0,
        max_tokens: int | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the backend.

        Raises:
            ConfigurationError: If the API key, endpoint or model is missing.
        """
        if not api_key:
            msg = 'No API key set. Configure "LLM__API_KEY"'
            raise ConfigurationError(msg)
        if not endpoint or not model:
            msg = "LLM endpoint or model is not configured"
            raise ConfigurationError(msg)

        self.endpoint = endpoint
        self.model = model
        self.max_tokens = max_tokens
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def complete(self, system: str, user: str) -> str:
        """Send one chat completion request and return the reply text."""
        body: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": 0,
        }
        if self.max_tokens:
            body["max_tokens"] = self.max_tokens

        try:
            response = await self._client.post(
                self.endpoint,
                json=body,
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            msg = f"LLM request failed: {exc}"
            raise BackendError(msg) from exc

        if not response.is_success:
            text = response.text
            logger.error("LLM HTTP error: %s %s", response.status_code, text[:2000])
            msg = f"LLM request failed: {response.status_code} {response.reason_phrase}"
            raise BackendError(msg, status=response.status_code, body=text)

        try:
            data = response.json()
        except ValueError as exc:
            msg = "LLM response was not JSON"
            raise BackendError(msg, body=response.text) from exc

        content = _extract_content(data)
        if not content:
            logger.error("Unexpected LLM response shape: %r", data)
            msg = "LLM response did not contain text content"
            raise BackendError(msg, body=response.text)

        return content.strip()

    async def aclose(self) -> None:
        """Close the underlying client if this backend created it."""
        if self._owns_client:
            await self._client.aclose()


def _extract_content(data: Any) -> str | None:
    """Read ``choices[0].message.content`` defensively."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None
