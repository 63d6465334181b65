# =============================================================================
# careergenie/llms/base.py — Shared httpx plumbing for provider clients
# =============================================================================
# A client reads its credential once, in __init__; the ClientRegistry keeps the
# instance for the process lifetime. Each generate() is a single HTTP call on
# an AsyncClient opened for that call, so no connection pool outlives the
# event loop that created it.
# =============================================================================

from abc import ABC, abstractmethod
from typing import Any

import httpx

from careergenie.core.config import Settings, get_settings
from careergenie.core.providers import ProviderName
from careergenie.llms.errors import ProviderRemoteError, ProviderResponseError

PARSE_ERROR = "Could not parse JSON response"


class BaseLLM(ABC):
    name: ProviderName

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._transport = transport

    def _http(self, timeout: float | None = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._settings.request_timeout if timeout is None else timeout,
            transport=self._transport,
        )

    async def _post_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        try:
            async with self._http() as client:
                r = await client.post(url, json=payload, headers=headers, params=params)
        except httpx.TimeoutException as e:
            raise ProviderRemoteError(f"timed out: {e!s}") from e
        except httpx.RequestError as e:
            raise ProviderRemoteError(f"unreachable: {e!s}") from e
        if not r.is_success:
            raise ProviderRemoteError(f"HTTP {r.status_code}")
        try:
            return r.json()
        except ValueError as e:
            raise ProviderResponseError(PARSE_ERROR) from e

    @abstractmethod
    async def generate(self, prompt: str, model: str, temperature: float, max_tokens: int) -> str:
        """Return the completion text with the provider envelope removed."""


def require_text(text: Any) -> str:
    if not isinstance(text, str) or not text.strip():
        raise ProviderResponseError("Empty completion")
    return text.strip()


def extract_chat_content(data: Any) -> str:
    """Unwrap an OpenAI-style ``choices[0].message.content`` envelope."""
    try:
        choices = data["choices"]
        if not choices:
            raise ProviderResponseError("Empty completion")
        return require_text(choices[0]["message"]["content"])
    except (KeyError, IndexError, TypeError) as e:
        raise ProviderResponseError(PARSE_ERROR) from e
