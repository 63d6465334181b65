# =============================================================================
# careergenie/llms/gemini_client.py — Google Gemini API client
# =============================================================================
# Uses GEMINI_API_KEY. Models: gemini-1.5-flash, gemini-1.5-pro,
# gemini-2.0-flash-exp. Model and temperature are sent as given.
# =============================================================================

import httpx

from careergenie.core.config import Settings
from careergenie.core.providers import ProviderName
from careergenie.core.security import require_gemini_key
from careergenie.llms.base import PARSE_ERROR, BaseLLM, require_text
from careergenie.llms.errors import ProviderResponseError

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiClient(BaseLLM):
    name = ProviderName.GEMINI

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(settings, transport)
        self._key = require_gemini_key(self._settings)

    async def generate(self, prompt: str, model: str, temperature: float, max_tokens: int) -> str:
        data = await self._post_json(
            f"{GEMINI_BASE_URL}/{model}:generateContent",
            {
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {
                    "temperature": temperature,
                    "maxOutputTokens": max_tokens,
                },
            },
            params={"key": self._key},
        )
        try:
            candidates = data.get("candidates") or []
            if not candidates:
                raise ProviderResponseError("Empty completion")
            parts = (candidates[0].get("content") or {}).get("parts") or []
            if not parts:
                raise ProviderResponseError("Empty completion")
            return require_text(parts[0].get("text"))
        except AttributeError as e:
            raise ProviderResponseError(PARSE_ERROR) from e
