import httpx

from careergenie.core.config import Settings
from careergenie.core.providers import ProviderName
from careergenie.core.security import require_groq_key
from careergenie.llms.base import BaseLLM, extract_chat_content

GROQ_CHAT_URL = "https://api.groq.com/openai/v1/chat/completions"


class GroqClient(BaseLLM):
    name = ProviderName.GROQ

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(settings, transport)
        self._key = require_groq_key(self._settings)

    async def generate(self, prompt: str, model: str, temperature: float, max_tokens: int) -> str:
        data = await self._post_json(
            GROQ_CHAT_URL,
            {
                "model": model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": temperature,
                "max_tokens": max_tokens,
            },
            headers={"Authorization": f"Bearer {self._key}"},
        )
        return extract_chat_content(data)
