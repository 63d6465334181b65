import httpx

from careergenie.core.config import Settings
from careergenie.core.providers import ProviderName
from careergenie.core.security import require_together_key
from careergenie.llms.base import BaseLLM, extract_chat_content

TOGETHER_CHAT_URL = "https://api.together.xyz/v1/chat/completions"


class TogetherClient(BaseLLM):
    name = ProviderName.TOGETHER

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(settings, transport)
        self._key = require_together_key(self._settings)

    async def generate(self, prompt: str, model: str, temperature: float, max_tokens: int) -> str:
        data = await self._post_json(
            TOGETHER_CHAT_URL,
            {
                "model": model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": temperature,
                "max_tokens": max_tokens,
            },
            headers={"Authorization": f"Bearer {self._key}"},
        )
        return extract_chat_content(data)
