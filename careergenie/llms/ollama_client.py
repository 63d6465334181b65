import httpx

from careergenie.core.config import Settings
from careergenie.core.providers import ProviderName
from careergenie.core.security import require_ollama_enabled
from careergenie.llms.base import PARSE_ERROR, BaseLLM, require_text
from careergenie.llms.errors import ProviderResponseError


class OllamaClient(BaseLLM):
    name = ProviderName.OLLAMA

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(settings, transport)
        self._base_url = require_ollama_enabled(self._settings)

    async def generate(self, prompt: str, model: str, temperature: float, max_tokens: int) -> str:
        data = await self._post_json(
            f"{self._base_url}/api/generate",
            {
                "model": model,
                "prompt": prompt,
                "stream": False,
                "options": {"temperature": temperature, "num_predict": max_tokens},
            },
        )
        if not isinstance(data, dict):
            raise ProviderResponseError(PARSE_ERROR)
        return require_text(data.get("response"))

    async def check_reachable(self) -> bool:
        try:
            async with self._http(timeout=5.0) as client:
                r = await client.get(f"{self._base_url}/api/tags")
            return r.status_code == 200
        except httpx.HTTPError:
            return False
