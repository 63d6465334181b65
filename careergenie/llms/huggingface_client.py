# =============================================================================
# careergenie/llms/huggingface_client.py — Hugging Face Inference API client
# =============================================================================
# Text-generation models return prompt + completion concatenated; the echoed
# prompt prefix is stripped before returning.
# =============================================================================

import httpx

from careergenie.core.config import Settings
from careergenie.core.providers import ProviderName
from careergenie.core.security import require_huggingface_key
from careergenie.llms.base import PARSE_ERROR, BaseLLM, require_text
from careergenie.llms.errors import ProviderResponseError

HF_INFERENCE_URL = "https://api-inference.huggingface.co/models"


def strip_echoed_prompt(text: str, prompt: str) -> str:
    if prompt and text.startswith(prompt):
        return text[len(prompt):]
    return text


class HuggingFaceClient(BaseLLM):
    name = ProviderName.HUGGINGFACE

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(settings, transport)
        self._key = require_huggingface_key(self._settings)

    async def generate(self, prompt: str, model: str, temperature: float, max_tokens: int) -> str:
        data = await self._post_json(
            f"{HF_INFERENCE_URL}/{model}",
            {
                "inputs": prompt,
                "parameters": {
                    "max_new_tokens": max_tokens,
                    "temperature": temperature,
                },
            },
            headers={"Authorization": f"Bearer {self._key}"},
        )
        try:
            if not data:
                raise ProviderResponseError("Empty completion")
            generated = data[0]["generated_text"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderResponseError(PARSE_ERROR) from e
        if not isinstance(generated, str):
            raise ProviderResponseError(PARSE_ERROR)
        return require_text(strip_echoed_prompt(generated, prompt))
