# =============================================================================
# careergenie/llms/registry.py — Lazily built, process-scoped provider clients
# =============================================================================
# A client is constructed on first use of its provider and kept afterwards.
# Construction reads the credential, so credentials are read at most once per
# provider. A missing credential is remembered too: that provider stays
# unusable until the process restarts.
# =============================================================================

import threading
from functools import lru_cache
from typing import Callable

from careergenie.core.config import Settings, get_settings
from careergenie.core.providers import ProviderName, parse_provider
from careergenie.llms.base import BaseLLM
from careergenie.llms.errors import ProviderNotConfiguredError
from careergenie.llms.gemini_client import GeminiClient
from careergenie.llms.groq_client import GroqClient
from careergenie.llms.huggingface_client import HuggingFaceClient
from careergenie.llms.ollama_client import OllamaClient
from careergenie.llms.together_client import TogetherClient
from careergenie.utils.logger import logger

ClientFactory = Callable[[Settings], BaseLLM]

CLIENT_FACTORIES: dict[ProviderName, ClientFactory] = {
    ProviderName.GEMINI: GeminiClient,
    ProviderName.GROQ: GroqClient,
    ProviderName.HUGGINGFACE: HuggingFaceClient,
    ProviderName.OLLAMA: OllamaClient,
    ProviderName.TOGETHER: TogetherClient,
}


class ClientRegistry:
    def __init__(
        self,
        settings: Settings | None = None,
        factories: dict[ProviderName, ClientFactory] | None = None,
    ) -> None:
        self._settings = settings
        self._factories = dict(CLIENT_FACTORIES if factories is None else factories)
        self._clients: dict[ProviderName, BaseLLM] = {}
        self._unconfigured: dict[ProviderName, str] = {}
        self._lock = threading.Lock()

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    def get(self, provider: "str | ProviderName") -> BaseLLM:
        name = parse_provider(provider)
        with self._lock:
            client = self._clients.get(name)
            if client is not None:
                return client
            if name in self._unconfigured:
                raise ProviderNotConfiguredError(self._unconfigured[name])
            factory = self._factories.get(name)
            if factory is None:
                raise ProviderNotConfiguredError(f"not configured: no client for {name.value}")
            try:
                client = factory(self.settings)
            except ProviderNotConfiguredError as e:
                self._unconfigured[name] = str(e)
                logger.info("provider_unconfigured", extra={"provider": name.value, "reason": str(e)})
                raise
            self._clients[name] = client
            return client

    def configured(self) -> list[ProviderName]:
        with self._lock:
            return [p for p in ProviderName if p in self._clients]


@lru_cache
def get_default_registry() -> ClientRegistry:
    return ClientRegistry()
