import asyncio

import httpx
import pytest

from careergenie.core.config import Settings, get_settings
from careergenie.db.models import init_db
from careergenie.llms.registry import ClientRegistry
from careergenie.llms.router import GenerationResult


class StubProvider:
    """Stands in for a ProviderAdapter; records every call it receives."""

    def __init__(self, name: str, outcome="ok", model: str = "stub-model", delay: float = 0.0) -> None:
        self.name = name
        self.model = model
        self.outcome = outcome
        self.delay = delay
        self.calls = []

    async def generate(self, prompt, options):
        self.calls.append((prompt, options))
        if self.delay:
            await asyncio.sleep(self.delay)
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return self.outcome


class StubGateway:
    """Returns canned text (or raises) regardless of prompt."""

    def __init__(self, outcome, provider: str = "gemini", model: str = "gemini-1.5-flash") -> None:
        self.outcome = outcome
        self.provider = provider
        self.model = model
        self.prompts = []

    async def generate(self, prompt, options=None):
        self.prompts.append((prompt, options))
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return GenerationResult(text=self.outcome, provider=self.provider, model=self.model)


def make_settings(**overrides) -> Settings:
    values = dict(
        gemini_api_key="gemini-test-key",
        groq_api_key="groq-test-key",
        huggingface_api_key="hf-test-key",
        together_api_key="together-test-key",
        ollama_base_url="http://ollama.test",
        ollama_enabled=True,
        request_timeout=5,
    )
    values.update(overrides)
    return Settings(**values)


def mock_factory(client_cls, handler):
    """Registry factory building a real client over an httpx.MockTransport."""
    return lambda settings: client_cls(settings, transport=httpx.MockTransport(handler))


@pytest.fixture(autouse=True)
def temp_db(tmp_path, monkeypatch):
    monkeypatch.setenv("CAREERGENIE_DB_PATH", str(tmp_path / "careergenie-test.db"))
    get_settings.cache_clear()
    init_db()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def registry_factory(settings):
    def _build(factories, **overrides):
        return ClientRegistry(settings=make_settings(**overrides) if overrides else settings, factories=factories)

    return _build
