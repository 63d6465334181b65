# =============================================================================
# careergenie/llms/router.py — Generation gateway with ordered provider fallback
# =============================================================================
# Providers are tried strictly in the order given. The first one that returns
# text wins; every failure is recorded as "<provider>: <message>" and, if no
# provider answers, all records are raised together in attempt order.
# No retries, no reordering, no racing.
# =============================================================================

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Mapping, Protocol, Sequence

from careergenie.core.providers import DEFAULT_CHAIN, ProviderName, parse_provider, resolve_model
from careergenie.core.security import is_configured
from careergenie.llms.errors import AllProvidersFailedError
from careergenie.llms.registry import ClientRegistry, get_default_registry
from careergenie.utils.logger import logger

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1024


@dataclass(frozen=True)
class GenerationOptions:
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS

    @classmethod
    def from_mapping(cls, options: "Mapping[str, Any] | GenerationOptions | None") -> "GenerationOptions":
        """Build options from a loose dict; unknown keys are ignored."""
        if isinstance(options, GenerationOptions):
            return options
        options = options or {}
        temperature = options.get("temperature")
        max_tokens = options.get("max_tokens", options.get("maxTokens"))
        return cls(
            temperature=DEFAULT_TEMPERATURE if temperature is None else temperature,
            max_tokens=DEFAULT_MAX_TOKENS if max_tokens is None else max_tokens,
        )


@dataclass(frozen=True)
class GenerationResult:
    text: str
    provider: str
    model: str


class ModelProvider(Protocol):
    name: str
    model: str

    async def generate(self, prompt: str, options: GenerationOptions) -> str: ...


class ProviderAdapter:
    """One provider/model pair; the client is fetched from the registry per call."""

    def __init__(self, provider: "str | ProviderName", model: str | None = None, registry: ClientRegistry | None = None) -> None:
        self.provider = parse_provider(provider)
        self.name = self.provider.value
        self.model = resolve_model(self.provider, model)
        self._registry = registry or get_default_registry()

    async def generate(self, prompt: str, options: GenerationOptions) -> str:
        client = self._registry.get(self.provider)
        return await client.generate(prompt, self.model, options.temperature, options.max_tokens)

    def __repr__(self) -> str:
        return f"ProviderAdapter({self.name!r}, model={self.model!r})"


class GenerationGateway:
    def __init__(self, providers: Sequence[ModelProvider], timeout: float | None = None) -> None:
        self._providers = tuple(providers)
        self._timeout = timeout

    @property
    def providers(self) -> tuple[ModelProvider, ...]:
        return self._providers

    async def _attempt(self, provider: ModelProvider, prompt: str, options: GenerationOptions) -> str:
        if self._timeout is None:
            return await provider.generate(prompt, options)
        return await asyncio.wait_for(provider.generate(prompt, options), timeout=self._timeout)

    async def generate(
        self,
        prompt: str,
        options: "Mapping[str, Any] | GenerationOptions | None" = None,
    ) -> GenerationResult:
        opts = GenerationOptions.from_mapping(options)
        errors: list[str] = []
        for provider in self._providers:
            start = time.perf_counter()
            try:
                text = await self._attempt(provider, prompt, opts)
            except asyncio.TimeoutError:
                message = f"timed out after {self._timeout}s"
            except Exception as e:
                message = str(e) or type(e).__name__
            else:
                logger.info(
                    "llm_used",
                    extra={
                        "provider": provider.name,
                        "model": provider.model,
                        "attempt": len(errors) + 1,
                        "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                    },
                )
                return GenerationResult(text=text, provider=provider.name, model=provider.model)
            errors.append(f"{provider.name}: {message}")
            logger.warning("provider_failed", extra={"provider": provider.name, "error": message})

        logger.error("all_providers_failed", extra={"attempts": len(errors)})
        raise AllProvidersFailedError(errors)


def create_provider(
    provider: "str | ProviderName" = ProviderName.GEMINI,
    model: str = "default",
    registry: ClientRegistry | None = None,
) -> ProviderAdapter:
    return ProviderAdapter(provider, model, registry)


def create_gateway(
    providers: "Sequence[str | ProviderName] | None" = None,
    registry: ClientRegistry | None = None,
    model: str | None = None,
    timeout: float | None = None,
) -> GenerationGateway:
    registry = registry or get_default_registry()
    chain = providers if providers else DEFAULT_CHAIN
    if timeout is None:
        timeout = registry.settings.request_timeout
    return GenerationGateway([ProviderAdapter(p, model, registry) for p in chain], timeout=timeout)


async def generate_text(
    prompt: str,
    options: "Mapping[str, Any] | GenerationOptions | None" = None,
    registry: ClientRegistry | None = None,
) -> str:
    result = await create_gateway(registry=registry).generate(prompt, options)
    return result.text


def available_providers(registry: ClientRegistry | None = None) -> list[ProviderName]:
    settings = (registry or get_default_registry()).settings
    return [p for p in ProviderName if is_configured(p, settings)]
