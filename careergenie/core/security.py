from careergenie.core.config import Settings, get_settings
from careergenie.core.providers import ProviderName
from careergenie.llms.errors import ProviderNotConfiguredError

KEY_ENV_VARS = {
    ProviderName.GEMINI: ("GEMINI_API_KEY", "gemini_api_key"),
    ProviderName.GROQ: ("GROQ_API_KEY", "groq_api_key"),
    ProviderName.HUGGINGFACE: ("HUGGINGFACE_API_KEY", "huggingface_api_key"),
    ProviderName.TOGETHER: ("TOGETHER_API_KEY", "together_api_key"),
}


def _require(provider: ProviderName, settings: Settings | None = None) -> str:
    env_name, attr = KEY_ENV_VARS[provider]
    key = getattr(settings or get_settings(), attr)
    if not key or not key.strip():
        raise ProviderNotConfiguredError(f"not configured: {env_name} is not set")
    return key.strip()


def require_gemini_key(settings: Settings | None = None) -> str:
    return _require(ProviderName.GEMINI, settings)


def require_groq_key(settings: Settings | None = None) -> str:
    return _require(ProviderName.GROQ, settings)


def require_huggingface_key(settings: Settings | None = None) -> str:
    return _require(ProviderName.HUGGINGFACE, settings)


def require_together_key(settings: Settings | None = None) -> str:
    return _require(ProviderName.TOGETHER, settings)


def require_ollama_enabled(settings: Settings | None = None) -> str:
    s = settings or get_settings()
    if not s.ollama_enabled:
        raise ProviderNotConfiguredError("not configured: OLLAMA_ENABLED is false")
    return s.ollama_base_url.rstrip("/")


def is_configured(provider: ProviderName, settings: Settings | None = None) -> bool:
    try:
        if provider == ProviderName.OLLAMA:
            require_ollama_enabled(settings)
        else:
            _require(provider, settings)
    except ProviderNotConfiguredError:
        return False
    return True
