from enum import Enum


class ProviderName(str, Enum):
    GEMINI = "gemini"
    GROQ = "groq"
    HUGGINGFACE = "huggingface"
    OLLAMA = "ollama"
    TOGETHER = "together"


DEFAULT_ALIAS = "default"

MODELS: dict[ProviderName, dict[str, str]] = {
    ProviderName.GEMINI: {
        "default": "gemini-1.5-flash",
        "pro": "gemini-1.5-pro",
        "flash": "gemini-1.5-flash",
        "exp": "gemini-2.0-flash-exp",
    },
    ProviderName.GROQ: {
        "default": "llama-3.3-70b-versatile",
        "fast": "llama-3.1-8b-instant",
        "alternative": "mixtral-8x7b-32768",
        "specdec": "llama-3.3-70b-specdec",
    },
    ProviderName.HUGGINGFACE: {
        "default": "mistralai/Mistral-7B-Instruct-v0.2",
        "alternative": "meta-llama/Llama-2-7b-chat-hf",
    },
    ProviderName.OLLAMA: {
        "default": "llama3.2",
        "fast": "phi3",
        "alternative": "mistral",
    },
    ProviderName.TOGETHER: {
        "default": "meta-llama/Meta-Llama-3.1-70B-Instruct-Turbo",
        "fast": "meta-llama/Meta-Llama-3.1-8B-Instruct-Turbo",
    },
}

DEFAULT_CHAIN = (ProviderName.GEMINI, ProviderName.GROQ)


def parse_provider(name: "str | ProviderName") -> ProviderName:
    if isinstance(name, ProviderName):
        return name
    try:
        return ProviderName(name.strip().lower())
    except ValueError:
        raise ValueError(f"Unknown provider: {name}") from None


def resolve_model(provider: "str | ProviderName", alias: str | None = None) -> str:
    """Map a model alias to the provider's concrete model name.

    Unknown or empty aliases resolve to the provider's ``default`` entry.
    """
    table = MODELS[parse_provider(provider)]
    key = (alias or "").strip().lower()
    return table.get(key, table[DEFAULT_ALIAS])
