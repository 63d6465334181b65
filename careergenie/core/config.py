import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

DEFAULT_PROVIDER_CHAIN = "gemini,groq"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    gemini_api_key: str = ""
    groq_api_key: str = ""
    huggingface_api_key: str = ""
    together_api_key: str = ""
    ollama_base_url: str = "http://localhost:11434"
    ollama_enabled: bool = True
    request_timeout: int = 30
    provider_chain: str = DEFAULT_PROVIDER_CHAIN
    db_path: str = ""

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            groq_api_key=os.getenv("GROQ_API_KEY", ""),
            huggingface_api_key=os.getenv("HUGGINGFACE_API_KEY", ""),
            together_api_key=os.getenv("TOGETHER_API_KEY", ""),
            ollama_base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434"),
            ollama_enabled=_env_flag("OLLAMA_ENABLED", "true"),
            request_timeout=int(os.getenv("REQUEST_TIMEOUT", "30")),
            provider_chain=os.getenv("PROVIDER_CHAIN", DEFAULT_PROVIDER_CHAIN),
            db_path=os.getenv("CAREERGENIE_DB_PATH", ""),
        )

    @property
    def chain(self) -> list[str]:
        return [p.strip().lower() for p in self.provider_chain.split(",") if p.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
