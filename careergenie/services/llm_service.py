import sqlite3
import time
from typing import Any, Mapping

from careergenie.db.session import insert_generation_log
from careergenie.llms.router import GenerationGateway, GenerationOptions, GenerationResult
from careergenie.utils.logger import logger
from careergenie.utils.token_estimator import estimate_tokens


def record_generation(
    feature: str,
    provider: str,
    model: str | None,
    source: str,
    prompt: str,
    latency_ms: float,
) -> None:
    try:
        insert_generation_log(
            feature=feature,
            provider=provider,
            model=model,
            source=source,
            prompt_length=estimate_tokens(prompt),
            latency_ms=round(latency_ms, 2),
        )
    except sqlite3.Error as e:
        logger.warning("generation_log_failed", extra={"feature": feature, "error": str(e)})


async def generate(
    gateway: GenerationGateway,
    prompt: str,
    options: "Mapping[str, Any] | GenerationOptions | None" = None,
    feature: str = "generate",
) -> tuple[GenerationResult, float]:
    start = time.perf_counter()
    result = await gateway.generate(prompt, options)
    latency_ms = (time.perf_counter() - start) * 1000
    record_generation(feature, result.provider, result.model, "ai", prompt, latency_ms)
    return result, latency_ms
