from typing import Any, Mapping

from careergenie.llms.router import GenerationGateway, GenerationOptions


class ChatSession:
    """Multi-turn chat on top of a gateway.

    The whole transcript is resent on every turn as ``role: content`` lines.
    """

    def __init__(self, gateway: GenerationGateway) -> None:
        self._gateway = gateway
        self._history: list[dict[str, str]] = []

    async def send(
        self,
        message: str,
        options: "Mapping[str, Any] | GenerationOptions | None" = None,
    ) -> str:
        self._history.append({"role": "user", "content": message})
        prompt = "\n".join(f"{h['role']}: {h['content']}" for h in self._history)
        try:
            result = await self._gateway.generate(prompt, options)
        except Exception:
            self._history.pop()
            raise
        self._history.append({"role": "assistant", "content": result.text})
        return result.text

    def history(self) -> list[dict[str, str]]:
        return list(self._history)

    def clear(self) -> None:
        self._history.clear()
