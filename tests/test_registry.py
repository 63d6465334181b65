import asyncio
import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from careergenie.core.providers import ProviderName, resolve_model, parse_provider
from careergenie.llms.errors import ProviderNotConfiguredError
from careergenie.llms.ollama_client import OllamaClient
from careergenie.llms.registry import ClientRegistry
from careergenie.llms.router import create_gateway

from conftest import make_settings


class CountingFactory:
    def __init__(self, fail: bool = False) -> None:
        self.calls = 0
        self.fail = fail
        self._lock = threading.Lock()

    def __call__(self, settings):
        with self._lock:
            self.calls += 1
        if self.fail:
            raise ProviderNotConfiguredError("not configured: GROQ_API_KEY is not set")
        return object()


def test_client_is_built_once_and_cached():
    factory = CountingFactory()
    registry = ClientRegistry(make_settings(), {ProviderName.GROQ: factory})

    first = registry.get("groq")
    second = registry.get(ProviderName.GROQ)

    assert first is second
    assert factory.calls == 1
    assert registry.configured() == [ProviderName.GROQ]


def test_missing_credential_is_remembered():
    factory = CountingFactory(fail=True)
    registry = ClientRegistry(make_settings(), {ProviderName.GROQ: factory})

    for _ in range(3):
        with pytest.raises(ProviderNotConfiguredError, match="GROQ_API_KEY"):
            registry.get("groq")

    assert factory.calls == 1
    assert registry.configured() == []


def test_provider_without_factory_is_not_configured():
    registry = ClientRegistry(make_settings(), {})
    with pytest.raises(ProviderNotConfiguredError, match="no client for gemini"):
        registry.get("gemini")


def test_concurrent_first_use_initialises_once():
    factory = CountingFactory()
    registry = ClientRegistry(make_settings(), {ProviderName.GEMINI: factory})
    results = []
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        results.append(registry.get("gemini"))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert factory.calls == 1
    assert len({id(r) for r in results}) == 1


def test_resolve_model_aliases():
    assert resolve_model("gemini", "pro") == "gemini-1.5-pro"
    assert resolve_model(ProviderName.GROQ, "FAST") == "llama-3.1-8b-instant"
    assert resolve_model("together", "unknown") == "meta-llama/Meta-Llama-3.1-70B-Instruct-Turbo"
    assert resolve_model("huggingface", None) == "mistralai/Mistral-7B-Instruct-v0.2"
    assert resolve_model("ollama") == "llama3.2"


def test_parse_provider():
    assert parse_provider(" Groq ") is ProviderName.GROQ
    with pytest.raises(ValueError, match="Unknown provider: openai"):
        parse_provider("openai")


class EchoOllamaHandler(BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"

    def do_POST(self):
        length = int(self.headers.get("Content-Length", 0))
        prompt = json.loads(self.rfile.read(length))["prompt"]
        body = json.dumps({"response": f"echo {prompt}", "done": True}).encode()
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def local_ollama(monkeypatch):
    for var in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(var, raising=False)
    server = ThreadingHTTPServer(("127.0.0.1", 0), EchoOllamaHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_port}"
    server.shutdown()
    server.server_close()


def test_cached_client_works_across_event_loops(local_ollama):
    registry = ClientRegistry(make_settings(ollama_base_url=local_ollama), {ProviderName.OLLAMA: OllamaClient})
    gateway = create_gateway([ProviderName.OLLAMA], registry, model="fast")

    first = asyncio.run(gateway.generate("a"))
    second = asyncio.run(gateway.generate("b"))

    assert (first.text, second.text) == ("echo a", "echo b")
    assert second.provider == "ollama"
    assert registry.get("ollama") is registry.get("ollama")
