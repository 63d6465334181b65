import asyncio
import json

import httpx
import pytest

from careergenie.core.providers import MODELS, ProviderName
from careergenie.llms.errors import ProviderNotConfiguredError, ProviderRemoteError, ProviderResponseError
from careergenie.llms.gemini_client import GeminiClient
from careergenie.llms.groq_client import GroqClient
from careergenie.llms.huggingface_client import HuggingFaceClient, strip_echoed_prompt
from careergenie.llms.ollama_client import OllamaClient
from careergenie.llms.together_client import TogetherClient

from conftest import make_settings


class Recorder:
    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response

    @property
    def body(self) -> dict:
        return json.loads(self.requests[-1].content)


def run(client, prompt="Say hi", model="m", temperature=0.7, max_tokens=1024):
    return asyncio.run(client.generate(prompt, model, temperature, max_tokens))


# -- gemini -------------------------------------------------------------------

def test_gemini_request_and_unwrap():
    rec = Recorder(httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "Hello"}]}}]}))
    client = GeminiClient(make_settings(), transport=httpx.MockTransport(rec))

    assert run(client, model="gemini-1.5-pro", temperature=0.3, max_tokens=256) == "Hello"

    request = rec.requests[0]
    assert request.url.path.endswith("/models/gemini-1.5-pro:generateContent")
    assert request.url.params["key"] == "gemini-test-key"
    assert rec.body["generationConfig"] == {"temperature": 0.3, "maxOutputTokens": 256}
    assert rec.body["contents"][0]["parts"][0]["text"] == "Say hi"


def test_gemini_no_candidates_is_a_response_error():
    rec = Recorder(httpx.Response(200, json={"candidates": []}))
    client = GeminiClient(make_settings(), transport=httpx.MockTransport(rec))
    with pytest.raises(ProviderResponseError, match="Empty completion"):
        run(client)


def test_gemini_sends_model_and_temperature_unchanged():
    rec = Recorder(httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "ok"}]}}]}))
    client = GeminiClient(make_settings(), transport=httpx.MockTransport(rec))

    run(client, model="gemini-2.0-flash-exp", temperature=2.5)

    assert rec.requests[0].url.path.endswith("/models/gemini-2.0-flash-exp:generateContent")
    assert rec.body["generationConfig"]["temperature"] == 2.5


def test_gemini_alias_table_names_gemini_models():
    assert all(name.startswith("gemini-") for name in MODELS[ProviderName.GEMINI].values())


def test_gemini_requires_key():
    with pytest.raises(ProviderNotConfiguredError, match="GEMINI_API_KEY"):
        GeminiClient(make_settings(gemini_api_key=""))


# -- openai-compatible ----------------------------------------------------------

@pytest.mark.parametrize("client_cls,key", [(GroqClient, "groq-test-key"), (TogetherClient, "together-test-key")])
def test_chat_completion_clients(client_cls, key):
    rec = Recorder(httpx.Response(200, json={"choices": [{"message": {"content": " Answer "}}]}))
    client = client_cls(make_settings(), transport=httpx.MockTransport(rec))

    assert run(client, model="some-model", temperature=0.2, max_tokens=99) == "Answer"
    assert rec.requests[0].headers["authorization"] == f"Bearer {key}"
    assert rec.body == {
        "model": "some-model",
        "messages": [{"role": "user", "content": "Say hi"}],
        "temperature": 0.2,
        "max_tokens": 99,
    }


@pytest.mark.parametrize("payload", [{"choices": []}, {"choices": [{"message": {"content": ""}}]}])
def test_groq_empty_completion(payload):
    client = GroqClient(make_settings(), transport=httpx.MockTransport(Recorder(httpx.Response(200, json=payload))))
    with pytest.raises(ProviderResponseError, match="Empty completion"):
        run(client)


def test_groq_unexpected_envelope():
    client = GroqClient(make_settings(), transport=httpx.MockTransport(Recorder(httpx.Response(200, json={"data": 1}))))
    with pytest.raises(ProviderResponseError, match="Could not parse JSON response"):
        run(client)


def test_non_success_status_maps_to_http_message():
    client = TogetherClient(make_settings(), transport=httpx.MockTransport(Recorder(httpx.Response(429))))
    with pytest.raises(ProviderRemoteError) as exc:
        run(client)
    assert str(exc.value) == "HTTP 429"


def test_transport_failure_is_a_remote_error():
    def boom(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = GroqClient(make_settings(), transport=httpx.MockTransport(boom))
    with pytest.raises(ProviderRemoteError, match="unreachable: connection refused"):
        run(client)


def test_together_requires_key():
    with pytest.raises(ProviderNotConfiguredError, match="TOGETHER_API_KEY"):
        TogetherClient(make_settings(together_api_key="  "))


# -- huggingface ----------------------------------------------------------------

def test_huggingface_strips_echoed_prompt():
    rec = Recorder(httpx.Response(200, json=[{"generated_text": "Say hi Hello there"}]))
    client = HuggingFaceClient(make_settings(), transport=httpx.MockTransport(rec))

    assert run(client, model="mistralai/Mistral-7B-Instruct-v0.2", max_tokens=500) == "Hello there"
    assert rec.requests[0].url.path == "/models/mistralai/Mistral-7B-Instruct-v0.2"
    assert rec.body == {"inputs": "Say hi", "parameters": {"max_new_tokens": 500, "temperature": 0.7}}


def test_strip_echoed_prompt_only_removes_prefix():
    assert strip_echoed_prompt("abc def", "abc") == " def"
    assert strip_echoed_prompt("x abc", "abc") == "x abc"


def test_huggingface_malformed_payload():
    rec = Recorder(httpx.Response(200, json={"error": "loading"}))
    client = HuggingFaceClient(make_settings(), transport=httpx.MockTransport(rec))
    with pytest.raises(ProviderResponseError, match="Could not parse JSON response"):
        run(client)


# -- ollama -----------------------------------------------------------------------

def test_ollama_request_and_unwrap():
    rec = Recorder(httpx.Response(200, json={"response": "local answer", "done": True}))
    client = OllamaClient(make_settings(), transport=httpx.MockTransport(rec))

    assert run(client, model="llama3.2", temperature=0.5, max_tokens=64) == "local answer"
    assert str(rec.requests[0].url) == "http://ollama.test/api/generate"
    assert rec.body == {
        "model": "llama3.2",
        "prompt": "Say hi",
        "stream": False,
        "options": {"temperature": 0.5, "num_predict": 64},
    }


def test_ollama_disabled_is_not_configured():
    with pytest.raises(ProviderNotConfiguredError, match="OLLAMA_ENABLED"):
        OllamaClient(make_settings(ollama_enabled=False))


def test_ollama_reachability_check():
    up = OllamaClient(make_settings(), transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"models": []})))
    down = OllamaClient(make_settings(), transport=httpx.MockTransport(lambda r: httpx.Response(404)))
    assert asyncio.run(up.check_reachable()) is True
    assert asyncio.run(down.check_reachable()) is False
