"""
Tests for the HTTP text-generation client.

Uses httpx.MockTransport so no request leaves the process.
"""

import json

import httpx
import pytest

from focusfit.config import Settings
from focusfit.errors import TransportFailure
from focusfit.generator import HttpTextGenerator


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _completion(content) -> dict:
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


def test_generate_posts_chat_completion():
    """Test the request shape and that the reply text is returned."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion('{"workouts": []}'))

    generator = HttpTextGenerator(
        "https://llm.example.com/v1/", "test-model", api_key="secret",
        temperature=0.2, client=_client(handler),
    )

    assert generator.generate("Plan my week") == '{"workouts": []}'
    assert seen["url"] == "https://llm.example.com/v1/chat/completions"
    assert seen["auth"] == "Bearer secret"
    assert seen["body"] == {
        "model": "test-model",
        "messages": [{"role": "user", "content": "Plan my week"}],
        "temperature": 0.2,
    }


def test_no_api_key_sends_no_auth_header():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=_completion("ok"))

    HttpTextGenerator("http://localhost:11434/v1", "local", client=_client(handler)).generate("hi")

    assert seen["auth"] is None


@pytest.mark.parametrize("status_code", [400, 401, 429, 500, 503])
def test_error_status_raises_transport_failure(status_code):
    def handler(request):
        return httpx.Response(status_code, json={"error": {"message": "quota exceeded"}})

    generator = HttpTextGenerator("https://llm.example.com/v1", "m", client=_client(handler))

    with pytest.raises(TransportFailure) as exc_info:
        generator.generate("hi")

    assert exc_info.value.status_code == status_code
    assert exc_info.value.operation == "generate"


def test_timeout_raises_transport_failure():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    generator = HttpTextGenerator("https://llm.example.com/v1", "m", client=_client(handler))

    with pytest.raises(TransportFailure, match="timed out"):
        generator.generate("hi")


def test_connection_error_raises_transport_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    generator = HttpTextGenerator("https://llm.example.com/v1", "m", client=_client(handler))

    with pytest.raises(TransportFailure, match="request failed"):
        generator.generate("hi")


@pytest.mark.parametrize(
    "body",
    [
        {"choices": []},
        {"result": "text"},
        _completion(None),
    ],
)
def test_unexpected_body_raises_transport_failure(body):
    def handler(request):
        return httpx.Response(200, json=body)

    generator = HttpTextGenerator("https://llm.example.com/v1", "m", client=_client(handler))

    with pytest.raises(TransportFailure):
        generator.generate("hi")


def test_non_json_body_raises_transport_failure():
    def handler(request):
        return httpx.Response(200, text="<html>gateway</html>")

    generator = HttpTextGenerator("https://llm.example.com/v1", "m", client=_client(handler))

    with pytest.raises(TransportFailure):
        generator.generate("hi")


def test_from_settings_uses_configured_endpoint():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["model"] = json.loads(request.content)["model"]
        return httpx.Response(200, json=_completion("ok"))

    settings = Settings(
        generation_api_url="https://gateway.example.com/v1",
        generation_model="tiny-model",
        generation_api_key="k",
    )

    with HttpTextGenerator.from_settings(settings, client=_client(handler)) as generator:
        generator.generate("hi")

    assert seen == {"url": "https://gateway.example.com/v1/chat/completions", "model": "tiny-model"}
