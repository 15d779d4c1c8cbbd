"""
Tests for the chat completion client.

The HTTP layer is replaced with httpx.MockTransport so requests can be
inspected and upstream failures simulated without network access.
"""

import json

import httpx
import pytest

from adapters.llm_adapter import ERROR_BODY_LIMIT, LLMClient
from app.exceptions import LLMServiceError


def make_client(handler, api_key="test-key") -> LLMClient:
    return LLMClient(
        api_key=api_key,
        base_url="https://llm.test/",
        model="test-model",
        timeout_sec=5,
        transport=httpx.MockTransport(handler),
    )


def completion(content) -> dict:
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


MESSAGES = [
    {"role": "system", "content": "You are a nutritionist."},
    {"role": "user", "content": "Hi"},
]


def test_chat_sends_openai_compatible_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=completion("  Hello!  "))

    result = make_client(handler).chat(MESSAGES, temperature=0, max_tokens=123, json_mode=True)

    assert result == "Hello!"
    assert seen["url"] == "https://llm.test/v1/chat/completions"
    assert seen["auth"] == "Bearer test-key"
    assert seen["body"] == {
        "model": "test-model",
        "messages": MESSAGES,
        "temperature": 0,
        "max_tokens": 123,
        "response_format": {"type": "json_object"},
    }


def test_chat_without_json_mode_omits_response_format():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=completion("text"))

    make_client(handler).chat(MESSAGES)
    assert "response_format" not in seen["body"]
    assert seen["body"]["temperature"] == 0.2
    assert seen["body"]["max_tokens"] == 800


def test_chat_without_api_key_does_not_call_upstream():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=completion("never"))

    with pytest.raises(LLMServiceError) as exc_info:
        make_client(handler, api_key=None).chat(MESSAGES)

    assert exc_info.value.code == "LLM_NOT_CONFIGURED"
    assert exc_info.value.message == "LLM API key is not set"
    assert calls == []


def test_chat_upstream_http_error():
    def handler(request):
        return httpx.Response(429, text="rate limited")

    with pytest.raises(LLMServiceError) as exc_info:
        make_client(handler).chat(MESSAGES)

    assert exc_info.value.message == "LLM HTTP 429: rate limited"
    assert exc_info.value.details == {"status": 429}


def test_chat_upstream_error_body_is_clipped():
    def handler(request):
        return httpx.Response(500, text="x" * (ERROR_BODY_LIMIT * 2))

    with pytest.raises(LLMServiceError) as exc_info:
        make_client(handler).chat(MESSAGES)

    assert exc_info.value.message == "LLM HTTP 500: " + "x" * ERROR_BODY_LIMIT


def test_chat_transport_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(LLMServiceError) as exc_info:
        make_client(handler).chat(MESSAGES)

    assert exc_info.value.message.startswith("LLM request failed:")


def test_chat_non_json_body():
    def handler(request):
        return httpx.Response(200, text="<html>gateway</html>")

    with pytest.raises(LLMServiceError) as exc_info:
        make_client(handler).chat(MESSAGES)

    assert exc_info.value.message == "LLM response is not JSON"


def test_chat_empty_content_reports_upstream_error():
    def handler(request):
        return httpx.Response(200, json={"error": {"message": "Insufficient balance"}})

    with pytest.raises(LLMServiceError) as exc_info:
        make_client(handler).chat(MESSAGES)

    assert exc_info.value.message == "Insufficient balance"


@pytest.mark.parametrize(
    "payload",
    [
        {"choices": []},
        completion("   "),
        completion(None),
        {"choices": [{"message": "oops"}]},
    ],
)
def test_chat_without_content(payload):
    def handler(request):
        return httpx.Response(200, json=payload)

    with pytest.raises(LLMServiceError) as exc_info:
        make_client(handler).chat(MESSAGES)

    assert exc_info.value.message == "No model content"
    assert exc_info.value.http_status == 500
