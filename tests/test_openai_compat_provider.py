"""Tests for the OpenAI-compatible provider adapters."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from layr.errors import ProviderError, ProviderErrorKind
from layr.llm.providers.base import PlanOptions, ProviderConfig
from layr.llm.providers.openai_compat import (
    DeepSeekProvider,
    GeminiProvider,
    OpenAIProvider,
)
from layr.models.options import PlanSize

Handler = Callable[[httpx.Request], httpx.Response]


def _completion(content: str | None) -> dict[str, Any]:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1_760_000_000,
        "model": "test-model",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


class Recorder:
    def __init__(self, handler: Handler) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))

    def payload(self, index: int = 0) -> dict[str, Any]:
        return json.loads(self.requests[index].content)


def _ok(content: str = '{"title": "Plan"}') -> Recorder:
    return Recorder(lambda request: httpx.Response(200, json=_completion(content)))


def test_generate_plan_sends_chat_completion() -> None:
    recorder = _ok()
    provider = GeminiProvider(
        ProviderConfig(api_key="test-key"), http_client=recorder.client()
    )

    result = asyncio.run(provider.generate_plan("Build a todo app"))

    assert result == '{"title": "Plan"}'
    request = recorder.requests[0]
    assert str(request.url) == (
        "https://generativelanguage.googleapis.com/v1beta/openai/chat/completions"
    )
    assert request.headers["authorization"] == "Bearer test-key"
    payload = recorder.payload()
    assert payload["model"] == "gemini-2.5-flash"
    assert payload["max_tokens"] == 5000
    assert payload["temperature"] == 0.7
    messages = payload["messages"]
    assert isinstance(messages, list)
    assert messages[0]["role"] == "system"
    assert "Build a todo app" in messages[1]["content"]


def test_size_sets_token_budget() -> None:
    recorder = _ok()
    provider = DeepSeekProvider(
        ProviderConfig(api_key="k"), http_client=recorder.client()
    )

    asyncio.run(
        provider.generate_plan("todo", PlanOptions(size=PlanSize.DESCRIPTIVE))
    )

    assert recorder.payload()["max_tokens"] == 8000


def test_reasoning_models_use_completion_token_limit() -> None:
    recorder = _ok()
    provider = OpenAIProvider(
        ProviderConfig(api_key="k"), http_client=recorder.client()
    )

    asyncio.run(provider.generate_plan("todo"))

    payload = recorder.payload()
    assert payload["model"] == "o3"
    assert payload["max_completion_tokens"] == 5000
    assert "max_tokens" not in payload
    assert "temperature" not in payload


def test_config_overrides_model_and_base_url() -> None:
    recorder = _ok()
    provider = OpenAIProvider(
        ProviderConfig(
            api_key="k", model="o3-mini", base_url="https://proxy.example/v1"
        ),
        http_client=recorder.client(),
    )

    asyncio.run(provider.generate_plan("todo"))

    url = str(recorder.requests[0].url)
    assert url == "https://proxy.example/v1/chat/completions"
    assert recorder.payload()["model"] == "o3-mini"


def test_refine_section_uses_refine_budget() -> None:
    recorder = _ok("## Overview\n\nBetter.")
    provider = GeminiProvider(
        ProviderConfig(api_key="k"), http_client=recorder.client()
    )

    result = asyncio.run(
        provider.refine_section("## Overview\n\nOld.", "make it better", "doc")
    )

    assert result == "## Overview\n\nBetter."
    payload = recorder.payload()
    assert payload["max_tokens"] == 4000
    assert "make it better" in payload["messages"][1]["content"]


def test_missing_key_fails_without_request() -> None:
    recorder = _ok()
    provider = GeminiProvider(ProviderConfig(), http_client=recorder.client())

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(provider.generate_plan("todo"))

    assert exc_info.value.kind is ProviderErrorKind.NOT_CONFIGURED
    assert recorder.requests == []


@pytest.mark.parametrize(
    ("status", "kind"),
    [
        (401, ProviderErrorKind.AUTH),
        (429, ProviderErrorKind.RATE_LIMITED),
        (503, ProviderErrorKind.UNAVAILABLE),
        (400, ProviderErrorKind.REQUEST),
    ],
)
def test_error_status_is_classified(status: int, kind: ProviderErrorKind) -> None:
    recorder = Recorder(
        lambda request: httpx.Response(
            status, json={"error": {"message": "secret upstream detail"}}
        )
    )
    provider = GeminiProvider(
        ProviderConfig(api_key="k"), http_client=recorder.client()
    )

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(provider.generate_plan("todo"))

    error = exc_info.value
    assert error.kind is kind
    assert error.status_code == status
    assert error.provider == "Gemini"
    assert "secret upstream detail" not in str(error)
    assert len(recorder.requests) == 1


def test_connection_failure_is_network_error() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    provider = GeminiProvider(
        ProviderConfig(api_key="k"), http_client=Recorder(refuse).client()
    )

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(provider.generate_plan("todo"))

    assert exc_info.value.kind is ProviderErrorKind.NETWORK


@pytest.mark.parametrize("content", [None, "", "   "])
def test_empty_content_is_an_error(content: str | None) -> None:
    provider = GeminiProvider(
        ProviderConfig(api_key="k"), http_client=_ok(content).client()
    )

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(provider.generate_plan("todo"))

    assert exc_info.value.kind is ProviderErrorKind.EMPTY_RESPONSE


def test_no_choices_is_an_error() -> None:
    body = _completion("x")
    body["choices"] = []
    recorder = Recorder(lambda request: httpx.Response(200, json=body))
    provider = GeminiProvider(
        ProviderConfig(api_key="k"), http_client=recorder.client()
    )

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(provider.generate_plan("todo"))

    assert exc_info.value.kind is ProviderErrorKind.EMPTY_RESPONSE


def test_long_prompt_is_truncated() -> None:
    recorder = _ok()
    provider = GeminiProvider(
        ProviderConfig(api_key="k"), http_client=recorder.client()
    )

    asyncio.run(provider.generate_plan("x" * 12_000 + "TAIL"))

    user_message = recorder.payload()["messages"][1]["content"]
    assert "x" * 10_000 in user_message
    assert "TAIL" not in user_message


def test_validate_api_key_lists_models() -> None:
    recorder = Recorder(
        lambda request: httpx.Response(200, json={"object": "list", "data": []})
    )
    provider = GeminiProvider(http_client=recorder.client())

    assert asyncio.run(provider.validate_api_key("candidate-key")) is True
    request = recorder.requests[0]
    assert request.url.path.endswith("/models")
    assert request.headers["authorization"] == "Bearer candidate-key"


def test_validate_api_key_rejected() -> None:
    recorder = Recorder(
        lambda request: httpx.Response(401, json={"error": {"message": "bad key"}})
    )
    provider = GeminiProvider(http_client=recorder.client())

    assert asyncio.run(provider.validate_api_key("bad-key")) is False
    assert asyncio.run(provider.validate_api_key("   ")) is False
    assert len(recorder.requests) == 1


def test_availability_follows_configured_key() -> None:
    assert asyncio.run(GeminiProvider(ProviderConfig(api_key="k")).is_available())
    assert not asyncio.run(GeminiProvider(ProviderConfig(api_key=" ")).is_available())
    assert not asyncio.run(GeminiProvider().is_available())


def test_supported_models() -> None:
    assert OpenAIProvider().list_supported_models() == ["o3", "o3-mini"]
