import asyncio

import httpx
import pytest
from pydantic import SecretStr

from readmemuse.llm import openrouter as openrouter_module
from readmemuse.llm.config import LLMConfig, LLMProvider, ProviderConfig, SamplingParams
from readmemuse.llm.errors import (
    AuthenticationError,
    InvalidRequestError,
    LLMError,
    LLMErrorType,
    RateLimitedError,
)
from readmemuse.llm.messages import InputMessage, MessageRole
from readmemuse.llm.openrouter import OPENROUTER_API_URL, OpenRouterClient


def make_config(api_key: str = "test-key") -> LLMConfig:
    return LLMConfig(
        provider_config=ProviderConfig(
            provider=LLMProvider.OPENROUTER,
            model_name="openai/gpt-4o-mini",
            api_key=SecretStr(api_key),
        ),
        sampling=SamplingParams(
            temperature=0.5,
            top_p=0.9,
            max_tokens=1000,
        ),
    )


class TestBuildRequestBody:
    def test_build_request_body_messages(self):
        client = OpenRouterClient(make_config())
        messages = [
            InputMessage(role=MessageRole.SYSTEM, content="You write docs"),
            InputMessage(role=MessageRole.USER, content="Update README.md"),
        ]

        body = client._build_request_body(messages)

        assert body["model"] == "openai/gpt-4o-mini"
        assert body["temperature"] == 0.5
        assert body["top_p"] == 0.9
        assert body["max_output_tokens"] == 1000
        assert len(body["input"]) == 2
        assert body["input"][0]["role"] == "system"
        assert body["input"][1]["content"] == "Update README.md"
        assert "tools" not in body


class TestClassifyError:
    def test_error_400_invalid_request(self):
        client = OpenRouterClient(make_config())
        error = client._classify_error(400, {"error": {"message": "Bad input"}})

        assert isinstance(error, InvalidRequestError)
        assert error.error_type == LLMErrorType.INVALID_REQUEST
        assert error.retryable is False
        assert "Bad input" in str(error)

    def test_error_401_auth_failed(self):
        client = OpenRouterClient(make_config())
        error = client._classify_error(401, {"error": {"message": "Invalid API key"}})

        assert error.error_type == LLMErrorType.AUTH_FAILED
        assert error.retryable is False

    def test_error_429_rate_limited(self):
        client = OpenRouterClient(make_config())
        error = client._classify_error(429, {"error": {"message": "Rate limit exceeded"}})

        assert isinstance(error, RateLimitedError)
        assert error.error_type == LLMErrorType.RATE_LIMITED
        assert error.retryable is True

    def test_error_502_without_body(self):
        client = OpenRouterClient(make_config())
        error = client._classify_error(502, None)

        assert error.error_type == LLMErrorType.PROVIDER_ERROR
        assert error.retryable is True
        assert "HTTP 502" in str(error)
        assert error.details == {"status_code": 502}

    def test_error_unknown_status_defaults_to_provider_error(self):
        client = OpenRouterClient(make_config())
        error = client._classify_error(418, {"error": {"message": "I'm a teapot"}})

        assert error.error_type == LLMErrorType.PROVIDER_ERROR
        assert error.retryable is True


class TestGetHeaders:
    def test_get_headers_includes_auth(self):
        client = OpenRouterClient(make_config("my-secret-key"))
        headers = client._get_headers()

        assert headers["Authorization"] == "Bearer my-secret-key"
        assert headers["Content-Type"] == "application/json"
        assert headers["X-Title"] == "ReadmeMuse"

    def test_get_headers_raises_without_api_key(self):
        client = OpenRouterClient(LLMConfig(provider_config=ProviderConfig(api_key=None)))

        with pytest.raises(AuthenticationError):
            client._get_headers()


class TestClientProperties:
    def test_model_name_property(self):
        assert OpenRouterClient(make_config()).model_name == "openai/gpt-4o-mini"

    def test_provider_property(self):
        assert OpenRouterClient(make_config()).provider == "openrouter"

    def test_api_url_constant(self):
        assert OPENROUTER_API_URL == "https://openrouter.ai/api/v1/responses"


class FakeResponse:
    def __init__(self, status_code: int, body: dict | None):
        self.status_code = status_code
        self._body = body

    def json(self):
        if self._body is None:
            raise ValueError("not json")
        return self._body


class FakeClient:
    def __init__(self, responses: list[object], state: dict[str, int]):
        self._responses = responses
        self._state = state

    async def post(self, _url: str, json: dict):
        index = self._state["index"]
        self._state["index"] += 1
        response = self._responses[index]
        if isinstance(response, Exception):
            raise response
        return response

    async def aclose(self):
        return None


RESPONSE_BODY = {
    "id": "resp_123",
    "model": "openai/gpt-4o-mini",
    "status": "completed",
    "output": [
        {
            "type": "message",
            "role": "assistant",
            "content": [{"type": "output_text", "text": "ok"}],
        }
    ],
    "usage": {"input_tokens": 1, "output_tokens": 1, "total_tokens": 2},
}


def patch_transport(monkeypatch: pytest.MonkeyPatch, responses: list[object]) -> dict[str, int]:
    state = {"index": 0}

    async def fake_get_client(self):
        return FakeClient(responses, state)

    async def fake_sleep(_delay: float):
        return None

    monkeypatch.setattr(OpenRouterClient, "_get_client", fake_get_client)
    monkeypatch.setattr(openrouter_module.asyncio, "sleep", fake_sleep)
    return state


def make_retrying_client(max_retries: int = 1) -> OpenRouterClient:
    config = make_config()
    config.retry_policy.max_retries = max_retries
    config.retry_policy.initial_delay_sec = 1.0
    config.retry_policy.max_delay_sec = 1.0
    config.retry_policy.exponential_base = 1.0
    return OpenRouterClient(config)


HELLO = [InputMessage(role=MessageRole.USER, content="hello")]


def test_complete_retries_on_network_error(monkeypatch: pytest.MonkeyPatch):
    client = make_retrying_client()
    state = patch_transport(
        monkeypatch,
        [
            httpx.RequestError("boom", request=httpx.Request("POST", OPENROUTER_API_URL)),
            FakeResponse(200, RESPONSE_BODY),
        ],
    )

    result = asyncio.run(client.complete(HELLO))

    assert result.status == "completed"
    assert result.text_content == "ok"
    assert state["index"] == 2


def test_complete_does_not_retry_auth_failure(monkeypatch: pytest.MonkeyPatch):
    client = make_retrying_client(max_retries=3)
    state = patch_transport(
        monkeypatch,
        [FakeResponse(401, {"error": {"message": "Invalid API key"}})],
    )

    with pytest.raises(LLMError) as excinfo:
        asyncio.run(client.complete(HELLO))

    assert excinfo.value.error_type == LLMErrorType.AUTH_FAILED
    assert state["index"] == 1


def test_complete_gives_up_after_max_retries(monkeypatch: pytest.MonkeyPatch):
    client = make_retrying_client(max_retries=1)
    state = patch_transport(monkeypatch, [FakeResponse(503, None), FakeResponse(503, None)])

    with pytest.raises(LLMError) as excinfo:
        asyncio.run(client.complete(HELLO))

    assert excinfo.value.error_type == LLMErrorType.PROVIDER_ERROR
    assert state["index"] == 2


def test_complete_accepts_chat_completions_shape(monkeypatch: pytest.MonkeyPatch):
    client = make_retrying_client(max_retries=0)
    body = {
        "id": "chat-1",
        "choices": [{"message": {"role": "assistant", "content": '{"summary": "s"}'}}],
        "usage": {"prompt_tokens": 3, "completion_tokens": 4, "total_tokens": 7},
    }
    patch_transport(monkeypatch, [FakeResponse(200, body)])

    result = asyncio.run(client.complete(HELLO))

    assert result.text_content == '{"summary": "s"}'
    assert result.usage.total_tokens == 7
