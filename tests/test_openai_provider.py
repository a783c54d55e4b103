import json

import httpx
import pytest

from stagehand.llm_client import ChatCompletionOptions, StagehandLlmClient
from stagehand.llm_errors import MissingApiKeyError, ProviderError
from stagehand.openai_provider import DEFAULT_API_BASE, OpenAiChatProvider

SAMPLE_RESPONSE = {
    "id": "cmpl-test",
    "object": "chat.completion",
    "created": 0,
    "model": "gpt-4o",
    "choices": [
        {
            "index": 0,
            "finish_reason": "stop",
            "message": {"role": "assistant", "content": "Hello!"},
            "logprobs": None,
        }
    ],
    "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    "system_fingerprint": None,
}


def _recording_client(status=200, body=None):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status, json=SAMPLE_RESPONSE if body is None else body)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler)), seen


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv("MODEL_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    return monkeypatch


def test_missing_api_key_raises(clean_env):
    with pytest.raises(MissingApiKeyError):
        OpenAiChatProvider.from_options(None, None)


def test_explicit_key_takes_precedence(clean_env):
    clean_env.setenv("MODEL_API_KEY", "token")
    provider = OpenAiChatProvider.from_options("placeholder", None)
    assert provider.api_key == "placeholder"


def test_model_api_key_env_before_openai_env(clean_env):
    clean_env.setenv("MODEL_API_KEY", "secret")
    clean_env.setenv("OPENAI_API_KEY", "token")
    provider = OpenAiChatProvider.from_options(None, None)
    assert provider.api_key == "secret"


def test_openai_env_used_as_fallback(clean_env):
    clean_env.setenv("OPENAI_API_KEY", "token")
    provider = OpenAiChatProvider.from_options(None, {})
    assert provider.api_key == "token"


def test_default_api_base_without_options(clean_env):
    provider = OpenAiChatProvider.from_options("placeholder", None)
    assert provider.api_base == DEFAULT_API_BASE
    assert provider.organization is None
    assert provider.project is None


@pytest.mark.parametrize("key", ["api_base", "apiBase", "base_url", "baseURL"])
def test_api_base_aliases(clean_env, key):
    provider = OpenAiChatProvider.from_options("placeholder", {key: "http://localhost:9000/v1"})
    assert provider.api_base == "http://localhost:9000/v1"


def test_option_aliases_skip_non_string_values(clean_env):
    provider = OpenAiChatProvider.from_options(
        "placeholder",
        {"organization": 5, "org_id": "org-a", "project": None, "projectId": "proj-b"},
    )
    assert provider.organization == "org-a"
    assert provider.project == "proj-b"


def test_first_alias_wins(clean_env):
    provider = OpenAiChatProvider.from_options(
        "placeholder", {"api_base": "http://localhost:1/v1", "baseURL": "http://localhost:2/v1"}
    )
    assert provider.api_base == "http://localhost:1/v1"


@pytest.mark.asyncio
async def test_create_chat_completion_posts_request():
    client, seen = _recording_client()
    provider = OpenAiChatProvider(
        "placeholder",
        api_base="http://localhost:8080/v1/",
        organization="org-a",
        project="proj-b",
        client=client,
    )
    request = {"model": "gpt-4o", "messages": [{"role": "user", "content": "Say hello."}]}
    response = await provider.create_chat_completion(request)

    assert response == SAMPLE_RESPONSE
    assert len(seen) == 1
    sent = seen[0]
    assert sent.method == "POST"
    assert str(sent.url) == "http://localhost:8080/v1/chat/completions"
    assert sent.headers["Authorization"] == "Bearer placeholder"
    assert sent.headers["OpenAI-Organization"] == "org-a"
    assert sent.headers["OpenAI-Project"] == "proj-b"
    assert json.loads(sent.content) == request


@pytest.mark.asyncio
async def test_error_response_raises_with_api_message():
    client, _ = _recording_client(400, {"error": {"message": "bad request"}})
    provider = OpenAiChatProvider("placeholder", api_base="http://localhost:8080/v1", client=client)
    with pytest.raises(httpx.HTTPStatusError) as info:
        await provider.create_chat_completion({"model": "gpt-4o", "messages": []})
    assert str(info.value) == "bad request"
    assert info.value.response.status_code == 400


@pytest.mark.asyncio
async def test_llm_client_wraps_provider_error():
    client, _ = _recording_client(400, {"error": {"message": "bad request"}})
    provider = OpenAiChatProvider("placeholder", api_base="http://localhost:8080/v1", client=client)
    llm = StagehandLlmClient("gpt-4o", provider)
    with pytest.raises(ProviderError) as info:
        await llm.create_chat_completion(
            [{"role": "user", "content": "Say hello."}], ChatCompletionOptions()
        )
    assert str(info.value) == "bad request"