"""Chat completion provider for OpenAI-compatible HTTP APIs."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from .llm_client import ChatCompletionProvider
from .llm_errors import MissingApiKeyError

DEFAULT_API_BASE = "https://api.openai.com/v1"

_API_BASE_KEYS = ("api_base", "apiBase", "base_url", "baseURL")
_ORGANIZATION_KEYS = ("organization", "org_id", "orgId")
_PROJECT_KEYS = ("project", "project_id", "projectId")


def _extract_string(options: Mapping[str, Any], keys: Sequence[str]) -> str | None:
    """Return the first value among ``keys`` that is a string."""
    return next(
        (value for key in keys if isinstance(value := options.get(key), str)),
        None,
    )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, Mapping):
        error = body.get("error")
        if isinstance(error, Mapping) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(error, str):
            return error
    return response.text or f"HTTP {response.status_code}"


class OpenAiChatProvider(ChatCompletionProvider):
    """Sends chat completion requests to an OpenAI-compatible endpoint."""

    def __init__(
        self,
        api_key: str,
        *,
        api_base: str = DEFAULT_API_BASE,
        organization: str | None = None,
        project: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key
        self.api_base = api_base.rstrip("/")
        self.organization = organization
        self.project = project
        self._client = client

    @classmethod
    def from_options(
        cls,
        api_key: str | None = None,
        client_options: Mapping[str, Any] | None = None,
    ) -> OpenAiChatProvider:
        """Build a provider from an API key (or the environment) and client options."""
        if api_key is None:
            api_key = os.environ.get("MODEL_API_KEY")
        if api_key is None:
            api_key = os.environ.get("OPENAI_API_KEY")
        if api_key is None:
            raise MissingApiKeyError()

        options = client_options or {}
        return cls(
            api_key,
            api_base=_extract_string(options, _API_BASE_KEYS) or DEFAULT_API_BASE,
            organization=_extract_string(options, _ORGANIZATION_KEYS),
            project=_extract_string(options, _PROJECT_KEYS),
        )

    @property
    def headers(self) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if self.organization is not None:
            headers["OpenAI-Organization"] = self.organization
        if self.project is not None:
            headers["OpenAI-Project"] = self.project
        return headers

    async def create_chat_completion(self, request: Mapping[str, Any]) -> Mapping[str, Any]:
        """POST the request to the chat completions endpoint and return the decoded body."""
        url = f"{self.api_base}/chat/completions"
        if self._client is not None:
            response = await self._client.post(url, json=dict(request), headers=self.headers)
        else:
            async with httpx.AsyncClient() as client:
                response = await client.post(url, json=dict(request), headers=self.headers)
        if response.is_error:
            raise httpx.HTTPStatusError(
                _error_message(response), request=response.request, response=response
            )
        return response.json()

    def __repr__(self) -> str:
        return (
            f"OpenAiChatProvider(api_base={self.api_base!r}, "
            f"organization={self.organization!r}, project={self.project!r})"
        )