"""Provider-neutral chat completion client with logging and metrics hooks."""

from __future__ import annotations

import abc
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, fields
from datetime import timedelta
from typing import Any

from .llm_errors import InvalidRequestError, MissingDefaultModelError, ProviderError
from .metrics import StagehandFunctionName, StagehandMetrics

LoggerCallback = Callable[[str], None]
MetricsCallback = Callable[[Mapping[str, Any], timedelta, "str | None"], None]


class ChatCompletionProvider(abc.ABC):
    """Something that turns a chat completion request into a response."""

    @abc.abstractmethod
    async def create_chat_completion(self, request: dict[str, Any]) -> Mapping[str, Any]:
        """Send the request and return the decoded response."""


@dataclass
class ChatCompletionOptions:
    """Optional parameters for a chat completion request."""

    model: str | None = None
    store: bool | None = None
    reasoning_effort: str | None = None
    metadata: Any = None
    frequency_penalty: float | None = None
    logit_bias: dict[str, Any] | None = None
    logprobs: bool | None = None
    top_logprobs: int | None = None
    max_tokens: int | None = None
    max_completion_tokens: int | None = None
    n: int | None = None
    modalities: list[str] | None = None
    prediction: Any = None
    audio: Any = None
    presence_penalty: float | None = None
    response_format: Any = None
    seed: int | None = None
    service_tier: str | None = None
    stop: Any = None
    stream: bool | None = None
    stream_options: Any = None
    temperature: float | None = None
    top_p: float | None = None
    tools: list[Any] | None = None
    tool_choice: Any = None
    parallel_tool_calls: bool | None = None
    user: str | None = None
    web_search_options: Any = None
    function_call: Any = None
    functions: list[Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Request fields that are set, excluding the model."""
        return {
            f.name: value
            for f in fields(self)
            if f.name != "model" and (value := getattr(self, f.name)) is not None
        }


def parse_function_name(name: str | None) -> StagehandFunctionName:
    """Map a function name to its metrics category; unknown names count as agent."""
    if name is None:
        return StagehandFunctionName.AGENT
    try:
        return StagehandFunctionName(name.strip().lower())
    except ValueError:
        return StagehandFunctionName.AGENT


def _validate_messages(messages: Any) -> list[dict[str, Any]]:
    if isinstance(messages, (str, bytes)) or not isinstance(messages, Sequence):
        raise InvalidRequestError("messages must be a sequence of message objects")
    validated = []
    for position, message in enumerate(messages):
        if not isinstance(message, Mapping) or "role" not in message:
            raise InvalidRequestError(f"message {position} has no role")
        validated.append(dict(message))
    return validated


class StagehandLlmClient:
    """Chat completion client that logs requests and records usage metrics."""

    def __init__(
        self,
        default_model: str,
        provider: ChatCompletionProvider,
        *,
        logger: LoggerCallback | None = None,
        metrics_callback: MetricsCallback | None = None,
        metrics_store: StagehandMetrics | None = None,
    ) -> None:
        self.default_model = default_model
        self.provider = provider
        self.logger = logger
        self.metrics_callback = metrics_callback
        self.metrics_store = metrics_store

    def build_request(
        self,
        messages: Sequence[Mapping[str, Any]],
        options: ChatCompletionOptions | None = None,
    ) -> dict[str, Any]:
        """Build a request from messages and options, falling back to the default model."""
        options = options or ChatCompletionOptions()
        model = options.model if options.model is not None else self.default_model
        if not model.strip():
            raise MissingDefaultModelError()
        request: dict[str, Any] = {"model": model, "messages": _validate_messages(messages)}
        request.update(options.to_dict())
        return request

    async def create_chat_completion(
        self,
        messages: Sequence[Mapping[str, Any]],
        options: ChatCompletionOptions | None = None,
        function_name: str | None = None,
    ) -> Mapping[str, Any]:
        """Build a request from messages and options and send it."""
        request = self.build_request(messages, options)
        return await self._execute(request, function_name)

    async def create_with_request(
        self,
        request: Mapping[str, Any],
        function_name: str | None = None,
    ) -> Mapping[str, Any]:
        """Send a fully formed request, filling in the default model if it has none."""
        request = dict(request)
        model = request.get("model") or ""
        if not str(model).strip():
            if not self.default_model.strip():
                raise MissingDefaultModelError()
            request["model"] = self.default_model
        return await self._execute(request, function_name)

    async def _execute(
        self, request: dict[str, Any], function_name: str | None
    ) -> Mapping[str, Any]:
        model = request["model"]
        self._log(
            "debug",
            f"Sending chat completion request to model={model} "
            f"function={function_name or 'n/a'}",
        )
        start = time.perf_counter()
        try:
            response = await self.provider.create_chat_completion(request)
        except Exception as exc:
            self._log("error", f"Chat completion failed for model={model}: {exc}")
            raise ProviderError(exc) from exc
        elapsed = timedelta(seconds=time.perf_counter() - start)
        self._record_metrics(function_name, response, elapsed)
        if self.metrics_callback is not None:
            self.metrics_callback(response, elapsed, function_name)
        self._log(
            "debug",
            f"Chat completion succeeded: model={model} "
            f"duration={elapsed // timedelta(milliseconds=1)}ms",
        )
        return response

    def _log(self, level: str, message: str) -> None:
        if self.logger is not None:
            self.logger(f"[llm][{level}] {message}")

    def _record_metrics(
        self,
        function_name: str | None,
        response: Mapping[str, Any],
        elapsed: timedelta,
    ) -> None:
        if self.metrics_store is None:
            return
        usage = response.get("usage") if isinstance(response, Mapping) else None
        if not isinstance(usage, Mapping):
            return
        self.metrics_store.record(
            parse_function_name(function_name),
            int(usage.get("prompt_tokens", 0)),
            int(usage.get("completion_tokens", 0)),
            elapsed // timedelta(milliseconds=1),
        )

    def __repr__(self) -> str:
        return (
            f"StagehandLlmClient(provider={self.provider!r}, "
            f"default_model={self.default_model!r}, "
            f"logger_attached={self.logger is not None}, "
            f"metrics_callback={self.metrics_callback is not None}, "
            f"metrics_store={self.metrics_store is not None})"
        )