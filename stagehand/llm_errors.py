"""Exceptions for chat completion clients and providers."""

from __future__ import annotations


class StagehandLlmError(Exception):
    """Base class for chat completion client errors."""


class MissingApiKeyError(StagehandLlmError):
    """No API key was configured or found in the environment."""

    def __init__(self) -> None:
        super().__init__("missing OpenAI API key; set MODEL_API_KEY or OPENAI_API_KEY")


class MissingDefaultModelError(StagehandLlmError):
    """Neither the request nor the client named a model."""

    def __init__(self) -> None:
        super().__init__("missing default model configuration")


class InvalidRequestError(StagehandLlmError):
    """A chat completion request could not be built."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"invalid chat completion request: {detail}")
        self.detail = detail


class ProviderError(StagehandLlmError):
    """The chat completion provider reported a failure."""

    def __init__(self, error: BaseException) -> None:
        super().__init__(str(error))
        self.error = error
        self.__cause__ = error

    def __str__(self) -> str:
        return str(self.error)