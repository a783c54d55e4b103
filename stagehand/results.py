"""Helpers for unpacking responses returned by the Stagehand API."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_PREFERRED_KEYS = ("result", "data", "elements")


def resolve_result_value(value: Any) -> Any:
    """Return the payload under the first of result, data or elements, else the value itself."""
    if isinstance(value, Mapping):
        for key in _PREFERRED_KEYS:
            if key in value:
                return value[key]
    return value


def find_metadata(value: Any) -> Any:
    """Return the response metadata, at the top level or inside ``result``; None if absent."""
    if not isinstance(value, Mapping):
        return None
    if "metadata" in value:
        return value["metadata"]
    inner = value.get("result")
    if isinstance(inner, Mapping) and "metadata" in inner:
        return inner["metadata"]
    return None


def _as_unsigned(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return None


def extract_metrics(value: Any) -> tuple[int, int, int] | None:
    """Return (prompt tokens, completion tokens, inference ms) if the metadata holds all three."""
    meta = find_metadata(value)
    if not isinstance(meta, Mapping):
        return None
    numbers = tuple(
        _as_unsigned(meta.get(key))
        for key in ("promptTokens", "completionTokens", "inferenceTimeMs")
    )
    if any(number is None for number in numbers):
        return None
    return numbers  # type: ignore[return-value]