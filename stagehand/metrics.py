"""Token and latency accounting for the Stagehand functions."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass, fields


class StagehandFunctionName(str, enum.Enum):
    """Function categories tracked in metrics."""

    ACT = "act"
    EXTRACT = "extract"
    OBSERVE = "observe"
    AGENT = "agent"


_SUFFIXES = ("prompt_tokens", "completion_tokens", "inference_time_ms")


@dataclass
class StagehandMetrics:
    """Token usage and inference time, per function and in total."""

    act_prompt_tokens: int = 0
    act_completion_tokens: int = 0
    act_inference_time_ms: int = 0

    extract_prompt_tokens: int = 0
    extract_completion_tokens: int = 0
    extract_inference_time_ms: int = 0

    observe_prompt_tokens: int = 0
    observe_completion_tokens: int = 0
    observe_inference_time_ms: int = 0

    agent_prompt_tokens: int = 0
    agent_completion_tokens: int = 0
    agent_inference_time_ms: int = 0

    total_prompt_tokens: int = 0
    total_completion_tokens: int = 0
    total_inference_time_ms: int = 0

    def merge(self, other: StagehandMetrics) -> None:
        """Add every counter of another instance to this one."""
        for f in fields(self):
            setattr(self, f.name, getattr(self, f.name) + getattr(other, f.name))

    def record(
        self,
        function: StagehandFunctionName,
        prompt_tokens: int,
        completion_tokens: int,
        inference_time_ms: int,
    ) -> None:
        """Add usage for one function call to its counters and to the totals."""
        amounts = (prompt_tokens, completion_tokens, inference_time_ms)
        for prefix in (StagehandFunctionName(function).value, "total"):
            for suffix, amount in zip(_SUFFIXES, amounts):
                name = f"{prefix}_{suffix}"
                setattr(self, name, getattr(self, name) + amount)


def start_inference_timer() -> int:
    """Return a start mark for measuring inference time."""
    return time.perf_counter_ns()


def get_inference_time_ms(start: int) -> int:
    """Whole milliseconds elapsed since a mark from :func:`start_inference_timer`."""
    return (time.perf_counter_ns() - start) // 1_000_000