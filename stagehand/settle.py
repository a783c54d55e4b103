"""Network activity tracking used to decide when a page's DOM has settled."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from .log import StagehandLogger

DEFAULT_QUIET_WINDOW = 0.5
DEFAULT_STALL_THRESHOLD = 2.0

_IGNORED_RESOURCE_TYPES = frozenset({"WebSocket", "EventSource"})
_DOCUMENT_RESOURCE_TYPE = "Document"


@dataclass
class _RequestMeta:
    url: str
    started_at: float


class NetworkSettleTracker:
    """Follows in-flight requests and a quiet timer that runs while none are pending.

    The page counts as settled once the quiet timer has run for ``quiet_window``
    seconds without being interrupted by a new request.
    """

    def __init__(
        self,
        quiet_window: float = DEFAULT_QUIET_WINDOW,
        *,
        clock: Callable[[], float] = time.monotonic,
        logger: StagehandLogger | None = None,
    ) -> None:
        self.quiet_window = quiet_window
        self._clock = clock
        self._logger = logger
        self._inflight: set[str] = set()
        self._meta: dict[str, _RequestMeta] = {}
        self._doc_by_frame: dict[str, str] = {}
        self._quiet_started: float | None = None
        self._start_quiet_timer()

    @property
    def inflight(self) -> frozenset[str]:
        """Identifiers of the requests still pending."""
        return frozenset(self._inflight)

    @property
    def quiet_timer_running(self) -> bool:
        return self._quiet_started is not None

    def _start_quiet_timer(self) -> None:
        if self._quiet_started is None:
            self._quiet_started = self._clock()

    def _clear_quiet_timer(self) -> None:
        self._quiet_started = None

    def _after_event(self) -> None:
        if not self._inflight:
            self._start_quiet_timer()

    def request_will_be_sent(
        self,
        request_id: str,
        url: str,
        resource_type: str | None = None,
        frame_id: str | None = None,
    ) -> None:
        """Record a request start; WebSocket and EventSource requests are ignored."""
        if resource_type in _IGNORED_RESOURCE_TYPES:
            return
        self._inflight.add(request_id)
        self._meta[request_id] = _RequestMeta(url, self._clock())
        if resource_type == _DOCUMENT_RESOURCE_TYPE and frame_id is not None:
            self._doc_by_frame[frame_id] = request_id
        self._clear_quiet_timer()
        self._after_event()

    def finish_request(self, request_id: str) -> None:
        """Mark a request as finished, failed or served from cache."""
        was_inflight = request_id in self._inflight
        self._inflight.discard(request_id)
        self._meta.pop(request_id, None)
        self._doc_by_frame = {
            frame: rid for frame, rid in self._doc_by_frame.items() if rid != request_id
        }
        if was_inflight:
            self._clear_quiet_timer()
        self._after_event()

    def response_received(self, request_id: str, url: str) -> None:
        """Finish requests for ``data:`` URLs, which get no loading events."""
        if url.startswith("data:"):
            self.finish_request(request_id)
        else:
            self._after_event()

    def frame_stopped(self, frame_id: str) -> None:
        """Finish the document request of a frame that stopped loading."""
        request_id = self._doc_by_frame.pop(frame_id, None)
        if request_id is not None:
            self.finish_request(request_id)
        else:
            self._after_event()

    def sweep_stalled(
        self, threshold: float = DEFAULT_STALL_THRESHOLD, now: float | None = None
    ) -> list[tuple[str, str]]:
        """Force completion of requests older than ``threshold`` seconds.

        Returns the (request id, url) pairs that were forced.
        """
        if now is None:
            now = self._clock()
        stalled = [
            (request_id, entry.url)
            for request_id, entry in self._meta.items()
            if now - entry.started_at > threshold
        ]
        for request_id, url in stalled:
            if self._logger is not None:
                self._logger.debug(
                    "forcing completion of stalled request", "dom-settle", {"url": url}
                )
            self.finish_request(request_id)
        return stalled

    def is_quiet(self) -> bool:
        """Whether the quiet timer has run for the full quiet window."""
        if self._quiet_started is None:
            return False
        return self._clock() - self._quiet_started >= self.quiet_window