"""Tracking of browser pages, their root frames and DOM script injection state."""

from __future__ import annotations

import abc
from collections.abc import Iterator
from dataclasses import dataclass, field


class ContextError(Exception):
    """Base class for errors raised by :class:`StagehandContext`."""


class PageNotFoundError(ContextError, KeyError):
    """Raised when an operation refers to a page that is not registered."""

    def __init__(self, page_id: str) -> None:
        super().__init__(page_id)
        self.page_id = page_id

    def __str__(self) -> str:
        return f"page '{self.page_id}' is not registered"


class AdapterError(Exception):
    """Raised by adapters when an operation on the browser runtime fails."""


class ScriptInjectionError(ContextError):
    """Raised when the adapter fails to inject the DOM script into a page."""

    def __init__(self, page_id: str) -> None:
        super().__init__(page_id)
        self.page_id = page_id

    def __str__(self) -> str:
        return f"failed to inject DOM script for '{self.page_id}'"


class StagehandAdapter(abc.ABC):
    """Bridge between a context and the underlying browser runtime."""

    @abc.abstractmethod
    async def inject_dom_script(self, page_id: str, script: str) -> None:
        """Inject the DOM script into the page; raise :class:`AdapterError` on failure."""

    @abc.abstractmethod
    def log_debug(self, message: str, category: str) -> None:
        """Emit a debug message."""

    @abc.abstractmethod
    def log_error(self, message: str, category: str) -> None:
        """Emit an error message."""

    @abc.abstractmethod
    def notify_active_page(self, page_id: str) -> None:
        """Tell the runtime that the active page changed."""


@dataclass
class StagehandPage:
    """A single browser page known to the context."""

    id: str
    frame_id: str | None = None
    dom_script_injected: bool = field(default=False)

    def _replace_frame_id(self, frame_id: str | None) -> str | None:
        previous, self.frame_id = self.frame_id, frame_id
        return previous


class StagehandContext:
    """The set of pages in a session, indexed by page id and by root frame id."""

    def __init__(self, adapter: StagehandAdapter, dom_script: str) -> None:
        self._adapter = adapter
        self._dom_script = dom_script
        self._pages: dict[str, StagehandPage] = {}
        self._frame_index: dict[str, str] = {}
        self._active_page: str | None = None

    def register_page(self, page_id: str, frame_id: str | None = None) -> StagehandPage:
        """Register a page, or update its frame id if it is already known."""
        page = self._pages.get(page_id)
        if page is None:
            page = StagehandPage(page_id)
            self._pages[page_id] = page
        if frame_id is not None:
            previous = page._replace_frame_id(frame_id)
            if previous is not None:
                self._frame_index.pop(previous, None)
            self._frame_index[frame_id] = page.id
        return page

    def page(self, page_id: str) -> StagehandPage | None:
        return self._pages.get(page_id)

    def page_ids(self) -> Iterator[str]:
        return iter(list(self._pages))

    def set_active_page(self, page_id: str) -> None:
        """Make a registered page active and notify the adapter."""
        if page_id not in self._pages:
            raise PageNotFoundError(page_id)
        self._active_page = page_id
        self._adapter.notify_active_page(page_id)
        self._adapter.log_debug(f"Set active page to {page_id}", "context")

    def active_page(self) -> StagehandPage | None:
        if self._active_page is None:
            return None
        return self._pages.get(self._active_page)

    def active_page_id(self) -> str | None:
        return self._active_page

    def register_frame_id(self, page_id: str, frame_id: str) -> None:
        """Set the root frame id of a page and refresh the frame index."""
        page = self._pages.get(page_id)
        if page is None:
            raise PageNotFoundError(page_id)
        previous = page._replace_frame_id(frame_id)
        if previous is not None:
            self._frame_index.pop(previous, None)
        self._frame_index[frame_id] = page.id

    def unregister_frame_id(self, frame_id: str) -> bool:
        """Drop a frame mapping; return whether one existed."""
        page_id = self._frame_index.pop(frame_id, None)
        if page_id is None:
            return False
        page = self._pages.get(page_id)
        if page is not None and page.frame_id == frame_id:
            page._replace_frame_id(None)
        return True

    def page_by_frame_id(self, frame_id: str) -> StagehandPage | None:
        page_id = self._frame_index.get(frame_id)
        if page_id is None:
            return None
        return self._pages.get(page_id)

    def update_frame_id(self, page_id: str, frame_id: str) -> None:
        self.register_frame_id(page_id, frame_id)

    def remove_page(self, page_id: str) -> bool:
        """Forget a page and its frame mapping; return whether it was registered."""
        page = self._pages.pop(page_id, None)
        if page is None:
            return False
        if page.frame_id is not None:
            self._frame_index.pop(page.frame_id, None)
        if self._active_page == page_id:
            self._active_page = None
        return True

    def frame_id_for(self, page_id: str) -> str | None:
        page = self._pages.get(page_id)
        return page.frame_id if page is not None else None

    async def ensure_dom_script(self, page_id: str) -> bool:
        """Inject the DOM script once; return True if injected by this call."""
        page = self._pages.get(page_id)
        if page is None:
            raise PageNotFoundError(page_id)
        if page.dom_script_injected:
            return False
        try:
            await self._adapter.inject_dom_script(page_id, self._dom_script)
        except AdapterError as exc:
            raise ScriptInjectionError(page_id) from exc
        page.dom_script_injected = True
        self._adapter.log_debug(f"Injected DOM script into {page_id}", "context")
        return True

    def __repr__(self) -> str:
        return (
            f"StagehandContext(page_count={len(self._pages)}, "
            f"frame_count={len(self._frame_index)}, "
            f"active_page={self._active_page!r})"
        )