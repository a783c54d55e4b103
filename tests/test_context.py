import pytest

from stagehand.context import (
    AdapterError,
    PageNotFoundError,
    ScriptInjectionError,
    StagehandAdapter,
    StagehandContext,
)


class RecordingAdapter(StagehandAdapter):
    def __init__(self, fail_on=None):
        self.inject_calls = []
        self.scripts = []
        self.active_calls = []
        self.debug_logs = []
        self.error_logs = []
        self.fail_on = fail_on

    async def inject_dom_script(self, page_id, script):
        if self.fail_on == page_id:
            raise AdapterError(f"failed for {page_id}")
        self.inject_calls.append(page_id)
        self.scripts.append(script)

    def log_debug(self, message, category):
        self.debug_logs.append(message)

    def log_error(self, message, category):
        self.error_logs.append(message)

    def notify_active_page(self, page_id):
        self.active_calls.append(page_id)


def new_context(dom_script="script"):
    adapter = RecordingAdapter()
    return StagehandContext(adapter, dom_script), adapter


def test_register_page_is_idempotent():
    context, _ = new_context()
    context.register_page("page-1", "frame-a")
    context.register_page("page-1", "frame-b")
    page = context.page("page-1")
    assert page.id == "page-1"
    assert page.frame_id == "frame-b"
    assert list(context.page_ids()) == ["page-1"]


@pytest.mark.asyncio
async def test_ensure_dom_script_injects_once():
    context, adapter = new_context("the-script")
    context.register_page("page-1")
    first = await context.ensure_dom_script("page-1")
    second = await context.ensure_dom_script("page-1")
    assert first is True
    assert second is False
    assert adapter.inject_calls == ["page-1"]
    assert adapter.scripts == ["the-script"]
    assert context.page("page-1").dom_script_injected is True
    assert adapter.debug_logs == ["Injected DOM script into page-1"]


@pytest.mark.asyncio
async def test_ensure_dom_script_propagates_failures():
    adapter = RecordingAdapter(fail_on="page-1")
    context = StagehandContext(adapter, "script")
    context.register_page("page-1")
    with pytest.raises(ScriptInjectionError) as info:
        await context.ensure_dom_script("page-1")
    assert info.value.page_id == "page-1"
    assert isinstance(info.value.__cause__, AdapterError)
    assert context.page("page-1").dom_script_injected is False


def test_set_active_page_notifies_adapter():
    context, adapter = new_context()
    context.register_page("page-1")
    context.set_active_page("page-1")
    assert adapter.active_calls == ["page-1"]
    assert context.active_page().id == "page-1"
    assert context.active_page_id() == "page-1"
    assert adapter.debug_logs == ["Set active page to page-1"]


def test_set_active_page_unknown_raises():
    context, adapter = new_context()
    with pytest.raises(PageNotFoundError) as info:
        context.set_active_page("missing")
    assert info.value.page_id == "missing"
    assert adapter.active_calls == []


def test_update_frame_id_updates_page():
    context, _ = new_context()
    context.register_page("page-1")
    context.update_frame_id("page-1", "frame-xyz")
    assert context.page("page-1").frame_id == "frame-xyz"
    assert context.frame_id_for("page-1") == "frame-xyz"


def test_register_page_tracks_frame_index():
    context, _ = new_context()
    context.register_page("page-1", "frame-1")
    assert context.page_by_frame_id("frame-1").id == "page-1"
    context.register_page("page-1", "frame-2")
    assert context.page_by_frame_id("frame-1") is None
    assert context.page_by_frame_id("frame-2").id == "page-1"


def test_register_and_update_frame_id_refreshes_mapping():
    context, _ = new_context()
    context.register_page("page-1")
    context.register_frame_id("page-1", "frame-1")
    assert context.page_by_frame_id("frame-1").id == "page-1"
    context.update_frame_id("page-1", "frame-2")
    assert context.page_by_frame_id("frame-1") is None
    assert context.page_by_frame_id("frame-2").id == "page-1"


def test_register_frame_id_unknown_page_raises():
    context, _ = new_context()
    with pytest.raises(PageNotFoundError):
        context.register_frame_id("missing", "frame-1")


def test_unregister_frame_id_clears_mapping_and_page_state():
    context, _ = new_context()
    context.register_page("page-1", "frame-3")
    assert context.unregister_frame_id("frame-3") is True
    assert context.page_by_frame_id("frame-3") is None
    assert context.page("page-1").frame_id is None
    assert context.unregister_frame_id("frame-3") is False


def test_remove_page_drops_state_and_active_marker():
    context, _ = new_context()
    context.register_page("page-1", "frame-9")
    context.set_active_page("page-1")
    assert context.remove_page("page-1") is True
    assert context.page("page-1") is None
    assert context.page_by_frame_id("frame-9") is None
    assert context.active_page() is None
    assert context.active_page_id() is None
    assert context.remove_page("page-1") is False


def test_frame_id_for_unknown_page_is_none():
    context, _ = new_context()
    assert context.frame_id_for("missing") is None


@pytest.mark.asyncio
async def test_ensure_dom_script_requires_registered_page():
    context, _ = new_context()
    with pytest.raises(PageNotFoundError) as info:
        await context.ensure_dom_script("missing")
    assert info.value.page_id == "missing"


def test_repr_reports_counts():
    context, _ = new_context()
    context.register_page("page-1", "frame-1")
    context.register_page("page-2")
    assert repr(context) == (
        "StagehandContext(page_count=2, frame_count=1, active_page=None)"
    )