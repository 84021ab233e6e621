"""Tests for lull.rendering.boundary — server pass and client pass together.

Each scenario declares the same unit twice (once for the server, once for
the client), the way an app module is imported in both processes. The
server output becomes the client's ``document``.

Covers:

- ssr content persisted through hydration, then live (no placeholder flash)
- non-ssr fallback rendered live at once, then replaced
- after-paint units held back until the phase advances
- hydration mirroring server output even when the module is cached
- fetch failures reaching the host
- concurrent server passes
"""

import pytest

from lull.config import LazyConfig
from lull.constants import Mode, Phase
from lull.errors import LazyLoadError
from lull.lazy.phase import PhaseScheduler
from lull.lazy.unit import lazy, lazy_after_paint, lazy_for_paint
from lull.manifest.model import Manifest
from lull.rendering.boundary import ClientBoundary, LazySuspense, render_server, render_server_pass
from lull.runtime import get_scheduler
from lull.testing import Component, MockImport, settle

CONTENT = '<p class="p">Content</p>'
FALLBACK = "<i>Fallback</i>"
CONFIG = LazyConfig(manifest=Manifest(public_path="/", assets={"./mock": ["mock.js"]}))


def _declare(*, server: bool, ssr: bool, trigger: Phase = Phase.IMMEDIATE):
    child = Component(lambda: CONTENT)
    # On the server the import is effectively synchronous.
    mock = MockImport(child, resolved=server)
    declare = lazy_after_paint if trigger is Phase.AFTER_PAINT else lazy_for_paint
    unit = declare(mock, module_id="./mock", ssr=ssr)
    return LazySuspense(unit, fallback=FALLBACK), child, mock


async def _server_document(*, ssr: bool, trigger: Phase = Phase.IMMEDIATE) -> str:
    suspense, _, _ = _declare(server=True, ssr=ssr, trigger=trigger)
    return f"<div>{await render_server(suspense, config=CONFIG)}</div>"


class _Host:
    """Records every re-render the boundary asks for."""

    def __init__(self) -> None:
        self.frames: list[str] = []
        self.boundary: ClientBoundary | None = None

    def __call__(self) -> None:
        assert self.boundary is not None
        self.frames.append(self.boundary.render())


def _client(suspense: LazySuspense, document: str, *, mode: Mode, scheduler=None):
    host = _Host()
    host.boundary = ClientBoundary(
        suspense,
        scheduler or PhaseScheduler(),
        mode=mode,
        document=document,
        on_change=host,
    )
    return host.boundary, host


# ---------------------------------------------------------------------------
# Server pass
# ---------------------------------------------------------------------------


class TestServerPass:
    async def test_ssr_unit_renders_content_between_markers(self):
        document = await _server_document(ssr=True)
        assert CONTENT in document
        assert 'data-lazy-begin="./mock"' in document

    async def test_non_ssr_unit_renders_fallback_with_preload_hints(self):
        document = await _server_document(ssr=False)
        assert FALLBACK in document
        assert CONTENT not in document
        assert 'rel="preload"' in document
        assert 'href="/mock.js"' in document

    async def test_preload_hints_can_be_disabled(self):
        suspense, _, _ = _declare(server=True, ssr=False)
        html = await render_server(suspense, config=LazyConfig(manifest=CONFIG.manifest, preload_assets=False))
        assert html == FALLBACK

    async def test_after_paint_ssr_unit_still_renders_on_server(self):
        document = await _server_document(ssr=True, trigger=Phase.AFTER_PAINT)
        assert CONTENT in document

    async def test_failure_raises_lazy_load_error(self):
        async def broken():
            raise RuntimeError("chunk missing")

        suspense = LazySuspense(lazy_for_paint(broken, module_id="./broken"))
        with pytest.raises(LazyLoadError) as info:
            await render_server(suspense, config=CONFIG)
        assert isinstance(info.value.__cause__, RuntimeError)

    async def test_uses_installed_config(self):
        from lull import runtime

        runtime.init(CONFIG)
        suspense, _, _ = _declare(server=True, ssr=False)
        assert 'href="/mock.js"' in await render_server(suspense)


class TestServerRenderPass:
    async def test_keeps_input_order(self):
        first = lazy_for_paint(
            MockImport(Component(lambda: "<b>1</b>"), resolved=True), module_id="./one"
        )
        second = lazy_for_paint(
            MockImport(Component(lambda: "<b>2</b>"), resolved=True), module_id="./two"
        )

        html = await render_server_pass([LazySuspense(first), LazySuspense(second)], config=CONFIG)

        assert "<b>1</b>" in html[0]
        assert "<b>2</b>" in html[1]

    async def test_pass_is_pinned_at_immediate(self):
        component = Component(lambda: f"<b>{get_scheduler().pinned}:{get_scheduler().phase.name}</b>")
        unit = lazy_for_paint(MockImport(component, resolved=True), module_id="./probe")

        [html] = await render_server_pass([LazySuspense(unit)], config=CONFIG)

        assert "<b>True:IMMEDIATE</b>" in html

    async def test_failure_propagates(self):
        async def broken():
            raise RuntimeError("chunk missing")

        unit = lazy_for_paint(broken, module_id="./broken")
        with pytest.raises(ExceptionGroup) as info:
            await render_server_pass([LazySuspense(unit)], config=CONFIG)
        assert isinstance(info.value.exceptions[0], LazyLoadError)


# ---------------------------------------------------------------------------
# Scenario A: IMMEDIATE, server rendered
# ---------------------------------------------------------------------------


class TestServerRenderedContent:
    @pytest.mark.parametrize("mode", [Mode.HYDRATE, Mode.RENDER])
    async def test_persists_server_markup_then_goes_live(self, mode: Mode):
        document = await _server_document(ssr=True)
        suspense, child, mock = _declare(server=False, ssr=True)
        boundary, host = _client(suspense, document, mode=mode)

        frame = boundary.mount()

        assert frame == CONTENT
        assert not child.called
        assert "<input" not in frame

        await mock.resolve()

        assert child.called
        assert boundary.live
        assert boundary.render() == CONTENT
        # one change straight to live content, no placeholder in between
        assert host.frames == [CONTENT]


# ---------------------------------------------------------------------------
# Scenario B: server rendering disabled for the unit
# ---------------------------------------------------------------------------


class TestClientOnlyContent:
    @pytest.mark.parametrize("mode", [Mode.HYDRATE, Mode.RENDER])
    async def test_live_fallback_then_content(self, mode: Mode):
        document = await _server_document(ssr=False)
        suspense, child, mock = _declare(server=False, ssr=False)
        boundary, host = _client(suspense, document, mode=mode)

        frame = boundary.mount()

        assert frame == FALLBACK
        assert not child.called

        await mock.resolve()

        assert child.called
        assert boundary.render() == CONTENT
        assert host.frames == [CONTENT]


# ---------------------------------------------------------------------------
# Scenario C: AFTER_PAINT
# ---------------------------------------------------------------------------


class TestAfterPaint:
    @pytest.mark.parametrize(("ssr", "placeholder"), [(True, CONTENT), (False, FALLBACK)])
    async def test_waits_for_advance_even_when_resolved(self, ssr: bool, placeholder: str):
        document = await _server_document(ssr=ssr, trigger=Phase.AFTER_PAINT)
        suspense, child, mock = _declare(server=False, ssr=ssr, trigger=Phase.AFTER_PAINT)
        scheduler = PhaseScheduler()
        boundary, host = _client(suspense, document, mode=Mode.HYDRATE, scheduler=scheduler)

        assert boundary.mount() == placeholder
        await mock.resolve()

        # fetched, but the phase gate is still closed
        assert mock.calls == 1
        assert not boundary.active
        assert not child.called
        assert boundary.render() == placeholder
        assert host.frames == []

        scheduler.advance()

        # cached module: activation completes inside advance()
        assert boundary.active
        assert child.called
        assert host.frames == [CONTENT]
        assert mock.calls == 1

    async def test_interaction_unit_waits_for_interaction(self):
        mock = MockImport(Component(lambda: "<form></form>"))
        suspense = LazySuspense(lazy(mock, module_id="./form"), fallback="<button>Edit</button>")
        scheduler = PhaseScheduler()
        boundary, host = _client(suspense, "", mode=Mode.RENDER, scheduler=scheduler)

        assert boundary.mount() == "<button>Edit</button>"
        scheduler.advance()
        await mock.resolve()
        assert not boundary.active

        scheduler.advance_to(Phase.ON_INTERACTION)
        assert host.frames == ["<form></form>"]


# ---------------------------------------------------------------------------
# Cached modules and mode differences
# ---------------------------------------------------------------------------


class TestCachedModule:
    async def test_hydrate_mirrors_server_then_swaps(self):
        document = await _server_document(ssr=True)
        suspense, child, mock = _declare(server=False, ssr=True)
        suspense.unit.loader.preload()
        await mock.resolve()
        boundary, host = _client(suspense, document, mode=Mode.HYDRATE)

        assert boundary.mount() == CONTENT
        assert not child.called

        await settle()

        assert host.frames == [CONTENT]
        assert child.called

    async def test_render_mode_goes_live_on_first_frame(self):
        suspense, child, mock = _declare(server=False, ssr=False)
        suspense.unit.loader.preload()
        await mock.resolve()
        boundary, host = _client(suspense, "", mode=Mode.RENDER)

        assert boundary.mount() == CONTENT
        assert child.called
        await settle()
        assert host.frames == []

    async def test_mode_defaults_to_installed_config(self):
        from lull import runtime

        runtime.init(LazyConfig(mode=Mode.HYDRATE))
        suspense, _, _ = _declare(server=False, ssr=True)
        boundary = ClientBoundary(suspense, PhaseScheduler())
        assert boundary.mode is Mode.HYDRATE


# ---------------------------------------------------------------------------
# Failures and lifecycle
# ---------------------------------------------------------------------------


class TestFailure:
    async def test_fetch_failure_surfaces_on_render(self):
        suspense, _, mock = _declare(server=False, ssr=False)
        changes = []
        boundary = ClientBoundary(
            suspense, PhaseScheduler(), mode=Mode.RENDER, on_change=lambda: changes.append(True)
        )

        boundary.mount()
        await mock.reject(RuntimeError("offline"))

        assert changes == [True]
        with pytest.raises(LazyLoadError) as info:
            boundary.render()
        assert info.value.module_id == "./mock"
        assert isinstance(info.value.__cause__, RuntimeError)


class TestUnmount:
    async def test_unmount_cancels_phase_subscription(self):
        suspense, _, mock = _declare(server=False, ssr=True, trigger=Phase.AFTER_PAINT)
        scheduler = PhaseScheduler()
        boundary, host = _client(suspense, "", mode=Mode.RENDER, scheduler=scheduler)

        boundary.mount()
        assert scheduler.subscriber_count == 1
        boundary.unmount()
        assert scheduler.subscriber_count == 0

        scheduler.advance()
        await mock.resolve()
        assert not boundary.active
        assert host.frames == []
