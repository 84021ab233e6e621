"""Lazy suspense boundaries for the server and client passes.

A ``LazySuspense`` pairs one lazy unit with fallback markup. The same
declaration renders twice:

1. **Server pass** (``render_server`` / ``render_server_pass``): units
   declared with ``ssr=True`` are loaded and rendered between markers;
   the rest emit preload hints for their assets plus the fallback.
2. **Client pass** (``ClientBoundary``): the unit is preloaded at once,
   activated when the session's phase reaches its trigger, and the
   visible markup moves from placeholder to live content exactly once.

Placeholder selection on the client::

    server markers for this unit in the document -> persisted server markup
    otherwise                                    -> fallback

In ``Mode.HYDRATE`` the first frame always mirrors the server decision,
even when the module is already cached, so hydration matches the page.
The live content follows on the next notification.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import anyio

from lull.config import LazyConfig
from lull.constants import Mode
from lull.errors import LazyLoadError
from lull.lazy.deferred import default_export
from lull.lazy.phase import PhaseScheduler, Subscription
from lull.lazy.unit import LazyUnit
from lull.rendering.markers import extract_persisted, preload_links, wrap_ssr
from lull.runtime import get_config, session

logger = logging.getLogger("lull.render")


@dataclass(frozen=True, slots=True)
class LazySuspense:
    """A lazy unit plus what to show while it is not live.

    Attributes:
        unit: The lazy unit.
        fallback: Markup shown when no server output can be reused.
        props: Keyword arguments passed to the unit's component.
    """

    unit: LazyUnit
    fallback: str = ""
    props: Mapping[str, Any] = field(default_factory=dict)


def render_content(module: Any, props: Mapping[str, Any]) -> str:
    """Call a normalized module's default-export component."""
    component = default_export(module)
    return str(component(**props))


# ---------------------------------------------------------------------------
# Server pass
# ---------------------------------------------------------------------------

async def render_server(suspense: LazySuspense, *, config: LazyConfig | None = None) -> str:
    """Render one boundary for the server pass.

    Raises:
        LazyLoadError: An ``ssr=True`` unit failed to load.
    """
    config = config if config is not None else get_config()
    unit = suspense.unit
    unit.loader.preload()

    if not unit.ssr:
        hints = preload_links(config.manifest.asset_urls(unit.module_id)) if config.preload_assets else ""
        return hints + suspense.fallback

    try:
        module = await unit.loader.start()
    except Exception as exc:
        raise LazyLoadError(unit.module_id) from exc
    return wrap_ssr(unit.module_id, render_content(module, suspense.props))


async def render_server_pass(
    suspenses: Sequence[LazySuspense],
    *,
    config: LazyConfig | None = None,
) -> list[str]:
    """Render several boundaries in one server pass.

    Loads run concurrently; output keeps input order. The pass runs in a
    pinned session, so ``get_scheduler()`` reports ``IMMEDIATE`` throughout.
    Load failures propagate as an exception group of ``LazyLoadError``.
    """
    config = config if config is not None else get_config()
    rendered = [""] * len(suspenses)

    async def _render(index: int, suspense: LazySuspense) -> None:
        rendered[index] = await render_server(suspense, config=config)

    with session(server=True):
        async with anyio.create_task_group() as tg:
            for index, suspense in enumerate(suspenses):
                tg.start_soon(_render, index, suspense)
    return rendered


# ---------------------------------------------------------------------------
# Client pass
# ---------------------------------------------------------------------------

class ClientBoundary:
    """Client-side state of one lazy boundary.

    Args:
        suspense: The boundary declaration.
        scheduler: The session's phase scheduler.
        mode: ``RENDER`` or ``HYDRATE``; defaults to the runtime config.
        document: Markup currently on the page (the server output).
        on_change: Called with no arguments whenever the visible markup
            changes after mount.

    Usage::

        boundary = ClientBoundary(suspense, scheduler, document=page)
        html = boundary.mount()
        ...
        html = boundary.render()   # after on_change fires
    """

    __slots__ = (
        "_active",
        "_error",
        "_mirroring",
        "_module",
        "_mounted",
        "_on_change",
        "_persisted",
        "_scheduler",
        "_subscription",
        "mode",
        "suspense",
    )

    def __init__(
        self,
        suspense: LazySuspense,
        scheduler: PhaseScheduler,
        *,
        mode: Mode | None = None,
        document: str = "",
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.suspense = suspense
        self.mode = mode if mode is not None else get_config().mode
        self._scheduler = scheduler
        self._on_change = on_change
        self._persisted = extract_persisted(document, suspense.unit.module_id)
        self._subscription: Subscription | None = None
        self._module: Any = None
        self._error: BaseException | None = None
        self._active = False
        self._mounted = False
        self._mirroring = False

    @property
    def unit(self) -> LazyUnit:
        return self.suspense.unit

    @property
    def active(self) -> bool:
        """True once the phase gate let this unit start."""
        return self._active

    @property
    def live(self) -> bool:
        """True once the unit's content replaces the placeholder."""
        return self._module is not None and not self._mirroring

    def mount(self) -> str:
        """Preload, arm the phase gate and return the initial frame."""
        self.unit.loader.preload()
        self._mirroring = self.mode is Mode.HYDRATE
        self._subscription = self._scheduler.subscribe(self.unit.trigger, self._activate)
        try:
            frame = self.render()
        finally:
            self._mounted = True
        if self._mirroring:
            self._mirroring = False
            if self._module is not None or self._error is not None:
                # The module was ready before hydration; swap in live content next.
                asyncio.get_running_loop().call_soon(self._notify)
        return frame

    def unmount(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        self._mounted = False
        self._on_change = None

    def render(self) -> str:
        """Return the markup for the current state.

        Raises:
            LazyLoadError: The unit failed to load after activation.
        """
        if self._error is not None and not self._mirroring:
            raise LazyLoadError(self.unit.module_id) from self._error
        if self.live:
            return render_content(self._module, self.suspense.props)
        if self._persisted is not None:
            return self._persisted
        return self.suspense.fallback

    def _activate(self, _phase: object = None) -> None:
        if self._active:
            return
        self._active = True
        logger.debug("Activating %s", self.unit.module_id)
        future = self.unit.loader.start()
        if future.done():
            self._settle(future)
        else:
            future.add_done_callback(self._settle)

    def _settle(self, future: asyncio.Future[Any]) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.debug("Lazy unit %s failed: %r", self.unit.module_id, exc)
            self._error = exc
        else:
            self._module = future.result()
        if self._mounted and not self._mirroring:
            self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()
