"""Single-fire deferred module values.

A ``DeferredLoader`` wraps a caller-supplied async import function and
guarantees it runs at most once per successful load. ``preload()`` starts
the fetch without activating anything; ``start()`` hands back a future the
host awaits before showing live content.

State machine::

    UNSTARTED --preload()/start()--> LOADING --ok--> RESOLVED
                                        |
                                        +--error--> UNSTARTED (not cached)

All callers share one completion future per attempt, so N preloads and M
starts coalesce onto a single call of the import function.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from enum import Enum
from typing import Any

logger = logging.getLogger("lull.loader")

type ImportFunction = Callable[[], Awaitable[Any]]


class Status(Enum):
    UNSTARTED = "unstarted"
    LOADING = "loading"
    RESOLVED = "resolved"


def has_default(module: Any) -> bool:
    """Return True if *module* already exposes a ``default`` export."""
    if isinstance(module, Mapping):
        return module.get("default") is not None
    return getattr(module, "default", None) is not None


def normalize(module: Any) -> Any:
    """Wrap a module lacking a default export as ``{"default": module}``."""
    if has_default(module):
        return module
    return {"default": module}


def default_export(module: Any) -> Any:
    """Return the default export of a normalized module."""
    if isinstance(module, Mapping):
        return module["default"]
    return module.default


class DeferredLoader:
    """At-most-once async loader with separate preload and start.

    Args:
        load: Zero-argument callable returning an awaitable module value.

    Must be driven from inside a running event loop.
    """

    __slots__ = ("_completion", "_load", "_result", "_status")

    def __init__(self, load: ImportFunction) -> None:
        self._load = load
        self._status = Status.UNSTARTED
        self._result: Any = None
        self._completion: asyncio.Future[Any] | None = None

    @property
    def status(self) -> Status:
        return self._status

    @property
    def result(self) -> Any:
        """The raw cached module, or ``None`` until the first resolution."""
        return self._result

    @property
    def resolved(self) -> bool:
        return self._status is Status.RESOLVED

    def preload(self) -> None:
        """Begin fetching if nothing is loaded or in flight. Never blocks."""
        if self._status is Status.UNSTARTED:
            self._begin()

    def start(self) -> asyncio.Future[Any]:
        """Return a future for the normalized module.

        If the module is cached the returned future is already done, so
        callers may check ``done()`` and proceed in the same tick.
        """
        if self._status is Status.UNSTARTED:
            self._begin()
        assert self._completion is not None
        # Shield so a cancelled awaiter cannot cancel the shared completion.
        return asyncio.shield(self._completion)

    def _begin(self) -> None:
        loop = asyncio.get_running_loop()
        task = asyncio.ensure_future(self._load())
        completion: asyncio.Future[Any] = loop.create_future()
        self._completion = completion
        self._status = Status.LOADING
        task.add_done_callback(lambda t: self._settle(t, completion))

    def _settle(self, task: asyncio.Future[Any], completion: asyncio.Future[Any]) -> None:
        if task.cancelled():
            self._status = Status.UNSTARTED
            self._completion = None
            completion.cancel()
            return
        exc = task.exception()
        if exc is None:
            module = task.result()
            self._result = module
            self._status = Status.RESOLVED
            completion.set_result(normalize(module))
            return

        # A failed attempt is not cached; the next preload/start retries.
        self._status = Status.UNSTARTED
        self._completion = None
        logger.debug("Import failed: %r", exc)
        completion.set_exception(exc)
        # Preload-only failures have no awaiter; they surface on the next start().
        completion.exception()
