"""Test utilities for lazy units.

``MockImport`` stands in for a real import function: it counts calls and
only resolves when the test says so::

    mock = MockImport(lambda: '<p class="p">Content</p>')
    unit = lazy_for_paint(mock, module_id="./mock")
    ...
    await mock.resolve()
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any


async def settle(rounds: int = 10) -> None:
    """Yield to the event loop until pending callbacks have run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class Component:
    """Wraps a markup function and counts renders."""

    def __init__(self, render: Callable[..., str]) -> None:
        self._render = render
        self.calls = 0

    def __call__(self, **props: Any) -> str:
        self.calls += 1
        return self._render(**props)

    @property
    def called(self) -> bool:
        return self.calls > 0


class MockImport:
    """A controllable async import function.

    Args:
        component: The module's default export, or any module value when
            *wrap* is false.
        resolved: Resolve immediately (a server-side ``require``).
        wrap: Return ``{"default": component}`` instead of the bare value.
    """

    def __init__(self, component: Any, *, resolved: bool = False, wrap: bool = True) -> None:
        self.module = {"default": component} if wrap else component
        self.calls = 0
        self._event = asyncio.Event()
        self._error: BaseException | None = None
        if resolved:
            self._event.set()

    async def __call__(self) -> Any:
        self.calls += 1
        await self._event.wait()
        if self._error is not None:
            error, self._error = self._error, None
            raise error
        return self.module

    async def resolve(self) -> None:
        """Let pending and future calls return the module, then settle."""
        self._event.set()
        await settle()

    async def reject(self, error: BaseException) -> None:
        """Make the pending call raise *error*, then settle."""
        self._error = error
        self._event.set()
        await settle()
        self._event.clear()
