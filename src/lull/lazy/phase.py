"""Monotonic render-phase state with threshold subscriptions.

One ``PhaseScheduler`` per render session. Never share one between
concurrent server requests: a request's phase would leak into another's
render.

Subscribers register a threshold phase and a callback. When an advance
first reaches or passes the threshold, the callback fires once,
synchronously, in registration order, before ``advance()`` returns.

Free-threading safety:
    The subscriber list is guarded by a Lock; callbacks run outside it so
    they may subscribe or unsubscribe freely.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable

from lull.constants import Phase
from lull.errors import PhaseRegressionError

logger = logging.getLogger("lull.phase")

type PhaseCallback = Callable[[Phase], None]


class Subscription:
    """Handle returned by ``PhaseScheduler.subscribe``.

    Call ``cancel()`` when the subscriber's own lifecycle ends.
    """

    __slots__ = ("_scheduler", "callback", "fired", "key", "threshold")

    def __init__(
        self,
        scheduler: PhaseScheduler | None,
        key: int,
        threshold: Phase,
        callback: PhaseCallback,
    ) -> None:
        self._scheduler = scheduler
        self.key = key
        self.threshold = threshold
        self.callback = callback
        self.fired = False

    @property
    def active(self) -> bool:
        return self._scheduler is not None and not self.fired

    def cancel(self) -> None:
        if self._scheduler is not None:
            self._scheduler._remove(self.key)
            self._scheduler = None

    def __repr__(self) -> str:
        state = "fired" if self.fired else ("active" if self.active else "cancelled")
        return f"<Subscription {self.threshold.name} {state}>"


class PhaseScheduler:
    """Owns the current phase of one render session.

    Args:
        pinned: Freeze the phase at ``IMMEDIATE`` (server pass). Advances
            become no-ops.
    """

    __slots__ = ("_counter", "_lock", "_phase", "_pinned", "_subscribers")

    def __init__(self, *, pinned: bool = False) -> None:
        self._phase = Phase.IMMEDIATE
        self._pinned = pinned
        self._subscribers: dict[int, Subscription] = {}
        self._counter = itertools.count()
        self._lock = threading.Lock()

    @classmethod
    def for_server(cls) -> PhaseScheduler:
        """A scheduler pinned at ``IMMEDIATE`` for a whole server pass."""
        return cls(pinned=True)

    @property
    def phase(self) -> Phase:
        return self._phase

    def current_phase(self) -> Phase:
        return self._phase

    @property
    def pinned(self) -> bool:
        return self._pinned

    def reached(self, threshold: Phase) -> bool:
        return self._phase >= threshold

    def advance(self) -> Phase:
        """Move to the next phase. No-op when terminal or pinned."""
        if self._pinned:
            logger.debug("Ignoring advance on a pinned scheduler")
            return self._phase
        if self._phase is Phase.ON_INTERACTION:
            return self._phase
        return self._move(Phase(self._phase + 1))

    def advance_to(self, target: Phase) -> Phase:
        """Jump forward to *target*, firing every threshold crossed.

        Raises:
            PhaseRegressionError: *target* is below the current phase.
        """
        if target < self._phase:
            raise PhaseRegressionError(current=int(self._phase), requested=int(target))
        if self._pinned or target == self._phase:
            return self._phase
        return self._move(target)

    def subscribe(self, threshold: Phase, callback: PhaseCallback) -> Subscription:
        """Register *callback* to fire once when the phase reaches *threshold*.

        If the threshold is already satisfied the callback fires before
        this method returns and the handle comes back inactive.
        """
        key = next(self._counter)
        if self._phase >= threshold:
            sub = Subscription(None, key, threshold, callback)
            self._fire(sub, self._phase)
            return sub
        sub = Subscription(self, key, threshold, callback)
        with self._lock:
            self._subscribers[key] = sub
        return sub

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def _remove(self, key: int) -> None:
        with self._lock:
            self._subscribers.pop(key, None)

    def _move(self, target: Phase) -> Phase:
        previous = self._phase
        self._phase = target
        with self._lock:
            due = [s for s in self._subscribers.values() if previous < s.threshold <= target]
            for sub in due:
                del self._subscribers[sub.key]
        logger.debug("Phase %s -> %s (%d subscribers due)", previous.name, target.name, len(due))
        # dicts keep insertion order, so ``due`` is in registration order
        for sub in due:
            sub._scheduler = None
            self._fire(sub, target)
        return target

    def _fire(self, sub: Subscription, phase: Phase) -> None:
        sub.fired = True
        try:
            sub.callback(phase)
        except Exception:
            logger.exception("Phase subscriber for %s failed", sub.threshold.name)
