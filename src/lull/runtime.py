"""Process-wide boot state and per-session isolation.

``init()`` installs a ``LazyConfig`` once at boot; ``teardown()`` clears
it. Code that needs a different config for one request or test uses
``config_scope()``, which overrides through a ContextVar without touching
the process-wide value.

Each render session gets its own ``PhaseScheduler`` via ``session()``.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local under
    free-threading. The process-wide slot is guarded by a Lock.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from lull.config import LazyConfig
from lull.errors import ConfigurationError
from lull.lazy.phase import PhaseScheduler

_lock = threading.Lock()
_installed: LazyConfig | None = None

config_var: ContextVar[LazyConfig | None] = ContextVar("lull_config", default=None)
"""Per-task config override. Set by ``config_scope()``."""

scheduler_var: ContextVar[PhaseScheduler] = ContextVar("lull_scheduler")
"""The current session's scheduler. Set by ``session()``."""


def init(config: LazyConfig) -> None:
    """Install *config* as the process-wide runtime configuration."""
    global _installed
    if not isinstance(config, LazyConfig):
        msg = f"init() expects a LazyConfig, got {type(config).__name__}"
        raise ConfigurationError(msg)
    with _lock:
        _installed = config


def teardown() -> None:
    global _installed
    with _lock:
        _installed = None


def get_config() -> LazyConfig:
    """Return the active config (scoped override first, then process-wide).

    Raises ``ConfigurationError`` before ``init()``.
    """
    scoped = config_var.get()
    if scoped is not None:
        return scoped
    with _lock:
        installed = _installed
    if installed is None:
        msg = "lull runtime is not initialized; call lull.runtime.init() at boot"
        raise ConfigurationError(msg)
    return installed


@contextmanager
def config_scope(config: LazyConfig) -> Iterator[LazyConfig]:
    token = config_var.set(config)
    try:
        yield config
    finally:
        config_var.reset(token)


@contextmanager
def session(*, server: bool = False) -> Iterator[PhaseScheduler]:
    """Open a render session with a fresh scheduler.

    Args:
        server: Server pass; the scheduler is pinned at ``IMMEDIATE``.
    """
    scheduler = PhaseScheduler.for_server() if server else PhaseScheduler()
    token = scheduler_var.set(scheduler)
    try:
        yield scheduler
    finally:
        scheduler_var.reset(token)


def get_scheduler() -> PhaseScheduler:
    """Return the current session's scheduler.

    Raises ``LookupError`` outside ``session()``.
    """
    return scheduler_var.get()
