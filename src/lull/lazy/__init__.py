"""Deferred loading, render phases and lazy unit declarations."""

from lull.lazy.deferred import DeferredLoader, Status, default_export, normalize
from lull.lazy.phase import PhaseScheduler, Subscription
from lull.lazy.unit import LazyUnit, lazy, lazy_after_paint, lazy_for_paint

__all__ = [
    "DeferredLoader",
    "LazyUnit",
    "PhaseScheduler",
    "Status",
    "Subscription",
    "default_export",
    "lazy",
    "lazy_after_paint",
    "lazy_for_paint",
    "normalize",
]
