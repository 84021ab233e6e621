"""Lull — phase-gated lazy units for server-rendered HTML.

Declare lazy units, render them on the server, and let the client swap in
live content only when the render phase allows it.

Basic usage::

    from lull import LazyConfig, LazySuspense, Manifest, init, lazy_after_paint, render_server

    init(LazyConfig(manifest=Manifest.load("lull-manifest.json")))

    Chart = lazy_after_paint(load_chart, module_id="./widgets/chart.py")
    html = await render_server(LazySuspense(Chart, fallback="<i>Loading</i>"))

Build step (``lull manifest graph.json --registry imports.json``) maps
each lazy import to the files a client must fetch for it.
"""

from importlib import import_module

__version__ = "0.1.0.dev0"
__all__ = [
    "ClientBoundary",
    "ConfigurationError",
    "DeferredLoader",
    "ImportRegistry",
    "LazyConfig",
    "LazyLoadError",
    "LazySuspense",
    "LazyUnit",
    "LullError",
    "Manifest",
    "Mode",
    "Phase",
    "PhaseRegressionError",
    "PhaseScheduler",
    "build_manifest",
    "get_config",
    "get_scheduler",
    "init",
    "lazy",
    "lazy_after_paint",
    "lazy_for_paint",
    "render_server",
    "render_server_pass",
    "session",
    "teardown",
]

# Public name -> defining module. Resolved on first access.
_LAZY_IMPORTS: dict[str, str] = {
    "ClientBoundary": "lull.rendering.boundary",
    "ConfigurationError": "lull.errors",
    "DeferredLoader": "lull.lazy.deferred",
    "ImportRegistry": "lull.manifest.registry",
    "LazyConfig": "lull.config",
    "LazyLoadError": "lull.errors",
    "LazySuspense": "lull.rendering.boundary",
    "LazyUnit": "lull.lazy.unit",
    "LullError": "lull.errors",
    "Manifest": "lull.manifest.model",
    "Mode": "lull.constants",
    "Phase": "lull.constants",
    "PhaseRegressionError": "lull.errors",
    "PhaseScheduler": "lull.lazy.phase",
    "build_manifest": "lull.manifest.builder",
    "get_config": "lull.runtime",
    "get_scheduler": "lull.runtime",
    "init": "lull.runtime",
    "lazy": "lull.lazy.unit",
    "lazy_after_paint": "lull.lazy.unit",
    "lazy_for_paint": "lull.lazy.unit",
    "render_server": "lull.rendering.boundary",
    "render_server_pass": "lull.rendering.boundary",
    "session": "lull.runtime",
    "teardown": "lull.runtime",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import lull`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    return getattr(import_module(module_name), name)
