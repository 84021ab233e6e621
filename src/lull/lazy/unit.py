"""Lazy unit declarations.

Each declaration owns exactly one ``DeferredLoader``. The three helpers
differ only in their trigger phase and whether the server renders the
unit's content::

    Chart = lazy_after_paint(load_chart, module_id="./widgets/chart")

    # host layer
    Chart.loader.preload()
    if scheduler.reached(Chart.trigger):
        await Chart.loader.start()
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lull.constants import Phase
from lull.errors import ConfigurationError
from lull.lazy.deferred import DeferredLoader, ImportFunction


@dataclass(frozen=True, slots=True)
class LazyUnit:
    """A lazily triggered, at-most-once async module load.

    Attributes:
        module_id: Manifest key used to look up preload assets.
        trigger: Lowest phase at which the unit may activate.
        ssr: Render the unit's content during the server pass.
        loader: The unit's deferred loader.
    """

    module_id: str
    trigger: Phase
    ssr: bool
    loader: DeferredLoader = field(repr=False)

    def __post_init__(self) -> None:
        if not self.module_id:
            msg = "Lazy units need a non-empty module_id"
            raise ConfigurationError(msg)


def _declare(load: ImportFunction, module_id: str, trigger: Phase, ssr: bool) -> LazyUnit:
    return LazyUnit(module_id=module_id, trigger=trigger, ssr=ssr, loader=DeferredLoader(load))


def lazy_for_paint(load: ImportFunction, *, module_id: str, ssr: bool = True) -> LazyUnit:
    """Declare a unit needed for the first paint."""
    return _declare(load, module_id, Phase.IMMEDIATE, ssr)


def lazy_after_paint(load: ImportFunction, *, module_id: str, ssr: bool = True) -> LazyUnit:
    """Declare a unit activated once the host signals the page has painted."""
    return _declare(load, module_id, Phase.AFTER_PAINT, ssr)


def lazy(load: ImportFunction, *, module_id: str, ssr: bool = False) -> LazyUnit:
    """Declare a unit activated on user interaction. Not server-rendered by default."""
    return _declare(load, module_id, Phase.ON_INTERACTION, ssr)
