"""Lull exception hierarchy.

Shared across the loader, the phase scheduler, the manifest builder and
the rendering layer so every module raises and catches the same types.
"""

from dataclasses import dataclass


class LullError(Exception):
    """Base for all lull-specific errors."""


class ConfigurationError(LullError):
    """Raised when runtime or build configuration is invalid.

    Also raised when runtime state is read before ``lull.runtime.init()``.
    """


class ManifestError(LullError):
    """Raised when a graph snapshot, registry or manifest cannot be parsed."""


@dataclass(frozen=True, slots=True)
class PhaseRegressionError(LullError):
    """An attempt to move a scheduler's phase backward.

    Phases only ever advance within one session; asking for a lower
    phase than the current one is a programming error.
    """

    current: int
    requested: int

    def __str__(self) -> str:
        return f"cannot move phase from {self.current} back to {self.requested}"


class LazyLoadError(LullError):
    """A lazy unit's import function failed while the unit was activating.

    Raised by the rendering layer so the failure reaches the host's error
    boundary. The original exception is chained as ``__cause__``.
    """

    def __init__(self, module_id: str) -> None:
        super().__init__(f"failed to load lazy unit {module_id!r}")
        self.module_id = module_id
