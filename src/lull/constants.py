"""Render phases and execution modes."""

from enum import Enum, IntEnum


class Phase(IntEnum):
    """Ordered lifecycle checkpoints gating lazy activation.

    A session starts at ``IMMEDIATE`` and only moves forward.
    ``ON_INTERACTION`` is terminal.
    """

    IMMEDIATE = 0
    AFTER_PAINT = 1
    ON_INTERACTION = 2


class Mode(Enum):
    """How the client pass treats markup already on the page."""

    RENDER = "render"
    HYDRATE = "hydrate"
