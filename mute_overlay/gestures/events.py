"""
Event types passed between the gesture components.
"""

from dataclasses import dataclass
from enum import Enum


DOWN = 'down'
MOVE = 'move'
UP = 'up'


@dataclass(frozen=True)
class PointerEvent:
    """A raw pointer event in surface coordinates; ``t`` is in milliseconds."""
    kind: str
    x: float
    y: float
    t: float = 0.0


@dataclass(frozen=True)
class Drag:
    """New overlay position computed from a pointer move."""
    x: int
    y: int


@dataclass(frozen=True)
class Tap:
    """A completed down -> up sequence that stayed under the move threshold."""
    x: float
    y: float
    t: float = 0.0


class ResolvedAction(Enum):
    TOGGLE_MUTE = 'toggle_mute'
    EXIT = 'exit'
