"""
Single-pointer gesture classification: drag or tap.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..config.settings import OverlayConfig
from ..errors import GestureAnomaly
from .events import Drag, Tap

logger = logging.getLogger(__name__)


@dataclass
class PointerSession:
    """Start state of one down -> up sequence."""
    start_x: int
    start_y: int
    start_touch_x: float
    start_touch_y: float


class GestureClassifier:
    """Turns a down, move*, up sequence into Drag updates or a single Tap."""

    def __init__(self, config: Optional[OverlayConfig] = None):
        self.config = config or OverlayConfig()
        self.threshold = self.config.TAP_MOVE_THRESHOLD
        self.session: Optional[PointerSession] = None

    @property
    def active(self) -> bool:
        return self.session is not None

    def down(self, touch_x: float, touch_y: float, surface_x: int, surface_y: int) -> bool:
        """Open a pointer session; subsequent moves belong to it."""
        if self.session is not None:
            # Single pointer model: a second down replaces the open session
            self._anomaly(GestureAnomaly("down while a pointer session is open"))

        self.session = PointerSession(surface_x, surface_y, touch_x, touch_y)
        return True

    def move(self, touch_x: float, touch_y: float) -> Optional[Drag]:
        """Return the new surface position for this move, one Drag per call."""
        session = self.session
        if session is None:
            self._anomaly(GestureAnomaly("move without a matching down"))
            return None

        new_x = session.start_x + int(touch_x - session.start_touch_x)
        new_y = session.start_y + int(touch_y - session.start_touch_y)
        return Drag(new_x, new_y)

    def up(self, touch_x: float, touch_y: float, t: float = 0.0) -> Optional[Tap]:
        """Close the session and return a Tap if the release stayed in place."""
        session = self.session
        if session is None:
            self._anomaly(GestureAnomaly("up without a matching down"))
            return None

        self.session = None

        delta_x = abs(touch_x - session.start_touch_x)
        delta_y = abs(touch_y - session.start_touch_y)

        if delta_x < self.threshold and delta_y < self.threshold:
            return Tap(touch_x, touch_y, t)

        logger.debug(f"Release after drag ({delta_x:.0f}, {delta_y:.0f}), no tap")
        return None

    def cancel(self):
        """Drop any open session without classifying it."""
        self.session = None

    def _anomaly(self, error: GestureAnomaly):
        logger.warning(f"Ignoring pointer event: {error}")
