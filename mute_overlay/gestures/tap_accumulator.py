"""
Debounced multi-tap counter.

A burst of taps resolves to exactly one action: a toggle once the quiet
period passes after the last tap, or an exit as soon as the exit tap count
is reached.
"""

import logging
from typing import Callable, Optional

from ..config.settings import OverlayConfig
from ..core.scheduler import TimerHandle, TimerScheduler
from .events import ResolvedAction, Tap

logger = logging.getLogger(__name__)

IDLE = 'idle'
COUNTING = 'counting'


class TapAccumulator:
    """Counts taps inside the quiet period and resolves them to one action.

    The accumulator owns at most one timer handle. Every tap cancels the
    pending handle before anything else happens, so a stale timer can never
    fire after a newer tap.
    """

    def __init__(self, scheduler: TimerScheduler,
                 on_resolved: Callable[[ResolvedAction], None],
                 config: Optional[OverlayConfig] = None):
        self.scheduler = scheduler
        self.on_resolved = on_resolved
        self.config = config or OverlayConfig()

        self.quiet_period_ms = self.config.QUIET_PERIOD_MS
        self.exit_tap_count = self.config.EXIT_TAP_COUNT

        # Tap window
        self.count = 0
        self.pending: Optional[TimerHandle] = None

    @property
    def state(self) -> str:
        return COUNTING if self.count > 0 else IDLE

    def on_tap(self, tap: Optional[Tap] = None):
        """Absorb one tap."""
        self._cancel_pending()
        self.count += 1

        if self.count == self.exit_tap_count:
            logger.debug(f"Tap {self.count} reached exit threshold")
            self._resolve(ResolvedAction.EXIT)
            return

        if self.count > self.exit_tap_count:
            # Only reachable after a missed reset
            logger.warning(f"Tap count {self.count} above exit threshold, resetting")
            self.count = 0
            return

        armed_count = self.count
        self.pending = self.scheduler.call_later(
            self.quiet_period_ms,
            lambda: self._on_quiet_period(armed_count)
        )
        logger.debug(f"Tap {armed_count} armed quiet period ({self.quiet_period_ms}ms)")

    def reset(self):
        """Cancel the pending resolution and return to idle."""
        self._cancel_pending()
        self.count = 0

    def _on_quiet_period(self, armed_count: int):
        self.pending = None
        if self.count != armed_count:
            logger.debug(f"Stale quiet period timer (armed at {armed_count}, now {self.count})")
            return
        self._resolve(ResolvedAction.TOGGLE_MUTE)

    def _resolve(self, action: ResolvedAction):
        taps = self.count
        # Back to idle before the callback runs so a failing handler
        # cannot leave the window half reset
        self.reset()
        logger.info(f"Resolved {taps} tap(s) as {action.value}")
        self.on_resolved(action)

    def _cancel_pending(self):
        if self.pending is not None:
            self.pending.cancel()
            self.pending = None
