"""
Configuration settings for the mute overlay.
"""

from typing import Dict, Optional

class OverlayConfig:
    """Configuration constants for the overlay button and tap handling."""

    # Gesture thresholds (in surface units)
    TAP_MOVE_THRESHOLD = 10

    # Timing configurations (in milliseconds)
    QUIET_PERIOD_MS = 500
    TOAST_DURATION_MS = 2000

    # Number of taps inside the quiet period that closes the overlay
    EXIT_TAP_COUNT = 3

    # Overlay button geometry
    BUTTON_SIZE = 300
    INITIAL_X = 100
    INITIAL_Y = 100

    # pactl sink for each audio channel
    CHANNEL_TARGETS = {
        'media': '@DEFAULT_SINK@',
        'ringer': '@DEFAULT_SINK@',
        'notification': '@DEFAULT_SINK@'
    }

    # Colors (RGB)
    MUTED_COLOR = (200, 60, 60)
    UNMUTED_COLOR = (60, 160, 90)

    def __init__(self, tap_move_threshold: Optional[int] = None,
                 quiet_period_ms: Optional[int] = None,
                 exit_tap_count: Optional[int] = None,
                 initial_x: Optional[int] = None,
                 initial_y: Optional[int] = None,
                 channel_targets: Optional[Dict[str, str]] = None):
        if tap_move_threshold is not None:
            self.TAP_MOVE_THRESHOLD = tap_move_threshold
        if quiet_period_ms is not None:
            self.QUIET_PERIOD_MS = quiet_period_ms
        if exit_tap_count is not None:
            self.EXIT_TAP_COUNT = exit_tap_count
        if initial_x is not None:
            self.INITIAL_X = initial_x
        if initial_y is not None:
            self.INITIAL_Y = initial_y

        targets = dict(self.CHANNEL_TARGETS)
        if channel_targets:
            targets.update(channel_targets)
        self.CHANNEL_TARGETS = targets

        self._validate()

    def _validate(self):
        """Reject values the tap state machine cannot work with."""
        if self.TAP_MOVE_THRESHOLD <= 0:
            raise ValueError(f"tap_move_threshold must be positive, got {self.TAP_MOVE_THRESHOLD}")
        if self.QUIET_PERIOD_MS <= 0:
            raise ValueError(f"quiet_period_ms must be positive, got {self.QUIET_PERIOD_MS}")
        # A single tap must be able to resolve as a toggle
        if self.EXIT_TAP_COUNT < 2:
            raise ValueError(f"exit_tap_count must be at least 2, got {self.EXIT_TAP_COUNT}")

    def as_dict(self) -> Dict[str, object]:
        """Return the effective settings, for logging at startup."""
        return {
            'tap_move_threshold': self.TAP_MOVE_THRESHOLD,
            'quiet_period_ms': self.QUIET_PERIOD_MS,
            'exit_tap_count': self.EXIT_TAP_COUNT,
            'initial_position': (self.INITIAL_X, self.INITIAL_Y),
            'channel_targets': dict(self.CHANNEL_TARGETS)
        }
