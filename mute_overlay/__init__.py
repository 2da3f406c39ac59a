"""
Mute Overlay Package
A draggable overlay button that toggles mute on tap and exits on triple-tap.
"""

from .core.controller import OverlayController
from .gestures.gesture_classifier import GestureClassifier
from .gestures.tap_accumulator import TapAccumulator
from .audio.mute_toggle import MuteToggle

__version__ = "1.0.0"
__all__ = ["OverlayController", "GestureClassifier", "TapAccumulator", "MuteToggle"]
