"""
Gesture classification and tap accumulation.

This module turns raw pointer events into drags and taps, and bursts of
taps into a single resolved action.
"""

from .events import PointerEvent, Drag, Tap, ResolvedAction
from .gesture_classifier import GestureClassifier, PointerSession
from .tap_accumulator import TapAccumulator

__all__ = [
    'PointerEvent',
    'Drag',
    'Tap',
    'ResolvedAction',
    'GestureClassifier',
    'PointerSession',
    'TapAccumulator'
]
