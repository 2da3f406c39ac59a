"""
Utilities package for the mute overlay.
"""

from .logger import OverlayLogger

__all__ = [
    'OverlayLogger'
]
