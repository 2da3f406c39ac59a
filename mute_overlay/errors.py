"""
Error types raised by the overlay components.
"""

from typing import Dict, Optional


class MuteOverlayError(Exception):
    """Base class for all overlay errors."""


class ToggleFailure(MuteOverlayError):
    """One or more audio channels could not be updated.

    ``failed`` maps channel name to the reason reported by the driver.
    """

    def __init__(self, message: str, failed: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.failed = dict(failed or {})


class GestureAnomaly(MuteOverlayError):
    """Malformed pointer sequence, e.g. an up without a matching down."""


class SurfaceUpdateFailure(MuteOverlayError):
    """The overlay surface rejected a position update."""
