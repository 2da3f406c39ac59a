"""
Logging utilities for overlay gestures and mute actions.
"""

import datetime
import logging
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


class OverlayLogger:
    """Prints resolved gestures and mute changes, mirrored to a debug file."""

    def __init__(self, debug_file: Optional[str] = None, verbose: bool = True):
        self.verbose = verbose
        self.debug_file = None
        if debug_file:
            try:
                self.debug_file = open(debug_file, 'w')
                self.debug_file.write(f"Debug logging started at {datetime.datetime.now()}\n")
                self.debug_file.flush()
            except OSError as e:
                logger.warning(f"Could not open debug file {debug_file}: {e}")

    def _timestamp(self) -> str:
        return datetime.datetime.now().strftime("%H:%M:%S.%f")[:-3]

    def _emit(self, line: str, record: str):
        timestamp = self._timestamp()
        if self.verbose:
            print(f"[{timestamp}] {line}")
        logger.debug(record)

        if self.debug_file:
            try:
                self.debug_file.write(f"[{timestamp}] {record}\n")
                self.debug_file.flush()
            except OSError as e:
                logger.warning(f"Debug file write failed, disabling it: {e}")
                self.debug_file = None

    def log_startup(self, settings: dict):
        self._emit("🎯 Overlay ready! Tap to toggle mute, triple-tap to exit", f"startup {settings}")
        for key, value in settings.items():
            if self.verbose:
                print(f"   {key}: {value}")

    def log_tap(self, count: int, position: Tuple[float, float]):
        x, y = position
        self._emit(f"👆 TAP {count}: ({int(x)}, {int(y)})", f"tap count={count} pos=({x}, {y})")

    def log_drag_end(self, position: Tuple[int, int]):
        x, y = position
        self._emit(f"🖐️ DRAG END: button at ({x}, {y})", f"drag_end pos=({x}, {y})")

    def log_action(self, action: str):
        if action == 'exit':
            line = "👆👆👆 TRIPLE TAP: exiting"
        else:
            line = "🔁 TOGGLE MUTE"
        self._emit(line, f"resolved action={action}")

    def log_mute(self, ok: bool, muted: bool, failed: Optional[dict] = None):
        if ok:
            line = "🔇 MUTED" if muted else "🔊 UNMUTED"
        else:
            line = f"❌ MUTE TOGGLE FAILED: {failed}"
        self._emit(line, f"mute ok={ok} muted={muted} failed={failed}")

    def log_surface_failure(self, error: Exception):
        self._emit(f"⚠️ SURFACE UPDATE REJECTED: {error}", f"surface_failure {error}")

    def close(self):
        """Close the debug file."""
        if self.debug_file:
            self.debug_file.close()
            self.debug_file = None
