"""
Device management for touchscreen discovery and initialization.
"""

import evdev
from evdev import InputDevice, ecodes
import logging
from typing import Optional

logger = logging.getLogger(__name__)

class DeviceManager:
    """Manages touchscreen device discovery and coordinate ranges."""

    def __init__(self):
        self.device = None
        self.screen_width = 1920  # Default
        self.screen_height = 1080   # Default

    def find_device(self, path: Optional[str] = None) -> Optional[InputDevice]:
        """Find and configure the touchscreen device, optionally at ``path``."""
        if path:
            paths = [path]
        else:
            paths = evdev.list_devices()

        for device_path in paths:
            try:
                device = InputDevice(device_path)
            except OSError as e:
                logger.warning(f"Cannot open {device_path}: {e}")
                continue

            caps = device.capabilities()
            if ecodes.EV_ABS not in caps:
                continue

            # Look for multitouch slots
            abs_caps = caps.get(ecodes.EV_ABS, [])
            abs_info = {code: info for code, info in abs_caps}
            if ecodes.ABS_MT_SLOT not in abs_info:
                continue

            if ecodes.ABS_MT_POSITION_X in abs_info:
                self.screen_width = abs_info[ecodes.ABS_MT_POSITION_X].max + 1
            if ecodes.ABS_MT_POSITION_Y in abs_info:
                self.screen_height = abs_info[ecodes.ABS_MT_POSITION_Y].max + 1

            self.device = device
            logger.info(f"Found touchscreen: {device.name}")
            logger.info(f"Screen resolution: {self.screen_width}x{self.screen_height}")
            return device

        logger.error("No touchscreen device found")
        return None

    def get_device_info(self):
        """Get device and screen information."""
        return {
            'device': self.device,
            'screen_width': self.screen_width,
            'screen_height': self.screen_height
        }

    def scale(self, x: int, y: int, width: int, height: int):
        """Map device coordinates onto a ``width`` x ``height`` window."""
        return (x * width / self.screen_width, y * height / self.screen_height)
