"""
Reads a multitouch evdev device and reduces it to single-pointer events.

Only the first finger down is tracked until it lifts; other slots are
ignored. Events are queued for the host loop, which processes them on its
own thread.
"""

import logging
import queue
import threading
from typing import Callable, Dict, List, Optional, Tuple

from evdev import ecodes

from ..gestures.events import DOWN, MOVE, UP, PointerEvent
from .device_manager import DeviceManager

logger = logging.getLogger(__name__)


class TouchReader:
    """Translates evdev multitouch batches into PointerEvents."""

    def __init__(self, device_manager: DeviceManager,
                 events: Optional[queue.Queue] = None,
                 transform: Optional[Callable[[int, int], Tuple[float, float]]] = None):
        self.device_manager = device_manager
        self.events = events if events is not None else queue.Queue()
        self.transform = transform

        self.running = False
        self.thread = None

        # Slot state
        self.current_slot = 0
        self.tracked_slot: Optional[int] = None
        self.slot_positions: Dict[int, List[int]] = {}

        # Per-batch flags
        self._down = False
        self._moved = False
        self._lifted = False

    def start(self) -> bool:
        """Start reading on a daemon thread."""
        if self.device_manager.device is None:
            logger.error("TouchReader started without a device")
            return False

        self.running = True
        self.thread = threading.Thread(target=self._event_loop)
        self.thread.daemon = True
        self.thread.start()
        return True

    def stop(self):
        self.running = False
        if self.thread:
            self.thread.join(timeout=1)

    def _event_loop(self):
        """Read events and flush them at every SYN_REPORT."""
        event_batch = []
        try:
            for event in self.device_manager.device.read_loop():
                if not self.running:
                    break

                event_batch.append(event)

                if event.type == ecodes.EV_SYN and event.code == ecodes.SYN_REPORT:
                    for pointer_event in self.process_batch(event_batch):
                        self.events.put(pointer_event)
                    event_batch = []
        except OSError as e:
            logger.error(f"Touch device read failed: {e}")
        finally:
            self.running = False

    def process_batch(self, event_batch) -> List[PointerEvent]:
        """Apply one SYN_REPORT batch and return the resulting pointer events."""
        for ev in event_batch:
            if ev.type == ecodes.EV_ABS:
                self._handle_abs_event(ev)

        t = 0.0
        if event_batch:
            last = event_batch[-1]
            t = last.sec * 1000 + last.usec / 1000

        return self._flush(t)

    def _handle_abs_event(self, ev):
        """Handle absolute coordinate events."""
        if ev.code == ecodes.ABS_MT_SLOT:
            self.current_slot = ev.value
        elif ev.code == ecodes.ABS_MT_TRACKING_ID:
            self._handle_tracking_id(ev.value)
        elif ev.code == ecodes.ABS_MT_POSITION_X:
            self._handle_position(0, ev.value)
        elif ev.code == ecodes.ABS_MT_POSITION_Y:
            self._handle_position(1, ev.value)

    def _handle_tracking_id(self, value: int):
        slot = self.current_slot
        if value == -1:
            # Finger lifted
            if slot == self.tracked_slot:
                self._lifted = True
        elif self.tracked_slot is None:
            # First finger placed
            self.tracked_slot = slot
            self._down = True
            self._lifted = False

    def _handle_position(self, axis: int, value: int):
        slot = self.current_slot
        position = self.slot_positions.setdefault(slot, [0, 0])
        position[axis] = value
        if slot == self.tracked_slot:
            self._moved = True

    def _flush(self, t: float) -> List[PointerEvent]:
        pointer_events = []
        if self.tracked_slot is None:
            return pointer_events

        x, y = self._position(self.tracked_slot)

        if self._down:
            pointer_events.append(PointerEvent(DOWN, x, y, t))
        elif self._moved:
            pointer_events.append(PointerEvent(MOVE, x, y, t))

        if self._lifted:
            pointer_events.append(PointerEvent(UP, x, y, t))
            self.tracked_slot = None

        self._down = False
        self._moved = False
        self._lifted = False
        return pointer_events

    def _position(self, slot: int) -> Tuple[float, float]:
        x, y = self.slot_positions.get(slot, [0, 0])
        if self.transform:
            return self.transform(x, y)
        return (float(x), float(y))
