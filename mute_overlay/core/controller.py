"""
Overlay controller that routes pointer events through gesture
classification, tap accumulation and the mute toggle.
"""

import logging
from typing import Callable, Optional

from ..audio.mute_toggle import MuteToggle, ToggleResult
from ..audio.worker import ToggleWorker
from ..config.settings import OverlayConfig
from ..errors import SurfaceUpdateFailure
from ..gestures.events import DOWN, MOVE, UP, Drag, PointerEvent, ResolvedAction
from ..gestures.gesture_classifier import GestureClassifier
from ..gestures.tap_accumulator import TapAccumulator
from ..overlay.position import OverlayPosition
from ..utils.logger import OverlayLogger
from .scheduler import TimerScheduler

logger = logging.getLogger(__name__)

EXIT_MESSAGE = "Closing overlay"


class OverlayController:
    """Single-threaded core of the overlay.

    Every method must be called from the host loop thread. Timers only run
    from ``tick`` (and from ``handle``, before the event), so handlers always
    run to completion before the next event or timer. Channel updates run on
    a worker thread; their results are committed from ``tick``.
    """

    def __init__(self, channels, surface, notifier,
                 on_exit: Callable[[], None],
                 config: Optional[OverlayConfig] = None,
                 scheduler: Optional[TimerScheduler] = None,
                 overlay_logger: Optional[OverlayLogger] = None,
                 apply_inline: bool = False):
        self.config = config or OverlayConfig()
        self.scheduler = scheduler or TimerScheduler()
        self.surface = surface
        self.notifier = notifier
        self.on_exit = on_exit
        self.logger = overlay_logger or OverlayLogger(verbose=False)

        self.position = OverlayPosition(self.config.INITIAL_X, self.config.INITIAL_Y)
        self.classifier = GestureClassifier(self.config)
        self.accumulator = TapAccumulator(self.scheduler, self._on_resolved, self.config)
        self.mute = MuteToggle(channels, notifier=notifier, surface=surface)
        self.worker = ToggleWorker(self.mute, threaded=not apply_inline)

        self.dragged = False
        self.exited = False
        self.last_toggle: Optional[ToggleResult] = None

    @property
    def is_muted(self) -> bool:
        return self.mute.is_muted

    def start(self):
        """Read the current mute state, then place and paint the surface."""
        self.mute.sync()
        self.surface.set_muted_appearance(self.mute.is_muted)
        self._move_surface(*self.position.current())
        self.logger.log_startup(self.config.as_dict())

    def handle(self, event: PointerEvent):
        """Process one pointer event."""
        if self.exited:
            return

        # Timers due before this event resolve first
        self.tick()

        if event.kind == DOWN:
            x, y = self.position.current()
            self.classifier.down(event.x, event.y, x, y)
            self.dragged = False
        elif event.kind == MOVE:
            drag = self.classifier.move(event.x, event.y)
            if drag is not None:
                self._apply_drag(drag)
        elif event.kind == UP:
            tap = self.classifier.up(event.x, event.y, event.t)
            if tap is not None:
                self.logger.log_tap(self.accumulator.count + 1, (tap.x, tap.y))
                self.accumulator.on_tap(tap)
            elif self.dragged:
                self.logger.log_drag_end(self.position.current())
            self.dragged = False
        else:
            logger.warning(f"Ignoring unknown pointer event kind: {event.kind!r}")

    def tick(self, now: Optional[float] = None) -> int:
        """Run due timers, then commit finished toggles. Returns timers run."""
        ran = self.scheduler.run_due(now)
        for result in self.worker.drain():
            self._commit_toggle(result)
        return ran

    def shutdown(self):
        """Drop pending resolutions and any open pointer session."""
        self.accumulator.reset()
        self.classifier.cancel()
        self.worker.stop()
        self.logger.close()

    def _apply_drag(self, drag: Drag):
        self.dragged = True
        self.position.update(drag.x, drag.y)
        self._move_surface(drag.x, drag.y)

    def _move_surface(self, x: int, y: int):
        try:
            self.surface.move_to(x, y)
        except SurfaceUpdateFailure as e:
            # Position state keeps the requested value
            logger.warning(f"Surface rejected position ({x}, {y}): {e}")
            self.logger.log_surface_failure(e)

    def _on_resolved(self, action: ResolvedAction):
        self.logger.log_action(action.value)

        if action is ResolvedAction.TOGGLE_MUTE:
            self._submit_toggle()
        elif action is ResolvedAction.EXIT:
            self._exit()

    def _submit_toggle(self):
        # Toggles queued behind an unfinished one build on its target
        if self.worker.in_flight:
            previous = self.worker.last_target
        else:
            previous = self.mute.is_muted
        self.worker.submit(not previous, previous)

    def _commit_toggle(self, result: ToggleResult):
        self.mute.commit(result)
        self.last_toggle = result
        failed = result.failure.failed if result.failure else None
        self.logger.log_mute(result.ok, result.is_muted, failed)

    def _exit(self):
        self.exited = True
        self.notifier.toast(EXIT_MESSAGE)
        self.accumulator.reset()
        self.classifier.cancel()
        self.scheduler.clear()
        self.on_exit()
