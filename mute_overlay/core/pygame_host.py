"""
pygame host: window, event loop and rendering for the overlay controller.
"""

import logging
import queue
from typing import Optional, Tuple

import pygame

from ..config.settings import OverlayConfig
from ..gestures.events import DOWN, MOVE, UP, PointerEvent
from ..overlay.surface import PygameOverlaySurface
from ..utils.logger import OverlayLogger
from .controller import OverlayController

logger = logging.getLogger(__name__)


class PygameHost:
    """Runs the controller on the pygame main loop.

    The mouse (button 1) acts as the pointer. Touchscreen events, if a
    reader is attached, arrive through ``touch_events`` and are drained on
    the same thread as mouse events and timers.
    """

    def __init__(self, channels, config: Optional[OverlayConfig] = None,
                 window_size: Tuple[int, int] = (1280, 800),
                 touch_events: Optional[queue.Queue] = None,
                 overlay_logger: Optional[OverlayLogger] = None,
                 fps: int = 60):
        pygame.init()
        self.config = config or OverlayConfig()
        self.screen = pygame.display.set_mode(window_size)
        pygame.display.set_caption("Mute Overlay")

        self.surface = PygameOverlaySurface(self.screen, self.config)
        self.touch_events = touch_events
        self.fps = fps
        self.running = False

        self.controller = OverlayController(
            channels,
            surface=self.surface,
            notifier=self.surface,
            on_exit=self.stop,
            config=self.config,
            overlay_logger=overlay_logger
        )

    def stop(self):
        self.running = False

    def run(self):
        """Run until the window closes or the overlay exits."""
        clock = pygame.time.Clock()
        self.controller.start()
        self.running = True

        try:
            while self.running:
                # Timers that fell due since the last frame fire before new input
                self.controller.tick()
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.running = False
                    elif event.type == pygame.MOUSEBUTTONDOWN:
                        if event.button == 1:  # Left click
                            self._pointer(DOWN, event.pos)
                    elif event.type == pygame.MOUSEMOTION:
                        self._pointer(MOVE, event.pos)
                    elif event.type == pygame.MOUSEBUTTONUP:
                        if event.button == 1:
                            self._pointer(UP, event.pos)

                self._drain_touch_events()
                self.surface.draw()
                clock.tick(self.fps)

            if self.controller.exited:
                # Leave the closing toast on screen briefly
                self.surface.draw()
                pygame.time.wait(800)
        finally:
            self.controller.shutdown()
            pygame.quit()
            logger.info("Overlay window closed")

    def _pointer(self, kind: str, pos: Tuple[int, int]):
        """Forward pointer input that belongs to the button."""
        x, y = pos
        if kind == DOWN:
            if not self.surface.contains(pos):
                return
        elif not self.controller.classifier.active:
            # Moves and releases only count while the button holds the pointer
            return
        self.controller.handle(PointerEvent(kind, x, y, pygame.time.get_ticks()))

    def _drain_touch_events(self):
        if self.touch_events is None:
            return
        while True:
            try:
                event = self.touch_events.get_nowait()
            except queue.Empty:
                return
            self._pointer(event.kind, (event.x, event.y))
