"""
Overlay surfaces and user feedback.

A surface places the button and shows whether audio is muted; a notifier
shows short best-effort messages. The pygame implementation draws both
into one window; the logging implementations are used when no display is
available.
"""

import logging
from typing import List, Optional, Tuple

import pygame

from ..config.settings import OverlayConfig
from ..core.scheduler import monotonic_ms
from ..errors import SurfaceUpdateFailure

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """Notifier that writes messages to the log."""

    def __init__(self):
        self.messages: List[str] = []

    def toast(self, message: str):
        self.messages.append(message)
        logger.info(f"Toast: {message}")


class HeadlessSurface:
    """Surface without a display; tracks the last applied state."""

    def __init__(self):
        self.position: Optional[Tuple[int, int]] = None
        self.muted = False

    def move_to(self, x: int, y: int):
        self.position = (x, y)

    def set_muted_appearance(self, muted: bool):
        self.muted = muted


class PygameOverlaySurface:
    """Draws the mute button and pending toasts into a pygame surface."""

    def __init__(self, screen: pygame.Surface, config: Optional[OverlayConfig] = None,
                 clock=monotonic_ms):
        self.screen = screen
        self.config = config or OverlayConfig()
        self.clock = clock

        size = self.config.BUTTON_SIZE
        self.rect = pygame.Rect(self.config.INITIAL_X, self.config.INITIAL_Y, size, size)
        self.muted = False

        # (message, expires_at)
        self.toasts: List[Tuple[str, float]] = []

        # Colors
        self.BACKGROUND = (20, 20, 24)
        self.WHITE = (255, 255, 255)
        self.TOAST_BG = (50, 50, 50)

        self.font = pygame.font.Font(None, 48)
        self.small_font = pygame.font.Font(None, 36)

    def move_to(self, x: int, y: int):
        """Move the button; refuse positions that leave it entirely off-screen."""
        candidate = pygame.Rect(x, y, self.rect.width, self.rect.height)
        if not candidate.colliderect(self.screen.get_rect()):
            raise SurfaceUpdateFailure(f"Button at ({x}, {y}) would be off-screen")
        self.rect = candidate

    def set_muted_appearance(self, muted: bool):
        self.muted = muted

    def contains(self, pos: Tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)

    def toast(self, message: str):
        """Show ``message`` for TOAST_DURATION_MS."""
        self.toasts.append((message, self.clock() + self.config.TOAST_DURATION_MS))

    def draw(self):
        """Render the button and any toasts that have not expired."""
        now = self.clock()
        self.toasts = [(message, expires) for message, expires in self.toasts if expires > now]

        self.screen.fill(self.BACKGROUND)

        color = self.config.MUTED_COLOR if self.muted else self.config.UNMUTED_COLOR
        pygame.draw.ellipse(self.screen, color, self.rect)

        label = self.font.render("MUTED" if self.muted else "SOUND", True, self.WHITE)
        self.screen.blit(label, label.get_rect(center=self.rect.center))

        y = self.screen.get_height() - 60
        for message, _ in reversed(self.toasts):
            text = self.small_font.render(message, True, self.WHITE)
            box = text.get_rect(midbottom=(self.screen.get_width() // 2, y))
            pygame.draw.rect(self.screen, self.TOAST_BG, box.inflate(30, 16), border_radius=8)
            self.screen.blit(text, box)
            y -= box.height + 24

        pygame.display.flip()
