"""Shared fixtures: a manual clock, recording surface and notifier."""

import pytest

from mute_overlay.audio.channels import MemoryChannelController
from mute_overlay.core.controller import OverlayController
from mute_overlay.core.scheduler import TimerScheduler
from mute_overlay.errors import SurfaceUpdateFailure
from mute_overlay.gestures.events import DOWN, MOVE, UP, PointerEvent


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class RecordingSurface:
    def __init__(self, reject=False):
        self.reject = reject
        self.moves = []
        self.muted = None

    def move_to(self, x, y):
        if self.reject:
            raise SurfaceUpdateFailure("rejected")
        self.moves.append((x, y))

    def set_muted_appearance(self, muted):
        self.muted = muted


class RecordingNotifier:
    def __init__(self):
        self.messages = []

    def toast(self, message):
        self.messages.append(message)


class Harness:
    """Controller wired to fakes, with helpers to play timed traces."""

    def __init__(self, clock, channels=None, surface=None, config=None, apply_inline=True):
        self.clock = clock
        self.scheduler = TimerScheduler(clock)
        self.channels = channels or MemoryChannelController()
        self.surface = surface or RecordingSurface()
        self.notifier = RecordingNotifier()
        self.exits = []
        self.controller = OverlayController(
            self.channels, self.surface, self.notifier,
            on_exit=lambda: self.exits.append(self.clock.now),
            config=config, scheduler=self.scheduler, apply_inline=apply_inline
        )

    def advance(self, until):
        """Move the clock to ``until``, running timers at their deadlines."""
        while True:
            deadline = self.scheduler.next_deadline()
            if deadline is None or deadline > until:
                break
            self.clock.now = max(self.clock.now, deadline)
            self.controller.tick()
        self.clock.now = until
        self.controller.tick()

    def tap(self, at, x=150, y=150):
        self.advance(at)
        self.controller.handle(PointerEvent(DOWN, x, y, at))
        self.controller.handle(PointerEvent(UP, x + 1, y + 1, at))

    def drag(self, at, path):
        self.advance(at)
        (sx, sy) = path[0]
        self.controller.handle(PointerEvent(DOWN, sx, sy, at))
        for x, y in path[1:]:
            self.controller.handle(PointerEvent(MOVE, x, y, at))
        ex, ey = path[-1]
        self.controller.handle(PointerEvent(UP, ex, ey, at))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return TimerScheduler(clock)


@pytest.fixture
def harness(clock):
    return Harness(clock)
