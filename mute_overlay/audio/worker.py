"""
Background channel updates.

Channel drivers may block (``pactl`` has a timeout of seconds), so the
controller hands each toggle to a worker thread and picks the results up
from ``drain`` on its own loop thread.
"""

import logging
import queue
import threading
from typing import List, Optional, Tuple

from ..errors import ToggleFailure
from .mute_toggle import MuteToggle, ToggleResult

logger = logging.getLogger(__name__)


class ToggleWorker:
    """Runs ``MuteToggle.apply_channels`` off the loop thread.

    Jobs run one at a time in submission order. ``in_flight`` and
    ``last_target`` are only touched by the loop thread.
    """

    def __init__(self, mute: MuteToggle, threaded: bool = True):
        self.mute = mute
        self.threaded = threaded
        self.jobs: "queue.Queue[Optional[Tuple[bool, bool]]]" = queue.Queue()
        self.results: "queue.Queue[ToggleResult]" = queue.Queue()

        self.thread = None
        self.in_flight = 0
        self.last_target: Optional[bool] = None

    def submit(self, target_muted: bool, previous: bool):
        """Queue one channel update; the result arrives through ``drain``."""
        self.in_flight += 1
        self.last_target = target_muted

        if not self.threaded:
            self.results.put(self._apply(target_muted, previous))
            return

        if self.thread is None:
            self.thread = threading.Thread(target=self._worker_loop)
            self.thread.daemon = True
            self.thread.start()
        self.jobs.put((target_muted, previous))

    def drain(self) -> List[ToggleResult]:
        """Collect finished results without blocking."""
        finished = []
        while True:
            try:
                finished.append(self.results.get_nowait())
            except queue.Empty:
                break
        self.in_flight -= len(finished)
        return finished

    def stop(self, timeout: float = 1.0):
        if self.thread is None:
            return
        self.jobs.put(None)
        self.thread.join(timeout=timeout)
        if self.thread.is_alive():
            logger.warning("Toggle worker still busy at shutdown")
        self.thread = None

    def _worker_loop(self):
        while True:
            job = self.jobs.get()
            if job is None:
                break
            self.results.put(self._apply(*job))

    def _apply(self, target_muted: bool, previous: bool) -> ToggleResult:
        try:
            return self.mute.apply_channels(target_muted, previous)
        except Exception as e:
            # Driver bugs still have to come back as a failed toggle
            logger.exception(f"Channel update to {target_muted} crashed")
            return ToggleResult(False, previous, ToggleFailure(str(e), {'worker': repr(e)}))
