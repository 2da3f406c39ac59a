"""
Atomic mute toggle across the media, ringer and notification channels.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..errors import ToggleFailure
from .channels import ALL_CHANNELS, AudioChannel

logger = logging.getLogger(__name__)

MUTED_MESSAGE = "Volume muted"
UNMUTED_MESSAGE = "Volume unmuted"
FAILURE_MESSAGE = "Failed to toggle mute"


@dataclass
class MuteState:
    """Last known mute intent. Read from the channels only at start-up."""
    is_muted: bool = False


@dataclass
class ToggleResult:
    ok: bool
    is_muted: bool
    failure: Optional[ToggleFailure] = None


class MuteToggle:
    """Applies one mute state to every channel, or to none of them.

    If any channel fails, the channels already changed are put back and
    the flag keeps its previous value.
    """

    def __init__(self, controller, notifier=None, surface=None,
                 state: Optional[MuteState] = None,
                 channels: Sequence[AudioChannel] = ALL_CHANNELS):
        self.controller = controller
        self.notifier = notifier
        self.surface = surface
        self.state = state or MuteState()
        self.channels = tuple(channels)

    @property
    def is_muted(self) -> bool:
        return self.state.is_muted

    def toggle(self) -> ToggleResult:
        return self.apply(not self.state.is_muted)

    def apply(self, target_muted: bool) -> ToggleResult:
        """Set every channel to ``target_muted`` and commit the outcome."""
        return self.commit(self.apply_channels(target_muted, self.state.is_muted))

    def apply_channels(self, target_muted: bool, previous: bool) -> ToggleResult:
        """Drive the channels only; safe to run off the loop thread.

        Leaves the flag, surface and notifier alone. On failure the
        channels already changed are set back to ``previous``.
        """
        changed: List[AudioChannel] = []

        try:
            for channel in self.channels:
                self.controller.set_muted(channel, target_muted)
                changed.append(channel)
        except ToggleFailure as e:
            failure = self._rollback(changed, previous, e)
            logger.error(f"Mute toggle to {target_muted} failed: {failure} {failure.failed}")
            return ToggleResult(False, previous, failure)

        logger.info(f"Audio {'muted' if target_muted else 'unmuted'} on {len(changed)} channel(s)")
        return ToggleResult(True, target_muted)

    def commit(self, result: ToggleResult) -> ToggleResult:
        """Publish a channel result: flag, appearance and toast."""
        if not result.ok:
            self._notify(FAILURE_MESSAGE)
            return result

        self.state.is_muted = result.is_muted
        if self.surface is not None:
            self.surface.set_muted_appearance(result.is_muted)
        self._notify(MUTED_MESSAGE if result.is_muted else UNMUTED_MESSAGE)
        return result

    def sync(self) -> bool:
        """Read the channels back into the flag; muted only if all are."""
        try:
            muted = all(self.controller.is_muted(channel) for channel in self.channels)
        except ToggleFailure as e:
            logger.warning(f"Could not read channel mute state, keeping {self.state.is_muted}: {e}")
            return self.state.is_muted
        self.state.is_muted = muted
        return muted

    def _rollback(self, changed: List[AudioChannel], previous: bool,
                  error: ToggleFailure) -> ToggleFailure:
        failed: Dict[str, str] = dict(error.failed)

        for channel in reversed(changed):
            try:
                self.controller.set_muted(channel, previous)
            except ToggleFailure as rollback_error:
                logger.error(f"Rollback of {channel.value} failed: {rollback_error}")
                failed[channel.value] = f"rollback failed: {rollback_error}"

        return ToggleFailure(str(error), failed)

    def _notify(self, message: str):
        if self.notifier is not None:
            self.notifier.toast(message)
