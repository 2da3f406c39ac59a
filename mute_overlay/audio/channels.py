"""
Audio channel drivers.

Each driver mutes or unmutes one channel at a time and raises
``ToggleFailure`` when it cannot. Setting a channel to the state it is
already in is a no-op.
"""

import logging
import subprocess
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from ..errors import ToggleFailure

logger = logging.getLogger(__name__)


class AudioChannel(Enum):
    MEDIA = 'media'
    RINGER = 'ringer'
    NOTIFICATION = 'notification'


ALL_CHANNELS = (AudioChannel.MEDIA, AudioChannel.RINGER, AudioChannel.NOTIFICATION)


class PactlChannelController:
    """Mutes PulseAudio/PipeWire sinks through the ``pactl`` command."""

    def __init__(self, targets: Dict[str, str], timeout: float = 2.0, binary: str = 'pactl'):
        self.targets = targets
        self.timeout = timeout
        self.binary = binary

    def _target(self, channel: AudioChannel) -> str:
        try:
            return self.targets[channel.value]
        except KeyError:
            raise ToggleFailure(f"No pactl sink configured for {channel.value}",
                                {channel.value: 'not configured'}) from None

    def _run(self, channel: AudioChannel, args: List[str]) -> str:
        command = [self.binary] + args
        try:
            result = subprocess.run(command, capture_output=True, text=True,
                                    timeout=self.timeout, check=False)
        except FileNotFoundError:
            raise ToggleFailure(f"{self.binary} not found", {channel.value: 'missing binary'}) from None
        except OSError as e:
            raise ToggleFailure(f"{self.binary} could not run: {e}", {channel.value: str(e)}) from None
        except subprocess.TimeoutExpired:
            raise ToggleFailure(f"{self.binary} timed out", {channel.value: 'timeout'}) from None

        if result.returncode != 0:
            reason = result.stderr.strip() or f"exit status {result.returncode}"
            raise ToggleFailure(f"{' '.join(command)} failed: {reason}", {channel.value: reason})
        return result.stdout

    def is_muted(self, channel: AudioChannel) -> bool:
        output = self._run(channel, ['get-sink-mute', self._target(channel)])
        # "Mute: yes" / "Mute: no"
        return output.strip().lower().endswith('yes')

    def set_muted(self, channel: AudioChannel, muted: bool):
        target = self._target(channel)
        self._run(channel, ['set-sink-mute', target, '1' if muted else '0'])
        logger.debug(f"pactl {channel.value} ({target}) -> {'muted' if muted else 'unmuted'}")


class MemoryChannelController:
    """In-process channel state, for headless runs and tests."""

    def __init__(self, failing: Iterable[AudioChannel] = (), initial: bool = False):
        self.state: Dict[AudioChannel, bool] = {channel: initial for channel in ALL_CHANNELS}
        self.failing = set(failing)
        self.calls: List[Tuple[AudioChannel, bool]] = []
        self.changes = 0

    def is_muted(self, channel: AudioChannel) -> bool:
        return self.state[channel]

    def set_muted(self, channel: AudioChannel, muted: bool):
        self.calls.append((channel, muted))
        if channel in self.failing:
            raise ToggleFailure(f"{channel.value} rejected the update", {channel.value: 'rejected'})
        if self.state[channel] != muted:
            self.state[channel] = muted
            self.changes += 1


def create_controller(kind: str, targets: Optional[Dict[str, str]] = None):
    """Build a channel controller by name: ``pactl`` or ``memory``."""
    if kind == 'pactl':
        return PactlChannelController(targets or {})
    if kind == 'memory':
        return MemoryChannelController()
    raise ValueError(f"Unknown audio backend: {kind}")
