"""
Audio channel drivers and the atomic mute toggle.
"""

from .channels import AudioChannel, PactlChannelController, MemoryChannelController
from .mute_toggle import MuteState, MuteToggle, ToggleResult
from .worker import ToggleWorker

__all__ = [
    'AudioChannel',
    'PactlChannelController',
    'MemoryChannelController',
    'MuteState',
    'MuteToggle',
    'ToggleResult',
    'ToggleWorker'
]
