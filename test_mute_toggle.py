"""Tests for the atomic tri-channel mute toggle."""

import subprocess

import pytest

from conftest import RecordingNotifier, RecordingSurface
from mute_overlay.audio.channels import (
    ALL_CHANNELS, AudioChannel, MemoryChannelController, PactlChannelController, create_controller
)
from mute_overlay.audio.mute_toggle import (
    FAILURE_MESSAGE, MUTED_MESSAGE, UNMUTED_MESSAGE, MuteState, MuteToggle
)
from mute_overlay.audio.worker import ToggleWorker
from mute_overlay.errors import ToggleFailure


def make_toggle(channels=None):
    channels = channels or MemoryChannelController()
    notifier = RecordingNotifier()
    surface = RecordingSurface()
    return MuteToggle(channels, notifier=notifier, surface=surface), channels, notifier, surface


def test_toggle_mutes_every_channel():
    toggle, channels, notifier, surface = make_toggle()

    result = toggle.toggle()

    assert result.ok and result.is_muted
    assert toggle.is_muted
    assert all(channels.is_muted(channel) for channel in ALL_CHANNELS)
    assert notifier.messages == [MUTED_MESSAGE]
    assert surface.muted is True


def test_toggle_twice_unmutes():
    toggle, channels, notifier, _ = make_toggle()
    toggle.toggle()
    toggle.toggle()

    assert not toggle.is_muted
    assert not any(channels.is_muted(channel) for channel in ALL_CHANNELS)
    assert notifier.messages == [MUTED_MESSAGE, UNMUTED_MESSAGE]


def test_apply_is_idempotent():
    toggle, channels, _, _ = make_toggle()
    toggle.apply(True)
    changes = channels.changes

    result = toggle.apply(True)

    assert result.ok
    assert toggle.is_muted
    assert channels.changes == changes


def test_failure_rolls_back_and_keeps_flag():
    channels = MemoryChannelController(failing=[AudioChannel.NOTIFICATION])
    toggle, _, notifier, surface = make_toggle(channels)

    result = toggle.toggle()

    assert not result.ok
    assert not toggle.is_muted
    assert result.failure.failed == {'notification': 'rejected'}
    # Media and ringer were set, then put back
    assert not channels.is_muted(AudioChannel.MEDIA)
    assert not channels.is_muted(AudioChannel.RINGER)
    assert channels.calls[-2:] == [(AudioChannel.RINGER, False), (AudioChannel.MEDIA, False)]
    assert notifier.messages == [FAILURE_MESSAGE]
    assert surface.muted is None


def test_retry_after_failure_starts_from_known_state():
    channels = MemoryChannelController(failing=[AudioChannel.MEDIA])
    toggle, _, _, _ = make_toggle(channels)
    assert not toggle.toggle().ok

    channels.failing.clear()
    result = toggle.toggle()
    assert result.ok and result.is_muted


def test_rollback_failure_is_reported():
    class FlakyController(MemoryChannelController):
        def set_muted(self, channel, muted):
            if channel is AudioChannel.RINGER:
                raise ToggleFailure("ringer offline", {'ringer': 'offline'})
            if channel is AudioChannel.MEDIA and not muted:
                raise ToggleFailure("media stuck", {'media': 'stuck'})
            super().set_muted(channel, muted)

    toggle, _, _, _ = make_toggle(FlakyController())
    result = toggle.apply(True)

    assert not result.ok
    assert result.failure.failed['ringer'] == 'offline'
    assert result.failure.failed['media'].startswith('rollback failed')
    assert not toggle.is_muted


def test_state_is_owned_per_instance():
    first = MuteToggle(MemoryChannelController())
    second = MuteToggle(MemoryChannelController(), state=MuteState(is_muted=True))
    first.toggle()
    assert first.is_muted and second.is_muted
    second.toggle()
    assert first.is_muted and not second.is_muted


class FakeCompleted:
    def __init__(self, returncode=0, stdout='', stderr=''):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def test_pactl_controller_commands(monkeypatch):
    commands = []

    def fake_run(command, **kwargs):
        commands.append(command)
        if command[1] == 'get-sink-mute':
            return FakeCompleted(stdout='Mute: yes\n')
        return FakeCompleted()

    monkeypatch.setattr(subprocess, 'run', fake_run)
    controller = PactlChannelController({'media': 'sink0', 'ringer': 'sink1', 'notification': 'sink1'})

    controller.set_muted(AudioChannel.MEDIA, True)
    controller.set_muted(AudioChannel.RINGER, False)

    assert commands == [
        ['pactl', 'set-sink-mute', 'sink0', '1'],
        ['pactl', 'set-sink-mute', 'sink1', '0'],
    ]
    assert controller.is_muted(AudioChannel.NOTIFICATION) is True


def test_pactl_errors_become_toggle_failures(monkeypatch):
    monkeypatch.setattr(subprocess, 'run',
                        lambda command, **kwargs: FakeCompleted(returncode=1, stderr='No such entity'))
    controller = PactlChannelController({'media': 'missing'})

    with pytest.raises(ToggleFailure) as info:
        controller.set_muted(AudioChannel.MEDIA, True)
    assert info.value.failed == {'media': 'No such entity'}

    with pytest.raises(ToggleFailure):
        controller.set_muted(AudioChannel.RINGER, True)


def test_pactl_missing_binary(monkeypatch):
    def missing(command, **kwargs):
        raise FileNotFoundError(command[0])

    monkeypatch.setattr(subprocess, 'run', missing)
    controller = PactlChannelController({'media': 'sink0'})
    with pytest.raises(ToggleFailure) as info:
        controller.set_muted(AudioChannel.MEDIA, True)
    assert info.value.failed == {'media': 'missing binary'}


def test_create_controller():
    assert isinstance(create_controller('memory'), MemoryChannelController)
    assert isinstance(create_controller('pactl', {'media': 'x'}), PactlChannelController)
    with pytest.raises(ValueError):
        create_controller('alsa')


def test_pactl_permission_denied(monkeypatch):
    def denied(command, **kwargs):
        raise PermissionError(13, "Permission denied", command[0])

    monkeypatch.setattr(subprocess, 'run', denied)
    controller = PactlChannelController({'media': 'sink0'})
    with pytest.raises(ToggleFailure) as info:
        controller.set_muted(AudioChannel.MEDIA, True)
    assert 'Permission denied' in info.value.failed['media']

    with pytest.raises(ToggleFailure):
        controller.is_muted(AudioChannel.MEDIA)


def test_pactl_timeout(monkeypatch):
    def slow(command, **kwargs):
        raise subprocess.TimeoutExpired(command, kwargs['timeout'])

    monkeypatch.setattr(subprocess, 'run', slow)
    controller = PactlChannelController({'media': 'sink0'})
    with pytest.raises(ToggleFailure) as info:
        controller.set_muted(AudioChannel.MEDIA, True)
    assert info.value.failed == {'media': 'timeout'}


def test_apply_channels_leaves_flag_and_notices_alone():
    toggle, channels, notifier, surface = make_toggle()
    result = toggle.apply_channels(True, False)

    assert result.ok and result.is_muted
    assert all(channels.is_muted(channel) for channel in ALL_CHANNELS)
    assert not toggle.is_muted
    assert notifier.messages == []
    assert surface.muted is None

    toggle.commit(result)
    assert toggle.is_muted
    assert notifier.messages == [MUTED_MESSAGE]
    assert surface.muted is True


def test_sync_keeps_flag_when_channels_unreadable():
    class Unreadable(MemoryChannelController):
        def is_muted(self, channel):
            raise ToggleFailure("no sink", {channel.value: 'no sink'})

    toggle, _, _, _ = make_toggle(Unreadable())
    toggle.state.is_muted = True
    assert toggle.sync() is True
    assert toggle.is_muted


def test_inline_worker_returns_results_in_order():
    toggle, channels, _, _ = make_toggle()
    worker = ToggleWorker(toggle, threaded=False)

    worker.submit(True, False)
    worker.submit(False, True)
    assert worker.in_flight == 2

    results = worker.drain()
    assert [r.is_muted for r in results] == [True, False]
    assert worker.in_flight == 0
    assert worker.drain() == []


def test_worker_reports_crashing_driver_as_failure():
    class Broken(MemoryChannelController):
        def set_muted(self, channel, muted):
            raise RuntimeError("driver bug")

    toggle, _, _, _ = make_toggle(Broken())
    worker = ToggleWorker(toggle)
    try:
        worker.submit(True, False)
        result = worker.results.get(timeout=5)
    finally:
        worker.stop()

    assert result.ok is False
    assert result.is_muted is False
    assert 'driver bug' in str(result.failure)
