#!/usr/bin/env python3
"""
Mute Overlay - Main Entry Point
A draggable overlay button: tap to toggle mute, triple-tap to exit.
"""

import argparse
import logging
import queue

from mute_overlay.audio.channels import create_controller
from mute_overlay.config.settings import OverlayConfig
from mute_overlay.core.controller import OverlayController
from mute_overlay.device.device_manager import DeviceManager
from mute_overlay.device.touch_reader import TouchReader
from mute_overlay.overlay.surface import HeadlessSurface, LoggingNotifier
from mute_overlay.utils.logger import OverlayLogger

WINDOW_SIZE = (1280, 800)


def parse_args(argv=None):
    defaults = OverlayConfig
    parser = argparse.ArgumentParser(description="Floating mute button overlay")
    parser.add_argument('--audio', choices=['pactl', 'memory'], default='pactl',
                        help="audio backend (memory changes nothing on the system)")
    parser.add_argument('--touch', nargs='?', const='', default=None, metavar='DEVICE',
                        help="read a touchscreen through evdev, optionally at DEVICE")
    parser.add_argument('--headless', action='store_true',
                        help="no window; requires --touch")
    parser.add_argument('--tap-threshold', type=int, default=defaults.TAP_MOVE_THRESHOLD)
    parser.add_argument('--quiet-period', type=int, default=defaults.QUIET_PERIOD_MS,
                        help="milliseconds to wait for further taps")
    parser.add_argument('--exit-taps', type=int, default=defaults.EXIT_TAP_COUNT)
    parser.add_argument('--debug-file', default=None)
    parser.add_argument('-v', '--verbose', action='store_true')
    return parser.parse_args(argv)


def start_touch_reader(device_path, window_size=None):
    """Find the touchscreen and start queueing its pointer events."""
    device_manager = DeviceManager()
    if not device_manager.find_device(device_path or None):
        print("❌ No touchscreen found")
        return None, None

    transform = None
    if window_size:
        transform = lambda x, y: device_manager.scale(x, y, *window_size)

    events = queue.Queue()
    reader = TouchReader(device_manager, events, transform)
    reader.start()
    return reader, events


def run_headless(channels, config, events, overlay_logger=None, scheduler=None,
                 apply_inline=False):
    """Drain touch events and timers on this thread until exit.

    Returns the controller so callers can inspect the final state.
    """
    running = True

    def stop():
        nonlocal running
        running = False

    controller = OverlayController(channels, HeadlessSurface(), LoggingNotifier(),
                                   on_exit=stop, config=config, scheduler=scheduler,
                                   overlay_logger=overlay_logger, apply_inline=apply_inline)
    controller.start()
    try:
        while running:
            controller.tick()
            try:
                event = events.get(timeout=0.01)
            except queue.Empty:
                continue
            controller.handle(event)
    except KeyboardInterrupt:
        print("\n👋 Stopping...")
    finally:
        controller.shutdown()
    return controller


def main(argv=None):
    """Main entry point for the mute overlay."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    config = OverlayConfig(
        tap_move_threshold=args.tap_threshold,
        quiet_period_ms=args.quiet_period,
        exit_tap_count=args.exit_taps
    )
    channels = create_controller(args.audio, config.CHANNEL_TARGETS)
    overlay_logger = OverlayLogger(args.debug_file)

    if args.headless:
        if args.touch is None:
            print("❌ --headless needs --touch")
            return 2
        reader, events = start_touch_reader(args.touch)
        if reader is None:
            return 1
        try:
            run_headless(channels, config, events, overlay_logger)
        finally:
            reader.stop()
        return 0

    from mute_overlay.core.pygame_host import PygameHost

    reader, events = None, None
    if args.touch is not None:
        reader, events = start_touch_reader(args.touch, WINDOW_SIZE)

    host = PygameHost(channels, config, WINDOW_SIZE, touch_events=events,
                      overlay_logger=overlay_logger)
    try:
        host.run()
    except KeyboardInterrupt:
        print("\n👋 Stopping...")
    finally:
        if reader:
            reader.stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
