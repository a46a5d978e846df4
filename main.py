#!/usr/bin/env python3
"""
Vehicle Route Replay - Main Entry Point

Replays a recorded vehicle trajectory on a map with live speed and
progress readouts.

Usage:
    python main.py                          # Replay data/dummy-route.json
    python main.py --source route.json      # Replay another recording
    python main.py --source https://host/route.json
    python main.py --time-scaled            # Step by recorded time gaps
    python main.py --tick-ms 500            # Fixed step of 500 ms
"""
import sys
import logging

from dotenv import load_dotenv
from PyQt5 import QtWidgets

# Load environment variables from .env file
load_dotenv()

from trajectory.config import ReplayConfig

# Configure logging FIRST - before the engine modules log anything
_startup_config = ReplayConfig.from_env()
logging.basicConfig(
    level=getattr(logging, _startup_config.log_level),
    format='[%(levelname)s] %(name)s: %(message)s',
    stream=sys.stdout
)

print("="*60)
print("🚗 VEHICLE ROUTE REPLAY STARTING...")
print("="*60)

from trajectory.controller import ReplayController
from trajectory.sample_store import SampleStore, TrajectoryLoaderWorker
from trajectory.sources import source_for
from ui.main_window import MainWindow

print("✅ All core modules imported successfully")


def main(config: ReplayConfig):
    """
    Entry point for the replay viewer.

    Args:
        config: Source location, tick timing and map settings
    """
    print(f"\n📋 Replaying: {config.source}")
    if config.time_scaled:
        print(f"⏱️  Time-scaled playback at {config.playback_rate:g}x")
    else:
        print(f"⏱️  Fixed step every {config.tick_interval_ms} ms")

    print("🔧 Creating Qt application...")
    app = QtWidgets.QApplication(sys.argv)

    controller = ReplayController(
        tick_interval_ms=config.tick_interval_ms,
        time_scaled=config.time_scaled,
        playback_rate=config.playback_rate,
        min_tick_ms=config.min_tick_ms,
    )

    print("🖥️  Creating main window...")
    window = MainWindow(controller, initial_center=config.initial_center)

    loader = TrajectoryLoaderWorker(source_for(config.source), SampleStore())

    # Connect signals
    print("🔗 Connecting Qt signals...")
    loader.trajectory_loaded.connect(controller.load_trajectory)
    loader.trajectory_empty.connect(window.show_no_samples)
    loader.load_failed.connect(window.show_load_error)
    loader.status_update.connect(lambda msg: print(f"[Loader] {msg}"))
    print("✅ Signals connected")

    print("🚀 Starting trajectory loader...")
    loader.start()

    print("🪟 Showing UI window...")
    window.show()

    print("\n" + "="*60)
    print("✅ REPLAY READY - press Play once the route appears")
    print("="*60 + "\n")

    # Run Qt event loop
    with controller:
        result = app.exec_()

    # Clean shutdown
    print("\n🛑 Shutting down...")
    loader.wait()

    print("👋 Goodbye!")
    sys.exit(result)


def parse_args(argv, config: ReplayConfig) -> ReplayConfig:
    """Apply command line overrides on top of the environment config."""
    if "--source" in argv:
        source_index = argv.index("--source") + 1
        if source_index >= len(argv):
            raise ValueError("--source needs a file path or URL")
        config.source = argv[source_index]

    if "--tick-ms" in argv:
        tick_index = argv.index("--tick-ms") + 1
        if tick_index >= len(argv):
            raise ValueError("--tick-ms needs a value in milliseconds")
        config.tick_interval_ms = int(argv[tick_index])
        if config.tick_interval_ms <= 0:
            raise ValueError(f"--tick-ms must be positive, got {config.tick_interval_ms}")

    if "--time-scaled" in argv:
        config.time_scaled = True

    return config


if __name__ == "__main__":
    try:
        config = parse_args(sys.argv, _startup_config)

        print(f"🎯 Command line args: {sys.argv}")
        print(f"📁 Source: {config.source}\n")

        main(config)
    except Exception as e:
        print("\n" + "="*60)
        print("❌ FATAL ERROR:")
        print("="*60)
        print(f"Error type: {type(e).__name__}")
        print(f"Error message: {e}")
        import traceback
        print("\nFull traceback:")
        traceback.print_exc()
        print("="*60)
        sys.exit(1)
