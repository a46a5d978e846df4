"""
Replay controller: playback state machine over a loaded trajectory.

States:
    EMPTY   - no trajectory, every command is a no-op
    PAUSED  - trajectory loaded, timer stopped
    PLAYING - timer running, each timeout advances the cursor by one

The QTimer is owned by the controller. It runs only while PLAYING and is
stopped synchronously on every way out of that state (pause, reset, end of
trajectory, reload, shutdown).
"""
import logging
from typing import Optional

from PyQt5 import QtCore

from trajectory.derivation import build_frame, derive_telemetry
from trajectory.model import PlaybackState, RenderFrame, Telemetry, Trajectory

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL_MS = 2000
DEFAULT_MIN_TICK_MS = 50
# QTimer intervals are signed 32-bit milliseconds
MAX_TIMER_MS = 2**31 - 1


class ReplayController(QtCore.QObject):
    """
    Owns the playback cursor and the ticking timer for one session.

    Signals:
        frame_changed(object) - RenderFrame after every cursor or state change
        state_changed(object) - PlaybackState after every transition
    """

    frame_changed = QtCore.pyqtSignal(object)
    state_changed = QtCore.pyqtSignal(object)

    def __init__(
        self,
        tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS,
        time_scaled: bool = False,
        playback_rate: float = 1.0,
        min_tick_ms: int = DEFAULT_MIN_TICK_MS,
        parent=None,
    ):
        """
        Args:
            tick_interval_ms: Fixed wall-clock period between steps
            time_scaled: Space steps by the recorded gap between samples instead
            playback_rate: Speed-up applied to recorded gaps in time-scaled mode
            min_tick_ms: Lower bound for a time-scaled step
            parent: Parent QObject
        """
        super().__init__(parent)

        if tick_interval_ms <= 0:
            raise ValueError(f"tick_interval_ms must be positive, got {tick_interval_ms}")
        if tick_interval_ms > MAX_TIMER_MS:
            raise ValueError(f"tick_interval_ms must be at most {MAX_TIMER_MS}, got {tick_interval_ms}")
        if playback_rate <= 0:
            raise ValueError(f"playback_rate must be positive, got {playback_rate}")

        self.tick_interval_ms = tick_interval_ms
        self.time_scaled = time_scaled
        self.playback_rate = playback_rate
        self.min_tick_ms = max(1, min_tick_ms)

        self._trajectory = Trajectory()
        self._cursor = 0
        self._state = PlaybackState.EMPTY
        self._closed = False

        self._timer: Optional[QtCore.QTimer] = QtCore.QTimer(self)
        self._timer.setInterval(self.tick_interval_ms)
        self._timer.timeout.connect(self.tick)

    # ------------------ Read-only state ------------------ #

    @property
    def trajectory(self) -> Trajectory:
        return self._trajectory

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state is PlaybackState.PLAYING

    @property
    def is_ticking(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    @property
    def telemetry(self) -> Telemetry:
        return derive_telemetry(self._trajectory, self._cursor)

    def frame(self) -> RenderFrame:
        return build_frame(self._trajectory, self._cursor, self.is_playing)

    # ------------------ Commands ------------------ #

    def load_trajectory(self, trajectory: Optional[Trajectory]) -> bool:
        """Take a freshly loaded trajectory; empty or missing ones are ignored."""
        if self._closed or trajectory is None or trajectory.is_empty:
            logger.debug("Ignoring empty trajectory")
            return False

        self._stop_timer()
        self._trajectory = trajectory
        self._cursor = 0
        logger.info(f"Trajectory loaded into controller ({len(trajectory)} samples)")
        self._set_state(PlaybackState.PAUSED, force_emit=True)
        return True

    def play(self) -> bool:
        if self._closed or self._state is not PlaybackState.PAUSED:
            return False
        if self._cursor >= len(self._trajectory) - 1:
            # Finished trajectories are only restarted through reset()
            return False

        self._start_timer()
        self._set_state(PlaybackState.PLAYING)
        return True

    def pause(self) -> bool:
        if self._state is not PlaybackState.PLAYING:
            return False

        self._stop_timer()
        self._set_state(PlaybackState.PAUSED)
        return True

    def reset(self) -> bool:
        self._stop_timer()
        if self._closed or self._state is PlaybackState.EMPTY:
            return False

        self._cursor = 0
        self._set_state(PlaybackState.PAUSED, force_emit=True)
        return True

    def tick(self) -> bool:
        """Advance one sample. Called by the timer; ignored unless playing."""
        if self._state is not PlaybackState.PLAYING:
            return False

        last_index = len(self._trajectory) - 1
        self._cursor = min(self._cursor + 1, last_index)

        if self._cursor >= last_index:
            self._stop_timer()
            logger.info("End of trajectory reached, playback paused")
            self._set_state(PlaybackState.PAUSED, force_emit=True)
            return True

        if self.time_scaled:
            self._timer.setInterval(self._next_interval_ms())
        self.frame_changed.emit(self.frame())
        return True

    def shutdown(self):
        """Stop and release the timer; the controller accepts no further commands."""
        if self._closed:
            return
        self._closed = True
        self._stop_timer()
        if self._state is PlaybackState.PLAYING:
            self._set_state(PlaybackState.PAUSED)

        timer, self._timer = self._timer, None
        timer.timeout.disconnect(self.tick)
        timer.deleteLater()
        logger.debug("Replay controller shut down")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
        return False

    # ------------------ Internals ------------------ #

    def _start_timer(self):
        if self._closed or self._timer is None:
            return
        interval = self._next_interval_ms() if self.time_scaled else self.tick_interval_ms
        self._timer.start(interval)
        logger.debug(f"Playback timer started ({interval} ms)")

    def _stop_timer(self):
        if self._timer is not None and self._timer.isActive():
            self._timer.stop()
            logger.debug("Playback timer stopped")

    def _next_interval_ms(self) -> int:
        """Recorded gap to the next sample, scaled by playback_rate and clamped to what QTimer accepts."""
        if self._cursor + 1 >= len(self._trajectory):
            return self.tick_interval_ms
        gap_ms = self._trajectory[self._cursor + 1].timestamp - self._trajectory[self._cursor].timestamp
        return min(MAX_TIMER_MS, max(self.min_tick_ms, int(gap_ms / self.playback_rate)))

    def _set_state(self, state: PlaybackState, force_emit: bool = False):
        changed = state is not self._state
        self._state = state
        if changed:
            logger.debug(f"Playback state -> {state.value}")
            self.state_changed.emit(state)
        if changed or force_emit:
            self.frame_changed.emit(self.frame())
