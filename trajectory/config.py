"""
Runtime configuration for the replay application.

Values come from environment variables (a ``.env`` file is loaded by
main.py through python-dotenv before this is read) and can be overridden
from the command line.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from trajectory.controller import DEFAULT_MIN_TICK_MS, DEFAULT_TICK_INTERVAL_MS

DEFAULT_SOURCE = os.path.join("data", "dummy-route.json")
INITIAL_CENTER = (17.385044, 78.486671)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _env_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _env_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(name)
    if raw is None:
        return default
    text = raw.strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (true/false), got {raw!r}")


@dataclass
class ReplayConfig:
    source: str = DEFAULT_SOURCE
    tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS
    time_scaled: bool = False
    playback_rate: float = 1.0
    min_tick_ms: int = DEFAULT_MIN_TICK_MS
    initial_center: Tuple[float, float] = INITIAL_CENTER
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ReplayConfig":
        """
        Build a config from REPLAY_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ (used by tests)
        """
        env = os.environ if environ is None else environ

        log_level = env.get("REPLAY_LOG_LEVEL", "INFO").strip().upper() or "INFO"
        if log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"REPLAY_LOG_LEVEL is not a logging level: {log_level!r}")

        return cls(
            source=env.get("REPLAY_SOURCE", "").strip() or DEFAULT_SOURCE,
            tick_interval_ms=_env_int(env, "REPLAY_TICK_MS", DEFAULT_TICK_INTERVAL_MS),
            time_scaled=_env_bool(env, "REPLAY_TIME_SCALED", False),
            playback_rate=_env_float(env, "REPLAY_PLAYBACK_RATE", 1.0),
            min_tick_ms=_env_int(env, "REPLAY_MIN_TICK_MS", DEFAULT_MIN_TICK_MS),
            log_level=log_level,
        )
