"""
Telemetry derived from a trajectory and a playback cursor.

Every function here is pure: same (trajectory, cursor) in, same value out.
Nothing is cached between cursor positions.
"""
from typing import List, Optional

from trajectory.geo import MS_PER_HOUR, haversine_km
from trajectory.model import Position, RenderFrame, Sample, Telemetry, Trajectory

SPEED_DECIMALS = 1


def resolve_cursor(trajectory: Trajectory, cursor: int) -> int:
    """Return cursor if it indexes a sample, otherwise fall back to the first one."""
    if 0 <= cursor < len(trajectory):
        return cursor
    return 0


def current_position(trajectory: Trajectory, cursor: int) -> Optional[Sample]:
    if trajectory.is_empty:
        return None
    return trajectory[resolve_cursor(trajectory, cursor)]


def instantaneous_speed_kmh(trajectory: Trajectory, cursor: int) -> float:
    """
    Speed over the segment ending at cursor, in km/h, at full precision.

    0 at the first sample and whenever the two timestamps do not advance.
    """
    if trajectory.is_empty:
        return 0.0
    index = resolve_cursor(trajectory, cursor)
    if index == 0:
        return 0.0

    prev, cur = trajectory[index - 1], trajectory[index]
    elapsed_ms = cur.timestamp - prev.timestamp
    if elapsed_ms <= 0:
        return 0.0

    distance = haversine_km(prev.latitude, prev.longitude, cur.latitude, cur.longitude)
    return distance / (elapsed_ms / MS_PER_HOUR)


def display_speed(speed_kmh: float) -> float:
    return round(speed_kmh, SPEED_DECIMALS)


def progress_percent(trajectory: Trajectory, cursor: int) -> float:
    if len(trajectory) <= 1:
        return 0.0
    return resolve_cursor(trajectory, cursor) / (len(trajectory) - 1) * 100.0


def traversed_prefix(trajectory: Trajectory, cursor: int) -> List[Position]:
    """Positions from the first sample through cursor, inclusive."""
    if trajectory.is_empty:
        return []
    end = resolve_cursor(trajectory, cursor)
    return [s.position for s in trajectory.samples[: end + 1]]


def full_path(trajectory: Trajectory) -> List[Position]:
    return trajectory.positions()


def derive_telemetry(trajectory: Trajectory, cursor: int) -> Telemetry:
    return Telemetry(
        position=current_position(trajectory, cursor),
        speed_kmh=instantaneous_speed_kmh(trajectory, cursor),
        progress_percent=progress_percent(trajectory, cursor),
        traversed_prefix=traversed_prefix(trajectory, cursor),
    )


def build_frame(trajectory: Trajectory, cursor: int, playing: bool) -> RenderFrame:
    """Assemble the payload handed to the rendering sink."""
    telemetry = derive_telemetry(trajectory, cursor)
    position = telemetry.position.position if telemetry.position is not None else None
    return RenderFrame(
        full_path=full_path(trajectory),
        traversed_prefix=telemetry.traversed_prefix,
        current_position=position,
        speed_kmh=telemetry.speed_kmh,
        progress_percent=telemetry.progress_percent,
        is_playing=playing,
        cursor=resolve_cursor(trajectory, cursor),
        sample_count=len(trajectory),
    )
