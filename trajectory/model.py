# trajectory/model.py
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple

Position = Tuple[float, float]  # (latitude, longitude) in degrees


@dataclass(frozen=True)
class Sample:
    latitude: float    # degrees, [-90, 90]
    longitude: float   # degrees, [-180, 180]
    timestamp: int     # epoch milliseconds

    @property
    def position(self) -> Position:
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class Trajectory:
    """
    Ordered, immutable sequence of samples for one replay session.

    Order is taken from the source as-is; the index is the only identity
    a sample has.
    """

    samples: Tuple[Sample, ...] = ()

    def __len__(self) -> int:
        return len(self.samples)

    def __getitem__(self, index: int) -> Sample:
        return self.samples[index]

    def __iter__(self) -> Iterator[Sample]:
        return iter(self.samples)

    @property
    def is_empty(self) -> bool:
        return not self.samples

    @property
    def duration_ms(self) -> int:
        if len(self.samples) < 2:
            return 0
        return self.samples[-1].timestamp - self.samples[0].timestamp

    def positions(self) -> List[Position]:
        return [s.position for s in self.samples]


class PlaybackState(Enum):
    EMPTY = "empty"
    PAUSED = "paused"
    PLAYING = "playing"


@dataclass(frozen=True)
class Telemetry:
    position: Optional[Sample]
    speed_kmh: float
    progress_percent: float
    traversed_prefix: List[Position]


@dataclass(frozen=True)
class RenderFrame:
    """Everything the map window needs to draw one playback step."""

    full_path: List[Position]
    traversed_prefix: List[Position]
    current_position: Optional[Position]
    speed_kmh: float
    progress_percent: float
    is_playing: bool
    cursor: int = 0
    sample_count: int = 0
