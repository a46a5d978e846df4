"""
Sample store: loads a recorded trajectory once and keeps it immutable.

The store fetches raw records from a source, projects the ``latitude``,
``longitude`` and ``timestamp`` fields 1:1 into Samples and trusts the
source ordering. A failed load leaves the store empty; it is logged and
never retried.
"""
import asyncio
import logging
import math
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from PyQt5 import QtCore

from trajectory.errors import InvalidSampleError, TrajectoryLoadError
from trajectory.model import Sample, Trajectory

logger = logging.getLogger(__name__)

LATITUDE_FIELD = "latitude"
LONGITUDE_FIELD = "longitude"
TIMESTAMP_FIELD = "timestamp"


def parse_timestamp(value: Any, index: Optional[int] = None) -> int:
    """
    Convert a raw timestamp into epoch milliseconds.

    Numbers and numeric strings are taken as epoch milliseconds. Other
    strings are parsed as ISO-8601 literals; naive ones are read as UTC.
    """
    if isinstance(value, bool):
        raise InvalidSampleError("timestamp must not be a boolean", index, TIMESTAMP_FIELD)

    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise InvalidSampleError(f"timestamp is not finite: {value}", index, TIMESTAMP_FIELD)
        return int(value)

    if isinstance(value, str):
        text = value.strip()
        try:
            return int(float(text))
        except (ValueError, OverflowError):
            pass

        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise InvalidSampleError(f"unparseable timestamp {value!r}", index, TIMESTAMP_FIELD) from e
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return int(round(parsed.timestamp() * 1000))

    raise InvalidSampleError(f"unsupported timestamp type {type(value).__name__}", index, TIMESTAMP_FIELD)


def _parse_coordinate(record: Mapping[str, Any], field: str, limit: float, index: int) -> float:
    if field not in record:
        raise InvalidSampleError("missing field", index, field)

    raw = record[field]
    if isinstance(raw, bool):
        raise InvalidSampleError("coordinate must not be a boolean", index, field)
    try:
        value = float(raw)
    except (TypeError, ValueError) as e:
        raise InvalidSampleError(f"non-numeric value {raw!r}", index, field) from e

    if not math.isfinite(value) or not -limit <= value <= limit:
        raise InvalidSampleError(f"value {value} outside [-{limit:g}, {limit:g}]", index, field)
    return value


def normalize_record(record: Any, index: int) -> Sample:
    if not isinstance(record, Mapping):
        raise InvalidSampleError(f"expected an object, got {type(record).__name__}", index)
    if TIMESTAMP_FIELD not in record:
        raise InvalidSampleError("missing field", index, TIMESTAMP_FIELD)

    return Sample(
        latitude=_parse_coordinate(record, LATITUDE_FIELD, 90.0, index),
        longitude=_parse_coordinate(record, LONGITUDE_FIELD, 180.0, index),
        timestamp=parse_timestamp(record[TIMESTAMP_FIELD], index),
    )


def normalize_records(records: Iterable[Any]) -> Trajectory:
    """
    Project raw records into a Trajectory, keeping the source order.

    No reordering, deduplication or monotonicity check is done.
    """
    if not isinstance(records, (list, tuple)):
        raise TrajectoryLoadError(
            f"Trajectory payload must be a list of records, got {type(records).__name__}"
        )
    return Trajectory(tuple(normalize_record(record, i) for i, record in enumerate(records)))


class SampleStore:
    """Holds the single trajectory of a replay session."""

    def __init__(self):
        self._trajectory: Optional[Trajectory] = None

    @property
    def trajectory(self) -> Optional[Trajectory]:
        return self._trajectory

    @property
    def is_loaded(self) -> bool:
        return self._trajectory is not None and not self._trajectory.is_empty

    async def load(self, source) -> Optional[Trajectory]:
        """
        Fetch and normalize the trajectory from source.

        Args:
            source: Object exposing ``async fetch() -> list``

        Returns:
            The loaded Trajectory, or None if the load failed
        """
        self._trajectory = None
        try:
            records = await source.fetch()
            trajectory = normalize_records(records)
        except TrajectoryLoadError as e:
            logger.error(f"Error loading route data from {source!r}: {e}", exc_info=True)
            return None

        self._trajectory = trajectory
        logger.info(f"Loaded {len(trajectory)} samples from {source!r}")
        return trajectory


class TrajectoryLoaderWorker(QtCore.QThread):
    """
    Loads a trajectory off the UI thread.

    Signals:
        trajectory_loaded(object) - Non-empty Trajectory on success
        trajectory_empty(str) - The recording loaded but holds no samples
        load_failed(str) - Description of why nothing was loaded
        status_update(str) - Status messages for logging
    """

    trajectory_loaded = QtCore.pyqtSignal(object)
    trajectory_empty = QtCore.pyqtSignal(str)
    load_failed = QtCore.pyqtSignal(str)
    status_update = QtCore.pyqtSignal(str)

    def __init__(self, source, store: Optional[SampleStore] = None, parent=None):
        super().__init__(parent)
        self.source = source
        self.store = store or SampleStore()

    def run(self):
        self.status_update.emit(f"Loading trajectory from {self.source!r}...")

        event_loop = asyncio.new_event_loop()
        try:
            trajectory = event_loop.run_until_complete(self.store.load(self.source))
        except Exception as e:
            logger.error(f"Trajectory loader error: {e}", exc_info=True)
            trajectory = None
        finally:
            event_loop.close()

        if trajectory is None:
            self.load_failed.emit(f"Could not load trajectory from {self.source!r}")
            return

        if trajectory.is_empty:
            logger.warning(f"Recording from {self.source!r} contains no samples")
            self.trajectory_empty.emit(f"No samples in recording from {self.source!r}")
            return

        self.status_update.emit(f"Trajectory ready: {len(trajectory)} samples")
        self.trajectory_loaded.emit(trajectory)
