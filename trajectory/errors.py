"""
Exceptions raised while loading a recorded trajectory.
"""
from typing import Optional


class TrajectoryLoadError(Exception):
    """The trajectory source could not be fetched or decoded."""


class InvalidSampleError(TrajectoryLoadError):
    """
    A record in the source payload cannot be turned into a Sample.

    Args:
        message: Human readable description
        index: Position of the offending record in the payload
        field: Name of the offending field, if known
    """

    def __init__(self, message: str, index: Optional[int] = None, field: Optional[str] = None):
        self.index = index
        self.field = field
        location = []
        if index is not None:
            location.append(f"record {index}")
        if field is not None:
            location.append(f"field '{field}'")
        prefix = f"Invalid sample ({', '.join(location)})" if location else "Invalid sample"
        super().__init__(f"{prefix}: {message}")
