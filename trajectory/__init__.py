"""
Trajectory replay engine: sample store, replay controller and telemetry.
"""
from trajectory.controller import ReplayController
from trajectory.errors import InvalidSampleError, TrajectoryLoadError
from trajectory.model import PlaybackState, RenderFrame, Sample, Telemetry, Trajectory
from trajectory.sample_store import SampleStore, TrajectoryLoaderWorker

__all__ = [
    'ReplayController',
    'InvalidSampleError',
    'TrajectoryLoadError',
    'PlaybackState',
    'RenderFrame',
    'Sample',
    'Telemetry',
    'Trajectory',
    'SampleStore',
    'TrajectoryLoaderWorker',
]
