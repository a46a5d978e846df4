"""Shared test fixtures."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt5 import QtWidgets

from trajectory.model import Sample, Trajectory

T0 = 1_700_000_000_000


@pytest.fixture(scope="session")
def qapp():
    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    yield app


def make_trajectory(count: int, step_ms: int = 60_000) -> Trajectory:
    return Trajectory(tuple(
        Sample(latitude=17.385 + i * 0.001, longitude=78.4866 + i * 0.001, timestamp=T0 + i * step_ms)
        for i in range(count)
    ))


@pytest.fixture
def hyderabad_pair() -> Trajectory:
    return Trajectory((
        Sample(latitude=17.3850, longitude=78.4866, timestamp=T0),
        Sample(latitude=17.3860, longitude=78.4876, timestamp=T0 + 60_000),
    ))


@pytest.fixture
def five_samples() -> Trajectory:
    return make_trajectory(5)


@pytest.fixture
def controller(qapp):
    from trajectory.controller import ReplayController

    ctrl = ReplayController(tick_interval_ms=2000)
    yield ctrl
    ctrl.shutdown()
