"""Tests for great-circle helpers."""

import math

import numpy as np
import pytest

from trajectory.geo import (
    EARTH_RADIUS_KM,
    haversine_km,
    route_length_km,
    segment_distances_km,
    segment_speeds_kmh,
)
from trajectory.model import Sample, Trajectory

ONE_KM_DEG = math.degrees(1.0 / EARTH_RADIUS_KM)


def test_same_point_is_zero():
    assert haversine_km(17.385, 78.4866, 17.385, 78.4866) == 0.0


def test_one_km_along_meridian():
    assert haversine_km(0.0, 0.0, ONE_KM_DEG, 0.0) == pytest.approx(1.0, rel=1e-9)


def test_quarter_circumference():
    assert haversine_km(0.0, 0.0, 0.0, 90.0) == pytest.approx(math.pi * EARTH_RADIUS_KM / 2)


def test_symmetric():
    a = haversine_km(17.3850, 78.4866, 17.3860, 78.4876)
    b = haversine_km(17.3860, 78.4876, 17.3850, 78.4866)
    assert a == pytest.approx(b)


def test_segment_distances_match_scalar():
    lats = np.array([17.3850, 17.3860, 17.3900])
    lons = np.array([78.4866, 78.4876, 78.4800])
    distances = segment_distances_km(lats, lons)

    assert distances.shape == (2,)
    assert distances[0] == pytest.approx(haversine_km(17.3850, 78.4866, 17.3860, 78.4876))
    assert distances[1] == pytest.approx(haversine_km(17.3860, 78.4876, 17.3900, 78.4800))


def test_segment_distances_single_point():
    assert segment_distances_km(np.array([1.0]), np.array([2.0])).size == 0


def test_segment_speeds():
    trajectory = Trajectory((
        Sample(0.0, 0.0, 0),
        Sample(ONE_KM_DEG, 0.0, 60_000),
        Sample(ONE_KM_DEG, 0.0, 60_000),   # no time passes
        Sample(2 * ONE_KM_DEG, 0.0, 120_000),
    ))
    speeds = segment_speeds_kmh(trajectory)

    assert speeds.shape == (4,)
    assert speeds[0] == 0.0
    assert speeds[1] == pytest.approx(60.0)
    assert speeds[2] == 0.0
    assert speeds[3] == pytest.approx(60.0)


def test_route_length():
    trajectory = Trajectory((
        Sample(0.0, 0.0, 0),
        Sample(ONE_KM_DEG, 0.0, 1),
        Sample(2 * ONE_KM_DEG, 0.0, 2),
    ))
    assert route_length_km(trajectory) == pytest.approx(2.0)
    assert route_length_km(Trajectory()) == 0.0
