"""
Great-circle helpers for trajectory samples.

Scalar haversine for single segments plus numpy versions for whole
routes (used to color the traversed path by speed).
"""
import math

import numpy as np

from trajectory.model import Trajectory

EARTH_RADIUS_KM = 6371.0
MS_PER_HOUR = 3_600_000.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two points on a sphere of radius 6371 km.

    Args:
        lat1, lon1: First point in degrees
        lat2, lon2: Second point in degrees

    Returns:
        Distance in kilometres
    """
    lat1_rad, lat2_rad = math.radians(lat1), math.radians(lat2)
    dlat = lat2_rad - lat1_rad
    dlon = math.radians(lon2 - lon1)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def segment_distances_km(latitudes: np.ndarray, longitudes: np.ndarray) -> np.ndarray:
    """
    Distance between each pair of consecutive points.

    Returns an array one element shorter than the inputs.
    """
    lat = np.deg2rad(np.asarray(latitudes, dtype=float))
    lon = np.deg2rad(np.asarray(longitudes, dtype=float))
    if lat.size < 2:
        return np.zeros(0, dtype=float)

    dlat = np.diff(lat)
    dlon = np.diff(lon)

    a = np.sin(dlat / 2) ** 2 + np.cos(lat[:-1]) * np.cos(lat[1:]) * np.sin(dlon / 2) ** 2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def segment_speeds_kmh(trajectory: Trajectory) -> np.ndarray:
    """
    Speed at every sample, measured over the segment that ends there.

    The first sample has no predecessor and gets 0, as does any sample
    whose timestamp does not move forward.
    """
    speeds = np.zeros(len(trajectory), dtype=float)
    if len(trajectory) < 2:
        return speeds

    lats = np.array([s.latitude for s in trajectory], dtype=float)
    lons = np.array([s.longitude for s in trajectory], dtype=float)
    times = np.array([s.timestamp for s in trajectory], dtype=float)

    distances = segment_distances_km(lats, lons)
    hours = np.diff(times) / MS_PER_HOUR

    moving = hours > 0
    speeds[1:][moving] = distances[moving] / hours[moving]
    return speeds


def route_length_km(trajectory: Trajectory) -> float:
    if len(trajectory) < 2:
        return 0.0
    lats = np.array([s.latitude for s in trajectory], dtype=float)
    lons = np.array([s.longitude for s in trajectory], dtype=float)
    return float(segment_distances_km(lats, lons).sum())
