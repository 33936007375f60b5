# geo_utils.py
# Pure mathematical / geographic helper functions.
# No side effects, no imports from other project modules besides models.

import math
from typing import Sequence

from .models import Coord


EARTH_RADIUS_M = 6_371_000.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two points in metres.

    Args:
        lat1, lon1: Origin in decimal degrees.
        lat2, lon2: Destination in decimal degrees.

    Returns:
        Distance in metres.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    # rounding can push a slightly outside [0, 1] for antipodal points
    a = min(1.0, max(0.0, a))
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance(a: Coord, b: Coord) -> float:
    """Great-circle distance between two coordinates in metres."""
    return haversine_distance(a.lat, a.lon, b.lat, b.lon)


def path_length(path: Sequence[Coord], start: int = 0) -> float:
    """Piecewise-linear length of path from vertex `start` to the last vertex."""
    total = 0.0
    for i in range(start, len(path) - 1):
        total += distance(path[i], path[i + 1])
    return total
