import math

import pytest

from navigation.guidance.geo_utils import EARTH_RADIUS_M, distance, haversine_distance, path_length
from navigation.guidance.models import Coord

POINTS = [
    Coord(0.0, 0.0),
    Coord(38.5, -120.2),
    Coord(-33.86882, 151.20929),
    Coord(89.9, 45.0),
    Coord(-90.0, 180.0),
]


@pytest.mark.parametrize("point", POINTS)
def test_distance_to_self_is_zero(point):
    assert distance(point, point) == 0.0


@pytest.mark.parametrize("a", POINTS)
@pytest.mark.parametrize("b", POINTS)
def test_distance_is_symmetric(a, b):
    assert distance(a, b) == pytest.approx(distance(b, a))


def test_one_degree_of_latitude():
    # 2πR / 360
    assert haversine_distance(0, 0, 1, 0) == pytest.approx(111_194.93, abs=0.01)


def test_antipodal_points_are_stable():
    d = distance(Coord(0.0, 0.0), Coord(0.0, 180.0))

    assert not math.isnan(d)
    assert d == pytest.approx(math.pi * EARTH_RADIUS_M)


def test_near_identical_points():
    d = distance(Coord(45.0, 7.0), Coord(45.0, 7.0000001))

    assert 0.0 < d < 0.02


def test_path_length_sums_segments():
    path = [Coord(0.0, 0.0), Coord(0.0, 0.001), Coord(0.001, 0.001)]

    expected = distance(path[0], path[1]) + distance(path[1], path[2])

    assert path_length(path) == pytest.approx(expected)
    assert path_length(path, 1) == pytest.approx(distance(path[1], path[2]))
    assert path_length(path, 2) == 0.0
