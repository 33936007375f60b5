import polyline
import pytest

from navigation.guidance.models import Coord
from navigation.guidance.polyline_codec import decode, encode

# Published example of the encoded polyline format
REFERENCE = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"
REFERENCE_POINTS = [(38.5, -120.2), (40.7, -120.95), (43.252, -126.453)]


def test_decode_reference_string():
    coords = decode(REFERENCE)

    assert len(coords) == 3
    for c, (lat, lon) in zip(coords, REFERENCE_POINTS):
        assert c.lat == pytest.approx(lat, abs=1e-5)
        assert c.lon == pytest.approx(lon, abs=1e-5)


@pytest.mark.parametrize("value", ["", None, 42])
def test_decode_empty_or_missing_input(value):
    assert decode(value) == []


def test_truncated_longitude_returns_partial_result():
    # drop the final chunk of the last longitude
    coords = decode(REFERENCE[:-1])

    assert [(c.lat, c.lon) for c in coords] == [(38.5, -120.2), (40.7, -120.95)]


def test_truncated_after_latitude_returns_partial_result():
    # "_ulL" is the second latitude; its longitude never arrives
    coords = decode("_p~iF~ps|U_ulL")

    assert [(c.lat, c.lon) for c in coords] == [(38.5, -120.2)]


def test_out_of_range_points_are_skipped_but_still_accumulated():
    encoded = encode([Coord(10.0, 10.0), Coord(95.0, 10.0), Coord(20.0, 20.0)])

    coords = decode(encoded)

    assert [(c.lat, c.lon) for c in coords] == [(10.0, 10.0), (20.0, 20.0)]


def test_encode_matches_reference_implementation():
    path = [
        Coord(37.77493, -122.41942),
        Coord(37.77712, -122.41633),
        Coord(37.78013, -122.40987),
        Coord(-33.86882, 151.20929),
        Coord(0.0, 0.0),
    ]

    assert encode(path) == polyline.encode([(c.lat, c.lon) for c in path])
    assert encode([Coord(lat, lon) for lat, lon in REFERENCE_POINTS]) == REFERENCE


def test_decode_reproduces_encoded_path():
    path = [
        Coord(52.52001, 13.40495),
        Coord(52.51632, 13.37769),
        Coord(48.85661, 2.35222),
        Coord(-89.99999, -179.99999),
        Coord(89.99999, 179.99999),
    ]

    decoded = decode(encode(path))

    assert len(decoded) == len(path)
    for got, want in zip(decoded, path):
        assert abs(got.lat - want.lat) <= 1e-5
        assert abs(got.lon - want.lon) <= 1e-5


def test_decode_agrees_with_reference_decoder():
    encoded = polyline.encode([(41.38879, 2.15899), (41.39005, 2.16231), (41.40363, 2.17436)])

    ours = decode(encoded)
    theirs = polyline.decode(encoded)

    assert len(ours) == len(theirs)
    for c, (lat, lon) in zip(ours, theirs):
        assert c.lat == pytest.approx(lat, abs=1e-9)
        assert c.lon == pytest.approx(lon, abs=1e-9)
