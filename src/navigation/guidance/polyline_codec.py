# polyline_codec.py
# Encoded polyline ("encoded curve") wire format.
# Pure functions, no side effects besides a warning on truncated input.

import logging
import math
from typing import Iterable, List, Optional, Tuple

from .models import Coord

logger = logging.getLogger(__name__)


PRECISION = 1e5          # 5 decimal places per axis
CHAR_OFFSET = 63
CHUNK_BITS = 5
CHUNK_MASK = 0x1F
CONTINUATION = 0x20


class _Truncated(Exception):
    """String ended in the middle of a value."""


def _read_value(encoded: str, index: int) -> Tuple[int, int]:
    """
    Read one zigzag-encoded signed delta starting at index.

    Returns:
        (delta, next_index)
    """
    shift = 0
    acc = 0
    while True:
        if index >= len(encoded):
            raise _Truncated(index)
        chunk = ord(encoded[index]) - CHAR_OFFSET
        index += 1
        acc |= (chunk & CHUNK_MASK) << shift
        shift += CHUNK_BITS
        if chunk < CONTINUATION:
            break
    delta = ~(acc >> 1) if acc & 1 else acc >> 1
    return delta, index


def decode(encoded: Optional[str]) -> List[Coord]:
    """
    Decode an encoded polyline into an ordered list of coordinates.

    Latitude and longitude deltas alternate, each accumulated onto a running
    total. Points outside the valid lat/lon range are skipped. A string that
    ends mid-value is not an error: everything decoded up to that point is
    returned.

    Args:
        encoded: Encoded curve; None or "" yield an empty list.

    Returns:
        List of Coord in path order.
    """
    if not encoded or not isinstance(encoded, str):
        return []

    coords: List[Coord] = []
    index = 0
    lat = 0
    lon = 0

    try:
        while index < len(encoded):
            d_lat, index = _read_value(encoded, index)
            d_lon, index = _read_value(encoded, index)
            lat += d_lat
            lon += d_lon

            point = Coord(round(lat / PRECISION, 6), round(lon / PRECISION, 6))
            if point.is_valid():
                coords.append(point)
    except _Truncated as e:
        logger.warning(
            f"Truncated polyline at offset {e.args[0]}; "
            f"returning {len(coords)} decoded points."
        )

    return coords


def _to_units(value: float) -> int:
    """Scale degrees to integer 1e-5 units, rounding half away from zero."""
    return int(math.copysign(math.floor(abs(value) * PRECISION + 0.5), value))


def _write_value(delta: int, out: List[str]) -> None:
    value = ~(delta << 1) if delta < 0 else delta << 1
    while value >= CONTINUATION:
        out.append(chr((CONTINUATION | (value & CHUNK_MASK)) + CHAR_OFFSET))
        value >>= CHUNK_BITS
    out.append(chr(value + CHAR_OFFSET))


def encode(coords: Iterable[Coord]) -> str:
    """Inverse of decode(): encode coordinates as an encoded polyline."""
    out: List[str] = []
    prev_lat = 0
    prev_lon = 0
    for c in coords:
        lat = _to_units(c.lat)
        lon = _to_units(c.lon)
        _write_value(lat - prev_lat, out)
        _write_value(lon - prev_lon, out)
        prev_lat, prev_lon = lat, lon
    return "".join(out)
