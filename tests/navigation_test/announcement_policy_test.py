import dataclasses

import pytest

from navigation.guidance.announcement_policy import (
    ARRIVED_ANNOUNCEMENT,
    OFF_ROUTE_ANNOUNCEMENT,
    announcement_text,
    should_announce,
)
from navigation.guidance.models import EtaSnapshot

T0 = 1_700_000_000.0


def snap(remaining=1200.0, off_route=False, delay=0.0, at=T0, announced=None):
    return EtaSnapshot(
        timestamp=at + remaining,
        text="",
        remaining_seconds=remaining,
        traffic_delay_seconds=delay,
        is_off_route=off_route,
        distance_to_route_m=150.0 if off_route else 5.0,
        computed_at=at,
        last_announcement_at=announced,
    )


# ---------------------------------------------------------------------------
# should_announce
# ---------------------------------------------------------------------------

def test_first_snapshot_is_always_announced():
    assert should_announce(None, snap()) is True


def test_going_off_route_is_announced():
    previous = snap(announced=T0)
    nxt = snap(off_route=True, at=T0 + 60)

    assert should_announce(previous, nxt) is True


def test_nothing_within_sixty_seconds_of_last_announcement():
    previous = snap(announced=T0)

    # every trigger at once, still inside the floor
    nxt = snap(remaining=5000.0, off_route=True, delay=900.0, at=T0 + 59.9)
    assert should_announce(previous, nxt) is False

    nxt = dataclasses.replace(nxt, computed_at=T0 + 30)
    assert should_announce(previous, nxt) is False


def test_large_eta_change_is_announced():
    previous = snap(remaining=1200.0, announced=T0)

    assert should_announce(previous, snap(remaining=1501.0, at=T0 + 90)) is True
    assert should_announce(previous, snap(remaining=899.0, at=T0 + 90)) is True
    assert should_announce(previous, snap(remaining=1500.0, at=T0 + 90)) is False


def test_traffic_change_needs_both_delays():
    previous = snap(delay=100.0, announced=T0)

    assert should_announce(previous, snap(delay=401.0, at=T0 + 90)) is True
    assert should_announce(previous, snap(delay=0.0, at=T0 + 90)) is False
    assert should_announce(snap(delay=0.0, announced=T0), snap(delay=900.0, at=T0 + 90)) is False


def test_staying_off_route_is_not_reannounced():
    previous = snap(off_route=True, announced=T0)

    assert should_announce(previous, snap(off_route=True, at=T0 + 120)) is False


def test_never_announced_previous_skips_the_floor():
    previous = snap(announced=None)

    assert should_announce(previous, snap(off_route=True, at=T0 + 1)) is True


# ---------------------------------------------------------------------------
# announcement_text
# ---------------------------------------------------------------------------

def test_off_route_text():
    assert announcement_text(snap(off_route=True, delay=900.0)) == OFF_ROUTE_ANNOUNCEMENT


@pytest.mark.parametrize("seconds, expected", [
    (10.0, ARRIVED_ANNOUNCEMENT),
    (600.0, "You will arrive in 10 minutes."),
    (3900.0, "You will arrive in 1 hours and 5 minutes."),
])
def test_countdown_text(seconds, expected):
    assert announcement_text(snap(remaining=seconds)) == expected


def test_delay_clause_appended():
    text = announcement_text(snap(remaining=1800.0, delay=420.0))

    assert text == "You will arrive in 30 minutes. There is a 7 minute delay due to traffic."


def test_small_delay_not_mentioned():
    assert announcement_text(snap(remaining=1800.0, delay=300.0)) == "You will arrive in 30 minutes."
