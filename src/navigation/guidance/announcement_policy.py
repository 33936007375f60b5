# announcement_policy.py
# Decides whether a new EtaSnapshot is worth speaking, and what to say.
# Pure: speaking and recording the announcement time are the caller's job.

from typing import Optional

from .models import EtaSnapshot
from .nav_config import NavConfig
from .eta_estimator import round_half_up


OFF_ROUTE_ANNOUNCEMENT = "You have gone off route. Please return to the suggested route."
ARRIVED_ANNOUNCEMENT = "You have arrived at your destination."


def should_announce(
    previous: Optional[EtaSnapshot],
    nxt: EtaSnapshot,
    config: Optional[NavConfig] = None,
) -> bool:
    """
    True when `nxt` should be spoken.

    The first snapshot is always announced. After that nothing is spoken
    within announcement_interval_s of the last announcement; past that, an
    announcement needs a large ETA change, a fresh off-route event, or a large
    change in traffic delay.
    """
    cfg = config or NavConfig()
    if previous is None:
        return True

    last = previous.last_announcement_at
    if last is not None and nxt.computed_at - last < cfg.announcement_interval_s:
        return False

    eta_changed = abs(previous.remaining_seconds - nxt.remaining_seconds) > cfg.significant_change_s
    went_off_route = not previous.is_off_route and nxt.is_off_route
    traffic_changed = bool(
        previous.traffic_delay_seconds
        and nxt.traffic_delay_seconds
        and abs(previous.traffic_delay_seconds - nxt.traffic_delay_seconds) > cfg.significant_change_s
    )
    return eta_changed or went_off_route or traffic_changed


def announcement_text(nxt: EtaSnapshot, config: Optional[NavConfig] = None) -> str:
    """Sentence handed to the speech sink for `nxt`."""
    cfg = config or NavConfig()
    if nxt.is_off_route:
        return OFF_ROUTE_ANNOUNCEMENT

    minutes = round_half_up(nxt.remaining_seconds / 60)
    if minutes < 1:
        text = ARRIVED_ANNOUNCEMENT
    elif minutes < 60:
        text = f"You will arrive in {minutes} minutes."
    else:
        text = f"You will arrive in {minutes // 60} hours and {minutes % 60} minutes."

    delay = nxt.traffic_delay_seconds
    if delay and delay > cfg.traffic_notice_threshold_s:
        text += f" There is a {round_half_up(delay / 60)} minute delay due to traffic."
    return text
