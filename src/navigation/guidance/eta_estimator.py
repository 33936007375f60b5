# eta_estimator.py
# Turns route progress + current speed into an EtaSnapshot.
# Owns the update cadence; every produced snapshot replaces the previous one.

import dataclasses
import logging
import math
from datetime import datetime
from typing import Optional, Sequence

from .models import Coord, EtaSnapshot, UpdateFrequency
from .nav_config import NavConfig, MPS_TO_MPH
from .route_tracker import RouteTracker

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def traffic_delay(remaining_m: float, hour: int, config: Optional[NavConfig] = None) -> float:
    """
    Placeholder traffic model: a flat penalty during rush hour.

    Args:
        remaining_m: Remaining route distance in metres.
        hour:        Local hour of day, 0-23.

    Returns:
        Extra seconds caused by traffic (0 outside rush hour).
    """
    cfg = config or NavConfig()
    if hour in cfg.rush_hours:
        return remaining_m * cfg.traffic_delay_factor / cfg.traffic_reference_speed_ms
    return 0.0


def format_eta(total_seconds: float, delay_seconds: Optional[float] = None,
               notice_threshold_s: float = 300.0) -> str:
    """Display text for an arrival `total_seconds` from now."""
    minutes = round_half_up(total_seconds / 60)
    if minutes < 1:
        text = "Arriving now"
    elif minutes < 60:
        text = f"Arriving in {minutes} min"
    else:
        text = f"Arriving in {minutes // 60}h {minutes % 60}m"

    if delay_seconds and delay_seconds > notice_threshold_s:
        text += f" ({round_half_up(delay_seconds / 60)} min delay due to traffic)"
    return text


# ---------------------------------------------------------------------------
# Estimator
# ---------------------------------------------------------------------------

class EtaEstimator:
    """
    Cadence-gated ETA computation for one navigation session.

    Usage:
        estimator = EtaEstimator(config)

        # On every tick / speed change:
        snapshot = estimator.update(route.coordinates, position, speed, time.time())
        if snapshot:
            show(snapshot.text)
    """

    def __init__(self, config: Optional[NavConfig] = None,
                 tracker: Optional[RouteTracker] = None) -> None:
        self.config = config or NavConfig()
        self._tracker = tracker or RouteTracker(self.config)
        self.reset()

    def reset(self) -> None:
        """Forget all session state (new route, new session)."""
        self._last_update_at: Optional[float] = None
        self._frequency = UpdateFrequency.NORMAL
        self._snapshot: Optional[EtaSnapshot] = None

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> Optional[EtaSnapshot]:
        return self._snapshot

    @property
    def frequency(self) -> UpdateFrequency:
        return self._frequency

    @property
    def last_update_at(self) -> Optional[float]:
        return self._last_update_at

    def cadence_s(self) -> float:
        if self._frequency is UpdateFrequency.FREQUENT:
            return self.config.frequent_interval_s
        return self.config.normal_interval_s

    # ------------------------------------------------------------------
    # Core method
    # ------------------------------------------------------------------

    def update(
        self,
        path: Sequence[Coord],
        current: Coord,
        speed_mps: Optional[float],
        now: float,
    ) -> Optional[EtaSnapshot]:
        """
        Run one ETA cycle.

        Args:
            path:      Coordinates of the active route.
            current:   Current position.
            speed_mps: Current speed in m/s; None or <= 0 means unknown.
            now:       Wall clock, epoch seconds.

        Returns:
            The new EtaSnapshot, or None when nothing was produced this cycle.
        """
        if self._last_update_at is not None and now - self._last_update_at < self.cadence_s():
            return None

        status = self._tracker.status(current, path)
        if status is None:
            logger.debug("ETA skipped: route has fewer than two coordinates.")
            return None

        remaining = status.remaining_distance_m
        if remaining < self.config.frequent_update_distance_m and \
                self._frequency is not UpdateFrequency.FREQUENT:
            self._frequency = UpdateFrequency.FREQUENT
            logger.info(f"{int(remaining)} m remaining, switching to frequent ETA updates.")

        if speed_mps is None or not math.isfinite(speed_mps) or speed_mps <= 0:
            logger.debug(f"ETA skipped: speed {speed_mps!r} is unusable.")
            return None

        speed_mph = speed_mps * MPS_TO_MPH
        base_seconds = remaining / speed_mph * 3600
        delay = traffic_delay(remaining, datetime.fromtimestamp(now).hour, self.config)
        total_seconds = base_seconds + delay
        if not math.isfinite(total_seconds):
            logger.debug(f"ETA skipped: speed {speed_mps!r} is too small to estimate from.")
            return None

        previous = self._snapshot
        snapshot = EtaSnapshot(
            timestamp=now + total_seconds,
            text=format_eta(total_seconds, delay, self.config.traffic_notice_threshold_s),
            remaining_seconds=total_seconds,
            traffic_delay_seconds=delay,
            is_off_route=status.is_off_route,
            distance_to_route_m=status.distance_to_route_m,
            computed_at=now,
            last_announcement_at=previous.last_announcement_at if previous else None,
        )

        self._snapshot = snapshot
        self._last_update_at = now
        return snapshot

    def mark_announced(self, now: float) -> Optional[EtaSnapshot]:
        """Record that the current snapshot was spoken at `now`."""
        if self._snapshot is None:
            return None
        self._snapshot = dataclasses.replace(self._snapshot, last_announcement_at=now)
        return self._snapshot
