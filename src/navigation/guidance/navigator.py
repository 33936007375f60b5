# navigator.py
# Public entry point for the guidance core.
# Owns no business logic — wires catalog, estimator, policy, speech and logs.

import logging
import time
from typing import Callable, Optional, Sequence, Tuple

from speech.tts import SpeechSink

from .models import EtaSnapshot, LocationFix, Route
from .nav_config import NavConfig
from .route_catalog import RejectReason, RouteCatalog, SelectionResult, SelectionStatus
from .eta_estimator import EtaEstimator
from .announcement_policy import should_announce, announcement_text
from .location_source import LocationSource, Subscription
from .nav_logger import NavLogger

logger = logging.getLogger(__name__)


class Cadence:
    """Cancelable handle for the periodic ETA tick of one session."""

    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class NavigationSession:
    """
    High-level navigation facade.

    Typical lifecycle:
        nav = NavigationSession(config, speech=Pyttsx3Speaker())
        nav.start(routes)

        # GPS collaborator:
        source.push(fix)          # or nav.on_location(fix)
        # Timer collaborator, every few seconds:
        snapshot = nav.tick()

    Args:
        config:          Optional NavConfig; defaults to NavConfig().
        speech:          Sink for spoken announcements (None = silent).
        nav_logger:      Optional NavLogger for the JSONL session log.
        location_source: Feed to subscribe to while navigating.
        clock:           Wall clock in epoch seconds; time.time by default.
    """

    def __init__(
        self,
        config: Optional[NavConfig] = None,
        speech: Optional[SpeechSink] = None,
        nav_logger: Optional[NavLogger] = None,
        location_source: Optional[LocationSource] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or NavConfig()
        self._speech = speech
        self._logger = nav_logger
        self._source = location_source
        self._clock = clock

        self._estimator = EtaEstimator(self.config)
        self._catalog: Optional[RouteCatalog] = None
        self._cadence: Optional[Cadence] = None
        self._subscription: Optional[Subscription] = None
        self._fix: Optional[LocationFix] = None
        self._voice_enabled = True

    # ------------------------------------------------------------------
    # Navigation control
    # ------------------------------------------------------------------

    def start(self, routes: Sequence[Route]) -> Tuple[bool, str]:
        """
        Install route candidates and begin ETA tracking.

        Returns:
            (success, message)
        """
        if not routes:
            return False, "No routes to navigate."

        self.stop()
        self._catalog = RouteCatalog.from_routes(routes, self.config)
        self._estimator.reset()
        self._cadence = Cadence()
        if self._source is not None:
            self._subscription = self._source.subscribe(self.on_location)
            if self._source.last_fix is not None:
                self._fix = self._source.last_fix

        primary = self._catalog.primary
        logger.info(
            f"Navigation started — {len(primary.coordinates)} points, "
            f"{self._catalog.route_count - 1} alternates."
        )
        return True, f"Route ready. {len(primary.steps)} steps."

    def stop(self) -> None:
        """End the session; no snapshot is produced after this."""
        if self._cadence is not None:
            self._cadence.cancel()
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        if self._catalog is not None:
            logger.info("Navigation stopped.")
        self._catalog = None

    def replace_routes(self, routes: Sequence[Route]) -> None:
        """Swap in re-fetched routes; an empty list clears the route and stops."""
        if not routes:
            self.stop()
        elif self._catalog is None:
            self.start(routes)
        else:
            self._catalog.replace(routes)

    def select_route(self, index, now: Optional[float] = None) -> SelectionResult:
        """Switch the active route; rejections go to the session log."""
        if self._catalog is None:
            result = SelectionResult(
                SelectionStatus.REJECTED, index, RejectReason.OUT_OF_RANGE, "no active route catalog"
            )
        else:
            result = self._catalog.select(index, self._now(now))
        if result.status is SelectionStatus.REJECTED and self._logger is not None:
            self._logger.log_rejection(result)
        return result

    def set_voice_enabled(self, enabled: bool) -> None:
        self._voice_enabled = bool(enabled)

    # ------------------------------------------------------------------
    # Stimuli
    # ------------------------------------------------------------------

    def on_location(self, fix: LocationFix) -> Optional[EtaSnapshot]:
        """Accept a location fix; a speed change triggers an ETA cycle."""
        previous = self._fix
        self._fix = fix
        if previous is None or previous.speed_mps != fix.speed_mps:
            return self.tick()
        return None

    def tick(self, now: Optional[float] = None) -> Optional[EtaSnapshot]:
        """
        Run one ETA cycle against the selected route.

        Returns:
            The new snapshot, or None when the cycle produced nothing.
        """
        if self._cadence is None or self._cadence.cancelled or self._catalog is None:
            return None
        if self._fix is None:
            return None

        now = self._now(now)
        route = self._catalog.selected_route
        previous = self._estimator.snapshot
        snapshot = self._estimator.update(
            route.coordinates, self._fix.coord, self._fix.speed_mps, now
        )
        if snapshot is None:
            return None

        spoken = None
        if self._voice_enabled and self._speech is not None and should_announce(
            previous, snapshot, self.config
        ):
            spoken = announcement_text(snapshot, self.config)
            self._speech.speak(spoken)
            snapshot = self._estimator.mark_announced(now)

        if self._logger is not None:
            self._logger.log_snapshot(snapshot, self._fix, spoken)
        return snapshot

    # ------------------------------------------------------------------
    # Convenience read-only properties
    # ------------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self._catalog is not None and not (self._cadence is None or self._cadence.cancelled)

    @property
    def catalog(self) -> Optional[RouteCatalog]:
        return self._catalog

    @property
    def snapshot(self) -> Optional[EtaSnapshot]:
        return self._estimator.snapshot

    @property
    def voice_enabled(self) -> bool:
        return self._voice_enabled

    def _now(self, now: Optional[float]) -> float:
        return self._clock() if now is None else now
