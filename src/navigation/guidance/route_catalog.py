# route_catalog.py
# Primary route + ordered alternates, and which one is active.
# Single source of truth for route selection; every switch goes through select().

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from .models import Route
from .nav_config import NavConfig

logger = logging.getLogger(__name__)


class SelectionStatus(Enum):
    ACCEPTED = "accepted"
    IGNORED  = "ignored"      # a previous switch is still settling
    REJECTED = "rejected"


class RejectReason(Enum):
    INVALID_INDEX    = "invalid_index"
    OUT_OF_RANGE     = "out_of_range"
    INCOMPLETE_ROUTE = "incomplete_route"
    MISSING_METRICS  = "missing_metrics"


@dataclass(frozen=True)
class SelectionResult:
    """Outcome of RouteCatalog.select()."""
    status: SelectionStatus
    index: object
    reason: Optional[RejectReason] = None
    message: str = ""

    @property
    def accepted(self) -> bool:
        return self.status is SelectionStatus.ACCEPTED


class RouteCatalog:
    """
    Holds the route candidates returned by the directions collaborator.

    Index 0 is the primary route, 1.. are the alternates in provider order.
    A failed select() never changes state. A successful one opens a short
    debounce window during which further selections are ignored.

    Args:
        primary:    The provider's first route.
        alternates: Remaining routes, in order.
        config:     NavConfig instance.
    """

    def __init__(
        self,
        primary: Route,
        alternates: Sequence[Route] = (),
        config: Optional[NavConfig] = None,
    ) -> None:
        self.config = config or NavConfig()
        self._primary = primary
        self._alternates: List[Route] = list(alternates)
        self._selected_index = 0
        self._last_switch_at: Optional[float] = None
        self._check_primary()

    @classmethod
    def from_routes(cls, routes: Sequence[Route], config: Optional[NavConfig] = None) -> "RouteCatalog":
        if not routes:
            raise ValueError("A route catalog needs at least one route.")
        return cls(routes[0], routes[1:], config)

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def primary(self) -> Route:
        return self._primary

    @property
    def alternates(self) -> List[Route]:
        return list(self._alternates)

    @property
    def routes(self) -> List[Route]:
        return [self._primary] + self._alternates

    @property
    def route_count(self) -> int:
        return 1 + len(self._alternates)

    @property
    def selected_index(self) -> int:
        return self._selected_index

    @property
    def selected_route(self) -> Route:
        return self.routes[self._selected_index]

    @property
    def last_switch_at(self) -> Optional[float]:
        return self._last_switch_at

    def is_switching(self, now: float) -> bool:
        return (
            self._last_switch_at is not None
            and now - self._last_switch_at < self.config.route_switch_debounce_s
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def select(self, index, now: float) -> SelectionResult:
        """
        Make route `index` the active route.

        Args:
            index: 0 for the primary route, 1.. for alternates.
            now:   Wall clock, epoch seconds.

        Returns:
            SelectionResult; state is only changed when status is ACCEPTED.
        """
        if self.is_switching(now):
            logger.debug(f"Route switch in progress, ignoring selection of {index!r}.")
            return SelectionResult(SelectionStatus.IGNORED, index)

        reason, message = self._validate(index)
        if reason is not None:
            logger.warning(f"Route selection rejected ({reason.value}): {message}")
            return SelectionResult(SelectionStatus.REJECTED, index, reason, message)

        logger.info(f"Route selection {self._selected_index} → {index}.")
        self._selected_index = index
        self._last_switch_at = now
        return SelectionResult(SelectionStatus.ACCEPTED, index)

    def replace(self, routes: Sequence[Route]) -> None:
        """Install a fresh set of routes (re-fetch) and fall back to the primary."""
        if not routes:
            raise ValueError("A route catalog needs at least one route.")
        self._primary = routes[0]
        self._alternates = list(routes[1:])
        self._selected_index = 0
        self._check_primary()
        logger.info(f"Route catalog replaced: {len(self._alternates)} alternates.")

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _check_primary(self) -> None:
        # the primary is trusted as the starting route even when incomplete
        reason, message = self._validate(0)
        if reason is not None:
            logger.warning(f"Primary route installed as active despite {reason.value}: {message}")

    def _validate(self, index):
        if isinstance(index, bool) or not isinstance(index, int) or index < 0:
            return RejectReason.INVALID_INDEX, f"index {index!r} is not a non-negative integer"

        if index >= self.route_count:
            return RejectReason.OUT_OF_RANGE, (
                f"index {index} out of bounds for {self.route_count} routes"
            )

        route = self.routes[index]
        if not route.has_geometry:
            return RejectReason.INCOMPLETE_ROUTE, (
                f"route {index} has {len(route.coordinates)} coordinates "
                f"and {len(route.steps)} steps"
            )

        if not route.has_metrics:
            return RejectReason.MISSING_METRICS, f"route {index} has no distance/duration text"

        return None, ""
