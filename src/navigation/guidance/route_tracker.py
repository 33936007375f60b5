# route_tracker.py
# Locates the user against the active route's coordinate sequence.
# Call status() on every GPS update; the tracker keeps no per-route state.

from typing import Optional, Sequence

from .models import Coord, RouteStatus
from .geo_utils import distance, path_length
from .nav_config import NavConfig


class RouteTracker:
    """
    Nearest-vertex progress tracker.

    The closest point is the closest *vertex* of the path, not a projection
    onto a segment. Source paths are dense enough for this to hold within a
    few metres; sparse paths overestimate distance_to_route between vertices.

    Usage:
        tracker = RouteTracker(config)

        # Inside GPS loop:
        status = tracker.status(current_coord, route.coordinates)
    """

    def __init__(self, config: Optional[NavConfig] = None) -> None:
        self.config = config or NavConfig()

    def status(self, current: Coord, path: Sequence[Coord]) -> Optional[RouteStatus]:
        """
        Compare current position to a route path.

        Args:
            current: Current geographic position.
            path:    Route vertices in travel order.

        Returns:
            RouteStatus, or None when the path has fewer than two vertices.
        """
        if len(path) < 2:
            return None

        closest_index = 0
        min_dist = float("inf")
        for i, vertex in enumerate(path):
            d = distance(current, vertex)
            # strict < keeps the earliest vertex on ties
            if d < min_dist:
                min_dist = d
                closest_index = i

        return RouteStatus(
            remaining_distance_m=path_length(path, closest_index),
            is_off_route=min_dist > self.config.off_route_threshold_m,
            distance_to_route_m=min_dist,
            closest_index=closest_index,
        )
