# location_source.py
# Push-based location feed. The GPS collaborator calls push(); subscribers
# are only notified when the fix changed meaningfully.

import logging
from typing import Callable, List, Optional

from .models import LocationFix
from .nav_config import NavConfig

logger = logging.getLogger(__name__)


LocationCallback = Callable[[LocationFix], None]


class Subscription:
    """Handle returned by LocationSource.subscribe(); cancel() to stop delivery."""

    def __init__(self, source: "LocationSource", callback: LocationCallback) -> None:
        self._source = source
        self.callback = callback
        self.active = True

    def cancel(self) -> None:
        if self.active:
            self.active = False
            self._source._remove(self)


class LocationSource:
    """
    Fan-out of location fixes with a significance filter.

    A fix is delivered when lat/lon changed at all, speed changed by more than
    min_speed_change_ms, or heading by more than min_heading_change_deg.
    """

    def __init__(self, config: Optional[NavConfig] = None) -> None:
        self.config = config or NavConfig()
        self._subscriptions: List[Subscription] = []
        self._last: Optional[LocationFix] = None

    @property
    def last_fix(self) -> Optional[LocationFix]:
        return self._last

    def subscribe(self, callback: LocationCallback) -> Subscription:
        sub = Subscription(self, callback)
        self._subscriptions.append(sub)
        return sub

    def _remove(self, sub: Subscription) -> None:
        if sub in self._subscriptions:
            self._subscriptions.remove(sub)

    def is_significant(self, fix: LocationFix) -> bool:
        last = self._last
        if last is None:
            return True
        if fix.lat != last.lat or fix.lon != last.lon:
            return True
        if abs((fix.speed_mps or 0.0) - (last.speed_mps or 0.0)) > self.config.min_speed_change_ms:
            return True
        return abs((fix.heading_deg or 0.0) - (last.heading_deg or 0.0)) > self.config.min_heading_change_deg

    def push(self, fix: LocationFix) -> bool:
        """
        Offer a new fix.

        Returns:
            True if the fix was delivered to subscribers.
        """
        if not self.is_significant(fix):
            return False
        self._last = fix
        for sub in list(self._subscriptions):
            if sub.active:
                sub.callback(fix)
        return True
