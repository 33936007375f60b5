# nav_config.py
# All tuneable constants in one place.
# Pass a NavConfig instance to every module that needs settings.

import os
from dataclasses import dataclass, field
from typing import FrozenSet, Optional


# ---------------------------------------------------------------------------
# Traffic heuristic constants (placeholder model, no live traffic data)
# ---------------------------------------------------------------------------

RUSH_HOURS: frozenset = frozenset({7, 8, 9, 16, 17, 18})

TRAFFIC_DELAY_FACTOR: float = 0.2      # 20% extra during rush hour
TRAFFIC_REFERENCE_SPEED_MS: float = 50.0

MPS_TO_MPH: float = 2.237

API_KEY_ENV = "GOOGLE_MAPS_API_KEY"


# ---------------------------------------------------------------------------
# Main config
# ---------------------------------------------------------------------------

@dataclass
class NavConfig:
    # Route tracking
    off_route_threshold_m: float = 100.0          # strictly greater → off-route

    # ETA cadence
    normal_interval_s: float = 30.0
    frequent_interval_s: float = 10.0
    frequent_update_distance_m: float = 5000.0    # below this → frequent cadence

    # Traffic heuristic
    rush_hours: FrozenSet[int] = field(default_factory=lambda: RUSH_HOURS)
    traffic_delay_factor: float = TRAFFIC_DELAY_FACTOR
    traffic_reference_speed_ms: float = TRAFFIC_REFERENCE_SPEED_MS
    traffic_notice_threshold_s: float = 300.0     # delay worth mentioning

    # Voice announcements
    announcement_interval_s: float = 60.0         # hard floor between announcements
    significant_change_s: float = 300.0           # ETA / delay change worth speaking

    # Route selection
    route_switch_debounce_s: float = 0.5

    # Location filter
    min_speed_change_ms: float = 0.5
    min_heading_change_deg: float = 5.0

    # Route cache
    cache_dir: str = ".cache"
    cache_key: str = "navigation_route_cache"
    cache_ttl_s: float = 3600.0

    # Directions provider
    directions_url: str = "https://maps.googleapis.com/maps/api/directions/json"
    api_key: Optional[str] = None
    request_timeout_s: float = 10.0

    # Logging
    log_dir: str = "."                     # directory for the session log
    session_filename: str = "nav_session.jsonl"

    @property
    def session_filepath(self) -> str:
        return os.path.join(self.log_dir, self.session_filename)

    @classmethod
    def from_env(cls, **overrides) -> "NavConfig":
        """Build a config whose API key comes from the environment."""
        overrides.setdefault("api_key", os.environ.get(API_KEY_ENV))
        return cls(**overrides)
