# route_cache.py
# Persists the last fetched routes so a restart can skip a directions call.
# Storage goes through a small key-value port; JSON files on disk by default.

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from .models import Route, Waypoint
from .nav_config import NavConfig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Key-value port
# ---------------------------------------------------------------------------

class KeyValueCache(ABC):
    """Minimal key-value store the route cache is written against."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...


class MemoryCache(KeyValueCache):
    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileCache(KeyValueCache):
    """
    One file per key under a directory.

    Args:
        directory: Where the files live; created if missing.
    """

    def __init__(self, directory: str) -> None:
        self.directory = directory
        os.makedirs(self.directory, exist_ok=True)

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def get(self, key: str) -> Optional[str]:
        try:
            with open(self._path(key), "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        with open(self._path(key), "w", encoding="utf-8") as f:
            f.write(value)

    def delete(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass


# ---------------------------------------------------------------------------
# Route cache
# ---------------------------------------------------------------------------

class RouteCache:
    """
    Saves routes together with the waypoints they were fetched for.

    An entry is only handed back for the same waypoint list and while it is
    younger than cache_ttl_s; anything else is deleted on read.

    Args:
        store:  KeyValueCache implementation.
        config: NavConfig instance for the key and TTL.
    """

    def __init__(self, store: Optional[KeyValueCache] = None,
                 config: Optional[NavConfig] = None) -> None:
        self.config = config or NavConfig()
        self.store = store or JsonFileCache(self.config.cache_dir)

    def save(self, routes: Sequence[Route], waypoints: Sequence[Waypoint], now: float) -> bool:
        """
        Serialize routes to the store.

        Returns:
            True on success, False on failure.
        """
        entry = {
            "route": routes[0].to_dict() if routes else None,
            "alternative_routes": [r.to_dict() for r in routes[1:]],
            "waypoints": [w.to_dict() for w in waypoints],
            "timestamp": now,
        }
        try:
            self.store.set(self.config.cache_key, json.dumps(entry, ensure_ascii=False))
            logger.info(f"Cached {len(routes)} routes for {len(waypoints)} waypoints.")
            return True
        except (IOError, TypeError, ValueError) as e:
            logger.error(f"Failed to cache routes: {e}")
            return False

    def load(self, waypoints: Sequence[Waypoint], now: float) -> Optional[List[Route]]:
        """
        Return cached routes for `waypoints`, primary first.

        Returns:
            List of Route, or None on miss, expiry, mismatch or corruption.
        """
        key = self.config.cache_key
        try:
            raw = self.store.get(key)
        except IOError as e:
            logger.error(f"Failed to read route cache: {e}")
            return None
        if raw is None:
            return None

        try:
            entry: Dict[str, Any] = json.loads(raw)
            age = now - entry["timestamp"]
            cached_waypoints = [Waypoint.from_dict(w) for w in entry["waypoints"]]
            if age >= self.config.cache_ttl_s or cached_waypoints != list(waypoints):
                logger.info(f"Discarding route cache (age {int(age)} s).")
                self.store.delete(key)
                return None
            if entry["route"] is None:
                return None
            routes = [Route.from_dict(entry["route"])]
            routes.extend(Route.from_dict(r) for r in entry.get("alternative_routes") or [])
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Corrupt route cache entry, discarding: {e}")
            self.store.delete(key)
            return None

        logger.info(f"Route cache hit: {len(routes)} routes.")
        return routes
