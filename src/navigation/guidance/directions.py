# directions.py
# Directions collaborator: fetches route candidates and turns the provider's
# JSON into Route objects. First returned route is the primary.

import logging
import re
from typing import Any, Dict, List, Optional, Sequence

import requests

from .models import Coord, Metric, Route, RouteStep
from .nav_config import NavConfig
from . import polyline_codec

logger = logging.getLogger(__name__)


_TAG_RE = re.compile(r"<[^>]*>")

METERS_TO_MILES = 0.000621371


class NavigationError(Exception):
    """
    Failure talking to the directions provider.

    Args:
        message: Human-readable description.
        code:    CONFIGURATION_ERROR | NETWORK_ERROR | NO_ROUTES | API_ERROR | UNKNOWN_ERROR
        details: Optional extra context.
    """

    def __init__(self, message: str, code: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


# ---------------------------------------------------------------------------
# Display formatting
# ---------------------------------------------------------------------------

def format_distance(meters: float) -> str:
    miles = meters * METERS_TO_MILES
    if miles < 0.1:
        return f"{round(miles * 5280)} ft"
    return f"{miles:.1f} mi"


def format_duration(seconds: float) -> str:
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    if hours > 0:
        return f"{hours} hr {minutes} min"
    return f"{minutes} min"


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------

def _join_legs(step_polylines: Sequence[str]) -> List[Coord]:
    """Decode each step polyline and chain them, dropping repeated joints."""
    coords: List[Coord] = []
    for encoded in step_polylines:
        for c in polyline_codec.decode(encoded):
            if coords and coords[-1] == c:
                continue
            coords.append(c)
    return coords


def _parse_route(raw: Dict[str, Any]) -> Route:
    legs = raw.get("legs") or []
    total_distance = sum(leg["distance"]["value"] for leg in legs)
    total_duration = sum(leg["duration"]["value"] for leg in legs)

    steps = []
    legs_coordinates = []
    for leg in legs:
        leg_steps = leg.get("steps") or []
        for s in leg_steps:
            steps.append(RouteStep(
                distance=Metric.from_dict(s["distance"]),
                duration=Metric.from_dict(s["duration"]),
                instruction=_TAG_RE.sub("", s.get("html_instructions", "")),
                polyline=s["polyline"]["points"],
                maneuver=s.get("maneuver"),
            ))
        legs_coordinates.append(tuple(_join_legs([s["polyline"]["points"] for s in leg_steps])))

    overview = (raw.get("overview_polyline") or {}).get("points", "")
    return Route(
        distance=Metric(format_distance(total_distance), total_distance),
        duration=Metric(format_duration(total_duration), total_duration),
        steps=tuple(steps),
        polyline=overview,
        coordinates=tuple(polyline_codec.decode(overview)),
        legs_coordinates=tuple(legs_coordinates),
        warnings=tuple(raw.get("warnings") or ()),
    )


def parse_directions_response(data: Dict[str, Any]) -> List[Route]:
    """
    Convert a directions JSON response into Route objects.

    All legs of a route are merged into one Route; per-leg geometry is kept
    in legs_coordinates.

    Raises:
        NavigationError: status is not OK or no routes were returned.
    """
    status = data.get("status")
    if status == "ZERO_RESULTS":
        raise NavigationError("No routes found between the selected locations", "NO_ROUTES")
    if status != "OK":
        raise NavigationError(
            data.get("error_message") or f"Directions API error: {status}",
            "API_ERROR",
            {"status": status},
        )

    raw_routes = data.get("routes") or []
    if not raw_routes:
        raise NavigationError("No routes found", "NO_ROUTES")

    try:
        return [_parse_route(r) for r in raw_routes]
    except (KeyError, TypeError) as e:
        raise NavigationError("Malformed directions response", "API_ERROR", {"cause": repr(e)}) from e


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------

class DirectionsClient:
    """
    Thin HTTP client for the directions provider.

    Intermediate waypoints are passed as pass-through ("via:") stops in the
    order given; no reordering is requested from the provider.

    Args:
        config:  NavConfig with api_key, directions_url and request_timeout_s.
        session: Optional requests.Session (tests inject a fake one).
    """

    def __init__(self, config: Optional[NavConfig] = None,
                 session: Optional[requests.Session] = None) -> None:
        self.config = config or NavConfig()
        self.session = session or requests.Session()

    def build_params(self, origin: Coord, waypoints: Sequence[Coord],
                     alternatives: bool = True) -> Dict[str, str]:
        destination = waypoints[-1]
        params = {
            "origin": f"{origin.lat},{origin.lon}",
            "destination": f"{destination.lat},{destination.lon}",
            "alternatives": "true" if alternatives else "false",
            "mode": "driving",
            "departure_time": "now",
            "traffic_model": "best_guess",
            "key": self.config.api_key or "",
        }
        via = "|".join(f"via:{w.lat},{w.lon}" for w in waypoints[:-1])
        if via:
            params["waypoints"] = via
        return params

    def get_directions(self, origin: Coord, waypoints: Sequence[Coord],
                       alternatives: bool = True) -> List[Route]:
        """
        Fetch route candidates from origin through waypoints.

        Args:
            origin:       Current position.
            waypoints:    Ordered stops; the last one is the destination.
            alternatives: Ask the provider for alternate routes.

        Returns:
            List of Route, primary first. Empty when waypoints is empty.

        Raises:
            NavigationError
        """
        if not self.config.api_key:
            raise NavigationError("Directions API key is missing", "CONFIGURATION_ERROR")
        if not waypoints:
            return []

        params = self.build_params(origin, waypoints, alternatives)
        logger.info(f"Requesting directions {origin} → {waypoints[-1]} ({len(waypoints) - 1} stops)")
        try:
            r = self.session.get(
                self.config.directions_url, params=params, timeout=self.config.request_timeout_s
            )
            r.raise_for_status()
            data = r.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise NavigationError("Failed to fetch directions", "NETWORK_ERROR", {"status": status}) from e
        except requests.RequestException as e:
            raise NavigationError("Failed to fetch directions", "NETWORK_ERROR", {"cause": repr(e)}) from e
        except ValueError as e:
            raise NavigationError("Failed to get directions", "UNKNOWN_ERROR", {"cause": repr(e)}) from e

        routes = parse_directions_response(data)
        logger.info(f"Directions returned {len(routes)} routes.")
        return routes
