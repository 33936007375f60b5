# models.py
# Shared data structures and enums used across all modules.

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


# ---------------------------------------------------------------------------
# Coordinate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Coord:
    """Immutable geographic coordinate."""
    lat: float
    lon: float

    def is_valid(self) -> bool:
        return -90.0 <= self.lat <= 90.0 and -180.0 <= self.lon <= 180.0

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lon": self.lon}

    @staticmethod
    def from_dict(d: dict) -> "Coord":
        return Coord(d["lat"], d["lon"])


# ---------------------------------------------------------------------------
# Route
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Metric:
    """A provider value together with its display text."""
    text: str
    value: float                 # metres or seconds

    def to_dict(self) -> dict:
        return {"text": self.text, "value": self.value}

    @staticmethod
    def from_dict(d: Optional[dict]) -> Optional["Metric"]:
        if d is None:
            return None
        return Metric(d.get("text", ""), d.get("value", 0))


@dataclass(frozen=True)
class RouteStep:
    """A single navigation instruction in a route."""
    distance: Metric
    duration: Metric
    instruction: str
    polyline: str
    maneuver: Optional[str] = None     # "turn-left" | "turn-right" | "merge" ...

    def to_dict(self) -> dict:
        return {
            "distance": self.distance.to_dict(),
            "duration": self.duration.to_dict(),
            "instruction": self.instruction,
            "polyline": self.polyline,
            "maneuver": self.maneuver,
        }

    @staticmethod
    def from_dict(d: dict) -> "RouteStep":
        return RouteStep(
            distance=Metric.from_dict(d["distance"]),
            duration=Metric.from_dict(d["duration"]),
            instruction=d["instruction"],
            polyline=d["polyline"],
            maneuver=d.get("maneuver"),
        )


@dataclass(frozen=True)
class Route:
    """
    One route candidate produced by the directions collaborator.

    Read-only once created. `coordinates` is the decoded overview polyline.
    """
    distance: Optional[Metric]
    duration: Optional[Metric]
    steps: Tuple[RouteStep, ...]
    polyline: str
    coordinates: Tuple[Coord, ...]
    legs_coordinates: Optional[Tuple[Tuple[Coord, ...], ...]] = None
    warnings: Tuple[str, ...] = ()

    @property
    def distance_meters(self) -> float:
        return self.distance.value if self.distance else 0.0

    @property
    def duration_seconds(self) -> float:
        return self.duration.value if self.duration else 0.0

    @property
    def has_geometry(self) -> bool:
        return len(self.coordinates) > 0 and len(self.steps) > 0

    @property
    def has_metrics(self) -> bool:
        return bool(self.distance and self.distance.text) and bool(
            self.duration and self.duration.text
        )

    def to_dict(self) -> dict:
        return {
            "distance": self.distance.to_dict() if self.distance else None,
            "duration": self.duration.to_dict() if self.duration else None,
            "steps": [s.to_dict() for s in self.steps],
            "polyline": self.polyline,
            "coordinates": [c.to_dict() for c in self.coordinates],
            "legs_coordinates": (
                [[c.to_dict() for c in leg] for leg in self.legs_coordinates]
                if self.legs_coordinates is not None else None
            ),
            "warnings": list(self.warnings),
        }

    @staticmethod
    def from_dict(d: dict) -> "Route":
        legs = d.get("legs_coordinates")
        return Route(
            distance=Metric.from_dict(d.get("distance")),
            duration=Metric.from_dict(d.get("duration")),
            steps=tuple(RouteStep.from_dict(s) for s in d["steps"]),
            polyline=d["polyline"],
            coordinates=tuple(Coord.from_dict(c) for c in d["coordinates"]),
            legs_coordinates=(
                tuple(tuple(Coord.from_dict(c) for c in leg) for leg in legs)
                if legs is not None else None
            ),
            warnings=tuple(d.get("warnings") or ()),
        )


# ---------------------------------------------------------------------------
# Tracking / ETA
# ---------------------------------------------------------------------------

class UpdateFrequency(Enum):
    NORMAL   = "normal"
    FREQUENT = "frequent"


@dataclass(frozen=True)
class RouteStatus:
    """Returned by RouteTracker.status() for every position."""
    remaining_distance_m: float
    is_off_route: bool
    distance_to_route_m: float
    closest_index: int


@dataclass(frozen=True)
class EtaSnapshot:
    """One immutable arrival estimate. Replaced wholesale every cycle."""
    timestamp: float                          # estimated arrival, epoch seconds
    text: str
    remaining_seconds: float
    is_off_route: bool
    distance_to_route_m: float
    computed_at: float                        # wall clock of the producing cycle
    traffic_delay_seconds: Optional[float] = None
    last_announcement_at: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "text": self.text,
            "remaining_seconds": round(self.remaining_seconds, 1),
            "traffic_delay_seconds": self.traffic_delay_seconds,
            "is_off_route": self.is_off_route,
            "distance_to_route_m": round(self.distance_to_route_m, 1),
            "computed_at": self.computed_at,
            "last_announcement_at": self.last_announcement_at,
        }


# ---------------------------------------------------------------------------
# Location
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LocationFix:
    """A position report pushed by the location collaborator."""
    lat: float
    lon: float
    accuracy_m: float = 0.0
    speed_mps: Optional[float] = None
    heading_deg: Optional[float] = None
    altitude_m: Optional[float] = None
    timestamp: float = 0.0

    @property
    def coord(self) -> Coord:
        return Coord(self.lat, self.lon)


@dataclass(frozen=True)
class Waypoint:
    """An ordered stop chosen by the user; the last one is the destination."""
    location: Coord
    name: str
    order: int

    def to_dict(self) -> dict:
        return {"location": self.location.to_dict(), "name": self.name, "order": self.order}

    @staticmethod
    def from_dict(d: dict) -> "Waypoint":
        return Waypoint(Coord.from_dict(d["location"]), d["name"], d["order"])
