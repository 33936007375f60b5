# main.py
# Entry point — simulates a GPS loop feeding fixes into NavigationSession.
# In production, replace the test_fixes loop with your real GPS source and
# a real timer calling nav.tick().
#
# With GOOGLE_MAPS_API_KEY set the routes come from the directions provider,
# otherwise a built-in demo route is used.

import logging
import time

from speech.tts import Pyttsx3Speaker

from .models import Coord, LocationFix, Metric, Route, RouteStep, Waypoint
from .nav_config import NavConfig
from .navigator import NavigationSession
from .nav_logger import NavLogger
from .location_source import LocationSource
from .route_cache import RouteCache
from .directions import DirectionsClient, NavigationError, format_distance, format_duration
from .geo_utils import path_length
from . import polyline_codec

# ------------------------------------------------------------------
# Logging setup — configure once here, all modules inherit
# ------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)

# ------------------------------------------------------------------
# Config — tweak thresholds or paths here, not inside the modules
# ------------------------------------------------------------------
config = NavConfig.from_env(log_dir="logs", cache_dir="logs/cache")

# ------------------------------------------------------------------
# Demo route (Market St → Embarcadero, San Francisco)
# ------------------------------------------------------------------
DEMO_PATH = [
    Coord(37.77490, -122.41940),
    Coord(37.77720, -122.41650),
    Coord(37.77950, -122.41360),
    Coord(37.78180, -122.41070),
    Coord(37.78410, -122.40780),
    Coord(37.78640, -122.40490),
    Coord(37.78870, -122.40200),
    Coord(37.79100, -122.39910),
    Coord(37.79330, -122.39620),
]

DESTINATION = Waypoint(DEMO_PATH[-1], "Ferry Building", 0)

test_fixes = [
    LocationFix(37.77490, -122.41940, 5.0, speed_mps=12.0, timestamp=0.0),
    LocationFix(37.77950, -122.41360, 5.0, speed_mps=12.0, timestamp=35.0),
    LocationFix(37.78410, -122.40780, 5.0, speed_mps=9.0, timestamp=70.0),
    LocationFix(37.78700, -122.40900, 8.0, speed_mps=9.0, timestamp=105.0),   # drifting off
    LocationFix(37.78870, -122.40200, 5.0, speed_mps=11.0, timestamp=140.0),
    LocationFix(37.79330, -122.39620, 5.0, speed_mps=2.0, timestamp=175.0),
]


def demo_routes():
    encoded = polyline_codec.encode(DEMO_PATH)
    coords = tuple(polyline_codec.decode(encoded))
    meters = path_length(coords)
    seconds = meters / 11.0
    step = RouteStep(
        distance=Metric(format_distance(meters), meters),
        duration=Metric(format_duration(seconds), seconds),
        instruction="Head northeast on Market St",
        polyline=encoded,
    )
    return [Route(
        distance=Metric(format_distance(meters), meters),
        duration=Metric(format_duration(seconds), seconds),
        steps=(step,),
        polyline=encoded,
        coordinates=coords,
        legs_coordinates=(coords,),
    )]


def fetch_routes(origin: Coord):
    now = time.time()
    cache = RouteCache(config=config)
    cached = cache.load([DESTINATION], now)
    if cached:
        return cached
    if not config.api_key:
        return demo_routes()
    try:
        routes = DirectionsClient(config).get_directions(origin, [DESTINATION.location])
    except NavigationError as e:
        logging.getLogger(__name__).error(f"[Main] Directions failed ({e.code}): {e}")
        return demo_routes()
    cache.save(routes, [DESTINATION], now)
    return routes


def main() -> None:
    source = LocationSource(config)
    speaker = Pyttsx3Speaker()
    nav = NavigationSession(
        config,
        speech=speaker,
        nav_logger=NavLogger(config),
        location_source=source,
        clock=lambda: current_time,
    )

    current_time = test_fixes[0].timestamp
    routes = fetch_routes(test_fixes[0].coord)
    success, msg = nav.start(routes)
    print(f"[Main] {msg}")
    if not success:
        return

    print("\n--- GPS Loop Active ---")
    for fix in test_fixes:
        current_time = fix.timestamp
        source.push(fix)
        nav.tick(current_time)
        snapshot = nav.snapshot
        if snapshot and snapshot.computed_at == current_time:
            flag = "  ⚠ off route" if snapshot.is_off_route else ""
            print(f"  GPS ({fix.lat:.5f}, {fix.lon:.5f}) → {snapshot.text}{flag}")

    nav.stop()
    speaker.close()
    print("\n--- Session complete ---")
    print(f"    Log files written to: {config.log_dir}/")


if __name__ == "__main__":
    main()
