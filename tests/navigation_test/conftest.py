from typing import List, Optional

import pytest

from navigation.guidance.models import Coord, Metric, Route, RouteStep
from navigation.guidance import polyline_codec
from speech.tts import SpeechSink


def equator_path(points: int, step_deg: float = 0.001, lat: float = 0.0) -> List[Coord]:
    """Straight west→east path; each step is ~111 m at step_deg=0.001."""
    return [Coord(lat, round(i * step_deg, 6)) for i in range(points)]


def make_route(
    path: List[Coord],
    with_steps: bool = True,
    distance_text: Optional[str] = "1.2 mi",
    duration_text: Optional[str] = "4 min",
) -> Route:
    encoded = polyline_codec.encode(path)
    steps = ()
    if with_steps:
        steps = (RouteStep(
            distance=Metric("1.2 mi", 1900),
            duration=Metric("4 min", 240),
            instruction="Head east",
            polyline=encoded,
        ),)
    return Route(
        distance=Metric(distance_text, 1900) if distance_text is not None else None,
        duration=Metric(duration_text, 240) if duration_text is not None else None,
        steps=steps,
        polyline=encoded,
        coordinates=tuple(path),
    )


class FakeSpeaker(SpeechSink):
    def __init__(self):
        self.spoken: List[str] = []

    def speak(self, text: str) -> None:
        self.spoken.append(text)


@pytest.fixture
def short_path():
    # ~1.1 km, below the frequent-update distance
    return equator_path(11)


@pytest.fixture
def route(short_path):
    return make_route(short_path)


@pytest.fixture
def speaker():
    return FakeSpeaker()
