import random
import threading

import pytest

from route_sim.geo.distance import Waypoint


class RecordingSink:
    """Collects positions and completions delivered by a simulator worker."""

    def __init__(self) -> None:
        self.positions: list[Waypoint] = []
        self.completions = 0
        self.completed = threading.Event()
        self._lock = threading.Lock()

    def on_position(self, position: Waypoint) -> None:
        with self._lock:
            self.positions.append(position)

    def on_complete(self) -> None:
        with self._lock:
            self.completions += 1
        self.completed.set()

    def count(self) -> int:
        with self._lock:
            return len(self.positions)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def sink_factory():
    """Factory for independent sinks when a test needs more than one run."""
    return RecordingSink


@pytest.fixture
def rng() -> random.Random:
    """Seeded random generator for deterministic noise."""
    return random.Random(42)


@pytest.fixture
def equator_route() -> list[Waypoint]:
    """One degree of longitude along the equator (~111 km)."""
    return [Waypoint(0.0, 0.0), Waypoint(0.0, 1.0)]


@pytest.fixture
def short_route() -> list[Waypoint]:
    """Three waypoints a few meters apart, walked in a few hundred milliseconds.

    At 100 km/h with a 20 ms interval each tick covers ~0.56 m, so the two
    ~5.6 m segments take about ten ticks each.
    """
    return [Waypoint(0.0, 0.0), Waypoint(0.0, 0.00005), Waypoint(0.00005, 0.00005)]


@pytest.fixture
def long_route() -> list[Waypoint]:
    """A route that takes many seconds at test speeds, for stop/restart tests."""
    return [Waypoint(0.0, 0.0), Waypoint(0.0, 0.01)]
