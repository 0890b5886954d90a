"""Noise strategies that make a simulated drive look like real GPS movement.

The scheduler never branches on whether noise is enabled; it asks its
strategy for the per-segment speed factor, the drift applied to each
interpolated fix, the jitter of the arrival fix and the delay of each tick.
"""

import math
import random
from typing import Protocol

from route_sim.geo.distance import Waypoint, offset_by_meters


class MotionNoise(Protocol):
    def speed_factor(self) -> float: ...

    def drift(self, position: Waypoint) -> Waypoint: ...

    def arrival(self, position: Waypoint) -> Waypoint: ...

    def tick_delay(self, interval_s: float) -> float: ...


class NoNoise:
    """Identity strategy: exact interpolation and a fixed cadence."""

    def speed_factor(self) -> float:
        return 1.0

    def drift(self, position: Waypoint) -> Waypoint:
        return position

    def arrival(self, position: Waypoint) -> Waypoint:
        return position

    def tick_delay(self, interval_s: float) -> float:
        return interval_s


class RealisticNoise:
    """Bounded random perturbations of speed, position and timing.

    Args:
        rng: Random generator; pass a seeded random.Random for reproducible runs
        min_drift_m: Lower bound of the radial drift added to each fix
        max_drift_m: Upper bound of the radial drift added to each fix
        arrival_jitter_m: Per-axis bound of the jitter added to each waypoint arrival
        speed_variation: Speed factor is drawn uniformly from 1 ± this value, once per segment
        pause_probability: Chance that a tick is stretched by a traffic pause
        pause_extra_s: (min, max) extra seconds added by a traffic pause
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        min_drift_m: float = 2.0,
        max_drift_m: float = 5.0,
        arrival_jitter_m: float = 3.0,
        speed_variation: float = 0.1,
        pause_probability: float = 0.05,
        pause_extra_s: tuple[float, float] = (0.5, 2.0),
    ):
        self._rng = rng or random.Random()
        self.min_drift_m = min_drift_m
        self.max_drift_m = max_drift_m
        self.arrival_jitter_m = arrival_jitter_m
        self.speed_variation = speed_variation
        self.pause_probability = pause_probability
        self.pause_extra_s = pause_extra_s

    def speed_factor(self) -> float:
        return self._rng.uniform(1.0 - self.speed_variation, 1.0 + self.speed_variation)

    def drift(self, position: Waypoint) -> Waypoint:
        distance = self._rng.uniform(self.min_drift_m, self.max_drift_m)
        bearing = self._rng.uniform(0.0, 2 * math.pi)
        return offset_by_meters(
            position.lat,
            position.lon,
            north_m=distance * math.cos(bearing),
            east_m=distance * math.sin(bearing),
        )

    def arrival(self, position: Waypoint) -> Waypoint:
        return offset_by_meters(
            position.lat,
            position.lon,
            north_m=self._rng.uniform(-self.arrival_jitter_m, self.arrival_jitter_m),
            east_m=self._rng.uniform(-self.arrival_jitter_m, self.arrival_jitter_m),
        )

    def tick_delay(self, interval_s: float) -> float:
        if self._rng.random() < self.pause_probability:
            return interval_s + self._rng.uniform(*self.pause_extra_s)
        return interval_s


def noise_for(enabled: bool, rng: random.Random | None = None) -> MotionNoise:
    """Select the noise strategy for a run."""
    if enabled:
        return RealisticNoise(rng=rng)
    return NoNoise()
