"""Segment-by-segment walk of a route, expressed as a stream of steps.

walk_route() holds the whole motion model but performs no timing itself: it
yields Emit steps (a position to hand to the sink) and Wait steps (how long
to let pass before the next one). The threaded RouteSimulator executes the
waits with its control channel, the SimPy drive executes them as timeouts.
"""

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass

from route_sim.engine.noise import MotionNoise
from route_sim.geo.distance import Waypoint, haversine_distance_m, interpolate_position


@dataclass(frozen=True)
class Emit:
    """A position to deliver to the sink."""

    position: Waypoint
    segment_index: int
    fraction: float
    speed_kmh: float
    arrival: bool = False


@dataclass(frozen=True)
class Wait:
    """Time to let pass before the next step."""

    seconds: float


Step = Emit | Wait


def kmh_to_ms(speed_kmh: float) -> float:
    return speed_kmh * 1000.0 / 3600.0


def walk_route(
    route: Sequence[tuple[float, float]],
    interval_s: float,
    noise: MotionNoise,
    speed_kmh: Callable[[], float],
) -> Iterator[Step]:
    """Yield the emissions and waits of one run along the route.

    Args:
        route: Ordered waypoints; fewer than 2 yields nothing
        interval_s: Nominal time between emissions in seconds
        noise: Strategy for speed factor, drift, arrival jitter and tick delay
        speed_kmh: Read at every tick so speed changes apply to the next step

    Yields:
        Emit and Wait steps in traversal order. Each non-degenerate segment
        ends with an Emit flagged as arrival carrying the segment endpoint.
    """
    for index in range(len(route) - 1):
        start = Waypoint(*route[index])
        end = Waypoint(*route[index + 1])
        segment_m = haversine_distance_m(start, end)
        if segment_m <= 0.0:
            continue

        # Drawn once per segment; the control speed is re-read every tick
        factor = noise.speed_factor()
        traveled = 0.0
        actual_kmh = speed_kmh() * factor
        while traveled < segment_m:
            actual_kmh = speed_kmh() * factor
            fraction = min(max(traveled / segment_m, 0.0), 1.0)
            position = interpolate_position(start, end, fraction)
            yield Emit(noise.drift(position), index, fraction, actual_kmh)

            traveled += kmh_to_ms(actual_kmh) * interval_s
            yield Wait(noise.tick_delay(interval_s))

        yield Emit(noise.arrival(end), index, 1.0, actual_kmh, arrival=True)
