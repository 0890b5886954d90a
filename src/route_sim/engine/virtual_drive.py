"""SimPy process that walks a route in simulated time.

Runs the same steps as RouteSimulator but turns every wait into a SimPy
timeout, so a drive of several hours completes instantly and its timing is
exact. Used for batch generation of position traces and for tests.
"""

import random
from collections.abc import Callable, Generator, Sequence

import simpy

from route_sim.engine.noise import noise_for
from route_sim.engine.stepping import Emit, walk_route
from route_sim.geo.distance import Waypoint
from route_sim.settings import SimulationConfig


def simulate_drive_along_route(
    env: simpy.Environment,
    route: Sequence[tuple[float, float]],
    config: SimulationConfig,
    on_position: Callable[[Waypoint], None],
    on_complete: Callable[[], None] | None = None,
    rng: random.Random | None = None,
) -> Generator[simpy.Event]:
    """Drive along a route, emitting a position at each update interval.

    Args:
        env: SimPy environment for timeouts
        route: Ordered (lat, lon) waypoints; fewer than 2 emits nothing
        config: Speed, interval and noise settings for the drive
        on_position: Receives each emitted position at env.now
        on_complete: Called once after the final waypoint is emitted
        rng: Random generator for the noise strategy

    Yields:
        SimPy timeout events for each update interval
    """
    if len(route) < 2:
        return

    steps = walk_route(
        route,
        config.interval_seconds,
        noise_for(config.noise_enabled, rng),
        lambda: config.speed_kmh,
    )
    for step in steps:
        if isinstance(step, Emit):
            on_position(step.position)
        else:
            yield env.timeout(step.seconds)

    if on_complete is not None:
        on_complete()


def collect_positions(
    route: Sequence[tuple[float, float]],
    config: SimulationConfig,
    rng: random.Random | None = None,
) -> list[tuple[float, Waypoint]]:
    """Run a drive to completion and return (simulated seconds, position) pairs."""
    env = simpy.Environment()
    trace: list[tuple[float, Waypoint]] = []
    env.process(
        simulate_drive_along_route(
            env,
            route,
            config,
            on_position=lambda position: trace.append((env.now, position)),
            rng=rng,
        )
    )
    env.run()
    return trace
