"""
Route Simulator - Command-line entry point

Loads a waypoint route from a JSON file and drives a simulated device along
it, writing each emitted position to stdout as one JSON object per line.
The simulator runs in a background thread while the main thread drains its
PositionFeed; with --virtual the drive runs in SimPy time and completes
immediately.
"""

import argparse
import json
import logging
import os
import random
import sys
import time
from typing import TextIO

from route_sim.core.exceptions import SimulationError
from route_sim.engine import (
    CompletionEvent,
    PositionEvent,
    PositionFeed,
    RouteSimulator,
    SimulationState,
    collect_positions,
)
from route_sim.geo.distance import Waypoint
from route_sim.geo.route_loader import load_route
from route_sim.settings import SimulationConfig, build_config, get_settings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID_INPUT = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="route-sim",
        description="Simulate movement along a route and print positions as JSON lines",
    )
    parser.add_argument("route_file", help="JSON list of [lat, lon] pairs or GeoJSON LineString")
    parser.add_argument("--speed", type=float, default=None, help="Target speed in km/h")
    parser.add_argument(
        "--interval-ms", type=int, default=None, help="Milliseconds between position updates"
    )
    parser.add_argument(
        "--noise",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Add realistic speed, drift and timing noise",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the noise generator")
    parser.add_argument(
        "--virtual",
        action="store_true",
        help="Run in simulated time and print the whole trace immediately",
    )
    return parser


def write_position(output: TextIO, position: Waypoint, t: float) -> None:
    output.write(json.dumps({"lat": position.lat, "lon": position.lon, "t": round(t, 3)}) + "\n")
    output.flush()


def run_virtual(
    route: list[Waypoint], config: SimulationConfig, rng: random.Random | None, output: TextIO
) -> None:
    for t, position in collect_positions(route, config, rng=rng):
        write_position(output, position, t)


def run_realtime(
    route: list[Waypoint], config: SimulationConfig, rng: random.Random | None, output: TextIO
) -> None:
    simulator = RouteSimulator.from_config(route, config, rng=rng)
    feed = PositionFeed()
    started = time.monotonic()
    simulator.start(feed.on_position, feed.on_complete)
    try:
        while True:
            event = feed.get(timeout=config.interval_seconds)
            if isinstance(event, PositionEvent):
                write_position(output, event.position, event.timestamp - started)
            elif isinstance(event, CompletionEvent):
                return
            elif simulator.state not in (SimulationState.RUNNING, SimulationState.PAUSED):
                # Nothing was started, or the worker ended without completing
                return
    finally:
        simulator.stop()


def main(argv: list[str] | None = None, output: TextIO | None = None) -> int:
    """Main entry point - returns the process exit code."""
    from route_sim.sim_logging import setup_logging

    args = build_parser().parse_args(argv)
    output = output or sys.stdout

    try:
        settings = get_settings()
        setup_logging(
            level=settings.log_level,
            json_output=settings.log_format == "json",
            environment=os.environ.get("ENVIRONMENT", "development"),
        )
        config = build_config(
            speed_kmh=args.speed if args.speed is not None else settings.speed_kmh,
            update_interval_ms=(
                args.interval_ms if args.interval_ms is not None else settings.update_interval_ms
            ),
            noise_enabled=args.noise if args.noise is not None else settings.noise_enabled,
        )
        route = load_route(args.route_file)
    except (SimulationError, OSError) as e:
        logger.error(f"Cannot start simulation: {e}")
        return EXIT_INVALID_INPUT

    seed = args.seed if args.seed is not None else settings.seed
    rng = random.Random(seed) if seed is not None else None

    try:
        if args.virtual:
            run_virtual(route, config, rng, output)
        else:
            run_realtime(route, config, rng, output)
    except KeyboardInterrupt:
        logger.info("Interrupted, simulation stopped")
        return EXIT_INTERRUPTED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
