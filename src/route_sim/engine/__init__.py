"""Route motion simulation engine."""

from route_sim.engine.control import ControlCommand, SimulationState
from route_sim.engine.noise import MotionNoise, NoNoise, RealisticNoise, noise_for
from route_sim.engine.position_feed import CompletionEvent, PositionEvent, PositionFeed
from route_sim.engine.route_simulator import RouteSimulator, SimulationStatus
from route_sim.engine.stepping import Emit, Wait, walk_route
from route_sim.engine.virtual_drive import collect_positions, simulate_drive_along_route

__all__ = [
    "RouteSimulator",
    "SimulationStatus",
    "SimulationState",
    "ControlCommand",
    # Noise strategies
    "MotionNoise",
    "NoNoise",
    "RealisticNoise",
    "noise_for",
    # Stepping
    "Emit",
    "Wait",
    "walk_route",
    # Sinks and virtual time
    "PositionFeed",
    "PositionEvent",
    "CompletionEvent",
    "simulate_drive_along_route",
    "collect_positions",
]
