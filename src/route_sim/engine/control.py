"""Simulation states and the control messages exchanged with a run's worker."""

from enum import Enum


class SimulationState(str, Enum):
    """Lifecycle states of a RouteSimulator."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


VALID_STATE_TRANSITIONS = {
    SimulationState.IDLE: {SimulationState.RUNNING, SimulationState.COMPLETED},
    SimulationState.RUNNING: {
        SimulationState.PAUSED,
        SimulationState.COMPLETED,
        SimulationState.CANCELLED,
    },
    SimulationState.PAUSED: {
        SimulationState.RUNNING,
        SimulationState.COMPLETED,
        SimulationState.CANCELLED,
    },
    SimulationState.COMPLETED: {SimulationState.RUNNING, SimulationState.COMPLETED},
    SimulationState.CANCELLED: {SimulationState.RUNNING, SimulationState.COMPLETED},
}


def can_transition(current: SimulationState, new: SimulationState) -> bool:
    return new in VALID_STATE_TRANSITIONS.get(current, set())


class ControlCommand(str, Enum):
    """Messages posted on a run's control channel."""

    PAUSE = "pause"
    RESUME = "resume"
    STOP = "stop"
