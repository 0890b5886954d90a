"""Threaded scheduler that drives a simulated device along a route."""

import itertools
import logging
import random
import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from queue import Empty, Queue

from route_sim.engine.control import ControlCommand, SimulationState, can_transition
from route_sim.engine.noise import noise_for
from route_sim.engine.stepping import Emit, walk_route
from route_sim.geo.distance import Waypoint, route_length_m
from route_sim.settings import SimulationConfig, build_config
from route_sim.sim_logging import log_run_context

logger = logging.getLogger(__name__)

PositionCallback = Callable[[Waypoint], None]
CompletionCallback = Callable[[], None]


@dataclass(frozen=True)
class SimulationStatus:
    """Point-in-time view of a RouteSimulator."""

    state: SimulationState
    segment_index: int
    segment_count: int
    fraction: float
    speed_kmh: float
    actual_speed_kmh: float
    emitted: int
    route_length_m: float


class _Run:
    """Handle of one background run: its thread, control channel and cancel flag."""

    def __init__(self, run_id: str):
        self.run_id = run_id
        self.commands: Queue[ControlCommand] = Queue()
        self.cancelled = threading.Event()
        self.thread: threading.Thread | None = None


class RouteSimulator:
    """Walks a route in a background thread, emitting interpolated positions.

    Each call to start() launches one daemon worker that steps through the
    route segment by segment and hands every position to ``on_position``
    at the configured cadence. Control calls (pause, resume, stop,
    set_speed) are synchronous: they update the state machine under a
    single lock and post a ControlCommand on the run's channel, which the
    worker reads at its wait points. At most one run is active at a time.

    Callbacks are invoked from the worker thread. Wrap them with a
    PositionFeed to consume positions on the owning thread instead.
    """

    def __init__(
        self,
        route: Sequence[tuple[float, float]],
        speed_kmh: float = 45.0,
        update_interval_ms: int = 1000,
        noise_enabled: bool = False,
        *,
        rng: random.Random | None = None,
        name: str = "route-sim",
    ):
        self._config = build_config(
            speed_kmh=speed_kmh,
            update_interval_ms=update_interval_ms,
            noise_enabled=noise_enabled,
        )
        self._route = tuple(Waypoint(float(p[0]), float(p[1])) for p in route)
        self._route_length_m = route_length_m(self._route)
        self._rng = rng
        self._name = name

        self._lock = threading.Lock()
        self._state = SimulationState.IDLE
        self._run: _Run | None = None
        self._last_thread: threading.Thread | None = None
        self._run_ids = itertools.count(1)

        self._segment_index = 0
        self._fraction = 0.0
        self._actual_speed_kmh = 0.0
        self._emitted = 0

    @classmethod
    def from_config(
        cls,
        route: Sequence[tuple[float, float]],
        config: SimulationConfig,
        *,
        rng: random.Random | None = None,
        name: str = "route-sim",
    ) -> "RouteSimulator":
        return cls(
            route,
            speed_kmh=config.speed_kmh,
            update_interval_ms=config.update_interval_ms,
            noise_enabled=config.noise_enabled,
            rng=rng,
            name=name,
        )

    @property
    def route(self) -> tuple[Waypoint, ...]:
        return self._route

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def speed_kmh(self) -> float:
        return self._config.speed_kmh

    @property
    def state(self) -> SimulationState:
        with self._lock:
            return self._state

    def start(
        self,
        on_position: PositionCallback,
        on_complete: CompletionCallback | None = None,
    ) -> None:
        """Start a run, cancelling any run already in progress.

        Returns immediately. A route with fewer than 2 waypoints starts
        nothing and neither callback fires.
        """
        with self._lock:
            self._cancel_locked()

            if len(self._route) < 2:
                self._transition_locked(SimulationState.COMPLETED)
                logger.debug(f"Route has {len(self._route)} waypoint(s), nothing to simulate")
                return

            run = _Run(f"{self._name}-{next(self._run_ids)}")
            run.thread = threading.Thread(
                target=self._drive_loop,
                args=(run, on_position, on_complete),
                name=run.run_id,
                daemon=True,
            )
            self._run = run
            self._last_thread = run.thread
            self._segment_index = 0
            self._fraction = 0.0
            self._actual_speed_kmh = 0.0
            self._emitted = 0
            self._transition_locked(SimulationState.RUNNING)
            run.thread.start()

    def pause(self) -> None:
        """Stop advancing until resume(). No-op unless running."""
        with self._lock:
            if self._run is None or self._state != SimulationState.RUNNING:
                return
            self._transition_locked(SimulationState.PAUSED)
            self._run.commands.put(ControlCommand.PAUSE)
            logger.info(f"Route simulation paused: {self._run.run_id}")

    def resume(self) -> None:
        """Continue a paused run. No-op unless paused."""
        with self._lock:
            if self._run is None or self._state != SimulationState.PAUSED:
                return
            self._transition_locked(SimulationState.RUNNING)
            self._run.commands.put(ControlCommand.RESUME)
            logger.info(f"Route simulation resumed: {self._run.run_id}")

    def stop(self) -> None:
        """Cancel the current run, if any. Does not wait for the worker; see join()."""
        with self._lock:
            run = self._run
            self._cancel_locked()
        if run is not None:
            logger.info(f"Route simulation stopped: {run.run_id}")

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the most recent worker thread to exit.

        Returns True if no worker is alive afterwards. Calling it from a
        callback (the worker itself) returns False immediately.
        """
        thread = self._last_thread
        if thread is None:
            return True
        if thread is threading.current_thread():
            return False
        thread.join(timeout)
        return not thread.is_alive()

    def is_running(self) -> bool:
        """True iff a run is active and not paused."""
        with self._lock:
            return self._run is not None and self._state == SimulationState.RUNNING

    def set_speed(self, speed_kmh: float) -> None:
        """Change the target speed; the worker picks it up on its next tick."""
        config = build_config(
            speed_kmh=speed_kmh,
            update_interval_ms=self._config.update_interval_ms,
            noise_enabled=self._config.noise_enabled,
        )
        with self._lock:
            self._config = config
        logger.debug(f"Route simulation speed set to {speed_kmh} km/h")

    def status(self) -> SimulationStatus:
        with self._lock:
            return SimulationStatus(
                state=self._state,
                segment_index=self._segment_index,
                segment_count=max(len(self._route) - 1, 0),
                fraction=self._fraction,
                speed_kmh=self._config.speed_kmh,
                actual_speed_kmh=self._actual_speed_kmh,
                emitted=self._emitted,
                route_length_m=self._route_length_m,
            )

    def _transition_locked(self, new_state: SimulationState) -> None:
        if not can_transition(self._state, new_state):
            raise ValueError(
                f"Invalid state transition from {self._state.value} to {new_state.value}"
            )
        self._state = new_state

    def _cancel_locked(self) -> None:
        run = self._run
        if run is None:
            return
        run.cancelled.set()
        run.commands.put(ControlCommand.STOP)
        self._run = None
        if self._state in (SimulationState.RUNNING, SimulationState.PAUSED):
            self._transition_locked(SimulationState.CANCELLED)

    def _drive_loop(
        self,
        run: _Run,
        on_position: PositionCallback,
        on_complete: CompletionCallback | None,
    ) -> None:
        """Main drive loop running in the background thread."""
        with log_run_context(run.run_id):
            config = self._config
            logger.info(
                f"Route simulation starting: waypoints={len(self._route)}, "
                f"length={self._route_length_m:.0f}m, speed={config.speed_kmh}km/h, "
                f"interval={config.update_interval_ms}ms, noise={config.noise_enabled}"
            )
            steps = walk_route(
                self._route,
                config.interval_seconds,
                noise_for(config.noise_enabled, self._rng),
                lambda: self._config.speed_kmh,
            )

            try:
                for step in steps:
                    if not isinstance(step, Emit):
                        if not self._wait(run, step.seconds):
                            return
                        continue
                    if not self._wait(run, 0.0):
                        return
                    if not self._record(run, step):
                        return
                    try:
                        on_position(step.position)
                    except Exception:
                        logger.exception("Route simulation position callback failed, cancelling run")
                        self._abort(run)
                        return

                if not self._wait(run, 0.0) or not self._finish(run):
                    return
            except Exception:
                logger.exception("Route simulation failed, cancelling run")
                self._abort(run)
                return

            logger.info(f"Route simulation completed: {run.run_id}")
            if on_complete is not None:
                try:
                    on_complete()
                except Exception as e:
                    logger.error(f"Route completion callback error: {e}")

    def _wait(self, run: _Run, seconds: float) -> bool:
        """Let ``seconds`` pass while serving the control channel.

        Pausing blocks on the channel until RESUME or STOP arrives; the time
        spent paused does not count against the wait. With ``seconds=0`` it
        only drains pending commands. Returns False once the run is cancelled.
        """
        deadline = time.monotonic() + seconds
        paused_at: float | None = None
        while True:
            if run.cancelled.is_set():
                return False
            try:
                if paused_at is not None:
                    command = run.commands.get()
                else:
                    remaining = deadline - time.monotonic()
                    if remaining > 0:
                        command = run.commands.get(timeout=remaining)
                    else:
                        command = run.commands.get_nowait()
            except Empty:
                return not run.cancelled.is_set()

            if command is ControlCommand.STOP:
                return False
            if command is ControlCommand.PAUSE and paused_at is None:
                paused_at = time.monotonic()
            elif command is ControlCommand.RESUME and paused_at is not None:
                deadline += time.monotonic() - paused_at
                paused_at = None

    def _record(self, run: _Run, step: Emit) -> bool:
        with self._lock:
            if self._run is not run:
                return False
            self._segment_index = step.segment_index
            self._fraction = step.fraction
            self._actual_speed_kmh = step.speed_kmh
            self._emitted += 1
            return True

    def _abort(self, run: _Run) -> None:
        with self._lock:
            if self._run is run:
                self._cancel_locked()

    def _finish(self, run: _Run) -> bool:
        with self._lock:
            if run.cancelled.is_set() or self._run is not run:
                return False
            self._transition_locked(SimulationState.COMPLETED)
            self._run = None
            return True
