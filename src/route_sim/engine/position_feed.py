"""Queue-backed sink that hands simulator output to the owning thread."""

import threading
import time
from collections.abc import Iterator
from dataclasses import dataclass
from queue import Empty, Queue

from route_sim.geo.distance import Waypoint


@dataclass(frozen=True)
class PositionEvent:
    position: Waypoint
    timestamp: float


@dataclass(frozen=True)
class CompletionEvent:
    timestamp: float


FeedEvent = PositionEvent | CompletionEvent


class PositionFeed:
    """Collects positions posted by a RouteSimulator worker.

    Pass ``feed.on_position`` and ``feed.on_complete`` to start(); the worker
    only enqueues, and the thread that owns the sink drains the queue with
    get(), drain() or iter_until_complete().
    """

    def __init__(self, maxsize: int = 0):
        self._queue: Queue[FeedEvent] = Queue(maxsize=maxsize)
        self._completed = threading.Event()

    @property
    def completed(self) -> bool:
        return self._completed.is_set()

    def on_position(self, position: Waypoint) -> None:
        self._queue.put(PositionEvent(position=position, timestamp=time.monotonic()))

    def on_complete(self) -> None:
        self._completed.set()
        self._queue.put(CompletionEvent(timestamp=time.monotonic()))

    def get(self, timeout: float | None = None) -> FeedEvent | None:
        """Next event, or None if nothing arrived within ``timeout`` seconds."""
        try:
            return self._queue.get(timeout=timeout)
        except Empty:
            return None

    def drain(self) -> list[FeedEvent]:
        """All events queued so far, without blocking."""
        events: list[FeedEvent] = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except Empty:
                return events

    def iter_until_complete(self, idle_timeout: float | None = None) -> Iterator[Waypoint]:
        """Yield positions until the run completes.

        Stops early if no event arrives for ``idle_timeout`` seconds, which is
        how a stopped run (which never completes) ends the iteration.
        """
        while True:
            event = self.get(timeout=idle_timeout)
            if event is None or isinstance(event, CompletionEvent):
                return
            yield event.position
