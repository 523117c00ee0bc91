"""Background delivery of resolution events.

Resolution calls hand their event to ``TelemetryEmitter.emit`` and move on.
A worker task started by ``start`` feeds queued events to the registered
consumers; ``stop`` waits for the backlog and then shuts the worker down.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Union

from .events import ResolutionEvent


logger = logging.getLogger(__name__)

Consumer = Callable[[ResolutionEvent], Union[None, Awaitable[None]]]


@dataclass
class TelemetryEmitter:
    """
    Queue of resolution events with a single delivery worker.

    ``emit`` never waits: once ``max_queue_size`` events are pending,
    further events are counted as dropped.
    """
    max_queue_size: int = 10000

    _queue: asyncio.Queue | None = field(default=None, init=False)
    _worker: asyncio.Task | None = field(default=None, init=False)
    _consumers: list[Consumer] = field(default_factory=list, init=False)
    _counts: Counter = field(default_factory=Counter, init=False)
    _outcomes: Counter = field(default_factory=Counter, init=False)

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    async def start(self) -> None:
        """Create the queue and launch the delivery worker."""
        if self.running:
            return
        self._queue = asyncio.Queue(maxsize=self.max_queue_size)
        self._worker = asyncio.create_task(self._run(), name="resolution-telemetry")
        logger.info(f"Resolution telemetry started (max_queue={self.max_queue_size})")

    async def stop(self) -> None:
        """Deliver every queued event, then stop the worker."""
        if self._queue is None:
            return

        if self.running:
            await self._queue.join()
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass

        self._queue = None
        self._worker = None
        logger.info(f"Resolution telemetry stopped: {self.stats}")

    def add_consumer(self, consumer: Consumer) -> None:
        """Register a plain function or coroutine function for events."""
        self._consumers.append(consumer)

    def emit(self, event: ResolutionEvent) -> bool:
        """
        Queue an event for delivery.

        Returns:
            True if queued, False if dropped (not started, or queue full)
        """
        if self._queue is None:
            logger.debug(f"Resolution telemetry not started, dropping {event.operation.value} event")
            self._counts["dropped"] += 1
            return False

        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self._counts["dropped"] += 1
            return False

        self._counts["queued"] += 1
        self._outcomes[event.outcome.value] += 1
        return True

    async def _run(self) -> None:
        queue = self._queue
        while True:
            event = await queue.get()
            try:
                await self._deliver(event)
            finally:
                queue.task_done()

    async def _deliver(self, event: ResolutionEvent) -> None:
        for consumer in self._consumers:
            try:
                result = consumer(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                self._counts["consumer_errors"] += 1
                logger.error(f"Resolution event {event.request_id} not delivered to {consumer!r}: {e}")
        self._counts["delivered"] += 1

    @property
    def queue_depth(self) -> int:
        return self._queue.qsize() if self._queue else 0

    @property
    def stats(self) -> dict:
        """Counters for queued, delivered and dropped events, plus outcomes."""
        return {
            "queued": self._counts["queued"],
            "delivered": self._counts["delivered"],
            "dropped": self._counts["dropped"],
            "consumer_errors": self._counts["consumer_errors"],
            "outcomes": dict(self._outcomes),
            "queue_depth": self.queue_depth,
        }
