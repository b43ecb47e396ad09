"""Scheduling adapter: the single "invoke once after delay" primitive the bus needs from its host.

No cancellation, no repeat, no priority. Errors from the host primitive propagate unchanged.
"""

import asyncio
import threading
from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class Scheduler(Protocol):
    """Host timer facility. Fire-and-forget: no handle is returned."""

    def schedule_once(self, delay_ms: float, callback: Callable[[], None]) -> None:
        """Invoke callback once after delay_ms milliseconds."""


class AsyncioScheduler:
    """Timer on an asyncio event loop (loop.call_later).

    Without an explicit loop the running loop is used at schedule time.
    Calls from other threads are handed to the loop with call_soon_threadsafe.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def bind(self, loop: asyncio.AbstractEventLoop) -> None:
        """Pin the loop used for timers. Called by the runner once the loop is running."""
        self._loop = loop

    def schedule_once(self, delay_ms: float, callback: Callable[[], None]) -> None:
        delay = delay_ms / 1000.0
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        loop = self._loop or running
        if loop is None:
            raise RuntimeError("AsyncioScheduler has no event loop to schedule on")
        if loop is running:
            loop.call_later(delay, callback)
        else:
            loop.call_soon_threadsafe(loop.call_later, delay, callback)


class ThreadTimerScheduler:
    """Timer for hosts without an event loop: one daemon threading.Timer per call."""

    def __init__(self, name_prefix: str = "modhub-timer") -> None:
        self._name_prefix = name_prefix

    def schedule_once(self, delay_ms: float, callback: Callable[[], None]) -> None:
        timer = threading.Timer(delay_ms / 1000.0, callback)
        timer.daemon = True
        timer.name = f"{self._name_prefix}-{id(timer):x}"
        timer.start()


def create_scheduler(kind: str) -> Scheduler:
    """Build a scheduler from the event_bus.scheduler setting (asyncio | thread)."""
    if kind == "asyncio":
        return AsyncioScheduler()
    if kind == "thread":
        return ThreadTimerScheduler()
    raise ValueError(f"Unknown scheduler kind: {kind!r}")
