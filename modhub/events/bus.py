"""In-process event bus: declare -> listen -> fire, with replay of fires nobody heard.

Fan-out is synchronous and runs most-recently-registered listeners first.
A failing listener is logged and skipped; it never reaches the caller of fire_event.
"""

import logging
import threading
from typing import Any, Callable, Iterable

from modhub.events.cache import ReplayCache
from modhub.events.errors import InvalidArgumentError
from modhub.events.listeners import ListenerTable
from modhub.events.models import (
    CachedEvent,
    DispatchOutcome,
    EventDeclaration,
    EventDescriptor,
    ListenerOptions,
    ListenerRecord,
)
from modhub.events.registry import EventRegistry
from modhub.events.reports import events_by_mod_report, events_report, listeners_report
from modhub.events.scheduling import AsyncioScheduler, Scheduler

logger = logging.getLogger(__name__)


class EventBus:
    """Registry, listener table and replay cache behind one re-entrant lock.

    Listener callbacks run with the lock held, so they may fire, register or
    unregister on the same thread; other threads wait for the fan-out to finish.
    """

    def __init__(
        self,
        scheduler: Scheduler | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._registry = EventRegistry()
        self._listeners = ListenerTable()
        self._cache = ReplayCache()
        self._scheduler: Scheduler = scheduler if scheduler is not None else AsyncioScheduler()
        self._log = log or logger
        self._lock = threading.RLock()
        self.initialized = False

    def init(self) -> bool:
        """Mark the bus ready. A second call is a no-op that keeps every registration."""
        with self._lock:
            if self.initialized:
                self._log.info("EventBus already initialized, skipping")
                return False
            self.initialized = True
        self._log.info("EventBus initialized and ready to use")
        return True

    @property
    def registry(self) -> EventRegistry:
        return self._registry

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    # Registry

    def register_event(
        self,
        event_name: str,
        mod_name: str,
        description: str | None = None,
        params: Iterable[str] | None = None,
    ) -> EventDeclaration:
        """Declare an event for documentation. Repeated declarations are all kept."""
        with self._lock:
            declaration = self._registry.register(event_name, mod_name, description, params)
        self._log.info("Event registered: '%s' by mod '%s'", event_name, mod_name)
        return declaration

    def get_event(self, event_name: str) -> EventDescriptor | None:
        with self._lock:
            return self._registry.get(event_name)

    def list_events(self) -> list[EventDescriptor]:
        with self._lock:
            return self._registry.events()

    def list_events_by_mod(self, mod_name: str) -> list[tuple[str, EventDeclaration]]:
        with self._lock:
            return self._registry.by_mod(mod_name)

    # Listener table

    def register_listener(
        self,
        event_name: str,
        callback: Callable[..., Any],
        owner_mod: str = "",
        once: bool = False,
        *,
        options: ListenerOptions | None = None,
    ) -> bool:
        """Add a listener; replay cached fires for event_name before returning.

        Raises InvalidArgumentError if callback is not callable. Registering an
        already-registered callback is a no-op and returns False.
        """
        if not callable(callback):
            raise InvalidArgumentError(
                f"Callback for event {event_name!r} must be callable, "
                f"got {type(callback).__name__}"
            )
        if options is not None:
            owner_mod, once = options.owner_mod, options.once
        with self._lock:
            record = self._listeners.add(event_name, callback, owner_mod, once)
            if record is None:
                self._log.debug(
                    "Duplicate listener for event '%s' ignored (mod '%s')",
                    event_name,
                    owner_mod or "Unknown",
                )
                return False
            self._log.info(
                "Registered listener for event '%s' by mod '%s'",
                event_name,
                record.display_owner,
            )
            cached = self._cache.take(event_name)
            if cached:
                self._log.info(
                    "Firing cached events for '%s' (%d cached events)",
                    event_name,
                    len(cached),
                )
                for entry in cached:
                    self.fire_event(event_name, *entry.args)
        return True

    def unregister_listener(self, event_name: str, callback: Callable[..., Any]) -> int:
        """Remove callback from event_name. Unknown event or callback is a no-op. Returns count removed."""
        with self._lock:
            removed = self._listeners.remove(event_name, callback)
        if removed:
            self._log.info("Unregistered listener for event '%s'", event_name)
        return removed

    def listeners(self, event_name: str) -> tuple[ListenerRecord, ...]:
        with self._lock:
            return self._listeners.get(event_name)

    def listener_count(self, event_name: str) -> int:
        with self._lock:
            return self._listeners.count(event_name)

    def has_listeners(self, event_name: str) -> bool:
        return self.listener_count(event_name) > 0

    def cached(self, event_name: str) -> tuple[CachedEvent, ...]:
        """Fires waiting for a first listener on event_name."""
        with self._lock:
            return self._cache.get(event_name)

    # Dispatch

    def fire_event(self, event_name: str, *args: Any) -> list[DispatchOutcome]:
        """Invoke every listener (newest first) or cache args when there are none."""
        with self._lock:
            # a consumed one-shot still sits in the table while its callback runs
            records = tuple(r for r in self._listeners.get(event_name) if not r.consumed)
            if not records:
                self._cache.append(event_name, args)
                self._log.info("No listeners for event '%s'. Event cached.", event_name)
                return []
            self._log.debug(
                "Firing event '%s' to %d listener(s) with %d args",
                event_name,
                len(records),
                len(args),
            )
            outcomes: list[DispatchOutcome] = []
            for record in reversed(records):
                outcome = self._invoke(event_name, record, args)
                if outcome is not None:
                    outcomes.append(outcome)
            return outcomes

    def _invoke(
        self,
        event_name: str,
        record: ListenerRecord,
        args: tuple[Any, ...],
    ) -> DispatchOutcome | None:
        """Call one listener in isolation. None if it left the table earlier in this fan-out."""
        if record.consumed or not self._listeners.contains(event_name, record):
            return None
        if record.once:
            record.consumed = True
        try:
            record.callback(*args)
            outcome = DispatchOutcome(owner_mod=record.display_owner, ok=True)
        except Exception as e:
            self._log.warning(
                "Error calling listener for event '%s' from mod '%s': %s",
                event_name,
                record.display_owner,
                e,
                exc_info=True,
            )
            outcome = DispatchOutcome(
                owner_mod=record.display_owner,
                ok=False,
                error=f"{type(e).__name__}: {e}",
            )
        if record.once:
            self._listeners.discard(event_name, record)
        return outcome

    def fire_event_delayed(self, event_name: str, delay_ms: float, *args: Any) -> None:
        """Fire event_name once after delay_ms milliseconds. Returns immediately.

        Arguments are snapshotted now. If nobody listens when the timer runs, the fire is cached.
        delay_ms goes to the scheduler as is; whatever it raises reaches the caller.
        """
        snapshot = tuple(args)

        def fire() -> None:
            self.fire_event(event_name, *snapshot)

        self._scheduler.schedule_once(delay_ms, fire)
        self._log.debug("Scheduled event '%s' in %s ms", event_name, delay_ms)

    # Debug reports

    def debug_list_events(self) -> list[str]:
        """Log every declared event with its declarations. Returns the logged lines."""
        with self._lock:
            lines = events_report(self._registry)
        self._emit_report(lines)
        return lines

    def debug_list_listeners(self, event_name: str) -> list[str]:
        with self._lock:
            lines = listeners_report(self._listeners, event_name)
        self._emit_report(lines)
        return lines

    def debug_list_events_by_mod(self, mod_name: str) -> list[str]:
        with self._lock:
            lines = events_by_mod_report(self._registry, mod_name)
        self._emit_report(lines)
        return lines

    def _emit_report(self, lines: list[str]) -> None:
        for line in lines:
            self._log.info("%s", line)
