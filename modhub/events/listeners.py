"""Listener Table: per-event listener records in insertion order.

Not thread-safe on its own; EventBus serializes access with its lock.
"""

from typing import Any, Callable

from modhub.events.models import ListenerRecord


class ListenerTable:
    """Event name -> ordered list of ListenerRecord. Empty lists are never kept."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[ListenerRecord]] = {}

    def find(self, event_name: str, callback: Callable[..., Any]) -> ListenerRecord | None:
        """Live record for callback. Consumed one-shot records awaiting removal are ignored."""
        for record in self._listeners.get(event_name, ()):
            if record.matches(callback) and not record.consumed:
                return record
        return None

    def add(
        self,
        event_name: str,
        callback: Callable[..., Any],
        owner_mod: str = "",
        once: bool = False,
    ) -> ListenerRecord | None:
        """Append a record. Returns None when an equal callback is already registered."""
        if self.find(event_name, callback) is not None:
            return None
        record = ListenerRecord(callback=callback, owner_mod=owner_mod, once=once)
        self._listeners.setdefault(event_name, []).append(record)
        return record

    def remove(self, event_name: str, callback: Callable[..., Any]) -> int:
        """Remove every record whose callback equals callback. Returns the number removed."""
        records = self._listeners.get(event_name)
        if not records:
            return 0
        kept = [r for r in records if not r.matches(callback)]
        removed = len(records) - len(kept)
        if removed:
            records[:] = kept
        self._drop_if_empty(event_name)
        return removed

    def discard(self, event_name: str, record: ListenerRecord) -> bool:
        """Remove one specific record (by identity). Used for one-shot removal after dispatch."""
        records = self._listeners.get(event_name)
        if not records:
            return False
        for i in range(len(records) - 1, -1, -1):
            if records[i] is record:
                del records[i]
                self._drop_if_empty(event_name)
                return True
        return False

    def contains(self, event_name: str, record: ListenerRecord) -> bool:
        return any(r is record for r in self._listeners.get(event_name, ()))

    def get(self, event_name: str) -> tuple[ListenerRecord, ...]:
        """Records for event_name in insertion order (snapshot)."""
        return tuple(self._listeners.get(event_name, ()))

    def count(self, event_name: str) -> int:
        """Live records only; a one-shot mid-call is already spent."""
        return sum(1 for r in self._listeners.get(event_name, ()) if not r.consumed)

    def event_names(self) -> list[str]:
        return list(self._listeners)

    def _drop_if_empty(self, event_name: str) -> None:
        if event_name in self._listeners and not self._listeners[event_name]:
            del self._listeners[event_name]
