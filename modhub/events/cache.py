"""Replay Cache: argument snapshots of events fired while nobody was listening."""

from typing import Any

from modhub.events.models import CachedEvent


class ReplayCache:
    """Event name -> fires in the order they happened. Taken out whole when the first listener arrives."""

    def __init__(self) -> None:
        self._cached: dict[str, list[CachedEvent]] = {}

    def append(self, event_name: str, args: tuple[Any, ...]) -> CachedEvent:
        entry = CachedEvent(args=tuple(args))
        self._cached.setdefault(event_name, []).append(entry)
        return entry

    def take(self, event_name: str) -> list[CachedEvent]:
        """Remove and return every cached entry for event_name, oldest first."""
        return self._cached.pop(event_name, [])

    def get(self, event_name: str) -> tuple[CachedEvent, ...]:
        return tuple(self._cached.get(event_name, ()))
