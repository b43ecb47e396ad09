"""Event Registry: documentation-only declarations of events by mods."""

from typing import Iterable

from modhub.events.models import EventDeclaration, EventDescriptor


class EventRegistry:
    """Declared events keyed by name. Declarations are appended, never replaced or removed."""

    def __init__(self) -> None:
        self._events: dict[str, EventDescriptor] = {}

    def register(
        self,
        event_name: str,
        mod_name: str,
        description: str | None = None,
        params: Iterable[str] | None = None,
    ) -> EventDeclaration:
        """Append a declaration for event_name. Always succeeds."""
        if isinstance(params, str):
            params = (params,)
        declaration = EventDeclaration(
            owner_mod=mod_name,
            description=description or "",
            params=tuple(str(p) for p in params or ()),
        )
        descriptor = self._events.get(event_name)
        if descriptor is None:
            descriptor = EventDescriptor(name=event_name)
            self._events[event_name] = descriptor
        descriptor.declarations.append(declaration)
        return declaration

    def get(self, event_name: str) -> EventDescriptor | None:
        return self._events.get(event_name)

    def events(self) -> list[EventDescriptor]:
        """All descriptors, in order of first declaration."""
        return list(self._events.values())

    def names(self) -> list[str]:
        return list(self._events)

    def by_mod(self, mod_name: str) -> list[tuple[str, EventDeclaration]]:
        """Scan every declaration and return (event_name, declaration) pairs owned by mod_name."""
        return [
            (descriptor.name, declaration)
            for descriptor in self._events.values()
            for declaration in descriptor.declarations
            if declaration.owner_mod == mod_name
        ]

    def __contains__(self, event_name: object) -> bool:
        return event_name in self._events

    def __len__(self) -> int:
        return len(self._events)
