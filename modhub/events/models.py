"""Event Bus records: declarations, listeners, cached fires, dispatch outcomes."""

from dataclasses import dataclass, field
from typing import Any, Callable

__all__ = [
    "CachedEvent",
    "DispatchOutcome",
    "EventDeclaration",
    "EventDescriptor",
    "ListenerOptions",
    "ListenerRecord",
]

UNKNOWN_MOD = "Unknown"


@dataclass(frozen=True)
class EventDeclaration:
    """One mod's documentation of an event. Several mods may declare the same name."""

    owner_mod: str
    description: str = ""
    params: tuple[str, ...] = ()


@dataclass
class EventDescriptor:
    """All declarations recorded for one event name, in declaration order."""

    name: str
    declarations: list[EventDeclaration] = field(default_factory=list)

    @property
    def owners(self) -> list[str]:
        return [d.owner_mod for d in self.declarations]


@dataclass(frozen=True)
class ListenerOptions:
    """Optional listener settings. owner_mod is used for diagnostics only."""

    owner_mod: str = ""
    once: bool = False


@dataclass(eq=False)
class ListenerRecord:
    """Registered callback. Identity for de-duplication is the callback, not the record."""

    callback: Callable[..., Any]
    owner_mod: str = ""
    once: bool = False
    # Set when a one-shot listener has been invoked and awaits removal.
    consumed: bool = False

    @property
    def display_owner(self) -> str:
        return self.owner_mod or UNKNOWN_MOD

    def matches(self, callback: Callable[..., Any]) -> bool:
        return self.callback == callback


@dataclass(frozen=True)
class CachedEvent:
    """Arguments of a fire that found no listeners."""

    args: tuple[Any, ...] = ()


@dataclass(frozen=True)
class DispatchOutcome:
    """Result of invoking one listener during a fan-out."""

    owner_mod: str
    ok: bool
    error: str | None = None
