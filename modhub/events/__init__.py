"""Event Bus: event declarations, listeners, replay cache and synchronous dispatch."""

from modhub.events.bus import EventBus
from modhub.events.errors import EventBusError, InvalidArgumentError
from modhub.events.models import (
    CachedEvent,
    DispatchOutcome,
    EventDeclaration,
    EventDescriptor,
    ListenerOptions,
    ListenerRecord,
)
from modhub.events.scheduling import (
    AsyncioScheduler,
    Scheduler,
    ThreadTimerScheduler,
    create_scheduler,
)

__all__ = [
    "AsyncioScheduler",
    "CachedEvent",
    "DispatchOutcome",
    "EventBus",
    "EventBusError",
    "EventDeclaration",
    "EventDescriptor",
    "InvalidArgumentError",
    "ListenerOptions",
    "ListenerRecord",
    "Scheduler",
    "ThreadTimerScheduler",
    "create_scheduler",
]
