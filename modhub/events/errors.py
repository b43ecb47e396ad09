"""Event Bus errors. Only malformed input to the bus API is raised; listener faults are logged."""


class EventBusError(Exception):
    """Base class for errors raised by the Event Bus."""


class InvalidArgumentError(EventBusError, TypeError):
    """Raised synchronously for malformed arguments (non-callable callback, negative delay)."""
