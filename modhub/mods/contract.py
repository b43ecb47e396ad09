"""Mod protocol and lifecycle state.

Loader checks mods with isinstance(mod, Mod). Identity (id, name, version) comes from the manifest.
"""

from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from modhub.mods.context import ModContext


class ModState(Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"
    ERROR = "error"


@runtime_checkable
class Mod(Protocol):
    """Base contract: lifecycle only. All bus access goes through the context."""

    async def initialize(self, context: "ModContext") -> None:
        """Called once on load. Declare events, register listeners."""

    async def start(self) -> None:
        """Start active work: fire initial events, schedule timers."""

    async def stop(self) -> None:
        """Graceful shutdown. Unregister listeners, release resources."""
