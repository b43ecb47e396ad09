"""ModContext: the bus API a mod sees. Every call is stamped with the mod's id."""

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, Iterable

from modhub.events import DispatchOutcome, EventBus, EventDeclaration


class ModContext:
    """Everything a mod can do, only through this object."""

    def __init__(
        self,
        mod_id: str,
        config: dict[str, Any],
        logger: logging.Logger,
        event_bus: EventBus,
        data_dir_path: Path,
        shutdown_event: asyncio.Event | None = None,
    ) -> None:
        self.mod_id = mod_id
        self.config = config
        self.logger = logger
        self._event_bus = event_bus
        self._data_dir_path = data_dir_path
        self._shutdown_event = shutdown_event

    def register_event(
        self,
        event_name: str,
        description: str = "",
        params: Iterable[str] | None = None,
    ) -> EventDeclaration:
        """Declare an event this mod fires (documentation only)."""
        return self._event_bus.register_event(event_name, self.mod_id, description, params)

    def listen(
        self,
        event_name: str,
        callback: Callable[..., Any],
        once: bool = False,
    ) -> bool:
        """Register callback for event_name. Cached fires are replayed before this returns."""
        return self._event_bus.register_listener(
            event_name, callback, owner_mod=self.mod_id, once=once
        )

    def unlisten(self, event_name: str, callback: Callable[..., Any]) -> int:
        return self._event_bus.unregister_listener(event_name, callback)

    def fire(self, event_name: str, *args: Any) -> list[DispatchOutcome]:
        return self._event_bus.fire_event(event_name, *args)

    def fire_delayed(self, event_name: str, delay_ms: float, *args: Any) -> None:
        self._event_bus.fire_event_delayed(event_name, delay_ms, *args)

    def get_config(self, key: str, default: Any = None) -> Any:
        """Read a value from the config: block in manifest.yaml (after settings overrides)."""
        return self.config.get(key, default)

    @property
    def data_dir(self) -> Path:
        """Private mod folder: <mods.data_dir>/<mod_id>/."""
        self._data_dir_path.mkdir(parents=True, exist_ok=True)
        return self._data_dir_path

    def request_shutdown(self) -> None:
        """Shut down the application."""
        if self._shutdown_event:
            self._shutdown_event.set()
