"""Greeter mod: announces itself on start and counts heartbeat ticks."""

from typing import Any


class GreeterMod:
    def __init__(self) -> None:
        self._ctx: Any = None
        self.ticks_seen = 0

    async def initialize(self, context: Any) -> None:
        self._ctx = context
        context.listen("Heartbeat_Tick", self._on_tick)

    async def start(self) -> None:
        self._ctx.fire("Greeter_Ready", self._ctx.get_config("greeting", "hello"))

    async def stop(self) -> None:
        self._ctx.unlisten("Heartbeat_Tick", self._on_tick)

    def _on_tick(self, count: int) -> None:
        self.ticks_seen += 1
        self._ctx.logger.debug("greeter saw tick #%d", count)
