"""Heartbeat mod: re-arms a delayed Heartbeat_Tick after every tick while running."""

from typing import Any

TICK_EVENT = "Heartbeat_Tick"


class HeartbeatMod:
    """Mod: periodic tick via fire_delayed; greets back once when Greeter_Ready arrives."""

    def __init__(self) -> None:
        self._ctx: Any = None
        self._interval_ms = 10000
        self._running = False

    async def initialize(self, context: Any) -> None:
        self._ctx = context
        self._interval_ms = int(context.get_config("interval_ms", 10000))
        context.listen(TICK_EVENT, self._on_tick)
        context.listen("Greeter_Ready", self._on_greeter_ready, once=True)

    async def start(self) -> None:
        self._running = True
        self._ctx.fire_delayed(TICK_EVENT, self._interval_ms, 1)

    async def stop(self) -> None:
        self._running = False
        self._ctx.unlisten(TICK_EVENT, self._on_tick)

    def _on_tick(self, count: int) -> None:
        if not self._running:
            return
        self._ctx.logger.info("heartbeat tick #%d", count)
        self._ctx.fire_delayed(TICK_EVENT, self._interval_ms, count + 1)

    def _on_greeter_ready(self, greeting: str) -> None:
        self._ctx.logger.info("greeter says: %s", greeting)
