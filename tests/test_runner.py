"""Tests for bootstrap: process bus, idempotent init, end-to-end run with a mod."""

import asyncio
from pathlib import Path
from typing import Iterator

import pytest

from modhub import runner
from modhub.events import AsyncioScheduler, ThreadTimerScheduler


@pytest.fixture(autouse=True)
def _fresh_bus() -> Iterator[None]:
    runner.reset_event_bus()
    yield
    runner.reset_event_bus()


class TestInit:
    """Process bus is created once and init() tolerates repeated bootstrap."""

    def test_same_bus_across_calls(self) -> None:
        first = runner.get_event_bus()
        assert runner.get_event_bus() is first
        assert isinstance(first.scheduler, AsyncioScheduler)

    def test_scheduler_from_settings(self) -> None:
        bus = runner.get_event_bus({"event_bus": {"scheduler": "thread"}})
        assert isinstance(bus.scheduler, ThreadTimerScheduler)

    def test_init_twice_preserves_registrations(self) -> None:
        bus = runner.init()
        bus.register_event("E", "Mod", "desc")
        bus.register_listener("E", lambda: None)
        bus.fire_event("Cached", 1)

        again = runner.init()

        assert again is bus
        assert bus.initialized is True
        assert bus.get_event("E") is not None
        assert bus.listener_count("E") == 1
        assert len(bus.cached("Cached")) == 1


_STOPPER_MOD = '''
class StopperMod:
    async def initialize(self, context):
        self.ctx = context
        context.listen("Stopper_Stop", self.on_stop)

    async def start(self):
        self.ctx.fire_delayed("Stopper_Stop", 20, "bye")

    async def stop(self):
        pass

    def on_stop(self, word):
        self.ctx.logger.info("stopping: %s", word)
        self.ctx.request_shutdown()
'''


class TestMainAsync:
    """Full bootstrap with a mod that requests shutdown through a delayed event."""

    @pytest.mark.asyncio
    async def test_runs_until_mod_requests_shutdown(self, tmp_path: Path) -> None:
        mod_dir = tmp_path / "mods" / "stopper"
        mod_dir.mkdir(parents=True)
        (mod_dir / "manifest.yaml").write_text(
            "id: stopper\nname: Stopper\nentrypoint: main:StopperMod\n"
            "events:\n  declares:\n    - name: Stopper_Stop\n",
            encoding="utf-8",
        )
        (mod_dir / "main.py").write_text(_STOPPER_MOD, encoding="utf-8")
        settings = {
            "event_bus": {"scheduler": "asyncio"},
            "mods": {"dir": str(tmp_path / "mods"), "data_dir": str(tmp_path / "data")},
            "console": {"enabled": False},
        }

        await asyncio.wait_for(runner.main_async(settings), timeout=5)

        bus = runner.get_event_bus()
        assert bus.initialized is True
        assert [name for name, _ in bus.list_events_by_mod("stopper")] == ["Stopper_Stop"]
