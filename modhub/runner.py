"""Entry point: bootstrap settings, logging, the process EventBus and mods; run the console."""

import asyncio
import logging
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from modhub.console import build_console, run_console
from modhub.events import AsyncioScheduler, EventBus, create_scheduler
from modhub.logging_config import setup_logging
from modhub.mods import ModLoader
from modhub.settings import get_setting, load_settings

_PROJECT_ROOT = Path(__file__).resolve().parent.parent

logger = logging.getLogger(__name__)

_event_bus: EventBus | None = None


def get_event_bus(settings: dict[str, Any] | None = None) -> EventBus:
    """Process-wide bus. Created on first call; later calls (and reloads) get the same instance."""
    global _event_bus
    if _event_bus is None:
        kind = get_setting(settings or {}, "event_bus.scheduler", "asyncio")
        _event_bus = EventBus(scheduler=create_scheduler(kind))
    return _event_bus


def reset_event_bus() -> None:
    """Forget the process bus. Tests only."""
    global _event_bus
    _event_bus = None


def init(settings: dict[str, Any] | None = None) -> EventBus:
    """Lifecycle hook: return the initialized process bus. Safe to call more than once."""
    event_bus = get_event_bus(settings)
    event_bus.init()
    return event_bus


def _build_loader(settings: dict[str, Any], event_bus: EventBus) -> ModLoader:
    mods_dir = _PROJECT_ROOT / get_setting(settings, "mods.dir", "sandbox/mods")
    data_dir = _PROJECT_ROOT / get_setting(settings, "mods.data_dir", "sandbox/data")
    return ModLoader(
        mods_dir=mods_dir, data_dir=data_dir, event_bus=event_bus, settings=settings
    )


async def _load_mods(loader: ModLoader) -> None:
    await loader.discover()
    await loader.load_all()
    await loader.initialize_all()
    await loader.start_all()


async def main_async(settings: dict[str, Any] | None = None) -> None:
    """Bootstrap: init bus -> load mods -> console -> wait for shutdown -> stop mods."""
    if settings is None:
        settings = load_settings()
        setup_logging(_PROJECT_ROOT, settings)
    event_bus = init(settings)
    if isinstance(event_bus.scheduler, AsyncioScheduler):
        event_bus.scheduler.bind(asyncio.get_running_loop())
    shutdown_event = asyncio.Event()
    loader = _build_loader(settings, event_bus)
    loader.set_shutdown_event(shutdown_event)
    await _load_mods(loader)
    console_task: asyncio.Task[None] | None = None
    if get_setting(settings, "console.enabled", True):
        console_task = asyncio.create_task(
            run_console(
                build_console(event_bus),
                shutdown_event,
                prompt=get_setting(settings, "console.prompt", "> "),
            ),
            name="modhub_console",
        )
    logger.info("modhub running")
    try:
        await shutdown_event.wait()
    except asyncio.CancelledError:
        pass
    finally:
        if console_task:
            console_task.cancel()
            try:
                await console_task
            except asyncio.CancelledError:
                pass
        await loader.shutdown()
        logger.info("modhub stopped")


def main() -> None:
    """Synchronous entry for `python -m modhub` and the modhub console script."""
    load_dotenv(_PROJECT_ROOT / ".env")
    try:
        asyncio.run(main_async())
    except KeyboardInterrupt:
        pass  # Ctrl+C while waiting for shutdown; exit cleanly


__all__ = ["get_event_bus", "init", "main", "main_async"]
