"""ModLoader: discover, load, initialize, start and stop mods wired to one EventBus."""

import asyncio
import importlib.util
import logging
import sys
from pathlib import Path
from typing import Any

from modhub.events import EventBus
from modhub.logging_config import mod_logger
from modhub.mods.context import ModContext
from modhub.mods.contract import Mod, ModState
from modhub.mods.manifest import ModManifest, apply_overrides, load_manifest

logger = logging.getLogger(__name__)


class ModLoader:
    """Mod lifecycle: discover -> load -> initialize (declare events) -> start -> shutdown."""

    def __init__(
        self,
        mods_dir: Path,
        data_dir: Path,
        event_bus: EventBus,
        settings: dict[str, Any] | None = None,
    ) -> None:
        self._mods_dir = mods_dir
        self._data_dir = data_dir
        self._event_bus = event_bus
        self._overrides: dict[str, Any] = (
            ((settings or {}).get("mods") or {}).get("overrides") or {}
        )
        self._manifests: list[ModManifest] = []
        self._mods: dict[str, Mod] = {}
        self._state: dict[str, ModState] = {}
        self._shutdown_event: asyncio.Event | None = None

    def set_shutdown_event(self, event: asyncio.Event) -> None:
        self._shutdown_event = event

    @property
    def manifests(self) -> list[ModManifest]:
        return list(self._manifests)

    def state(self, mod_id: str) -> ModState | None:
        return self._state.get(mod_id)

    def get_mod(self, mod_id: str) -> Mod | None:
        return self._mods.get(mod_id)

    async def discover(self) -> None:
        """Scan mods_dir for manifest.yaml; apply settings overrides and keep enabled mods."""
        self._manifests = []
        if not self._mods_dir.exists():
            logger.info("Mods directory %s does not exist, no mods loaded", self._mods_dir)
            return
        for d in sorted(self._mods_dir.iterdir()):
            if not d.is_dir():
                continue
            manifest_path = d / "manifest.yaml"
            if not manifest_path.exists():
                continue
            try:
                manifest = load_manifest(manifest_path)
                manifest = apply_overrides(manifest, self._overrides.get(manifest.id))
            except Exception as e:
                logger.exception("Invalid manifest %s: %s", manifest_path, e)
                continue
            if manifest.enabled:
                self._manifests.append(manifest)
            else:
                logger.info("Mod %s is disabled, skipping", manifest.id)

    def _resolve_dependency_order(self) -> list[ModManifest]:
        """Topological sort by depends_on. Raises on cycle or missing dep."""
        by_id = {m.id: m for m in self._manifests}
        for m in self._manifests:
            for dep in m.depends_on:
                if dep not in by_id:
                    raise ValueError(f"Mod {m.id} depends on missing {dep}")
        order: list[ModManifest] = []
        seen: set[str] = set()
        visiting: set[str] = set()

        def visit(m: ModManifest) -> None:
            if m.id in seen:
                return
            if m.id in visiting:
                raise ValueError(f"Cycle in depends_on involving {m.id}")
            visiting.add(m.id)
            for dep in m.depends_on:
                visit(by_id[dep])
            visiting.remove(m.id)
            seen.add(m.id)
            order.append(m)

        for m in self._manifests:
            visit(m)
        return order

    async def load_all(self) -> None:
        """Import mod modules in dependency order and instantiate their classes."""
        order = self._resolve_dependency_order()
        self._manifests = order
        self._mods = {}
        self._state = {}
        for manifest in order:
            try:
                self._mods[manifest.id] = self._load_one(manifest)
                self._state[manifest.id] = ModState.INACTIVE
            except Exception as e:
                logger.exception("Failed to load mod %s: %s", manifest.id, e)
                self._state[manifest.id] = ModState.ERROR

    def _load_one(self, manifest: ModManifest) -> Mod:
        mod_dir = self._mods_dir / manifest.id
        module_name, class_name = manifest.entrypoint.split(":", 1)
        py_path = mod_dir / f"{module_name}.py"
        if not py_path.exists():
            raise FileNotFoundError(f"{py_path} not found")
        spec = importlib.util.spec_from_file_location(
            f"mod_{manifest.id}_{module_name}", py_path
        )
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot load {py_path}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[spec.name] = module
        spec.loader.exec_module(module)
        instance = getattr(module, class_name)()
        if not isinstance(instance, Mod):
            raise TypeError(f"{manifest.entrypoint} does not implement the Mod protocol")
        return instance

    async def initialize_all(self) -> None:
        """Declare manifest events, build a context per mod and call initialize(ctx)."""
        for manifest in self._manifests:
            mod_id = manifest.id
            mod = self._mods.get(mod_id)
            if mod is None or self._state.get(mod_id) != ModState.INACTIVE:
                continue
            for entry in manifest.events.declares:
                self._event_bus.register_event(
                    entry.name, mod_id, entry.description, entry.params
                )
            ctx = ModContext(
                mod_id=mod_id,
                config=manifest.config,
                logger=mod_logger(mod_id),
                event_bus=self._event_bus,
                data_dir_path=self._data_dir / mod_id,
                shutdown_event=self._shutdown_event,
            )
            try:
                await mod.initialize(ctx)
            except Exception as e:
                logger.exception("initialize failed for %s: %s", mod_id, e)
                self._state[mod_id] = ModState.ERROR

    async def start_all(self) -> None:
        """Call start() on every initialized mod in dependency order."""
        for manifest in self._manifests:
            mod_id = manifest.id
            mod = self._mods.get(mod_id)
            if mod is None or self._state.get(mod_id) != ModState.INACTIVE:
                continue
            try:
                await mod.start()
                self._state[mod_id] = ModState.ACTIVE
                logger.info("Mod %s started", mod_id)
            except Exception as e:
                logger.exception("start failed for %s: %s", mod_id, e)
                self._state[mod_id] = ModState.ERROR

    async def shutdown(self) -> None:
        """Stop active mods in reverse dependency order."""
        for manifest in reversed(self._manifests):
            mod_id = manifest.id
            mod = self._mods.get(mod_id)
            if mod is None or self._state.get(mod_id) != ModState.ACTIVE:
                continue
            try:
                await mod.stop()
            except Exception as e:
                logger.exception("stop failed for %s: %s", mod_id, e)
            self._state[mod_id] = ModState.INACTIVE
