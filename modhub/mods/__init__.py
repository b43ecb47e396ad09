"""Mod system: contract, manifest, context, loader."""

from modhub.mods.context import ModContext
from modhub.mods.contract import Mod, ModState
from modhub.mods.loader import ModLoader
from modhub.mods.manifest import ModManifest, load_manifest

__all__ = [
    "Mod",
    "ModContext",
    "ModLoader",
    "ModManifest",
    "ModState",
    "load_manifest",
]
