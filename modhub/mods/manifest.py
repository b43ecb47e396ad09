"""Mod manifest: Pydantic model and YAML loader."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


class EventDeclarationEntry(BaseModel):
    """Documentation-only: event the mod fires. Registered in the Event Registry on load."""

    name: str = Field(min_length=1)
    description: str = ""
    params: list[str] = Field(default_factory=list)


class EventsConfig(BaseModel):
    """Events section in manifest. declares = documentation; listeners are wired in code."""

    declares: list[EventDeclarationEntry] = Field(default_factory=list)


class ModManifest(BaseModel):
    """Manifest schema for sandbox/mods/<id>/manifest.yaml."""

    id: str = Field(min_length=1)
    name: str
    version: str = "1.0.0"
    entrypoint: str  # module:ClassName
    description: str = ""
    depends_on: list[str] = Field(default_factory=list)
    config: dict[str, Any] = Field(default_factory=dict)
    enabled: bool = True
    events: EventsConfig = Field(default_factory=EventsConfig)

    @field_validator("entrypoint")
    @classmethod
    def _validate_entrypoint(cls, value: str) -> str:
        module_name, sep, class_name = value.partition(":")
        if not sep or not module_name or not class_name:
            raise ValueError("entrypoint must look like 'module:ClassName'")
        return value


def load_manifest(path: Path) -> ModManifest:
    """Read and validate manifest.yaml. Raises on invalid YAML or validation error."""
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Manifest must be a YAML object: {path}")
    return ModManifest.model_validate(data)


def apply_overrides(manifest: ModManifest, overrides: dict[str, Any] | None) -> ModManifest:
    """Merge settings mods.overrides.<id> (enabled, config) over the manifest."""
    if not overrides:
        return manifest
    update: dict[str, Any] = {}
    if "enabled" in overrides:
        update["enabled"] = bool(overrides["enabled"])
    if isinstance(overrides.get("config"), dict):
        update["config"] = {**manifest.config, **overrides["config"]}
    return manifest.model_copy(update=update) if update else manifest
