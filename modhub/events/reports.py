"""Plain-text reports over the registry and listener table. Shared by debug logging and the console."""

from modhub.events.listeners import ListenerTable
from modhub.events.models import EventDeclaration
from modhub.events.registry import EventRegistry


def _declaration_lines(prefix: str, declaration: EventDeclaration) -> list[str]:
    lines = [f"{prefix}{declaration.description}"]
    if declaration.params:
        lines.append(f"    Params: {', '.join(declaration.params)}")
    return lines


def events_report(registry: EventRegistry) -> list[str]:
    lines = ["---- Registered Events ----"]
    for descriptor in registry.events():
        lines.append(f"Event: {descriptor.name}")
        for declaration in descriptor.declarations:
            lines.extend(_declaration_lines(f"  - By {declaration.owner_mod}: ", declaration))
    return lines


def listeners_report(table: ListenerTable, event_name: str) -> list[str]:
    records = table.get(event_name)
    if not records:
        return [f"No listeners for event '{event_name}'."]
    lines = [f"---- Listeners for {event_name} ----"]
    for record in records:
        lines.append(f"  - {record.display_owner} (once={str(record.once).lower()})")
    return lines


def events_by_mod_report(registry: EventRegistry, mod_name: str) -> list[str]:
    lines = [f"---- Events registered by {mod_name} ----"]
    for event_name, declaration in registry.by_mod(mod_name):
        lines.extend(_declaration_lines(f"  - {event_name}: ", declaration))
    return lines
