"""Console commands for inspecting the bus, and a stdin REPL that runs them."""

import asyncio
import logging
import shlex
from dataclasses import dataclass
from typing import Awaitable, Callable

from modhub.events import EventBus

logger = logging.getLogger(__name__)

CommandHandler = Callable[[list[str]], str]

_EXIT_WORDS = frozenset({"quit", "exit"})


@dataclass(frozen=True)
class ConsoleCommand:
    name: str
    handler: CommandHandler
    help: str = ""
    usage: str = ""
    min_args: int = 0


class ConsoleCommands:
    """Named commands; names are matched case-insensitively."""

    def __init__(self) -> None:
        self._commands: dict[str, ConsoleCommand] = {}
        self.add("help", self._help, "List available commands")

    def add(
        self,
        name: str,
        handler: CommandHandler,
        help: str = "",
        usage: str = "",
        min_args: int = 0,
    ) -> None:
        self._commands[name.lower()] = ConsoleCommand(name, handler, help, usage, min_args)

    def names(self) -> list[str]:
        return [c.name for c in self._commands.values()]

    def execute(self, line: str) -> str:
        """Run one command line and return its text output."""
        try:
            parts = shlex.split(line)
        except ValueError as e:
            return f"Cannot parse command: {e}"
        if not parts:
            return ""
        name, args = parts[0], parts[1:]
        command = self._commands.get(name.lower())
        if command is None:
            return f"Unknown command: {name}. Type 'help' for a list of commands."
        if len(args) < command.min_args:
            return f"Usage: {command.usage or command.name}"
        return command.handler(args)

    def _help(self, _args: list[str]) -> str:
        width = max(len(c.usage or c.name) for c in self._commands.values())
        return "\n".join(
            f"{(c.usage or c.name).ljust(width)}  {c.help}" for c in self._commands.values()
        )


def register_bus_commands(commands: ConsoleCommands, event_bus: EventBus) -> None:
    """Wire EventBus.Events / EventBus.Listeners / EventBus.EventsByMod."""
    commands.add(
        "EventBus.Events",
        lambda _args: "\n".join(event_bus.debug_list_events()),
        "List all registered events",
    )
    commands.add(
        "EventBus.Listeners",
        lambda args: "\n".join(event_bus.debug_list_listeners(args[0])),
        "List all registered listeners for an event",
        usage="EventBus.Listeners <event>",
        min_args=1,
    )
    commands.add(
        "EventBus.EventsByMod",
        lambda args: "\n".join(event_bus.debug_list_events_by_mod(args[0])),
        "List all events registered by a mod",
        usage="EventBus.EventsByMod <mod>",
        min_args=1,
    )


def build_console(event_bus: EventBus) -> ConsoleCommands:
    commands = ConsoleCommands()
    register_bus_commands(commands, event_bus)
    return commands


async def _read_stdin(prompt: str) -> str:
    return await asyncio.to_thread(input, prompt)


async def run_console(
    commands: ConsoleCommands,
    shutdown_event: asyncio.Event,
    prompt: str = "> ",
    read_line: Callable[[str], Awaitable[str]] = _read_stdin,
    write: Callable[[str], None] = print,
) -> None:
    """REPL: read a line, execute it, print the result. quit/exit/EOF request shutdown."""
    while not shutdown_event.is_set():
        try:
            line = await read_line(prompt)
        except (EOFError, KeyboardInterrupt):
            logger.info("Console input stream closed")
            shutdown_event.set()
            break
        line = line.strip()
        if not line:
            continue
        if line.lower() in _EXIT_WORDS:
            shutdown_event.set()
            break
        try:
            output = commands.execute(line)
        except Exception as e:
            logger.exception("Console command failed: %s", line)
            output = f"Command failed: {e}"
        if output:
            write(output)
