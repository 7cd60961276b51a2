"""Command registry for the debugger overlay."""

from __future__ import annotations

from typing import Dict, List, Optional

from .base import Command
from .control import HaltCommand
from .memory import DumpCommand, SetCommand
from .snapshot import LoadCommand, SaveCommand


class CommandRegistry:
    """Known commands keyed by their exact token."""

    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {}

    def register(self, command: Command) -> None:
        if command.name in self._commands:
            raise ValueError(f"duplicate command {command.name}")
        self._commands[command.name] = command

    def get(self, name: str) -> Optional[Command]:
        return self._commands.get(name)

    def list_commands(self) -> List[Command]:
        return list(self._commands.values())


def build_registry() -> CommandRegistry:
    registry = CommandRegistry()
    for command in (HaltCommand(), DumpCommand(), SaveCommand(), LoadCommand(), SetCommand()):
        registry.register(command)
    return registry


__all__ = ["Command", "CommandRegistry", "build_registry"]
