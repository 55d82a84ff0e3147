"""Help command."""

from __future__ import annotations

from typing import Dict, List

from pasctl.errors import UnknownCommandError
from pasctl.shell.context import ExecutionContext
from pasctl.shell.registry import CommandRegistry

CATEGORIES: Dict[str, List[str]] = {
    "Session": ["connect", "disconnect", "status"],
    "Resources": ["accounts"],
    "Settings": ["set", "config"],
    "Other": ["help", "history", "clear", "exit"],
}


class HelpCommand:
    """List commands or show the usage of one command."""

    name = "help"
    description = "Display help information"
    usage = """help [command]

Display help information for pasctl commands.

Examples:
  help              Show all available commands
  help accounts     Show help for the accounts command
"""

    def __init__(self, registry: CommandRegistry):
        self.registry = registry

    def execute(self, ctx: ExecutionContext, args: List[str]) -> None:
        if args:
            self._show_command(args[0])
        else:
            self._show_all()

    def _show_all(self) -> None:
        print()
        print("pasctl - PAM Interactive Shell")
        print()
        print("Available commands:")
        print()

        listed = {name for names in CATEGORIES.values() for name in names}
        uncategorized = [name for name in self.registry.names() if name not in listed]

        for category, names in CATEGORIES.items():
            if category == "Other":
                names = names + uncategorized
            print(f"  {category}:")
            for name in names:
                command = self.registry.get(name)
                if command is not None:
                    print(f"    {name:<12} {command.description}")
                else:
                    print(f"    {name:<12}")
            print()

        print("Use 'help <command>' for more information about a specific command.")
        print()

    def _show_command(self, name: str) -> None:
        command = self.registry.get(name)
        if command is None:
            raise UnknownCommandError(name)

        print()
        print(f"{command.name} - {command.description}")
        print()
        print("Usage:")
        print()
        for line in command.usage.splitlines():
            print(f"  {line}")
        print()
