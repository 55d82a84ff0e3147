"""Command registry for the shell.

Commands are plain objects that satisfy the :class:`Command` protocol.
Commands with subcommands also satisfy :class:`SubcommandProvider`, which the
shell uses for tab completion.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pasctl.shell.context import ExecutionContext

logger = logging.getLogger(__name__)


@runtime_checkable
class Command(Protocol):
    """A named shell command."""

    name: str
    description: str
    usage: str

    def execute(self, ctx: ExecutionContext, args: List[str]) -> None:
        """Run the command.

        Args:
            ctx: Execution context for this invocation
            args: Arguments following the command name

        Raises:
            PasctlError: If the command fails
        """
        ...


@runtime_checkable
class SubcommandProvider(Protocol):
    """A command that exposes a fixed list of subcommand names."""

    subcommands: List[str]


class CommandRegistry:
    """Registry of shell commands, keyed by name."""

    def __init__(self):
        """Initialize registry."""
        self._commands: Dict[str, Command] = {}

    def register(self, command: Command) -> None:
        """Add a command, replacing any command with the same name.

        Args:
            command: Command to register
        """
        if command.name in self._commands:
            logger.debug(f"Replacing command: {command.name}")
        self._commands[command.name] = command
        logger.debug(f"Registered command: {command.name}")

    def get(self, name: str) -> Optional[Command]:
        """Get a command by exact name.

        Args:
            name: Command name

        Returns:
            Command if found, None otherwise
        """
        return self._commands.get(name)

    def names(self) -> List[str]:
        """Get all command names in sorted order."""
        return sorted(self._commands)

    def commands(self) -> List[Command]:
        """Get all commands, ordered by name."""
        return [self._commands[name] for name in self.names()]

    def subcommands(self, name: str) -> List[str]:
        """Get the subcommand names of a command.

        Args:
            name: Command name

        Returns:
            Subcommand names, or an empty list if the command has none
        """
        command = self._commands.get(name)
        if isinstance(command, SubcommandProvider):
            return list(command.subcommands)
        return []

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __len__(self) -> int:
        return len(self._commands)
