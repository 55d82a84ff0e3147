"""Built-in shell commands."""

from __future__ import annotations

from typing import Callable, List, Optional

from pasctl.commands.accounts import AccountsCommand
from pasctl.commands.help import HelpCommand
from pasctl.commands.session import ConnectCommand, DisconnectCommand, StatusCommand
from pasctl.commands.settings import ClearCommand, ConfigCommand, HistoryCommand, SetCommand
from pasctl.shell.registry import CommandRegistry


def register_default_commands(
    registry: CommandRegistry,
    history_provider: Optional[Callable[[], List[str]]] = None
) -> CommandRegistry:
    """Register all built-in commands.

    Args:
        registry: Registry to fill
        history_provider: Source of past command lines for 'history'

    Returns:
        The same registry
    """
    # Session
    registry.register(ConnectCommand())
    registry.register(DisconnectCommand())
    registry.register(StatusCommand())

    # Resources
    registry.register(AccountsCommand())

    # Settings
    registry.register(SetCommand())
    registry.register(ConfigCommand())
    registry.register(ClearCommand())
    registry.register(HistoryCommand(history_provider))

    registry.register(HelpCommand(registry))
    return registry


__all__ = [
    "AccountsCommand",
    "ClearCommand",
    "ConfigCommand",
    "ConnectCommand",
    "DisconnectCommand",
    "HelpCommand",
    "HistoryCommand",
    "SetCommand",
    "StatusCommand",
    "register_default_commands",
]
