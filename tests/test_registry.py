"""Tests for the command registry."""

from typing import List

from pasctl.commands import register_default_commands
from pasctl.shell.registry import Command, CommandRegistry, SubcommandProvider


class EchoCommand:
    """Minimal command used by the tests."""

    description = "Echo arguments"
    usage = "echo [args...]"

    def __init__(self, name: str = "echo"):
        self.name = name
        self.calls: List[List[str]] = []

    def execute(self, ctx, args: List[str]) -> None:
        self.calls.append(args)


class GroupCommand(EchoCommand):
    subcommands = ["start", "stop"]


class TestCommandRegistry:
    """Test registering and looking up commands."""

    def test_get_registered(self):
        """Test exact lookup of a registered command."""
        registry = CommandRegistry()
        command = EchoCommand()
        registry.register(command)

        assert registry.get("echo") is command
        assert "echo" in registry
        assert len(registry) == 1

    def test_get_missing(self):
        """Test that a missing or partial name is not found."""
        registry = CommandRegistry()
        registry.register(EchoCommand())

        assert registry.get("ech") is None
        assert registry.get("nothing") is None
        assert "nothing" not in registry

    def test_names_sorted(self):
        """Test that names are listed in lexicographic order."""
        registry = CommandRegistry()
        for name in ("zeta", "alpha", "mid"):
            registry.register(EchoCommand(name))

        assert registry.names() == ["alpha", "mid", "zeta"]
        assert [c.name for c in registry.commands()] == ["alpha", "mid", "zeta"]

    def test_register_replaces(self):
        """Test that registering the same name again replaces the command."""
        registry = CommandRegistry()
        first, second = EchoCommand(), EchoCommand()
        registry.register(first)
        registry.register(second)

        assert registry.get("echo") is second
        assert len(registry) == 1

    def test_subcommands(self):
        """Test subcommand lookup for completion."""
        registry = CommandRegistry()
        registry.register(GroupCommand("svc"))
        registry.register(EchoCommand())

        assert registry.subcommands("svc") == ["start", "stop"]
        assert registry.subcommands("echo") == []
        assert registry.subcommands("missing") == []

    def test_protocols(self):
        """Test that plain classes satisfy the command protocols."""
        assert isinstance(EchoCommand(), Command)
        assert isinstance(GroupCommand(), SubcommandProvider)
        assert not isinstance(EchoCommand(), SubcommandProvider)


class TestDefaultCommands:
    """Test the built-in command set."""

    def test_builtin_names(self):
        """Test that every built-in command is registered."""
        registry = register_default_commands(CommandRegistry())

        assert registry.names() == [
            "accounts", "clear", "config", "connect", "disconnect",
            "help", "history", "set", "status",
        ]

    def test_builtin_subcommands(self):
        """Test subcommands exposed by built-in commands."""
        registry = register_default_commands(CommandRegistry())

        assert registry.subcommands("accounts") == ["list", "get", "delete"]
        assert registry.subcommands("set") == ["output"]
        assert registry.subcommands("status") == []

    def test_builtin_commands_documented(self):
        """Test that every built-in command class has a docstring."""
        registry = register_default_commands(CommandRegistry())

        for command in registry.commands():
            assert type(command).__doc__, command.name
