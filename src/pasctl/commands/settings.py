"""Settings commands: set, config, clear, history."""

from __future__ import annotations

import logging
import sys
from typing import Callable, List, Optional

from rich.console import Console

from pasctl.commands.base import dispatch_subcommand, parse_bool
from pasctl.config import AUTH_METHODS, OUTPUT_FORMATS
from pasctl.errors import ConfigError, ParseError
from pasctl.output.formatter import OutputFormat, print_info, print_success, print_warning
from pasctl.shell.context import ExecutionContext

logger = logging.getLogger(__name__)


class SetCommand:
    """Change options of the running shell."""

    name = "set"
    description = "Set session options"
    usage = """set <option> <value>

Options:
  output <format>       Set output format: table, json, yaml

Examples:
  set output json
  set output table
  set output yaml
"""
    subcommands = ["output"]

    def execute(self, ctx: ExecutionContext, args: List[str]) -> None:
        """Apply a shell option such as the output format."""
        dispatch_subcommand(self.name, self.usage, {
            "output": lambda rest: self._set_output(ctx, rest),
        }, args)

    def _set_output(self, ctx: ExecutionContext, args: List[str]) -> None:
        if not args:
            raise ParseError("output format required: table, json, or yaml")
        try:
            ctx.formatter.set_format(args[0])
        except ValueError as e:
            raise ParseError(str(e)) from e
        print_success(f"Output format set to: {ctx.formatter.get_format().value}")


class ConfigCommand:
    """Show or change the persistent configuration."""

    name = "config"
    description = "View or modify configuration"
    usage = """config [option] [value]

View current configuration or set a specific option.

Options:
  default-server <url>   Set default server URL
  default-user <name>    Set default username
  default-auth <method>  Set default auth method (cyberark, ldap, radius, windows)
  output <format>        Set default output format (table, json, yaml)
  history-size <n>       Set history size
  insecure-ssl <bool>    Enable/disable SSL verification
  timeout <seconds>      Set request timeout

Examples:
  config                           Show all settings
  config default-server https://pam.example.com
  config default-auth ldap
  config output json
  config insecure-ssl true
"""
    subcommands = [
        "default-server", "default-user", "default-auth", "output",
        "history-size", "insecure-ssl", "timeout",
    ]

    def execute(self, ctx: ExecutionContext, args: List[str]) -> None:
        """Show all settings, or set one and save the config file.

        Raises:
            ParseError: If the option or value is invalid
        """
        if not args:
            self._show(ctx)
            return
        if len(args) < 2:
            raise ParseError(f"value required for option: {args[0]}")

        option, value = args[0], args[1]
        config = ctx.config

        if option == "default-server":
            config.default_server = value
        elif option == "default-user":
            config.default_user = value
        elif option == "default-auth":
            if value.lower() not in AUTH_METHODS:
                raise ParseError(f"invalid auth method: {value}")
            config.default_auth_type = value.lower()
        elif option == "output":
            if value.lower() not in OUTPUT_FORMATS:
                raise ParseError(f"invalid output format: {value}")
            config.output_format = value.lower()
        elif option == "history-size":
            config.history_size = self._parse_positive(value, "history size")
        elif option == "insecure-ssl":
            config.insecure_ssl = parse_bool(value)
        elif option == "timeout":
            config.timeout_seconds = self._parse_positive(value, "timeout")
        else:
            raise ParseError(f"unknown option: {option}")

        try:
            config.save()
        except ConfigError as e:
            print_warning(f"Config saved to memory but failed to write to disk: {e}")
        else:
            print_success(f"Config updated: {option} = {value}")

    @staticmethod
    def _parse_positive(value: str, label: str) -> int:
        try:
            number = int(value)
        except ValueError:
            raise ParseError(f"invalid {label}: {value}") from None
        if number <= 0:
            raise ParseError(f"invalid {label}: {value}")
        return number

    def _show(self, ctx: ExecutionContext) -> None:
        config = ctx.config
        if ctx.formatter.get_format() != OutputFormat.TABLE:
            ctx.formatter.format(config.to_dict())
            return

        print()
        print("  Configuration")
        print()
        print(f"  Default Server:   {config.default_server or '(not set)'}")
        print(f"  Default User:     {config.default_user or '(not set)'}")
        print(f"  Default Auth:     {config.default_auth_type}")
        print(f"  Output Format:    {config.output_format}")
        print(f"  History Size:     {config.history_size}")
        print(f"  Insecure SSL:     {'Yes' if config.insecure_ssl else 'No'}")
        print(f"  Timeout:          {config.timeout_seconds}s")
        if config.is_ccp_enabled():
            print(f"  CCP Login:        {config.ccp.app_id}@{config.get_ccp_url() or '(no CCP URL)'}")
        print()


class ClearCommand:
    """Clear the terminal."""

    name = "clear"
    description = "Clear the screen"
    usage = "clear\n\nClear the terminal screen."

    def execute(self, ctx: ExecutionContext, args: List[str]) -> None:
        Console(file=sys.stdout).clear()


class HistoryCommand:
    """Show previously entered command lines."""

    name = "history"
    description = "Show command history"
    usage = """history [n]

Show command history. Optionally specify number of recent commands to show.

Examples:
  history        Show all history
  history 10     Show last 10 commands
"""

    def __init__(self, history_provider: Optional[Callable[[], List[str]]] = None):
        """Initialize history command.

        Args:
            history_provider: Callable returning past command lines, oldest first
        """
        self.history_provider = history_provider

    def execute(self, ctx: ExecutionContext, args: List[str]) -> None:
        """Print the whole history or its last n entries."""
        if self.history_provider is None:
            raise ParseError("history not available")

        history = self.history_provider()
        if not history:
            print_info("No command history")
            return

        limit = len(history)
        if args:
            try:
                n = int(args[0])
            except ValueError:
                n = 0
            if 0 < n < limit:
                limit = n

        start = len(history) - limit
        print()
        for i in range(start, len(history)):
            print(f"  {i + 1:4d}  {history[i]}")
        print()
