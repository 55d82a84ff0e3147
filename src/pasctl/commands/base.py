"""Helpers shared by shell commands."""

from __future__ import annotations

import argparse
import logging
from typing import Any, Callable, Dict, List, NoReturn, Optional

from rich.prompt import Confirm, Prompt

from pasctl.errors import ParseError
from pasctl.output.formatter import print_warning

logger = logging.getLogger(__name__)


class _HelpShown(Exception):
    """Raised internally after a parser printed its help."""


class CommandArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports errors instead of exiting.

    Options are registered with both ``--name`` and ``-name`` spellings so
    that ``accounts list -safe=Prod`` and ``--safe=Prod`` behave the same.
    """

    def __init__(self, prog: str, **kwargs: Any):
        kwargs.setdefault('allow_abbrev', False)
        super().__init__(prog=prog, **kwargs)

    def add_flag(self, name: str, **kwargs: Any) -> argparse.Action:
        """Add an option accepted as --name and -name."""
        return self.add_argument(f'--{name}', f'-{name}', **kwargs)

    def parse(self, args: List[str]) -> Optional[argparse.Namespace]:
        """Parse arguments.

        Returns:
            Parsed namespace, or None if help was requested and printed

        Raises:
            ParseError: If the arguments are invalid
        """
        try:
            return self.parse_args(args)
        except _HelpShown:
            return None

    def error(self, message: str) -> NoReturn:
        raise ParseError(f"{self.prog}: {message}")

    def exit(self, status: int = 0, message: Optional[str] = None) -> NoReturn:
        if status:
            raise ParseError((message or f"{self.prog}: invalid arguments").strip())
        raise _HelpShown()


def dispatch_subcommand(
    command_name: str,
    usage: str,
    handlers: Dict[str, Callable[[List[str]], None]],
    args: List[str],
) -> None:
    """Route to a subcommand handler by the first argument.

    Prints the usage text when no subcommand is given.

    Raises:
        ParseError: If the subcommand is unknown
    """
    if not args:
        print(usage)
        return

    handler = handlers.get(args[0])
    if handler is None:
        raise ParseError(f"unknown subcommand: {args[0]} (see 'help {command_name}')")
    handler(args[1:])


def prompt(message: str) -> str:
    """Read a line of input from the user."""
    return Prompt.ask(message).strip()


def prompt_password(message: str = "Password") -> str:
    """Read a password without echoing it."""
    return Prompt.ask(message, password=True)


def confirm(message: str) -> bool:
    """Ask a yes/no question; no answer counts as no."""
    try:
        return Confirm.ask(message, default=False)
    except EOFError:
        print_warning("No confirmation received")
        return False


def parse_bool(value: str) -> bool:
    """Parse a boolean setting value.

    Raises:
        ParseError: If the value is not a recognized boolean
    """
    lowered = value.strip().lower()
    if lowered in ('true', 'yes', '1'):
        return True
    if lowered in ('false', 'no', '0'):
        return False
    raise ParseError(f"invalid boolean value: {value}")


def format_duration(seconds: float) -> str:
    """Format a duration as 1h2m3s, 2m3s or 3s."""
    total = int(round(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m{secs}s"
    return f"{secs}s"
