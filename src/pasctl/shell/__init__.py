"""Shell module for the pasctl interactive CLI.

Provides the line tokenizer, command registry, execution context and the
REPL that ties them together.
"""

from __future__ import annotations

from pasctl.shell.context import CancellationScope, ExecutionContext, require_session
from pasctl.shell.parser import extract_flags, join_args, split_command, tokenize
from pasctl.shell.registry import Command, CommandRegistry, SubcommandProvider
from pasctl.shell.repl import Shell, read_lines, read_script, run_command, run_repl, run_script

__all__ = [
    "Shell",
    "Command",
    "SubcommandProvider",
    "CommandRegistry",
    "CancellationScope",
    "ExecutionContext",
    "require_session",
    "tokenize",
    "extract_flags",
    "join_args",
    "split_command",
    "read_lines",
    "read_script",
    "run_repl",
    "run_command",
    "run_script",
]
