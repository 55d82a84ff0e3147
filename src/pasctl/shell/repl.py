"""REPL (Read-Eval-Print Loop) for the pasctl shell.

Runs commands interactively, from a script file, from piped input or as a
single command. Every mode goes through :meth:`Shell.dispatch`, the single
place where command errors are reported.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import IO, Callable, Iterable, List, Optional, Union

from pasctl.api import client
from pasctl.api.session import Session
from pasctl.commands import register_default_commands
from pasctl.config import Config, history_path
from pasctl.errors import PasctlError, UnknownCommandError
from pasctl.output.formatter import OutputFormatter
from pasctl.shell.context import CancellationScope, ExecutionContext
from pasctl.shell.parser import tokenize
from pasctl.shell.registry import CommandRegistry

logger = logging.getLogger(__name__)

try:
    import readline
    HAS_READLINE = True
except ImportError:
    HAS_READLINE = False
    logger.debug("readline not available - command history disabled")

PROMPT = "pasctl> "
EXIT_COMMANDS = ("exit", "quit")


class Shell:
    """Interactive shell for the PAM backend.

    Owns the session, configuration, formatter and cancellation scope for
    its whole lifetime and hands references to them to every command.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        formatter: Optional[OutputFormatter] = None,
        registry: Optional[CommandRegistry] = None,
        session: Optional[Session] = None,
        read_line: Optional[Callable[[str], str]] = None,
        history_file: Optional[Path] = None,
    ):
        """Initialize shell.

        Args:
            config: Configuration (defaults if None)
            formatter: Output formatter (created from config.output_format if None)
            registry: Command registry (built-in commands if None)
            session: Session object to own (empty if None)
            read_line: Line reader for interactive mode (default: input)
            history_file: Readline history file (default: ~/.pasctl_history)
        """
        self.config = config or Config()
        self.formatter = formatter or OutputFormatter(self.config.output_format)
        self.session = session or Session()
        self.scope = CancellationScope()
        if registry is None:
            registry = register_default_commands(CommandRegistry(), self.get_history)
        self.registry = registry
        self.history_file = history_file or history_path()
        self.running = False

        self._read_line = read_line or input
        self._use_readline = HAS_READLINE and read_line is None
        self._readline_ready = False
        self._history: List[str] = []
        self._closed = False

    @property
    def prompt(self) -> str:
        """Prompt showing the user while connected."""
        if self.session.is_valid():
            return f"{self.session.user}@{PROMPT}"
        return PROMPT

    def new_context(self) -> ExecutionContext:
        """Build the execution context for one command invocation."""
        return ExecutionContext(
            scope=self.scope,
            session=self.session,
            config=self.config,
            formatter=self.formatter,
        )

    def execute(self, line: str) -> None:
        """Execute a single line.

        Args:
            line: Command line

        Raises:
            UnknownCommandError: If the command is not registered
            Exception: Whatever the command raises
        """
        args = tokenize(line.strip())
        if not args:
            return

        name, command_args = args[0], args[1:]
        command = self.registry.get(name)
        if command is None:
            raise UnknownCommandError(name)

        logger.debug(f"Executing {name} with {len(command_args)} argument(s)")
        command.execute(self.new_context(), command_args)

    def dispatch(self, line: str) -> bool:
        """Execute a line and report any error on a single line.

        Args:
            line: Command line

        Returns:
            True if the command succeeded
        """
        try:
            self.execute(line)
            return True
        except Exception as e:
            logger.debug("Command failed", exc_info=True)
            print(f"Error: {e}", file=sys.stderr)
            return False

    def run(self) -> None:
        """Run the interactive loop until exit, quit or end of input."""
        self.running = True
        if self._use_readline:
            self._setup_readline()
        self._print_welcome()

        try:
            while self.running:
                try:
                    line = self._read_line(self.prompt)
                except EOFError:
                    # Ctrl+D
                    print()
                    break
                except KeyboardInterrupt:
                    # Ctrl+C
                    print()
                    print("Use 'exit' to quit")
                    continue

                line = line.strip()
                if not line:
                    continue

                if line in EXIT_COMMANDS:
                    self.close()
                    print("Goodbye!")
                    break

                if not self._readline_ready:
                    self._history.append(line)

                try:
                    self.dispatch(line)
                except KeyboardInterrupt:
                    print()
                    print("Interrupted")
        finally:
            self.running = False
            self._save_history()
            self.close()

    def run_script(self, lines: Iterable[str]) -> bool:
        """Run commands in order, stopping at the first failure.

        Blank lines and lines starting with '#' are skipped. 'exit' or
        'quit' ends the script successfully.

        Args:
            lines: Command lines

        Returns:
            True if every command succeeded
        """
        for line in lines:
            line = line.strip()
            if not line or line.startswith('#'):
                continue

            print(f"{PROMPT}{line}")
            if line in EXIT_COMMANDS:
                logger.debug("Script stopped by exit command")
                return True

            if not self.dispatch(line):
                return False

        return True

    def run_command(self, line: str) -> bool:
        """Run a single command.

        Returns:
            True if the command succeeded
        """
        return self.dispatch(line)

    def close(self) -> None:
        """Close an active session and cancel the execution scope.

        Safe to call more than once.
        """
        if self._closed:
            return
        self._closed = True

        if self.session.is_valid():
            try:
                client.close_session(self.scope, self.session)
            except PasctlError as e:
                logger.warning(f"Failed to close session: {e}")
            self.session.clear()

        self.scope.cancel()

    def get_history(self) -> List[str]:
        """Get past command lines, oldest first."""
        if self._readline_ready:
            length = readline.get_current_history_length()
            items = (readline.get_history_item(i) for i in range(1, length + 1))
            return [item for item in items if item]
        return list(self._history)

    def completions(self, buffer: str, text: str) -> List[str]:
        """Get tab completions for the word being typed.

        Args:
            buffer: Whole input line so far
            text: Word being completed

        Returns:
            Matching command or subcommand names
        """
        words = buffer.split()
        completing_first = not words or (len(words) == 1 and not buffer.endswith(' '))
        completing_second = (
            (len(words) == 1 and buffer.endswith(' '))
            or (len(words) == 2 and not buffer.endswith(' '))
        )

        if completing_first:
            candidates = self.registry.names() + list(EXIT_COMMANDS)
        elif completing_second:
            candidates = self.registry.subcommands(words[0])
        else:
            candidates = []

        return sorted(c for c in candidates if c.startswith(text))

    def __enter__(self) -> Shell:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _setup_readline(self) -> None:
        """Setup readline for command history and completion."""
        try:
            readline.read_history_file(str(self.history_file))
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.debug(f"Could not read history file: {e}")

        readline.set_history_length(self.config.history_size)

        def completer(text: str, state: int) -> Optional[str]:
            matches = self.completions(readline.get_line_buffer(), text)
            try:
                return matches[state] + ' '
            except IndexError:
                return None

        readline.set_completer(completer)
        readline.set_completer_delims(" \t\n")
        readline.parse_and_bind("tab: complete")
        self._readline_ready = True

    def _save_history(self) -> None:
        if not self._readline_ready:
            return
        try:
            readline.write_history_file(str(self.history_file))
        except OSError as e:
            logger.debug(f"Could not write history file: {e}")

    def _print_welcome(self) -> None:
        print()
        print("pasctl - PAM Interactive Shell")
        print()
        print("Type 'help' for available commands, 'exit' to quit")
        print()


def read_lines(stream: IO[str]) -> List[str]:
    """Read command lines, dropping blank lines and '#' comments."""
    lines = []
    for line in stream:
        line = line.strip()
        if line and not line.startswith('#'):
            lines.append(line)
    return lines


def read_script(path: Union[str, Path]) -> List[str]:
    """Read command lines from a script file.

    Raises:
        OSError: If the file cannot be read
    """
    with open(path) as f:
        return read_lines(f)


def run_repl(shell: Optional[Shell] = None) -> None:
    """Run the interactive shell."""
    (shell or Shell()).run()


def run_script(path: Union[str, Path], shell: Optional[Shell] = None) -> bool:
    """Run commands from a script file.

    Returns:
        True if every command succeeded
    """
    shell = shell or Shell()
    with shell:
        return shell.run_script(read_script(path))


def run_command(command: str, shell: Optional[Shell] = None) -> bool:
    """Run a single command non-interactively.

    Returns:
        True if the command succeeded
    """
    shell = shell or Shell()
    with shell:
        return shell.run_command(command)
