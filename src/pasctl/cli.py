from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pasctl import __version__
from pasctl.config import load_config
from pasctl.shell import Shell, read_lines, run_command, run_repl, run_script

logger = logging.getLogger(__name__)

HELP_EPILOG = """Interactive Mode:
  Run 'pasctl' without arguments to enter interactive mode.
  Type 'help' for available commands.

Examples:
  pasctl                                       # Start interactive shell
  pasctl -c "accounts list"                    # Run single command
  pasctl --script=setup.txt                    # Run commands from file
  echo "accounts list --safe=Prod" | pasctl    # Pipe commands

Configuration:
  Config file: ~/.pasctl/config.json
  History file: ~/.pasctl_history

Environment Variables:
  PASCTL_SERVER   Default server URL
  PASCTL_USER     Default username
  PASCTL_AUTH     Default auth method (cyberark, ldap, radius, windows)
"""


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging.

    The shell prints its own output, so only warnings are logged by default.

    Args:
        verbose: Enable debug logging
        quiet: Only log errors
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog='pasctl',
        description="pasctl - PAM Interactive Shell",
        epilog=HELP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False
    )

    modes = parser.add_argument_group('Modes').add_mutually_exclusive_group()
    modes.add_argument(
        '-c',
        dest='command',
        metavar='COMMAND',
        help='Execute a single command and exit'
    )
    modes.add_argument(
        '--script',
        type=Path,
        metavar='FILE',
        help='Execute commands from a script file'
    )

    general = parser.add_argument_group('General Options')
    general.add_argument(
        '--config',
        type=Path,
        default=None,
        help='Path to configuration file (default: ~/.pasctl/config.json)'
    )
    general.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose (debug) logging'
    )
    general.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Only log errors'
    )
    general.add_argument(
        '--version',
        action='store_true',
        help='Show version information'
    )
    general.add_argument(
        '--help', '-h',
        action='store_true',
        help='Show this help message'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Args:
        argv: Command-line arguments (default: sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return 0 if e.code == 0 else 1

    if args.version:
        print(f"pasctl version {__version__}")
        return 0

    if args.help:
        parser.print_help()
        return 0

    setup_logging(args.verbose, args.quiet)

    config = load_config(args.config)
    config.apply_env()
    config = config.validate_settings()

    shell = Shell(config=config)

    if args.command is not None:
        return 0 if run_command(args.command, shell) else 1

    if args.script is not None:
        try:
            ok = run_script(args.script, shell)
        except OSError as e:
            print(f"Error reading script: {e}", file=sys.stderr)
            return 1
        return 0 if ok else 1

    if not sys.stdin.isatty():
        logger.debug("Reading commands from piped input")
        with shell:
            return 0 if shell.run_script(read_lines(sys.stdin)) else 1

    run_repl(shell)
    return 0
