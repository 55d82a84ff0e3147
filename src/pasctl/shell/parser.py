"""Parser for shell command lines.

Splits lines like: accounts list --safe="Prod Servers" --limit=10
into argument tokens, and separates flags from positional arguments.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

logger = logging.getLogger(__name__)

QUOTE_CHARS = ('"', "'")


def tokenize(line: str) -> List[str]:
    """Split a command line into arguments, respecting quotes.

    A span opened by a quote character is closed only by the same
    character; the other quote character inside it is kept literally.
    An unterminated quote runs to the end of the line.

    Args:
        line: Raw command line

    Returns:
        List of unquoted argument strings
    """
    args: List[str] = []
    current: List[str] = []
    in_quotes = False
    quote_char = None

    for char in line:
        if char in QUOTE_CHARS:
            if not in_quotes:
                in_quotes = True
                quote_char = char
            elif char == quote_char:
                in_quotes = False
                quote_char = None
            else:
                current.append(char)
        elif char.isspace():
            if in_quotes:
                current.append(char)
            elif current:
                args.append(''.join(current))
                current = []
        else:
            current.append(char)

    if in_quotes:
        logger.debug(f"Unterminated {quote_char} quote closed at end of line")

    if current:
        args.append(''.join(current))

    return args


def extract_flags(args: List[str]) -> Tuple[Dict[str, str], List[str]]:
    """Separate flags from positional arguments.

    ``--key=value`` and ``-key=value`` set ``key`` to ``value``; a flag
    without ``=`` is set to ``"true"``. The last occurrence of a key wins.

    Args:
        args: Tokenized arguments

    Returns:
        Tuple of (flags, positional arguments)
    """
    flags: Dict[str, str] = {}
    positional: List[str] = []

    for arg in args:
        if arg.startswith('--'):
            name = arg[2:]
        elif arg.startswith('-') and len(arg) > 1:
            name = arg[1:]
        else:
            positional.append(arg)
            continue

        if '=' in name:
            key, value = name.split('=', 1)
            flags[key] = value
        else:
            flags[name] = "true"

    return flags, positional


def join_args(args: List[str]) -> str:
    """Join arguments back into a command line.

    Arguments containing whitespace or quotes are double-quoted.
    """
    parts = []
    for arg in args:
        if any(c in arg for c in (' ', '\t', '"', "'")):
            arg = '"' + arg.replace('"', '\\"') + '"'
        parts.append(arg)
    return ' '.join(parts)


def split_command(line: str) -> Tuple[str, str, List[str]]:
    """Split a command line into command, subcommand and remaining args.

    Args:
        line: Raw command line

    Returns:
        Tuple of (command, subcommand, rest); missing parts are empty
    """
    args = tokenize(line)
    if not args:
        return "", "", []

    command = args[0]
    subcommand = args[1] if len(args) > 1 else ""
    return command, subcommand, args[2:]
