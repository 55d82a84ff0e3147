"""Exception hierarchy for pasctl.

Every error raised while a command runs is caught at the shell's dispatch
point and reported as a single line, so the message of each exception should
read well on its own.
"""

from __future__ import annotations

from typing import Optional


class PasctlError(Exception):
    """Base class for all pasctl errors."""


class ParseError(PasctlError):
    """Raised when command arguments cannot be parsed."""


class UnknownCommandError(PasctlError):
    """Raised when a command name is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown command: {name} (type 'help' for available commands)")


class NotConnectedError(PasctlError):
    """Raised when a command needs a session and none is active."""

    def __init__(self, message: str = "not connected - use 'connect' first"):
        super().__init__(message)


class APIError(PasctlError):
    """Raised when a call to the PAM REST API fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class RenderError(PasctlError):
    """Raised when a value cannot be encoded as JSON or YAML."""


class CancelledError(PasctlError):
    """Raised when work is attempted after the shell scope was cancelled."""


class ConfigError(PasctlError):
    """Raised when the configuration file cannot be written."""
