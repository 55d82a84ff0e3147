"""Execution context for shell commands.

The shell owns the session, configuration and formatter for its whole
lifetime. Each command invocation receives a fresh :class:`ExecutionContext`
that references them, so commands can read and update shared state without
any module-level globals.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from pasctl.errors import CancelledError, NotConnectedError

if TYPE_CHECKING:
    from pasctl.api.session import Session
    from pasctl.config import Config
    from pasctl.output.formatter import OutputFormatter

logger = logging.getLogger(__name__)


class CancellationScope:
    """Cancellable scope shared by every command of one shell.

    Created when the shell starts and cancelled once when it shuts down.
    """

    def __init__(self):
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        """Whether the scope has been cancelled."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Cancel the scope. Calling it again has no effect."""
        if not self._event.is_set():
            logger.debug("Execution scope cancelled")
        self._event.set()

    def raise_if_cancelled(self) -> None:
        """Raise CancelledError if the scope has been cancelled."""
        if self._event.is_set():
            raise CancelledError("operation cancelled - shell is shutting down")


@dataclass(frozen=True)
class ExecutionContext:
    """References passed to a command for a single invocation.

    Commands must not keep the context after ``execute`` returns.

    Attributes:
        scope: Cancellation scope of the shell
        session: Session owned by the shell (None if the shell has none)
        config: Configuration owned by the shell
        formatter: Output formatter shared by all commands
    """

    scope: CancellationScope
    session: Optional[Session]
    config: Config
    formatter: OutputFormatter


def require_session(ctx: ExecutionContext) -> Session:
    """Ensure the context carries a valid session.

    Args:
        ctx: Execution context

    Returns:
        The valid session

    Raises:
        NotConnectedError: If there is no session or it is not valid
    """
    if ctx.session is None or not ctx.session.is_valid():
        raise NotConnectedError()
    return ctx.session
