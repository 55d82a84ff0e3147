"""Client for the PAM REST API.

Only the operations the shell needs are implemented: logon, logoff, server
version and account list/get/delete.
"""

from __future__ import annotations

from pasctl.api.client import SessionOptions, close_session, open_session, request
from pasctl.api.models import Account, AccountList, SecretManagement
from pasctl.api.session import AuthMethod, Session

__all__ = [
    "Account",
    "AccountList",
    "AuthMethod",
    "SecretManagement",
    "Session",
    "SessionOptions",
    "close_session",
    "open_session",
    "request",
]
