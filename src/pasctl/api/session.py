"""Authenticated session handle.

The shell owns a single :class:`Session` for its whole lifetime. Connecting
fills it in place and disconnecting clears it, so every command sees the
same object through its execution context.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

import requests


class AuthMethod(str, Enum):
    """Authentication methods accepted by the logon endpoint."""

    CYBERARK = "cyberark"
    LDAP = "ldap"
    RADIUS = "radius"
    WINDOWS = "windows"

    @property
    def path_name(self) -> str:
        """Name used in the logon URL (e.g. /Auth/LDAP/Logon)."""
        return {
            AuthMethod.CYBERARK: "CyberArk",
            AuthMethod.LDAP: "LDAP",
            AuthMethod.RADIUS: "RADIUS",
            AuthMethod.WINDOWS: "Windows",
        }[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> AuthMethod:
        """Parse a method name; unknown or empty names map to CYBERARK."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.CYBERARK


@dataclass
class Session:
    """Connection to a PAM server.

    An empty session (no token) is not valid.
    """

    base_uri: str = ""
    user: str = ""
    auth_method: AuthMethod = AuthMethod.CYBERARK
    token: str = ""
    start_time: Optional[datetime] = None
    external_version: str = ""
    timeout: float = 30.0
    verify_tls: bool = True
    http: Optional[requests.Session] = field(default=None, repr=False, compare=False)

    def is_valid(self) -> bool:
        """Whether the session holds a logon token for a server."""
        return bool(self.token) and bool(self.base_uri)

    @property
    def api_url(self) -> str:
        """Base URL of the REST API."""
        return f"{self.base_uri.rstrip('/')}/PasswordVault/API"

    def replace(self, other: Session) -> None:
        """Take over the state of another session, in place."""
        self.close_transport()
        self.base_uri = other.base_uri
        self.user = other.user
        self.auth_method = other.auth_method
        self.token = other.token
        self.start_time = other.start_time
        self.external_version = other.external_version
        self.timeout = other.timeout
        self.verify_tls = other.verify_tls
        self.http = other.http

    def clear(self) -> None:
        """Reset to the empty, not-connected state."""
        self.replace(Session())

    def close_transport(self) -> None:
        if self.http is not None:
            self.http.close()
            self.http = None
