"""Session commands: connect, disconnect, status."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List

from pasctl.api import client
from pasctl.api.session import AuthMethod
from pasctl.commands.base import format_duration, prompt, prompt_password
from pasctl.errors import APIError, ParseError, PasctlError
from pasctl.output.formatter import OutputFormat, print_info, print_success, print_warning
from pasctl.shell.context import ExecutionContext, require_session
from pasctl.shell.parser import extract_flags

logger = logging.getLogger(__name__)


class ConnectCommand:
    """Log on to a server and fill the shell's session."""

    name = "connect"
    description = "Connect to a PAM server"
    usage = """connect <server-url> [options]

Connect and authenticate to a PAM server.

Arguments:
  server-url          The server URL (e.g., https://pam.example.com)

Options:
  --user=USERNAME     Username for authentication
  --auth=METHOD       Authentication method: cyberark, ldap, radius, windows (default: cyberark)
  --insecure          Skip TLS certificate verification

Examples:
  connect https://pam.example.com
  connect https://pam.example.com --user=admin --auth=ldap
  connect https://pam.example.com --insecure
"""

    def execute(self, ctx: ExecutionContext, args: List[str]) -> None:
        """Connect to the server given as argument or configured as default.

        Raises:
            ParseError: If the server, user or options are invalid
            APIError: If authentication fails
        """
        if ctx.session is None:
            raise PasctlError("no session available in this shell")
        if ctx.session.is_valid():
            raise PasctlError("already connected - use 'disconnect' first")

        flags, positional = extract_flags(args)
        unknown = set(flags) - {'user', 'auth', 'insecure'}
        if unknown:
            raise ParseError(f"unknown option: {sorted(unknown)[0]}")

        server = positional[0] if positional else ctx.config.default_server
        if not server:
            raise ParseError("server URL required")
        server = client.normalize_url(server)

        username = flags.get('user') or ctx.config.default_user or prompt("Username")
        if not username:
            raise ParseError("username required")
        password = prompt_password()

        auth = AuthMethod.parse(flags.get('auth') or ctx.config.default_auth_type)
        insecure = flags.get('insecure', '').lower() == 'true' or ctx.config.insecure_ssl

        options = client.SessionOptions(
            base_url=server,
            username=username,
            password=password,
            auth_method=auth,
            timeout=float(ctx.config.timeout_seconds),
            verify_tls=not insecure,
        )

        print_info(f"Connecting to {server}...")
        try:
            session = client.open_session(ctx.scope, options)
        except APIError as e:
            raise APIError(f"authentication failed: {e}", status_code=e.status_code) from e

        ctx.session.replace(session)
        print_success(f"Connected to {server} as {username}")


class DisconnectCommand:
    """Log off and clear the shell's session."""

    name = "disconnect"
    description = "Disconnect from the current server"
    usage = """disconnect

Close the current session and disconnect from the server.

Examples:
  disconnect
"""

    def execute(self, ctx: ExecutionContext, args: List[str]) -> None:
        """Close the current session; a failed logoff is only a warning."""
        session = require_session(ctx)

        try:
            client.close_session(ctx.scope, session)
        except APIError as e:
            print_warning(f"Session close failed: {e}")

        session.clear()
        print_success("Session closed")


class StatusCommand:
    """Show whether the shell is connected, and to what."""

    name = "status"
    description = "Show connection status"
    usage = """status

Display information about the current connection status.

Examples:
  status
"""

    def execute(self, ctx: ExecutionContext, args: List[str]) -> None:
        """Print the connection status."""
        session = ctx.session
        connected = session is not None and session.is_valid()

        status = {"connected": connected}
        if connected:
            age = (datetime.now() - session.start_time).total_seconds() if session.start_time else 0
            status.update({
                "server": session.base_uri,
                "user": session.user,
                "auth_method": session.auth_method.value,
                "session_age": format_duration(age),
            })
            if session.external_version:
                status["version"] = session.external_version

        if ctx.formatter.get_format() != OutputFormat.TABLE:
            ctx.formatter.format(status)
            return

        print()
        print(f"  Connected:    {'Yes' if connected else 'No'}")
        if connected:
            print(f"  Server:       {status['server']}")
            print(f"  User:         {status['user']}")
            print(f"  Auth Method:  {status['auth_method']}")
            print(f"  Session Age:  {status['session_age']}")
            if "version" in status:
                print(f"  Version:      {status['version']}")
        print()
