"""HTTP transport for the PAM REST API.

Thin wrapper around requests: builds URLs under /PasswordVault/API, adds the
session token, applies the configured timeout and turns transport or HTTP
failures into :class:`~pasctl.errors.APIError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Optional

import requests
import urllib3

from pasctl.api.session import AuthMethod, Session
from pasctl.errors import APIError

if TYPE_CHECKING:
    from pasctl.shell.context import CancellationScope

logger = logging.getLogger(__name__)


@dataclass
class SessionOptions:
    """Options for opening a session."""

    base_url: str
    username: str
    password: str
    auth_method: AuthMethod = AuthMethod.CYBERARK
    timeout: float = 30.0
    verify_tls: bool = True


def normalize_url(url: str) -> str:
    """Add an https:// scheme when the URL has none."""
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        url = "https://" + url
    return url.rstrip("/")


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("ErrorMessage", "Details", "message"):
            if body.get(key):
                return str(body[key])
    return response.reason or f"HTTP {response.status_code}"


def request(
    scope: CancellationScope,
    session: Session,
    method: str,
    path: str,
    params: Optional[Dict[str, Any]] = None,
    json_body: Any = None,
    authenticated: bool = True,
) -> Any:
    """Send a request and return the decoded JSON body.

    Args:
        scope: Shell cancellation scope
        session: Session providing base URL, token and TLS settings
        method: HTTP method
        path: Path below /PasswordVault/API
        params: Query parameters
        json_body: JSON request body
        authenticated: Whether to send the session token

    Returns:
        Decoded JSON, or None for empty responses

    Raises:
        APIError: If the request fails or returns an error status
        CancelledError: If the shell is shutting down
    """
    scope.raise_if_cancelled()

    if session.http is None:
        session.http = requests.Session()
        session.http.verify = session.verify_tls

    headers = {"Content-Type": "application/json"}
    if authenticated:
        headers["Authorization"] = session.token

    url = f"{session.api_url}{path}"
    logger.debug(f"{method} {url}")

    try:
        response = session.http.request(
            method,
            url,
            params=params,
            json=json_body,
            headers=headers,
            timeout=session.timeout,
        )
    except requests.RequestException as e:
        raise APIError(f"request to {session.base_uri} failed: {e}") from e

    if not response.ok:
        raise APIError(
            f"{method} {path} failed ({response.status_code}): {_error_message(response)}",
            status_code=response.status_code,
        )

    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as e:
        raise APIError(f"invalid JSON response from {path}") from e


def open_session(scope: CancellationScope, options: SessionOptions) -> Session:
    """Log on and return a new session.

    Args:
        scope: Shell cancellation scope
        options: Server, credentials and transport settings

    Returns:
        Valid session

    Raises:
        APIError: If logon fails
    """
    session = Session(
        base_uri=normalize_url(options.base_url),
        user=options.username,
        auth_method=options.auth_method,
        timeout=options.timeout,
        verify_tls=options.verify_tls,
    )
    if not options.verify_tls:
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    body = {"username": options.username, "password": options.password}
    try:
        result = request(
            scope, session, "POST", f"/Auth/{options.auth_method.path_name}/Logon",
            json_body=body, authenticated=False,
        )
    except APIError:
        session.close_transport()
        raise

    if isinstance(result, dict):
        token = result.get("CyberArkLogonResult", "")
    else:
        token = result or ""
    if not token:
        session.close_transport()
        raise APIError("logon returned an empty token")

    session.token = str(token)
    session.start_time = datetime.now()
    session.external_version = server_version(scope, session)
    logger.info(f"Logged on to {session.base_uri} as {session.user}")
    return session


def server_version(scope: CancellationScope, session: Session) -> str:
    """Get the server's external version, or an empty string if unknown."""
    try:
        result = request(scope, session, "GET", "/Server", authenticated=False)
    except APIError as e:
        logger.debug(f"Server version unavailable: {e}")
        return ""
    if isinstance(result, dict):
        return str(result.get("ExternalVersion", ""))
    return ""


def close_session(scope: CancellationScope, session: Session) -> None:
    """Log off the session.

    The transport is released even if logoff fails.

    Raises:
        APIError: If the logoff request fails
    """
    try:
        request(scope, session, "POST", "/Auth/Logoff")
        logger.info(f"Logged off from {session.base_uri}")
    finally:
        session.close_transport()
