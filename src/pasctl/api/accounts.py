"""Account operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict
from urllib.parse import quote

from pasctl.api import client
from pasctl.api.models import Account, AccountList
from pasctl.api.session import Session
from pasctl.errors import APIError

if TYPE_CHECKING:
    from pasctl.shell.context import CancellationScope

logger = logging.getLogger(__name__)


@dataclass
class ListOptions:
    """Filters for listing accounts."""

    safe_name: str = ""
    search: str = ""
    limit: int = 25
    offset: int = 0

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {"limit": self.limit, "offset": self.offset}
        if self.search:
            params["search"] = self.search
        if self.safe_name:
            params["filter"] = f"safeName eq {self.safe_name}"
        return params


def _require_id(account_id: str) -> str:
    if not account_id:
        raise APIError("account ID is required")
    return quote(account_id, safe="")


def list_accounts(scope: CancellationScope, session: Session, options: ListOptions) -> AccountList:
    """List accounts matching the given filters."""
    result = client.request(scope, session, "GET", "/Accounts", params=options.to_params())
    return AccountList.model_validate(result or {})


def get_account(scope: CancellationScope, session: Session, account_id: str) -> Account:
    """Get a single account by ID."""
    path = f"/Accounts/{_require_id(account_id)}"
    return Account.model_validate(client.request(scope, session, "GET", path) or {})


def delete_account(scope: CancellationScope, session: Session, account_id: str) -> None:
    """Delete an account by ID."""
    client.request(scope, session, "DELETE", f"/Accounts/{_require_id(account_id)}")
    logger.info(f"Deleted account {account_id}")
