"""Shared fixtures for pasctl tests."""

import io
from datetime import datetime
from unittest.mock import Mock

import pytest

from pasctl.api import client
from pasctl.api.models import Account, AccountList
from pasctl.api.session import Session
from pasctl.config import Config
from pasctl.output.formatter import OutputFormatter
from pasctl.shell.context import CancellationScope, ExecutionContext


@pytest.fixture
def config(tmp_path):
    """Default configuration stored in a temporary directory."""
    cfg = Config()
    cfg.path = tmp_path / "config.json"
    return cfg


@pytest.fixture
def formatter():
    """Table formatter writing to a buffer."""
    return OutputFormatter(stream=io.StringIO(), width=200)


@pytest.fixture
def session():
    """Connected session that never touches the network."""
    return Session(
        base_uri="https://pam.example.com",
        user="admin",
        token="token-123",
        start_time=datetime.now(),
    )


@pytest.fixture
def make_context(config, formatter):
    """Factory for execution contexts."""
    def factory(session=None):
        return ExecutionContext(
            scope=CancellationScope(),
            session=session if session is not None else Session(),
            config=config,
            formatter=formatter,
        )
    return factory


@pytest.fixture
def close_session(monkeypatch):
    """Replace logoff so closing a connected shell stays offline."""
    mock = Mock()
    monkeypatch.setattr(client, "close_session", mock)
    return mock


@pytest.fixture
def account_list():
    """Two accounts out of five matches."""
    return AccountList(
        value=[
            Account(id="12_1", userName="admin", address="db01", platformId="WinDomain",
                    safeName="Prod"),
            Account(id="12_2", userName="svc_backup", address="db02", platformId="UnixSSH",
                    safeName="Prod"),
        ],
        count=5,
    )
