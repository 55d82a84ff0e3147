"""Configuration for pasctl.

Loads and saves ~/.pasctl/config.json. Missing settings take their defaults,
and invalid values are normalized to defaults instead of being rejected.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pasctl.errors import ConfigError

logger = logging.getLogger(__name__)

AUTH_METHODS = ('cyberark', 'ldap', 'radius', 'windows')
OUTPUT_FORMATS = ('table', 'json', 'yaml')

DEFAULT_AUTH_METHOD = 'cyberark'
DEFAULT_OUTPUT_FORMAT = 'table'
DEFAULT_HISTORY_SIZE = 1000
DEFAULT_TIMEOUT = 30

ENV_SERVER = 'PASCTL_SERVER'
ENV_USER = 'PASCTL_USER'
ENV_AUTH = 'PASCTL_AUTH'


def config_dir() -> Path:
    """Get the configuration directory (~/.pasctl)."""
    return Path.home() / ".pasctl"


def config_path() -> Path:
    """Get the configuration file path."""
    return config_dir() / "config.json"


def history_path() -> Path:
    """Get the command history file path."""
    return Path.home() / ".pasctl_history"


class CCPConfig(BaseModel):
    """Central Credential Provider settings for default login.

    Passwords are never stored; they are retrieved from CCP at runtime.
    """
    model_config = ConfigDict(extra='ignore')

    enabled: bool = False
    ccp_url: str = ""
    pvwa_url: str = ""
    app_id: str = ""
    safe: str = ""
    object: str = ""
    folder: str = ""
    username: str = ""
    address: str = ""
    query: str = ""
    auth_method: str = ""
    client_cert: str = ""
    client_key: str = ""


class Config(BaseModel):
    """Top-level pasctl configuration."""
    model_config = ConfigDict(extra='ignore', validate_assignment=True)

    default_server: str = ""
    default_user: str = ""
    default_auth_type: str = DEFAULT_AUTH_METHOD
    output_format: str = DEFAULT_OUTPUT_FORMAT
    history_size: int = DEFAULT_HISTORY_SIZE
    insecure_ssl: bool = False
    timeout_seconds: int = DEFAULT_TIMEOUT
    ccp: Optional[CCPConfig] = None

    # Source file; set by load_config
    path: Optional[Path] = Field(default=None, exclude=True)

    @field_validator('default_auth_type', mode='before')
    @classmethod
    def normalize_auth_type(cls, v: Any) -> str:
        """Fall back to the default auth method for unknown values."""
        value = str(v or '').strip().lower()
        if value not in AUTH_METHODS:
            if value:
                logger.warning(f"Unknown auth method '{v}', using '{DEFAULT_AUTH_METHOD}'")
            return DEFAULT_AUTH_METHOD
        return value

    @field_validator('output_format', mode='before')
    @classmethod
    def normalize_output_format(cls, v: Any) -> str:
        """Fall back to table output for unknown formats."""
        value = str(v or '').strip().lower()
        if value not in OUTPUT_FORMATS:
            if value:
                logger.warning(f"Unknown output format '{v}', using '{DEFAULT_OUTPUT_FORMAT}'")
            return DEFAULT_OUTPUT_FORMAT
        return value

    @field_validator('history_size', mode='before')
    @classmethod
    def normalize_history_size(cls, v: Any) -> int:
        """Non-positive or non-numeric sizes become the default."""
        return _positive_int(v, DEFAULT_HISTORY_SIZE)

    @field_validator('timeout_seconds', mode='before')
    @classmethod
    def normalize_timeout(cls, v: Any) -> int:
        """Non-positive or non-numeric timeouts become the default."""
        return _positive_int(v, DEFAULT_TIMEOUT)

    def is_ccp_enabled(self) -> bool:
        """Check if CCP default login is configured and enabled."""
        return (
            self.ccp is not None
            and self.ccp.enabled
            and bool(self.ccp.app_id)
            and bool(self.ccp.safe)
        )

    def get_ccp_url(self) -> str:
        """Get the CCP URL (empty if not configured)."""
        if self.ccp is not None and self.ccp.ccp_url:
            return self.ccp.ccp_url
        return ""

    def get_pvwa_url(self) -> str:
        """Get the PVWA URL for CCP login, falling back to the default server."""
        if self.ccp is not None and self.ccp.pvwa_url:
            return self.ccp.pvwa_url
        return self.default_server

    def get_ccp_auth_method(self) -> str:
        """Get the auth method for CCP login."""
        if self.ccp is not None and self.ccp.auth_method:
            return self.ccp.auth_method
        return self.default_auth_type

    def validate_settings(self) -> Config:
        """Re-apply normalization to every field.

        Returns:
            A normalized copy of this configuration
        """
        normalized = Config.model_validate(self.to_dict())
        normalized.path = self.path
        return normalized

    def apply_env(self, environ: Optional[Dict[str, str]] = None) -> None:
        """Override defaults from PASCTL_SERVER, PASCTL_USER and PASCTL_AUTH.

        Args:
            environ: Environment mapping (default: os.environ)
        """
        environ = os.environ if environ is None else environ

        if environ.get(ENV_SERVER):
            self.default_server = environ[ENV_SERVER]
        if environ.get(ENV_USER):
            self.default_user = environ[ENV_USER]
        if environ.get(ENV_AUTH):
            self.default_auth_type = environ[ENV_AUTH]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return self.model_dump(mode='json', exclude_none=True)

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Write the configuration file.

        Args:
            path: Target file (default: the loaded path or ~/.pasctl/config.json)

        Returns:
            Path written

        Raises:
            ConfigError: If the file cannot be written
        """
        target = Path(path) if path else (self.path or config_path())
        try:
            target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
            fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w") as f:
                f.write(json.dumps(self.to_dict(), indent=2) + "\n")
            # Existing files keep their old mode on open
            target.chmod(0o600)
        except OSError as e:
            raise ConfigError(f"failed to write config {target}: {e}") from e

        logger.debug(f"Saved configuration to {target}")
        return target


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def default_config() -> Config:
    """Get the default configuration."""
    return Config()


def load_config(path: Optional[Union[str, Path]] = None) -> Config:
    """Load configuration from disk.

    A missing file yields the defaults. An unreadable or malformed file is
    logged and also yields the defaults.

    Args:
        path: Config file (default: ~/.pasctl/config.json)

    Returns:
        Loaded configuration
    """
    config_file = Path(path) if path else config_path()

    if not config_file.exists():
        logger.debug(f"No configuration file at {config_file}, using defaults")
        config = default_config()
        config.path = config_file
        return config

    try:
        raw = json.loads(config_file.read_text())
        if not isinstance(raw, dict):
            raise ValueError("top-level value must be an object")
        config = Config.model_validate(raw)
    except (OSError, ValueError, ValidationError) as e:
        logger.warning(f"Could not load config {config_file}: {e}")
        config = default_config()

    config.path = config_file
    return config
