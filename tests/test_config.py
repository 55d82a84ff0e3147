"""Tests for configuration loading, saving and normalization."""

import json
import os
import stat

import pytest

from pasctl.config import CCPConfig, Config, default_config, load_config
from pasctl.errors import ConfigError


class TestConfigDefaults:
    """Test default values and normalization."""

    def test_defaults(self):
        """Test the default configuration."""
        config = default_config()
        assert config.default_server == ""
        assert config.default_auth_type == "cyberark"
        assert config.output_format == "table"
        assert config.history_size == 1000
        assert config.timeout_seconds == 30
        assert config.insecure_ssl is False
        assert config.ccp is None

    def test_invalid_values_normalized(self):
        """Test that invalid values fall back to defaults."""
        config = Config(
            default_auth_type="kerberos",
            output_format="xml",
            history_size=0,
            timeout_seconds=-5,
        )
        assert config.default_auth_type == "cyberark"
        assert config.output_format == "table"
        assert config.history_size == 1000
        assert config.timeout_seconds == 30

    def test_values_lowercased(self):
        """Test that names are normalized to lower case."""
        config = Config(default_auth_type="LDAP", output_format="Json")
        assert config.default_auth_type == "ldap"
        assert config.output_format == "json"

    def test_assignment_normalized(self):
        """Test that assignments are normalized too."""
        config = Config()
        config.history_size = "abc"
        assert config.history_size == 1000

    def test_validate_settings_keeps_path(self, tmp_path):
        """Test that validating returns a copy with the same source path."""
        config = Config(timeout_seconds=10)
        config.path = tmp_path / "config.json"

        validated = config.validate_settings()
        assert validated.timeout_seconds == 10
        assert validated.path == config.path


class TestConfigFile:
    """Test reading and writing the configuration file."""

    def test_missing_file(self, tmp_path):
        """Test that a missing file gives the defaults."""
        path = tmp_path / "config.json"
        config = load_config(path)
        assert config == Config(path=path)
        assert config.path == path

    def test_load(self, tmp_path):
        """Test loading settings, ignoring unknown keys."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "default_server": "https://pam.example.com",
            "output_format": "yaml",
            "timeout_seconds": 0,
            "unknown_key": True,
        }))

        config = load_config(path)
        assert config.default_server == "https://pam.example.com"
        assert config.output_format == "yaml"
        assert config.timeout_seconds == 30

    def test_corrupt_file(self, tmp_path):
        """Test that a malformed file gives the defaults."""
        path = tmp_path / "config.json"
        path.write_text("{not json")

        config = load_config(path)
        assert config.default_server == ""
        assert config.path == path

    def test_non_object_file(self, tmp_path):
        """Test that a JSON file without an object gives the defaults."""
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        assert load_config(path).output_format == "table"

    def test_save_and_reload(self, tmp_path):
        """Test that saved settings load back with private permissions."""
        path = tmp_path / "sub" / "config.json"
        config = Config(default_user="admin", insecure_ssl=True)
        config.path = path

        written = config.save()
        assert written == path
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

        data = json.loads(path.read_text())
        assert data["default_user"] == "admin"
        assert "path" not in data
        assert "ccp" not in data

        reloaded = load_config(path)
        assert reloaded.default_user == "admin"
        assert reloaded.insecure_ssl is True

    def test_save_creates_private_file(self, tmp_path, monkeypatch):
        """Test that the file is created private instead of narrowed later."""
        modes = []
        real_open = os.open

        def recording_open(path, flags, mode=0o777, *args, **kwargs):
            modes.append(mode)
            return real_open(path, flags, mode, *args, **kwargs)

        monkeypatch.setattr(os, "open", recording_open)
        Config().save(tmp_path / "config.json")

        assert modes == [0o600]

    def test_save_narrows_existing_file(self, tmp_path):
        """Test that an existing readable file becomes private on save."""
        path = tmp_path / "config.json"
        path.write_text("{}")
        path.chmod(0o644)

        Config().save(path)
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_save_failure(self, tmp_path):
        """Test that write errors raise ConfigError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        with pytest.raises(ConfigError):
            Config().save(blocker / "config.json")


class TestEnvironment:
    """Test environment variable overrides."""

    def test_apply_env(self):
        """Test that environment variables override settings."""
        config = Config(default_server="https://old")
        config.apply_env({
            "PASCTL_SERVER": "https://new",
            "PASCTL_USER": "operator",
            "PASCTL_AUTH": "radius",
        })
        assert config.default_server == "https://new"
        assert config.default_user == "operator"
        assert config.default_auth_type == "radius"

    def test_empty_env_ignored(self):
        """Test that empty variables do not override settings."""
        config = Config(default_user="admin")
        config.apply_env({"PASCTL_USER": ""})
        assert config.default_user == "admin"

    def test_apply_os_environ(self, monkeypatch):
        """Test reading from the process environment."""
        monkeypatch.setenv("PASCTL_AUTH", "windows")
        config = Config()
        config.apply_env()
        assert config.default_auth_type == "windows"


class TestCCPConfig:
    """Test Central Credential Provider settings."""

    def test_disabled_by_default(self):
        """Test that CCP login is off without a ccp block."""
        config = Config(default_server="https://pam")
        assert not config.is_ccp_enabled()
        assert config.get_ccp_url() == ""
        assert config.get_pvwa_url() == "https://pam"
        assert config.get_ccp_auth_method() == "cyberark"

    def test_enabled_requires_app_and_safe(self):
        """Test that CCP login needs an app ID and a safe."""
        config = Config(ccp=CCPConfig(enabled=True, app_id="pasctl"))
        assert not config.is_ccp_enabled()

        config.ccp = CCPConfig(enabled=True, app_id="pasctl", safe="Vault")
        assert config.is_ccp_enabled()

    def test_overrides(self):
        """Test CCP-specific URLs and auth method."""
        config = Config(
            default_server="https://pam",
            ccp={
                "enabled": True,
                "ccp_url": "https://ccp",
                "pvwa_url": "https://pvwa",
                "auth_method": "ldap",
            },
        )
        assert config.get_ccp_url() == "https://ccp"
        assert config.get_pvwa_url() == "https://pvwa"
        assert config.get_ccp_auth_method() == "ldap"
