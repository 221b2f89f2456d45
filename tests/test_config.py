"""Tests for the configuration module."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from permission_broker.core.config import Settings
from permission_broker.permissions import CapabilityKind


class TestSettings:
    """Tests for the Settings class."""

    def test_settings_defaults(self, temp_dir: Path, clean_env, monkeypatch):
        """Test Settings with default values."""
        with monkeypatch.context() as m:
            # Run from a directory without a .env file
            m.chdir(str(temp_dir))
            settings = Settings(_env_file=None)

        assert settings.log_level == "INFO"
        assert settings.log_dir is None
        assert settings.allow_all is False
        assert settings.allow_read == []
        assert settings.allow_hrtime is False
        assert settings.prompt_operator is False
        assert settings.approval_url is None
        assert settings.approval_timeout == 10.0

    def test_settings_from_env(self, clean_env, monkeypatch):
        """Test Settings loads values from environment variables."""
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("ALLOW_NET", "example.com, api.test:443")
        monkeypatch.setenv("ALLOW_ENV", '["HOME", "LANG"]')
        monkeypatch.setenv("PROMPT_OPERATOR", "true")
        monkeypatch.setenv("APPROVAL_URL", "https://approvals.test/")

        settings = Settings(_env_file=None)

        assert settings.log_level == "DEBUG"
        assert settings.allow_net == ["example.com", "api.test:443"]
        assert settings.allow_env == ["HOME", "LANG"]
        assert settings.prompt_operator is True
        assert settings.approval_url == "https://approvals.test"

    def test_settings_case_insensitive(self, clean_env, monkeypatch):
        """Test that environment variable names are case-insensitive."""
        monkeypatch.setenv("allow_run", "git")

        settings = Settings(_env_file=None)

        assert settings.allow_run == ["git"]

    def test_settings_from_env_file(self, temp_dir: Path, clean_env):
        """Test Settings reads a .env file."""
        env_file = temp_dir / ".env"
        env_file.write_text("ALLOW_READ=./config,./data\nALLOW_HRTIME=1\n")

        settings = Settings(_env_file=env_file)

        assert settings.allow_read == ["./config", "./data"]
        assert settings.allow_hrtime is True

    def test_invalid_approval_url_rejected(self, clean_env):
        """Test approval_url must be an HTTP(S) URL."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, approval_url="ftp://approvals.test")

    def test_allow_list_per_kind(self, clean_env):
        """Test allow_list() for scoped kinds, hrtime and allow_all."""
        settings = Settings(_env_file=None, allow_write=["out"], allow_hrtime=True)

        assert settings.allow_list(CapabilityKind.WRITE) == ["out"]
        assert settings.allow_list(CapabilityKind.READ) == []
        assert settings.allow_list(CapabilityKind.HRTIME) == ["*"]

        everything = Settings(_env_file=None, allow_all=True)
        assert everything.allow_list(CapabilityKind.FFI) == ["*"]

    def test_log_dir_created(self, temp_dir: Path, clean_env):
        """Test that Settings creates the log directory when configured."""
        log_dir = temp_dir / "logs"
        assert not log_dir.exists()

        settings = Settings(_env_file=None, log_dir=log_dir)

        assert log_dir.exists()
        log_file = settings.get_log_file("permission broker")
        assert log_file.parent == log_dir
        assert log_file.name.startswith("permission_broker_")
        assert log_file.suffix == ".log"

    def test_get_log_file_without_log_dir(self, clean_env):
        """Test get_log_file() requires a log directory."""
        with pytest.raises(ValueError):
            Settings(_env_file=None).get_log_file()
