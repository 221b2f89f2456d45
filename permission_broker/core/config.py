"""Configuration management for the permission broker."""

import json
from datetime import datetime
from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from ..permissions.kinds import CapabilityKind

# Allow-lists accept a JSON list or a comma-separated string from the environment
AllowList = Annotated[list[str], NoDecode]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: Path | None = Field(
        default=None,
        description="Directory for log files. If not set, logs go to stderr only.",
    )

    # Policy host - allow-lists per capability kind
    allow_all: bool = Field(
        default=False, description="Grant every capability for every resource"
    )
    allow_env: AllowList = Field(
        default_factory=list, description="Environment variables that may be read"
    )
    allow_read: AllowList = Field(
        default_factory=list, description="Paths (and everything below them) that may be read"
    )
    allow_write: AllowList = Field(
        default_factory=list,
        description="Paths (and everything below them) that may be written",
    )
    allow_net: AllowList = Field(
        default_factory=list,
        description="Hosts that may be contacted. 'host' covers any port, 'host:port' one port.",
    )
    allow_run: AllowList = Field(
        default_factory=list, description="Commands that may be executed"
    )
    allow_ffi: AllowList = Field(
        default_factory=list, description="Libraries that may be loaded through FFI"
    )
    allow_hrtime: bool = Field(default=False, description="Grant high resolution time")
    prompt_operator: bool = Field(
        default=False,
        description="Ask the operator on the terminal for capabilities not covered "
        "by an allow-list. If False, they are denied.",
    )

    # Remote host - approval service
    approval_url: str | None = Field(
        default=None,
        description="Base URL of a remote approval service. When set, it replaces "
        "the local allow-lists as the source of decisions.",
    )
    approval_api_key: str | None = Field(
        default=None, description="Bearer token for the remote approval service"
    )
    approval_timeout: float = Field(
        default=10.0, description="Remote approval request timeout in seconds"
    )

    @field_validator(
        "allow_env", "allow_read", "allow_write", "allow_net", "allow_run", "allow_ffi",
        mode="before",
    )
    @classmethod
    def split_allow_list(cls, v: object) -> object:
        """Accept comma-separated strings as well as JSON lists."""
        if isinstance(v, str):
            stripped = v.strip()
            if stripped.startswith("["):
                return json.loads(stripped)
            return [item.strip() for item in stripped.split(",") if item.strip()]
        return v

    @field_validator("approval_url")
    @classmethod
    def validate_approval_url(cls, v: str | None) -> str | None:
        """Validate that approval_url is an HTTP(S) URL."""
        if v is None:
            return v
        if not v.startswith(("https://", "http://")):
            raise ValueError("Host URL must start with http:// or https://")
        return v.rstrip("/")

    def __init__(self, **kwargs):
        """Initialize settings and create the log directory if configured."""
        super().__init__(**kwargs)
        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)

    def allow_list(self, kind: CapabilityKind) -> list[str]:
        """Get the configured allow entries for a capability kind.

        hrtime has no scope; a granted hrtime is reported as ["*"].

        Args:
            kind: The capability kind

        Returns:
            List of allow entries ("*" means every resource)
        """
        if self.allow_all:
            return ["*"]
        if kind is CapabilityKind.HRTIME:
            return ["*"] if self.allow_hrtime else []
        return list(getattr(self, f"allow_{kind.value}"))

    def get_log_file(self, component_name: str = "permission_broker") -> Path:
        """Get a log file path for a specific component.

        Creates log files with the format: {component_name}_{date}.log
        e.g., permission_broker_2024-01-15.log

        Args:
            component_name: Name of the component

        Returns:
            Path to the log file

        Raises:
            ValueError: If log_dir is not configured
        """
        if self.log_dir is None:
            raise ValueError("log_dir is not configured")
        date_str = datetime.now().strftime("%Y-%m-%d")
        # Sanitize component name for filesystem
        safe_name = "".join(c if c.isalnum() or c in "_-" else "_" for c in component_name)
        return self.log_dir / f"{safe_name}_{date_str}.log"


# Global settings instance
settings = Settings()
