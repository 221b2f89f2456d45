"""Capability kinds understood by the host runtime."""

from __future__ import annotations

from enum import Enum
from typing import Final, Literal

from ..utils.errors import UnknownCapabilityError

# Sentinel accepted by PermissionRegistry.accumulate() to request every kind
ALL_CAPABILITIES: Final = "*"
AllCapabilities = Literal["*"]


class CapabilityKind(Enum):
    """Closed set of capabilities the host can grant or deny.

    Declaration order is the order used when every kind is requested at once.
    """

    ENV = "env"  # Environment variables
    READ = "read"  # Filesystem read
    WRITE = "write"  # Filesystem write
    NET = "net"  # Network hosts
    RUN = "run"  # Subprocesses
    HRTIME = "hrtime"  # High resolution time
    FFI = "ffi"  # Foreign function interface

    @classmethod
    def parse(cls, value: CapabilityKind | str) -> CapabilityKind:
        """Coerce a kind or its string name to a CapabilityKind.

        Args:
            value: A CapabilityKind, or a name such as "read" or "NET"

        Returns:
            The matching CapabilityKind

        Raises:
            UnknownCapabilityError: If the name is not a known kind
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnknownCapabilityError(str(value)) from None

    @property
    def scope_field(self) -> str | None:
        """Name of the field carrying the scope in a host descriptor."""
        return _SCOPE_FIELDS[self]

    @property
    def is_path(self) -> bool:
        """True for kinds scoped to a filesystem path."""
        return _SCOPE_FIELDS[self] == "path"


_SCOPE_FIELDS: dict[CapabilityKind, str | None] = {
    CapabilityKind.ENV: "variable",
    CapabilityKind.READ: "path",
    CapabilityKind.WRITE: "path",
    CapabilityKind.NET: "host",
    CapabilityKind.RUN: "command",
    CapabilityKind.HRTIME: None,
    CapabilityKind.FFI: "path",
}
