"""Error types for the permission broker."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..permissions.descriptors import CapabilityDescriptor


class BrokerError(Exception):
    """Base exception for permission broker errors."""

    pass


class PermissionDenied(BrokerError, PermissionError):
    """Raised by ensure() when at least one requested capability was not granted."""

    def __init__(self, denied: Iterable[CapabilityDescriptor] = ()):
        self.denied = list(denied)
        if self.denied:
            names = ", ".join(d.key for d in self.denied)
            message = f"Permission denied: {names}"
        else:
            message = "Permission denied"
        super().__init__(message)


class HostError(BrokerError):
    """Raised when a host capability API cannot produce an answer."""

    pass


# Configuration errors
class ConfigurationError(BrokerError):
    """Raised when configuration is missing or invalid."""

    pass


class UnknownCapabilityError(ConfigurationError, ValueError):
    """Raised when a capability name does not match any known kind."""

    def __init__(self, name: str):
        super().__init__(f"Unknown capability: {name}")
        self.name = name
