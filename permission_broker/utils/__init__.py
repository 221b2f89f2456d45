"""Utility functions and classes."""

from .errors import (
    BrokerError,
    ConfigurationError,
    HostError,
    PermissionDenied,
    UnknownCapabilityError,
)

__all__ = [
    "BrokerError",
    "ConfigurationError",
    "HostError",
    "PermissionDenied",
    "UnknownCapabilityError",
]
