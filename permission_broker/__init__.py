"""Permission Broker - aggregate capability requests against a host permission API."""

__version__ = "0.1.0"

from .core.config import Settings
from .core.context import get_registry, reset_default_registry, use_registry
from .core.registry import PermissionRegistry
from .host import GrantState, HostPermissions, PolicyHost, RemoteHost, create_host
from .permissions import (
    ALL_CAPABILITIES,
    CapabilityDescriptor,
    CapabilityKind,
    Permission,
    build,
)
from .utils.errors import BrokerError, ConfigurationError, HostError, PermissionDenied
from .utils.logging_config import setup_logging

__all__ = [
    "PermissionRegistry",
    "Settings",
    "get_registry",
    "use_registry",
    "reset_default_registry",
    # Descriptors
    "ALL_CAPABILITIES",
    "CapabilityDescriptor",
    "CapabilityKind",
    "Permission",
    "build",
    # Hosts
    "GrantState",
    "HostPermissions",
    "PolicyHost",
    "RemoteHost",
    "create_host",
    # Errors
    "BrokerError",
    "ConfigurationError",
    "HostError",
    "PermissionDenied",
    # Logging
    "setup_logging",
]
