"""Core components: configuration, the permission registry and its ownership."""

from .config import Settings, settings
from .context import get_default_registry, get_registry, reset_default_registry, use_registry
from .registry import PermissionRegistry

__all__ = [
    "PermissionRegistry",
    "Settings",
    "get_default_registry",
    "get_registry",
    "reset_default_registry",
    "settings",
    "use_registry",
]
