"""Capability kinds and descriptors.

- CapabilityKind: The closed set of capabilities (env, read, write, net, ...)
- CapabilityDescriptor: A kind plus an optional resource scope
- build/expand: Descriptor factory, expanding scope lists
- Permission: Per-kind shorthands over build()

Example usage:
    descriptor = build("read", "config.toml")
    descriptors = Permission.env(["HOME", "LANG"])
"""

from .descriptors import CapabilityDescriptor, Permission, build, expand
from .kinds import ALL_CAPABILITIES, AllCapabilities, CapabilityKind

__all__ = [
    "ALL_CAPABILITIES",
    "AllCapabilities",
    "CapabilityDescriptor",
    "CapabilityKind",
    "Permission",
    "build",
    "expand",
]
