"""Ownership of permission registries.

Code that needs a registry calls get_registry(). By default that is a single
process-wide registry, created lazily. A caller that wants its own registry
(a request handler, a test, a sub-task) binds one for the current context:

    with use_registry(PermissionRegistry(host)):
        await get_registry().read("config.toml").ensure()

Bindings follow contextvars semantics, so asyncio tasks created inside the
block see the same registry.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from .registry import PermissionRegistry

logger = logging.getLogger(__name__)

_current_registry: ContextVar[PermissionRegistry | None] = ContextVar(
    "permission_registry", default=None
)
_default_registry: PermissionRegistry | None = None
_default_lock = threading.Lock()


def get_default_registry() -> PermissionRegistry:
    """Get or create the process-wide registry.

    Thread-safe: uses locking so concurrent first calls create one registry.

    Returns:
        The shared PermissionRegistry
    """
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            # Double-check after acquiring lock
            if _default_registry is None:
                _default_registry = PermissionRegistry()
                logger.debug("Created default permission registry")
    return _default_registry


def get_registry() -> PermissionRegistry:
    """Get the registry bound to the current context, or the process default."""
    registry = _current_registry.get()
    if registry is not None:
        return registry
    return get_default_registry()


@contextmanager
def use_registry(registry: PermissionRegistry) -> Iterator[PermissionRegistry]:
    """Bind a registry for the duration of a with-block.

    Args:
        registry: The registry get_registry() should return inside the block

    Yields:
        The bound registry
    """
    token = _current_registry.set(registry)
    try:
        yield registry
    finally:
        _current_registry.reset(token)


def reset_default_registry() -> None:
    """Drop the process-wide registry. Useful for testing.

    The next get_registry() call outside a use_registry() block creates a
    fresh registry. Requests already issued by the old one are not withdrawn.
    """
    global _default_registry
    with _default_lock:
        _default_registry = None
