"""Host backed by configured allow-lists, with an optional operator prompt.

Matching rules per capability kind:
- "*" grants the kind for every resource, and is the only entry that grants
  an unscoped request
- read/write/ffi: an entry covers the same absolute path and everything below it
- net: "host" covers the host on any port, "host:port" covers only that port
- env/run: exact match

Requests not covered by an allow entry are DENIED, unless a prompter is
configured, in which case the operator decides once and the answer is
remembered for the lifetime of the host. The operator is asked one question
at a time.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path

from ..core.config import Settings
from ..permissions.descriptors import CapabilityDescriptor
from ..permissions.kinds import CapabilityKind
from .base import GrantState, HostPermissions
from .prompt import Prompter, console_prompt

logger = logging.getLogger(__name__)

WILDCARD = "*"


def _absolute(path: str) -> Path:
    return Path(os.path.abspath(os.path.expanduser(path)))


def _split_host(value: str) -> tuple[str, str | None]:
    """Split "host:port" into its parts. IPv6 literals must be bracketed."""
    if value.startswith("["):
        host, _, rest = value[1:].partition("]")
        port = rest[1:] if rest.startswith(":") else None
        return host.lower(), port or None
    host, sep, port = value.rpartition(":")
    if not sep or not port.isdigit():
        return value.lower(), None
    return host.lower(), port


def scope_matches(kind: CapabilityKind, entry: str, scope: str | None) -> bool:
    """Check whether one allow entry covers a descriptor scope.

    Args:
        kind: The capability kind
        entry: A configured allow entry
        scope: The requested scope (None means every resource)

    Returns:
        True if the entry grants the scope
    """
    if entry == WILDCARD:
        return True
    if scope is None:
        return False

    if kind.is_path:
        return _absolute(scope).is_relative_to(_absolute(entry))

    if kind is CapabilityKind.NET:
        entry_host, entry_port = _split_host(entry)
        scope_host, scope_port = _split_host(scope)
        if entry_host != scope_host:
            return False
        return entry_port is None or entry_port == scope_port

    return entry == scope


class PolicyHost(HostPermissions):
    """Host that answers from allow-lists and, optionally, the operator.

    Example:
        host = PolicyHost(allow={"read": ["./config"], "net": ["example.com"]})
        state = await host.query(CapabilityDescriptor("read", "config/app.toml"))
        # GrantState.GRANTED
    """

    def __init__(
        self,
        allow: Mapping[CapabilityKind | str, Iterable[str]] | None = None,
        allow_all: bool = False,
        prompter: Prompter | None = None,
    ):
        """Initialize the policy host.

        Args:
            allow: Allow entries per capability kind
            allow_all: Grant every capability for every resource
            prompter: Async callable asked about capabilities not covered by
                an allow entry. If None, those capabilities are denied.
        """
        self._allow: dict[CapabilityKind, tuple[str, ...]] = {}
        for kind, entries in (allow or {}).items():
            self._allow[CapabilityKind.parse(kind)] = tuple(entries)
        self._allow_all = allow_all
        self._prompter = prompter
        self._decisions: dict[CapabilityDescriptor, GrantState] = {}
        self._prompt_lock: asyncio.Lock | None = None
        self._prompt_loop: asyncio.AbstractEventLoop | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> PolicyHost:
        """Create a policy host from application settings.

        Args:
            settings: Settings providing ALLOW_* lists and PROMPT_OPERATOR

        Returns:
            Configured PolicyHost
        """
        allow = {kind: settings.allow_list(kind) for kind in CapabilityKind}
        return cls(
            allow=allow,
            allow_all=settings.allow_all,
            prompter=console_prompt if settings.prompt_operator else None,
        )

    def allows(self, descriptor: CapabilityDescriptor) -> bool:
        """Check whether the allow-lists alone cover a descriptor."""
        if self._allow_all:
            return True
        entries = self._allow.get(descriptor.kind, ())
        return any(scope_matches(descriptor.kind, e, descriptor.scope) for e in entries)

    async def query(self, descriptor: CapabilityDescriptor) -> GrantState:
        if self.allows(descriptor):
            return GrantState.GRANTED
        if descriptor in self._decisions:
            return self._decisions[descriptor]
        if self._prompter is not None:
            return GrantState.PROMPT
        return GrantState.DENIED

    async def request(self, descriptor: CapabilityDescriptor) -> GrantState:
        state = await self.query(descriptor)
        if state is not GrantState.PROMPT or self._prompter is None:
            logger.debug(f"Policy answered {descriptor.key}: {state.value}")
            return state

        async with self._operator_lock():
            # Answered while this request waited for the lock
            if descriptor in self._decisions:
                return self._decisions[descriptor]
            granted = await self._prompter(descriptor)
            state = GrantState.GRANTED if granted else GrantState.DENIED
            self._decisions[descriptor] = state
            return state

    def _operator_lock(self) -> asyncio.Lock:
        """Lock serializing prompts, one per running event loop."""
        loop = asyncio.get_running_loop()
        if self._prompt_lock is None or self._prompt_loop is not loop:
            self._prompt_lock = asyncio.Lock()
            self._prompt_loop = loop
        return self._prompt_lock
