"""Capability descriptors and the factory that builds them.

A descriptor names one capability and, optionally, the resource it is scoped
to (a path, host, env-var or command). Two descriptors with the same kind and
scope are the same request; the registry relies on that for deduplication.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias, overload

from .kinds import CapabilityKind

Scope: TypeAlias = str | os.PathLike[str]
ScopeArg: TypeAlias = Scope | Sequence[Scope] | None


@dataclass(frozen=True)
class CapabilityDescriptor:
    """One capability, optionally narrowed to a single resource.

    Attributes:
        kind: The capability being asked for
        scope: Resource the capability is restricted to, or None for all

    Example:
        CapabilityDescriptor(CapabilityKind.READ, "config.toml")
        CapabilityDescriptor("net", "example.com:443")
    """

    kind: CapabilityKind
    scope: str | None = None

    def __post_init__(self) -> None:
        kind = CapabilityKind.parse(self.kind)
        object.__setattr__(self, "kind", kind)

        scope = self.scope
        if kind is CapabilityKind.HRTIME:
            scope = None
        elif scope is not None:
            scope = os.fspath(scope) if kind.is_path else str(scope)
        object.__setattr__(self, "scope", scope)

    @property
    def key(self) -> str:
        """Short identifier such as "read:config.toml" or "hrtime"."""
        if self.scope is None:
            return self.kind.value
        return f"{self.kind.value}:{self.scope}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to the host descriptor form, e.g. {"name": "net", "host": "a.com"}.

        The scope field is omitted for unscoped descriptors.
        """
        data: dict[str, Any] = {"name": self.kind.value}
        field_name = self.kind.scope_field
        if field_name is not None and self.scope is not None:
            data[field_name] = self.scope
        return data

    def __str__(self) -> str:
        return self.key


BuildResult: TypeAlias = CapabilityDescriptor | list[CapabilityDescriptor]


@overload
def build(kind: CapabilityKind | str, scope: Scope | None = None) -> CapabilityDescriptor: ...
@overload
def build(kind: CapabilityKind | str, scope: Sequence[Scope]) -> list[CapabilityDescriptor]: ...
def build(
    kind: CapabilityKind | str, scope: ScopeArg = None
) -> BuildResult:
    """Build descriptor(s) from a capability name and optional scope(s).

    A list or tuple of scopes yields one descriptor per element, in input
    order. Duplicates are kept; deduplication is the registry's job.
    hrtime ignores the scope argument entirely.

    Args:
        kind: Capability kind or its name
        scope: A single scope, a sequence of scopes, or None for unscoped

    Returns:
        A single CapabilityDescriptor, or a list of them for sequence input
    """
    kind = CapabilityKind.parse(kind)
    if kind is CapabilityKind.HRTIME:
        return CapabilityDescriptor(kind)
    if isinstance(scope, (list, tuple)):
        return [build(kind, s) for s in scope]
    return CapabilityDescriptor(kind, scope)  # type: ignore[arg-type]


def expand(kind: CapabilityKind | str, scope: ScopeArg = None) -> list[CapabilityDescriptor]:
    """Like build(), but always returns a list."""
    result = build(kind, scope)
    if isinstance(result, CapabilityDescriptor):
        return [result]
    return result


class Permission:
    """Namespace of shorthands for building descriptors per capability kind.

    Example:
        Permission.read("config.toml")
        Permission.net(["example.com", "api.example.com:443"])
        Permission.hrtime()
    """

    @staticmethod
    def env(variable: ScopeArg = None) -> BuildResult:
        return build(CapabilityKind.ENV, variable)

    @staticmethod
    def read(path: ScopeArg = None) -> BuildResult:
        return build(CapabilityKind.READ, path)

    @staticmethod
    def write(path: ScopeArg = None) -> BuildResult:
        return build(CapabilityKind.WRITE, path)

    @staticmethod
    def net(host: ScopeArg = None) -> BuildResult:
        return build(CapabilityKind.NET, host)

    @staticmethod
    def run(command: ScopeArg = None) -> BuildResult:
        return build(CapabilityKind.RUN, command)

    @staticmethod
    def ffi(path: ScopeArg = None) -> BuildResult:
        return build(CapabilityKind.FFI, path)

    @staticmethod
    def hrtime() -> CapabilityDescriptor:
        return build(CapabilityKind.HRTIME)
