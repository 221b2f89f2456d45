"""Pytest configuration and fixtures for permission broker tests."""

import asyncio
import tempfile
from pathlib import Path

import pytest

from permission_broker.core.context import reset_default_registry
from permission_broker.core.registry import PermissionRegistry
from permission_broker.host.base import GrantState, HostPermissions
from permission_broker.permissions.descriptors import CapabilityDescriptor


class FakeHost(HostPermissions):
    """Scriptable host that records every call it receives.

    Answers default to ``default``; per-descriptor answers may be a
    GrantState or an exception to raise. While ``gate`` is set and not yet
    released, requests stay pending.
    """

    def __init__(self, default: GrantState = GrantState.GRANTED):
        self.default = default
        self.answers: dict[CapabilityDescriptor, GrantState | Exception] = {}
        self.request_calls: list[CapabilityDescriptor] = []
        self.query_calls: list[CapabilityDescriptor] = []
        self.gate: asyncio.Event | None = None
        self.closed = False

    def answer(self, descriptor: CapabilityDescriptor, state: GrantState | Exception) -> "FakeHost":
        self.answers[descriptor] = state
        return self

    def _resolve(self, descriptor: CapabilityDescriptor) -> GrantState:
        answer = self.answers.get(descriptor, self.default)
        if isinstance(answer, Exception):
            raise answer
        return answer

    async def request(self, descriptor: CapabilityDescriptor) -> GrantState:
        self.request_calls.append(descriptor)
        if self.gate is not None:
            await self.gate.wait()
        return self._resolve(descriptor)

    async def query(self, descriptor: CapabilityDescriptor) -> GrantState:
        self.query_calls.append(descriptor)
        return self._resolve(descriptor)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_host() -> FakeHost:
    """Create a host that grants everything unless told otherwise."""
    return FakeHost()


@pytest.fixture
def registry(fake_host: FakeHost) -> PermissionRegistry:
    """Create a registry backed by the fake host."""
    return PermissionRegistry(fake_host)


@pytest.fixture(autouse=True)
def reset_default_registry_singleton():
    """Reset the process-wide registry between tests."""
    reset_default_registry()
    yield
    reset_default_registry()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every environment variable Settings reads."""
    for key in [
        "LOG_LEVEL",
        "LOG_DIR",
        "ALLOW_ALL",
        "ALLOW_ENV",
        "ALLOW_READ",
        "ALLOW_WRITE",
        "ALLOW_NET",
        "ALLOW_RUN",
        "ALLOW_FFI",
        "ALLOW_HRTIME",
        "PROMPT_OPERATOR",
        "APPROVAL_URL",
        "APPROVAL_API_KEY",
        "APPROVAL_TIMEOUT",
    ]:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def make_host():
    """Factory for additional fake hosts within a single test."""
    return FakeHost
