"""Permission registry: accumulate capability requests, then settle on a verdict.

Callers declare what an operation needs, in any order and as often as they
like. Each distinct descriptor is requested from the host exactly once, in the
background. settle() later folds every answer into a single yes/no.

Example:
    registry = PermissionRegistry(host)

    # Raise PermissionDenied if reading config.toml or writing test.log is refused
    await registry.read("config.toml").write("test.log").ensure()

    # Branch on the verdict instead of raising
    if await registry.env(["HOME", "LANG"]).settle():
        print(os.environ["HOME"], os.environ["LANG"])
"""

from __future__ import annotations

import asyncio
import logging

from ..host.base import HostPermissions
from ..host.factory import create_host
from ..permissions.descriptors import CapabilityDescriptor, ScopeArg, expand
from ..permissions.kinds import ALL_CAPABILITIES, AllCapabilities, CapabilityKind
from ..utils.errors import PermissionDenied
from .config import settings

logger = logging.getLogger(__name__)


class PermissionRegistry:
    """Deduplicating collection of in-flight capability requests.

    Invariants:
    - At most one host request per distinct descriptor, for the registry's lifetime
    - Tracked descriptors are never removed
    - settle() recomputes the verdict on every call

    Requests are started as asyncio tasks when accumulated. If no event loop
    is running at that point, the descriptor is still tracked and its request
    starts, in accumulation order, at the next settle()/ensure()/denied().

    Answers are kept once a request finishes, so a registry can be settled
    from a later event loop than the one its requests ran in. A request whose
    loop shut down before it was answered counts as denied.
    """

    def __init__(self, host: HostPermissions | None = None):
        """Initialize the registry.

        Args:
            host: Host capability API to ask. Defaults to the host described
                by the global settings (see create_host).
        """
        self._host = host if host is not None else create_host(settings)
        self._requests: dict[CapabilityDescriptor, asyncio.Task[bool] | None] = {}
        self._answers: dict[CapabilityDescriptor, bool] = {}

    @property
    def host(self) -> HostPermissions:
        """The host capability API this registry asks."""
        return self._host

    @property
    def descriptors(self) -> list[CapabilityDescriptor]:
        """Tracked descriptors, in accumulation order."""
        return list(self._requests)

    def __len__(self) -> int:
        return len(self._requests)

    def __contains__(self, descriptor: object) -> bool:
        return descriptor in self._requests

    def __repr__(self) -> str:
        keys = ", ".join(d.key for d in self._requests)
        return f"PermissionRegistry({{{keys}}})"

    # ------------------------------------------------------------------
    # Accumulation
    # ------------------------------------------------------------------

    def accumulate(self, descriptor: CapabilityDescriptor | AllCapabilities) -> PermissionRegistry:
        """Request a capability in the background, unless it is already tracked.

        Returns immediately; the host's answer is observed later through
        settle() or ensure().

        Args:
            descriptor: The capability to request, or "*" for one unscoped
                descriptor per capability kind

        Returns:
            This registry, for chaining

        Raises:
            TypeError: If descriptor is neither a CapabilityDescriptor nor "*".
                Host failures never raise here.
        """
        if descriptor == ALL_CAPABILITIES:
            for kind in CapabilityKind:
                self._track(CapabilityDescriptor(kind))
        elif isinstance(descriptor, CapabilityDescriptor):
            self._track(descriptor)
        else:
            raise TypeError(f"Expected a CapabilityDescriptor or '*', got {descriptor!r}")
        return self

    def permission(self, kind: CapabilityKind | str, scope: ScopeArg = None) -> PermissionRegistry:
        """Request a capability by name.

        Args:
            kind: The capability kind or its name
            scope: Optional scope, or a list of scopes (one request each)

        Returns:
            This registry, for chaining
        """
        for descriptor in expand(kind, scope):
            self._track(descriptor)
        return self

    def _track(self, descriptor: CapabilityDescriptor) -> None:
        # No await between the membership check and the insert
        if descriptor in self._requests:
            logger.debug(f"Already requested: {descriptor.key}")
            return
        self._requests[descriptor] = self._start(descriptor)

    def _start(self, descriptor: CapabilityDescriptor) -> asyncio.Task[bool] | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"No running event loop; deferring request for {descriptor.key}")
            return None
        logger.info(f"Requesting permission: {descriptor.key}")
        return loop.create_task(self._request(descriptor), name=f"permission:{descriptor.key}")

    async def _request(self, descriptor: CapabilityDescriptor) -> bool:
        try:
            state = await self._host.request(descriptor)
        except Exception as e:
            logger.warning(
                f"Permission request for {descriptor.key} failed, treating as denied: {e}"
            )
            granted = False
        else:
            if not state.is_granted:
                logger.warning(f"Permission not granted: {descriptor.key} ({state.value})")
            granted = state.is_granted
        self._answers[descriptor] = granted
        return granted

    def _collect(self, descriptor: CapabilityDescriptor, task: asyncio.Task[bool]) -> None:
        """Record the answer of a finished task; a cancelled request is denied."""
        if descriptor in self._answers:
            return
        if task.cancelled():
            logger.warning(
                f"Permission request for {descriptor.key} was cancelled, treating as denied"
            )
            self._answers[descriptor] = False
        else:
            self._answers[descriptor] = task.result()

    # Shorthands
    def all(self) -> PermissionRegistry:
        return self.accumulate(ALL_CAPABILITIES)

    def env(self, variable: ScopeArg = None) -> PermissionRegistry:
        return self.permission(CapabilityKind.ENV, variable)

    def read(self, path: ScopeArg = None) -> PermissionRegistry:
        return self.permission(CapabilityKind.READ, path)

    def write(self, path: ScopeArg = None) -> PermissionRegistry:
        return self.permission(CapabilityKind.WRITE, path)

    def net(self, host: ScopeArg = None) -> PermissionRegistry:
        return self.permission(CapabilityKind.NET, host)

    def run(self, command: ScopeArg = None) -> PermissionRegistry:
        return self.permission(CapabilityKind.RUN, command)

    def ffi(self, path: ScopeArg = None) -> PermissionRegistry:
        return self.permission(CapabilityKind.FFI, path)

    def hrtime(self) -> PermissionRegistry:
        return self.permission(CapabilityKind.HRTIME)

    # ------------------------------------------------------------------
    # Point queries
    # ------------------------------------------------------------------

    async def query(self, descriptor: CapabilityDescriptor) -> bool:
        """Check whether the host currently grants a capability.

        Does not prompt, does not track the descriptor and does not cache.

        Args:
            descriptor: The capability to check

        Returns:
            True if the host reports it as granted
        """
        try:
            state = await self._host.query(descriptor)
        except Exception as e:
            logger.warning(f"Permission query for {descriptor.key} failed, treating as denied: {e}")
            return False
        return state.is_granted

    async def can(self, kind: CapabilityKind | str, scope: ScopeArg = None) -> bool:
        """Check whether the host currently grants a capability by name.

        A list of scopes is checked as a batch and is True only when every
        scope is granted (an empty list is vacuously True).

        Args:
            kind: The capability kind or its name
            scope: Optional scope, or a list of scopes

        Returns:
            True if every checked descriptor is granted
        """
        descriptors = expand(kind, scope)
        results = await asyncio.gather(*(self.query(d) for d in descriptors))
        return all(results)

    # ------------------------------------------------------------------
    # Verdict
    # ------------------------------------------------------------------

    async def _outcomes(self) -> dict[CapabilityDescriptor, bool]:
        """Wait for every request tracked at call time and collect the answers."""
        loop = asyncio.get_running_loop()
        snapshot = list(self._requests.items())
        pending: list[tuple[CapabilityDescriptor, asyncio.Task[bool]]] = []
        for descriptor, task in snapshot:
            if descriptor in self._answers:
                continue
            if task is None:
                task = self._start(descriptor)
                assert task is not None
                self._requests[descriptor] = task
            if task.done():
                self._collect(descriptor, task)
            elif task.get_loop() is not loop:
                # Tasks of another loop cannot be awaited here
                logger.warning(
                    f"Permission request for {descriptor.key} belongs to another event loop, "
                    f"treating as denied"
                )
                self._answers[descriptor] = False
            else:
                pending.append((descriptor, task))

        if pending:
            await asyncio.wait([task for _, task in pending])
            for descriptor, task in pending:
                self._collect(descriptor, task)
        return {descriptor: self._answers[descriptor] for descriptor, _ in snapshot}

    async def settle(self) -> bool:
        """Wait for every tracked request to be answered. Does not raise on denial.

        Returns:
            True if all requests were granted (or nothing was requested)
        """
        outcomes = await self._outcomes()
        granted = all(outcomes.values())
        logger.debug(f"Settled {len(outcomes)} permission(s): {'granted' if granted else 'denied'}")
        return granted

    async def denied(self) -> list[CapabilityDescriptor]:
        """Wait for every tracked request and list the ones not granted.

        Returns:
            Denied descriptors, in accumulation order
        """
        outcomes = await self._outcomes()
        return [descriptor for descriptor, granted in outcomes.items() if not granted]

    async def ensure(self) -> None:
        """Wait for every tracked request and raise if any was not granted.

        Raises:
            PermissionDenied: If at least one requested capability was denied
        """
        denied = await self.denied()
        if denied:
            error = PermissionDenied(denied)
            logger.warning(str(error))
            raise error

    async def close(self) -> None:
        """Close the underlying host."""
        await self._host.close()
