"""Interface to the host runtime's capability API.

The broker never decides on its own whether a capability is allowed. It asks
a host, which answers with a GrantState. Anything other than GRANTED counts
as not granted.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..permissions.descriptors import CapabilityDescriptor


class GrantState(Enum):
    """The host's answer for a single capability."""

    GRANTED = "granted"
    DENIED = "denied"
    PROMPT = "prompt"  # Undecided; a request would ask the operator

    @property
    def is_granted(self) -> bool:
        return self is GrantState.GRANTED


class HostPermissions(ABC):
    """Per-capability ask/check API provided by the host runtime."""

    @abstractmethod
    async def request(self, descriptor: CapabilityDescriptor) -> GrantState:
        """Ask the host to grant a capability, prompting the operator if needed.

        Args:
            descriptor: The capability to request

        Returns:
            The resulting grant state
        """

    @abstractmethod
    async def query(self, descriptor: CapabilityDescriptor) -> GrantState:
        """Report the current grant state of a capability without prompting.

        Args:
            descriptor: The capability to check

        Returns:
            The current grant state
        """

    async def close(self) -> None:
        """Release any resources held by the host. No-op by default."""
        return None
