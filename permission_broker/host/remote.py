"""Host that delegates decisions to a remote approval service.

The service receives the host descriptor form of a capability and answers
with its grant state:

    POST {base_url}/request   {"name": "read", "path": "config.toml"}
    POST {base_url}/query     {"name": "net", "host": "example.com"}

    200 {"state": "granted" | "denied" | "prompt"}

/request may block while a human approves or rejects; /query must not.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.config import Settings
from ..permissions.descriptors import CapabilityDescriptor
from ..utils.errors import ConfigurationError, HostError
from .base import GrantState, HostPermissions

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0  # seconds


class RemoteHost(HostPermissions):
    """Client for a remote capability approval service.

    Usage:
        async with RemoteHost("https://approvals.internal/api") as host:
            state = await host.request(CapabilityDescriptor("write", "out.log"))

    Failures (non-200 status, transport errors, timeouts, unknown states)
    raise HostError. The registry treats a failed request as denied.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the remote host client.

        Args:
            base_url: Base URL of the approval service
            api_key: Optional bearer token sent with every request
            timeout: Request timeout in seconds
            transport: Optional httpx transport (for testing or custom routing)
        """
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> RemoteHost:
        """Create a remote host from application settings.

        Raises:
            ConfigurationError: If APPROVAL_URL is not set
        """
        if not settings.approval_url:
            raise ConfigurationError("APPROVAL_URL must be set to use a remote host")
        return cls(
            base_url=settings.approval_url,
            api_key=settings.approval_api_key,
            timeout=settings.approval_timeout,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Content-Type": "application/json"}
            if self._api_key:
                headers["Authorization"] = f"Bearer {self._api_key}"
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=headers,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _post(self, endpoint: str, descriptor: CapabilityDescriptor) -> GrantState:
        """Send a descriptor to the approval service and parse the grant state.

        Args:
            endpoint: "request" or "query"
            descriptor: The capability in question

        Returns:
            The grant state reported by the service

        Raises:
            HostError: If the service cannot be reached or answers unexpectedly
        """
        try:
            client = await self._get_client()
            response = await client.post(f"/{endpoint}", json=descriptor.to_dict())
        except httpx.TimeoutException as e:
            error_msg = f"Approval service {endpoint} for {descriptor.key} timed out: {e}"
            logger.warning(error_msg)
            raise HostError(error_msg) from e
        except httpx.HTTPError as e:
            error_msg = f"Approval service {endpoint} for {descriptor.key} failed: {e}"
            logger.warning(error_msg)
            raise HostError(error_msg) from e

        if response.status_code != 200:
            error_msg = (
                f"Approval service returned status {response.status_code} "
                f"for {descriptor.key}: {response.text}"
            )
            logger.warning(error_msg)
            raise HostError(error_msg)

        try:
            result: dict[str, Any] = response.json()
            state = GrantState(result["state"])
        except (ValueError, KeyError, TypeError) as e:
            raise HostError(
                f"Approval service sent an invalid answer for {descriptor.key}: {response.text}"
            ) from e

        logger.debug(f"Approval service {endpoint} {descriptor.key}: {state.value}")
        return state

    async def request(self, descriptor: CapabilityDescriptor) -> GrantState:
        return await self._post("request", descriptor)

    async def query(self, descriptor: CapabilityDescriptor) -> GrantState:
        return await self._post("query", descriptor)

    async def __aenter__(self) -> "RemoteHost":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - closes the HTTP client."""
        await self.close()
