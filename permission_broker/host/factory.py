"""Select the host implementation from configuration."""

from __future__ import annotations

import logging

from ..core.config import Settings
from .base import HostPermissions
from .policy import PolicyHost
from .remote import RemoteHost

logger = logging.getLogger(__name__)


def create_host(settings: Settings) -> HostPermissions:
    """Create the host described by the settings.

    A configured APPROVAL_URL selects the remote approval service; otherwise the
    local allow-lists (and, with PROMPT_OPERATOR enabled, the operator) decide.

    Args:
        settings: Application settings

    Returns:
        A HostPermissions implementation
    """
    if settings.approval_url:
        logger.info(f"Using remote approval service at {settings.approval_url}")
        return RemoteHost.from_settings(settings)
    mode = "with operator prompt" if settings.prompt_operator else "without prompt"
    logger.info(f"Using local allow-list policy {mode}")
    return PolicyHost.from_settings(settings)
