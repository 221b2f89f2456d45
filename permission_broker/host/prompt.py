"""Interactive operator prompt for undecided capabilities."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..permissions.descriptors import CapabilityDescriptor

logger = logging.getLogger(__name__)

Prompter = Callable[["CapabilityDescriptor"], Awaitable[bool]]

AFFIRMATIVE_ANSWERS = frozenset({"y", "yes"})


def _ask(question: str) -> str:
    try:
        return input(question)
    except EOFError:
        # No terminal attached (piped stdin, daemon); treat as "no"
        return ""


async def console_prompt(descriptor: CapabilityDescriptor) -> bool:
    """Ask the operator on the terminal whether to grant a capability.

    The blocking input() call runs in a worker thread so the event loop keeps
    serving other requests while the operator decides.

    Args:
        descriptor: The capability being requested

    Returns:
        True only if the operator answered "y" or "yes"
    """
    answer = await asyncio.to_thread(_ask, f"Allow {descriptor.key}? [y/N] ")
    granted = answer.strip().lower() in AFFIRMATIVE_ANSWERS
    logger.info(f"Operator {'granted' if granted else 'denied'} {descriptor.key}")
    return granted
