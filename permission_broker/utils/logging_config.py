"""Centralized logging configuration.

This module provides consistent logging setup for applications embedding
the permission broker.
"""

import logging
from pathlib import Path

from ..core.config import settings


def setup_logging(
    name: str = "permission_broker",
    level: str | None = None,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure logging with consistent format.

    Args:
        name: Logger name (typically __name__ from the calling module)
        level: Log level (defaults to the LOG_LEVEL setting)
        log_file: Optional file path for logging output. When omitted and
            LOG_DIR is configured, a dated file for ``name`` is used.

    Returns:
        Configured logger instance
    """
    level = level or settings.log_level

    if log_file is None and settings.log_dir is not None:
        log_file = settings.get_log_file(name)

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,  # Override any existing configuration
    )

    return logging.getLogger(name)
