# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Centralized logging configuration for castplay.

This module provides structured logging using structlog, configured to:
- Write all logs to stderr (stdout carries rendered frames and info reports)
- Respect CASTPLAY_LOG_LEVEL environment variable (default: WARNING)
- Use ISO timestamps and console rendering
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from castplay.settings import Settings

__all__ = ["get_logger", "configure_logging"]


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog for castplay.

    This should be called once at application startup.
    Respects CASTPLAY_LOG_LEVEL environment variable via Settings (default: WARNING).

    Args:
        settings: Settings instance (will be created if None)
    """
    if settings is None:
        from castplay.settings import Settings

        settings = Settings()

    log_level = getattr(logging, settings.log_level.upper(), logging.WARNING)

    # stdout belongs to the player: the TUI repaints the alternate screen there
    # with cursor moves, and `castplay info` output is meant to be piped.
    # A log line on stdout would tear the frame or pollute the info report.
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__ of calling module)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
