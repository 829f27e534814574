"""Logging utilities for container_deps package.

Library code only logs through ``logger``; nothing is printed until a test
suite (or the invoke tasks) calls ``setup_container_deps_logging``.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from container_deps.errors import ConfigurationError
from container_deps.types.config import get_settings

LOG_FORMAT = "[Container Deps] [%(levelname)s] %(message)s"

logger = logging.getLogger("Container-Deps")


def _resolve_level(level: int | str | None) -> int:
    """Turn a level number or name ("debug", "INFO") into a logging level number."""
    if level is None:
        level = get_settings().log_level

    if isinstance(level, int):
        return level

    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ConfigurationError(f"Unknown log level: {level!r}")
    return resolved


def setup_container_deps_logging(level: int | str | None = None, stream: TextIO | None = None) -> None:
    """
    Send container_deps logs to a stream with a short prefix.

    Args:
        level: Level number or name. If None, uses the log_level setting
            (CONTAINER_DEPS_LOG_LEVEL, default INFO).
        stream: Stream to write to (default: stdout, so logs show up with
            pytest's captured output).

    Raises:
        ConfigurationError: If level is an unknown level name.
    """
    resolved = _resolve_level(level)

    # Calling this again replaces the handler instead of stacking another one
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(resolved)
    logger.propagate = False


__all__ = [
    "LOG_FORMAT",
    "logger",
    "setup_container_deps_logging",
]
