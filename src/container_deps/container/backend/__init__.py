"""Container backend abstraction.

This package provides a Protocol for container backends and a Docker implementation.
"""

from __future__ import annotations

from container_deps.types.config import ContainerDepsSettings, get_settings

from .docker import DockerBackend
from .protocol import ContainerBackend


def get_default_backend(settings: ContainerDepsSettings | None = None) -> ContainerBackend:
    """Get a Docker CLI backend configured from settings.

    Args:
        settings: Settings to read the runtime executable and command timeout from.
            If None, settings are read from the environment.
    """
    return DockerBackend.from_settings(settings or get_settings())


__all__ = [
    "ContainerBackend",
    "DockerBackend",
    "get_default_backend",
]
