"""Core modules for container_deps."""

from .utils.logging import setup_container_deps_logging

__all__ = [
    "setup_container_deps_logging",
]
