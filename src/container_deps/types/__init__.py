"""Type definitions for container_deps."""

from .config import ContainerDepsSettings, get_settings
from .container import CommandResult, PortMapping, ProbeOutcome

__all__ = [
    "CommandResult",
    "ContainerDepsSettings",
    "PortMapping",
    "ProbeOutcome",
    "get_settings",
]
