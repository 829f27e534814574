"""container-deps - Ephemeral containerized dependencies for test suites"""

from container_deps.container import Container, ContainerBackend, DockerBackend, parse_ports
from container_deps.core.utils import logger, run_command, setup_container_deps_logging, wait_with_backoff
from container_deps.errors import (
    CommandFailedError,
    ConfigurationError,
    ContainerDepsError,
    HTTPUnavailableError,
    PortDiscoveryFailedError,
    PortUnavailableError,
    ReadinessTimeoutError,
    StartFailedError,
)
from container_deps.types import ContainerDepsSettings, PortMapping, ProbeOutcome, get_settings

__all__ = [
    "CommandFailedError",
    "ConfigurationError",
    "Container",
    "ContainerBackend",
    "ContainerDepsError",
    "ContainerDepsSettings",
    "DockerBackend",
    "HTTPUnavailableError",
    "PortDiscoveryFailedError",
    "PortMapping",
    "PortUnavailableError",
    "ProbeOutcome",
    "ReadinessTimeoutError",
    "StartFailedError",
    "get_settings",
    "logger",
    "parse_ports",
    "run_command",
    "setup_container_deps_logging",
    "wait_with_backoff",
]
