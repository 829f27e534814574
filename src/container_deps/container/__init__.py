"""Container lifecycle and readiness for test dependencies.

This package provides the Container handle, the runtime backend abstraction,
the port listing parser, and readiness probes.
"""

from .backend import ContainerBackend, DockerBackend, get_default_backend
from .handle import Container, join_host_port
from .ports import parse_port_line, parse_ports
from .readiness import probe_http, probe_port, wait_for_http, wait_for_port

__all__ = [
    "Container",
    "ContainerBackend",
    "DockerBackend",
    "get_default_backend",
    "join_host_port",
    "parse_port_line",
    "parse_ports",
    "probe_http",
    "probe_port",
    "wait_for_http",
    "wait_for_port",
]
