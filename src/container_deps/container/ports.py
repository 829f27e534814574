"""Parsing of the runtime's published-port listing.

The listing is what ``docker port <container>`` prints, one mapping per line::

    6379/tcp -> 0.0.0.0:32768
    6379/tcp -> [::]:32768
    53/udp -> 0.0.0.0:32769

The exact format belongs to the runtime, so only the line pattern below is
relied upon. Anything else in the text is ignored.
"""

from __future__ import annotations

import re

from container_deps.core.utils import logger
from container_deps.types.container import PortMapping

# <containerPort>/<transport> -> <anything>:<hostPort>
PORT_LINE_PATTERN = re.compile(r"^\s*(?P<container_port>\S+?)/(?P<transport>\S+)\s+->\s+.*:(?P<host_port>\S+?)\s*$")

_MAX_PORT = 65535


def _to_port(value: str) -> int | None:
    """Convert a port field to an int, or None if it is not a valid port number."""
    # int() also accepts "+80", "8_0" and non-ASCII digits
    if not (value.isascii() and value.isdigit()):
        return None
    port = int(value)
    if not 0 < port <= _MAX_PORT:
        return None
    return port


def parse_port_line(line: str) -> PortMapping | None:
    """Parse a single listing line.

    Args:
        line: One line of the port listing.

    Returns:
        PortMapping for a matching line, None for non-matching lines
        and for matching lines with malformed port numbers.
    """
    match = PORT_LINE_PATTERN.match(line)
    if match is None:
        return None

    container_port = _to_port(match.group("container_port"))
    host_port = _to_port(match.group("host_port"))
    if container_port is None or host_port is None:
        logger.debug(f"Skipping port listing line with malformed port number: {line!r}")
        return None

    return PortMapping(
        container_port=container_port,
        transport=match.group("transport"),
        host_port=host_port,
    )


def parse_ports(text: str) -> dict[int, PortMapping]:
    """Parse a port listing into a mapping keyed by container port.

    When a container port appears on several lines (e.g. IPv4 and IPv6
    bindings), the last line wins.

    Args:
        text: Output of the runtime's port listing command.

    Returns:
        Dict mapping container port to its PortMapping. Empty if nothing matched.

    Example:
        >>> parse_ports("6379/tcp -> 0.0.0.0:32768\\n")
        {6379: PortMapping(container_port=6379, transport='tcp', host_port=32768)}
    """
    ports: dict[int, PortMapping] = {}
    for line in text.splitlines():
        mapping = parse_port_line(line)
        if mapping is not None:
            ports[mapping.container_port] = mapping
    return ports


__all__ = [
    "PORT_LINE_PATTERN",
    "parse_port_line",
    "parse_ports",
]
