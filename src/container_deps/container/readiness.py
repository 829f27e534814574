"""Readiness probes for published container ports.

Two probe strategies are provided, both polling at a fixed interval until a
deadline:

- ``wait_for_port``: open a transport-level connection (TCP or UDP).
- ``wait_for_http``: issue HTTP GET requests until a 2xx response arrives.

Services usually become ready within a few seconds, so a short fixed interval
keeps the added latency low. For arbitrary checks use
``container_deps.core.utils.backoff.wait_with_backoff`` instead.
"""

from __future__ import annotations

import http.client
import socket
import time
import urllib.error
import urllib.request

from container_deps.core.utils import logger
from container_deps.errors import ConfigurationError, HTTPUnavailableError, PortUnavailableError
from container_deps.types.container import ProbeOutcome

DEFAULT_PROBE_INTERVAL = 1.0

# Lower bound for a single attempt's timeout, so the last attempt still gets a chance
_MIN_ATTEMPT_TIMEOUT = 0.05

# Transport kind -> (address family, socket type)
SUPPORTED_TRANSPORTS: dict[str, tuple[int, int]] = {
    "tcp": (socket.AF_UNSPEC, socket.SOCK_STREAM),
    "tcp4": (socket.AF_INET, socket.SOCK_STREAM),
    "tcp6": (socket.AF_INET6, socket.SOCK_STREAM),
    "udp": (socket.AF_UNSPEC, socket.SOCK_DGRAM),
    "udp4": (socket.AF_INET, socket.SOCK_DGRAM),
    "udp6": (socket.AF_INET6, socket.SOCK_DGRAM),
}

# Published ports are probed directly, never through HTTP(S)_PROXY
_opener = urllib.request.build_opener(urllib.request.ProxyHandler({}))


def _connect(host: str, port: int, transport: str, timeout: float) -> None:
    """Open and immediately close a connection to host:port.

    Raises:
        OSError: If no address could be connected to.
    """
    family, socktype = SUPPORTED_TRANSPORTS[transport]
    last_error: OSError | None = None

    for af, st, proto, _, sockaddr in socket.getaddrinfo(host, port, family, socktype):
        sock = socket.socket(af, st, proto)
        try:
            sock.settimeout(timeout)
            sock.connect(sockaddr)
            return
        except OSError as e:
            last_error = e
        finally:
            sock.close()

    if last_error is not None:
        raise last_error
    raise OSError(f"No addresses found for {host}:{port}")


def probe_port(host: str, host_port: int, transport: str, timeout: float) -> ProbeOutcome:
    """Try once to connect to host:host_port.

    Args:
        host: Host address.
        host_port: Port to connect to.
        transport: Transport kind (see SUPPORTED_TRANSPORTS).
        timeout: Timeout in seconds for this attempt.

    Returns:
        ProbeOutcome, ready if the connection was established.

    Raises:
        ConfigurationError: If the transport kind is not supported.
    """
    if transport not in SUPPORTED_TRANSPORTS:
        raise ConfigurationError(f"Unsupported transport {transport!r} for port {host_port}")

    try:
        _connect(host, host_port, transport, timeout)
    except OSError as e:
        return ProbeOutcome(ready=False, host_port=host_port, message=f"{type(e).__name__}: {e}")
    return ProbeOutcome(ready=True, host_port=host_port, message=f"Connected to {host}:{host_port}/{transport}")


def probe_http(url: str, host_port: int, timeout: float) -> ProbeOutcome:
    """Send one HTTP GET request to url.

    The response body is always released, whatever the outcome.

    Args:
        url: Full URL to request.
        host_port: Host port the URL points at (reported back in the outcome).
        timeout: Timeout in seconds for this request.

    Returns:
        ProbeOutcome, ready if the response status code is in the 2xx range.
    """
    req = urllib.request.Request(url, method="GET")
    try:
        with _opener.open(req, timeout=timeout) as resp:
            status = resp.status
    except urllib.error.HTTPError as e:
        # HTTPError is raised for 4xx/5xx and holds the response body
        e.close()
        status = e.code
    except (OSError, http.client.HTTPException) as e:
        return ProbeOutcome(ready=False, host_port=host_port, message=f"{type(e).__name__}: {e}")

    return ProbeOutcome(
        ready=200 <= status < 300,
        host_port=host_port,
        message=f"GET {url} returned {status}",
        status_code=status,
    )


def wait_for_port(
    host: str,
    host_port: int,
    transport: str,
    timeout: float,
    interval: float = DEFAULT_PROBE_INTERVAL,
) -> int:
    """Poll until host:host_port accepts connections.

    Args:
        host: Host address.
        host_port: Port to connect to.
        transport: Transport kind (see SUPPORTED_TRANSPORTS).
        timeout: Maximum time to wait in seconds.
        interval: Time between attempts in seconds.

    Returns:
        host_port, once a connection succeeded.

    Raises:
        ConfigurationError: If the transport kind is not supported.
        PortUnavailableError: If no connection succeeded before the deadline.
    """
    if transport not in SUPPORTED_TRANSPORTS:
        raise ConfigurationError(f"Unsupported transport {transport!r} for port {host_port}")

    deadline = time.monotonic() + timeout
    attempt = 0
    while True:
        attempt += 1
        remaining = deadline - time.monotonic()
        outcome = probe_port(host, host_port, transport, timeout=max(remaining, _MIN_ATTEMPT_TIMEOUT))
        if outcome.ready:
            logger.info(f"Port {host}:{host_port}/{transport} is ready after {attempt} attempt(s)")
            return host_port

        if time.monotonic() >= deadline:
            raise PortUnavailableError(
                f"Port {host}:{host_port}/{transport} not available after {timeout:.1f}s: {outcome.message}"
            )

        logger.debug(f"Port {host}:{host_port} not ready ({outcome.message}), retrying in {interval}s")
        time.sleep(interval)


def wait_for_http(
    url: str,
    host_port: int,
    timeout: float,
    interval: float = DEFAULT_PROBE_INTERVAL,
) -> int:
    """Poll until a GET request to url returns a 2xx status.

    Args:
        url: Full URL to request.
        host_port: Host port the URL points at (returned on success).
        timeout: Maximum time to wait in seconds.
        interval: Time between attempts in seconds.

    Returns:
        host_port, once a 2xx response was received.

    Raises:
        HTTPUnavailableError: If no 2xx response was received before the deadline.
            Carries the last status code, if any response was received.
    """
    deadline = time.monotonic() + timeout
    attempt = 0
    while True:
        attempt += 1
        remaining = deadline - time.monotonic()
        outcome = probe_http(url, host_port, timeout=max(remaining, _MIN_ATTEMPT_TIMEOUT))
        if outcome.ready:
            logger.info(f"HTTP endpoint {url} is ready after {attempt} attempt(s)")
            return host_port

        if time.monotonic() >= deadline:
            raise HTTPUnavailableError(
                f"HTTP endpoint {url} not available after {timeout:.1f}s: {outcome.message}",
                status_code=outcome.status_code,
            )

        logger.debug(f"HTTP endpoint {url} not ready ({outcome.message}), retrying in {interval}s")
        time.sleep(interval)


__all__ = [
    "DEFAULT_PROBE_INTERVAL",
    "SUPPORTED_TRANSPORTS",
    "probe_http",
    "probe_port",
    "wait_for_http",
    "wait_for_port",
]
