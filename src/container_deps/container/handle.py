"""Container handle for ephemeral test dependencies.

This module provides the Container class: start a container with all exposed
ports published, look up where those ports landed on the host, wait until the
service inside is ready, and tear it down again.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, TypeVar

from container_deps.core.utils import logger, wait_with_backoff
from container_deps.errors import (
    CommandFailedError,
    ConfigurationError,
    ContainerDepsError,
    PortDiscoveryFailedError,
    StartFailedError,
)
from container_deps.types.config import ContainerDepsSettings, get_settings

from .backend import ContainerBackend, get_default_backend
from .ports import parse_ports
from .readiness import DEFAULT_PROBE_INTERVAL, SUPPORTED_TRANSPORTS, wait_for_http, wait_for_port

if TYPE_CHECKING:
    from types import TracebackType

    from container_deps.types.container import PortMapping

T = TypeVar("T")


def join_host_port(host: str, port: int) -> str:
    """Combine host and port into "host:port", bracketing IPv6 addresses."""
    if ":" in host and not host.startswith("["):
        return f"[{host}]:{port}"
    return f"{host}:{port}"


class Container:
    """A running container and the host ports its exposed ports are published on.

    Instances are created by ``Container.start`` once the runtime has started
    the container and its ports have been listed. The host address and port
    mappings never change afterwards.

    Args:
        container_id: Runtime-assigned container ID.
        image: Image the container was started from.
        host: Host address published ports are reachable on.
        port_mappings: Container port -> PortMapping.
        backend: Backend used for teardown.
        probe_interval: Fixed interval in seconds between readiness probe attempts.

    Example:
        >>> with Container.start("redis:7-alpine") as redis:
        ...     redis.wait_port(6379, timeout=30)
        ...     client = Redis(host=redis.host, port=redis.port(6379))
    """

    def __init__(
        self,
        *,
        container_id: str,
        image: str,
        host: str,
        port_mappings: Mapping[int, PortMapping],
        backend: ContainerBackend,
        probe_interval: float = DEFAULT_PROBE_INTERVAL,
    ) -> None:
        self._container_id = container_id
        self._image = image
        self._host = host
        self._port_mappings = MappingProxyType(dict(port_mappings))
        self._backend = backend
        self._probe_interval = probe_interval

    @classmethod
    def start(
        cls,
        image: str,
        *args: str,
        env_vars: Mapping[str, str] | None = None,
        backend: ContainerBackend | None = None,
        host: str | None = None,
        settings: ContainerDepsSettings | None = None,
    ) -> Container:
        """Start a detached container publishing all exposed ports to random host ports.

        Args:
            image: Image reference to run.
            *args: Extra runtime arguments placed before the image (e.g. "--name", "db").
            env_vars: Environment variables injected into the container.
            backend: Container backend. If None, a Docker CLI backend built from settings is used.
            host: Host address published ports are reachable on. If None, the host
                override from settings is used, falling back to 127.0.0.1.
            settings: Settings to use. If None, settings are read from the environment.

        Returns:
            Container handle for the running container.

        Raises:
            StartFailedError: If the runtime fails to start the container.
            PortDiscoveryFailedError: If the published ports cannot be listed.
        """
        settings = settings or get_settings()
        backend = backend or get_default_backend(settings)

        logger.info(f"Starting container (image: {image})")
        try:
            container_id = backend.container_run(image=image, args=args, env_vars=env_vars)
        except CommandFailedError as e:
            raise StartFailedError(f"Failed to run image {image} with args {list(args)}: {e.stderr.strip()}") from e

        try:
            listing = backend.container_ports(container_id=container_id)
        except CommandFailedError as e:
            raise PortDiscoveryFailedError(f"Failed to get ports of container {container_id} ({image})") from e

        port_mappings = parse_ports(listing)
        resolved_host = host or settings.resolved_host
        published = ", ".join(f"{p.container_port}/{p.transport}->{p.host_port}" for p in port_mappings.values())
        logger.info(f"Container {container_id[:12]} started (image: {image}, host: {resolved_host}, ports: {published})")

        return cls(
            container_id=container_id,
            image=image,
            host=resolved_host,
            port_mappings=port_mappings,
            backend=backend,
            probe_interval=settings.probe_interval,
        )

    @property
    def container_id(self) -> str:
        """Runtime-assigned container ID."""
        return self._container_id

    @property
    def image(self) -> str:
        """Image the container was started from."""
        return self._image

    @property
    def host(self) -> str:
        """Host address published ports are reachable on."""
        return self._host

    @property
    def probe_interval(self) -> float:
        """Fixed interval in seconds between readiness probe attempts."""
        return self._probe_interval

    @property
    def port_mappings(self) -> Mapping[int, PortMapping]:
        """Read-only mapping of container port -> PortMapping."""
        return self._port_mappings

    @property
    def ports(self) -> Mapping[int, int]:
        """Read-only mapping of container port -> host port."""
        return MappingProxyType({p: m.host_port for p, m in self._port_mappings.items()})

    @property
    def transports(self) -> Mapping[int, str]:
        """Read-only mapping of container port -> transport kind."""
        return MappingProxyType({p: m.transport for p, m in self._port_mappings.items()})

    def port(self, container_port: int) -> int:
        """Host port the container port is published on, or 0 if it is not exposed."""
        mapping = self._port_mappings.get(container_port)
        return mapping.host_port if mapping is not None else 0

    def addr(self, container_port: int) -> str:
        """Address of a published port, e.g. "127.0.0.1:32768"."""
        return join_host_port(self._host, self.port(container_port))

    def stop(self) -> None:
        """Stop and remove the container.

        Waiting for the container to exit is best effort: the runtime may report
        an error if the container is already gone, which is ignored.

        Raises:
            CommandFailedError: If stopping or removing the container fails.
        """
        logger.info(f"Stopping container: {self._container_id[:12]} ({self._image})")
        self._backend.container_stop(container_id=self._container_id)

        try:
            self._backend.container_wait(container_id=self._container_id)
        except CommandFailedError as e:
            logger.debug(f"Ignoring wait failure for container {self._container_id[:12]}: {e}")

        self._backend.container_remove(container_id=self._container_id)
        logger.info("Container stopped")

    def kill_remove(self) -> None:
        """Kill and remove the container.

        Raises:
            CommandFailedError: If killing or removing the container fails.
        """
        logger.info(f"Killing container: {self._container_id[:12]} ({self._image})")
        self._backend.container_kill(container_id=self._container_id)
        self._backend.container_remove(container_id=self._container_id)
        logger.info("Container removed")

    def wait_port(self, container_port: int, timeout: float) -> int:
        """Wait until a published port accepts connections.

        Args:
            container_port: Port exposed inside the container.
            timeout: Maximum time to wait in seconds.

        Returns:
            Host port the container port is published on.

        Raises:
            ConfigurationError: If the port is not exposed or its transport is unknown.
            PortUnavailableError: If the port does not accept connections within timeout.
        """
        host_port = self.port(container_port)
        if host_port == 0:
            raise ConfigurationError(f"Port {container_port} is not exposed on {self._image}")

        transport = self._port_mappings[container_port].transport
        if not transport:
            raise ConfigurationError(f"Transport not described for port {container_port} on {self._image}")
        if transport not in SUPPORTED_TRANSPORTS:
            raise ConfigurationError(f"Unsupported transport {transport!r} for port {container_port} on {self._image}")

        logger.info(f"Waiting for port {container_port}/{transport} on {self._image} (timeout: {timeout}s)")
        return wait_for_port(self._host, host_port, transport, timeout, interval=self._probe_interval)

    def wait_http(self, container_port: int, path: str, timeout: float) -> int:
        """Wait until an HTTP GET to a published port returns a 2xx status.

        Args:
            container_port: Port exposed inside the container.
            path: URL path to request (e.g. "/health").
            timeout: Maximum time to wait in seconds.

        Returns:
            Host port the container port is published on.

        Raises:
            ConfigurationError: If the port is not exposed.
            HTTPUnavailableError: If no 2xx response is received within timeout.
        """
        host_port = self.port(container_port)
        if host_port == 0:
            raise ConfigurationError(f"Port {container_port} is not exposed on {self._image}")

        if path and not path.startswith("/"):
            path = f"/{path}"
        url = f"http://{self.addr(container_port)}{path}"

        logger.info(f"Waiting for {url} on {self._image} (timeout: {timeout}s)")
        return wait_for_http(url, host_port, timeout, interval=self._probe_interval)

    def wait(
        self,
        check: Callable[[], T],
        max_interval: float | None = None,
        max_wait: float | None = None,
    ) -> T:
        """Retry ``check`` with exponential backoff until it stops raising.

        See ``container_deps.core.utils.backoff.wait_with_backoff``.
        """
        return wait_with_backoff(check, max_interval=max_interval, max_wait=max_wait)

    def __enter__(self) -> Container:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            self.stop()
            return

        # Keep the exception raised in the with-block; teardown failure is only logged
        try:
            self.stop()
        except ContainerDepsError as e:
            logger.error(f"Failed to stop container {self._container_id[:12]} ({self._image}): {e}")

    def __repr__(self) -> str:
        return f"Container(id={self._container_id[:12]!r}, image={self._image!r}, host={self._host!r})"


__all__ = [
    "Container",
    "join_host_port",
]
