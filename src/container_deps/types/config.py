"""Settings for container_deps.

Environment variables can override defaults using the CONTAINER_DEPS_ prefix.
The host override is also read from DOCKER_HOST so remote-daemon setups work
without extra configuration.

Example environment variables:
    CONTAINER_DEPS_RUNTIME=podman
    DOCKER_HOST=tcp://192.168.99.100:2376
"""

from __future__ import annotations

from functools import lru_cache
from urllib.parse import urlsplit

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HOST = "127.0.0.1"

# Schemes that point at a local socket rather than a reachable host
_LOCAL_SOCKET_SCHEMES = frozenset({"unix", "npipe", "fd"})


class ContainerDepsSettings(BaseSettings):
    """Settings for starting and probing containers."""

    model_config = SettingsConfigDict(env_prefix="CONTAINER_DEPS_")

    runtime: str = "docker"
    """Executable of the container runtime CLI (docker-compatible, e.g. podman)."""

    docker_host: str | None = Field(
        default=None,
        validation_alias=AliasChoices("container_deps_docker_host", "docker_host"),
    )
    """Host override for reaching published ports (remote daemons, docker-machine)."""

    command_timeout: float | None = None
    """Timeout in seconds for each runtime command. None waits indefinitely."""

    probe_interval: float = Field(default=1.0, gt=0)
    """Fixed interval in seconds between readiness probe attempts."""

    log_level: str = "INFO"
    """Level used by setup_container_deps_logging when no level is passed."""

    @property
    def resolved_host(self) -> str:
        """Host address published ports are reachable on.

        Examples:
            ``tcp://10.0.0.5:2376`` -> ``10.0.0.5``
            ``unix:///var/run/docker.sock`` -> ``127.0.0.1``
            ``10.0.0.5`` -> ``10.0.0.5``
        """
        return resolve_host(self.docker_host)


def resolve_host(docker_host: str | None) -> str:
    """Extract the reachable host address from a docker host setting.

    Args:
        docker_host: Value of the host override (URL or bare host), or None.

    Returns:
        Hostname to use for published ports, 127.0.0.1 when unset or a local socket.
    """
    if not docker_host:
        return DEFAULT_HOST

    if "://" not in docker_host:
        return docker_host

    parts = urlsplit(docker_host)
    if parts.scheme in _LOCAL_SOCKET_SCHEMES or not parts.hostname:
        return DEFAULT_HOST
    return parts.hostname


@lru_cache
def get_settings() -> ContainerDepsSettings:
    """Get settings read from the environment (cached)."""
    return ContainerDepsSettings()


__all__ = [
    "DEFAULT_HOST",
    "ContainerDepsSettings",
    "get_settings",
    "resolve_host",
]
