"""Docker backend implementation.

Uses the docker CLI to manage containers. Any CLI with docker-compatible
verbs (e.g. podman) works by passing its executable name.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from container_deps.core.utils import run_command

if TYPE_CHECKING:
    from container_deps.types.config import ContainerDepsSettings


class DockerBackend:
    """Docker implementation of ContainerBackend.

    Args:
        executable: Runtime CLI to invoke (default: "docker").
        timeout: Optional timeout in seconds for each command.
    """

    def __init__(self, executable: str = "docker", timeout: float | None = None) -> None:
        self.executable = executable
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: ContainerDepsSettings) -> DockerBackend:
        """Create a backend using the runtime and timeout from settings."""
        return cls(executable=settings.runtime, timeout=settings.command_timeout)

    def _run(self, *args: str) -> str:
        return run_command(self.executable, *args, timeout=self.timeout)

    def container_run(
        self,
        *,
        image: str,
        args: Sequence[str] = (),
        env_vars: Mapping[str, str] | None = None,
    ) -> str:
        """Run a detached Docker container publishing all exposed ports."""
        cmd = ["run", "-P", "-d"]

        # Add environment variables
        if env_vars:
            for key, value in env_vars.items():
                cmd.extend(["-e", f"{key}={value}"])

        cmd.extend(args)
        cmd.append(image)

        return self._run(*cmd)

    def container_ports(self, *, container_id: str) -> str:
        """List the published ports of a Docker container."""
        return self._run("port", container_id)

    def container_stop(self, *, container_id: str) -> None:
        """Stop a Docker container."""
        self._run("stop", container_id)

    def container_wait(self, *, container_id: str) -> None:
        """Wait for a Docker container to exit."""
        self._run("wait", container_id)

    def container_kill(self, *, container_id: str) -> None:
        """Kill a Docker container."""
        self._run("kill", container_id)

    def container_remove(self, *, container_id: str) -> None:
        """Remove a Docker container."""
        self._run("rm", container_id)


__all__ = ["DockerBackend"]
