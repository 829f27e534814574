"""Container backend protocol definition.

Defines the interface for container operations that can be implemented
by different container runtimes (Docker, Podman, etc.) or by test doubles.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol


class ContainerBackend(Protocol):
    """Protocol for container backend implementations.

    Every method raises ``CommandFailedError`` (or another ``ContainerDepsError``)
    when the runtime reports a failure.
    """

    def container_run(
        self,
        *,
        image: str,
        args: Sequence[str] = (),
        env_vars: Mapping[str, str] | None = None,
    ) -> str:
        """Create and start a detached container with all exposed ports published.

        Args:
            image: Image reference to run.
            args: Extra runtime arguments placed before the image (e.g. ["--name", "db"]).
            env_vars: Environment variables injected into the container.

        Returns:
            Runtime-assigned container ID.
        """
        ...

    def container_ports(self, *, container_id: str) -> str:
        """List the published ports of a container.

        Args:
            container_id: Container ID.

        Returns:
            Port listing text, one "<port>/<transport> -> <host>:<port>" line per binding.
        """
        ...

    def container_stop(self, *, container_id: str) -> None:
        """Gracefully stop a container."""
        ...

    def container_wait(self, *, container_id: str) -> None:
        """Block until a container has exited."""
        ...

    def container_kill(self, *, container_id: str) -> None:
        """Forcefully terminate a container."""
        ...

    def container_remove(self, *, container_id: str) -> None:
        """Remove a (stopped) container."""
        ...


__all__ = ["ContainerBackend"]
