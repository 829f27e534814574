"""Container-related type definitions for container_deps."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PortMapping(BaseModel):
    """A published port of a running container.

    Attributes:
        container_port: Port exposed inside the container (e.g., 6379).
        transport: Transport kind reported by the runtime (e.g., "tcp", "udp").
        host_port: Port on the runtime host the container port is published to.
    """

    model_config = ConfigDict(frozen=True)

    container_port: int = Field(gt=0, le=65535, description="Port exposed inside the container")
    transport: str = Field(description="Transport kind reported by the runtime")
    host_port: int = Field(gt=0, le=65535, description="Host port the container port is published to")


class ProbeOutcome(BaseModel):
    """Result of a single readiness probe attempt.

    Attributes:
        ready: Whether the target accepted the connection / answered with a 2xx status.
        host_port: Host port that was probed.
        message: Human-readable description of the outcome.
        status_code: HTTP status code (HTTP probes only, None if no response was received).
    """

    model_config = ConfigDict(frozen=True)

    ready: bool = Field(description="Whether the target is ready")
    host_port: int = Field(description="Host port that was probed")
    message: str = Field(default="", description="Human-readable description of the outcome")
    status_code: int | None = Field(default=None, description="HTTP status code (HTTP probes only)")


class CommandResult(BaseModel):
    """Result from executing an external command.

    Attributes:
        command: Full command line that was executed.
        stdout: Standard output from the command
        stderr: Standard error from the command
        returncode: Exit code of the command (0 indicates success)
    """

    command: list[str] = Field(default_factory=list, description="Full command line that was executed")
    stdout: str = Field(default="", description="Standard output from the command")
    stderr: str = Field(default="", description="Standard error from the command")
    returncode: int = Field(description="Exit code of the command (0 indicates success)")

    @property
    def success(self) -> bool:
        """Check if command executed successfully (returncode == 0)."""
        return self.returncode == 0


__all__ = [
    "CommandResult",
    "PortMapping",
    "ProbeOutcome",
]
