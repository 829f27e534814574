"""Error types raised by container_deps.

Every error derives from ``ContainerDepsError`` so callers can catch the whole
family at once. Readiness failures also derive from ``TimeoutError`` and
configuration failures from ``ValueError``.
"""

from __future__ import annotations

from collections.abc import Sequence

REDACTED = "***"


def redact_command(command: Sequence[str]) -> str:
    """Join a command line for display, hiding environment variable values.

    Values passed with ``-e KEY=VALUE``, ``--env KEY=VALUE`` or ``--env=KEY=VALUE``
    become ``KEY=***``. A bare ``-e KEY`` (value taken from the caller's
    environment) is shown as is.
    """
    parts = []
    after_env_flag = False
    for part in command:
        if after_env_flag:
            key, sep, _ = part.partition("=")
            part = f"{key}={REDACTED}" if sep else part
            after_env_flag = False
        elif part in ("-e", "--env"):
            after_env_flag = True
        elif part.startswith("--env="):
            key, sep, _ = part.removeprefix("--env=").partition("=")
            part = f"--env={key}={REDACTED}" if sep else part
        parts.append(part)
    return " ".join(parts)


class ContainerDepsError(Exception):
    """Base error for container_deps."""


class CommandFailedError(ContainerDepsError):
    """Raised when an external command cannot be spawned or exits nonzero.

    Attributes:
        command: Full command line that was executed.
        returncode: Exit code of the process (None if it never ran to completion).
        stderr: Captured standard error output.
    """

    def __init__(self, command: list[str], returncode: int | None, stderr: str) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Command failed ({redact_command(command)}) with exit code {returncode}: {stderr.strip()}")


class StartFailedError(ContainerDepsError):
    """Raised when the runtime fails to start a container."""


class PortDiscoveryFailedError(ContainerDepsError):
    """Raised when the published ports of a started container cannot be listed."""


class ConfigurationError(ContainerDepsError, ValueError):
    """Raised for errors that retrying cannot fix (e.g. a port that was never exposed)."""


class ReadinessTimeoutError(ContainerDepsError, TimeoutError):
    """Base error for readiness probes that did not succeed before their deadline."""


class PortUnavailableError(ReadinessTimeoutError):
    """Raised when a port does not accept connections before the deadline."""


class HTTPUnavailableError(ReadinessTimeoutError):
    """Raised when an HTTP endpoint does not answer with a 2xx status before the deadline.

    Attributes:
        status_code: Last HTTP status code received, or None if no response was received.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


__all__ = [
    "CommandFailedError",
    "ConfigurationError",
    "ContainerDepsError",
    "HTTPUnavailableError",
    "PortDiscoveryFailedError",
    "PortUnavailableError",
    "ReadinessTimeoutError",
    "StartFailedError",
]
