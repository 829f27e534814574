"""Run external commands and capture their output.

This is the only place container_deps spawns processes. Callers own any retry
policy; commands are run exactly once.
"""

from __future__ import annotations

import subprocess

from container_deps.errors import CommandFailedError, redact_command
from container_deps.types.container import CommandResult

from .logging import logger


def execute_command(executable: str, *args: str, timeout: float | None = None) -> CommandResult:
    """Run a command and return its captured output without checking the exit code.

    Args:
        executable: Program to run (looked up on PATH).
        *args: Arguments passed to the program.
        timeout: Optional timeout in seconds.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        CommandFailedError: If the program cannot be spawned or times out.
    """
    cmd = [executable, *args]
    logger.debug(f"Running command: {redact_command(cmd)}")

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise CommandFailedError(cmd, None, f"Command timed out after {timeout}s") from e
    except OSError as e:
        raise CommandFailedError(cmd, None, f"Failed to execute {executable}: {e}") from e

    return CommandResult(
        command=cmd,
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def run_command(executable: str, *args: str, timeout: float | None = None) -> str:
    """Run a command and return its trimmed standard output.

    Args:
        executable: Program to run (looked up on PATH).
        *args: Arguments passed to the program.
        timeout: Optional timeout in seconds.

    Returns:
        Standard output with leading/trailing whitespace removed.

    Raises:
        CommandFailedError: If the program cannot be spawned, times out, or exits nonzero.
    """
    result = execute_command(executable, *args, timeout=timeout)
    if not result.success:
        raise CommandFailedError(result.command, result.returncode, result.stderr)
    return result.stdout.strip()


__all__ = [
    "execute_command",
    "run_command",
]
