from .backoff import ExponentialBackoff, wait_with_backoff
from .command import execute_command, run_command
from .logging import logger, setup_container_deps_logging

__all__ = [
    "ExponentialBackoff",
    "execute_command",
    "logger",
    "run_command",
    "setup_container_deps_logging",
    "wait_with_backoff",
]
