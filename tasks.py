"""Main invoke tasks file. Use `inv --list` to see available tasks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from invoke.tasks import task
from rich.console import Console
from rich.table import Table

from container_deps import Container, setup_container_deps_logging

if TYPE_CHECKING:
    from invoke.context import Context

console = Console()


@task(name="lint")
def lint(ctx: Context) -> None:
    """Run linting (no fixes) - for CI."""
    console.print("[bold blue]Running ruff check...[/bold blue]")
    ctx.run("ruff check src tests tasks.py")

    console.print("[bold blue]Running ruff format check...[/bold blue]")
    ctx.run("ruff format --check src tests tasks.py")

    console.print("[bold green]All checks passed[/bold green]")


@task(name="format")
def format_code(ctx: Context) -> None:
    """Format code using ruff - for local dev."""
    ctx.run("ruff check src tests tasks.py --fix")
    ctx.run("ruff format src tests tasks.py")


@task(name="test", help={"docker": "Also run tests that need a Docker daemon"})
def run_tests(ctx: Context, docker: bool = False) -> None:
    """Run tests."""
    marker = "" if docker else ' -m "not docker"'
    ctx.run(f"pytest{marker}", pty=True)
    console.print("[bold green]All tests passed[/bold green]")


@task(
    name="smoke",
    help={
        "image": "Image to start (default: redis:7-alpine)",
        "port": "Container port to wait for (default: 6379)",
        "timeout": "Readiness timeout in seconds (default: 30)",
        "log_level": "Log level name (default: CONTAINER_DEPS_LOG_LEVEL or INFO)",
    },
)
def smoke(
    ctx: Context,
    image: str = "redis:7-alpine",
    port: int = 6379,
    timeout: int = 30,
    log_level: str | None = None,
) -> None:
    """Start a container, wait for one of its ports, print the mappings, and remove it."""
    setup_container_deps_logging(log_level)

    with Container.start(image) as container:
        container.wait_port(port, timeout=timeout)

        table = Table(title=f"{image} ({container.container_id[:12]})")
        table.add_column("Container port", justify="right")
        table.add_column("Transport")
        table.add_column("Address")
        for container_port, transport in sorted(container.transports.items()):
            table.add_row(str(container_port), transport, container.addr(container_port))
        console.print(table)

    console.print("[bold green]Smoke test passed[/bold green]")
