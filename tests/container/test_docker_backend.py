"""Tests for the docker CLI backend (commands are intercepted, no daemon needed)."""

import pytest

from container_deps.container import DockerBackend, get_default_backend
from container_deps.container.backend import docker as docker_module
from container_deps.errors import CommandFailedError
from container_deps.types import ContainerDepsSettings


@pytest.fixture
def recorded_commands(monkeypatch):
    """Replace run_command in the docker backend and record every invocation."""
    commands: list[tuple[str, ...]] = []
    outputs = {"run": "abc123", "port": "6379/tcp -> 0.0.0.0:32768"}

    def fake_run_command(executable, *args, timeout=None):
        commands.append((executable, *args))
        return outputs.get(args[0], "")

    monkeypatch.setattr(docker_module, "run_command", fake_run_command)
    return commands


def test_container_run_publishes_all_ports_detached(recorded_commands):
    backend = DockerBackend()

    container_id = backend.container_run(
        image="redis:7",
        args=["--name", "cache"],
        env_vars={"A": "1", "B": "two"},
    )

    assert container_id == "abc123"
    assert recorded_commands == [
        ("docker", "run", "-P", "-d", "-e", "A=1", "-e", "B=two", "--name", "cache", "redis:7"),
    ]


def test_container_run_without_env_or_args(recorded_commands):
    DockerBackend(executable="podman").container_run(image="postgres:16")

    assert recorded_commands == [("podman", "run", "-P", "-d", "postgres:16")]


def test_lifecycle_verbs(recorded_commands):
    backend = DockerBackend()

    assert backend.container_ports(container_id="abc") == "6379/tcp -> 0.0.0.0:32768"
    backend.container_stop(container_id="abc")
    backend.container_wait(container_id="abc")
    backend.container_kill(container_id="abc")
    backend.container_remove(container_id="abc")

    assert [cmd[1:] for cmd in recorded_commands] == [
        ("port", "abc"),
        ("stop", "abc"),
        ("wait", "abc"),
        ("kill", "abc"),
        ("rm", "abc"),
    ]


def test_failures_propagate(monkeypatch):
    def failing_run_command(executable, *args, timeout=None):
        raise CommandFailedError([executable, *args], 1, "Error: No such container: abc")

    monkeypatch.setattr(docker_module, "run_command", failing_run_command)

    with pytest.raises(CommandFailedError, match="No such container"):
        DockerBackend().container_stop(container_id="abc")


def test_from_settings_uses_runtime_and_timeout():
    backend = get_default_backend(ContainerDepsSettings(runtime="podman", command_timeout=12.5))

    assert isinstance(backend, DockerBackend)
    assert backend.executable == "podman"
    assert backend.timeout == 12.5


def test_timeout_is_passed_to_run_command(monkeypatch):
    timeouts = []

    def fake_run_command(executable, *args, timeout=None):
        timeouts.append(timeout)
        return ""

    monkeypatch.setattr(docker_module, "run_command", fake_run_command)

    DockerBackend(timeout=3).container_remove(container_id="abc")

    assert timeouts == [3]
