"""Pytest configuration for all tests."""

import shutil
import socket
import threading
import time
from collections.abc import Generator, Mapping, Sequence
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from container_deps.errors import CommandFailedError
from container_deps.types.config import ContainerDepsSettings


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "docker: marks tests that require Docker")


@pytest.fixture(scope="session")
def docker():
    """Check that docker is available and return the CLI name."""
    if shutil.which("docker") is None:
        pytest.skip("'docker' is missing or not available in PATH.")
    return "docker"


@dataclass
class FakeBackend:
    """In-memory ContainerBackend that records the calls made to it.

    Set ``fail_on`` to the name of a method (e.g. "container_stop") to make
    that call raise CommandFailedError.
    """

    container_id: str = "0123456789abcdef0123456789abcdef"
    port_listing: str = "6379/tcp -> 0.0.0.0:32768\n"
    fail_on: set[str] = field(default_factory=set)
    calls: list[tuple[str, dict]] = field(default_factory=list)

    def _record(self, name: str, **kwargs) -> None:
        self.calls.append((name, kwargs))
        if name in self.fail_on:
            raise CommandFailedError(["fake", name], 1, f"{name} failed")

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def container_run(
        self,
        *,
        image: str,
        args: Sequence[str] = (),
        env_vars: Mapping[str, str] | None = None,
    ) -> str:
        self._record("container_run", image=image, args=list(args), env_vars=env_vars)
        return self.container_id

    def container_ports(self, *, container_id: str) -> str:
        self._record("container_ports", container_id=container_id)
        return self.port_listing

    def container_stop(self, *, container_id: str) -> None:
        self._record("container_stop", container_id=container_id)

    def container_wait(self, *, container_id: str) -> None:
        self._record("container_wait", container_id=container_id)

    def container_kill(self, *, container_id: str) -> None:
        self._record("container_kill", container_id=container_id)

    def container_remove(self, *, container_id: str) -> None:
        self._record("container_remove", container_id=container_id)


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def settings() -> ContainerDepsSettings:
    """Settings that ignore the ambient environment's host override."""
    return ContainerDepsSettings(docker_host=None, probe_interval=0.05)


def _find_free_port() -> int:
    """Find a free port on localhost."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def free_port() -> int:
    """A TCP port on 127.0.0.1 that nothing is listening on."""
    return _find_free_port()


@pytest.fixture
def tcp_listener() -> Generator[int]:
    """A TCP socket listening on 127.0.0.1; yields its port."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        s.listen()
        yield s.getsockname()[1]


@dataclass
class StatusServer:
    """Local HTTP server answering GET requests with a configurable status sequence.

    The first ``len(statuses)`` requests get the listed status codes, every
    later request gets ``final_status``. If ``unavailable_until`` is set, every
    request before that monotonic time gets 503 instead.
    """

    port: int
    statuses: list[int]
    final_status: int = 200
    unavailable_until: float | None = None
    requests: list[str] = field(default_factory=list)

    def next_status(self, path: str) -> int:
        self.requests.append(path)
        if self.unavailable_until is not None and time.monotonic() < self.unavailable_until:
            return 503
        if len(self.requests) <= len(self.statuses):
            return self.statuses[len(self.requests) - 1]
        return self.final_status


@pytest.fixture
def status_server() -> Generator[StatusServer]:
    """Start a threaded HTTP server on 127.0.0.1; configure it via the yielded StatusServer."""
    state = StatusServer(port=0, statuses=[])

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self):
            status = state.next_status(self.path)
            body = f"status {status}".encode()
            self.send_response(status)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format, *args):
            pass

    server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    state.port = server.server_address[1]
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield state
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
