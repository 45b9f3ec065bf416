"""
pytest configuration and fixtures.
"""

import http.client
import json
import socket
import threading
from typing import Generator, Optional

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from movieserver import HTTPServer, ServerConfig, create_app
from movieserver.movies import MovieStore


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request for a movie."""
    return (
        b"GET /movie/1234567890?verbose=1 HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: application/json\r\n"
        b"Connection: keep-alive\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with a movie JSON body."""
    body = b'{"name": "Inception", "year": 2010, "was_good": true}'
    return (
        b"POST /movie/ HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Content-Type: application/json\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"Connection: close\r\n"
        b"\r\n"
    ) + body


@pytest.fixture
def config() -> ServerConfig:
    """Server configuration for tests."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,
        min_workers=2,
        max_workers=8,
        timeout=5.0,
        keep_alive_timeout=1.0,
        log_level="WARNING",
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class RunningServer:
    """An HTTPServer serving from a background thread."""

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()
        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=10.0)

    def request(self, method: str, path: str, body=None, headers: Optional[dict] = None):
        """
        One request on a fresh connection.

        A dict body is sent as JSON with Content-Type: application/json.

        Returns:
            (status, headers, decoded JSON body)
        """
        headers = dict(headers or {})
        headers.setdefault("Connection", "close")
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
            headers.setdefault("Content-Type", "application/json")

        conn = http.client.HTTPConnection("127.0.0.1", self.port, timeout=5)
        try:
            conn.request(method, path, body=body, headers=headers)
            response = conn.getresponse()
            raw = response.read()
            return response.status, dict(response.getheaders()), json.loads(raw) if raw else None
        finally:
            conn.close()


@pytest.fixture
def store() -> MovieStore:
    return MovieStore()


@pytest.fixture
def movie_server(config: ServerConfig, store: MovieStore) -> Generator[RunningServer, None, None]:
    """The movie application on an ephemeral port."""
    running = RunningServer(create_app(config, store=store))
    running.start()
    yield running
    running.stop()
