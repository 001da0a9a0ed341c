"""
Pytest configuration and shared fixtures for httpfacade tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Runs a local echo server for end-to-end requests
3. Provides facades and isolates the process-wide singleton
"""

import os
import socket
import sys
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from httpfacade.config import ClientConfig, set_default_config  # noqa: E402
from httpfacade.http import HttpClientFacade, reset_instance  # noqa: E402
from httpfacade.receipts import ReceiptRecorder  # noqa: E402


# =============================================================================
# Echo Server
# =============================================================================

class _EchoHandler(BaseHTTPRequestHandler):
    """
    /echo          -> 200, body echoed back, request metadata in X-Echo-* headers
    /status/<code> -> that status, empty body
    /slow          -> sleeps before answering (for timeout tests)
    """

    protocol_version = "HTTP/1.1"

    def _read_body(self) -> bytes:
        length = int(self.headers.get("Content-Length") or 0)
        return self.rfile.read(length) if length else b""

    def _handle(self) -> None:
        body = self._read_body()
        self.server.requests.append({
            "method": self.command,
            "path": self.path,
            "headers": {k: v for k, v in self.headers.items()},
            "body": body,
        })

        if self.path.startswith("/slow"):
            time.sleep(1.0)
            status = 200
        elif self.path.startswith("/status/"):
            status = int(self.path.split("/")[2])
            body = b""
        else:
            status = 200

        self.send_response(status)
        self.send_header("Content-Type", "application/octet-stream")
        self.send_header("Content-Length", str(len(body)))
        self.send_header("X-Echo-Method", self.command)
        self.send_header("X-Echo-Path", self.path)
        self.end_headers()
        self.wfile.write(body)

    do_GET = _handle
    do_POST = _handle

    def log_message(self, format, *args):
        pass


class EchoServer:
    def __init__(self) -> None:
        self._httpd = ThreadingHTTPServer(("127.0.0.1", 0), _EchoHandler)
        self._httpd.daemon_threads = True
        self._httpd.requests = []
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)

    @property
    def port(self) -> int:
        return self._httpd.server_address[1]

    @property
    def requests(self) -> list:
        return self._httpd.requests

    @property
    def last_request(self) -> dict:
        return self._httpd.requests[-1]

    def url(self, path: str = "/echo") -> str:
        return f"http://127.0.0.1:{self.port}{path}"

    def start(self) -> "EchoServer":
        self._thread.start()
        return self

    def stop(self) -> None:
        self._httpd.shutdown()
        self._httpd.server_close()


@pytest.fixture(scope="session")
def echo_server():
    """A local HTTP server shared by the whole test session."""
    server = EchoServer().start()
    yield server
    server.stop()


@pytest.fixture
def echo(echo_server):
    """The shared echo server with its request log cleared."""
    echo_server.requests.clear()
    return echo_server


@pytest.fixture(autouse=True)
def _no_proxy_env(monkeypatch):
    """Keep local requests off any proxy configured in the environment."""
    for name in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def closed_port() -> int:
    """A local port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


# =============================================================================
# Facade Fixtures
# =============================================================================

@pytest.fixture
def facade():
    """A facade with default (verifying) config."""
    with HttpClientFacade(ClientConfig()) as client:
        yield client


@pytest.fixture
def recorder():
    return ReceiptRecorder()


@pytest.fixture
def recording_facade(recorder):
    with HttpClientFacade(ClientConfig(), recorder=recorder) as client:
        yield client


@pytest.fixture
def fresh_singleton(monkeypatch):
    """Isolate the process-wide facade and default config."""
    for name in list(os.environ):
        if name.startswith("HTTPFACADE_"):
            monkeypatch.delenv(name, raising=False)
    reset_instance()
    set_default_config(None)
    yield
    reset_instance()
    set_default_config(None)

