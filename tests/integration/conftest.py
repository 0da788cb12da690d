"""Fixtures for integration tests."""

import socket
from collections.abc import AsyncGenerator

import pytest

from http_latency.testing.servers import LiveServer, live_server


@pytest.fixture
async def server() -> AsyncGenerator[LiveServer, None]:
    """Live application on a free localhost port."""
    async with live_server() as running:
        yield running


@pytest.fixture
def closed_port() -> int:
    """Localhost port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]
