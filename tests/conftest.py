"""Shared fixtures."""

from collections.abc import Iterator

import pytest
from aioresponses import aioresponses as aioresponses_cls


@pytest.fixture
def aioresponses() -> Iterator[aioresponses_cls]:
    """Mock every request made through aiohttp sessions."""
    with aioresponses_cls() as mocked:
        yield mocked
