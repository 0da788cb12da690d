"""Construction of the shared aiohttp session."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import aiohttp

from http_latency.config import LatencySettings


@asynccontextmanager
async def open_session(
    settings: LatencySettings,
) -> AsyncGenerator[aiohttp.ClientSession, None]:
    """Open a session suitable for latency measurement.

    The connector is unbounded because the dispatcher enforces concurrency.
    Connections are closed after each response so every measurement includes
    connection establishment.
    """
    connector = aiohttp.TCPConnector(limit=0, limit_per_host=0, force_close=True)
    async with aiohttp.ClientSession(
        connector=connector,
        headers={"User-Agent": settings.user_agent},
        timeout=aiohttp.ClientTimeout(total=None),
    ) as session:
        yield session
