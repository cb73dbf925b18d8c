"""HTTP session utilities for davkeep.

This module provides utilities for creating configured HTTP sessions
with timeouts taken from settings.conf.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiohttp

from davkeep.constants import DEFAULT_TIMEOUT_SECONDS
from davkeep.domain.types import GlobalConfig


@asynccontextmanager
async def create_http_session(
    global_config: GlobalConfig,
) -> AsyncIterator[aiohttp.ClientSession]:
    """Create configured HTTP session.

    Connect and read timeouts come from ``network.timeout_seconds``; the
    total is left open because archive transfers can be large.

    Args:
        global_config: Global configuration dictionary

    Yields:
        Configured aiohttp.ClientSession

    """
    network_cfg = global_config.get("network", {})
    timeout_seconds = int(
        network_cfg.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
    )

    timeout = aiohttp.ClientTimeout(
        total=None,
        sock_read=timeout_seconds * 3,
        sock_connect=timeout_seconds,
    )
    connector = aiohttp.TCPConnector(limit=4)

    async with aiohttp.ClientSession(
        timeout=timeout,
        connector=connector,
    ) as session:
        yield session
