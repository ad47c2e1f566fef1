"""HTTP helpers shared by the API layer."""

import aiohttp
from fastapi import Request

from ..config import config
from ..core.container import Container


def create_session() -> aiohttp.ClientSession:
    """Create the aiohttp session used for all upstream calls.

    Sets connection limits and a default total timeout; individual clients
    still pass their own per-request timeout.

    Returns:
        aiohttp.ClientSession: Configured HTTP session.
    """
    connector = aiohttp.TCPConnector(limit=100, limit_per_host=30)
    timeout = aiohttp.ClientTimeout(total=config.server.timeout)
    headers = {
        "Accept": "application/json",
        "User-Agent": "storefront-backend/1.0",
    }
    return aiohttp.ClientSession(connector=connector, timeout=timeout, headers=headers)


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_session(request: Request) -> aiohttp.ClientSession:
    return request.app.state.http_session
