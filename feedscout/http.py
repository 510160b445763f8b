"""HTTP client construction shared by the discovery stages."""

import contextlib
from typing import AsyncIterator

import httpx

from feedscout.models import DiscoveryOptions


def build_client(options: DiscoveryOptions) -> httpx.AsyncClient:
    """Create an async HTTP client configured from discovery options.

    Args:
        options: Discovery options.

    Returns:
        New client. The caller owns it and must close it.
    """
    return httpx.AsyncClient(
        timeout=options.timeout,
        follow_redirects=True,
        headers={"User-Agent": options.user_agent},
    )


@contextlib.asynccontextmanager
async def client_scope(
    client: httpx.AsyncClient | None,
    options: DiscoveryOptions,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the given client, or a temporary one closed on exit.

    Args:
        client: Caller-owned client, left open on exit.
        options: Options used when a client has to be built.

    Yields:
        Client to issue requests with.
    """
    if client is not None:
        yield client
        return

    async with build_client(options) as owned:
        yield owned
