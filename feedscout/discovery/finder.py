"""Feed discovery - fetch a page and find the feeds it points to."""

import logging

import httpx

from feedscout.discovery.links import extract_feed_links_from_stream
from feedscout.discovery.prober import scan_common_paths
from feedscout.errors import NotFoundError, RequestError
from feedscout.http import client_scope
from feedscout.models import DiscoveryOptions, FeedCandidate

logger = logging.getLogger(__name__)


async def find_feeds(
    url: str,
    options: DiscoveryOptions | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> list[FeedCandidate]:
    """Discover the feeds advertised by a web page.

    The page head is scanned for <link rel="alternate"> feed declarations.
    If none are found and ``options.scan_common_paths`` is set, well-known
    feed paths on the page's origin are probed instead.

    Args:
        url: Page URL.
        options: Discovery options. Defaults are used when omitted.
        client: Shared HTTP client. One is built from the options when omitted.

    Returns:
        Feed candidates. Head links keep document order; probed paths
        come back in no particular order.

    Raises:
        RequestError: If the page cannot be fetched or returns non-2xx.
        NotFoundError: If no feeds are found.
    """
    options = options or DiscoveryOptions()

    async with client_scope(client, options) as http:
        feeds = await _scan_page(http, url, options)
        if feeds:
            logger.info("Found %d feeds linked from %s", len(feeds), url)
            return feeds

        if options.scan_common_paths:
            logger.info("No feed links on %s, probing common paths", url)
            feeds = await scan_common_paths(
                url,
                options.max_concurrency,
                options=options,
                client=http,
            )
            if feeds:
                return feeds

    raise NotFoundError(url)


async def _scan_page(
    client: httpx.AsyncClient,
    url: str,
    options: DiscoveryOptions,
) -> list[FeedCandidate]:
    """Fetch the page and classify the links in its head section.

    Args:
        client: HTTP client.
        url: Page URL.
        options: Discovery options.

    Returns:
        Feed candidates in document order.

    Raises:
        RequestError: On transport failure or non-2xx status.
    """
    try:
        async with client.stream("GET", url, follow_redirects=True) as response:
            logger.debug("GET %s -> %d", url, response.status_code)
            if not response.is_success:
                raise RequestError(url, status_code=response.status_code)

            return await extract_feed_links_from_stream(
                response.aiter_bytes(),
                url,
                max_bytes=options.max_head_size,
                encoding=response.charset_encoding or "utf-8",
            )
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise RequestError(url, cause=e) from e
