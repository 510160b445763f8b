"""Common feed path probing - find feeds a page does not advertise."""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum

import httpx

from feedscout.discovery.url_utils import get_origin
from feedscout.http import client_scope
from feedscout.models import (
    DEFAULT_MAX_CONCURRENCY,
    DiscoveryOptions,
    FeedCandidate,
    FeedKind,
    kind_for_content_type,
)

logger = logging.getLogger(__name__)

# Bytes of body inspected when the declared content type is inconclusive
SNIFF_SIZE = 1024


class ProbeStatus(str, Enum):
    """Outcome of probing one path."""

    FOUND = "found"
    MISSING = "missing"
    ERROR = "error"


@dataclass
class ProbeResult:
    """Result of probing a single candidate path."""

    path: str
    url: str
    status: ProbeStatus
    candidate: FeedCandidate | None = None
    status_code: int | None = None
    error: Exception | None = None


def sniff_feed_kind(content: bytes) -> FeedKind | None:
    """Guess the feed format from the start of a response body.

    Args:
        content: Leading bytes of the body.

    Returns:
        Feed kind, or None if the content does not look like a feed.
    """
    text = content.decode("utf-8", errors="replace").lower()

    if "<rss" in text or "<rdf:rdf" in text:
        return FeedKind.RSS
    if "<feed" in text and "xmlns" in text:
        return FeedKind.ATOM
    if '"version"' in text and ('"title"' in text or '"items"' in text):
        return FeedKind.JSON
    return None


class CommonPathProber:
    """Probes well-known feed paths on a site's origin."""

    def __init__(
        self,
        base_url: str,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        options: DiscoveryOptions | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize common path prober.

        Args:
            base_url: Any URL on the site; only its origin is used.
            max_concurrency: Maximum probes in flight at once.
            options: Discovery options (paths, timeout, user agent).
            client: Shared HTTP client. One is built when omitted.

        Raises:
            ParseError: If ``base_url`` has no scheme or host.
        """
        self.origin = get_origin(base_url)
        self.options = options or DiscoveryOptions()
        self.max_concurrency = (
            max_concurrency if max_concurrency > 0 else DEFAULT_MAX_CONCURRENCY
        )
        self.paths = self.options.common_paths
        self._client = client

    async def scan(self) -> list[FeedCandidate]:
        """Probe all paths and return the feeds found.

        Returns:
            Feed candidates in completion order.
        """
        results = await self.probe_all()
        return [r.candidate for r in results if r.candidate is not None]

    async def probe_all(self) -> list[ProbeResult]:
        """Probe every path, waiting for all of them to finish.

        Returns:
            One result per path, in completion order.
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async with client_scope(self._client, self.options) as client:

            async def check_path(path: str) -> ProbeResult:
                async with semaphore:
                    return await self._probe(client, path)

            tasks = [asyncio.create_task(check_path(path)) for path in self.paths]
            results: list[ProbeResult] = []
            try:
                for next_done in asyncio.as_completed(tasks):
                    results.append(await next_done)
            finally:
                # Only reached with pending tasks when the scan is cancelled
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)

        found = sum(1 for r in results if r.status is ProbeStatus.FOUND)
        logger.info("Probed %d paths on %s, %d feeds found", len(results), self.origin, found)
        return results

    async def _probe(self, client: httpx.AsyncClient, path: str) -> ProbeResult:
        """Probe one path, never raising for network failures.

        Args:
            client: HTTP client.
            path: Origin-relative path.

        Returns:
            Probe result.
        """
        url = self.origin + path
        try:
            result = await self._check_head(client, path, url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug("Probe of %s failed: %s", url, e)
            return ProbeResult(path=path, url=url, status=ProbeStatus.ERROR, error=e)

        logger.debug("Probe of %s: %s", url, result.status.value)
        return result

    async def _check_head(self, client: httpx.AsyncClient, path: str, url: str) -> ProbeResult:
        """Check existence and declared content type with a HEAD request."""
        response = await client.head(url, follow_redirects=True)

        if not response.is_success:
            return ProbeResult(
                path=path,
                url=url,
                status=ProbeStatus.MISSING,
                status_code=response.status_code,
            )

        content_type = response.headers.get("content-type", "").lower()
        kind = kind_for_content_type(content_type)
        if kind is None:
            # Declared type says nothing useful, look at the content
            return await self._sniff_content(client, path, url)

        return ProbeResult(
            path=path,
            url=url,
            status=ProbeStatus.FOUND,
            candidate=FeedCandidate(url=url, kind=kind),
            status_code=response.status_code,
        )

    async def _sniff_content(self, client: httpx.AsyncClient, path: str, url: str) -> ProbeResult:
        """Fetch the start of the body and check it for feed markers."""
        async with client.stream("GET", url, follow_redirects=True) as response:
            if not response.is_success:
                return ProbeResult(
                    path=path,
                    url=url,
                    status=ProbeStatus.MISSING,
                    status_code=response.status_code,
                )

            content = b""
            async for chunk in response.aiter_bytes():
                content += chunk
                if len(content) >= SNIFF_SIZE:
                    break

        kind = sniff_feed_kind(content[:SNIFF_SIZE])
        if kind is None:
            return ProbeResult(
                path=path,
                url=url,
                status=ProbeStatus.MISSING,
                status_code=response.status_code,
            )

        return ProbeResult(
            path=path,
            url=url,
            status=ProbeStatus.FOUND,
            candidate=FeedCandidate(url=url, kind=kind),
            status_code=response.status_code,
        )


async def scan_common_paths(
    base_url: str,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    *,
    options: DiscoveryOptions | None = None,
    client: httpx.AsyncClient | None = None,
) -> list[FeedCandidate]:
    """Probe well-known feed paths on the origin of ``base_url``.

    Args:
        base_url: Any URL on the site.
        max_concurrency: Maximum probes in flight; non-positive means 3.
        options: Discovery options (paths, timeout, user agent).
        client: Shared HTTP client.

    Returns:
        Feed candidates in completion order.

    Raises:
        ParseError: If ``base_url`` has no scheme or host.
    """
    prober = CommonPathProber(
        base_url,
        max_concurrency=max_concurrency,
        options=options,
        client=client,
    )
    return await prober.scan()
