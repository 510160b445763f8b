"""Feed link extraction - classify <link rel="alternate"> declarations."""

import logging
from typing import AsyncIterable

from bs4 import BeautifulSoup

from feedscout.discovery.head import read_head_section
from feedscout.discovery.url_utils import resolve_feed_url
from feedscout.models import MAX_HEAD_SIZE, FeedCandidate, kind_for_link_type

logger = logging.getLogger(__name__)


def extract_feed_links(html: str, base_url: str) -> list[FeedCandidate]:
    """Extract feed links from an HTML fragment.

    Looks for <link rel="alternate"> elements whose type is a known feed
    MIME type. Relative hrefs are resolved against ``base_url``. Malformed
    markup yields an empty list.

    Args:
        html: HTML document or head fragment.
        base_url: URL of the page, for resolving relative hrefs.

    Returns:
        Feed candidates in document order.
    """
    try:
        # Keep rel as the raw attribute string instead of a token list
        soup = BeautifulSoup(html, "html.parser", multi_valued_attributes=None)
    except Exception as e:
        logger.debug("Could not parse markup from %s: %s", base_url, e)
        return []

    feeds: list[FeedCandidate] = []

    for link in soup.find_all("link"):
        href = link.get("href") or ""
        title = link.get("title") or ""
        rel = (link.get("rel") or "").lower()
        link_type = (link.get("type") or "").lower()

        if rel != "alternate" or not href:
            continue

        kind = kind_for_link_type(link_type)
        if kind is None:
            continue

        feeds.append(
            FeedCandidate(
                url=resolve_feed_url(href, base_url),
                kind=kind,
                title=title,
            )
        )

    return feeds


async def extract_feed_links_from_stream(
    stream: AsyncIterable[bytes],
    base_url: str,
    max_bytes: int = MAX_HEAD_SIZE,
    encoding: str = "utf-8",
) -> list[FeedCandidate]:
    """Extract feed links from the head section of a streamed document.

    Only the head is read; the rest of the stream is left unconsumed.

    Args:
        stream: Async iterable of byte chunks.
        base_url: URL of the page, for resolving relative hrefs.
        max_bytes: Maximum number of bytes to read.
        encoding: Encoding of the document.

    Returns:
        Feed candidates in document order.
    """
    head = await read_head_section(stream, max_bytes=max_bytes, encoding=encoding)
    if not head:
        logger.debug("No head section found for %s", base_url)
        return []

    return extract_feed_links(head, base_url)
