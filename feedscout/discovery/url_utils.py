"""URL utilities - feed reference resolution and origin handling."""

import re
from urllib.parse import SplitResult, urljoin, urlsplit

from feedscout.errors import ParseError

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def parse_url(url: str) -> SplitResult:
    """Parse a URL or URL reference strictly.

    Rejects input that a lenient split would silently accept: control
    characters, malformed percent escapes, broken IPv6 literals and
    invalid ports.

    Args:
        url: URL or relative reference.

    Returns:
        Split URL.

    Raises:
        ParseError: If the URL is malformed.
    """
    if _CONTROL_CHARS_RE.search(url):
        raise ParseError(url, "control character in URL")
    if _BAD_ESCAPE_RE.search(url):
        raise ParseError(url, "invalid percent escape")

    try:
        parsed = urlsplit(url)
        # Accessing port validates it
        parsed.port
    except ValueError as e:
        raise ParseError(url, str(e)) from e

    return parsed


def resolve_feed_url(href: str, base_url: str) -> str:
    """Resolve a possibly relative feed href against the page URL.

    Absolute http(s) hrefs are returned as-is. If either URL cannot be
    parsed, the href is returned unchanged.

    Args:
        href: Value of the link's href attribute.
        base_url: URL of the page the link was found on.

    Returns:
        Absolute feed URL, or the original href.
    """
    if href.startswith(("http://", "https://")):
        return href

    try:
        parse_url(base_url)
        parse_url(href)
    except ParseError:
        return href

    return urljoin(base_url, href)


def get_origin(url: str) -> str:
    """Get the origin (scheme + host + port) of a URL.

    Args:
        url: Full URL.

    Returns:
        Origin such as ``https://example.com:8443``.

    Raises:
        ParseError: If the URL is malformed or lacks a scheme or host.
    """
    parsed = parse_url(url)
    if not parsed.scheme or not parsed.netloc:
        raise ParseError(url, "missing scheme or host")

    # Drop userinfo, keep host and port
    host = parsed.netloc.rpartition("@")[2]
    return f"{parsed.scheme}://{host}"


def is_valid_url(url: str) -> bool:
    """Check if a string is a valid HTTP/HTTPS URL.

    Args:
        url: String to validate.

    Returns:
        True if valid URL.
    """
    try:
        parsed = parse_url(url)
    except ParseError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.hostname)
