"""Discovery module - feed link extraction and common path probing."""

from feedscout.discovery.finder import find_feeds
from feedscout.discovery.head import extract_head_section, read_head_section
from feedscout.discovery.links import extract_feed_links, extract_feed_links_from_stream
from feedscout.discovery.prober import CommonPathProber, scan_common_paths
from feedscout.discovery.url_utils import get_origin, is_valid_url, resolve_feed_url

__all__ = [
    "find_feeds",
    "extract_head_section",
    "read_head_section",
    "extract_feed_links",
    "extract_feed_links_from_stream",
    "CommonPathProber",
    "scan_common_paths",
    "resolve_feed_url",
    "get_origin",
    "is_valid_url",
]
