"""Feed discovery data model and the shared feed type table."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from feedscout import DEFAULT_USER_AGENT


class FeedKind(str, Enum):
    """Syndication format of a discovered feed."""

    RSS = "rss"
    ATOM = "atom"
    JSON = "json"

    def __str__(self) -> str:
        return self.value


# MIME types advertised in <link type="..."> and the feed kind they denote
FEED_MIME_TYPES: dict[str, FeedKind] = {
    "application/rss+xml": FeedKind.RSS,
    "application/atom+xml": FeedKind.ATOM,
    "application/json": FeedKind.JSON,
    "application/feed+json": FeedKind.JSON,
}

# Servers commonly label RSS as generic XML; only trusted when probing paths
PROBE_EXTRA_MIME_TYPES: dict[str, FeedKind] = {
    "text/xml": FeedKind.RSS,
}

COMMON_FEED_PATHS: tuple[str, ...] = (
    "/feed",
    "/rss",
    "/atom.xml",
    "/index.xml",
    "/rss.xml",
    "/feed.xml",
    "/feeds/all.atom.xml",
    "/feeds/posts/default",
    "/api/rss",
    "/feed.rss",
)

DEFAULT_MAX_CONCURRENCY = 3
DEFAULT_TIMEOUT = 10.0
MAX_HEAD_SIZE = 1024 * 1024


def kind_for_link_type(link_type: str) -> FeedKind | None:
    """Map a <link> type attribute to a feed kind by exact match.

    Args:
        link_type: Lower-cased value of the type attribute.

    Returns:
        Feed kind, or None when the type is not a feed type.
    """
    return FEED_MIME_TYPES.get(link_type)


def kind_for_content_type(content_type: str) -> FeedKind | None:
    """Map a Content-Type header to a feed kind by substring match.

    Parameters such as charset are tolerated. RSS types are checked first,
    then Atom, then JSON.

    Args:
        content_type: Lower-cased Content-Type header value.

    Returns:
        Feed kind, or None when the header is inconclusive.
    """
    table = {**FEED_MIME_TYPES, **PROBE_EXTRA_MIME_TYPES}
    for kind in FeedKind:
        for mime_type, mapped in table.items():
            if mapped is kind and mime_type in content_type:
                return kind
    return None


@dataclass(frozen=True)
class FeedCandidate:
    """A URL believed to serve a syndication feed."""

    url: str
    kind: FeedKind
    title: str = ""


@dataclass(frozen=True)
class DiscoveryOptions:
    """Settings for a single discovery call."""

    scan_common_paths: bool = False
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    timeout: float | None = DEFAULT_TIMEOUT
    max_head_size: int = MAX_HEAD_SIZE
    user_agent: str = DEFAULT_USER_AGENT
    common_paths: tuple[str, ...] = field(default=COMMON_FEED_PATHS)

    def __post_init__(self) -> None:
        if self.max_concurrency <= 0:
            object.__setattr__(self, "max_concurrency", DEFAULT_MAX_CONCURRENCY)
        if self.max_head_size <= 0:
            object.__setattr__(self, "max_head_size", MAX_HEAD_SIZE)
        # Paths are appended to the origin, so each must start at the root
        paths = tuple(p if p.startswith("/") else "/" + p for p in self.common_paths)
        object.__setattr__(self, "common_paths", paths)

    @classmethod
    def from_config(cls, config: dict[str, Any], **overrides: Any) -> "DiscoveryOptions":
        """Build options from the ``discovery`` section of a config.

        Args:
            config: Configuration dictionary.
            **overrides: Values that take precedence over the config.
                ``None`` values are ignored.

        Returns:
            Discovery options.

        Raises:
            ValueError: If a setting has the wrong type.
        """
        section = dict(config.get("discovery", {}) or {})
        section.update({k: v for k, v in overrides.items() if v is not None})

        kwargs: dict[str, Any] = {}
        if "scan_common_paths" in section:
            kwargs["scan_common_paths"] = bool(section["scan_common_paths"])
        if "max_concurrency" in section:
            kwargs["max_concurrency"] = _convert(section, "max_concurrency", int)
        if "timeout" in section:
            if section["timeout"] is None:
                kwargs["timeout"] = None
            else:
                kwargs["timeout"] = _convert(section, "timeout", float)
        if "max_head_size" in section:
            kwargs["max_head_size"] = _convert(section, "max_head_size", int)
        if section.get("user_agent"):
            kwargs["user_agent"] = str(section["user_agent"])
        if section.get("common_paths"):
            paths = section["common_paths"]
            if isinstance(paths, str):
                paths = [paths]
            if not isinstance(paths, (list, tuple)):
                raise ValueError(f"Invalid discovery.common_paths: {paths!r}")
            kwargs["common_paths"] = tuple(str(p) for p in paths)

        return cls(**kwargs)


def _convert(section: dict[str, Any], key: str, convert: Any) -> Any:
    """Convert a config value, naming the setting on failure."""
    value = section[key]
    if isinstance(value, bool):
        raise ValueError(f"Invalid discovery.{key}: {value!r}")
    try:
        return convert(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid discovery.{key}: {value!r}") from e
