"""Head section extraction - isolate <head>...</head> without buffering the page."""

import codecs
import logging
from typing import AsyncIterable, Iterable

from feedscout.models import MAX_HEAD_SIZE

logger = logging.getLogger(__name__)

_HEAD_OPEN = b"<head"
_HEAD_CLOSE = b"</head>"
_BODY_OPEN = b"<body"


class HeadSectionExtractor:
    """Line-oriented state machine that collects the document head.

    Feed it lines with :meth:`feed_line` until it reports completion, then
    read :attr:`fragment`. Tag matching is case-insensitive and works on
    raw bytes, so no decoding happens until the head has been isolated.
    """

    def __init__(self) -> None:
        self._lines: list[bytes] = []
        self._in_head = False
        self._aborted = False
        self.done = False

    def feed_line(self, line: bytes) -> bool:
        """Process one line.

        Args:
            line: Line without its terminator.

        Returns:
            True once no further input is needed.
        """
        if self.done:
            return True

        lowered = line.lower()

        if not self._in_head:
            if _HEAD_OPEN in lowered:
                self._in_head = True
            elif _BODY_OPEN in lowered:
                # Body reached first - no usable head
                self._finish(aborted=True)
                return True
            else:
                return False

        self._lines.append(line)

        if _HEAD_CLOSE in lowered:
            self._finish()
        elif _BODY_OPEN in lowered:
            # Unterminated head running into the body
            self._finish(aborted=True)

        return self.done

    def _finish(self, aborted: bool = False) -> None:
        self.done = True
        self._aborted = aborted

    @property
    def fragment(self) -> bytes:
        """Collected head lines, each followed by a newline."""
        if self._aborted:
            return b""
        return b"".join(line + b"\n" for line in self._lines)


class _LineSplitter:
    """Split a chunked byte stream into lines under a total byte cap."""

    def __init__(self, max_bytes: int):
        self._remaining = max_bytes
        self._pending = b""

    @property
    def exhausted(self) -> bool:
        return self._remaining <= 0

    def push(self, chunk: bytes) -> list[bytes]:
        if self.exhausted or not chunk:
            return []

        chunk = chunk[: self._remaining]
        self._remaining -= len(chunk)

        *lines, self._pending = (self._pending + chunk).split(b"\n")
        return [_strip_cr(line) for line in lines]

    def flush(self) -> list[bytes]:
        pending, self._pending = self._pending, b""
        return [_strip_cr(pending)] if pending else []


def _strip_cr(line: bytes) -> bytes:
    return line[:-1] if line.endswith(b"\r") else line


def _decode(fragment: bytes, encoding: str) -> str:
    try:
        codecs.lookup(encoding)
    except LookupError:
        logger.debug("Unknown encoding %r, decoding head as UTF-8", encoding)
        encoding = "utf-8"
    return fragment.decode(encoding, errors="replace")


def extract_head_section(
    data: bytes | str | Iterable[bytes],
    max_bytes: int = MAX_HEAD_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Extract the head section from in-memory HTML.

    Args:
        data: HTML as bytes, text, or an iterable of byte chunks.
        max_bytes: Maximum number of bytes to read.
        encoding: Encoding used to decode the extracted fragment.

    Returns:
        Head section including the <head> and </head> lines, or an empty
        string when the document has no reachable head.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
        encoding = "utf-8"
    if isinstance(data, bytes):
        data = [data]

    extractor = HeadSectionExtractor()
    splitter = _LineSplitter(max_bytes)

    for chunk in data:
        for line in splitter.push(chunk):
            if extractor.feed_line(line):
                return _decode(extractor.fragment, encoding)
        if splitter.exhausted:
            break

    for line in splitter.flush():
        extractor.feed_line(line)

    return _decode(extractor.fragment, encoding)


async def read_head_section(
    stream: AsyncIterable[bytes],
    max_bytes: int = MAX_HEAD_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Extract the head section from an async byte stream.

    Stops consuming the stream as soon as the head is complete, the body
    starts, or ``max_bytes`` have been read. Errors raised by the stream
    itself propagate.

    Args:
        stream: Async iterable of byte chunks, e.g. ``response.aiter_bytes()``.
        max_bytes: Maximum number of bytes to read.
        encoding: Encoding used to decode the extracted fragment.

    Returns:
        Head section, or an empty string.
    """
    extractor = HeadSectionExtractor()
    splitter = _LineSplitter(max_bytes)

    async for chunk in stream:
        for line in splitter.push(chunk):
            if extractor.feed_line(line):
                return _decode(extractor.fragment, encoding)
        if splitter.exhausted:
            logger.debug("Head extraction stopped at %d byte limit", max_bytes)
            break

    for line in splitter.flush():
        extractor.feed_line(line)

    return _decode(extractor.fragment, encoding)
