"""Exception types raised by feed discovery."""



class FeedScoutError(Exception):
    """Base class for feedscout errors."""

    pass


class ParseError(FeedScoutError, ValueError):
    """A URL could not be parsed."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        self.reason = reason
        message = f"Invalid URL {url!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class RequestError(FeedScoutError):
    """Fetching a page failed or returned a non-success status."""

    def __init__(
        self,
        url: str,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ):
        """Initialize request error.

        Args:
            url: URL that was requested.
            status_code: HTTP status code, when the server answered.
            cause: Underlying transport error, when it did not.
        """
        self.url = url
        self.status_code = status_code
        self.cause = cause

        if status_code is not None:
            message = f"HTTP request failed with status {status_code}"
        elif cause is not None:
            message = f"HTTP request to {url} failed: {str(cause) or type(cause).__name__}"
        else:
            message = f"HTTP request to {url} failed"
        super().__init__(message)


class NotFoundError(FeedScoutError):
    """The page was reachable but no feeds were found."""

    def __init__(self, url: str):
        self.url = url
        super().__init__("no feeds found")
