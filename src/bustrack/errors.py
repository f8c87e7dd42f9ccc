"""Errors raised while fetching the transit feed."""


class TransitFeedError(Exception):
    """Base class for every failure the feed transport can report."""


class HttpError(TransitFeedError):
    """The feed answered with a non-2xx status."""

    def __init__(self, status: int, url: str = ""):
        self.status = status
        self.url = url
        super().__init__(f"API request failed with status {status}")


class ContentTypeError(TransitFeedError):
    """The response declared a content type we do not parse."""

    def __init__(self, content_type: str):
        self.content_type = content_type
        super().__init__(f"Unexpected content type: {content_type!r}")


class PayloadTooLargeError(TransitFeedError):
    """Declared or received body size is above the configured ceiling."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Response too large: {size} bytes (limit {limit})")


class ParseError(TransitFeedError):
    """The body is not well-formed XML."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to parse XML response: {reason}")


class FeedConnectionError(TransitFeedError):
    """The request never produced a response (DNS, refused, timeout...)."""

    def __init__(self, url: str, reason: Exception):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")
