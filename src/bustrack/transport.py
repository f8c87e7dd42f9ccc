"""HTTP transport for the XML feed.

Every response is treated as untrusted: status, content type and size are
checked before the body is parsed, and the body is parsed before any field
is read.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Dict, Optional

import requests

from .config import FeedSettings
from .errors import (
    ContentTypeError,
    FeedConnectionError,
    HttpError,
    ParseError,
    PayloadTooLargeError,
)
from .sanitize import safe_int

logger = logging.getLogger(__name__)

# Content types we are willing to parse as XML
ALLOWED_CONTENT_TYPES = ("xml", "text/plain")

CHUNK_SIZE = 64 * 1024

# A parsed feed document is the root element of the response
ParsedDocument = ET.Element


class _FeedTreeBuilder(ET.TreeBuilder):
    """Tree builder that flags documents carrying a DOCTYPE."""

    def __init__(self):
        super().__init__()
        self.error: Optional[str] = None

    def doctype(self, name, pubid, system):
        # Feed documents never declare a DTD
        self.error = f"DOCTYPE declaration '{name}' is not allowed"


def parse_document(body: bytes) -> ParsedDocument:
    """
    Parse a response body into an element tree.

    Args:
        body: Raw response bytes.

    Returns:
        Root element of the document.

    Raises:
        ParseError: If the body is empty, malformed, or declares a DOCTYPE.
    """
    builder = _FeedTreeBuilder()
    parser = ET.XMLParser(target=builder)
    try:
        parser.feed(body)
        root = parser.close()
    except ET.ParseError as e:
        raise ParseError(str(e)) from e

    if builder.error:
        raise ParseError(builder.error)
    if root is None:
        raise ParseError("document has no root element")
    return root


class FeedTransport:
    """Issues one GET per call and returns a validated XML document."""

    def __init__(self, settings: FeedSettings = None, session: requests.Session = None):
        """
        Initialize the transport.

        Args:
            settings: Feed settings; defaults to the public feed.
            session: Optional pre-built requests session (tests inject a mock).
        """
        self.settings = settings or FeedSettings()
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "User-Agent": self.settings.user_agent,
                "Accept": "text/xml, application/xml;q=0.9, text/plain;q=0.8",
            }
        )

    def fetch_document(self, url: str, params: Dict[str, str] = None) -> ParsedDocument:
        """
        Fetch and parse a feed document.

        Args:
            url: Endpoint URL.
            params: Optional query parameters.

        Returns:
            Root element of the parsed response.

        Raises:
            HttpError: Non-2xx status.
            ContentTypeError: Content type is neither XML nor plain text.
            PayloadTooLargeError: Declared or actual body is over the limit.
            ParseError: Body is not well-formed XML.
            FeedConnectionError: The request itself failed or timed out.
        """
        logger.debug(f"Fetching {url} {params or ''}")
        try:
            response = self.session.get(
                url, params=params, timeout=self.settings.timeout, stream=True
            )
        except requests.RequestException as e:
            raise FeedConnectionError(url, e) from e

        try:
            body = self._read_body(response, url)
        finally:
            response.close()

        return parse_document(body)

    def _read_body(self, response: requests.Response, url: str) -> bytes:
        """Validate the response envelope and read at most the size limit."""
        if not 200 <= response.status_code < 300:
            raise HttpError(response.status_code, url)

        content_type = response.headers.get("content-type", "")
        lowered = content_type.lower()
        if not any(allowed in lowered for allowed in ALLOWED_CONTENT_TYPES):
            raise ContentTypeError(content_type)

        limit = self.settings.max_response_size

        # Reject on the declared size before touching the body
        declared = safe_int(response.headers.get("content-length"), default=-1)
        if declared > limit:
            raise PayloadTooLargeError(declared, limit)

        # Content-Length may be missing or wrong, so count what actually arrives
        body = bytearray()
        try:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                body.extend(chunk)
                if len(body) > limit:
                    raise PayloadTooLargeError(len(body), limit)
        except requests.RequestException as e:
            raise FeedConnectionError(url, e) from e

        logger.debug(f"Received {len(body)} bytes from {url}")
        return bytes(body)

    def close(self) -> None:
        """Release pooled connections."""
        self.session.close()
