"""Feed endpoint settings."""

import os
from dataclasses import dataclass

# Public NextBus-style XML feed and the agency it serves
DEFAULT_FEED_URL = "https://retro.umoiq.com/service/publicXMLFeed"
DEFAULT_AGENCY = "wku"

# Maximum XML response size (1 MiB)
MAX_RESPONSE_SIZE = 1024 * 1024

DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class FeedSettings:
    """Where the feed lives and how much of it we are willing to read."""
    base_url: str = DEFAULT_FEED_URL
    agency: str = DEFAULT_AGENCY
    timeout: float = DEFAULT_TIMEOUT  # Seconds, per request
    max_response_size: int = MAX_RESPONSE_SIZE  # Bytes
    user_agent: str = "bustrack/0.1.0"

    @classmethod
    def from_env(cls) -> "FeedSettings":
        """
        Build settings from the environment.

        Only the endpoint (BUSTRACK_FEED_URL) and agency (BUSTRACK_AGENCY)
        can be overridden; everything else keeps its default.
        """
        return cls(
            base_url=os.environ.get("BUSTRACK_FEED_URL", DEFAULT_FEED_URL),
            agency=os.environ.get("BUSTRACK_AGENCY", DEFAULT_AGENCY),
        )
