"""USGS Feed Client - Imperative Shell.

This module handles HTTP communication with the USGS GeoJSON summary
feeds. All I/O is contained here; parsing is in the core module.
"""

import logging

import requests

from src.core.config import USGS_FEED_BASE
from src.core.earthquake import EarthquakeEvent, MalformedFeedError, parse_feed
from src.core.state import TimeRange


logger = logging.getLogger(__name__)


# Default timeout for feed requests (seconds)
DEFAULT_TIMEOUT = 30

# Every request must observe the freshest server state
NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


class FetchError(Exception):
    """A feed snapshot could not be fetched.

    Covers transport failures, non-success HTTP statuses and payloads
    that are not a feature collection. The original exception is chained.
    """


class FeedClient:
    """Client for fetching earthquake snapshots from the USGS feeds.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        base_url: str = USGS_FEED_BASE,
        timeout: int = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize feed client.

        Args:
            base_url: Base URL of the summary feeds
            timeout: Request timeout in seconds
            session: HTTP session (a plain requests module call if None)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session

    def endpoint_for(self, time_range: TimeRange) -> str:
        """Feed URL for a time range, e.g. .../summary/all_day.geojson."""
        return f"{self.base_url}/{time_range.value}.geojson"

    def _get(self, url: str) -> requests.Response:
        if self.session is not None:
            return self.session.get(url, headers=NO_CACHE_HEADERS, timeout=self.timeout)
        return requests.get(url, headers=NO_CACHE_HEADERS, timeout=self.timeout)

    def fetch_snapshot(self, time_range: TimeRange) -> list[EarthquakeEvent]:
        """Fetch and parse one feed snapshot.

        This method performs HTTP I/O.

        Args:
            time_range: Which summary feed to fetch

        Returns:
            Events in the order the server returned them

        Raises:
            FetchError: If the request fails or the payload is malformed
        """
        url = self.endpoint_for(time_range)

        logger.info("Fetching earthquake feed %s", url)

        try:
            response = self._get(url)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.HTTPError as e:
            raise FetchError(
                f"Feed request failed with HTTP {e.response.status_code}"
                if e.response is not None else f"Feed request failed: {e}"
            ) from e
        except requests.exceptions.JSONDecodeError as e:
            raise FetchError("Feed response is not valid JSON") from e
        except requests.RequestException as e:
            raise FetchError(f"Feed request failed: {e}") from e

        try:
            events = parse_feed(data)
        except MalformedFeedError as e:
            raise FetchError(f"Unexpected feed payload: {e}") from e

        logger.info("Fetched %d earthquakes from %s", len(events), time_range.value)

        return events
