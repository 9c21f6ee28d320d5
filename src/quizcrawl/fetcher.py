"""Simple HTTP page fetcher used by the pipeline and CLI."""

import logging
import time
from dataclasses import dataclass

import requests

from quizcrawl.exceptions import FetchError
from quizcrawl.utils.headers import PAGE_ACCEPT, build_headers
from quizcrawl.utils.retry import get_retryer


@dataclass
class FetchResult:
    """Result of a page fetch.

    Attributes:
        url: Final URL after redirects
        html: Decoded page content
        status_code: HTTP status code of the response
        fetch_time: Seconds spent fetching

    """

    url: str
    html: str
    status_code: int
    fetch_time: float = 0.0


class PageFetcher:
    """Fetches quiz pages over HTTP with browser-like headers.

    Attributes:
        timeout: Request timeout in seconds
        max_attempts: Attempts per page on connection errors and timeouts
        session: Requests session for connection pooling

    """

    def __init__(self, timeout: float = 30.0, max_attempts: int = 2, session: requests.Session | None = None):
        """Initialize the fetcher.

        Args:
            timeout: Request timeout in seconds. Defaults to 30.
            max_attempts: Attempts per page. Defaults to 2.
            session: Existing session to reuse. A new one is created if omitted.

        """
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.session = session or requests.Session()
        self.logger = logging.getLogger(__name__)

    def fetch(self, url: str) -> FetchResult:
        """Fetch a page.

        Args:
            url: Address of the page

        Returns:
            FetchResult with the decoded HTML.

        Raises:
            FetchError: On network failure, an error status or an empty body

        """
        start_time = time.time()
        retryer = get_retryer(max_attempts=self.max_attempts)

        try:
            response = retryer(self._get, url)
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e

        if response.status_code >= 400:
            raise FetchError(url, response.reason or 'error response', status_code=response.status_code)

        html = response.text
        if not html or not html.strip():
            raise FetchError(url, 'empty response', status_code=response.status_code)

        fetch_time = time.time() - start_time
        self.logger.info('Fetched %s (%d chars, %.2fs)', url, len(html), fetch_time)
        return FetchResult(url=response.url or url, html=html, status_code=response.status_code, fetch_time=fetch_time)

    def _get(self, url: str) -> requests.Response:
        return self.session.get(
            url, headers=build_headers(accept=PAGE_ACCEPT), timeout=self.timeout, allow_redirects=True
        )

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def close(self):
        """Close the session."""
        self.session.close()
