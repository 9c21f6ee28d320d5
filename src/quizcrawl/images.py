"""Resolves question illustrations and embeds them as data URIs."""

import base64
import logging
import mimetypes
import re
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import urljoin, urlparse

import logfire
import requests
from bs4 import Tag

from quizcrawl.dom import select_first
from quizcrawl.exceptions import AssetFetchError, InvalidSelectorError
from quizcrawl.utils.headers import IMAGE_ACCEPT, build_headers
from quizcrawl.utils.retry import get_retryer

_CSS_URL = re.compile(r'url\(\s*([^)]*?)\s*\)', re.IGNORECASE)


@dataclass
class FetchedAsset:
    """Raw bytes of a downloaded asset.

    Attributes:
        content: Response body
        content_type: Value of the Content-Type header, if sent

    """

    content: bytes
    content_type: str | None = None


class AssetFetcher(Protocol):
    """Anything that can download an asset by address.

    Implementations raise AssetFetchError (or any other exception) on
    failure; the resolver treats every failure the same way.
    """

    def fetch(self, url: str, timeout: float) -> FetchedAsset:
        """Download ``url`` within ``timeout`` seconds."""
        ...


class HTTPAssetFetcher:
    """Downloads assets over HTTP(S) with requests.

    Connection errors and timeouts are retried with exponential backoff.

    Attributes:
        max_attempts: Attempts per asset, including the first
        referer: Optional Referer header sent with every request
        session: Requests session used for connection pooling

    """

    def __init__(self, max_attempts: int = 2, referer: str | None = None, session: requests.Session | None = None):
        self.max_attempts = max_attempts
        self.referer = referer
        self.session = session or requests.Session()
        self.logger = logging.getLogger(__name__)

    def fetch(self, url: str, timeout: float) -> FetchedAsset:
        """Download an asset.

        Args:
            url: Absolute http(s) address
            timeout: Per-request timeout in seconds

        Returns:
            The downloaded asset.

        Raises:
            AssetFetchError: If the address is unsupported or the download fails

        """
        if urlparse(url).scheme not in ('http', 'https'):
            raise AssetFetchError(url, 'unsupported address')

        retryer = get_retryer(max_attempts=self.max_attempts)

        try:
            response = retryer(self._get, url, timeout)
        except requests.RequestException as e:
            raise AssetFetchError(url, str(e)) from e

        if response.status_code >= 400:
            raise AssetFetchError(url, f'HTTP {response.status_code}')
        if not response.content:
            raise AssetFetchError(url, 'empty response')

        self.logger.debug('Fetched asset %s (%d bytes)', url, len(response.content))
        return FetchedAsset(content=response.content, content_type=response.headers.get('Content-Type'))

    def _get(self, url: str, timeout: float) -> requests.Response:
        headers = build_headers(accept=IMAGE_ACCEPT, referer=self.referer)
        return self.session.get(url, headers=headers, timeout=timeout, allow_redirects=True)

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def close(self):
        """Close the underlying session."""
        self.session.close()


def to_data_uri(asset: FetchedAsset, url: str = '') -> str:
    """Encode an asset as a base64 data URI.

    The MIME type comes from the response, then from the address, and
    defaults to ``application/octet-stream``.
    """
    mime = (asset.content_type or '').split(';')[0].strip()
    if not mime:
        mime = mimetypes.guess_type(urlparse(url).path)[0] or 'application/octet-stream'
    encoded = base64.b64encode(asset.content).decode('ascii')
    return f'data:{mime};base64,{encoded}'


def background_image_url(element: Tag) -> str | None:
    """Return the unquoted ``url(...)`` of an inline background style, if any."""
    style = element.get('style')
    if not style:
        return None
    if isinstance(style, list):
        style = ' '.join(style)

    for declaration in style.split(';'):
        name, _, value = declaration.partition(':')
        if name.strip().lower() not in ('background-image', 'background'):
            continue
        match = _CSS_URL.search(value)
        if match:
            url = match.group(1).replace('"', '').replace("'", '').strip()
            if url:
                return url
    return None


class ImageResolver:
    """Finds a question's illustration and tries to embed it.

    Resolution is best-effort: it never raises, and a failed download
    degrades to the raw ``src`` reference.

    Attributes:
        fetcher: Asset download collaborator
        timeout: Seconds allowed per download
        embed: If False, image sources are returned without downloading

    """

    def __init__(self, fetcher: AssetFetcher | None = None, timeout: float = 10.0, embed: bool = True):
        """Initialize the resolver.

        Args:
            fetcher: Download collaborator. Defaults to a new HTTPAssetFetcher.
            timeout: Seconds allowed per download. Defaults to 10.
            embed: Whether to download and inline images. Defaults to True.

        """
        self._owns_fetcher = fetcher is None
        self.fetcher: AssetFetcher = fetcher if fetcher is not None else HTTPAssetFetcher()
        self.timeout = timeout
        self.embed = embed

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def close(self):
        """Close the fetcher if this resolver created it."""
        if self._owns_fetcher:
            self.fetcher.close()

    def resolve(self, node: Tag, selector: str, base_url: str | None = None) -> str | None:
        """Resolve the image for one question container.

        Args:
            node: Question container element
            selector: CSS selector of the illustration inside the container
            base_url: Address of the page, used to absolutize relative sources

        Returns:
            A data URI, the raw image reference, a background image URL, or None.

        """
        try:
            element = select_first(node, selector, 'image')
        except InvalidSelectorError as e:
            logfire.warn('Invalid image selector', selector=selector, error=e.reason)
            return None

        if element is None:
            return None

        src = element.get('src') if element.name == 'img' else None
        if isinstance(src, list):
            src = ' '.join(src)
        src = (src or '').strip()

        if src:
            return self._embed(src, base_url)

        return background_image_url(element)

    def _embed(self, src: str, base_url: str | None) -> str:
        """Download ``src`` and return it as a data URI, or ``src`` itself on failure."""
        if not self.embed or src.startswith('data:'):
            return src

        url = urljoin(base_url, src) if base_url else src
        try:
            asset = self.fetcher.fetch(url, timeout=self.timeout)
            return to_data_uri(asset, url)
        except Exception as e:
            logfire.warn('Image embedding failed, keeping reference', src=src, error=str(e))
            return src
