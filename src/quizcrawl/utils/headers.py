"""Browser-like request headers for page and asset downloads."""

import random

USER_AGENTS = [
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:125.0) Gecko/20100101 Firefox/125.0',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.4 Safari/605.1.15',
    'Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36',
]

PAGE_ACCEPT = 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8'
IMAGE_ACCEPT = 'image/avif,image/webp,image/apng,image/svg+xml,image/*,*/*;q=0.8'


def build_headers(accept: str = PAGE_ACCEPT, referer: str | None = None, user_agent: str | None = None) -> dict[str, str]:
    """Build request headers with a rotating user agent.

    Args:
        accept: Value of the Accept header
        referer: Page the request originates from, if any
        user_agent: Fixed user agent; a random one is picked when omitted

    Returns:
        Header dictionary for requests.

    """
    headers = {
        'User-Agent': user_agent or random.choice(USER_AGENTS),
        'Accept': accept,
        'Accept-Language': 'en-US,en;q=0.9',
        'Connection': 'keep-alive',
    }
    if referer:
        headers['Referer'] = referer
    return headers
