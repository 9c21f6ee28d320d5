"""Custom exceptions for quizcrawl."""


class QuizCrawlError(Exception):
    """Base class for all quizcrawl exceptions."""

    pass


class DocumentParseError(QuizCrawlError):
    """Raised when the input cannot be turned into a document tree."""

    pass


class InvalidSelectorError(QuizCrawlError):
    """Raised when a configured CSS selector cannot be compiled."""

    def __init__(self, field_name: str, selector: str, reason: str):
        """Initialize the selector error.

        Args:
            field_name: Name of the config field holding the selector
            selector: The CSS selector that failed to compile
            reason: Parser message explaining the failure

        """
        self.field_name = field_name
        self.selector = selector
        self.reason = reason
        super().__init__(f"Invalid selector for '{field_name}' ({selector!r}): {reason}")


class AssetFetchError(QuizCrawlError):
    """Raised by asset fetchers when an image cannot be retrieved."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f'Could not fetch asset {url}: {reason}')


class FetchError(QuizCrawlError):
    """Raised when a page cannot be retrieved."""

    def __init__(self, url: str, reason: str, status_code: int | None = None):
        """Initialize fetch error.

        Args:
            url: URL that was requested
            reason: Human readable failure reason
            status_code: HTTP status code received, if any

        """
        self.url = url
        self.reason = reason
        self.status_code = status_code
        status = f' (status={status_code})' if status_code is not None else ''
        super().__init__(f'Failed to fetch {url}{status}: {reason}')


class ConfigLoadError(QuizCrawlError):
    """Raised when a selector configuration file cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f'Could not load selector config from {path}: {reason}')
