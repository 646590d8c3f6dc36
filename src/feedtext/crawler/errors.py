"""Exceptions raised while fetching and extracting articles."""


class ExtractionError(Exception):
    """Base class for extraction failures."""

    pass


class FetchError(ExtractionError):
    """Raised when an article page cannot be downloaded.

    Carries the URL and, for HTTP error responses, the status code.
    """

    def __init__(self, url: str, reason: str, status_code: int | None = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {reason}")
