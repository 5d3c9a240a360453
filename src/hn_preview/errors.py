"""Exception hierarchy for hn-preview.

Errors come in two tiers. A listing failure is fatal for one scrape: the
batch is abandoned and the caller keeps whatever the cache held before.
An article-page failure is degraded: the enricher substitutes fallbacks and
the batch carries on.

    HnPreviewError
    +-- ListingFetchError   (fatal: listing page could not be fetched/parsed)
    +-- ArticleFetchError   (degraded: one article page failed)
    +-- NotReadyError       (cache read while a refresh is running)
    +-- ConfigurationError  (invalid settings at startup)
"""


class HnPreviewError(Exception):
    """Base exception carrying a message and, where relevant, the URL involved."""

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        url: str | None = None,
    ) -> None:
        self._message = message
        self._url = url
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def url(self) -> str | None:
        return self._url

    def __str__(self) -> str:
        if self._url:
            return f"{self._message} ({self._url})"
        return self._message


class ListingFetchError(HnPreviewError):
    """Raised when a listing page cannot be fetched or parsed."""

    def __init__(
        self, message: str = "Listing fetch failed", url: str | None = None
    ) -> None:
        super().__init__(message=message, url=url)


class ArticleFetchError(HnPreviewError):
    """Raised when an article page cannot be fetched or parsed.

    Never escapes the enricher; it is turned into fallback values.
    """

    def __init__(
        self, message: str = "Article fetch failed", url: str | None = None
    ) -> None:
        super().__init__(message=message, url=url)


class NotReadyError(HnPreviewError):
    """Raised when the article cache is read before a refresh has completed."""

    def __init__(self, message: str = "Article cache is not ready") -> None:
        super().__init__(message=message)


class ConfigurationError(HnPreviewError):
    """Raised when settings are invalid or missing at startup."""

    def __init__(self, message: str = "Invalid or missing configuration") -> None:
        super().__init__(message=message)
