"""Scraper for the Hacker News front-page listing."""

from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from tenacity import (
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from hn_preview.errors import ListingFetchError
from hn_preview.layout import HACKER_NEWS, PageLayout
from hn_preview.logging import get_logger
from hn_preview.models import ListingEntry
from hn_preview.session import DEFAULT_TIMEOUT, build_session

logger = get_logger(__name__)


def is_absolute(url: str) -> bool:
    return url.startswith("http")


def resolve_link(base_origin: str, link: str) -> str:
    """Resolve a listing href so that a non-``http`` link stays on *base_origin*.

    ``urljoin`` would let ``//host/x`` or ``mailto:`` escape the listing site,
    so those are appended to the origin verbatim.
    """
    if is_absolute(link):
        return link
    joined = urljoin(base_origin, link)
    if joined.startswith(base_origin):
        return joined
    return base_origin + link.lstrip("/")


def is_transient(exc: BaseException) -> bool:
    """Connection problems, timeouts and 5xx answers are worth another try."""
    if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
        return True
    if isinstance(exc, requests.HTTPError):
        response = exc.response
        return response is None or response.status_code >= 500
    return False


class HackerNewsScraper:
    """Scrape (title, link) entries from one page of a listing index.

    Any failure to fetch or parse the listing raises ``ListingFetchError``;
    a partial listing is never returned.
    """

    def __init__(
        self,
        layout: PageLayout = HACKER_NEWS,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry_attempts: int = 3,
        retry_wait: float = 0.5,
    ) -> None:
        self._layout = layout
        self._session = session or build_session()
        self._timeout = timeout
        self._retrying = Retrying(
            stop=stop_after_attempt(retry_attempts),
            wait=wait_exponential(multiplier=retry_wait, max=8),
            retry=retry_if_exception(is_transient),
            reraise=True,
        )

    def _get(self, url: str) -> requests.Response:
        response = self._session.get(url, timeout=self._timeout)
        response.raise_for_status()
        return response

    def scrape(self, page: int) -> list[ListingEntry]:
        url = self._layout.page_url(page)
        try:
            response = self._retrying.copy()(self._get, url)
        except requests.RequestException as e:
            raise ListingFetchError(f"Error fetching the page: {e}", url=url) from e

        try:
            soup = BeautifulSoup(response.text, "html.parser")
        except ParserRejectedMarkup as e:
            raise ListingFetchError(f"Error parsing the page: {e}", url=url) from e

        entries = [self._parse_row(row) for row in soup.select(self._layout.row_selector)]
        logger.info("listing_fetched", url=url, page=page, entries=len(entries))
        return entries

    def _parse_row(self, row) -> ListingEntry:
        anchor = row.select_one(self._layout.link_selector)
        title = anchor.get_text(strip=True) if anchor else ""
        link = (anchor.get("href") if anchor else None) or ""
        return ListingEntry(title=title, link=resolve_link(self._layout.base_origin, link))
