"""Thumbnail and preview extraction from an article's own page.

Each article page is fetched and parsed once; both extractions then run
against the same document. Nothing here raises to the caller: a page that
cannot be fetched or parsed yields the fallback thumbnail and the
"No preview available" placeholder.
"""

import dataclasses

import requests
from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from hn_preview.errors import ArticleFetchError
from hn_preview.layout import HACKER_NEWS, PageLayout
from hn_preview.logging import get_logger
from hn_preview.models import FALLBACK_THUMBNAIL, NO_PREVIEW
from hn_preview.scrapers.hackernews import is_absolute
from hn_preview.session import DEFAULT_TIMEOUT, build_session

logger = get_logger(__name__)

MAX_PREVIEW_WORDS = 40
MAX_PREVIEW_CHARS = 300
ELLIPSIS = "..."
MAX_ARTICLE_BYTES = 2_000_000
CHUNK_SIZE = 64 * 1024


@dataclasses.dataclass(frozen=True)
class Enrichment:
    thumbnail: str
    preview: str


FAILED = Enrichment(thumbnail=FALLBACK_THUMBNAIL, preview=NO_PREVIEW)


def truncate_preview(text: str) -> str:
    """Cap *text* at 40 words, then at 300 characters, and add an ellipsis.

    Text of 40 words or fewer keeps its original spacing.
    """
    words = text.split()
    if len(words) > MAX_PREVIEW_WORDS:
        text = " ".join(words[:MAX_PREVIEW_WORDS])
    if len(text) > MAX_PREVIEW_CHARS:
        text = text[:MAX_PREVIEW_CHARS]
    return text + ELLIPSIS


def extract_thumbnail(
    soup: BeautifulSoup, article_url: str, layout: PageLayout = HACKER_NEWS
) -> str:
    """Return the og:image, else the first image, else ``""``.

    A relative image ``src`` is appended to the article URL as is, not
    resolved.
    """
    for meta in soup.select(layout.thumbnail_meta_selector):
        content = meta.get("content")
        if content:
            return content

    img = soup.select_one(layout.image_selector)
    src = img.get("src") if img else None
    if not src:
        return ""
    if not is_absolute(src):
        src = article_url + src
    return src


def extract_preview(soup: BeautifulSoup, layout: PageLayout = HACKER_NEWS) -> str:
    """Return the truncated meta description, falling back to the body text."""
    text = ""
    for meta in soup.select(layout.description_selector):
        text = meta.get("content") or ""

    if not text:
        body = soup.select_one(layout.body_selector)
        if body is not None:
            text = body.get_text()

    return truncate_preview(text)


class ArticleEnricher:
    """Fetch an article page and derive its thumbnail and preview.

    The body is streamed and read up to ``max_bytes``; anything past the cap
    is ignored. Responses whose ``Content-Type`` is not HTML are not read.
    """

    def __init__(
        self,
        layout: PageLayout = HACKER_NEWS,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_bytes: int = MAX_ARTICLE_BYTES,
    ) -> None:
        self._layout = layout
        self._session = session or build_session()
        self._timeout = timeout
        self._max_bytes = max_bytes

    def _read(self, url: str) -> str:
        with self._session.get(url, timeout=self._timeout, stream=True) as response:
            response.raise_for_status()
            content_type = response.headers.get("Content-Type", "")
            if content_type and "html" not in content_type.lower():
                raise ArticleFetchError(f"Not an HTML page: {content_type}", url=url)

            body = bytearray()
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                body.extend(chunk)
                if len(body) >= self._max_bytes:
                    logger.debug("article_truncated", url=url, max_bytes=self._max_bytes)
                    break
            return bytes(body[: self._max_bytes]).decode(
                response.encoding or "utf-8", errors="replace"
            )

    def fetch(self, url: str) -> BeautifulSoup:
        try:
            text = self._read(url)
        except (requests.RequestException, LookupError) as e:
            raise ArticleFetchError(f"Failed to fetch article: {e}", url=url) from e
        try:
            return BeautifulSoup(text, "html.parser")
        except ParserRejectedMarkup as e:
            raise ArticleFetchError(f"Failed to parse article: {e}", url=url) from e

    def enrich(self, url: str) -> Enrichment:
        try:
            soup = self.fetch(url)
        except ArticleFetchError as e:
            logger.warning("article_fetch_failed", url=url, error=str(e))
            return FAILED

        thumbnail = extract_thumbnail(soup, url, self._layout) or FALLBACK_THUMBNAIL
        preview = extract_preview(soup, self._layout)
        return Enrichment(thumbnail=thumbnail, preview=preview)
