"""Shared pytest fixtures for the hn-preview test suite."""

from __future__ import annotations

import threading
from typing import Any

import pytest
import requests

from hn_preview.cache import ArticleCache
from hn_preview.enrich import Enrichment
from hn_preview.errors import ListingFetchError
from hn_preview.models import ListingEntry
from hn_preview.pipeline import ScrapePipeline

BASE = "https://news.ycombinator.com/"


# ---------------------------------------------------------------------------
# HTTP stand-ins
# ---------------------------------------------------------------------------


class FakeResponse:
    """Enough of ``requests.Response`` for plain and ``stream=True`` reads."""

    def __init__(
        self,
        text: str = "",
        status_code: int = 200,
        url: str = "",
        headers: dict[str, str] | None = None,
        encoding: str | None = "utf-8",
    ) -> None:
        self.text = text
        self.status_code = status_code
        self.url = url
        self.headers = dict(headers or {})
        self.encoding = encoding
        self.bytes_read = 0
        self.closed = False

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(
                f"{self.status_code} Error for url: {self.url}", response=self
            )

    def iter_content(self, chunk_size: int = 1):
        content = self.text.encode(self.encoding or "utf-8")
        for start in range(0, len(content), chunk_size):
            chunk = content[start : start + chunk_size]
            self.bytes_read += len(chunk)
            yield chunk

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class FakeSession:
    """Map URLs to HTML bodies, ``FakeResponse`` objects or exceptions.

    A list value is consumed one item per request, so a URL can fail first
    and succeed on retry.
    """

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes = dict(routes or {})
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def get(
        self, url: str, timeout: float | None = None, stream: bool = False
    ) -> FakeResponse:
        with self._lock:
            self.calls.append(url)
            if url not in self.routes:
                raise requests.ConnectionError(f"no route to {url}")
            value = self.routes[url]
            if isinstance(value, list):
                value = value.pop(0)
        if isinstance(value, BaseException):
            raise value
        if isinstance(value, FakeResponse):
            return value
        return FakeResponse(text=value, url=url)


def listing_html(rows: list[tuple[str, str]]) -> str:
    """Render rows the way the Hacker News front page marks them up."""
    body = "".join(
        f'<tr class="athing" id="{i}">'
        f'<td class="title"><span class="rank">{i}.</span></td>'
        f'<td class="votelinks"><center><a id="up_{i}"></a></center></td>'
        f'<td class="title"><span class="titleline"><a href="{href}">{title}</a>'
        f'<span class="sitebit comhead"> (<a href="from?site=example.com">'
        f"<span>example.com</span></a>)</span></span></td>"
        f'</tr><tr><td colspan="2"></td><td class="subtext">42 points</td></tr>'
        for i, (title, href) in enumerate(rows, 1)
    )
    return f"<html><body><table>{body}</table></body></html>"


def article_html(
    *,
    og_image: str | None = None,
    description: str | None = None,
    images: tuple[str, ...] = (),
    body: str = "",
) -> str:
    head = ""
    if og_image is not None:
        head += f'<meta property="og:image" content="{og_image}">'
    if description is not None:
        head += f'<meta name="description" content="{description}">'
    imgs = "".join(f'<img src="{src}">' for src in images)
    return f"<html><head>{head}</head><body>{imgs}<p>{body}</p></body></html>"


# ---------------------------------------------------------------------------
# Pipeline stand-ins
# ---------------------------------------------------------------------------


class FakeScraper:
    """Serve canned listing pages; a missing page is an empty listing."""

    def __init__(self, pages: dict[int, Any] | None = None) -> None:
        self.pages = dict(pages or {})
        self.calls: list[int] = []

    def scrape(self, page: int) -> list[ListingEntry]:
        self.calls.append(page)
        value = self.pages.get(page, [])
        if isinstance(value, BaseException):
            raise value
        return list(value)


class FakeEnricher:
    def __init__(self, thumbnail: str = "https://img.example.com/t.png") -> None:
        self.thumbnail = thumbnail
        self.calls: list[str] = []

    def enrich(self, url: str) -> Enrichment:
        self.calls.append(url)
        return Enrichment(thumbnail=self.thumbnail, preview=f"preview of {url}...")


def entries(page: int, count: int = 3) -> list[ListingEntry]:
    return [
        ListingEntry(title=f"Story {page}-{i}", link=f"{BASE}item?id={page * 100 + i}")
        for i in range(count)
    ]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cache() -> ArticleCache:
    return ArticleCache()


@pytest.fixture
def fake_scraper() -> FakeScraper:
    return FakeScraper({1: entries(1), 2: entries(2), 3: entries(3)})


@pytest.fixture
def fake_enricher() -> FakeEnricher:
    return FakeEnricher()


@pytest.fixture
def pipeline(fake_scraper: FakeScraper, fake_enricher: FakeEnricher) -> ScrapePipeline:
    return ScrapePipeline(fake_scraper, fake_enricher)


@pytest.fixture
def listing_error() -> ListingFetchError:
    return ListingFetchError("Error fetching the page: boom", url=f"{BASE}news?p=1")
