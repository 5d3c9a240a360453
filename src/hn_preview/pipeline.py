"""Listing scrape followed by per-article enrichment."""

from concurrent.futures import ThreadPoolExecutor

from hn_preview.config import Settings
from hn_preview.enrich import ArticleEnricher
from hn_preview.logging import get_logger
from hn_preview.models import Article, ListingEntry
from hn_preview.scraper import Scraper
from hn_preview.scrapers.hackernews import HackerNewsScraper
from hn_preview.session import build_session

logger = get_logger(__name__)


class ScrapePipeline:
    """Produce the ordered batch of Articles for one listing page.

    Enrichment runs on up to ``max_workers`` threads; the batch always
    follows listing order. ``ListingFetchError`` from the scraper propagates.
    """

    def __init__(
        self, scraper: Scraper, enricher: ArticleEnricher, max_workers: int = 1
    ) -> None:
        self._scraper = scraper
        self._enricher = enricher
        self._max_workers = max_workers

    def _build(self, entry: ListingEntry) -> Article:
        enrichment = self._enricher.enrich(entry.link)
        return Article(
            title=entry.title,
            url=entry.link,
            thumbnail=enrichment.thumbnail,
            preview=enrichment.preview,
        )

    def run(self, page: int) -> list[Article]:
        entries = self._scraper.scrape(page)
        if self._max_workers <= 1 or len(entries) <= 1:
            batch = [self._build(entry) for entry in entries]
        else:
            with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
                batch = list(executor.map(self._build, entries))
        logger.info("page_scraped", page=page, articles=len(batch))
        return batch


def build_pipeline(settings: Settings) -> ScrapePipeline:
    """Wire a Hacker News pipeline from *settings*, sharing one HTTP session."""
    layout = settings.layout()
    session = build_session(pool_size=max(settings.max_workers, 1) + 1)
    scraper = HackerNewsScraper(
        layout=layout,
        session=session,
        timeout=settings.request_timeout,
        retry_attempts=settings.retry_attempts,
    )
    enricher = ArticleEnricher(
        layout=layout,
        session=session,
        timeout=settings.request_timeout,
        max_bytes=settings.max_article_bytes,
    )
    return ScrapePipeline(scraper, enricher, max_workers=settings.max_workers)
