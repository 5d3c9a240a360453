"""Page-advance requests on top of the article cache."""

import threading

from hn_preview.cache import ArticleCache
from hn_preview.errors import NotReadyError
from hn_preview.logging import get_logger
from hn_preview.models import Article
from hn_preview.pipeline import ScrapePipeline

logger = get_logger(__name__)


class PaginationService:
    """Scrape the next listing page and add it to the cache.

    Advances are serialised so batches land in page order. The scrape itself
    runs outside the cache lock, so readers are never held up by it.
    """

    def __init__(self, pipeline: ScrapePipeline, cache: ArticleCache) -> None:
        self._pipeline = pipeline
        self._cache = cache
        self._advance_lock = threading.Lock()

    def advance(self) -> list[Article]:
        """Scrape the page after the cursor and return only its articles.

        Raises ``NotReadyError`` while a refresh is running, or when one
        started during the scrape and the batch had to be dropped. Lets
        ``ListingFetchError`` through with the cursor untouched.
        """
        with self._advance_lock:
            cursor = self._cache.cursor()
            page = cursor.page + 1
            batch = self._pipeline.run(page)
            if not self._cache.append(cursor.generation, page, batch):
                logger.warning(
                    "pagination_discarded", page=page, generation=cursor.generation
                )
                raise NotReadyError("Article cache was refreshed; retry")
            logger.info("pagination_advanced", page=page, articles=len(batch))
            return batch

    def since(self, offset: int) -> list[Article]:
        """Return the cached articles after *offset* without scraping."""
        return self._cache.since(offset)
