"""Background loop that rebuilds the article cache from page 1."""

import enum
import threading

from hn_preview.cache import ArticleCache
from hn_preview.errors import ListingFetchError
from hn_preview.logging import get_logger
from hn_preview.models import Article
from hn_preview.pipeline import ScrapePipeline

logger = get_logger(__name__)


class SchedulerState(enum.Enum):
    READY = "ready"
    REFRESHING = "refreshing"


class RefreshScheduler:
    """Refresh the cache immediately, then once every *interval* seconds.

    A listing failure does not stop the loop: the cache gets its previous
    contents back and the next interval tries again.
    """

    def __init__(
        self, pipeline: ScrapePipeline, cache: ArticleCache, interval: float
    ) -> None:
        self._pipeline = pipeline
        self._cache = cache
        self._interval = interval
        self._state = SchedulerState.READY
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def refresh_once(self) -> list[Article] | None:
        """Rebuild the cache from page 1; return the batch, or None on failure."""
        self._state = SchedulerState.REFRESHING
        generation = self._cache.begin_refresh()
        logger.info("refresh_started", generation=generation)
        try:
            batch = self._pipeline.run(1)
        except ListingFetchError as e:
            self._cache.abort_refresh(generation)
            self._state = SchedulerState.READY
            logger.error("refresh_failed", generation=generation, error=str(e))
            return None
        except BaseException:
            self._cache.abort_refresh(generation)
            self._state = SchedulerState.READY
            raise

        self._cache.complete_refresh(generation, batch)
        self._state = SchedulerState.READY
        logger.info("refresh_completed", generation=generation, articles=len(batch))
        return batch

    def _run(self) -> None:
        while True:
            try:
                self.refresh_once()
            except Exception:
                logger.exception("refresh_crashed")
            if self._stop.wait(self._interval):
                break
        logger.info("scheduler_stopped")

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="refresh-scheduler", daemon=True
        )
        self._thread.start()
        logger.info("scheduler_started", interval=self._interval)

    def stop(self, timeout: float | None = None) -> None:
        """Ask the loop to exit after the current refresh and wait for it."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
