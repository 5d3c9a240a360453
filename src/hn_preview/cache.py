"""Process-wide article store guarded by a reader/writer lock.

The cache holds the ordered article sequence, the page cursor and the
readiness flag as one piece of guarded state. It never fetches anything;
the scheduler and the pagination service do the scraping outside the lock
and hand finished batches in.

Every refresh bumps a generation number. Writers pass back the generation
they started under, so a batch scraped before a refresh began cannot land in
the rebuilt cache.
"""

import dataclasses
import threading
from contextlib import contextmanager
from typing import Iterator, Sequence

from hn_preview.errors import NotReadyError
from hn_preview.logging import get_logger
from hn_preview.models import Article

logger = get_logger(__name__)


class ReadWriteLock:
    """Many concurrent readers or one writer; waiting writers block new readers."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


@dataclasses.dataclass(frozen=True)
class CacheSnapshot:
    articles: tuple[Article, ...]
    page: int
    ready: bool


@dataclasses.dataclass(frozen=True)
class Cursor:
    generation: int
    page: int


class ArticleCache:
    """Ordered articles, page cursor and readiness flag behind one lock."""

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._articles: list[Article] = []
        self._page = 1
        self._ready = False
        self._generation = 0
        self._saved: tuple[list[Article], int, bool] | None = None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def snapshot(self) -> CacheSnapshot:
        with self._lock.read():
            return CacheSnapshot(tuple(self._articles), self._page, self._ready)

    def articles(self) -> tuple[Article, ...]:
        """Return every cached article; raises ``NotReadyError`` mid-refresh."""
        with self._lock.read():
            if not self._ready:
                raise NotReadyError()
            return tuple(self._articles)

    def since(self, offset: int) -> list[Article]:
        """Return the cached articles after the first *offset*."""
        with self._lock.read():
            if not self._ready:
                raise NotReadyError()
            return self._articles[max(offset, 0):]

    def cursor(self) -> Cursor:
        """Return the generation and page a pagination run should start from."""
        with self._lock.read():
            if not self._ready:
                raise NotReadyError()
            return Cursor(self._generation, self._page)

    @property
    def ready(self) -> bool:
        with self._lock.read():
            return self._ready

    @property
    def page(self) -> int:
        with self._lock.read():
            return self._page

    @property
    def generation(self) -> int:
        with self._lock.read():
            return self._generation

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._articles)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def begin_refresh(self) -> int:
        """Empty the cache, mark it not ready and return the new generation.

        The previous contents are kept aside until the refresh completes or
        is aborted.
        """
        with self._lock.write():
            self._saved = (self._articles, self._page, self._ready)
            self._articles = []
            self._page = 1
            self._ready = False
            self._generation += 1
            return self._generation

    def complete_refresh(self, generation: int, batch: Sequence[Article]) -> bool:
        with self._lock.write():
            if generation != self._generation:
                logger.warning(
                    "stale_refresh_dropped",
                    generation=generation,
                    current=self._generation,
                )
                return False
            self._articles = list(batch)
            self._ready = True
            self._saved = None
            return True

    def abort_refresh(self, generation: int) -> bool:
        """Restore what the cache held before ``begin_refresh``."""
        with self._lock.write():
            if generation != self._generation or self._saved is None:
                return False
            self._articles, self._page, self._ready = self._saved
            self._saved = None
            return True

    def append(self, generation: int, page: int, batch: Sequence[Article]) -> bool:
        """Add *batch* as the contents of *page* and move the cursor there.

        Nothing changes if a refresh started after *generation* was read.
        """
        with self._lock.write():
            if generation != self._generation or not self._ready:
                return False
            self._articles.extend(batch)
            self._page = page
            return True
