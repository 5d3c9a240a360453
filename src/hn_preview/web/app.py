"""FastAPI web application serving the cached article previews."""

from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from hn_preview.cache import ArticleCache
from hn_preview.config import Settings, get_settings
from hn_preview.errors import ListingFetchError, NotReadyError
from hn_preview.logging import get_logger
from hn_preview.pagination import PaginationService
from hn_preview.pipeline import ScrapePipeline, build_pipeline
from hn_preview.scheduler import RefreshScheduler

logger = get_logger(__name__)

templates_dir = Path(__file__).parent / "templates"
static_dir = Path(__file__).parent / "static"


def create_app(
    settings: Settings | None = None,
    pipeline: ScrapePipeline | None = None,
    start_scheduler: bool = True,
) -> FastAPI:
    """Build the app around one cache, one scheduler and one pagination service."""
    settings = settings or get_settings()
    pipeline = pipeline or build_pipeline(settings)
    cache = ArticleCache()
    scheduler = RefreshScheduler(pipeline, cache, settings.refresh_interval)
    pagination = PaginationService(pipeline, cache)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if start_scheduler:
            scheduler.start()
        yield
        scheduler.stop(timeout=1.0)

    app = FastAPI(
        title="hn-preview",
        description="Hacker News listing with thumbnails and text previews",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.cache = cache
    app.state.scheduler = scheduler
    app.state.pagination = pagination

    templates = Jinja2Templates(directory=str(templates_dir))

    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    @app.get("/", response_class=HTMLResponse)
    def home(request: Request):
        """Render every cached article, or a 503 page while refreshing."""
        snapshot = cache.snapshot()
        return templates.TemplateResponse(
            request,
            "index.html",
            {"articles": snapshot.articles, "ready": snapshot.ready},
            status_code=200 if snapshot.ready else 503,
        )

    @app.get("/load-more")
    def load_more(offset: int = 0):
        """Return the next page's articles, or the cached tail after *offset*."""
        try:
            if offset > 0:
                batch = pagination.since(offset)
            else:
                batch = pagination.advance()
        except NotReadyError as e:
            raise HTTPException(status_code=503, detail=str(e))
        except ListingFetchError as e:
            logger.error("load_more_failed", error=str(e))
            raise HTTPException(status_code=502, detail="Error returning articles")
        return JSONResponse(content=[article.to_dict() for article in batch])

    @app.get("/healthz")
    def healthz():
        snapshot = cache.snapshot()
        return {
            "ready": snapshot.ready,
            "page": snapshot.page,
            "articles": len(snapshot.articles),
            "scheduler": scheduler.state.value,
        }

    return app


def main(settings: Settings | None = None) -> None:
    """Entry point for the web application."""
    settings = settings or get_settings()
    logger.info("server_starting", url=f"http://{settings.host}:{settings.port}")
    uvicorn.run(
        create_app(settings), host=settings.host, port=settings.port, log_config=None
    )


if __name__ == "__main__":
    main()
