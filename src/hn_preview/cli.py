"""Unified CLI with subcommands: serve, scrape."""

from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from hn_preview.config import Settings, get_settings
from hn_preview.errors import ConfigurationError, ListingFetchError
from hn_preview.logging import configure_logging
from hn_preview.pipeline import build_pipeline
from hn_preview.web.app import main as run_server

app = typer.Typer(
    name="hn-preview",
    help="Serve Hacker News listings enriched with thumbnails and previews.",
)


def _load_settings(**overrides) -> Settings:
    load_dotenv()
    try:
        settings = get_settings()
    except ConfigurationError as e:
        Console(stderr=True).print(f"Error: {e}")
        raise typer.Exit(code=1)
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        settings = settings.model_copy(update=overrides)
    configure_logging(settings.log_level, json_output=settings.json_logs)
    return settings


@app.command()
def serve(
    host: Annotated[
        str | None,
        typer.Option(help="Interface to bind (default from settings)"),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option(help="Port to listen on (default from settings or $PORT)"),
    ] = None,
    refresh_interval: Annotated[
        float | None,
        typer.Option(help="Seconds between cache refreshes"),
    ] = None,
) -> None:
    """Run the web server with the background refresher."""
    settings = _load_settings(
        host=host, port=port, refresh_interval=refresh_interval
    )
    run_server(settings)


@app.command()
def scrape(
    page: Annotated[
        int,
        typer.Option("-p", "--page", min=1, help="Listing page to scrape"),
    ] = 1,
    max_workers: Annotated[
        int | None,
        typer.Option(help="Parallel article fetches"),
    ] = None,
) -> None:
    """Scrape one listing page and print the enriched articles."""
    settings = _load_settings(max_workers=max_workers)
    console = Console()
    pipeline = build_pipeline(settings)

    try:
        with console.status(f"Scraping page {page}..."):
            articles = pipeline.run(page)
    except ListingFetchError as e:
        console.print(f"Failed: {e}")
        raise typer.Exit(code=1)

    table = Table(title=f"Page {page}: {len(articles)} articles")
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("URL", overflow="fold")
    table.add_column("Preview")
    for i, article in enumerate(articles, 1):
        table.add_row(str(i), article.title, article.url, article.preview)
    console.print(table)


def main() -> None:
    app()
