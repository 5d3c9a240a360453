"""Scraper protocol: the listing-source abstraction layer."""

from typing import Protocol, runtime_checkable

from hn_preview.models import ListingEntry


@runtime_checkable
class Scraper(Protocol):
    def scrape(self, page: int) -> list[ListingEntry]: ...
