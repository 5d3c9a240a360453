"""Page layouts: the selectors and URLs that tie scraping to one site's markup."""

import dataclasses


@dataclasses.dataclass(frozen=True)
class PageLayout:
    """Where to find listing rows, links, thumbnails and descriptions.

    Swapping sites means swapping the layout; the scraper, enricher and
    pipeline only ever read these fields.
    """

    listing_url: str
    base_origin: str
    row_selector: str
    link_selector: str
    thumbnail_meta_selector: str = "meta[property='og:image']"
    image_selector: str = "img"
    description_selector: str = "meta[name='description']"
    body_selector: str = "body"

    def page_url(self, page: int) -> str:
        return self.listing_url.format(page=page)

    def with_urls(self, listing_url: str, base_origin: str) -> "PageLayout":
        return dataclasses.replace(
            self, listing_url=listing_url, base_origin=base_origin
        )


HACKER_NEWS = PageLayout(
    listing_url="https://news.ycombinator.com/news?p={page}",
    base_origin="https://news.ycombinator.com/",
    row_selector="tr.athing",
    link_selector="td:nth-child(3) > span > a",
)
