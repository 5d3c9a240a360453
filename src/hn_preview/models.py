"""Article dataclass and the listing entries it is built from."""

import dataclasses

FALLBACK_THUMBNAIL = "https://upload.wikimedia.org/wikipedia/commons/thumb/b/b2/Y_Combinator_logo.svg/1200px-Y_Combinator_logo.svg.png"
NO_PREVIEW = "No preview available"


@dataclasses.dataclass(frozen=True)
class ListingEntry:
    """One row of a listing page: the title text and the absolute link."""

    title: str
    link: str


@dataclasses.dataclass(frozen=True)
class Article:
    """A listing entry enriched with a thumbnail and a text preview."""

    title: str
    url: str
    thumbnail: str
    preview: str

    def to_dict(self) -> dict:
        return {
            "Title": self.title,
            "URL": self.url,
            "Thumbnail": self.thumbnail,
            "Preview": self.preview,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Article":
        return cls(
            title=d["Title"],
            url=d["URL"],
            thumbnail=d["Thumbnail"],
            preview=d["Preview"],
        )
