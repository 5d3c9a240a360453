"""Application settings loaded from environment variables via pydantic-settings.

Every field maps to an ``HN_PREVIEW_``-prefixed variable (``refresh_interval``
-> ``HN_PREVIEW_REFRESH_INTERVAL``) and may also come from a ``.env`` file.
The listen port additionally honours a bare ``PORT``.
"""

from functools import lru_cache

from pydantic import AliasChoices, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from hn_preview.errors import ConfigurationError
from hn_preview.layout import HACKER_NEWS, PageLayout


class Settings(BaseSettings):
    """hn-preview settings. Environment variables override defaults."""

    model_config = SettingsConfigDict(
        env_prefix="HN_PREVIEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Scraping ===
    listing_url: str = HACKER_NEWS.listing_url
    base_origin: str = HACKER_NEWS.base_origin
    refresh_interval: float = Field(default=600.0, gt=0)
    request_timeout: float = Field(default=10.0, gt=0)
    max_workers: int = Field(default=4, ge=1)
    retry_attempts: int = Field(default=3, ge=1)
    max_article_bytes: int = Field(default=2_000_000, ge=1)

    # === Logging ===
    log_level: str = "INFO"
    json_logs: bool = False

    # === Server ===
    host: str = "127.0.0.1"
    port: int = Field(
        default=8080, validation_alias=AliasChoices("HN_PREVIEW_PORT", "PORT")
    )

    def layout(self) -> PageLayout:
        return HACKER_NEWS.with_urls(self.listing_url, self.base_origin)


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, validated once."""
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
