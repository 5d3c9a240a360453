"""Unit tests for Settings."""

from __future__ import annotations

import pytest

from hn_preview.config import Settings, get_settings
from hn_preview.errors import ConfigurationError
from hn_preview.layout import HACKER_NEWS


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PORT", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults() -> None:
    settings = Settings()
    assert settings.listing_url == "https://news.ycombinator.com/news?p={page}"
    assert settings.base_origin == "https://news.ycombinator.com/"
    assert settings.refresh_interval == 600
    assert settings.port == 8080
    assert settings.max_article_bytes == 2_000_000
    assert settings.layout() == HACKER_NEWS


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HN_PREVIEW_REFRESH_INTERVAL", "30")
    monkeypatch.setenv("HN_PREVIEW_MAX_WORKERS", "8")
    monkeypatch.setenv("HN_PREVIEW_MAX_ARTICLE_BYTES", "500000")
    settings = Settings()
    assert settings.refresh_interval == 30
    assert settings.max_workers == 8
    assert settings.max_article_bytes == 500_000


def test_bare_port_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "9000")
    assert Settings().port == 9000


def test_layout_follows_configured_urls(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HN_PREVIEW_LISTING_URL", "https://mirror.example.com/?p={page}")
    monkeypatch.setenv("HN_PREVIEW_BASE_ORIGIN", "https://mirror.example.com/")
    layout = Settings().layout()
    assert layout.page_url(3) == "https://mirror.example.com/?p=3"
    assert layout.row_selector == HACKER_NEWS.row_selector


def test_invalid_settings_raise_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HN_PREVIEW_REFRESH_INTERVAL", "0")
    with pytest.raises(ConfigurationError):
        get_settings()


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()
