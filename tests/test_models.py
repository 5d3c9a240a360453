"""Unit tests for the Article model."""

from __future__ import annotations

import dataclasses

import pytest

from hn_preview.models import Article


def test_to_dict_uses_wire_field_names() -> None:
    article = Article("Title", "https://example.com", "https://example.com/t.png", "Text...")
    assert article.to_dict() == {
        "Title": "Title",
        "URL": "https://example.com",
        "Thumbnail": "https://example.com/t.png",
        "Preview": "Text...",
    }
    assert Article.from_dict(article.to_dict()) == article


def test_article_is_immutable() -> None:
    article = Article("Title", "https://example.com", "thumb", "Text...")
    with pytest.raises(dataclasses.FrozenInstanceError):
        article.title = "Other"
