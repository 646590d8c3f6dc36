"""Pytest-wide fixtures for feedtext tests."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from feedtext.config import ExtractionSettings, reset_settings
from feedtext.crawler import ArticleTextExtractor, FetchError

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "article_text"

FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class StubFetcher:
    """Fetcher double that serves canned HTML and records every request."""

    def __init__(self, pages: dict[str, str] | None = None, error: Exception | None = None):
        self.pages = pages or {}
        self.error = error
        self.calls: list[str] = []

    def fetch(self, url: str) -> str:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        if url not in self.pages:
            raise FetchError(url, "HTTP 404", status_code=404)
        return self.pages[url]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep FEEDTEXT_* variables from the host out of every test."""
    for name in ("FEEDTEXT_FETCH_TIMEOUT", "FEEDTEXT_CACHE_CAPACITY", "FEEDTEXT_USER_AGENT"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def load_fixture():
    """Return a loader for HTML pages under tests/fixtures/article_text."""

    def _load(name: str) -> str:
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")

    return _load


@pytest.fixture
def stub_fetcher():
    return StubFetcher()


@pytest.fixture
def fetcher_factory():
    """Build stub fetchers serving specific pages or raising an error."""
    return StubFetcher


@pytest.fixture
def make_extractor():
    """Build an extractor with a stub fetcher and a fixed clock."""

    def _make(fetcher=None, **kwargs) -> ArticleTextExtractor:
        return ArticleTextExtractor(
            fetcher=fetcher if fetcher is not None else StubFetcher(),
            settings=kwargs.pop("settings", ExtractionSettings()),
            clock=kwargs.pop("clock", lambda: FIXED_NOW),
            **kwargs,
        )

    return _make


@pytest.fixture
def fixed_now():
    """The instant every ``make_extractor`` clock returns."""
    return FIXED_NOW


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR
