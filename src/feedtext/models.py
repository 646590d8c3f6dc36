"""Data records shared across the extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ExtractionMethod(str, Enum):
    """Provenance of the extracted article text."""

    RSS_CONTENT = "rss_content"
    RSS_DESCRIPTION = "rss_description"
    FETCHED_HTML_READABILITY = "fetched_html_readability"
    FETCHED_HTML_FALLBACK = "fetched_html_fallback"


class SectionLabel(str, Enum):
    """Category of boilerplate removed during extraction."""

    # Tags stripped together with their content
    SCRIPT = "script"
    STYLE = "style"
    NOSCRIPT = "noscript"
    SVG = "svg"
    CANVAS = "canvas"
    IFRAME = "iframe"
    FORM = "form"
    BUTTON = "button"
    INPUT = "input"
    ASIDE = "aside"
    NAV = "nav"

    # class/id token labels
    COOKIE_BANNER = "cookie_banner"
    BANNER = "banner"
    OVERLAY = "overlay"
    SUBSCRIBE = "subscribe"
    PAYWALL = "paywall"
    SHARE = "share"
    SOCIAL = "social"
    RELATED = "related"
    COMMENTS = "comments"
    FOOTER = "footer"
    HEADER = "header"
    SIDEBAR = "sidebar"
    WIDGET = "widget"
    AD = "ad"
    PROMO = "promo"
    AUTHOR_BOX = "author_box"

    # Paragraph-level noise labels
    LOGIN = "login"
    BOILERPLATE = "boilerplate"


@dataclass(frozen=True)
class ArticleSource:
    """A feed item handed over by the feed parser."""

    link: str
    title: str | None = None
    description_html: str | None = None
    content_html: str | None = None


@dataclass(frozen=True)
class CleanedHTML:
    html: str
    removed_sections: frozenset[SectionLabel] = field(default_factory=frozenset)


@dataclass(frozen=True)
class Candidate:
    html: str
    score: float


@dataclass(frozen=True)
class NoiseFilterResult:
    paragraphs: tuple[str, ...]
    removed_sections: frozenset[SectionLabel]


@dataclass(frozen=True)
class ExtractedArticle:
    """Readable article text plus extraction metadata.

    ``body`` is always ``"\\n\\n".join(paragraphs)`` and ``confidence`` is
    clamped to ``[0, 1]``.
    """

    title: str
    body: str
    paragraphs: tuple[str, ...]
    source_url: str
    extraction_method: ExtractionMethod
    removed_sections: tuple[str, ...]
    confidence: float
    detected_language: str | None
    word_count: int
    has_paywall_hint: bool
    extracted_pub_date: datetime | None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "title": self.title,
            "body": self.body,
            "paragraphs": list(self.paragraphs),
            "source_url": self.source_url,
            "extraction_method": self.extraction_method.value,
            "removed_sections": list(self.removed_sections),
            "confidence": self.confidence,
            "detected_language": self.detected_language,
            "word_count": self.word_count,
            "has_paywall_hint": self.has_paywall_hint,
            "extracted_pub_date": (
                self.extracted_pub_date.isoformat()
                if self.extracted_pub_date
                else None
            ),
        }
