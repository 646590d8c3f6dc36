"""Article text extraction for feed items."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Protocol

from ..config import ExtractionSettings, get_settings
from ..metadata.structured_data import extract_publish_date_from_html
from ..models import ArticleSource, ExtractedArticle, ExtractionMethod, SectionLabel
from ..utils.date_extractor import DateExtractor
from ..utils.html_cleaner import HTMLCleaner, html_to_text
from ..utils.language import detect_language
from ..utils.noise_filter import NoiseFilter
from ..utils.text_cleaner import (
    count_words,
    normalize_paragraphs,
    normalized_for_comparison,
    remove_duplicate_title_paragraphs,
)
from ..utils.title_cleaner import TitleCleaner, extract_first_heading, extract_html_title
from .cache import ExtractionCache, content_signature, make_cache_key
from .errors import ExtractionError, FetchError
from .fetcher import ArticleFetcher
from .paragraphs import extract_paragraphs, split_lines
from .scorer import ReadabilityScorer

__all__ = [
    "ArticleFetcher",
    "ArticleTextExtractor",
    "ExtractionCache",
    "ExtractionError",
    "FetchError",
]

logger = logging.getLogger(__name__)

MIN_TRUNCATION_CHECK_LENGTH = 60
TRUNCATION_TAIL_LENGTH = 200
TRUNCATION_INDICATORS = (
    "read more",
    "continue reading",
    "view more",
    "full story",
    "more at",
    "leer mas",
    "seguir leyendo",
    "continuar leyendo",
    "ver mas",
    "mas informacion",
    "mas info",
    "leer el articulo completo",
    "leer articulo completo",
    "leer nota completa",
)

PAYWALL_CHECK_MAX_BODY = 400
PAYWALL_KEYWORDS = (
    "suscribete",
    "hazte suscriptor",
    "inicia sesion",
    "contenido exclusivo",
    "paywall",
    "subscription",
    "subscribe",
    "sign in",
    "login",
)
CONSENT_KEYWORDS = ("cookie", "cookies", "consent", "gdpr")

BASE_CONFIDENCE = {
    ExtractionMethod.RSS_CONTENT: 0.75,
    ExtractionMethod.RSS_DESCRIPTION: 0.62,
    ExtractionMethod.FETCHED_HTML_READABILITY: 0.85,
    ExtractionMethod.FETCHED_HTML_FALLBACK: 0.5,
}
FETCH_FAILURE_CONFIDENCE = 0.3


class PageFetcher(Protocol):
    def fetch(self, url: str) -> str: ...


def is_substantial_html(html: str, min_length: int) -> bool:
    return len(html_to_text(html)) >= min_length


def looks_truncated(html: str) -> bool:
    """Return True when inline feed HTML appears to be a teaser."""
    text = html_to_text(html)
    if len(text) < MIN_TRUNCATION_CHECK_LENGTH:
        return False

    tail = normalized_for_comparison(text)[-TRUNCATION_TAIL_LENGTH:]
    if any(phrase in tail for phrase in TRUNCATION_INDICATORS):
        return True

    if text.endswith("...") or text.endswith("…"):
        return True

    suffix = text[-12:]
    return "[...]" in suffix or "(...)" in suffix


def has_paywall_hint(html: str, body_length: int) -> bool:
    """Short bodies on pages mentioning subscriptions or consent walls."""
    if body_length >= PAYWALL_CHECK_MAX_BODY:
        return False
    normalized = normalized_for_comparison(html)
    return any(keyword in normalized for keyword in PAYWALL_KEYWORDS + CONSENT_KEYWORDS)


def compute_confidence(
    method: ExtractionMethod,
    body_length: int,
    paragraph_count: int,
    paywall_hint: bool,
) -> float:
    score = BASE_CONFIDENCE[method]
    if body_length < 400:
        score -= 0.15
    if body_length < 200:
        score -= 0.2
    if paragraph_count < 2:
        score -= 0.1
    if paywall_hint:
        score -= 0.35
    return max(0.0, min(1.0, score))


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ArticleTextExtractor:
    """Turn feed items into clean, readable article text.

    Inline feed content is used when it is long enough and does not look
    like a teaser; otherwise the article page is fetched. Results are cached
    per URL and content signature, so repeated requests never refetch.
    ``extract`` and ``extract_from_html`` always return a result.
    """

    def __init__(
        self,
        fetcher: PageFetcher | None = None,
        cache: ExtractionCache | None = None,
        settings: ExtractionSettings | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.settings = settings or get_settings()
        self.fetcher = fetcher or ArticleFetcher(self.settings)
        self.cache = cache or ExtractionCache(self.settings.cache_capacity)
        self.clock = clock or _utc_now

        self.cleaner = HTMLCleaner()
        self.scorer = ReadabilityScorer()
        self.noise_filter = NoiseFilter()
        self.title_cleaner = TitleCleaner()
        self.date_extractor = DateExtractor()

    def extract(self, source: ArticleSource) -> ExtractedArticle:
        rss_title = source.title.strip() if source.title is not None else None
        signature = content_signature(rss_title, source.description_html, source.content_html)
        key = make_cache_key(source.link, signature)

        with self.cache.key_lock(key):
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug(f"Cache hit for {source.link}")
                return cached

            result = self._extract_source(source, rss_title)
            self.cache.put(key, result)
            return result

    def extract_from_html(
        self, html: str, url: str, rss_title: str | None = None
    ) -> ExtractedArticle:
        """Extract from already-downloaded page HTML."""
        key = make_cache_key(url, content_signature(rss_title, html))

        with self.cache.key_lock(key):
            cached = self.cache.get(key)
            if cached is not None:
                return cached

            result = self._run_pipeline(html, url, rss_title, forced_method=None)
            self.cache.put(key, result)
            return result

    def clear_cache(self) -> None:
        self.cache.clear()

    def _extract_source(self, source: ArticleSource, rss_title: str | None) -> ExtractedArticle:
        content_html = source.content_html
        description_html = source.description_html

        if (
            content_html
            and is_substantial_html(content_html, self.settings.min_content_length)
            and not looks_truncated(content_html)
        ):
            logger.debug(f"Using inline feed content for {source.link}")
            return self._run_pipeline(
                content_html, source.link, rss_title, ExtractionMethod.RSS_CONTENT
            )

        if (
            description_html
            and is_substantial_html(description_html, self.settings.min_description_length)
            and not looks_truncated(description_html)
        ):
            logger.debug(f"Using inline feed description for {source.link}")
            return self._run_pipeline(
                description_html, source.link, rss_title, ExtractionMethod.RSS_DESCRIPTION
            )

        try:
            html = self.fetcher.fetch(source.link)
        except Exception as e:
            # Any fetch failure degrades to the feed's own text
            logger.warning(f"Falling back to feed text for {source.link}: {e}")
            return self._fetch_failure_result(source, rss_title)

        return self._run_pipeline(html, source.link, rss_title, forced_method=None)

    def _run_pipeline(
        self,
        html: str,
        url: str,
        rss_title: str | None,
        forced_method: ExtractionMethod | None,
    ) -> ExtractedArticle:
        cleaned = self.cleaner.clean(html)
        resolved_title = self.title_cleaner.resolve_title(
            rss_title, extract_html_title(html), extract_first_heading(html), url
        )

        removed: set[SectionLabel] = set(cleaned.removed_sections)
        candidate = self.scorer.best_candidate(cleaned.html, rss_title or resolved_title)
        chosen_html = candidate.html if candidate is not None else cleaned.html

        if forced_method is not None:
            method = forced_method
        elif candidate is None:
            method = ExtractionMethod.FETCHED_HTML_FALLBACK
        else:
            method = ExtractionMethod.FETCHED_HTML_READABILITY

        filtered = self.noise_filter.filter(normalize_paragraphs(extract_paragraphs(chosen_html)))
        removed.update(filtered.removed_sections)

        paragraphs = list(filtered.paragraphs)
        if not paragraphs:
            logger.debug(f"Noise filter left nothing for {url}; using raw lines")
            paragraphs = normalize_paragraphs(split_lines(chosen_html))
        paragraphs = remove_duplicate_title_paragraphs(paragraphs, resolved_title)

        body = "\n\n".join(paragraphs)
        paywall_hint = has_paywall_hint(html, len(body))

        return ExtractedArticle(
            title=resolved_title,
            body=body,
            paragraphs=tuple(paragraphs),
            source_url=url,
            extraction_method=method,
            removed_sections=tuple(sorted(label.value for label in removed)),
            confidence=compute_confidence(method, len(body), len(paragraphs), paywall_hint),
            detected_language=detect_language(body),
            word_count=count_words(body),
            has_paywall_hint=paywall_hint,
            extracted_pub_date=(
                extract_publish_date_from_html(html)
                or self.date_extractor.extract_date(body, now=self.clock())
            ),
        )

    def _fetch_failure_result(
        self, source: ArticleSource, rss_title: str | None
    ) -> ExtractedArticle:
        title = self.title_cleaner.resolve_title(rss_title, None, None, source.link)
        inline = [
            part.strip()
            for part in (source.content_html, source.description_html)
            if part is not None
        ]
        fallback_html = max(inline, key=len, default="")
        paragraphs = normalize_paragraphs([fallback_html])
        body = "\n\n".join(paragraphs)

        return ExtractedArticle(
            title=title,
            body=body,
            paragraphs=tuple(paragraphs),
            source_url=source.link,
            extraction_method=ExtractionMethod.RSS_DESCRIPTION,
            removed_sections=(),
            confidence=FETCH_FAILURE_CONFIDENCE,
            detected_language=detect_language(body),
            word_count=count_words(body),
            has_paywall_hint=False,
            extracted_pub_date=self.date_extractor.extract_date(body, now=self.clock()),
        )
