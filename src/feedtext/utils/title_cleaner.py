"""Headline resolution from feed, ``<title>`` and ``<h1>`` candidates."""

from __future__ import annotations

import re
from urllib.parse import urlparse

from .html_cleaner import html_to_text
from .text_cleaner import normalized_for_comparison

TITLE_SEPARATORS: tuple[str, ...] = (" | ", " - ", " — ", " • ", " :: ")
DEFAULT_TITLE = "Articulo"
SIMILARITY_THRESHOLD = 0.6

_HTML_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)
_FIRST_H1_RE = re.compile(r"<h1[^>]*>(.*?)</h1>", re.IGNORECASE | re.DOTALL)


def _first_inner_text(pattern: re.Pattern[str], html: str) -> str | None:
    match = pattern.search(html)
    if not match:
        return None
    text = html_to_text(match.group(1))
    return text or None


def extract_html_title(html: str) -> str | None:
    """Return the text of the first ``<title>`` element, if any."""
    return _first_inner_text(_HTML_TITLE_RE, html)


def extract_first_heading(html: str) -> str | None:
    """Return the text of the first ``<h1>`` element, if any."""
    return _first_inner_text(_FIRST_H1_RE, html)


class TitleCleaner:
    """Pick the best headline and strip trailing site names from it."""

    def resolve_title(
        self,
        rss_title: str | None,
        html_title: str | None,
        h1_title: str | None,
        url: str,
    ) -> str:
        host = self._host_token(url)
        cleaned_rss = self.clean_title(rss_title, host)
        cleaned_html = self.clean_title(html_title, host)
        cleaned_h1 = self.clean_title(h1_title, host)

        if cleaned_rss:
            if cleaned_h1 and self.is_similar(cleaned_rss, cleaned_h1):
                return cleaned_h1
            return cleaned_rss

        return cleaned_h1 or cleaned_html or DEFAULT_TITLE

    @staticmethod
    def _host_token(url: str) -> str | None:
        try:
            host = urlparse(url).hostname
        except ValueError:
            return None
        if not host:
            return None
        return host.lower().replace("www.", "")

    def clean_title(self, title: str | None, host: str | None) -> str | None:
        if title is None:
            return None
        title = title.strip()
        if not title:
            return None
        return self.strip_site_suffix(title, host).strip()

    @staticmethod
    def strip_site_suffix(title: str, host: str | None) -> str:
        """Drop a trailing ``| Site Name`` style segment.

        Separators are tried in order. A tail is dropped when it names the
        host, looks like a domain, or is at most three words long. Without a
        host nothing is stripped.
        """
        if host is None:
            return title

        normalized_host = normalized_for_comparison(host)

        for separator in TITLE_SEPARATORS:
            parts = title.split(separator)
            if len(parts) < 2:
                continue

            suffix = normalized_for_comparison(parts[-1].strip())
            head = separator.join(parts[:-1])

            if normalized_host in suffix or "com" in suffix or "net" in suffix:
                return head
            if len(suffix.split()) <= 3:
                return head

        return title

    @staticmethod
    def is_similar(left: str, right: str) -> bool:
        left_norm = normalized_for_comparison(left)
        right_norm = normalized_for_comparison(right)
        if not left_norm or not right_norm:
            return False
        if left_norm in right_norm or right_norm in left_norm:
            return True

        left_tokens = set(left_norm.split())
        right_tokens = set(right_norm.split())
        overlap = left_tokens & right_tokens
        return len(overlap) / max(len(left_tokens), 1) >= SIMILARITY_THRESHOLD
