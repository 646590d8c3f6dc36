"""Readability-style scoring of candidate content blocks."""

from __future__ import annotations

import logging
import re

from ..models import Candidate
from ..utils.html_cleaner import html_to_text
from ..utils.text_cleaner import normalized_for_comparison

logger = logging.getLogger(__name__)

# Minimum winning score per search stage
SEMANTIC_TAG_THRESHOLD = 180.0
GENERIC_BLOCK_THRESHOLD = 220.0

MIN_SCORED_TEXT_LENGTH = 120
SHORT_LINE_LENGTH = 40
MIN_TITLE_TOKEN_LENGTH = 4

PARAGRAPH_WEIGHT = 50.0
COMMA_WEIGHT = 20.0
FORM_PENALTY = 200.0
BUTTON_PENALTY = 50.0
SHORT_LINE_PENALTY = 15.0

_ANCHOR_RE = re.compile(r"<a[^>]*>(.*?)</a>", re.IGNORECASE | re.DOTALL)
_HEADING_RE = re.compile(r"<h[1-3][^>]*>(.*?)</h[1-3]>", re.IGNORECASE | re.DOTALL)
_PARAGRAPH_OPEN_RE = re.compile(r"<p\b", re.IGNORECASE)
_FORM_OPEN_RE = re.compile(r"<form\b", re.IGNORECASE)
_BUTTON_OPEN_RE = re.compile(r"<button\b", re.IGNORECASE)

_BLOCK_RES: dict[str, re.Pattern[str]] = {
    tag: re.compile(rf"<{tag}[^>]*>(.*?)</{tag}>", re.IGNORECASE | re.DOTALL)
    for tag in ("article", "main", "div", "section")
}


def extract_candidates(html: str, tags: tuple[str, ...]) -> list[str]:
    """Return the non-empty inner HTML of every ``<tag>`` block, tag by tag."""
    results: list[str] = []
    for tag in tags:
        for match in _BLOCK_RES[tag].finditer(html):
            inner = match.group(1)
            if inner:
                results.append(inner)
    return results


def link_text_length(html: str) -> int:
    return sum(len(html_to_text(inner)) for inner in _ANCHOR_RE.findall(html))


def extract_headings(html: str) -> list[str]:
    headings = []
    for inner in _HEADING_RE.findall(html):
        text = html_to_text(inner)
        if text:
            headings.append(text)
    return headings


def token_overlap(title: str, content: str) -> float:
    """Share of the title's longer words that appear in ``content``."""
    title_tokens = {token for token in title.split() if len(token) >= MIN_TITLE_TOKEN_LENGTH}
    if not title_tokens:
        return 0.0
    content_tokens = set(content.split())
    return len(title_tokens & content_tokens) / len(title_tokens)


class ReadabilityScorer:
    """Pick the block of a page most likely to hold the article body.

    ``<article>`` blocks are preferred, then ``<main>``, then any ``<div>`` or
    ``<section>``. Each stage has its own minimum score; when no stage clears
    it, ``best_candidate`` returns None and the caller falls back to the
    whole document.
    """

    def best_candidate(self, html: str, rss_title: str | None = None) -> Candidate | None:
        for tags, threshold in (
            (("article",), SEMANTIC_TAG_THRESHOLD),
            (("main",), SEMANTIC_TAG_THRESHOLD),
            (("div", "section"), GENERIC_BLOCK_THRESHOLD),
        ):
            best = self._best_of(extract_candidates(html, tags), rss_title)
            if best is not None and best.score >= threshold:
                logger.debug(
                    "Selected <%s> candidate with score %.1f", "/".join(tags), best.score
                )
                return best

        return None

    def _best_of(self, candidates: list[str], rss_title: str | None) -> Candidate | None:
        scored = [
            Candidate(html=candidate, score=self.score(candidate, rss_title))
            for candidate in candidates
        ]
        if not scored:
            return None
        # max() keeps the first of equal scores
        return max(scored, key=lambda candidate: candidate.score)

    def score(self, html: str, rss_title: str | None = None) -> float:
        text = html_to_text(html)
        text_length = len(text)
        if text_length < MIN_SCORED_TEXT_LENGTH:
            return float(text_length)

        anchor_length = link_text_length(html)
        short_lines = sum(
            1
            for line in text.split("\n")
            if line.strip() and len(line.strip()) < SHORT_LINE_LENGTH
        )

        score = float(max(0, text_length - anchor_length))
        score += len(_PARAGRAPH_OPEN_RE.findall(html)) * PARAGRAPH_WEIGHT
        score += text.count(",") * COMMA_WEIGHT
        score -= len(_FORM_OPEN_RE.findall(html)) * FORM_PENALTY
        score -= len(_BUTTON_OPEN_RE.findall(html)) * BUTTON_PENALTY
        score -= short_lines * SHORT_LINE_PENALTY

        link_density = anchor_length / text_length
        if link_density > 0.35:
            score -= 120
        elif link_density > 0.2:
            score -= 60

        if rss_title and rss_title.strip():
            score += self.title_match_boost(rss_title, html, text)

        return score

    @staticmethod
    def title_match_boost(title: str, html: str, text: str) -> float:
        normalized_title = normalized_for_comparison(title)
        if not normalized_title:
            return 0.0

        normalized_text = normalized_for_comparison(text)
        if normalized_title in normalized_text:
            return 200.0

        for heading in extract_headings(html):
            normalized_heading = normalized_for_comparison(heading)
            if normalized_heading and (
                normalized_title in normalized_heading
                or normalized_heading in normalized_title
            ):
                return 120.0

        overlap = token_overlap(normalized_title, normalized_text)
        if overlap >= 0.6:
            return 120.0
        if overlap >= 0.4:
            return 60.0
        return 0.0
