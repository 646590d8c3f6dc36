"""Plain-text normalization for extracted paragraphs."""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable

from .html_cleaner import decode_html_entities, strip_tags

_URL_RE = re.compile(r"\b(https?://\S+|www\.\S+)\b", re.IGNORECASE)
_UTM_RE = re.compile(r"utm_[a-z0-9_]+=\S+", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")

SHARE_COUNT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"\d+\s*(shares?|compartir|compartido|compartidos|likes?|comments?|comentarios?)",
        re.IGNORECASE,
    ),
    re.compile(r"(shares?|compartir)\s*\d+", re.IGNORECASE),
    re.compile(r"\d+\s*(facebook|twitter|linkedin|whatsapp|email)\s*\d*", re.IGNORECASE),
)

SHARE_BUTTON_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"\b(share|compartir)\s+(on|en|via|por)?\s*"
        r"(facebook|twitter|x|linkedin|whatsapp|telegram|pinterest|reddit|email|correo)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(tweet|pin it|me gusta|like)\b", re.IGNORECASE),
    # A network name standing alone on its line is a button label
    re.compile(
        r"^\s*(facebook|twitter|x|linkedin|whatsapp|telegram|pinterest|reddit"
        r"|email|print|imprimir|copiar|copy)\s*$",
        re.IGNORECASE,
    ),
)

SHARE_EMOJI: tuple[str, ...] = ("📧", "📱", "🔗", "📤", "💬", "🐦", "📘", "🔵")

SUMMARY_BOILERPLATE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE | re.MULTILINE)
    for pattern in (
        r"read more\.{0,3}$",
        r"continue reading\.{0,3}$",
        r"leer m[aá]s\.{0,3}$",
        r"seguir leyendo\.{0,3}$",
        r"click here to .*$",
        r"tap here to .*$",
        r"subscribe to .*$",
        r"suscr[ií]bete a .*$",
        r"follow us on .*$",
        r"s[ií]guenos en .*$",
        r"^\s*advertisement\s*$",
        r"^\s*publicidad\s*$",
        r"^\s*sponsored\s*$",
        r"^\s*patrocinado\s*$",
        r"^\s*related:?\s*$",
        r"^\s*relacionado:?\s*$",
        r"^\s*tags?:.*$",
        r"^\s*etiquetas?:.*$",
        r"^\s*categor[ií]as?:.*$",
        r"^\s*share this (article|story|post).*$",
        r"^\s*comparte este (art[ií]culo|post).*$",
    )
)


def strip_urls(text: str) -> str:
    return _URL_RE.sub("", text)


def remove_utm_parameters(text: str) -> str:
    return _UTM_RE.sub("", text)


def strip_social_share_patterns(text: str) -> str:
    """Remove share counters, share-button labels and share emoji."""
    result = text
    for pattern in SHARE_COUNT_PATTERNS:
        result = pattern.sub("", result)
    for pattern in SHARE_BUTTON_PATTERNS:
        result = pattern.sub("", result)
    for emoji in SHARE_EMOJI:
        result = result.replace(emoji, "")
    return result


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_paragraphs(paragraphs: Iterable[str]) -> list[str]:
    """Turn raw paragraph HTML into clean text, dropping empty results."""
    normalized: list[str] = []
    for paragraph in paragraphs:
        text = decode_html_entities(strip_tags(paragraph))
        text = strip_urls(text)
        text = remove_utm_parameters(text)
        text = strip_social_share_patterns(text)
        text = collapse_whitespace(text)
        if text:
            normalized.append(text)
    return normalized


def clean_for_summarization(text: str) -> str:
    """Clean text before handing it to a summarizer.

    Beyond the paragraph normalization this also drops trailing "read more"
    style calls to action and whole boilerplate lines such as ``Tags: ...``
    or ``Publicidad``.
    """
    cleaned = decode_html_entities(strip_tags(text))
    cleaned = strip_urls(cleaned)
    cleaned = remove_utm_parameters(cleaned)
    cleaned = strip_social_share_patterns(cleaned)

    for pattern in SUMMARY_BOILERPLATE_PATTERNS:
        cleaned = pattern.sub("", cleaned)

    return collapse_whitespace(cleaned)


def normalized_for_comparison(text: str) -> str:
    """Fold case and accents and keep only ``[a-z0-9]`` words."""
    decomposed = unicodedata.normalize("NFKD", text)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).lower()
    stripped = _NON_ALNUM_RE.sub(" ", folded)
    return collapse_whitespace(stripped)


def remove_duplicate_title_paragraphs(paragraphs: list[str], title: str) -> list[str]:
    """Drop the first paragraph when it repeats the title."""
    if not paragraphs:
        return paragraphs

    normalized_title = normalized_for_comparison(title)
    normalized_first = normalized_for_comparison(paragraphs[0])

    if normalized_title and (
        normalized_first == normalized_title
        or normalized_first.startswith(normalized_title)
    ):
        return paragraphs[1:]

    return paragraphs


def count_words(text: str) -> int:
    return len(text.split())
