"""Paragraph-level boilerplate filtering.

Works on normalized text (see ``normalized_for_comparison``), so every phrase
below is written lower-case and without accents.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from ..models import NoiseFilterResult, SectionLabel
from .text_cleaner import normalized_for_comparison

logger = logging.getLogger(__name__)

NOISE_PHRASES: tuple[str, ...] = (
    # Spanish
    "leer mas",
    "seguir leyendo",
    "leer tambien",
    "ver mas",
    "descubre mas",
    "suscribete",
    "suscripcion",
    "newsletter",
    "inicia sesion",
    "registrate",
    "acepta cookies",
    "aceptar cookies",
    "politica de cookies",
    "politica de privacidad",
    "compartir en",
    "compartelo en",
    "te puede interesar",
    "relacionado",
    "relacionados",
    "publicidad",
    "anuncio",
    "contenido patrocinado",
    "enviar por correo",
    "enviar por email",
    "copiar enlace",
    "imprimir",
    "mas noticias",
    "noticias relacionadas",
    "tambien te puede interesar",
    "articulos relacionados",
    "lee tambien",
    "quiza te interese",
    # English
    "read more",
    "continue reading",
    "subscribe",
    "sign in",
    "log in",
    "cookie policy",
    "privacy policy",
    "related",
    "recommended",
    "advertisement",
    "sponsored",
    "comments",
    "leave a comment",
    "share this",
    "share on",
    "email this",
    "print this",
    "copy link",
    "more stories",
    "you may also like",
    "recommended for you",
    "trending now",
    "most popular",
    "most read",
    "editor picks",
    "follow us on",
    "join our newsletter",
    "get updates",
    "click here to",
    "tap here to",
    "download our app",
    # Share actions
    "share on facebook",
    "share on twitter",
    "share on linkedin",
    "share on whatsapp",
    "share on telegram",
    "share on pinterest",
    "post to facebook",
    "tweet this",
    "pin it",
    "share via email",
    "compartir en facebook",
    "compartir en twitter",
    "compartir en whatsapp",
    "compartir en linkedin",
    "compartir en telegram",
)

SOCIAL_NETWORKS: frozenset[str] = frozenset(
    {
        "facebook",
        "twitter",
        "x",
        "linkedin",
        "whatsapp",
        "telegram",
        "pinterest",
        "reddit",
        "email",
        "mail",
        "imprimir",
        "print",
        "copiar",
        "copy",
        "compartir",
        "share",
        "instagram",
        "tiktok",
        "youtube",
        "flipboard",
        "pocket",
        "tumblr",
        "vk",
        "line",
    }
)

# Checked in order; the first group that matches names the removed section
LABEL_KEYWORDS: tuple[tuple[SectionLabel, tuple[str, ...]], ...] = (
    (SectionLabel.SUBSCRIBE, ("suscrib", "subscribe", "newsletter", "suscripcion")),
    (
        SectionLabel.RELATED,
        ("relacionado", "relacionados", "te puede interesar", "recommended", "related"),
    ),
    (SectionLabel.COOKIE_BANNER, ("cookie", "cookies", "consent", "gdpr")),
    (SectionLabel.SHARE, ("compart", "share", "social")),
    (SectionLabel.LOGIN, ("inicia sesion", "login", "log in", "sign in", "registrate")),
)

MIN_UNPUNCTUATED_LENGTH = 30

_SHARE_COUNTER_RE = re.compile(
    r"^[0-9\s]*(facebook|twitter|linkedin|whatsapp|email|compartir|share)[0-9\s]*",
    re.IGNORECASE,
)


def is_social_share_line(normalized: str) -> bool:
    """Return True for short lines made of share-button labels.

    Examples: ``"facebook"``, ``"share facebook twitter linkedin"`` or
    ``"0 facebook twitter 0 linkedin"``.
    """
    words = normalized.split()
    if len(words) <= 4:
        network_count = sum(1 for word in words if word in SOCIAL_NETWORKS)
        if network_count >= 1 and len(words) <= 2:
            return True
        if network_count >= 2:
            return True

    return _SHARE_COUNTER_RE.match(normalized) is not None


def _contains_sentence_punctuation(text: str) -> bool:
    return any(mark in text for mark in (".", "?", "!"))


class NoiseFilter:
    """Drop boilerplate paragraphs and report what kind was dropped."""

    def filter(self, paragraphs: Iterable[str]) -> NoiseFilterResult:
        removed: set[SectionLabel] = set()
        kept: list[str] = []

        for paragraph in paragraphs:
            trimmed = paragraph.strip()
            if not trimmed:
                continue

            normalized = normalized_for_comparison(trimmed)

            if self.is_noise(normalized):
                label = self.classify(normalized)
                logger.debug("Dropping %s paragraph: %.60s", label.value, trimmed)
                removed.add(label)
                continue

            if (
                len(trimmed) < MIN_UNPUNCTUATED_LENGTH
                and not _contains_sentence_punctuation(trimmed)
            ):
                continue

            kept.append(trimmed)

        return NoiseFilterResult(paragraphs=tuple(kept), removed_sections=frozenset(removed))

    @staticmethod
    def is_noise(normalized: str) -> bool:
        if not normalized:
            return True
        if is_social_share_line(normalized):
            return True
        return any(phrase in normalized for phrase in NOISE_PHRASES)

    @staticmethod
    def classify(normalized: str) -> SectionLabel:
        """Pick the single label for a noise paragraph."""
        for label, keywords in LABEL_KEYWORDS:
            if any(keyword in normalized for keyword in keywords):
                return label
            # Counter rows such as "0 facebook twitter 0 linkedin" carry no
            # share keyword but are still share widgets
            if label is SectionLabel.SHARE and is_social_share_line(normalized):
                return label
        return SectionLabel.BOILERPLATE
