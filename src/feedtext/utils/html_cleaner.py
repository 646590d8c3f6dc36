"""Structural HTML cleaning on raw markup.

Whole elements are removed by tag name and by ``id``/``class`` tokens using
regular expressions. There is no DOM: paired-tag matching is non-greedy, so
an element that nests another element of the same name is cut at the first
closing tag. Tags that never close in the page only get their opening tag
removed.
"""

from __future__ import annotations

import logging
import re
from html import unescape

from ..models import CleanedHTML, SectionLabel

logger = logging.getLogger(__name__)

REMOVE_TAGS_WITH_CONTENT: tuple[str, ...] = (
    "script",
    "style",
    "noscript",
    "svg",
    "canvas",
    "iframe",
    "form",
    "button",
    "input",
    "aside",
    "nav",
)

SELECTOR_TOKENS: dict[str, SectionLabel] = {
    # Cookie/consent
    "cookie": SectionLabel.COOKIE_BANNER,
    "consent": SectionLabel.COOKIE_BANNER,
    "gdpr": SectionLabel.COOKIE_BANNER,
    "privacy-banner": SectionLabel.COOKIE_BANNER,
    # Banners and overlays
    "banner": SectionLabel.BANNER,
    "modal": SectionLabel.OVERLAY,
    "overlay": SectionLabel.OVERLAY,
    "popup": SectionLabel.OVERLAY,
    "lightbox": SectionLabel.OVERLAY,
    # Subscribe/newsletter
    "subscribe": SectionLabel.SUBSCRIBE,
    "newsletter": SectionLabel.SUBSCRIBE,
    "signup": SectionLabel.SUBSCRIBE,
    "sign-up": SectionLabel.SUBSCRIBE,
    "mailchimp": SectionLabel.SUBSCRIBE,
    "email-capture": SectionLabel.SUBSCRIBE,
    # Paywall
    "paywall": SectionLabel.PAYWALL,
    "premium-content": SectionLabel.PAYWALL,
    "subscriber-only": SectionLabel.PAYWALL,
    # Social sharing
    "share": SectionLabel.SHARE,
    "sharing": SectionLabel.SHARE,
    "social": SectionLabel.SOCIAL,
    "social-share": SectionLabel.SHARE,
    "social-buttons": SectionLabel.SHARE,
    "share-buttons": SectionLabel.SHARE,
    "share-bar": SectionLabel.SHARE,
    "sharebar": SectionLabel.SHARE,
    "sharetools": SectionLabel.SHARE,
    "share-tools": SectionLabel.SHARE,
    "addthis": SectionLabel.SHARE,
    "sharethis": SectionLabel.SHARE,
    "sharedaddy": SectionLabel.SHARE,
    "post-share": SectionLabel.SHARE,
    "article-share": SectionLabel.SHARE,
    "sharing-icons": SectionLabel.SHARE,
    "facebook-share": SectionLabel.SHARE,
    "twitter-share": SectionLabel.SHARE,
    "linkedin-share": SectionLabel.SHARE,
    "whatsapp-share": SectionLabel.SHARE,
    "email-share": SectionLabel.SHARE,
    "print-share": SectionLabel.SHARE,
    "copy-link": SectionLabel.SHARE,
    # Related content
    "related": SectionLabel.RELATED,
    "recommended": SectionLabel.RELATED,
    "more-stories": SectionLabel.RELATED,
    "also-read": SectionLabel.RELATED,
    "read-next": SectionLabel.RELATED,
    "you-may-like": SectionLabel.RELATED,
    "outbrain": SectionLabel.RELATED,
    "taboola": SectionLabel.RELATED,
    "mgid": SectionLabel.RELATED,
    "revcontent": SectionLabel.RELATED,
    "zergnet": SectionLabel.RELATED,
    # Comments
    "comments": SectionLabel.COMMENTS,
    "disqus": SectionLabel.COMMENTS,
    "comment-section": SectionLabel.COMMENTS,
    # Navigation/structure
    "footer": SectionLabel.FOOTER,
    "header": SectionLabel.HEADER,
    "nav": SectionLabel.NAV,
    "sidebar": SectionLabel.SIDEBAR,
    "widget": SectionLabel.WIDGET,
    "breadcrumb": SectionLabel.NAV,
    # Ads
    "advert": SectionLabel.AD,
    "ad-": SectionLabel.AD,
    "ads-": SectionLabel.AD,
    "advertisement": SectionLabel.AD,
    "sponsored": SectionLabel.AD,
    "promo": SectionLabel.PROMO,
    "dfp": SectionLabel.AD,
    "googletag": SectionLabel.AD,
    "adsense": SectionLabel.AD,
    # Author bio
    "author-bio": SectionLabel.AUTHOR_BOX,
    "about-author": SectionLabel.AUTHOR_BOX,
    "byline-block": SectionLabel.AUTHOR_BOX,
}

# Byte decodings tried when the response does not declare a usable charset
FALLBACK_ENCODINGS: tuple[str, ...] = ("utf-8", "iso-8859-1", "windows-1252")

_COMMENT_RE = re.compile(r"<!--.*?-->", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")
_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)

# Longest tokens first so the alternation prefers the most specific token
_TOKEN_ALTERNATION = "|".join(
    re.escape(token) for token in sorted(SELECTOR_TOKENS, key=len, reverse=True)
)
_SELECTOR_ATTRS = (
    r"[^>]*(?:id|class)\s*=\s*['\"][^'\"]*(?:" + _TOKEN_ALTERNATION + r")[^'\"]*['\"][^>]*"
)
_CLOSING_TAG_RE = re.compile(r"</([a-z0-9]+)\s*>", re.IGNORECASE)


def _closed_tag_names(html: str) -> set[str]:
    return {name.lower() for name in _CLOSING_TAG_RE.findall(html)}


def _paired_selector_re(tag_names: list[str]) -> re.Pattern[str]:
    """Paired-element pattern limited to tags that are closed somewhere.

    An opener whose tag never closes (``<img>``, ``<meta>``) would otherwise
    make the non-greedy body scan to the end of the document.
    """
    names = "|".join(re.escape(name) for name in tag_names)
    return re.compile(
        r"<(" + names + r")\b(" + _SELECTOR_ATTRS + r")>.*?</\1>",
        re.IGNORECASE | re.DOTALL,
    )


_SELECTOR_SELF_CLOSING_RE = re.compile(
    r"<([a-z0-9]+)(" + _SELECTOR_ATTRS + r")/?>",
    re.IGNORECASE | re.DOTALL,
)
_TAG_WITH_CONTENT_RES: dict[str, re.Pattern[str]] = {
    tag: re.compile(rf"<{tag}[^>]*>.*?</{tag}>", re.IGNORECASE | re.DOTALL)
    for tag in REMOVE_TAGS_WITH_CONTENT
}


def strip_tags(html: str) -> str:
    """Remove every ``<...>`` tag, keeping the text between them."""
    return _TAG_RE.sub("", html)


def decode_html_entities(text: str) -> str:
    return unescape(text)


def html_to_text(html: str) -> str:
    """Strip tags, decode entities and trim."""
    return decode_html_entities(strip_tags(html)).strip()


def decode_html_bytes(data: bytes, charset: str | None = None) -> str:
    """Decode a fetched page body.

    The declared charset wins when Python knows it and the bytes decode
    cleanly. Otherwise UTF-8, ISO-8859-1 and Windows-1252 are tried in turn.
    """
    encodings: list[str] = []
    if charset:
        encodings.append(charset.strip().strip("\"'"))
    encodings.extend(FALLBACK_ENCODINGS)

    for encoding in encodings:
        try:
            return data.decode(encoding)
        except (LookupError, UnicodeDecodeError):
            continue

    return data.decode("utf-8", errors="replace")


class HTMLCleaner:
    """Remove template chrome from raw HTML before scoring."""

    def clean(self, html: str) -> CleanedHTML:
        removed: set[SectionLabel] = set()

        result = _COMMENT_RE.sub("", html)
        closed_tags = _closed_tag_names(result)

        for tag in REMOVE_TAGS_WITH_CONTENT:
            if tag not in closed_tags:
                continue
            result, count = _TAG_WITH_CONTENT_RES[tag].subn("", result)
            if count:
                removed.add(SectionLabel(tag))

        result = self._remove_by_selector_tokens(result, removed)
        result = _BR_RE.sub("\n", result)

        if removed:
            logger.debug(
                "Structural clean removed: %s",
                ", ".join(sorted(label.value for label in removed)),
            )

        return CleanedHTML(html=result, removed_sections=frozenset(removed))

    def _remove_by_selector_tokens(self, html: str, removed: set[SectionLabel]) -> str:
        def _drop(match: re.Match[str]) -> str:
            attributes = match.group(2).lower()
            for token, label in SELECTOR_TOKENS.items():
                if token in attributes:
                    removed.add(label)
            return ""

        closed_tags = sorted(_closed_tag_names(html))
        result = _paired_selector_re(closed_tags).sub(_drop, html) if closed_tags else html
        return _SELECTOR_SELF_CLOSING_RE.sub(_drop, result)
