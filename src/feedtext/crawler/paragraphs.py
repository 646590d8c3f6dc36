"""Split a content block into raw paragraph strings."""

from __future__ import annotations

import re

from ..utils.html_cleaner import decode_html_entities, strip_tags

_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_BLOCK_RE = re.compile(
    r"<(p|li|blockquote|h1|h2|h3)[^>]*>(.*?)</\1>", re.IGNORECASE | re.DOTALL
)


def extract_paragraphs(html: str) -> list[str]:
    """Return the text of each ``p``/``li``/``blockquote``/``h1``-``h3`` block.

    Blocks keep their entities; they are decoded later during normalization.
    When the markup has no such blocks the text is split into lines instead.
    """
    working = _BR_RE.sub("\n", html)

    paragraphs = []
    for match in _BLOCK_RE.finditer(working):
        text = strip_tags(match.group(2)).strip()
        if text:
            paragraphs.append(text)

    return paragraphs or split_lines(working)


def split_lines(html: str) -> list[str]:
    """Strip tags, decode entities and return the non-blank lines."""
    text = decode_html_entities(strip_tags(html)).replace("\r", "\n")
    return [line.strip() for line in text.split("\n") if line.strip()]
