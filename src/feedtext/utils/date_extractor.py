"""Publication-date extraction from free article text.

Strategies run from most to least reliable: ISO-8601 timestamps, written
month-name dates (English and Spanish), relative expressions ("3 hours ago",
"hace 2 dias") and finally bare numeric dates. Every returned value is a
timezone-aware UTC datetime.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone

from dateutil import parser as dateparser
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

MAX_NUMERIC_YEAR_DIFFERENCE = 10

_MONTHS = (
    "January|February|March|April|May|June|July|August|September|October|November|December"
)
_MONTH_ABBREVIATIONS = "Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec"
_SPANISH_MONTHS = (
    "enero|febrero|marzo|abril|mayo|junio|julio|agosto|septiembre|octubre|noviembre|diciembre"
)

_ISO_TIMESTAMP_RE = re.compile(
    r"\b(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:?\d{2})?)\b"
)

ENGLISH_DATE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        rf"\b({_MONTHS})\s+(\d{{1,2}}),?\s+(\d{{4}})\b",
        rf"\b(\d{{1,2}})\s+({_MONTHS})\s+(\d{{4}})\b",
        rf"\b({_MONTH_ABBREVIATIONS})\.?\s+(\d{{1,2}}),?\s+(\d{{4}})\b",
        rf"\b(\d{{1,2}})\s+({_MONTH_ABBREVIATIONS})\.?\s+(\d{{4}})\b",
    )
)

SPANISH_DATE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        rf"\b(\d{{1,2}})\s+de\s+({_SPANISH_MONTHS})\s+de\s+(\d{{4}})\b",
        rf"\b({_SPANISH_MONTHS})\s+(\d{{1,2}}),?\s+(\d{{4}})\b",
    )
)

_TODAY_RE = re.compile(r"\b(today|hoy)\b", re.IGNORECASE)
_YESTERDAY_RE = re.compile(r"\b(yesterday|ayer)\b", re.IGNORECASE)

# (pattern, timedelta keyword) in the order they are tried
RELATIVE_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(\d+)\s*hours?\s*ago", re.IGNORECASE), "hours"),
    (re.compile(r"hace\s*(\d+)\s*horas?", re.IGNORECASE), "hours"),
    (re.compile(r"(\d+)\s*days?\s*ago", re.IGNORECASE), "days"),
    (re.compile(r"hace\s*(\d+)\s*dias?", re.IGNORECASE), "days"),
    (re.compile(r"(\d+)\s*minutes?\s*ago", re.IGNORECASE), "minutes"),
    (re.compile(r"hace\s*(\d+)\s*minutos?", re.IGNORECASE), "minutes"),
)

NUMERIC_DATE_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b"), "%Y-%m-%d"),
    (re.compile(r"\b(\d{2})/(\d{2})/(\d{4})\b"), "%d/%m/%Y"),
    (re.compile(r"\b(\d{2})-(\d{2})-(\d{4})\b"), "%d-%m-%Y"),
)


class SpanishParserInfo(dateparser.parserinfo):
    """dateutil vocabulary for dates like ``15 de enero de 2024``."""

    JUMP = dateparser.parserinfo.JUMP + ["de", "del"]
    MONTHS = [
        ("ene", "enero"),
        ("feb", "febrero"),
        ("mar", "marzo"),
        ("abr", "abril"),
        ("may", "mayo"),
        ("jun", "junio"),
        ("jul", "julio"),
        ("ago", "agosto"),
        ("sep", "sept", "septiembre"),
        ("oct", "octubre"),
        ("nov", "noviembre"),
        ("dic", "diciembre"),
    ]


_SPANISH_INFO = SpanishParserInfo()


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class DateExtractor:
    """Find a publication date in article text."""

    def extract_date(self, text: str, now: datetime | None = None) -> datetime | None:
        cleaned = text.strip() if text else ""
        if not cleaned:
            return None

        now = _as_utc(now) if now is not None else datetime.now(timezone.utc)

        return (
            self._extract_iso_timestamp(cleaned)
            or self._extract_written_date(cleaned)
            or self._extract_relative_date(cleaned, now)
            or self._extract_numeric_date(cleaned, now)
        )

    @staticmethod
    def _extract_iso_timestamp(text: str) -> datetime | None:
        match = _ISO_TIMESTAMP_RE.search(text)
        if not match:
            return None
        try:
            parsed = dateparser.isoparse(match.group(1))
        except (ValueError, OverflowError):
            return None
        # Only zoned timestamps are trusted
        if parsed.tzinfo is None:
            return None
        return parsed.astimezone(timezone.utc)

    @staticmethod
    def _extract_written_date(text: str) -> datetime | None:
        for pattern in ENGLISH_DATE_PATTERNS:
            match = pattern.search(text)
            if not match:
                continue
            try:
                parsed = dateparser.parse(match.group(0).replace(".", ""))
            except (ValueError, OverflowError):
                continue
            return _as_utc(parsed)

        for pattern in SPANISH_DATE_PATTERNS:
            match = pattern.search(text)
            if not match:
                continue
            try:
                parsed = dateparser.parse(match.group(0).lower(), parserinfo=_SPANISH_INFO)
            except (ValueError, OverflowError):
                continue
            return _as_utc(parsed)

        return None

    @staticmethod
    def _extract_relative_date(text: str, now: datetime) -> datetime | None:
        start_of_today = now.replace(hour=0, minute=0, second=0, microsecond=0)

        if _TODAY_RE.search(text):
            return start_of_today
        if _YESTERDAY_RE.search(text):
            return start_of_today - timedelta(days=1)

        for pattern, unit in RELATIVE_PATTERNS:
            match = pattern.search(text)
            if not match:
                continue
            try:
                return now - timedelta(**{unit: int(match.group(1))})
            except (ValueError, OverflowError):
                # Digit runs past int() limits or offsets before year 1
                return None

        return None

    @staticmethod
    def _extract_numeric_date(text: str, now: datetime) -> datetime | None:
        for pattern, fmt in NUMERIC_DATE_PATTERNS:
            match = pattern.search(text)
            if not match:
                continue
            try:
                parsed = datetime.strptime(match.group(0), fmt).replace(tzinfo=timezone.utc)
            except ValueError:
                continue
            years = abs(relativedelta(now, parsed).years)
            if years <= MAX_NUMERIC_YEAR_DIFFERENCE:
                return parsed
            logger.debug("Ignoring implausible date %s", match.group(0))

        return None
