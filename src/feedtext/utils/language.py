"""Language identification for extracted article text."""

from __future__ import annotations

import logging

from langdetect import DetectorFactory, detect
from langdetect.lang_detect_exception import LangDetectException

logger = logging.getLogger(__name__)

# langdetect is randomized; a fixed seed makes results repeatable
DetectorFactory.seed = 0

MIN_DETECTION_LENGTH = 60
MAX_SAMPLE_LENGTH = 1200


def detect_language(text: str | None) -> str | None:
    """Return the ISO-639-1 code of ``text``, or None when unsure."""
    if not text or len(text) < MIN_DETECTION_LENGTH:
        return None

    sample = text[:MAX_SAMPLE_LENGTH]
    try:
        return detect(sample)
    except LangDetectException as exc:
        logger.debug("Language detection failed: %s", exc)
        return None
