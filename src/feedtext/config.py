"""Runtime settings for article extraction, read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/129.0.0.0 Safari/537.36"
)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r (expected a number)", name, raw)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r", name, raw)
        return default
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r (expected an integer)", name, raw)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r", name, raw)
        return default
    return value


@dataclass
class ExtractionSettings:
    """Tunables for the extraction orchestrator."""

    fetch_timeout: float = 12.0
    cache_capacity: int = 200
    user_agent: str = DEFAULT_USER_AGENT

    # Minimum stripped-text length for inline feed HTML to be used directly
    min_content_length: int = 120
    min_description_length: int = 80

    @classmethod
    def from_env(cls) -> "ExtractionSettings":
        """Build settings from FEEDTEXT_* environment variables."""
        return cls(
            fetch_timeout=_env_float("FEEDTEXT_FETCH_TIMEOUT", cls.fetch_timeout),
            cache_capacity=_env_int("FEEDTEXT_CACHE_CAPACITY", cls.cache_capacity),
            user_agent=os.getenv("FEEDTEXT_USER_AGENT", "").strip()
            or DEFAULT_USER_AGENT,
        )


_settings: ExtractionSettings | None = None


def get_settings() -> ExtractionSettings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = ExtractionSettings.from_env()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
