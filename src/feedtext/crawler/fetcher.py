"""HTTP retrieval of article pages."""

from __future__ import annotations

import logging
import re

import requests

from ..config import ExtractionSettings, get_settings
from ..utils.html_cleaner import decode_html_bytes
from .errors import FetchError

logger = logging.getLogger(__name__)

_CHARSET_RE = re.compile(r"charset\s*=\s*[\"']?([^\s;\"']+)", re.IGNORECASE)


def charset_from_content_type(content_type: str | None) -> str | None:
    """Return the charset declared in a ``Content-Type`` header, if any."""
    if not content_type:
        return None
    match = _CHARSET_RE.search(content_type)
    return match.group(1) if match else None


class ArticleFetcher:
    """Download article HTML with a browser-like session.

    Local and intermediary caches are bypassed so the page is always
    re-read. There are no retries: a timeout, network error or non-2xx
    response becomes a ``FetchError``.
    """

    def __init__(
        self,
        settings: ExtractionSettings | None = None,
        session: requests.Session | None = None,
    ):
        settings = settings or get_settings()
        self.timeout = settings.fetch_timeout
        self.user_agent = settings.user_agent
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "User-Agent": self.user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Cache-Control": "no-cache",
                "Pragma": "no-cache",
            }
        )

    def fetch(self, url: str) -> str:
        logger.info(f"Fetching article page: {url}")
        try:
            resp = self.session.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise FetchError(url, f"HTTP {status}", status_code=status) from e
        except requests.Timeout as e:
            raise FetchError(url, f"timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e

        charset = charset_from_content_type(resp.headers.get("Content-Type"))
        html = decode_html_bytes(resp.content, charset)
        logger.info(f"Fetched {url} ({len(resp.content)} bytes, status {resp.status_code})")
        return html

    def close(self) -> None:
        self.session.close()
