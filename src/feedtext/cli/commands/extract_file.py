"""CLI command for extracting article text from a saved HTML page."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from ...crawler import ArticleTextExtractor
from ...utils.html_cleaner import decode_html_bytes

logger = logging.getLogger(__name__)


class _NoNetworkFetcher:
    """Fetcher for offline runs; raw-HTML extraction never fetches."""

    def fetch(self, url: str) -> str:
        raise RuntimeError(f"network access disabled for {url}")


def add_extract_file_parser(subparsers: argparse._SubParsersAction) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "extract-file", help="Extract readable text from a local HTML file and print JSON"
    )
    parser.add_argument("path", type=str, help="Path to the saved HTML page")
    parser.add_argument(
        "--url",
        type=str,
        default=None,
        help="Original page URL, used for title cleanup (default: file:// URI)",
    )
    parser.add_argument("--title", type=str, default=None, help="Feed item title")
    parser.set_defaults(func=handle_extract_file_command)
    return parser


def handle_extract_file_command(args) -> int:
    path = Path(args.path)
    if not path.is_file():
        print(f"Error: File not found: {path}")
        return 1

    html = decode_html_bytes(path.read_bytes())
    url = getattr(args, "url", None) or path.resolve().as_uri()

    extractor = ArticleTextExtractor(fetcher=_NoNetworkFetcher())
    article = extractor.extract_from_html(html, url, rss_title=getattr(args, "title", None))
    logger.info(f"Extracted {article.word_count} words from {path}")

    print(json.dumps(article.to_dict(), ensure_ascii=False, indent=2))
    return 0
