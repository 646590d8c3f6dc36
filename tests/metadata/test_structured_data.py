"""Unit tests for publication dates declared in page markup.

Covers meta tags in both attribute orders, <time datetime>, JSON-LD blocks
(including @graph and malformed JSON) and the date string parser shared by
all of them.
"""

from datetime import datetime, timezone

import pytest

from feedtext.metadata.structured_data import (
    extract_publish_date_from_html,
    parse_date_string,
)


def _utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TestMetaTags:
    def test_article_published_time(self):
        html = """
        <head>
            <meta property="article:published_time" content="2024-03-05T08:15:00+01:00"/>
        </head>
        """
        assert extract_publish_date_from_html(html) == _utc(2024, 3, 5, 7, 15)

    def test_content_before_property(self):
        html = '<meta content="2024-03-05T08:15:00Z" property="og:article:published_time">'

        assert extract_publish_date_from_html(html) == _utc(2024, 3, 5, 8, 15)

    def test_generic_date_meta(self):
        html = '<meta name="pubdate" content="2023-12-24">'

        assert extract_publish_date_from_html(html) == _utc(2023, 12, 24)

    def test_published_time_wins_over_generic_date(self):
        html = """
        <meta name="date" content="2020-01-01">
        <meta property="article:published_time" content="2024-02-02T10:00:00Z">
        """
        assert extract_publish_date_from_html(html) == _utc(2024, 2, 2, 10, 0)

    def test_unparseable_meta_falls_through_to_time(self):
        html = """
        <meta property="article:published_time" content="soon">
        <time class="stamp" datetime="2024-04-01T09:00:00Z">April 1</time>
        """
        assert extract_publish_date_from_html(html) == _utc(2024, 4, 1, 9, 0)


class TestJsonLd:
    def test_date_published(self):
        html = """
        <script type="application/ld+json">
        {"@type": "NewsArticle", "datePublished": "2024-05-02T18:00:00Z"}
        </script>
        """
        assert extract_publish_date_from_html(html) == _utc(2024, 5, 2, 18, 0)

    def test_graph_nodes_are_searched(self):
        html = """
        <script type="application/ld+json">
        {"@context": "https://schema.org", "@graph": [
            {"@type": "WebPage", "name": "Home"},
            {"@type": "NewsArticle", "datePublished": "2024-01-10T06:30:00+00:00"}
        ]}
        </script>
        """
        assert extract_publish_date_from_html(html) == _utc(2024, 1, 10, 6, 30)

    def test_date_created_is_a_fallback(self):
        html = """
        <script type='application/ld+json'>
        [{"@type": "Article", "dateCreated": "2022-08-15"}]
        </script>
        """
        assert extract_publish_date_from_html(html) == _utc(2022, 8, 15)

    def test_malformed_json_uses_raw_key_lookup(self):
        html = """
        <script type="application/ld+json">
        {"@type": "NewsArticle", "datePublished": "2023-07-04T12:00:00Z",}
        </script>
        """
        assert extract_publish_date_from_html(html) == _utc(2023, 7, 4, 12, 0)

    def test_no_date_anywhere(self):
        html = '<script type="application/ld+json">{"@type": "WebSite"}</script><p>Hi</p>'

        assert extract_publish_date_from_html(html) is None


class TestParseDateString:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2024-01-15T10:30:00Z", _utc(2024, 1, 15, 10, 30)),
            ("2024-01-15T10:30:00-05:00", _utc(2024, 1, 15, 15, 30)),
            ("2024-01-15T10:30:00", _utc(2024, 1, 15, 10, 30)),
            ("2024-01-15 10:30:00", _utc(2024, 1, 15, 10, 30)),
            ("Mon, 15 Jan 2024 10:30:00 +0000", _utc(2024, 1, 15, 10, 30)),
            ("January 15, 2024", _utc(2024, 1, 15)),
        ],
    )
    def test_supported_formats(self, value, expected):
        assert parse_date_string(value) == expected

    @pytest.mark.parametrize("value", ["", "   ", "not a date"])
    def test_unparseable_values(self, value):
        assert parse_date_string(value) is None

    def test_empty_html(self):
        assert extract_publish_date_from_html("") is None
