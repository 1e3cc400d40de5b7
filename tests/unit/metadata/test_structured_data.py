"""
Unit tests for JSON-LD, meta tag parsing and schema property lookup.
"""

import pytest
from bs4 import BeautifulSoup
from siftcore.metadata import MetaTag, MetaTagParser, SchemaOrgParser, get_meta_content, get_schema_property


def _soup(head: str) -> BeautifulSoup:
    return BeautifulSoup(f"<html><head>{head}</head><body></body></html>", "html.parser")


class TestSchemaOrgParser:
    """JSON-LD extraction."""

    def test_single_block(self):
        soup = _soup('<script type="application/ld+json">{"@type": "Article", "headline": "Hi"}</script>')
        assert SchemaOrgParser.parse_json_ld(soup) == [{"@type": "Article", "headline": "Hi"}]

    def test_graph_flattened(self):
        soup = _soup(
            '<script type="application/ld+json">'
            '{"@context": "https://schema.org", "@graph": [{"@type": "WebSite"}, {"@type": "Article"}]}'
            "</script>"
        )
        assert [item["@type"] for item in SchemaOrgParser.parse_json_ld(soup)] == ["WebSite", "Article"]

    def test_list_and_multiple_blocks(self):
        soup = _soup(
            '<script type="application/ld+json">[{"@type": "A"}, {"@type": "B"}]</script>'
            '<script type="application/ld+json">{"@type": "C"}</script>'
        )
        assert [item["@type"] for item in SchemaOrgParser.parse_json_ld(soup)] == ["A", "B", "C"]

    @pytest.mark.parametrize(
        "body",
        [
            '/*<![CDATA[*/{"@type": "A"}/*]]>*/',
            '<![CDATA[{"@type": "A"}]]>',
            '<!--{"@type": "A"}-->',
        ],
    )
    def test_wrappers_tolerated(self, body):
        soup = _soup(f'<script type="application/ld+json">{body}</script>')
        assert SchemaOrgParser.parse_json_ld(soup) == [{"@type": "A"}]

    def test_invalid_json_skipped(self):
        soup = _soup(
            '<script type="application/ld+json">{not json</script>'
            '<script type="application/ld+json">{"@type": "Article"}</script>'
        )
        assert SchemaOrgParser.parse_json_ld(soup) == [{"@type": "Article"}]


class TestMetaTags:
    """Meta tag collection and lookup."""

    def test_parse(self):
        soup = _soup(
            '<meta charset="utf-8">'
            '<meta name="description" content="About">'
            '<meta property="og:title" content="Title">'
            '<meta name="empty">'
        )
        assert MetaTagParser.parse(soup) == [
            MetaTag(name="description", property=None, content="About"),
            MetaTag(name=None, property="og:title", content="Title"),
        ]

    def test_lookup_is_case_insensitive(self):
        tags = [MetaTag(name="Description", property=None, content="  About  ")]
        assert get_meta_content(tags, "name", "description") == "About"
        assert get_meta_content(tags, "property", "description") == ""


class TestGetSchemaProperty:
    """Path lookups over nested JSON-LD."""

    DATA = [
        {
            "@type": "NewsArticle",
            "headline": "Headline",
            "author": [{"@type": "Person", "name": "Ann"}, {"@type": "Person", "name": "Bob"}],
            "publisher": {"@type": "Organization", "name": "Daily", "logo": {"url": "https://x/logo.png"}},
            "keywords": ["a", "b"],
            "wordCount": 1200,
        }
    ]

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("headline", "Headline"),
            ("publisher.name", "Daily"),
            ("author.[].name", "Ann, Bob"),
            ("author.[1].name", "Bob"),
            ("author.name", "Ann, Bob"),
            ("keywords", "a, b"),
            ("wordCount", "1200"),
            ("logo.url", "https://x/logo.png"),
            ("missing.path", ""),
        ],
    )
    def test_lookup(self, path, expected):
        assert get_schema_property(self.DATA, path) == expected

    def test_default(self):
        assert get_schema_property([], "headline", "fallback") == "fallback"
        assert get_schema_property(self.DATA, "nothing", "fallback") == "fallback"

    def test_object_without_name_is_empty(self):
        assert get_schema_property(self.DATA, "publisher.logo") == ""
