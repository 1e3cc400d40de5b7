"""
Unit tests for site extractor dispatch.
"""

import re

import pytest
from bs4 import BeautifulSoup
from siftcore.extractor.models import SiteExtraction
from siftcore.extractor.registry import (
    DEFAULT_MAPPINGS,
    ExtractorMapping,
    ExtractorRegistry,
    default_registry,
    normalize_hostname,
)
from siftcore.extractor.sites import BaseSiteExtractor, GitHubExtractor

MATCHING_DOCUMENT = '<html><body><div class="stub">hello</div></body></html>'
OTHER_DOCUMENT = "<html><body><p>nothing special</p></body></html>"


def make_extractor(fail: bool = False):
    """Fresh extractor class that counts its ``can_extract`` probes."""

    class StubExtractor(BaseSiteExtractor):
        probes = 0

        def can_extract(self) -> bool:
            type(self).probes += 1
            if fail:
                raise RuntimeError("probe exploded")
            return self.select_one(".stub") is not None

        def extract(self) -> SiteExtraction:
            return SiteExtraction(content_html="<p>stub</p>")

    return StubExtractor


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class TestNormalizeHostname:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("example.com", "example.com"),
            ("WWW.Example.COM", "example.com"),
            ("example.com.", "example.com"),
            ("news.example.com", "news.example.com"),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_hostname(raw) == expected


class TestExtractorRegistry:
    """Pattern matching, probing and the per-host cache."""

    def test_exact_hostname_match(self):
        extractor_class = make_extractor()
        registry = ExtractorRegistry([ExtractorMapping(["example.com"], extractor_class)])

        extractor = registry.find_extractor(_soup(MATCHING_DOCUMENT), "https://www.example.com/post/1")

        assert isinstance(extractor, extractor_class)
        assert extractor.url == "https://www.example.com/post/1"
        assert extractor.extractor_type == "stub"

    def test_regex_match(self):
        extractor_class = make_extractor()
        registry = ExtractorRegistry([ExtractorMapping([re.compile(r"^https://docs\.example\.org/")], extractor_class)])

        assert isinstance(
            registry.find_extractor(_soup(MATCHING_DOCUMENT), "https://docs.example.org/page"), extractor_class
        )
        assert registry.find_extractor(_soup(MATCHING_DOCUMENT), "https://example.org/page") is None

    def test_exact_hostname_wins_over_regex(self):
        by_regex = make_extractor()
        by_host = make_extractor()
        registry = ExtractorRegistry(
            [
                ExtractorMapping([re.compile(r"example\.com")], by_regex),
                ExtractorMapping(["example.com"], by_host),
            ]
        )

        extractor = registry.find_extractor(_soup(MATCHING_DOCUMENT), "https://example.com/")

        assert isinstance(extractor, by_host)
        assert by_regex.probes == 0

    def test_positive_result_cached_per_host(self):
        """Later pages on the host reuse the class without probing again."""
        extractor_class = make_extractor()
        registry = ExtractorRegistry([ExtractorMapping(["example.com"], extractor_class)])

        first = registry.find_extractor(_soup(MATCHING_DOCUMENT), "https://example.com/a")
        second = registry.find_extractor(_soup(OTHER_DOCUMENT), "https://example.com/b")

        assert extractor_class.probes == 1
        assert isinstance(second, extractor_class)
        assert second is not first
        assert second.url == "https://example.com/b"

    def test_negative_result_cached_until_cleared(self):
        extractor_class = make_extractor()
        registry = ExtractorRegistry([ExtractorMapping(["example.com"], extractor_class)])

        assert registry.find_extractor(_soup(OTHER_DOCUMENT), "https://example.com/a") is None
        assert registry.find_extractor(_soup(MATCHING_DOCUMENT), "https://example.com/b") is None
        assert extractor_class.probes == 1

        registry.clear_cache()

        assert isinstance(registry.find_extractor(_soup(MATCHING_DOCUMENT), "https://example.com/b"), extractor_class)
        assert extractor_class.probes == 2

    def test_unmatched_host_is_cached(self):
        registry = ExtractorRegistry([ExtractorMapping(["example.com"], make_extractor())])
        assert registry.find_extractor(_soup(MATCHING_DOCUMENT), "https://elsewhere.net/") is None
        assert registry._cached("elsewhere.net") == (True, None)

    @pytest.mark.parametrize("url", ["", "not a url", "/relative/path", "http://[broken"])
    def test_invalid_url(self, url):
        registry = ExtractorRegistry([ExtractorMapping(["example.com"], make_extractor())])
        assert registry.find_extractor(_soup(MATCHING_DOCUMENT), url) is None
        assert registry._cached("") == (True, None)

    def test_failing_probe_is_skipped(self):
        failing = make_extractor(fail=True)
        registry = ExtractorRegistry([ExtractorMapping(["example.com"], failing)])

        assert registry.find_extractor(_soup(MATCHING_DOCUMENT), "https://example.com/") is None
        assert failing.probes == 1

    def test_register_appends_mapping(self):
        registry = ExtractorRegistry()
        extractor_class = make_extractor()

        assert registry.find_extractor(_soup(MATCHING_DOCUMENT), "https://example.com/") is None

        registry.register(ExtractorMapping(["example.com"], extractor_class))
        # the earlier miss is still cached
        assert registry.find_extractor(_soup(MATCHING_DOCUMENT), "https://example.com/") is None

        registry.clear_cache()
        assert isinstance(registry.find_extractor(_soup(MATCHING_DOCUMENT), "https://example.com/"), extractor_class)
        assert len(registry.mappings) == 1


class TestDefaultRegistry:
    """Built-in mappings."""

    GITHUB_PAGE = (
        '<html><head><meta name="expected-hostname" content="github.com"><title>Test</title></head>'
        '<body><div data-testid="issue-metadata-sticky"></div><div data-testid="issue-title">Issue</div></body></html>'
    )

    def test_github_issue(self):
        extractor = default_registry.find_extractor(
            _soup(self.GITHUB_PAGE), "https://github.com/user/repo/issues/1"
        )
        assert isinstance(extractor, GitHubExtractor)

    def test_fingerprint_required(self):
        assert default_registry.find_extractor(_soup(OTHER_DOCUMENT), "https://github.com/user/repo") is None

    def test_known_hosts_covered(self):
        hosts = {pattern for mapping in DEFAULT_MAPPINGS for pattern in mapping.patterns if isinstance(pattern, str)}
        for host in ("github.com", "x.com", "twitter.com", "reddit.com", "news.ycombinator.com", "youtube.com"):
            assert host in hosts
