"""
Unit tests for the BeautifulSoup tree helpers.
"""

import pytest
from bs4 import BeautifulSoup
from siftcore.extractor.dom import (
    class_and_id,
    contains,
    count_words,
    is_attached,
    link_density,
    serialize,
    text_before,
)


class TestCountWords:
    """Word counting across scripts."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("", 0),
            ("   ", 0),
            ("hello world", 2),
            ("one, two;  three\nfour", 4),
            ("日本語", 3),
            ("hello 世界", 3),
        ],
    )
    def test_counts(self, text, expected):
        """Whitespace separates words; each CJK character is a word."""
        assert count_words(text) == expected


class TestTreeHelpers:
    """Identity-based helpers over parsed trees."""

    def test_link_density(self):
        """Share of text inside links."""
        soup = BeautifulSoup("<div>abcd<a href='/'>efgh</a></div>", "html.parser")
        assert link_density(soup.div) == pytest.approx(0.5)

    def test_link_density_empty(self):
        soup = BeautifulSoup("<div></div>", "html.parser")
        assert link_density(soup.div) == 0.0

    def test_class_and_id(self):
        soup = BeautifulSoup('<div class="Main Story" id="Top"></div>', "html.parser")
        assert class_and_id(soup.div) == "main story top"

    def test_attachment_after_extract(self):
        """An extracted element is no longer attached to its old root."""
        soup = BeautifulSoup("<div><section><p>x</p></section></div>", "html.parser")
        root, paragraph = soup.div, soup.p
        assert is_attached(paragraph, root)
        assert contains(root, paragraph)

        soup.section.extract()

        assert not is_attached(paragraph, root)
        assert not contains(root, paragraph)

    def test_identical_siblings_are_distinct(self):
        """Structurally equal elements are told apart by identity."""
        soup = BeautifulSoup("<div><p>same</p></div><div><p>same</p></div>", "html.parser")
        first, second = soup.find_all("div")
        assert first == second
        assert not contains(first, second.p)

    def test_text_before(self):
        soup = BeautifulSoup("<div><p>By <b>Jane</b></p><h2>Title</h2><h3>Other</h3></div>", "html.parser")
        assert text_before(soup.h2, soup.div) == "By Jane"
        assert text_before(soup.h3, soup.div) == "By Jane Title"

        soup = BeautifulSoup("<div>  <h2>Title</h2><p>body</p></div>", "html.parser")
        assert text_before(soup.h2, soup.div) == ""


class TestSerialize:
    """Serialization of content roots."""

    def test_element_root_is_outer_html(self):
        soup = BeautifulSoup("<body><article><p>x</p></article></body>", "html.parser")
        assert serialize(soup.article) == "<article><p>x</p></article>"

    def test_body_root_is_inner_html(self):
        soup = BeautifulSoup("<html><body> <p>x</p> </body></html>", "html.parser")
        assert serialize(soup.body) == "<p>x</p>"

    def test_document_root(self):
        soup = BeautifulSoup("<p>x</p>", "html.parser")
        assert serialize(soup) == "<p>x</p>"
