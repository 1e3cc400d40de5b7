"""
Unit tests for code block standardization.
"""

import pytest
from bs4 import BeautifulSoup
from siftcore.extractor.elements.code import detect_language, standardize_code_blocks


def _root(html: str):
    return BeautifulSoup(f"<div>{html}</div>", "html.parser").div


class TestDetectLanguage:
    """Language hints from attributes and classes."""

    @pytest.mark.parametrize(
        "html,expected",
        [
            ('<pre><code class="language-python">x</code></pre>', "python"),
            ('<pre class="lang-rust">x</pre>', "rust"),
            ('<pre data-lang="Go">x</pre>', "go"),
            ('<pre class="brush: ruby">x</pre>', "ruby"),
            ('<div class="highlight-source-js"><pre>x</pre></div>', "js"),
            ('<pre class="sql">x</pre>', "sql"),
            ('<pre class="code-block">x</pre>', None),
            ("<pre>x</pre>", None),
        ],
    )
    def test_detect(self, html, expected):
        root = _root(html)
        assert detect_language(root.pre) == expected


class TestStandardizeCodeBlocks:
    """Canonical ``<pre><code>`` output."""

    def test_language_recorded(self):
        root = _root('<pre><code class="hljs language-python">print(1)</code></pre>')
        assert standardize_code_blocks(root) == 1

        code = root.pre.code
        assert code["data-lang"] == "python"
        assert code["class"] == ["language-python"]
        assert code.get_text() == "print(1)"

    def test_line_breaks_preserved(self):
        root = _root("<pre>a = 1<br>b = 2</pre>")
        standardize_code_blocks(root)
        assert root.pre.code.get_text() == "a = 1\nb = 2"

    def test_gutter_table_dropped(self):
        root = _root(
            '<div class="highlight"><table><tr>'
            '<td class="linenos"><pre>1\n2</pre></td>'
            '<td class="code"><pre>a = 1\nb = 2</pre></td>'
            "</tr></table></div>"
        )
        standardize_code_blocks(root)

        blocks = root.find_all("pre")
        assert len(blocks) == 1
        assert blocks[0].get_text() == "a = 1\nb = 2"

    def test_line_based_highlighter(self):
        root = _root(
            '<div class="code-block" data-lang="js">'
            '<div class="line">const a = 1;</div><div class="line">const b = 2;</div>'
            "</div>"
        )
        assert standardize_code_blocks(root) == 1

        assert root.find("div", class_="code-block") is None
        code = root.pre.code
        assert code["data-lang"] == "js"
        assert code.get_text() == "const a = 1;\nconst b = 2;"

    def test_inline_markup_flattened(self):
        root = _root('<pre><code><span class="k">def</span> <span class="nf">f</span>():</code></pre>')
        standardize_code_blocks(root)
        assert str(root.pre) == "<pre><code>def f():</code></pre>"
