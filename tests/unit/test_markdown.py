"""
Unit tests for markdown rendering of content HTML.
"""

import pytest
from siftcore.markdown import create_markdown_content

BASE_URL = "https://example.com/blog/post"


class TestCreateMarkdownContent:
    """Rendering of the canonical content structures."""

    @pytest.mark.parametrize("html", ["", "   ", "\n"])
    def test_empty_input(self, html):
        assert create_markdown_content(html) == ""

    def test_headings_and_paragraphs(self):
        markdown = create_markdown_content("<h2>Section</h2><p>Body text.</p>")
        assert markdown == "## Section\n\nBody text."

    def test_title_heading_dropped(self):
        markdown = create_markdown_content("<h2>My Post</h2><p>Body.</p>", title="My post")
        assert "My Post" not in markdown
        assert markdown == "Body."

    def test_other_heading_kept(self):
        markdown = create_markdown_content("<h2>Intro</h2><p>Body.</p>", title="My post")
        assert markdown.startswith("## Intro")

    def test_links_made_absolute(self):
        markdown = create_markdown_content('<p>See <a href="/docs">the docs</a>.</p>', BASE_URL)
        assert "[the docs](https://example.com/docs)" in markdown

    def test_link_title_kept(self):
        markdown = create_markdown_content('<p><a href="https://x.org/" title="X site">X</a></p>')
        assert '[X](https://x.org/ "X site")' in markdown

    def test_javascript_link_becomes_text(self):
        markdown = create_markdown_content('<p><a href="javascript:void(0)">Click</a> here</p>')
        assert markdown == "Click here"

    def test_images(self):
        markdown = create_markdown_content('<p><img src="img/a.png" alt="A chart"></p>', BASE_URL)
        assert markdown == "![A chart](https://example.com/blog/img/a.png)"

    def test_fenced_code_with_language(self):
        html = '<pre><code data-lang="python" class="language-python">def f(x_1):\n    return x_1 * 2</code></pre>'
        markdown = create_markdown_content(html)
        assert markdown == "```python\ndef f(x_1):\n    return x_1 * 2\n```"

    def test_fence_longer_than_body_backticks(self):
        html = "<pre><code>Use ``` to open a block</code></pre>"
        markdown = create_markdown_content(html)
        assert markdown.startswith("````\n")
        assert markdown.endswith("\n````")

    def test_footnotes(self):
        html = (
            '<p>Claim<sup id="fnref:1"><a href="#fn:1">1</a></sup>.</p>'
            '<div id="footnotes"><ol>'
            '<li id="fn:1" class="footnote"><p>Note text<a href="#fnref:1" class="footnote-backref">↩</a></p></li>'
            "</ol></div>"
        )
        markdown = create_markdown_content(html)
        assert markdown == "Claim[^1].\n\n[^1]: Note text"

    def test_inline_math(self):
        markdown = create_markdown_content('<p>Area is <math data-latex="\\pi r^2"></math>.</p>')
        assert markdown == "Area is $\\pi r^2$."

    def test_block_math(self):
        markdown = create_markdown_content('<math display="block" data-latex="e = mc^2"></math>')
        assert markdown == "$$\ne = mc^2\n$$"

    def test_highlight_and_strikethrough(self):
        markdown = create_markdown_content("<p><mark>key</mark> and <del>old</del></p>")
        assert markdown == "==key== and ~~old~~"

    def test_task_list(self):
        markdown = create_markdown_content(
            '<ul><li><input type="checkbox" checked>Done</li><li><input type="checkbox">Todo</li></ul>'
        )
        assert "[x] Done" in markdown
        assert "[ ] Todo" in markdown

    def test_youtube_embed(self):
        markdown = create_markdown_content('<iframe src="https://www.youtube.com/embed/dQw4w9WgXcQ"></iframe>')
        assert markdown == "![](https://www.youtube.com/watch?v=dQw4w9WgXcQ)"

    def test_tweet_embed(self):
        markdown = create_markdown_content('<iframe src="https://twitter.com/jack/status/20"></iframe>')
        assert markdown == "![](https://x.com/i/status/20)"

    def test_other_iframes_dropped(self):
        assert create_markdown_content('<iframe src="https://maps.example.com/embed"></iframe>') == ""

    def test_callout(self):
        html = (
            '<div class="markdown-alert markdown-alert-warning">'
            '<p class="markdown-alert-title">Warning</p><p>Mind the gap.</p></div>'
        )
        markdown = create_markdown_content(html)
        assert markdown == "> [!WARNING]\n> Mind the gap."

    def test_simple_table(self):
        html = "<table><tr><th>Name</th><th>Value</th></tr><tr><td>pipe</td><td>a|b</td></tr></table>"
        markdown = create_markdown_content(html)
        assert "| Name | Value |" in markdown
        assert "a\\|b" in markdown

    def test_complex_table_kept_as_html(self):
        html = '<table class="data"><tr><td colspan="2" style="x">Wide</td></tr><tr><td>a</td><td>b</td></tr></table>'
        markdown = create_markdown_content(html)
        assert markdown == '<table><tr><td colspan="2">Wide</td></tr><tr><td>a</td><td>b</td></tr></table>'

    def test_no_runs_of_blank_lines(self):
        markdown = create_markdown_content("<p>One</p><div></div><div></div><p>Two</p>")
        assert "\n\n\n" not in markdown
        assert markdown == "One\n\nTwo"
