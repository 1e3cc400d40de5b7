"""
Markdown rendering of standardized content HTML.

Built on ``markdownify`` with converters for the canonical structures the
standardizer emits (footnotes, fenced code with a language, math) plus a few
common publishing idioms: highlights, strikethrough, callouts, task lists and
video or post embeds.
"""

from __future__ import annotations

import copy
import re
from typing import List, Optional
from urllib.parse import parse_qs, urljoin, urlparse

from bs4 import BeautifulSoup, Tag
from markdownify import ATX, MarkdownConverter

_EXCESS_NEWLINES = re.compile(r"\n{3,}")
_NON_WORD = re.compile(r"[^\w\s]", re.UNICODE)
_WHITESPACE = re.compile(r"\s+")
_YOUTUBE_EMBED = re.compile(r"(?:youtube(?:-nocookie)?\.com/(?:embed|shorts|live)/|youtu\.be/)([\w-]{6,})")
_TWEET = re.compile(r"(?:twitter|x)\.com/[^/]+/status(?:es)?/(\d+)")
_CALLOUT_CLASS = re.compile(r"^markdown-alert-(\w+)$")
_COMPLEX_TABLE_ATTRIBUTES = ("colspan", "rowspan")


def _comparable(text: str) -> str:
    return _WHITESPACE.sub(" ", _NON_WORD.sub("", text.lower())).strip()


def _span(value) -> int:
    try:
        return int(str(value))
    except (TypeError, ValueError):
        return 1


class SiftMarkdownConverter(MarkdownConverter):
    """markdownify converter aware of canonical footnotes, code blocks and math."""

    def __init__(self, base_url: str = "", **options):
        options.setdefault("heading_style", ATX)
        options.setdefault("bullets", "-")
        options.setdefault("escape_misc", False)
        super().__init__(**options)
        self.base_url = base_url

    def _absolute(self, url: str) -> str:
        if url and self.base_url and not urlparse(url).netloc and not url.startswith("#"):
            return urljoin(self.base_url, url)
        return url

    def convert_a(self, el, text, *args, **kwargs):
        href = str(el.get("href", "")).strip()
        text = (text or "").strip()
        if not text:
            return ""
        if not href or href.lower().startswith("javascript:"):
            return text
        title = el.get("title")
        href = self._absolute(href)
        if title:
            return f'[{text}]({href} "{title}")'
        return f"[{text}]({href})"

    def convert_img(self, el, text, *args, **kwargs):
        src = self._absolute(str(el.get("src", "")).strip())
        if not src:
            return ""
        alt = str(el.get("alt", "")).strip()
        title = el.get("title")
        if title:
            return f'![{alt}]({src} "{title}")'
        return f"![{alt}]({src})"

    def convert_pre(self, el, text, *args, **kwargs):
        code = el.find("code")
        source = code if code is not None else el
        language = str(source.get("data-lang", ""))
        if not language:
            for token in source.get("class") or []:
                if token.startswith("language-"):
                    language = token[len("language-"):]
                    break
        body = source.get_text().rstrip("\n")
        fence = "```"
        while fence in body:
            fence += "`"
        return f"\n\n{fence}{language}\n{body}\n{fence}\n\n"

    def convert_sup(self, el, text, *args, **kwargs):
        link = el.find("a", href=True)
        href = str(link["href"]) if link is not None else ""
        if href.startswith("#fn:"):
            return f"[^{href[len('#fn:'):]}]"
        element_id = str(el.get("id", ""))
        if element_id.startswith("fnref:"):
            return f"[^{element_id[len('fnref:'):].split('-')[0]}]"
        return text

    def convert_math(self, el, text, *args, **kwargs):
        latex = str(el.get("data-latex") or el.get_text()).strip()
        if not latex:
            return ""
        if el.get("display") == "block":
            return f"\n\n$$\n{latex}\n$$\n\n"
        return f"${latex}$"

    def convert_span(self, el, text, *args, **kwargs):
        latex = el.get("data-latex")
        if latex is None:
            return text
        classes = el.get("class") or []
        is_block = "katex-display" in classes or (
            el.parent is not None and "katex-display" in (el.parent.get("class") or [])
        )
        if is_block:
            return f"\n\n$$\n{str(latex).strip()}\n$$\n\n"
        return f"${str(latex).strip()}$"

    def convert_mark(self, el, text, *args, **kwargs):
        return f"=={text}==" if text.strip() else ""

    def convert_del(self, el, text, *args, **kwargs):
        return f"~~{text}~~" if text.strip() else ""

    convert_s = convert_del
    convert_strike = convert_del

    def convert_input(self, el, text, *args, **kwargs):
        if str(el.get("type", "")).lower() != "checkbox":
            return ""
        return "[x] " if el.has_attr("checked") else "[ ] "

    def convert_iframe(self, el, text, *args, **kwargs):
        src = str(el.get("src", ""))
        youtube = _YOUTUBE_EMBED.search(src)
        if youtube is not None:
            return f"\n\n![](https://www.youtube.com/watch?v={youtube.group(1)})\n\n"
        if "youtube.com/watch" in src:
            video_id = (parse_qs(urlparse(src).query).get("v") or [""])[0]
            if video_id:
                return f"\n\n![](https://www.youtube.com/watch?v={video_id})\n\n"
        tweet = _TWEET.search(src)
        if tweet is not None:
            return f"\n\n![](https://x.com/i/status/{tweet.group(1)})\n\n"
        return ""

    def convert_figure(self, el, text, *args, **kwargs):
        return f"\n\n{text.strip()}\n\n"

    def convert_figcaption(self, el, text, *args, **kwargs):
        return f"\n\n{text.strip()}\n\n"

    def convert_div(self, el, text, *args, **kwargs):
        callout = next(
            (match.group(1) for match in map(_CALLOUT_CLASS.match, el.get("class") or []) if match),
            None,
        )
        if callout is None:
            return super().convert_div(el, text, *args, **kwargs)
        lines = text.strip().splitlines()
        quoted = "\n".join(f"> {line}" if line else ">" for line in lines)
        return f"\n\n> [!{callout.upper()}]\n{quoted}\n\n"

    def convert_table(self, el, text, *args, **kwargs):
        cells = el.find_all(["td", "th"])
        if any(_span(cell.get(attr, 1)) > 1 for cell in cells for attr in _COMPLEX_TABLE_ATTRIBUTES):
            return f"\n\n{_plain_table_html(el)}\n\n"
        return super().convert_table(el, text, *args, **kwargs)

    def convert_td(self, el, text, *args, **kwargs):
        return super().convert_td(el, text.replace("|", "\\|"), *args, **kwargs)

    def convert_th(self, el, text, *args, **kwargs):
        return super().convert_th(el, text.replace("|", "\\|"), *args, **kwargs)


def _plain_table_html(table: Tag) -> str:
    """Table HTML with only span attributes kept."""
    clone = copy.copy(table)
    for element in [clone, *clone.find_all(True)]:
        element.attrs = {key: value for key, value in element.attrs.items() if key in _COMPLEX_TABLE_ATTRIBUTES}
    return str(clone)


def _remove_title_heading(soup: BeautifulSoup, title: Optional[str]) -> None:
    if not title:
        return
    heading = soup.find(["h1", "h2", "h3", "h4", "h5", "h6"])
    if heading is not None and _comparable(heading.get_text(" ")) == _comparable(title):
        heading.decompose()


def _prepare_callouts(soup: BeautifulSoup) -> None:
    for title in soup.select(".markdown-alert .markdown-alert-title"):
        title.decompose()


def _footnote_definitions(soup: BeautifulSoup, converter: SiftMarkdownConverter) -> List[str]:
    """Render and detach canonical footnote items."""
    container = soup.select_one("div#footnotes")
    items = container.select('li[id^="fn:"]') if container is not None else []
    definitions: List[str] = []
    for item in items:
        number = str(item["id"])[len("fn:"):]
        for backref in item.select('a.footnote-backref, a[href^="#fnref:"]'):
            backref.decompose()
        fragment = BeautifulSoup(item.decode_contents(), "html.parser")
        body = converter.convert_soup(fragment).strip()
        body = _EXCESS_NEWLINES.sub("\n\n", body).replace("\n\n", "\n\n    ")
        definitions.append(f"[^{number}]: {body}")
    if container is not None:
        container.decompose()
    return definitions


def create_markdown_content(html: str, url: str = "", title: Optional[str] = None) -> str:
    """
    Render standardized content HTML as markdown.

    Args:
        html: Content HTML, usually the output of the extraction pipeline
        url: Base URL for resolving relative links and images
        title: Page title; a first heading with the same text is dropped

    Returns:
        Markdown text without leading or trailing blank lines
    """
    if not html or not html.strip():
        return ""

    soup = BeautifulSoup(html, "html.parser")
    converter = SiftMarkdownConverter(base_url=url)

    _remove_title_heading(soup, title)
    _prepare_callouts(soup)
    definitions = _footnote_definitions(soup, converter)

    markdown = converter.convert_soup(soup).strip()
    if definitions:
        markdown = f"{markdown}\n\n" + "\n\n".join(definitions)

    return _EXCESS_NEWLINES.sub("\n\n", markdown).strip()
