"""
Hacker News item pages.
"""

from __future__ import annotations

import copy
from typing import List
from urllib.parse import parse_qs, urlparse

from bs4 import Tag

from ..models import ExtractorVariables, SiteExtraction
from .base import BaseSiteExtractor

# Indentation images on HN are 40px per level
INDENT_WIDTH = 40


class HackerNewsExtractor(BaseSiteExtractor):
    """Story or comment item with its nested comment tree."""

    def can_extract(self) -> bool:
        return self.select_one(".fatitem") is not None or self.select_one("#hnmain") is not None

    def _post_id(self) -> str:
        ids = parse_qs(urlparse(self.url).query).get("id")
        return ids[0] if ids else ""

    @staticmethod
    def _depth(row: Tag) -> int:
        indent = row.select_one("td.ind")
        if indent is None:
            return 0
        level = indent.get("indent")
        if level is not None and str(level).isdigit():
            return int(str(level))
        img = indent.find("img")
        if img is not None and str(img.get("width", "")).isdigit():
            return int(str(img["width"])) // INDENT_WIDTH
        return 0

    def _render_comment(self, row: Tag) -> str:
        text = self.select_one(".commtext", row)
        if text is None:
            return ""
        text = copy.copy(text)
        for reply in text.select(".reply"):
            reply.decompose()
        author = self.text_of(".hnuser", row)
        age = self.select_one(".age[title]", row)
        header = f"<strong>{self.escape(author)}</strong>" if author else ""
        if age is not None:
            header = f"{header} {self.format_date(str(age['title']))}".strip()
        heading = f'<p class="comment-header">{header}</p>' if header else ""
        body = text.decode_contents().strip()
        return f'<blockquote class="comment" data-depth="{self._depth(row)}">{heading}<p>{body}</p></blockquote>'

    def extract(self) -> SiteExtraction:
        fatitem = self.select_one(".fatitem")
        title_link = self.select_one(".titleline > a", fatitem) if fatitem is not None else None
        title = title_link.get_text(strip=True) if title_link is not None else ""
        author = self.text_of(".hnuser", fatitem) if fatitem is not None else ""
        age = self.select_one(".age[title]", fatitem) if fatitem is not None else None

        parts: List[str] = []
        if title_link is not None and title_link.get("href"):
            href = str(title_link["href"])
            if not href.startswith("item?"):
                parts.append(f'<p><a href="{self.escape(href)}">{self.escape(title or href)}</a></p>')
        if fatitem is not None:
            top_text = self.inner_html(".toptext", fatitem)
            if top_text:
                parts.append(f'<div class="post-text">{top_text}</div>')
            elif not title:
                # Comment permalink pages carry the comment itself in the fatitem
                own = self.select_one(".commtext", fatitem)
                if own is not None:
                    parts.append(f"<p>{own.decode_contents().strip()}</p>")

        comments = [
            rendered
            for rendered in (self._render_comment(row) for row in self.select("tr.athing.comtr"))
            if rendered
        ]
        if comments:
            parts.append('<hr><div class="comments">' + "".join(comments) + "</div>")

        return SiteExtraction(
            content_html="".join(parts),
            variables=ExtractorVariables(
                title=title or self.page_title() or None,
                author=author or None,
                site="Hacker News",
                published=self.format_date(str(age["title"])) if age is not None else None,
            ),
            extracted_content={"post_id": self._post_id()},
        )
