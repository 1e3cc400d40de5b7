"""
Reddit post pages (new ``shreddit`` markup).
"""

from __future__ import annotations

from typing import List

from bs4 import Tag

from ..models import ExtractorVariables, SiteExtraction
from .base import BaseSiteExtractor

MAX_COMMENT_DEPTH = 10


class RedditExtractor(BaseSiteExtractor):
    def can_extract(self) -> bool:
        return self.select_one("shreddit-post") is not None

    def _subreddit(self) -> str:
        segments = self.path_segments
        if len(segments) > 1 and segments[0] == "r":
            return segments[1]
        post = self.select_one("shreddit-post")
        if post is not None:
            prefixed = str(post.get("subreddit-prefixed-name", ""))
            if prefixed.startswith("r/"):
                return prefixed[2:]
        return ""

    def _post_id(self) -> str:
        segments = self.path_segments
        if "comments" in segments:
            index = segments.index("comments")
            if index + 1 < len(segments):
                return segments[index + 1]
        return ""

    def _render_comment(self, comment: Tag) -> str:
        try:
            depth = min(int(str(comment.get("depth", "0"))), MAX_COMMENT_DEPTH)
        except ValueError:
            depth = 0
        author = str(comment.get("author", ""))
        body = self.inner_html('[slot="comment"]', comment)
        if not body:
            return ""
        published = ""
        time = self.select_one("time[datetime], faceplate-timeago[ts]", comment)
        if time is not None:
            published = self.format_date(str(time.get("datetime") or time.get("ts") or ""))
        header = f"<strong>{self.escape(author)}</strong>" if author else ""
        if published:
            header = f"{header} {published}".strip()
        heading = f'<p class="comment-header">{header}</p>' if header else ""
        return f'<blockquote class="comment" data-depth="{depth}">{heading}{body}</blockquote>'

    def extract(self) -> SiteExtraction:
        post = self.select_one("shreddit-post")
        subreddit = self._subreddit()
        site = f"r/{subreddit}" if subreddit else "Reddit"
        if post is None:
            return SiteExtraction(variables=ExtractorVariables(site=site))

        body = self.inner_html('[slot="text-body"]', post)
        comments: List[str] = [
            rendered for rendered in (self._render_comment(c) for c in self.select("shreddit-comment")) if rendered
        ]
        content_html = body
        if comments:
            content_html += '<hr><div class="comments">' + "".join(comments) + "</div>"

        title = str(post.get("post-title", "")) or self.text_of('[slot="title"]', post) or self.page_title()
        author = str(post.get("author", ""))
        published = str(post.get("created-timestamp", ""))
        return SiteExtraction(
            content_html=content_html,
            variables=ExtractorVariables(
                title=title or None,
                author=author or None,
                site=site,
                published=self.format_date(published) or None,
            ),
            extracted_content={"post_id": self._post_id(), "subreddit": subreddit},
        )
