"""
GitHub issue and pull request pages.
"""

from __future__ import annotations

from typing import List, Optional

from bs4 import Tag

from ..models import ExtractorVariables, SiteExtraction
from .base import BaseSiteExtractor

GITHUB_INDICATORS = [
    'meta[name="expected-hostname"][content="github.com"]',
    'meta[name="octolytics-url"]',
    'meta[name="github-keyboard-shortcuts"]',
    ".js-header-wrapper",
    "#js-repo-pjax-container",
]
PAGE_INDICATORS = [
    '[data-testid="issue-metadata-sticky"]',
    '[data-testid="issue-title"]',
    ".js-issue-title",
    ".gh-header-title",
]
COMMENT_AUTHOR_SELECTOR = (
    'a[class*="AuthorLink"], a[data-testid="avatar-link"], .author, [data-testid="issue-body-header-author"]'
)


class GitHubExtractor(BaseSiteExtractor):
    """Issue body plus timeline comments, each with its author and date."""

    def can_extract(self) -> bool:
        has_site = any(self.select_one(selector) is not None for selector in GITHUB_INDICATORS)
        has_page = any(self.select_one(selector) is not None for selector in PAGE_INDICATORS)
        return has_site and has_page

    def _repository(self) -> tuple[str, str, str]:
        segments = self.path_segments
        owner = segments[0] if len(segments) > 0 else ""
        repository = segments[1] if len(segments) > 1 else ""
        number = segments[3] if len(segments) > 3 and segments[2] in ("issues", "pull") else ""
        return owner, repository, number

    def _render_entry(self, author: str, published: str, body: str, verb: Optional[str] = None) -> str:
        header: List[str] = []
        if author:
            header.append(f"<strong>{self.escape(author)}</strong>")
        if published:
            date = self.format_date(published)
            header.append(f"{verb} on {date}" if verb else date)
        heading = f'<p class="comment-header">{" ".join(header)}</p>' if header else ""
        return f'<div class="comment">{heading}{body}</div>'

    def _issue_body(self) -> str:
        container = self.select_one('[data-testid="issue-viewer-issue-container"]')
        if container is None:
            container = self.select_one(".js-discussion .timeline-comment")
        if container is None:
            return ""
        author = self.text_of('[data-testid="issue-body-header-author"], .author', container)
        time = self.select_one("relative-time[datetime], time[datetime]", container)
        body = self.inner_html(".markdown-body, .comment-body", container)
        published = str(time["datetime"]) if time is not None else ""
        return self._render_entry(author, published, body, "opened this issue")

    def _comments(self) -> List[str]:
        rendered: List[str] = []
        for wrapper in self.select("[data-wrapper-timeline-id], .js-timeline-item .timeline-comment"):
            comment: Optional[Tag] = self.select_one(".react-issue-comment", wrapper)
            if comment is None:
                comment = wrapper
            body = self.inner_html(".markdown-body, .comment-body", comment)
            if not body:
                continue
            author = self.text_of(COMMENT_AUTHOR_SELECTOR, comment)
            time = self.select_one("relative-time[datetime], time[datetime]", comment)
            published = str(time["datetime"]) if time is not None else ""
            rendered.append(self._render_entry(author, published, body))
        return rendered

    def extract(self) -> SiteExtraction:
        owner, repository, number = self._repository()
        parts = [self._issue_body()]
        comments = self._comments()
        if comments:
            parts.append('<hr><div class="comments">' + "".join(comments) + "</div>")

        content_html = "".join(part for part in parts if part)
        site = f"GitHub - {owner}/{repository}" if owner and repository else "GitHub"
        return SiteExtraction(
            content_html=content_html,
            variables=ExtractorVariables(
                title=self.page_title() or self.text_of('[data-testid="issue-title"]'),
                author=self.text_of('[data-testid="issue-body-header-author"]'),
                site=site,
            ),
            extracted_content={"owner": owner, "repository": repository, "issue_number": number},
        )
