"""
YouTube watch pages.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List
from urllib.parse import parse_qs, urlparse

from ..models import ExtractorVariables, SiteExtraction
from .base import BaseSiteExtractor

_VIDEO_ID = re.compile(r"^[A-Za-z0-9_-]{6,}$")


class YouTubeExtractor(BaseSiteExtractor):
    """Embeds the video and keeps its description."""

    def can_extract(self) -> bool:
        return bool(self.video_id())

    def video_id(self) -> str:
        parsed = urlparse(self.url)
        host = (parsed.hostname or "").lower()
        if host.endswith("youtu.be"):
            candidate = parsed.path.strip("/").split("/")[0]
        elif parsed.path.startswith(("/shorts/", "/embed/", "/live/")):
            candidate = parsed.path.split("/")[2]
        else:
            candidate = (parse_qs(parsed.query).get("v") or [""])[0]
        return candidate if _VIDEO_ID.match(candidate or "") else ""

    def _video_object(self) -> Dict[str, Any]:
        data = self.schema_org_data
        items: List[Any] = data if isinstance(data, list) else [data]
        for item in items:
            if isinstance(item, dict) and item.get("@type") == "VideoObject":
                return item
        return {}

    def _meta(self, key: str) -> str:
        element = self.select_one(f'meta[property="{key}"], meta[name="{key}"]')
        return str(element.get("content", "")).strip() if element is not None else ""

    def extract(self) -> SiteExtraction:
        video_id = self.video_id()
        video = self._video_object()

        description = str(video.get("description") or "") or self._meta("og:description")
        paragraphs = "".join(
            f"<p>{self.escape(block).replace(chr(10), '<br>')}</p>"
            for block in re.split(r"\n{2,}", description.strip())
            if block.strip()
        )
        embed = (
            f'<iframe width="560" height="315" src="https://www.youtube.com/embed/{video_id}" '
            f'title="YouTube video player" allowfullscreen></iframe>'
        )

        author = ""
        video_author = video.get("author")
        if isinstance(video_author, dict):
            author = str(video_author.get("name") or "")
        elif isinstance(video_author, str):
            author = video_author
        if not author:
            author = self.text_of('[itemprop="author"] [itemprop="name"], #owner #channel-name a')
        if not author:
            link = self.select_one('link[itemprop="name"][content]')
            author = str(link["content"]) if link is not None else ""

        title = str(video.get("name") or "") or self._meta("og:title") or self.page_title()
        published = str(video.get("uploadDate") or "") or self._meta("datePublished")
        return SiteExtraction(
            content_html=f'<div class="youtube">{embed}{paragraphs}</div>',
            variables=ExtractorVariables(
                title=title or None,
                author=author or None,
                site="YouTube",
                published=self.format_date(published) or None,
                description=description[:200].strip() or None,
            ),
            extracted_content={"video_id": video_id},
        )
