"""
X / Twitter status pages.
"""

from __future__ import annotations

from typing import List

from bs4 import Tag

from ..models import ExtractorVariables, SiteExtraction
from .base import BaseSiteExtractor

TWEET_SELECTOR = 'article[data-testid="tweet"]'
CONVERSATION_SELECTOR = '[aria-label="Timeline: Conversation"]'


class TwitterExtractor(BaseSiteExtractor):
    """The main post, its self-thread, and any visible replies."""

    def can_extract(self) -> bool:
        return self.select_one(TWEET_SELECTOR) is not None

    def _tweets(self) -> List[Tag]:
        scope = self.select_one(CONVERSATION_SELECTOR)
        return self.select(TWEET_SELECTOR, scope)

    def _author(self, tweet: Tag) -> str:
        name = self.select_one('[data-testid="User-Name"]', tweet)
        if name is None:
            return ""
        handle = next((link for link in name.find_all("a") if link.get_text(strip=True).startswith("@")), None)
        if handle is not None:
            return handle.get_text(strip=True)
        return name.get_text(" ", strip=True)

    def _render(self, tweet: Tag) -> str:
        text = self.inner_html('[data-testid="tweetText"]', tweet)
        images = "".join(
            f'<img src="{self.escape(str(img["src"]))}" alt="{self.escape(str(img.get("alt", "")))}">'
            for img in self.select('[data-testid="tweetPhoto"] img[src]', tweet)
        )
        author = self._author(tweet)
        time = self.select_one("time[datetime]", tweet)
        parts = []
        if author:
            parts.append(f"<strong>{self.escape(author)}</strong>")
        if time is not None:
            parts.append(self.format_date(str(time["datetime"])))
        header = f'<p class="tweet-header">{" ".join(parts)}</p>' if parts else ""
        return f'<div class="tweet">{header}<p>{text}</p>{images}</div>'

    def extract(self) -> SiteExtraction:
        tweets = self._tweets()
        if not tweets:
            return SiteExtraction(variables=ExtractorVariables(site="X (Twitter)"))

        author = self._author(tweets[0])
        thread = [tweets[0]]
        replies: List[Tag] = []
        for tweet in tweets[1:]:
            if not replies and self._author(tweet) == author:
                thread.append(tweet)
            else:
                replies.append(tweet)

        content_html = "".join(self._render(tweet) for tweet in thread)
        if replies:
            content_html += '<hr><div class="replies">' + "".join(self._render(t) for t in replies) + "</div>"

        time = self.select_one("time[datetime]", tweets[0])
        label = "Thread" if len(thread) > 1 else "Post"
        return SiteExtraction(
            content_html=content_html,
            variables=ExtractorVariables(
                title=f"{label} by {author}" if author else label,
                author=author,
                site="X (Twitter)",
                published=self.format_date(str(time["datetime"])) if time is not None else None,
            ),
            extracted_content={"post_id": self._post_id()},
        )

    def _post_id(self) -> str:
        segments = self.path_segments
        if "status" in segments:
            index = segments.index("status")
            if index + 1 < len(segments):
                return segments[index + 1]
        return ""
