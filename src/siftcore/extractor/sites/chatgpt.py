"""
Shared ChatGPT conversations.
"""

from __future__ import annotations

import copy
from typing import List

from ..models import ExtractorVariables, SiteExtraction
from .base import BaseSiteExtractor

TURN_SELECTOR = 'article[data-testid^="conversation-turn-"]'
ROLE_SELECTOR = "[data-message-author-role]"
ROLE_LABELS = {"user": "You", "assistant": "ChatGPT"}


class ChatGPTExtractor(BaseSiteExtractor):
    """One block per message, labelled with the speaker."""

    def can_extract(self) -> bool:
        return self.select_one(TURN_SELECTOR) is not None

    def _messages(self) -> List[str]:
        messages: List[str] = []
        for turn in self.select(TURN_SELECTOR):
            message = self.select_one(ROLE_SELECTOR, turn)
            if message is None:
                continue
            role = str(message.get("data-message-author-role", ""))
            content = self.select_one(".markdown, .whitespace-pre-wrap", message)
            content = copy.copy(content if content is not None else message)
            for hidden in content.select(".sr-only"):
                hidden.decompose()
            body = content.decode_contents().strip()
            if not body:
                continue
            label = ROLE_LABELS.get(role, role.title() or "Message")
            messages.append(
                f'<div class="message message-{self.escape(role or "unknown")}">'
                f"<p><strong>{self.escape(label)}</strong></p>{body}</div>"
            )
        return messages

    def extract(self) -> SiteExtraction:
        title = self.page_title()
        if title.startswith("ChatGPT - "):
            title = title[len("ChatGPT - "):]
        return SiteExtraction(
            content_html="".join(self._messages()),
            variables=ExtractorVariables(title=title or None, site="ChatGPT"),
        )
