"""
Shared Claude conversations.
"""

from __future__ import annotations

from typing import List

from ..models import ExtractorVariables, SiteExtraction
from .base import BaseSiteExtractor

MESSAGE_SELECTOR = '[data-testid="user-message"], .font-claude-message'


class ClaudeExtractor(BaseSiteExtractor):
    def can_extract(self) -> bool:
        return self.select_one(MESSAGE_SELECTOR) is not None

    def _messages(self) -> List[str]:
        messages: List[str] = []
        for message in self.select(MESSAGE_SELECTOR):
            is_user = message.get("data-testid") == "user-message"
            body = message.decode_contents().strip()
            if not body:
                continue
            label = "You" if is_user else "Claude"
            role = "user" if is_user else "assistant"
            messages.append(f'<div class="message message-{role}"><p><strong>{label}</strong></p>{body}</div>')
        return messages

    def extract(self) -> SiteExtraction:
        title = self.page_title()
        if title.endswith(" - Claude"):
            title = title[: -len(" - Claude")]
        return SiteExtraction(
            content_html="".join(self._messages()),
            variables=ExtractorVariables(title=title or None, site="Claude"),
        )
