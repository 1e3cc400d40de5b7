"""
Base class for site-specific extractors.
"""

from __future__ import annotations

import html
import re
from abc import ABC, abstractmethod
from typing import Any, List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

from ..models import SiteExtraction


class BaseSiteExtractor(ABC):
    """A publisher-specific strategy that bypasses generic content scoring.

    Subclasses are constructed only after their URL pattern matched, then
    asked :meth:`can_extract` before :meth:`extract` is used. ``extract`` must
    not raise: missing markup yields empty ``content_html``.
    """

    def __init__(self, document: BeautifulSoup, url: str, schema_org_data: Any = None) -> None:
        self.document = document
        self.url = url
        self.schema_org_data = schema_org_data

    @abstractmethod
    def can_extract(self) -> bool:
        """Whether the document carries this site's structural fingerprint."""

    @abstractmethod
    def extract(self) -> SiteExtraction:
        """Produce content HTML and metadata overrides for the document."""

    @property
    def extractor_type(self) -> str:
        name = type(self).__name__
        if name.endswith("Extractor"):
            name = name[: -len("Extractor")]
        return name.lower()

    # --- helpers shared by subclasses ---------------------------------------

    @property
    def path_segments(self) -> List[str]:
        return [segment for segment in urlparse(self.url).path.split("/") if segment]

    def select_one(self, selector: str, scope: Optional[Tag] = None) -> Optional[Tag]:
        return (scope if scope is not None else self.document).select_one(selector)

    def select(self, selector: str, scope: Optional[Tag] = None) -> List[Tag]:
        return list((scope if scope is not None else self.document).select(selector))

    def text_of(self, selector: str, scope: Optional[Tag] = None) -> str:
        element = self.select_one(selector, scope)
        return element.get_text(" ", strip=True) if element is not None else ""

    def inner_html(self, selector: str, scope: Optional[Tag] = None) -> str:
        element = self.select_one(selector, scope)
        return element.decode_contents().strip() if element is not None else ""

    def page_title(self) -> str:
        return self.document.title.get_text(strip=True) if self.document.title is not None else ""

    @staticmethod
    def escape(text: str) -> str:
        return html.escape(text, quote=True)

    @staticmethod
    def format_date(value: str) -> str:
        """``2024-01-15T10:00:00Z`` -> ``2024-01-15``; anything else passes through."""
        match = re.match(r"^(\d{4}-\d{2}-\d{2})", value or "")
        return match.group(1) if match else (value or "")
