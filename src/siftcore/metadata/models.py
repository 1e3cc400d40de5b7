"""
Data models for page metadata.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(slots=True, frozen=True)
class MetaTag:
    """One ``<meta>`` element, keyed by ``name`` or ``property``."""

    name: Optional[str]
    property: Optional[str]
    content: str


@dataclass(slots=True)
class PageMetadata:
    """Title, author and friends, resolved from meta tags, JSON-LD and the DOM."""

    title: str = ""
    description: str = ""
    domain: str = ""
    favicon: str = ""
    image: str = ""
    published: str = ""
    author: str = ""
    site: str = ""
    schema_org_data: Any = field(default_factory=list)
