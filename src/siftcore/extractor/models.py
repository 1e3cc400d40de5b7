"""
Data models for extraction results.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..metadata.models import MetaTag


class RemovalLevel(str, Enum):
    """Clutter-removal aggressiveness for one extraction pass."""

    AGGRESSIVE = "aggressive"
    RELAXED = "relaxed"


@dataclass(slots=True)
class ExtractorVariables:
    """Metadata overrides a site extractor may supply."""

    title: Optional[str] = None
    author: Optional[str] = None
    site: Optional[str] = None
    published: Optional[str] = None
    description: Optional[str] = None

    def as_dict(self) -> Dict[str, str]:
        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass(slots=True)
class SiteExtraction:
    """Output of a site-specific extractor."""

    content_html: str = ""
    variables: ExtractorVariables = field(default_factory=ExtractorVariables)
    extracted_content: Dict[str, str] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class SiftResult:
    """Result of one parse call. Immutable once returned."""

    title: str
    description: str
    domain: str
    favicon: str
    image: str
    published: str
    author: str
    site: str
    schema_org_data: Any
    content: str
    word_count: int
    parse_time_ms: int
    content_markdown: Optional[str] = None
    extractor_type: Optional[str] = None
    extractor_variables: Dict[str, str] = field(default_factory=dict)
    extracted_content: Dict[str, str] = field(default_factory=dict)
    meta_tags: List[MetaTag] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate the result."""
        if self.word_count < 0:
            raise ValueError("word_count must be non-negative")

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.extractor_type is None:
            data.pop("extractor_type")
        if self.content_markdown is None:
            data.pop("content_markdown")
        return data
