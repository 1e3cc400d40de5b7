"""
Site extractor dispatch with a per-hostname cache.

Maps URLs to :class:`BaseSiteExtractor` implementations. A mapping pattern is
either an exact hostname or a compiled regex matched against the full URL;
exact hostnames are consulted first. A matched extractor is only used when
its ``can_extract()`` accepts the document.
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Pattern, Sequence, Type, Union
from urllib.parse import urlparse

import structlog
from bs4 import BeautifulSoup

from .sites import (
    BaseSiteExtractor,
    ChatGPTExtractor,
    ClaudeExtractor,
    GitHubExtractor,
    HackerNewsExtractor,
    RedditExtractor,
    TwitterExtractor,
    YouTubeExtractor,
)

logger = structlog.get_logger(__name__)

UrlPattern = Union[str, Pattern[str]]


@dataclass(frozen=True)
class ExtractorMapping:
    """An ordered list of URL patterns bound to one extractor class."""

    patterns: Sequence[UrlPattern]
    extractor: Type[BaseSiteExtractor]


def normalize_hostname(hostname: str) -> str:
    host = hostname.lower().rstrip(".")
    if host.startswith("www."):
        host = host[4:]
    return host


class ExtractorRegistry:
    """
    Resolves the site extractor for a document.

    Results are cached per normalized hostname. A positive entry stores the
    extractor class, which is re-instantiated for each document without
    probing ``can_extract()`` again; a negative entry stores ``None``.
    URLs without a parseable hostname are cached as ``None`` under the
    empty key. Concurrent first lookups for a host may both compute the
    answer; the last write wins.
    """

    def __init__(self, mappings: Optional[Sequence[ExtractorMapping]] = None) -> None:
        self._mappings: List[ExtractorMapping] = list(mappings or [])
        self._domain_cache: Dict[str, Optional[Type[BaseSiteExtractor]]] = {}
        self._lock = threading.Lock()
        self.logger = logger.bind(component="ExtractorRegistry")

    @property
    def mappings(self) -> List[ExtractorMapping]:
        return list(self._mappings)

    def register(self, mapping: ExtractorMapping) -> None:
        """Append a mapping. Cached decisions are kept; call :meth:`clear_cache` to re-evaluate."""
        with self._lock:
            self._mappings.append(mapping)

    def clear_cache(self) -> None:
        with self._lock:
            self._domain_cache.clear()

    def _cached(self, key: str) -> tuple[bool, Optional[Type[BaseSiteExtractor]]]:
        with self._lock:
            if key in self._domain_cache:
                return True, self._domain_cache[key]
        return False, None

    def _store(self, key: str, extractor: Optional[Type[BaseSiteExtractor]]) -> None:
        with self._lock:
            self._domain_cache[key] = extractor

    def _candidates(self, hostname: str, url: str) -> List[Type[BaseSiteExtractor]]:
        """Extractor classes whose patterns match, exact hostnames first."""
        with self._lock:
            mappings = list(self._mappings)

        for mapping in mappings:
            for pattern in mapping.patterns:
                if isinstance(pattern, str) and normalize_hostname(pattern) == hostname:
                    return [mapping.extractor]

        candidates: List[Type[BaseSiteExtractor]] = []
        for mapping in mappings:
            for pattern in mapping.patterns:
                if not isinstance(pattern, str) and pattern.search(url):
                    candidates.append(mapping.extractor)
                    break
        return candidates

    def find_extractor(
        self,
        document: BeautifulSoup,
        url: str,
        schema_org_data: Any = None,
    ) -> Optional[BaseSiteExtractor]:
        """
        Return a ready extractor instance for ``url``, or ``None``.

        Args:
            document: Parsed page the extractor will read from
            url: Page URL used for matching
            schema_org_data: JSON-LD data handed to the extractor

        Returns:
            An instance whose ``can_extract()`` accepted the document on the
            first lookup for this host, or ``None``
        """
        try:
            hostname = normalize_hostname(urlparse(url).hostname or "")
        except ValueError:
            hostname = ""

        if not hostname:
            self.logger.debug("Invalid URL for extractor lookup", url=url)
            self._store("", None)
            return None

        hit, cached = self._cached(hostname)
        if hit:
            return cached(document, url, schema_org_data) if cached is not None else None

        for extractor_class in self._candidates(hostname, url):
            try:
                extractor = extractor_class(document, url, schema_org_data)
                accepted = extractor.can_extract()
            except Exception as e:
                self.logger.warning(
                    "Site extractor probe failed",
                    extractor=extractor_class.__name__,
                    url=url,
                    error=str(e),
                )
                continue
            if accepted:
                self._store(hostname, extractor_class)
                self.logger.debug("Site extractor selected", extractor=extractor_class.__name__, host=hostname)
                return extractor

        self._store(hostname, None)
        return None


DEFAULT_MAPPINGS = [
    ExtractorMapping(["github.com", re.compile(r"^https?://(?:www\.)?github\.com/")], GitHubExtractor),
    ExtractorMapping(
        ["twitter.com", "x.com", "mobile.twitter.com", re.compile(r"^https?://(?:[\w-]+\.)?(?:twitter|x)\.com/")],
        TwitterExtractor,
    ),
    ExtractorMapping(
        ["reddit.com", "old.reddit.com", "new.reddit.com", re.compile(r"^https?://(?:[\w-]+\.)?reddit\.com/")],
        RedditExtractor,
    ),
    ExtractorMapping(["news.ycombinator.com"], HackerNewsExtractor),
    ExtractorMapping(
        ["youtube.com", "m.youtube.com", "youtu.be", re.compile(r"^https?://(?:[\w-]+\.)?youtube\.com/")],
        YouTubeExtractor,
    ),
    ExtractorMapping(["chatgpt.com", "chat.openai.com"], ChatGPTExtractor),
    ExtractorMapping(["claude.ai"], ClaudeExtractor),
]

default_registry = ExtractorRegistry(DEFAULT_MAPPINGS)
