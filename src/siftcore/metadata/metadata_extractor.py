"""
Main Metadata Extractor - page title, author, site, dates and images.

Each field is resolved through a fixed precedence of meta tags, Schema.org
JSON-LD properties and DOM fallbacks. Nothing here raises for odd markup; a
field that cannot be resolved is the empty string.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterable, List, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from .models import MetaTag, PageMetadata
from .structured_data_parser import get_meta_content, get_schema_property

logger = logging.getLogger(__name__)

MAX_AUTHORS = 10

DOM_AUTHOR_SELECTORS = ['[itemprop="author"]', ".author", '[href*="author"]', ".authors a"]
SITE_LINK_SELECTOR = 'header a, nav a, [role="banner"] a, .site-title a, .logo a'

_TITLE_SPLITS = [
    re.compile(r"^(.+?)\s*[–—]\s*(.+)$"),
    re.compile(r"^(.+?)\s*\|\s*(.+)$"),
    re.compile(r"^(.+?)\s*-\s*(.+)$"),
]
_SEPARATORS = r"[|\-–—]"


def _normalize(text: str) -> str:
    return re.sub(r"\s+", " ", re.sub(r"[^\w\s]", "", text.lower())).strip()


def _first(*candidates: Callable[[], str]) -> str:
    """Evaluate candidates lazily and return the first non-empty value."""
    for candidate in candidates:
        value = candidate()
        if value:
            return value
    return ""


def _hostname(url: str) -> str:
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        logger.warning("Failed to parse URL: %s", url)
        return ""
    return re.sub(r"^www\.", "", host)


def _main_domain_label(domain: str) -> str:
    parts = domain.split(".")
    if len(parts) >= 2:
        label = parts[-2] or parts[-1]
        if label and label != "www":
            return label
    return ""


def _strip_affix(title: str, name: str) -> str:
    """Remove ``name`` when it trails or leads ``title`` behind a separator."""
    escaped = re.escape(name)
    for pattern in (rf"\s*{_SEPARATORS}\s*{escaped}\s*$", rf"^\s*{escaped}\s*{_SEPARATORS}\s*"):
        regex = re.compile(pattern, re.I)
        if regex.search(title):
            return regex.sub("", title)
    return title


def _split_names(values: Iterable[str]) -> List[str]:
    names: List[str] = []
    for value in values:
        for part in value.split(","):
            cleaned = part.strip().rstrip(",").strip()
            if cleaned:
                names.append(cleaned)
    return names


def _dedupe(names: List[str]) -> List[str]:
    seen = []
    for name in names:
        if name not in seen:
            seen.append(name)
    return seen[:MAX_AUTHORS]


class MetadataExtractor:
    """Resolves page-level metadata with a fixed per-field precedence."""

    def extract(
        self,
        document: BeautifulSoup,
        schema_org_data: Any,
        meta_tags: List[MetaTag],
        url: str = "",
    ) -> PageMetadata:
        base_url = self._resolve_url(document, schema_org_data, meta_tags, url)
        domain = _hostname(base_url) if base_url else ""

        return PageMetadata(
            title=self.get_title(document, schema_org_data, meta_tags, domain),
            description=self.get_description(schema_org_data, meta_tags),
            domain=domain,
            favicon=self.get_favicon(document, base_url, meta_tags),
            image=self.get_image(schema_org_data, meta_tags),
            published=self.get_published(document, schema_org_data, meta_tags),
            author=self.get_author(document, schema_org_data, meta_tags),
            site=self.get_site(document, schema_org_data, meta_tags, domain),
            schema_org_data=schema_org_data,
        )

    # --- URL & domain -----------------------------------------------------

    @staticmethod
    def _resolve_url(document: BeautifulSoup, schema_org_data: Any, meta_tags: List[MetaTag], url: str) -> str:
        canonical = document.select_one('link[rel="canonical"][href]')
        base = document.select_one("base[href]")
        resolved = _first(
            lambda: url or "",
            lambda: get_meta_content(meta_tags, "property", "og:url"),
            lambda: get_meta_content(meta_tags, "property", "twitter:url"),
            lambda: get_meta_content(meta_tags, "name", "twitter:url"),
            lambda: get_schema_property(schema_org_data, "url"),
            lambda: get_schema_property(schema_org_data, "mainEntityOfPage.url"),
            lambda: get_schema_property(schema_org_data, "mainEntity.url"),
            lambda: get_schema_property(schema_org_data, "WebSite.url"),
            lambda: str(canonical["href"]) if canonical is not None else "",
            lambda: str(base["href"]) if base is not None else "",
        )
        # Schema lookups may join several urls
        return resolved.split(", ")[0].strip()

    # --- Fields -----------------------------------------------------------

    def get_title(
        self,
        document: BeautifulSoup,
        schema_org_data: Any,
        meta_tags: List[MetaTag],
        domain: str = "",
    ) -> str:
        raw_title = _first(
            lambda: get_meta_content(meta_tags, "property", "og:title"),
            lambda: get_meta_content(meta_tags, "name", "twitter:title"),
            lambda: get_schema_property(schema_org_data, "headline"),
            lambda: get_meta_content(meta_tags, "name", "title"),
            lambda: get_meta_content(meta_tags, "name", "sailthru.title"),
            lambda: document.title.get_text(strip=True) if document.title is not None else "",
        )
        return self.clean_title(raw_title, self.get_site(document, schema_org_data, meta_tags, domain), domain)

    @staticmethod
    def clean_title(title: str, site_name: str, domain: str = "") -> str:
        """Strip a site-name prefix or suffix from a page title."""
        if not title:
            return title

        extracted_site = site_name
        for pattern in _TITLE_SPLITS:
            match = pattern.match(title)
            if match:
                title_part, site_part = match.groups()
                if not site_name or _normalize(site_part) == _normalize(site_name):
                    extracted_site = site_part.strip()
                    title = title_part.strip()
                    break

        if extracted_site:
            title = _strip_affix(title, extracted_site)
            normalized_site = _normalize(extracted_site)
            if normalized_site and normalized_site in _normalize(title):
                title = _strip_affix(title, normalized_site)

        if domain and not extracted_site:
            label = _main_domain_label(domain)
            if label:
                title = _strip_affix(title, label)

        return title.strip()

    @staticmethod
    def get_description(schema_org_data: Any, meta_tags: List[MetaTag]) -> str:
        return _first(
            lambda: get_meta_content(meta_tags, "name", "description"),
            lambda: get_meta_content(meta_tags, "property", "description"),
            lambda: get_meta_content(meta_tags, "property", "og:description"),
            lambda: get_schema_property(schema_org_data, "description"),
            lambda: get_meta_content(meta_tags, "name", "twitter:description"),
            lambda: get_meta_content(meta_tags, "name", "sailthru.description"),
        )

    @staticmethod
    def get_image(schema_org_data: Any, meta_tags: List[MetaTag]) -> str:
        return _first(
            lambda: get_meta_content(meta_tags, "property", "og:image"),
            lambda: get_meta_content(meta_tags, "name", "twitter:image"),
            lambda: get_schema_property(schema_org_data, "image.url"),
            lambda: get_meta_content(meta_tags, "name", "sailthru.image.full"),
        )

    @staticmethod
    def get_favicon(document: BeautifulSoup, base_url: str, meta_tags: List[MetaTag]) -> str:
        from_meta = get_meta_content(meta_tags, "property", "og:image:favicon")
        if from_meta:
            return from_meta

        for link in document.find_all("link", href=True):
            rel = [token.lower() for token in (link.get("rel") or [])]
            if rel == ["icon"]:
                return str(link["href"])
        for link in document.find_all("link", href=True):
            rel = [token.lower() for token in (link.get("rel") or [])]
            if rel == ["shortcut", "icon"]:
                return str(link["href"])

        if base_url and urlparse(base_url).scheme in ("http", "https"):
            return urljoin(base_url, "/favicon.ico")
        return ""

    @staticmethod
    def get_published(document: BeautifulSoup, schema_org_data: Any, meta_tags: List[MetaTag]) -> str:
        def abbr_title() -> str:
            abbr = document.select_one('abbr[itemprop="datePublished"]')
            return str(abbr.get("title", "")).strip() if abbr is not None else ""

        def time_element() -> str:
            time = document.find("time")
            if time is None:
                return ""
            return str(time.get("datetime") or "").strip() or time.get_text(strip=True)

        return _first(
            lambda: get_schema_property(schema_org_data, "datePublished"),
            lambda: get_meta_content(meta_tags, "name", "publishDate"),
            lambda: get_meta_content(meta_tags, "property", "article:published_time"),
            abbr_title,
            time_element,
            lambda: get_meta_content(meta_tags, "name", "sailthru.date"),
        )

    @staticmethod
    def get_author(document: BeautifulSoup, schema_org_data: Any, meta_tags: List[MetaTag]) -> str:
        from_meta = _first(
            lambda: get_meta_content(meta_tags, "name", "sailthru.author"),
            lambda: get_meta_content(meta_tags, "property", "author"),
            lambda: get_meta_content(meta_tags, "name", "author"),
            lambda: get_meta_content(meta_tags, "name", "byl"),
            lambda: get_meta_content(meta_tags, "name", "authorList"),
        )
        if from_meta:
            return from_meta

        schema_authors = _first(
            lambda: get_schema_property(schema_org_data, "author.name"),
            lambda: get_schema_property(schema_org_data, "author.[].name"),
        )
        if schema_authors:
            names = _dedupe(_split_names([schema_authors]))
            if names:
                return ", ".join(names)

        dom_names: List[str] = []
        for selector in DOM_AUTHOR_SELECTORS:
            for element in document.select(selector):
                dom_names.extend(
                    name for name in _split_names([element.get_text(" ", strip=True)])
                    if name.lower() not in ("author", "authors")
                )
        if dom_names:
            return ", ".join(_dedupe(dom_names))

        return _first(
            lambda: get_meta_content(meta_tags, "name", "copyright"),
            lambda: get_schema_property(schema_org_data, "copyrightHolder.name"),
            lambda: get_meta_content(meta_tags, "property", "og:site_name"),
            lambda: get_schema_property(schema_org_data, "publisher.name"),
            lambda: get_schema_property(schema_org_data, "sourceOrganization.name"),
            lambda: get_schema_property(schema_org_data, "isPartOf.name"),
            lambda: get_meta_content(meta_tags, "name", "twitter:creator"),
            lambda: get_meta_content(meta_tags, "name", "application-name"),
        )

    def get_site(
        self,
        document: BeautifulSoup,
        schema_org_data: Any,
        meta_tags: List[MetaTag],
        domain: str = "",
    ) -> str:
        from_meta = _first(
            lambda: get_schema_property(schema_org_data, "publisher.name"),
            lambda: get_meta_content(meta_tags, "property", "og:site_name"),
            lambda: get_schema_property(schema_org_data, "WebSite.name"),
            lambda: get_schema_property(schema_org_data, "sourceOrganization.name"),
            lambda: get_meta_content(meta_tags, "name", "copyright"),
            lambda: get_schema_property(schema_org_data, "copyrightHolder.name"),
            lambda: get_schema_property(schema_org_data, "isPartOf.name"),
            lambda: get_meta_content(meta_tags, "name", "application-name"),
            lambda: self.get_author(document, schema_org_data, meta_tags),
        )
        if from_meta:
            return from_meta

        label = _main_domain_label(domain) if domain else ""
        if label:
            return label

        for link in document.select(SITE_LINK_SELECTOR):
            text = link.get_text(strip=True)
            if text and len(text) < 50:
                return text
        return ""


def extract_metadata(
    document: BeautifulSoup,
    schema_org_data: Any,
    meta_tags: List[MetaTag],
    url: Optional[str] = None,
) -> PageMetadata:
    """Convenience wrapper around :class:`MetadataExtractor`."""
    return MetadataExtractor().extract(document, schema_org_data, meta_tags, url or "")
