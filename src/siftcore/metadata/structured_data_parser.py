"""
Structured Data Parser - JSON-LD, meta tags and schema property lookup.

Collects the raw inputs the metadata extractor works from: the page's
Schema.org JSON-LD blocks, its ``<meta>`` tags, and a path-based lookup over
the (arbitrarily nested) JSON-LD values.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Union

from bs4 import BeautifulSoup

from .models import MetaTag

logger = logging.getLogger(__name__)

SchemaValue = Union[str, int, float, bool, None, Dict[str, Any], List[Any]]

_INDEX_SEGMENT = re.compile(r"^\[(\d+)\]$")
_WILDCARD_SEGMENT = "[]"
_JSON_NOISE = re.compile(r"^\s*(?:<!\[CDATA\[|<!--|/\*.*?\*/)|(?:\]\]>|-->|/\*.*?\*/)\s*$", re.S)


class SchemaOrgParser:
    """Parser for Schema.org structured data."""

    @staticmethod
    def parse_json_ld(soup: BeautifulSoup) -> List[Dict[str, Any]]:
        """Parse every JSON-LD block, flattening ``@graph`` containers.

        Blocks that fail to decode are logged and skipped.
        """
        json_ld_data: List[Dict[str, Any]] = []

        for script in soup.find_all("script", type="application/ld+json"):
            json_text = _JSON_NOISE.sub("", script.string or script.get_text() or "").strip()
            if not json_text:
                continue
            try:
                data = json.loads(json_text)
            except json.JSONDecodeError as e:
                logger.warning(f"Invalid JSON-LD: {e}")
                continue

            items = data if isinstance(data, list) else [data]
            for item in items:
                if isinstance(item, dict) and isinstance(item.get("@graph"), list):
                    json_ld_data.extend(node for node in item["@graph"] if isinstance(node, dict))
                elif isinstance(item, dict):
                    json_ld_data.append(item)

        return json_ld_data


class MetaTagParser:
    """Parser for ``<meta>`` name/property/content triples."""

    @staticmethod
    def parse(soup: BeautifulSoup) -> List[MetaTag]:
        tags: List[MetaTag] = []
        for meta in soup.find_all("meta"):
            name = meta.get("name")
            prop = meta.get("property")
            content = meta.get("content")
            if content is None or (name is None and prop is None):
                continue
            tags.append(MetaTag(name=name, property=prop, content=str(content)))
        return tags


def get_meta_content(meta_tags: List[MetaTag], attribute: str, value: str) -> str:
    """Content of the first meta tag whose ``name``/``property`` equals ``value`` (case-insensitive)."""
    wanted = value.lower()
    for tag in meta_tags:
        key = tag.name if attribute == "name" else tag.property
        if key is not None and key.lower() == wanted:
            return tag.content.strip()
    return ""


def _search(data: SchemaValue, path: List[str], exact: bool) -> List[str]:
    if isinstance(data, str):
        return [data] if not path else []
    if isinstance(data, (int, float)) and not isinstance(data, bool):
        return [str(data)] if not path else []
    if data is None or isinstance(data, bool):
        return []

    if isinstance(data, list):
        if path:
            index = _INDEX_SEGMENT.match(path[0])
            if index:
                position = int(index.group(1))
                if position < len(data) and data[position]:
                    return _search(data[position], path[1:], exact)
                return []
            if path[0] == _WILDCARD_SEGMENT:
                return [match for item in data for match in _search(item, path[1:], exact)]
        elif all(isinstance(item, (str, int, float)) for item in data):
            return [str(item) for item in data]
        return [match for item in data for match in _search(item, path, exact)]

    if not path:
        name = data.get("name")
        return [str(name)] if isinstance(name, str) and name else []

    current, remaining = path[0], path[1:]
    if current in data:
        return _search(data[current], remaining, True)

    if not exact:
        nested: List[str] = []
        for value in data.values():
            if isinstance(value, (dict, list)):
                nested.extend(_search(value, path, False))
        if nested:
            return nested
    return []


def get_schema_property(schema_org_data: Any, path: str, default: str = "") -> str:
    """Look up a dotted ``path`` in JSON-LD data.

    Segments may be ``[N]`` (array index) or ``[]`` (every array item). An
    exact walk from the top is tried first, then a fuzzy search that lets the
    path start at any nesting depth. Matches are joined with ``", "``.
    """
    if not schema_org_data:
        return default

    segments = path.split(".")
    try:
        results = _search(schema_org_data, segments, True)
        if not results:
            results = _search(schema_org_data, segments, False)
    except RecursionError:
        logger.warning("Schema.org data nested too deeply while looking up %s", path)
        return default

    results = [result for result in results if result]
    return ", ".join(results) if results else default
