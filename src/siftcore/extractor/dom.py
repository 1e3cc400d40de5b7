"""
Small helpers over BeautifulSoup trees shared by the extraction passes.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

_CJK_PATTERN = re.compile(
    r"[\u3040-\u309f\u30a0-\u30ff\u3400-\u4dbf\u4e00-\u9fff\uac00-\ud7af\uf900-\ufaff\uff66-\uff9f]"
)
_WHITESPACE = re.compile(r"\s+")


def count_words(text: str) -> int:
    """Count words, treating each CJK character as its own word."""
    if not text:
        return 0
    cjk = len(_CJK_PATTERN.findall(text))
    rest = _CJK_PATTERN.sub(" ", text)
    return cjk + len(rest.split())


def normalize_text(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def text_of(element: Tag) -> str:
    return element.get_text(" ", strip=True)


def class_and_id(element: Tag) -> str:
    """Lower-cased class tokens and id joined into one searchable string."""
    classes = element.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return f"{' '.join(classes)} {element.get('id') or ''}".lower()


def link_density(element: Tag) -> float:
    text_length = len(element.get_text())
    if text_length == 0:
        return 0.0
    link_length = sum(len(a.get_text()) for a in element.find_all("a"))
    return min(link_length / text_length, 1.0)


def is_attached(element: Tag, root: Tag) -> bool:
    """True when ``element`` is ``root`` or still sits somewhere below it."""
    if element is root:
        return True
    return any(parent is root for parent in element.parents)


def contains(ancestor: Tag, element: Tag) -> bool:
    return element is ancestor or any(parent is ancestor for parent in element.parents)


def text_before(element: Tag, root: Tag) -> str:
    """Whitespace-normalized text that precedes ``element`` inside ``root``."""
    parts = []
    for node in element.previous_elements:
        if node is root:
            break
        if isinstance(node, NavigableString) and not isinstance(node, Comment) and node.strip():
            parts.append(str(node))
    return normalize_text(" ".join(reversed(parts)))


def serialize(root: Tag | BeautifulSoup) -> str:
    """Outer HTML of a content root, or inner HTML for document-level roots."""
    if isinstance(root, BeautifulSoup) or root.name in ("body", "html"):
        return root.decode_contents().strip()
    return str(root).strip()
