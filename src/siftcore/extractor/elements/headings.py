"""
Heading rules: level normalization, permalink cleanup and title de-duplication.
"""

from __future__ import annotations

import re
from typing import Optional

from bs4 import Comment, NavigableString, Tag

from ..constants import BYLINE_PATTERN, DATE_PATTERN
from ..dom import count_words, normalize_text, text_before

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]

_PERMALINK_SYMBOLS = {"", "#", "¶", "§", "🔗", "link", "permalink"}
_NON_WORD = re.compile(r"[^\w\s]", re.UNICODE)
# Longest run of byline or date text allowed above a leading title heading
MAX_LEAD_IN_WORDS = 12


def comparable_text(text: str) -> str:
    """Lower-case, punctuation-free, whitespace-collapsed text for comparisons."""
    return normalize_text(_NON_WORD.sub(" ", text)).lower()


def _is_permalink(anchor: Tag) -> bool:
    href = str(anchor.get("href", ""))
    if not href.startswith("#") and href:
        return False
    return normalize_text(anchor.get_text()).lower() in _PERMALINK_SYMBOLS


def simplify_heading(heading: Tag) -> Tag:
    """Reduce a heading to its plain text.

    Buttons, icons and permalink anchors are dropped; every other inline
    element is replaced by its text.
    """
    for noise in heading.find_all(["button", "svg"]):
        noise.decompose()
    for anchor in heading.find_all("a"):
        if _is_permalink(anchor):
            anchor.decompose()

    text = normalize_text(heading.get_text())
    plain = len(heading.contents) == 1 and isinstance(heading.contents[0], NavigableString)
    if not plain or str(heading.contents[0]) != text:
        heading.clear()
        heading.append(text)
    return heading


def _only_lead_in_before(heading: Tag, root: Tag) -> bool:
    """True when nothing, or only a short byline or date line, precedes ``heading``."""
    text = text_before(heading, root)
    if not text:
        return True
    if count_words(text) > MAX_LEAD_IN_WORDS:
        return False
    return bool(BYLINE_PATTERN.search(text) or DATE_PATTERN.search(text))


def normalize_headings(root: Tag, title: Optional[str] = None) -> int:
    """Map ``h1`` to ``h2``, simplify every heading and drop a leading title copy.

    The first heading is removed only when it matches ``title`` and at most a
    short byline or date line precedes it inside ``root``; any other prose
    above it means the heading is a later repeat and it stays. Returns the
    number of headings removed (0 or 1).
    """
    for h1 in root.find_all("h1"):
        h1.name = "h2"

    headings = root.find_all(HEADING_TAGS)
    for heading in headings:
        simplify_heading(heading)

    if not headings or not title:
        return 0

    first = headings[0]
    wanted = comparable_text(title)
    if wanted and comparable_text(first.get_text()) == wanted and _only_lead_in_before(first, root):
        first.extract()
        return 1
    return 0


def remove_trailing_headings(root: Tag) -> int:
    """Remove headings that introduce nothing.

    Walks the root's descendants in reverse document order; a heading is kept
    only once some non-heading text has been seen after it.
    """
    removed = 0
    seen_content = False
    for node in reversed(list(root.descendants)):
        if isinstance(node, Tag):
            if node.name in HEADING_TAGS:
                if not seen_content:
                    node.extract()
                    removed += 1
            elif node.name in ("img", "iframe", "video", "audio", "picture", "table", "pre", "svg", "math"):
                seen_content = True
            continue
        if isinstance(node, Comment):
            continue
        if node.strip() and node.find_parent(HEADING_TAGS) is None:
            seen_content = True
    return removed
