"""
Content scoring for candidate roots and clutter blocks.

``ContentScorer.score_element`` rates how article-like a subtree is and never
touches the tree. ``ContentScorer.score_and_remove`` is the single mutating
entry point: it scores the structural blocks under a content root with a
separate non-content heuristic and detaches the ones that look like clutter.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Sequence

import soupsieve as sv
import structlog
from bs4 import Tag

from .constants import (
    BLOCK_ELEMENTS,
    BYLINE_PATTERN,
    CONTENT_INDICATORS,
    DATE_PATTERN,
    FOOTNOTE_LIST_SELECTOR,
    FOOTNOTE_REF_SELECTOR,
    NAVIGATION_INDICATORS,
    NON_CONTENT_PATTERNS,
)
from .dom import class_and_id, count_words, is_attached, link_density

logger = structlog.get_logger(__name__)

WORD_SCORE_CAP = 500
COMMA_SCORE_CAP = 50
PARAGRAPH_BONUS = 10
CONTENT_CLASS_BONUS = 15
HEURISTIC_BONUS = 10
TABLE_PENALTY = 10
LAYOUT_TABLE_MIN_WIDTH = 400

_CONTENT_CLASS_TOKENS = ("content", "article", "post")
_CONTENT_ROLES = ("article", "main", "contentinfo")
_NAVIGATION_PATTERNS = [re.compile(rf"\b{re.escape(word)}\b") for word in NAVIGATION_INDICATORS]
_FOOTNOTE_LIST = sv.compile(FOOTNOTE_LIST_SELECTOR)


def is_layout_table(table: Tag, min_width: int = LAYOUT_TABLE_MIN_WIDTH) -> bool:
    """Whether a table carries old-style page layout attributes."""
    try:
        width = int(str(table.get("width", "0")).rstrip("px% ") or 0)
    except ValueError:
        width = 0
    align = str(table.get("align", "")).lower()
    classes = class_and_id(table)
    return width > min_width or align == "center" or "content" in classes or "article" in classes


class ContentScorer:
    """Rates DOM subtrees by article-likeness."""

    @staticmethod
    def score_element(element: Tag) -> float:
        text = element.get_text(" ", strip=True)
        if not text:
            return 0.0

        words = count_words(text)
        score = float(min(words, WORD_SCORE_CAP))
        score += PARAGRAPH_BONUS * len(element.find_all("p"))
        score += min(text.count(","), COMMA_SCORE_CAP)

        images = len(element.find_all("img"))
        score -= images / max(words, 1) * 3

        if DATE_PATTERN.search(text):
            score += HEURISTIC_BONUS
        if BYLINE_PATTERN.search(text):
            score += HEURISTIC_BONUS

        tokens = class_and_id(element)
        if any(token in tokens for token in _CONTENT_CLASS_TOKENS):
            score += CONTENT_CLASS_BONUS

        if element.select_one(FOOTNOTE_REF_SELECTOR) is not None:
            score += HEURISTIC_BONUS
        if element.select_one(FOOTNOTE_LIST_SELECTOR) is not None:
            score += HEURISTIC_BONUS

        if element.name == "td":
            table = element.find_parent("table")
            if table is not None and is_layout_table(table):
                score += HEURISTIC_BONUS
        else:
            tables = len(element.find_all("table"))
            if tables >= 2:
                score -= TABLE_PENALTY * tables

        density = link_density(element)
        if density > 0.5:
            score *= 0.1
        else:
            score *= 1 - density
        return score

    @classmethod
    def find_best_element(cls, elements: Iterable[Tag], min_score: float = 0) -> Optional[Tag]:
        """Return the strictly highest scoring element above ``min_score``."""
        best: Optional[Tag] = None
        best_score = min_score
        for element in elements:
            score = cls.score_element(element)
            if score > best_score:
                best, best_score = element, score
        return best

    @staticmethod
    def is_likely_content(element: Tag) -> bool:
        role = str(element.get("role", "")).lower()
        if role in _CONTENT_ROLES:
            return True

        tokens = class_and_id(element)
        if any(indicator in tokens for indicator in CONTENT_INDICATORS):
            return True

        words = count_words(element.get_text(" ", strip=True))
        paragraphs = len(element.find_all("p"))
        if link_density(element) >= 0.3:
            return False
        return words > 100 or (paragraphs >= 2 and words > 50)

    @staticmethod
    def score_non_content_block(element: Tag) -> float:
        """Score a block for clutter; more negative means more navigation-like."""
        if _FOOTNOTE_LIST.match(element) or _FOOTNOTE_LIST.select_one(element) is not None:
            return 0.0

        text = element.get_text(" ", strip=True)
        words = count_words(text)
        density = link_density(element)
        # Short blocks are only judged when they are mostly links
        if words < 3 and density < 0.5:
            return 0.0

        score = 0.0
        lowered = text.lower()
        for pattern in _NAVIGATION_PATTERNS:
            if pattern.search(lowered):
                score -= 10

        if density > 0.5:
            score -= 15

        links = element.find_all("a")
        if len(links) / max(words, 1) > 0.5:
            score -= 15

        lists = element.find_all(["ul", "ol"])
        if lists and len(links) > len(lists) * 3:
            score -= 10

        tokens = class_and_id(element)
        for pattern in NON_CONTENT_PATTERNS:
            if pattern in tokens:
                score -= 8
        return score

    @classmethod
    def score_and_remove(cls, root: Tag, debug: bool = False, threshold: float = 0.0) -> int:
        """Detach clutter blocks under ``root`` scoring below ``threshold``.

        Blocks are visited in document order so an ancestor is judged on its
        full subtree before any of its descendants. Returns how many blocks
        were removed.
        """
        removed = 0
        blocks: Sequence[Tag] = root.find_all(BLOCK_ELEMENTS)
        for block in blocks:
            if not is_attached(block, root) or cls.is_likely_content(block):
                continue
            score = cls.score_non_content_block(block)
            if score < threshold:
                if debug:
                    logger.debug(
                        "Removing non-content block",
                        tag=block.name,
                        attributes=class_and_id(block).strip(),
                        score=score,
                        threshold=threshold,
                    )
                block.extract()
                removed += 1
        return removed
