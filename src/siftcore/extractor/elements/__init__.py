"""Canonical rewrites for headings, footnotes and code blocks."""

from .code import build_code_block, detect_language, standardize_code_blocks
from .footnotes import find_footnote_lists, standardize_footnotes
from .headings import normalize_headings, remove_trailing_headings

__all__ = [
    "build_code_block",
    "detect_language",
    "standardize_code_blocks",
    "find_footnote_lists",
    "standardize_footnotes",
    "normalize_headings",
    "remove_trailing_headings",
]
