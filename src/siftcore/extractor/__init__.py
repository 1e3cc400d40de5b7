"""
SiftCore Content Extraction Module - Scoring, Standardization and Dispatch

This module finds the main content of an HTML page and rewrites it into a
small canonical vocabulary:

Core Features:
- Content scoring of candidate roots and clutter blocks
- Exact-selector, partial-token and score-based clutter removal
- A single relaxed retry when the first pass yields too few words
- Canonical footnotes, code blocks and headings
- Site-specific extractors for GitHub, X, Reddit, Hacker News, YouTube,
  ChatGPT and Claude, dispatched per hostname with a cache

Components:
- ContentSifter: Pipeline orchestration and retry control
- ContentScorer: Read-only scoring plus the clutter-removal pass
- standardize_content: In-place canonicalization of the content root
- ExtractorRegistry: URL to site extractor dispatch
"""

from .models import ExtractorVariables, RemovalLevel, SiftResult, SiteExtraction
from .registry import ExtractorMapping, ExtractorRegistry, default_registry
from .scoring import ContentScorer
from .sifter import ContentSifter, sift
from .standardize import standardize_content

__all__ = [
    "ContentScorer",
    "ContentSifter",
    "ExtractorMapping",
    "ExtractorRegistry",
    "ExtractorVariables",
    "RemovalLevel",
    "SiftResult",
    "SiteExtraction",
    "default_registry",
    "sift",
    "standardize_content",
]
