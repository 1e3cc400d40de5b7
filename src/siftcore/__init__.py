"""
SiftCore - Main-content extraction for noisy web pages.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config, SiftOptions
from .extractor import ContentSifter, ExtractorRegistry, SiftResult, sift
from .markdown import create_markdown_content

__all__ = [
    "__version__",
    "Config",
    "ContentSifter",
    "ExtractorRegistry",
    "SiftOptions",
    "SiftResult",
    "create_markdown_content",
    "sift",
]
