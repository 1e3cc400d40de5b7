"""Site-specific extractors for publishers whose markup defeats generic scoring."""

from .base import BaseSiteExtractor
from .chatgpt import ChatGPTExtractor
from .claude import ClaudeExtractor
from .github import GitHubExtractor
from .hackernews import HackerNewsExtractor
from .reddit import RedditExtractor
from .twitter import TwitterExtractor
from .youtube import YouTubeExtractor

__all__ = [
    "BaseSiteExtractor",
    "ChatGPTExtractor",
    "ClaudeExtractor",
    "GitHubExtractor",
    "HackerNewsExtractor",
    "RedditExtractor",
    "TwitterExtractor",
    "YouTubeExtractor",
]
