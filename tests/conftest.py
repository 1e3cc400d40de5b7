"""
Test configuration for SiftCore.

Provides HTML fixtures, soup factories and isolation for the process-wide
extractor cache and lazily loaded settings.
"""

# Standard library imports
import os
from typing import Callable, Generator

# Third-party imports
import pytest
from bs4 import BeautifulSoup

# Local imports
from siftcore.config import LazyConfig
from siftcore.extractor.registry import default_registry

from tests.helpers.html import prose

# Keep developer config files and environment out of the test run
for _key in [key for key in os.environ if key.startswith("SIFT_")]:
    del os.environ[_key]

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


# ============================================================================
# Isolation Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_state(monkeypatch, tmp_path) -> Generator[None, None, None]:
    """Run every test from an empty directory with fresh settings and dispatch cache."""
    monkeypatch.chdir(tmp_path)
    LazyConfig.reset()
    default_registry.clear_cache()
    yield
    default_registry.clear_cache()
    LazyConfig.reset()


# ============================================================================
# HTML Fixtures
# ============================================================================


@pytest.fixture
def make_soup() -> Callable[[str], BeautifulSoup]:
    """Factory parsing HTML with the built-in parser."""

    def _make(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "html.parser")

    return _make


@pytest.fixture
def sample_html() -> str:
    """Provide a realistic article page with navigation, sidebar and footer clutter."""
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <title>Test Article - Example News</title>
        <meta name="description" content="Sample article for testing">
        <meta property="og:title" content="Test Article">
        <meta property="og:site_name" content="Example News">
        <meta name="author" content="Jane Writer">
        <link rel="icon" href="/static/icon.png">
    </head>
    <body>
        <header><nav><a href="/">Home</a> <a href="/world">World</a> <a href="/sport">Sport</a></nav></header>
        <div class="share-buttons"><a href="#">Share on Facebook</a> <a href="#">Share on X</a></div>
        <article>
            <h1>Test Article</h1>
            {prose(8)}
            <pre><code class="language-python">def hello_world():
    print("Hello, World!")</code></pre>
        </article>
        <aside class="sidebar"><h3>Related</h3><a href="/a">Another story</a></aside>
        <footer>Copyright Example News</footer>
    </body>
    </html>
    """
