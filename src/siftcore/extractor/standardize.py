"""
Structural standardization of an extracted content root.

``standardize_content`` rewrites the subtree in place into a small canonical
vocabulary: plain-text headings, canonical footnotes and code blocks, no
presentational wrappers, no styling attributes, no empty elements. Running it
twice on its own output changes nothing.
"""

from __future__ import annotations

import re
from typing import Optional

import structlog
from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from ..metadata.models import PageMetadata
from .constants import (
    ALLOWED_ATTRIBUTES,
    ALLOWED_EMPTY_ELEMENTS,
    BLOCK_LEVEL_TAGS,
    INLINE_ELEMENTS,
    KEEP_CLASS_PATTERN,
    KEEP_ID_PATTERN,
    PRESERVE_ELEMENTS,
    WRAPPER_ELEMENTS,
)
from .elements.code import standardize_code_blocks
from .elements.footnotes import standardize_footnotes
from .elements.headings import normalize_headings, remove_trailing_headings

logger = structlog.get_logger(__name__)

_EXCESS_NEWLINES = re.compile(r"\n{3,}")
_VERBATIM = ("pre", "code", "svg", "math")
_EMPTY_IGNORED = frozenset({"br", "wbr"})


def _inside(node, names, root: Tag) -> bool:
    for parent in node.parents:
        if parent.name in names:
            return True
        if parent is root:
            return False
    return False


def _text_nodes(root: Tag):
    return [
        node
        for node in root.find_all(string=True)
        if not isinstance(node, Comment) and type(node) is NavigableString
    ]


def normalize_spaces(root: Tag) -> None:
    for node in _text_nodes(root):
        if "\xa0" in node and not _inside(node, _VERBATIM, root):
            node.replace_with(NavigableString(node.replace("\xa0", " ")))


def remove_comments(root: Tag) -> int:
    """Drop descendant comments; comments directly under ``root`` stay."""
    removed = 0
    for comment in root.find_all(string=lambda text: isinstance(text, Comment)):
        if comment.parent is root:
            continue
        comment.extract()
        removed += 1
    return removed


def map_elements(root: Tag, document: Optional[BeautifulSoup]) -> None:
    """Rewrite ARIA-role containers and lazy embeds into plain HTML elements."""
    for element in root.select('div[role="paragraph"], span[role="paragraph"]'):
        element.name = "p"
    for element in root.select('div[role="list"]'):
        element.name = "ul"
    for element in root.select('div[role="listitem"], span[role="listitem"]'):
        element.name = "li"

    for embed in root.find_all("lite-youtube"):
        video_id = embed.get("videoid")
        if not video_id:
            continue
        factory = document if document is not None else BeautifulSoup("", "html.parser")
        iframe = factory.new_tag(
            "iframe",
            attrs={
                "src": f"https://www.youtube.com/embed/{video_id}",
                "title": embed.get("videotitle") or embed.get("playlabel") or "YouTube video",
                "allowfullscreen": "",
            },
        )
        embed.replace_with(iframe)


def _is_inline(node) -> bool:
    if isinstance(node, NavigableString):
        return True
    return node.name in INLINE_ELEMENTS


def flatten_wrappers(root: Tag) -> int:
    """Unwrap presentational containers, bottom-up.

    A wrapper holding only block children (plus whitespace) is unwrapped into
    its parent; one holding only inline content becomes a paragraph. Mixed
    containers and anything inside a preserved element are left alone.
    """
    changed = 0
    wrappers = [el for el in root.find_all(list(WRAPPER_ELEMENTS)) if el is not root]
    for wrapper in reversed(wrappers):
        if wrapper.parent is None or wrapper.get("id") == "footnotes":
            continue
        if _inside(wrapper, PRESERVE_ELEMENTS, root):
            continue

        children = [
            child
            for child in wrapper.contents
            if not isinstance(child, Comment) and not (isinstance(child, NavigableString) and not child.strip())
        ]
        if not children:
            continue

        if all(_is_inline(child) for child in children):
            if wrapper.parent is not None and (wrapper.parent.name == "p" or wrapper.parent.name in INLINE_ELEMENTS):
                wrapper.unwrap()
            else:
                wrapper.name = "p"
                wrapper.attrs = {}
            changed += 1
        elif all(isinstance(child, Tag) and not _is_inline(child) for child in children):
            wrapper.unwrap()
            changed += 1
    return changed


def strip_attributes(root: Tag, debug: bool = False) -> None:
    for element in [root, *root.find_all(True)]:
        if element.name in ("svg", "math") or _inside(element, ("svg", "math"), root):
            continue
        kept = {}
        for name, value in element.attrs.items():
            if name in ALLOWED_ATTRIBUTES:
                kept[name] = value
            elif name == "id":
                if debug or KEEP_ID_PATTERN.match(str(value)):
                    kept[name] = value
            elif name == "class":
                tokens = value if isinstance(value, list) else str(value).split()
                if not debug:
                    tokens = [token for token in tokens if KEEP_CLASS_PATTERN.match(token)]
                if tokens:
                    kept[name] = tokens
            elif debug and name.startswith("data-"):
                kept[name] = value
        element.attrs = kept


def remove_empty_elements(root: Tag) -> int:
    removed = 0
    for element in reversed(root.find_all(True)):
        if element.parent is None or element.name in ALLOWED_EMPTY_ELEMENTS:
            continue
        if _inside(element, ("svg", "math"), root):
            continue
        if element.get_text().strip():
            continue
        if any(child.name not in _EMPTY_IGNORED for child in element.find_all(list(ALLOWED_EMPTY_ELEMENTS))):
            continue
        element.extract()
        removed += 1
    return removed


def normalize_whitespace(root: Tag) -> None:
    for node in _text_nodes(root):
        if _inside(node, _VERBATIM, root):
            continue
        text = str(node)
        if not text.strip():
            new = "\n" if "\n" in text else text
            previous, following = node.previous_sibling, node.next_sibling
            between_blocks = any(
                isinstance(sibling, Tag) and sibling.name in BLOCK_LEVEL_TAGS for sibling in (previous, following)
            )
            if between_blocks:
                new = "\n"
        else:
            new = _EXCESS_NEWLINES.sub("\n\n", text)
        if new != text:
            node.replace_with(NavigableString(new))


def standardize_content(
    root: Tag,
    metadata: Optional[PageMetadata],
    document: Optional[BeautifulSoup] = None,
    debug: bool = False,
) -> None:
    """Canonicalize ``root`` in place.

    Args:
        root: The extracted content root.
        metadata: Page metadata; its title drives duplicate-heading removal.
        document: The document that owns ``root``, used to create new tags.
        debug: Keep ids, classes and ``data-*`` attributes, and skip wrapper
            flattening.
    """
    title = metadata.title if metadata is not None else None

    normalize_spaces(root)
    remove_comments(root)
    normalize_headings(root, title)
    standardize_footnotes(root)
    standardize_code_blocks(root)
    map_elements(root, document)
    remove_trailing_headings(root)
    removed = remove_empty_elements(root)
    if not debug:
        flatten_wrappers(root)
    strip_attributes(root, debug=debug)
    removed += remove_empty_elements(root)
    normalize_whitespace(root)

    if debug:
        logger.debug("Standardized content", root=root.name, empty_removed=removed)
