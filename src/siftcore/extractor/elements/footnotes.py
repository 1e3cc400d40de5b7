"""
Footnote standardization.

References in any of the common markup schemes are rewritten to
``<sup id="fnref:N"><a href="#fn:N">N</a></sup>`` and the list items they
point at are collected, in first-reference order, into a single
``<div id="footnotes"><ol>…</ol></div>`` container appended to the root.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import soupsieve as sv
from bs4 import BeautifulSoup, Tag

from ..constants import FOOTNOTE_INLINE_REFERENCES, FOOTNOTE_LIST_SELECTORS
from ..dom import contains

logger = logging.getLogger(__name__)

CANONICAL_LIST_SELECTOR = "div#footnotes > ol"
BACKREF_TEXTS = {"↩", "↩︎", "↑", "^", "⤴", "↵"}
BACKREF_CLASS_TOKENS = ("backref", "footnote-back", "footnoteback", "cite-backlink", "reversefootnote")

_INLINE_REFERENCE = sv.compile(", ".join(FOOTNOTE_INLINE_REFERENCES))


@dataclass
class _Footnote:
    number: int
    item: Tag
    references: List[Tag] = field(default_factory=list)


def _new_tag(root: Tag, name: str, **attrs) -> Tag:
    soup = root
    while soup.parent is not None:
        soup = soup.parent
    if isinstance(soup, BeautifulSoup):
        return soup.new_tag(name, attrs=attrs)
    return BeautifulSoup("", "html.parser").new_tag(name, attrs=attrs)


def _outermost(elements: List[Tag]) -> List[Tag]:
    """Drop elements nested in another element of the list, keeping order."""
    kept: List[Tag] = []
    for element in elements:
        if not any(other is not element and contains(other, element) for other in elements):
            kept.append(element)
    return kept


def find_footnote_lists(root: Tag) -> List[Tag]:
    found: List[Tag] = []
    seen = set()
    for selector in [CANONICAL_LIST_SELECTOR, *FOOTNOTE_LIST_SELECTORS]:
        for element in root.select(selector):
            if id(element) not in seen:
                seen.add(id(element))
                found.append(element)
    return _outermost(found)


def _list_items(container: Tag) -> List[Tag]:
    """Top-level items of a footnote list, ignoring lists nested inside an item."""
    return [
        li
        for li in container.find_all("li")
        if not any(parent.name == "li" for parent in _parents_until(li, container))
    ]


def _parents_until(element: Tag, stop: Tag):
    for parent in element.parents:
        if parent is stop:
            return
        yield parent


def _target_of(reference: Tag) -> Optional[str]:
    anchor = reference if reference.name == "a" else reference.find("a", href=True)
    if anchor is None:
        return None
    href = str(anchor.get("href", ""))
    if "#" not in href:
        return None
    return href.split("#", 1)[1] or None


def _index_items(lists: List[Tag]) -> Dict[str, Tag]:
    """Map every id found on (or inside) a list item to that item."""
    index: Dict[str, Tag] = {}
    for container in lists:
        for item in _list_items(container):
            ids = [item.get("id")] + [el.get("id") for el in item.find_all(id=True)]
            for identifier in ids:
                if identifier and identifier not in index:
                    index[str(identifier)] = item
    return index


def _find_references(root: Tag, lists: List[Tag], index: Dict[str, Tag]) -> List[Tag]:
    """Reference markers in document order.

    Known reference markup is matched by selector; any other in-page anchor
    counts too when its fragment names a footnote list item.
    """
    candidates: List[Tag] = []
    for element in root.find_all(True):
        if any(contains(container, element) for container in lists):
            continue
        if _INLINE_REFERENCE.match(element):
            candidates.append(element)
        elif element.name == "a" and str(element.get("href", "")).startswith("#") and _target_of(element) in index:
            candidates.append(element)
    return _outermost(candidates)


def _replacement_target(reference: Tag) -> Tag:
    """The element to swap out: a wrapping ``sup`` that holds nothing but the reference."""
    parent = reference.parent
    if (
        parent is not None
        and parent.name == "sup"
        and reference.name != "sup"
        and parent.get_text(strip=True).strip("[]() ") == reference.get_text(strip=True).strip("[]() ")
    ):
        return parent
    return reference


def _strip_backrefs(item: Tag, reference_ids: set) -> None:
    for anchor in item.find_all("a"):
        href = str(anchor.get("href", ""))
        target = href.split("#", 1)[1] if "#" in href else ""
        classes = " ".join(anchor.get("class") or []).lower()
        text = anchor.get_text(strip=True)
        if (
            target in reference_ids
            or target.startswith("fnref")
            or text in BACKREF_TEXTS
            or any(token in classes for token in BACKREF_CLASS_TOKENS)
        ):
            anchor.decompose()
    for wrapper in item.find_all(["span", "sup"]):
        classes = " ".join(wrapper.get("class") or []).lower()
        if any(token in classes for token in BACKREF_CLASS_TOKENS) and not wrapper.get_text(strip=True).strip("^ "):
            wrapper.decompose()


def _build_item(root: Tag, footnote: _Footnote, reference_ids: set) -> Tag:
    source = footnote.item
    _strip_backrefs(source, reference_ids)

    item = _new_tag(root, "li", id=f"fn:{footnote.number}")
    item["class"] = ["footnote"]
    for child in list(source.contents):
        item.append(child.extract())

    # Trim whitespace-only edges so repeated runs produce the same markup
    while item.contents and isinstance(item.contents[-1], str) and not item.contents[-1].strip():
        item.contents[-1].extract()
    while item.contents and isinstance(item.contents[0], str) and not item.contents[0].strip():
        item.contents[0].extract()

    if not footnote.references:
        return item

    backref = _new_tag(root, "a", href=f"#fnref:{footnote.number}")
    backref["class"] = ["footnote-backref"]
    backref.string = "↩"

    last = item.contents[-1] if item.contents else None
    target = last if isinstance(last, Tag) and last.name == "p" else item
    target.append(backref)
    return item


def _remove_source_list(container: Tag, root: Tag) -> None:
    parent = container.parent
    container.extract()
    while parent is not None and parent is not root and not parent.get_text(strip=True):
        if parent.find(["img", "iframe", "video", "table", "pre"]) is not None:
            break
        grandparent = parent.parent
        parent.extract()
        parent = grandparent


def standardize_footnotes(root: Tag) -> int:
    """Rewrite footnote references and lists under ``root`` in place.

    Returns the number of canonical footnotes produced. When no footnote
    list exists, or no reference resolves to an item, the tree is left
    untouched. References whose target is missing are left as they are;
    list items no reference points at are kept, numbered after the
    referenced ones and without a backlink.
    """
    lists = find_footnote_lists(root)
    if not lists:
        return 0

    index = _index_items(lists)
    references = _find_references(root, lists, index)

    footnotes: Dict[int, _Footnote] = {}
    ordered: List[_Footnote] = []
    for reference in references:
        target = _target_of(reference)
        item = index.get(target) if target else None
        if item is None:
            continue
        footnote = footnotes.get(id(item))
        if footnote is None:
            footnote = _Footnote(number=len(ordered) + 1, item=item)
            footnotes[id(item)] = footnote
            ordered.append(footnote)
        footnote.references.append(reference)

    if not ordered:
        logger.debug("Footnote list found but no reference resolved; leaving markup untouched")
        return 0

    reference_ids = set()
    for footnote in ordered:
        for occurrence, reference in enumerate(footnote.references, start=1):
            for element in [reference, *reference.find_all(id=True)]:
                if element.get("id"):
                    reference_ids.add(str(element["id"]))
            ref_id = f"fnref:{footnote.number}" if occurrence == 1 else f"fnref:{footnote.number}-{occurrence}"
            sup = _new_tag(root, "sup", id=ref_id)
            anchor = _new_tag(root, "a", href=f"#fn:{footnote.number}")
            anchor.string = str(footnote.number)
            sup.append(anchor)
            _replacement_target(reference).replace_with(sup)

    # Items nothing points at keep their text, numbered after the referenced ones
    referenced_count = len(ordered)
    for source in lists:
        for item in _list_items(source):
            if id(item) in footnotes or not (item.get_text(strip=True) or item.find(True) is not None):
                continue
            footnote = _Footnote(number=len(ordered) + 1, item=item)
            footnotes[id(item)] = footnote
            ordered.append(footnote)
    if len(ordered) > referenced_count:
        logger.debug("Kept %d unreferenced footnotes", len(ordered) - referenced_count)

    container = _new_tag(root, "div", id="footnotes")
    ol = _new_tag(root, "ol")
    container.append(ol)
    for footnote in ordered:
        ol.append(_build_item(root, footnote, reference_ids))

    for source in lists:
        _remove_source_list(source, root)
    root.append(container)
    return len(ordered)
