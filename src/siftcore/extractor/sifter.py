"""
ContentSifter - main-content extraction with a single relaxed retry.

One ``parse`` call gathers page metadata, offers the document to a
site-specific extractor, and otherwise runs the generic pipeline on a copy
of the document:

1. hidden elements and (optionally) images are dropped;
2. the content root is chosen from ranked entry-point selectors, layout
   table cells or the best scoring block;
3. clutter is removed by exact selectors, partial attribute tokens and
   :meth:`ContentScorer.score_and_remove`;
4. the root is standardized and its words counted.

When the aggressive pass yields fewer than ``min_word_count`` words a second,
relaxed pass runs once and the pass with more words wins. ``parse`` never
raises; unexpected failures degrade to the document body.
"""

from __future__ import annotations

import asyncio
import copy
import re
import time
from dataclasses import dataclass
from typing import Any, List, Optional, Pattern, Union

import soupsieve as sv
import structlog
from bs4 import BeautifulSoup, FeatureNotFound, Tag
from bs4.builder import ParserRejectedMarkup
from structlog.contextvars import bound_contextvars

from ..config import SiftOptions, settings
from ..exceptions import ConfigurationError
from ..markdown import create_markdown_content
from ..metadata import MetadataExtractor, MetaTag, MetaTagParser, PageMetadata, SchemaOrgParser
from ..observability import increment, observe
from .constants import (
    BLOCK_ELEMENTS,
    ENTRY_POINT_ELEMENTS,
    EXACT_SELECTORS,
    HIDDEN_STYLE_PATTERN,
    MIN_IMAGE_DIMENSION,
    PARTIAL_SELECTORS,
)
from .dom import count_words, is_attached, serialize
from .models import ExtractorVariables, RemovalLevel, SiftResult
from .registry import ExtractorRegistry, default_registry
from .scoring import ContentScorer, is_layout_table
from .standardize import standardize_content

logger = structlog.get_logger(__name__)

ENTRY_POINT_RANK_WEIGHT = 40
PARTIAL_MATCH_ATTRIBUTES = (
    "class",
    "id",
    "data-component",
    "data-test",
    "data-testid",
    "data-test-id",
    "data-qa",
    "data-cy",
)
MEDIA_ELEMENTS = ["img", "picture", "svg", "video", "canvas"]
# Never removed by selector passes, whichever element ends up as the root
STRUCTURAL_TAGS = ("html", "head", "body")

_DEFAULT_EXACT = sv.compile(", ".join(EXACT_SELECTORS))
_DIMENSION = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(?:px)?\s*$")
_STYLE_DIMENSION = re.compile(r"(?:^|;)\s*(width|height)\s*:\s*(\d+(?:\.\d+)?)px", re.I)


@dataclass
class _PassResult:
    level: RemovalLevel
    root: Tag
    word_count: int
    removed: int


def _compile_partial(tokens: List[str]) -> Pattern[str]:
    return re.compile("|".join(re.escape(token) for token in tokens if token), re.I)


def _image_dimensions(image: Tag) -> List[float]:
    dimensions: List[float] = []
    for attribute in ("width", "height"):
        match = _DIMENSION.match(str(image.get(attribute, "")))
        if match:
            dimensions.append(float(match.group(1)))
    for _, value in _STYLE_DIMENSION.findall(str(image.get("style", ""))):
        dimensions.append(float(value))
    return dimensions


class ContentSifter:
    """
    Extracts the main content and metadata of an HTML page.

    Any object with a ``name`` and an ``async extract(html, *, url=None)``
    returning a :class:`SiftResult` can stand in for this class.

    Args:
        options: Extraction options; defaults to the configured ``extraction`` settings
        registry: Site extractor dispatch; defaults to the process-wide registry
        metadata_extractor: Metadata resolver used for every document

    Raises:
        ConfigurationError: If a user supplied exact selector is not valid CSS
    """

    name = "siftcore"

    def __init__(
        self,
        options: Optional[SiftOptions] = None,
        registry: Optional[ExtractorRegistry] = None,
        metadata_extractor: Optional[MetadataExtractor] = None,
    ) -> None:
        self.options = options if options is not None else settings.extraction
        self.registry = registry if registry is not None else default_registry
        self.metadata_extractor = metadata_extractor if metadata_extractor is not None else MetadataExtractor()
        self.metrics_enabled = settings.monitoring.metrics_enabled
        self.logger = logger.bind(component="ContentSifter")

        self._exact_selectors = [_DEFAULT_EXACT]
        for selector in self.options.exact_selectors:
            try:
                self._exact_selectors.append(sv.compile(selector))
            except sv.SelectorSyntaxError as e:
                raise ConfigurationError(f"Invalid exact selector {selector!r}: {e}") from e
        self._partial_pattern = _compile_partial(PARTIAL_SELECTORS + list(self.options.partial_selectors))

    # --- Public API ---------------------------------------------------------

    def parse(self, document: BeautifulSoup, url: Optional[str] = None) -> SiftResult:
        """
        Extract content from an already parsed document.

        The document itself is never modified; every pass works on a copy.
        """
        start = time.perf_counter()
        url = url or self.options.url or ""
        schema_org_data: Any = []
        meta_tags: List[MetaTag] = []
        metadata = PageMetadata()

        with bound_contextvars(document_url=url):
            try:
                schema_org_data = SchemaOrgParser.parse_json_ld(document)
                meta_tags = MetaTagParser.parse(document)
                metadata = self.metadata_extractor.extract(document, schema_org_data, meta_tags, url)

                if self.options.use_site_extractors and url:
                    result = self._try_site_extractor(document, url, metadata, schema_org_data, meta_tags, start)
                    if result is not None:
                        return result

                best = self._run_passes(document, metadata)
                content = serialize(best.root)
                result = self._build_result(
                    metadata,
                    meta_tags,
                    content,
                    best.word_count,
                    start,
                    url=url,
                )
                self._record("generic", result)
                return result

            except Exception as e:
                self.logger.error(
                    "Extraction failed, falling back to document body",
                    event_type="extraction_failed",
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=self.options.debug,
                )
                result = self._fallback_result(document, metadata, meta_tags, start)
                self._record("fallback", result)
                return result

    def parse_html(self, html: str, url: Optional[str] = None) -> SiftResult:
        """Parse raw HTML with the configured tree builder, then :meth:`parse` it."""
        try:
            document = BeautifulSoup(html or "", self.options.parser)
        except (FeatureNotFound, ParserRejectedMarkup) as e:
            self.logger.warning("Parser unavailable or rejected markup, retrying with html.parser", error=str(e))
            document = BeautifulSoup(html or "", "html.parser")
        return self.parse(document, url)

    async def extract(self, html: str, *, url: str | None = None) -> SiftResult:
        """Run :meth:`parse_html` in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.parse_html, html, url)

    # --- Site extractors ----------------------------------------------------

    def _try_site_extractor(
        self,
        document: BeautifulSoup,
        url: str,
        metadata: PageMetadata,
        schema_org_data: Any,
        meta_tags: List[MetaTag],
        start: float,
    ) -> Optional[SiftResult]:
        extractor = self.registry.find_extractor(document, url, schema_org_data)
        if extractor is None:
            return None

        extraction = extractor.extract()
        content = extraction.content_html
        word_count = count_words(BeautifulSoup(content, "html.parser").get_text(" ", strip=True))
        self.logger.debug(
            "Using site extractor",
            extractor=extractor.extractor_type,
            word_count=word_count,
        )
        result = self._build_result(
            metadata,
            meta_tags,
            content,
            word_count,
            start,
            url=url,
            extractor_type=extractor.extractor_type,
            variables=extraction.variables,
            extracted_content=extraction.extracted_content,
        )
        if self.metrics_enabled:
            increment("site_extractor_hits", labels={"extractor_type": extractor.extractor_type})
        self._record("site_extractor", result)
        return result

    # --- Generic pipeline ---------------------------------------------------

    def _run_passes(self, document: BeautifulSoup, metadata: PageMetadata) -> _PassResult:
        first = self._run_pass(document, metadata, RemovalLevel.AGGRESSIVE)
        if first.word_count >= self.options.min_word_count:
            return first

        self.logger.debug(
            "Low word count, retrying with relaxed removal",
            word_count=first.word_count,
            min_word_count=self.options.min_word_count,
        )
        if self.metrics_enabled:
            increment("retries")
        second = self._run_pass(document, metadata, RemovalLevel.RELAXED)
        return second if second.word_count > first.word_count else first

    def _run_pass(self, document: BeautifulSoup, metadata: PageMetadata, level: RemovalLevel) -> _PassResult:
        options = self.options
        clone = copy.copy(document)

        if options.remove_images:
            self._remove_images(clone)
        if options.remove_hidden_elements:
            self._remove_hidden_elements(clone)

        root = self.find_main_content(clone)

        if options.remove_small_images:
            self._remove_small_images(clone)

        removed = 0
        if options.remove_exact_selectors:
            removed += self._remove_exact(clone, root)
        if options.remove_partial_selectors and level is RemovalLevel.AGGRESSIVE:
            removed += self._remove_partial(clone, root)

        threshold = (
            options.scoring.removal_threshold
            if level is RemovalLevel.AGGRESSIVE
            else options.scoring.relaxed_removal_threshold
        )
        removed += ContentScorer.score_and_remove(root, debug=options.debug, threshold=threshold)

        standardize_content(root, metadata, clone, debug=options.debug)
        word_count = count_words(root.get_text(" ", strip=True))

        if options.debug:
            self.logger.debug(
                "Extraction pass finished",
                level=level.value,
                root=root.name,
                removed=removed,
                word_count=word_count,
            )
        if self.metrics_enabled and removed:
            increment("clutter_removed", removed)
        return _PassResult(level=level, root=root, word_count=word_count, removed=removed)

    def find_main_content(self, document: BeautifulSoup) -> Tag:
        """Pick the content root: ranked entry points, layout tables, then the best block."""
        candidates = []
        total = len(ENTRY_POINT_ELEMENTS)
        for index, selector in enumerate(ENTRY_POINT_ELEMENTS):
            for element in document.select(selector):
                score = (total - index) * ENTRY_POINT_RANK_WEIGHT + ContentScorer.score_element(element)
                candidates.append((score, element))

        if candidates:
            # max() keeps the earliest candidate on ties
            best = max(candidates, key=lambda candidate: candidate[0])[1]
            if best.name == "body":
                table_cell = self._find_table_based_content(document)
                if table_cell is not None:
                    return table_cell
            return best

        table_cell = self._find_table_based_content(document)
        if table_cell is not None:
            return table_cell
        block = ContentScorer.find_best_element(document.find_all(BLOCK_ELEMENTS))
        if block is not None:
            return block
        return document.body if document.body is not None else document

    @staticmethod
    def _find_table_based_content(document: BeautifulSoup) -> Optional[Tag]:
        tables = [table for table in document.find_all("table") if is_layout_table(table)]
        if not tables:
            return None
        cells = [cell for table in tables for cell in table.find_all("td")]
        return ContentScorer.find_best_element(cells)

    # --- Removal passes -----------------------------------------------------

    @staticmethod
    def _protected(root: Tag):
        protected = {id(root)}
        protected.update(id(parent) for parent in root.parents)
        return protected

    def _remove_exact(self, document: BeautifulSoup, root: Tag) -> int:
        protected = self._protected(root)
        removed = 0
        for selector in self._exact_selectors:
            for element in selector.select(document):
                if id(element) in protected or element.name in STRUCTURAL_TAGS:
                    continue
                if not is_attached(element, document):
                    continue
                element.extract()
                removed += 1
        return removed

    def _remove_partial(self, document: BeautifulSoup, root: Tag) -> int:
        protected = self._protected(root)
        removed = 0
        for element in document.find_all(True):
            if id(element) in protected or element.name in STRUCTURAL_TAGS:
                continue
            values = []
            for attribute in PARTIAL_MATCH_ATTRIBUTES:
                value = element.get(attribute)
                if value:
                    values.append(" ".join(value) if isinstance(value, list) else str(value))
            if not values or not self._partial_pattern.search(" ".join(values)):
                continue
            if not is_attached(element, document):
                continue
            element.extract()
            removed += 1
        return removed

    @staticmethod
    def _remove_hidden_elements(document: BeautifulSoup) -> int:
        removed = 0
        for element in document.find_all(True):
            if element.name in STRUCTURAL_TAGS:
                continue
            hidden = element.has_attr("hidden") and element.name != "details"
            if not hidden and not HIDDEN_STYLE_PATTERN.search(str(element.get("style", ""))):
                continue
            if not is_attached(element, document):
                continue
            element.extract()
            removed += 1
        return removed

    @staticmethod
    def _remove_images(document: BeautifulSoup) -> None:
        for element in document.find_all(MEDIA_ELEMENTS):
            if is_attached(element, document):
                element.extract()
        for figure in document.find_all("figure"):
            if not figure.get_text(strip=True):
                figure.extract()

    @staticmethod
    def _remove_small_images(document: BeautifulSoup) -> None:
        for image in document.find_all("img"):
            dimensions = _image_dimensions(image)
            if dimensions and min(dimensions) < MIN_IMAGE_DIMENSION:
                image.extract()

    # --- Results ------------------------------------------------------------

    def _build_result(
        self,
        metadata: PageMetadata,
        meta_tags: List[MetaTag],
        content: str,
        word_count: int,
        start: float,
        url: str = "",
        extractor_type: Optional[str] = None,
        variables: Optional[ExtractorVariables] = None,
        extracted_content: Optional[dict] = None,
    ) -> SiftResult:
        overrides = variables.as_dict() if variables is not None else {}
        title = overrides.get("title") or metadata.title

        content_markdown = None
        if self.options.separate_markdown:
            content_markdown = create_markdown_content(content, url, title)
        elif self.options.markdown:
            content = create_markdown_content(content, url, title)

        return SiftResult(
            title=title,
            description=overrides.get("description") or metadata.description,
            domain=metadata.domain,
            favicon=metadata.favicon,
            image=metadata.image,
            published=overrides.get("published") or metadata.published,
            author=overrides.get("author") or metadata.author,
            site=overrides.get("site") or metadata.site,
            schema_org_data=metadata.schema_org_data,
            content=content,
            word_count=word_count,
            parse_time_ms=int((time.perf_counter() - start) * 1000),
            content_markdown=content_markdown,
            extractor_type=extractor_type,
            extractor_variables=overrides,
            extracted_content=dict(extracted_content or {}),
            meta_tags=meta_tags,
        )

    def _fallback_result(
        self,
        document: Union[BeautifulSoup, Tag],
        metadata: PageMetadata,
        meta_tags: List[MetaTag],
        start: float,
    ) -> SiftResult:
        body = document.find("body") if isinstance(document, Tag) else None
        root = body if body is not None else document
        try:
            content = serialize(root) if isinstance(root, Tag) else ""
            word_count = count_words(root.get_text(" ", strip=True)) if isinstance(root, Tag) else 0
        except Exception as e:
            self.logger.error("Fallback serialization failed", error=str(e), error_type=type(e).__name__)
            content, word_count = "", 0
        return SiftResult(
            title=metadata.title,
            description=metadata.description,
            domain=metadata.domain,
            favicon=metadata.favicon,
            image=metadata.image,
            published=metadata.published,
            author=metadata.author,
            site=metadata.site,
            schema_org_data=metadata.schema_org_data,
            content=content,
            word_count=word_count,
            parse_time_ms=int((time.perf_counter() - start) * 1000),
            meta_tags=meta_tags,
        )

    def _record(self, outcome: str, result: SiftResult) -> None:
        self.logger.info(
            "Document parsed",
            outcome=outcome,
            extractor_type=result.extractor_type,
            word_count=result.word_count,
            parse_time_ms=result.parse_time_ms,
        )
        if not self.metrics_enabled:
            return
        increment("documents_parsed", labels={"outcome": outcome})
        observe("parse_duration_seconds", result.parse_time_ms / 1000)
        observe("word_count", result.word_count)


def sift(
    html_or_soup: Union[str, BeautifulSoup],
    url: Optional[str] = None,
    options: Optional[SiftOptions] = None,
) -> SiftResult:
    """Extract the main content of ``html_or_soup`` with a one-off :class:`ContentSifter`."""
    sifter = ContentSifter(options)
    if isinstance(html_or_soup, str):
        return sifter.parse_html(html_or_soup, url)
    return sifter.parse(html_or_soup, url)
