"""
Page metadata: JSON-LD, meta tags and DOM fallbacks.
"""

from .metadata_extractor import MetadataExtractor, extract_metadata
from .models import MetaTag, PageMetadata
from .structured_data_parser import MetaTagParser, SchemaOrgParser, get_meta_content, get_schema_property

__all__ = [
    "MetadataExtractor",
    "MetaTag",
    "MetaTagParser",
    "PageMetadata",
    "SchemaOrgParser",
    "extract_metadata",
    "get_meta_content",
    "get_schema_property",
]
