"""Markup extractors for the index document and the test pages."""

from .base import MarkupExtractor
from .index import IndexDirectoryScanner, IndexScan
from .page import PageMetadataExtractor, clean_title

__all__ = [
    "MarkupExtractor",
    "IndexDirectoryScanner",
    "IndexScan",
    "PageMetadataExtractor",
    "clean_title",
]
