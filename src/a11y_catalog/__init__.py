"""Catalog generator for accessibility test pages."""

from .errors import CatalogError, IndexNotFoundError, IndexParseError
from .pipeline import CatalogSync, SyncConfig, SyncResult
from .schema import Catalog, CatalogEntry, CriterionReference, PageDescriptor, RunSummary

__all__ = [
    "Catalog",
    "CatalogEntry",
    "CatalogError",
    "CatalogSync",
    "CriterionReference",
    "IndexNotFoundError",
    "IndexParseError",
    "PageDescriptor",
    "RunSummary",
    "SyncConfig",
    "SyncResult",
]
