"""Exceptions that abort a catalog run."""
from __future__ import annotations


class CatalogError(Exception):
    """Base class for fatal catalog generation errors."""


class IndexNotFoundError(CatalogError):
    """The index document does not exist or cannot be read."""


class IndexParseError(CatalogError):
    """The index document yielded no listing items."""


class ConfigError(CatalogError):
    """The configuration file could not be loaded."""
