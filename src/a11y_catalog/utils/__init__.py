"""Utility helpers shared across the catalog generator."""

from .config import AppConfig, load_config
from .logging import configure_logging, get_logger
from .paths import normalise_path, resolve_within

__all__ = [
    "AppConfig",
    "load_config",
    "configure_logging",
    "get_logger",
    "normalise_path",
    "resolve_within",
]
