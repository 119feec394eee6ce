"""Configuration helpers for the catalog generator."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..errors import ConfigError

DEFAULT_CONFIG_NAME = "a11y-catalog.yml"


class AppConfig(BaseModel):
    """Settings for the published catalog artifact."""

    index_filename: str = Field(default="index.html")
    output_filename: str = Field(default="test-cases.json")
    base_url: str = Field(default="https://a11yplan.github.io/examples/")
    repository: str = Field(default="https://github.com/a11yplan/examples")
    catalog_version: str = Field(default="1.0.0")
    description: str = Field(
        default="Machine-readable test samples for validating accessibility scanning tools and algorithms"
    )

    @property
    def artifact_url(self) -> str:
        return f"{self.base_url}{self.output_filename}"


def load_config(path: Path) -> AppConfig:
    """Load configuration from a YAML file; a missing file yields defaults."""

    data: Dict[str, Any] = {}
    if path.exists():
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Config {path} is not valid YAML: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must contain a mapping")
    try:
        return AppConfig(**data)
    except ValidationError as exc:
        raise ConfigError(f"Config {path} is invalid: {exc}") from exc
