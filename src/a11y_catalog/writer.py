"""Serialise the catalog and report run summaries."""
from __future__ import annotations

import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.table import Table

from .schema import Catalog, RunSummary
from .utils.logging import get_logger

LOGGER = get_logger(__name__)

# The only value allowed to differ between runs on unchanged inputs.
VOLATILE_FIELD = "lastUpdated"

# Permissions for a newly created artifact; an existing file keeps its own.
DEFAULT_MODE = 0o644


def render(catalog: Catalog) -> str:
    """Return the artifact text; key order follows the model definitions."""

    return json.dumps(catalog.as_record(), indent=2, ensure_ascii=False) + "\n"


def comparable(record: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``record`` with the generation date removed."""

    data = dict(record)
    metadata = dict(data.get("metadata") or {})
    metadata.pop(VOLATILE_FIELD, None)
    data["metadata"] = metadata
    return data


class CatalogWriter:
    """Write the catalog artifact in a single atomic replace."""

    def __init__(self, output_path: Path) -> None:
        self.output_path = output_path

    def write(self, catalog: Catalog) -> Path:
        text = render(catalog)
        target = self.output_path
        target.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=str(target.parent), prefix=f".{target.name}.", delete=False
        ) as handle:
            temp_path = Path(handle.name)
            try:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            except BaseException:
                handle.close()
                temp_path.unlink(missing_ok=True)
                raise
        mode = stat.S_IMODE(target.stat().st_mode) if target.exists() else DEFAULT_MODE
        os.chmod(temp_path, mode)
        temp_path.replace(target)
        LOGGER.info("Wrote %s (%s bytes)", target, len(text.encode("utf-8")))
        return target

    def is_current(self, catalog: Catalog) -> bool:
        """Whether the file on disk matches ``catalog`` apart from the generation date."""

        if not self.output_path.is_file():
            return False
        try:
            existing = json.loads(self.output_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            LOGGER.warning("Cannot read existing catalog %s: %s", self.output_path, exc)
            return False
        if not isinstance(existing, dict):
            return False
        return comparable(existing) == comparable(catalog.as_record())


def report(summary: RunSummary, console: Optional[Console] = None) -> None:
    """Print the run summary table."""

    console = console or Console()
    table = Table(title="Catalog run summary", show_header=False)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Pages processed", str(summary.pages_processed))
    table.add_row("Pages skipped", str(len(summary.pages_skipped)))
    table.add_row("Test pages", str(summary.total_test_pages))
    table.add_row("WCAG criteria", str(summary.total_wcag_criteria))
    table.add_row("Test cases", str(summary.total_test_cases))
    table.add_row("Diagnostics", str(len(summary.diagnostics)))
    if summary.output_path:
        table.add_row("Output", summary.output_path)
    console.print(table)
    for skipped in summary.pages_skipped:
        console.print(f"skipped {skipped.filename}: {skipped.reason}")
    if summary.pages_without_case_count:
        console.print(
            f"{len(summary.pages_without_case_count)} page(s) without a case count: "
            + ", ".join(summary.pages_without_case_count)
        )
