from __future__ import annotations

import json
import os
import stat
from datetime import date
from pathlib import Path

import pytest
from rich.console import Console

from a11y_catalog.aggregate import CatalogAggregator
from a11y_catalog.schema import CatalogEntry, PageDescriptor, PageResult, RunSummary, SkippedPage
from a11y_catalog.utils.config import AppConfig
from a11y_catalog.writer import CatalogWriter, render, report


def _catalog(generated_on: date = date(2026, 10, 18), total: int = 2):
    entry = CatalogEntry(
        id="keyboard",
        filename="keyboard-test.html",
        url="https://a11yplan.github.io/examples/keyboard-test.html",
        title="Keyboard",
        wcag_criteria=["2.1.1"],
        wcag_level="A",
        category="Keyboard and Input",
        test_type="basic",
        layout_pattern="side-by-side",
        total_cases=total,
        expected_violations=1,
        expected_passes=total - 1,
        machine_readable=True,
    )
    result = PageResult(descriptor=PageDescriptor(filename=entry.filename), entry=entry)
    return CatalogAggregator(AppConfig()).aggregate([result], generated_on).catalog


def test_render_uses_artifact_key_names() -> None:
    record = json.loads(render(_catalog()))
    assert list(record) == ["metadata", "testPages", "wcagCriteria", "usage"]
    assert list(record["metadata"]) == [
        "version",
        "lastUpdated",
        "repository",
        "description",
        "totalTestPages",
        "totalWCAGCriteria",
        "totalTestCases",
    ]
    assert list(record["testPages"][0]) == [
        "id",
        "filename",
        "url",
        "title",
        "wcagCriteria",
        "wcagLevel",
        "category",
        "testType",
        "layoutPattern",
        "description",
        "totalCases",
        "expectedViolations",
        "expectedPasses",
        "machineReadable",
        "hasMetadata",
        "hasExpectedResults",
        "hasConfidenceScores",
    ]
    assert record["wcagCriteria"][0]["testPages"] == ["keyboard-test.html"]
    assert set(record["usage"]["exampleUsage"]) == {"javascript", "python"}


def test_render_is_stable() -> None:
    text = render(_catalog())
    assert text == render(_catalog())
    assert text.endswith("}\n")


def test_write_replaces_file_without_leftovers(tmp_path: Path) -> None:
    target = tmp_path / "out" / "test-cases.json"
    writer = CatalogWriter(target)
    writer.write(_catalog(total=2))
    writer.write(_catalog(total=5))
    assert json.loads(target.read_text(encoding="utf-8"))["metadata"]["totalTestCases"] == 5
    assert [path.name for path in target.parent.iterdir()] == ["test-cases.json"]


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_write_creates_world_readable_file(tmp_path: Path) -> None:
    target = CatalogWriter(tmp_path / "test-cases.json").write(_catalog())
    assert stat.S_IMODE(target.stat().st_mode) == 0o644


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_write_keeps_existing_file_mode(tmp_path: Path) -> None:
    target = tmp_path / "test-cases.json"
    target.write_text("{}\n", encoding="utf-8")
    target.chmod(0o664)
    CatalogWriter(target).write(_catalog())
    assert stat.S_IMODE(target.stat().st_mode) == 0o664


def test_is_current_ignores_generation_date(tmp_path: Path) -> None:
    writer = CatalogWriter(tmp_path / "test-cases.json")
    assert not writer.is_current(_catalog())
    writer.write(_catalog(generated_on=date(2020, 1, 1)))
    assert writer.is_current(_catalog(generated_on=date(2026, 10, 18)))
    assert not writer.is_current(_catalog(total=3))


def test_report_lists_skipped_pages() -> None:
    console = Console(record=True, width=100)
    summary = RunSummary(
        pages_processed=1,
        pages_skipped=[SkippedPage(filename="gone-test.html", reason="missing file")],
        total_test_pages=1,
        total_test_cases=6,
    )
    report(summary, console)
    text = console.export_text()
    assert "Pages processed" in text
    assert "skipped gone-test.html: missing file" in text
