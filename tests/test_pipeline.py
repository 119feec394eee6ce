from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from a11y_catalog import CatalogSync, IndexNotFoundError, IndexParseError, SyncConfig
from a11y_catalog.writer import comparable

from conftest import cases, index_item, page_html


def _run(root: Path, generated_on: date = date(2026, 10, 18)):
    return CatalogSync().run(SyncConfig.from_root(root, generated_on=generated_on))


def test_focus_visible_page_end_to_end(make_site) -> None:
    root = make_site(
        [index_item("focus-visible-test.html", "Focus Visible", "2.4.7", "Focus rings", "aa")],
        {"focus-visible-test.html": page_html(cases=cases(3, 3))},
    )
    result = _run(root)
    (entry,) = result.catalog.test_pages
    assert entry.wcag_level == "AA"
    assert entry.test_type == "basic"
    assert entry.wcag_criteria == ["2.4.7"]
    assert (entry.total_cases, entry.expected_violations, entry.expected_passes) == (6, 3, 3)
    assert entry.machine_readable is True
    assert entry.has_metadata is False
    assert (root / "test-cases.json").is_file()


def test_missing_page_is_skipped(sample_site: Path) -> None:
    result = _run(sample_site)
    filenames = [entry.filename for entry in result.catalog.test_pages]
    assert "missing-page-test.html" not in filenames
    assert [(s.filename, s.reason) for s in result.summary.pages_skipped] == [
        ("missing-page-test.html", "missing file")
    ]
    assert result.summary.pages_processed == 3


def test_declared_total_is_kept_with_discrepancy(make_site) -> None:
    root = make_site(
        [index_item("tab-order-test.html", "Tab Order", "2.4.3", "Order", "a")],
        {
            "tab-order-test.html": page_html(
                meta={"test:total-cases": "27"},
                cases=[(f"case-{n}", None, None) for n in range(20)],
            )
        },
    )
    result = _run(root)
    assert result.catalog.test_pages[0].total_cases == 27
    discrepancies = [d for d in result.summary.diagnostics if d.kind == "count_discrepancy"]
    assert len(discrepancies) == 1
    assert "7-case discrepancy" in discrepancies[0].message


def test_sample_site_catalog(sample_site: Path) -> None:
    catalog = _run(sample_site).catalog
    assert [entry.id for entry in catalog.test_pages] == ["focus-visible", "contrast-algorithm", "ai-interaction"]
    contrast = catalog.test_pages[1]
    assert contrast.wcag_criteria == ["1.4.3", "1.4.11"]
    assert contrast.test_type == "algorithm"
    assert contrast.has_metadata is True
    assert contrast.has_confidence_scores is True
    assert (contrast.total_cases, contrast.expected_violations, contrast.expected_passes) == (10, 4, 6)
    assert catalog.metadata.total_test_pages == 3
    assert catalog.metadata.total_wcag_criteria == 3
    assert catalog.metadata.total_test_cases == 16
    assert [row.criterion for row in catalog.wcag_criteria] == ["1.4.11", "1.4.3", "2.4.7"]


def test_runs_are_identical_apart_from_date(sample_site: Path) -> None:
    output = sample_site / "test-cases.json"
    _run(sample_site, date(2026, 1, 1))
    first = output.read_text(encoding="utf-8")
    _run(sample_site, date(2026, 1, 1))
    assert output.read_text(encoding="utf-8") == first
    _run(sample_site, date(2026, 2, 2))
    second = output.read_text(encoding="utf-8")
    assert second != first
    assert comparable(json.loads(second)) == comparable(json.loads(first))


def test_order_follows_index_not_filesystem(make_site) -> None:
    names = ["zeta-test.html", "alpha-test.html", "mu-test.html"]
    root = make_site(
        [index_item(name, name, "1.1.1", "", "a") for name in names],
        {name: page_html(cases=cases(1, 1)) for name in sorted(names)},
    )
    assert [entry.filename for entry in _run(root).catalog.test_pages] == names


def test_missing_index_is_fatal_and_writes_nothing(tmp_path: Path) -> None:
    with pytest.raises(IndexNotFoundError):
        _run(tmp_path)
    assert not (tmp_path / "test-cases.json").exists()


def test_empty_index_is_fatal(make_site) -> None:
    root = make_site([index_item(None, "Orphan")])
    with pytest.raises(IndexParseError):
        _run(root)


def test_config_file_changes_output(sample_site: Path) -> None:
    (sample_site / "a11y-catalog.yml").write_text(
        "output_filename: catalog.json\nbase_url: https://example.test/\ncatalog_version: 2.0.0\n",
        encoding="utf-8",
    )
    result = _run(sample_site)
    assert result.summary.output_path == str(sample_site / "catalog.json")
    record = json.loads((sample_site / "catalog.json").read_text(encoding="utf-8"))
    assert record["metadata"]["version"] == "2.0.0"
    assert record["testPages"][0]["url"] == "https://example.test/focus-visible-test.html"


def test_sync_config_defaults_follow_app_config(tmp_path: Path) -> None:
    (tmp_path / "a11y-catalog.yml").write_text("output_filename: catalog.json\n", encoding="utf-8")
    config = SyncConfig.from_root(tmp_path)
    assert config.artifact_path == tmp_path / "catalog.json"
    assert isinstance(config.generated_on, date)
    explicit = SyncConfig.from_root(tmp_path, output_path=tmp_path / "elsewhere.json")
    assert explicit.artifact_path == tmp_path / "elsewhere.json"
