"""Assemble page results into the final catalog."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Sequence

from .lookups import CRITERION_REGISTRY
from .schema import (
    Catalog,
    CatalogEntry,
    CatalogMetadata,
    CatalogUsage,
    CriterionReference,
    Diagnostic,
    ExampleUsage,
    PageResult,
    SkippedPage,
)
from .utils.config import AppConfig
from .utils.logging import get_logger

LOGGER = get_logger(__name__)

DOWNLOAD_INSTRUCTIONS = "Download this JSON file to programmatically access all test case metadata"
AUTOMATED_TESTING = (
    "Use this JSON to iterate through all test pages and validate your accessibility scanner "
    "against known test cases with expected results"
)

JAVASCRIPT_EXAMPLE = """const response = await fetch('{url}');
const testData = await response.json();
console.log(`Total test pages: ${{testData.metadata.totalTestPages}}`);
console.log(`WCAG criteria covered: ${{testData.metadata.totalWCAGCriteria}}`);

// Filter by WCAG level
const levelATests = testData.testPages.filter(t => t.wcagLevel === 'A');

// Find tests for specific criterion
const focusTests = testData.testPages.filter(t => t.wcagCriteria.includes('2.4.7'));

// Get all machine-readable tests
const machineTests = testData.testPages.filter(t => t.machineReadable);"""

PYTHON_EXAMPLE = """import requests

response = requests.get('{url}')
test_data = response.json()

print(f"Total test pages: {{test_data['metadata']['totalTestPages']}}")
print(f"WCAG criteria covered: {{test_data['metadata']['totalWCAGCriteria']}}")

# Filter by category
contrast_tests = [t for t in test_data['testPages'] if t['category'] == 'Color Contrast']

# Get all URLs
test_urls = [t['url'] for t in test_data['testPages']]"""


@dataclass
class Aggregation:
    catalog: Catalog
    skipped: List[SkippedPage] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


def build_usage(artifact_url: str) -> CatalogUsage:
    return CatalogUsage(
        download_instructions=DOWNLOAD_INSTRUCTIONS,
        example_usage=ExampleUsage(
            javascript=JAVASCRIPT_EXAMPLE.format(url=artifact_url),
            python=PYTHON_EXAMPLE.format(url=artifact_url),
        ),
        automated_testing=AUTOMATED_TESTING,
    )


def criterion_references(entries: Sequence[CatalogEntry]) -> List[CriterionReference]:
    """Cross-reference registered criteria to the pages that test them.

    Criteria missing from the registry stay on their entries but get no row.
    """

    pages_by_criterion: Dict[str, List[str]] = {}
    for entry in entries:
        for criterion in entry.wcag_criteria:
            pages = pages_by_criterion.setdefault(criterion, [])
            if entry.filename not in pages:
                pages.append(entry.filename)
    rows: List[CriterionReference] = []
    for criterion, pages in pages_by_criterion.items():
        info = CRITERION_REGISTRY.get(criterion)
        if info is None:
            LOGGER.debug("Criterion %s is not registered; omitted from reference table", criterion)
            continue
        rows.append(
            CriterionReference(
                criterion=criterion,
                name=info.name,
                level=info.level,
                principle=info.principle,
                guideline=info.guideline,
                test_pages=pages,
            )
        )
    return sorted(rows, key=lambda row: row.criterion)


class CatalogAggregator:
    """Partition page results and compute corpus-wide totals."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def aggregate(self, results: Sequence[PageResult], generated_on: date) -> Aggregation:
        entries: List[CatalogEntry] = []
        skipped: List[SkippedPage] = []
        diagnostics: List[Diagnostic] = []
        seen_ids: Dict[str, str] = {}

        for result in sorted(results, key=lambda item: item.descriptor.position):
            diagnostics.extend(result.diagnostics)
            entry = result.entry
            if entry is None:
                skipped.append(SkippedPage(filename=result.descriptor.filename, reason=result.skip_reason or "skipped"))
                continue
            if entry.id in seen_ids:
                duplicate = Diagnostic(
                    kind="duplicate_id",
                    filename=entry.filename,
                    message=f"id {entry.id!r} already used by {seen_ids[entry.id]}; skipped",
                )
                LOGGER.warning("%s: %s", entry.filename, duplicate.message)
                diagnostics.append(duplicate)
                skipped.append(SkippedPage(filename=entry.filename, reason=duplicate.reason))
                continue
            seen_ids[entry.id] = entry.filename
            entries.append(entry)

        unique_criteria = {criterion for entry in entries for criterion in entry.wcag_criteria}
        total_cases = sum(entry.total_cases or 0 for entry in entries)
        uncounted = [entry.filename for entry in entries if entry.total_cases is None]
        if uncounted:
            LOGGER.warning(
                "%s of %s pages have no case count and add nothing to totalTestCases",
                len(uncounted),
                len(entries),
            )

        metadata = CatalogMetadata(
            version=self.config.catalog_version,
            last_updated=generated_on.isoformat(),
            repository=self.config.repository,
            description=self.config.description,
            total_test_pages=len(entries),
            total_wcag_criteria=len(unique_criteria),
            total_test_cases=total_cases,
        )
        catalog = Catalog(
            metadata=metadata,
            test_pages=entries,
            wcag_criteria=criterion_references(entries),
            usage=build_usage(self.config.artifact_url),
        )
        return Aggregation(catalog=catalog, skipped=skipped, diagnostics=diagnostics)
