"""Merge index descriptors with extracted page metadata into catalog entries."""
from __future__ import annotations

from pathlib import PurePosixPath
from typing import List, Optional, Sequence, Tuple

from .lookups import (
    CRITERION_CATEGORIES,
    DEFAULT_LAYOUT,
    FALLBACK_CATEGORY,
    FILENAME_CATEGORIES,
    PLACEHOLDER_CRITERIA,
    SIDE_BY_SIDE_CRITERIA,
    SIDE_BY_SIDE_LAYOUT,
    TEST_TYPE_LAYOUTS,
    UNMAPPED_CRITERION_CATEGORY,
    classify_badge,
)
from .provenance import Resolved, first_known
from .schema import CatalogEntry, Diagnostic, PageDescriptor, PageMetadata
from .utils.logging import get_logger

LOGGER = get_logger(__name__)

ID_SUFFIX = "-test"


def entry_id(filename: str) -> str:
    """Return ``filename`` without its extension and a trailing ``-test``."""

    stem = str(PurePosixPath(filename).with_suffix(""))
    if stem.endswith(ID_SUFFIX):
        stem = stem[: -len(ID_SUFFIX)]
    return stem


def index_criteria(text: Optional[str]) -> Tuple[str, ...]:
    """Split the index criterion text, dropping known placeholder labels."""

    if not text or text.strip() in PLACEHOLDER_CRITERIA:
        return ()
    parts = (part.strip() for part in text.split(","))
    return tuple(part for part in parts if part and part not in PLACEHOLDER_CRITERIA)


def categorize(criteria: Sequence[str], filename: str) -> str:
    if criteria:
        return CRITERION_CATEGORIES.get(criteria[0], UNMAPPED_CRITERION_CATEGORY)
    for keyword, category in FILENAME_CATEGORIES:
        if keyword in filename:
            return category
    return FALLBACK_CATEGORY


def layout_pattern(criteria: Sequence[str], test_type: str) -> str:
    if test_type in TEST_TYPE_LAYOUTS:
        return TEST_TYPE_LAYOUTS[test_type]
    if criteria and criteria[0] in SIDE_BY_SIDE_CRITERIA:
        return SIDE_BY_SIDE_LAYOUT
    return DEFAULT_LAYOUT


class Reconciler:
    """Apply the fixed field precedence: page declaration, page inference, index, none."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url

    def reconcile(
        self, descriptor: PageDescriptor, metadata: PageMetadata
    ) -> Tuple[CatalogEntry, List[Diagnostic]]:
        filename = descriptor.filename
        diagnostics: List[Diagnostic] = list(metadata.diagnostics)

        from_index = index_criteria(descriptor.criterion_text)
        criteria = first_known(
            metadata.criteria if metadata.criteria.value else Resolved.missing(),
            Resolved.from_index(from_index) if from_index else Resolved.missing(),
        )
        title = first_known(
            metadata.title,
            Resolved.from_index(descriptor.title) if descriptor.title else Resolved.missing(),
        )
        wcag_criteria = list(criteria.value or ())
        badge = classify_badge(descriptor.badge)

        for name, value in (
            ("title", title),
            ("wcagCriteria", criteria),
            ("totalCases", metadata.total_cases),
            ("expectedViolations", metadata.expected_violations),
            ("expectedPasses", metadata.expected_passes),
        ):
            if value.known:
                LOGGER.debug("%s: %s resolved from %s", filename, name, value.provenance.value)
                continue
            diagnostics.append(
                Diagnostic(
                    kind="unresolved_field",
                    filename=filename,
                    field=name,
                    message=f"{name} could not be determined",
                )
            )
            LOGGER.debug("%s: %s unresolved", filename, name)

        entry = CatalogEntry(
            id=entry_id(filename),
            filename=filename,
            url=f"{self.base_url}{filename}",
            title=title.value,
            wcag_criteria=wcag_criteria,
            wcag_level=badge.wcag_level,
            category=categorize(wcag_criteria, filename),
            test_type=badge.test_type,
            layout_pattern=layout_pattern(wcag_criteria, badge.test_type),
            description=descriptor.description,
            total_cases=metadata.total_cases.value,
            expected_violations=metadata.expected_violations.value,
            expected_passes=metadata.expected_passes.value,
            machine_readable=metadata.machine_readable,
            has_metadata=metadata.has_structured_meta_tags,
            has_expected_results=(
                metadata.expected_violations.known or metadata.expected_passes.known
            ),
            has_confidence_scores="algorithm" in filename,
        )
        return entry, diagnostics
