"""Pydantic models and helpers describing the published catalog schema."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .provenance import Resolved

DiagnosticKind = Literal[
    "missing_file",
    "unreadable_file",
    "unsafe_path",
    "skipped_block",
    "unresolved_field",
    "malformed_annotation",
    "count_discrepancy",
    "inconsistent_counts",
    "duplicate_id",
]

# Kinds that remove a page from the catalog rather than annotate it.
SKIP_KINDS = frozenset({"missing_file", "unreadable_file", "unsafe_path", "duplicate_id"})


class CatalogModel(BaseModel):
    """Base for artifact models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def as_record(self) -> Dict[str, Any]:
        """Return a JSON-serialisable mapping using the artifact's key names."""

        return self.model_dump(mode="json", by_alias=True)


class PageDescriptor(BaseModel):
    """One listing item of the index document."""

    filename: str
    title: Optional[str] = None
    criterion_text: Optional[str] = None
    description: Optional[str] = None
    badge: Optional[str] = None
    position: int = Field(default=0, ge=0)


class Diagnostic(BaseModel):
    """A recoverable per-entry problem; never raised, only collected."""

    kind: DiagnosticKind
    message: str
    filename: Optional[str] = None
    field: Optional[str] = None

    @property
    def reason(self) -> str:
        return self.kind.replace("_", " ")

    @property
    def skips_page(self) -> bool:
        return self.kind in SKIP_KINDS


class CatalogEntry(CatalogModel):
    """Structured metadata describing a single test page."""

    id: str
    filename: str
    url: str
    title: Optional[str] = None
    wcag_criteria: List[str] = Field(default_factory=list)
    wcag_level: Optional[str] = None
    category: str
    test_type: str
    layout_pattern: str
    description: Optional[str] = None
    total_cases: Optional[int] = Field(default=None, ge=0)
    expected_violations: Optional[int] = Field(default=None, ge=0)
    expected_passes: Optional[int] = Field(default=None, ge=0)
    machine_readable: bool = False
    has_metadata: bool = False
    has_expected_results: bool = False
    has_confidence_scores: bool = False

    @model_validator(mode="after")
    def check_case_counts(self) -> "CatalogEntry":
        counts = (self.total_cases, self.expected_violations, self.expected_passes)
        if None not in counts and self.total_cases != self.expected_violations + self.expected_passes:
            raise ValueError(
                f"{self.filename}: totalCases {self.total_cases} != "
                f"{self.expected_violations} violations + {self.expected_passes} passes"
            )
        return self


class CriterionReference(CatalogModel):
    criterion: str
    name: str
    level: str
    principle: str
    guideline: str
    test_pages: List[str] = Field(default_factory=list)


class CatalogMetadata(CatalogModel):
    version: str
    last_updated: str
    repository: str
    description: str
    total_test_pages: int = Field(ge=0)
    total_wcag_criteria: int = Field(ge=0, alias="totalWCAGCriteria")
    total_test_cases: int = Field(ge=0)

    @field_validator("last_updated")
    @classmethod
    def validate_last_updated(cls, value: str) -> str:
        date.fromisoformat(value)
        return value


class ExampleUsage(CatalogModel):
    javascript: str
    python: str


class CatalogUsage(CatalogModel):
    download_instructions: str
    example_usage: ExampleUsage
    automated_testing: str


class Catalog(CatalogModel):
    """The complete artifact consumed by scanner benchmarking scripts."""

    metadata: CatalogMetadata
    test_pages: List[CatalogEntry] = Field(default_factory=list)
    wcag_criteria: List[CriterionReference] = Field(default_factory=list)
    usage: CatalogUsage

    @model_validator(mode="after")
    def check_unique_ids(self) -> "Catalog":
        seen: set[str] = set()
        for entry in self.test_pages:
            if entry.id in seen:
                raise ValueError(f"duplicate catalog id {entry.id!r}")
            seen.add(entry.id)
        return self


@dataclass(frozen=True)
class PageMetadata:
    """Values extracted from a page body, each tagged with its provenance."""

    filename: str
    title: Resolved[str]
    criteria: Resolved[Tuple[str, ...]]
    total_cases: Resolved[int]
    expected_violations: Resolved[int]
    expected_passes: Resolved[int]
    has_structured_meta_tags: bool = False
    machine_readable: bool = False
    diagnostics: Tuple[Diagnostic, ...] = ()


@dataclass
class PageResult:
    """Outcome of one index descriptor: an entry or a skip, plus diagnostics."""

    descriptor: PageDescriptor
    entry: Optional[CatalogEntry] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.entry is not None

    @property
    def skip_reason(self) -> Optional[str]:
        if self.ok:
            return None
        for diagnostic in self.diagnostics:
            if diagnostic.skips_page:
                return diagnostic.reason
        return "skipped"


class SkippedPage(BaseModel):
    filename: str
    reason: str


class RunSummary(BaseModel):
    """Aggregate counters reported at the end of a run."""

    pages_processed: int = 0
    pages_skipped: List[SkippedPage] = Field(default_factory=list)
    diagnostics: List[Diagnostic] = Field(default_factory=list)
    total_test_pages: int = 0
    total_wcag_criteria: int = 0
    total_test_cases: int = 0
    pages_without_case_count: List[str] = Field(default_factory=list)
    output_path: Optional[str] = None

    @classmethod
    def from_catalog(cls, catalog: Catalog) -> "RunSummary":
        meta = catalog.metadata
        return cls(
            pages_processed=len(catalog.test_pages),
            total_test_pages=meta.total_test_pages,
            total_wcag_criteria=meta.total_wcag_criteria,
            total_test_cases=meta.total_test_cases,
            pages_without_case_count=[
                entry.filename for entry in catalog.test_pages if entry.total_cases is None
            ],
        )
