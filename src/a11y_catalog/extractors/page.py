"""Extract declared and inferred metadata from a single test page.

Each field is resolved independently through a two-tier chain: a structured
``<meta name="test:...">`` annotation wins, otherwise the value is inferred
from per-case ``data-*`` attributes, otherwise it stays missing. Counted values
are still gathered when a declaration exists so that disagreements can be
reported.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Tuple

from ..provenance import Provenance, Resolved
from ..schema import Diagnostic, PageDescriptor, PageMetadata
from ..utils.logging import get_logger
from ..utils.paths import resolve_within
from .base import MarkupExtractor

LOGGER = get_logger(__name__)

META_CRITERION = "test:wcag-criterion"
META_TOTAL_CASES = "test:total-cases"
META_EXPECTED_VIOLATIONS = "test:expected-violations"
STRUCTURED_META = (META_CRITERION, META_TOTAL_CASES, META_EXPECTED_VIOLATIONS)

ATTR_TEST_ID = "data-test-id"
ATTR_CRITERION = "data-wcag-criterion"
ATTR_EXPECTED = "data-expected-result"

_TITLE_PREFIX_RE = re.compile(
    r"^\s*(?:WCAG\s+)?\d+(?:\.\d+)+(?:\s*,\s*\d+(?:\.\d+)+)*\s*[-:–]?\s*", re.IGNORECASE
)
_TITLE_SUFFIX_RE = re.compile(r"\s*[-:|–]?\s*Test Page\s*$", re.IGNORECASE)
_COUNT_RE = re.compile(r"^\s*(\d+)\s*$")

# Case attributes are counted over the raw text so cases emitted from script
# templates are seen as well as static markup.
_TEST_ID_ATTR_RE = re.compile(r"\bdata-test-id\s*=", re.IGNORECASE)
_TEST_ID_VALUE_RE = re.compile(
    r"""\bdata-test-id\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))""", re.IGNORECASE
)
_EXPECTED_RE = re.compile(r"""\bdata-expected-result\s*=\s*["']?\s*(violation|pass)\b""", re.IGNORECASE)


def clean_title(raw: str) -> Optional[str]:
    """Strip criterion-number prefixes and a trailing "Test Page" suffix."""

    title = _TITLE_SUFFIX_RE.sub("", _TITLE_PREFIX_RE.sub("", raw)).strip()
    return title or None


def split_criteria(text: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in text.split(",") if part.strip())


class CaseCounts(NamedTuple):
    attributes: int
    test_ids: int
    violations: int
    passes: int


def count_cases(text: str) -> CaseCounts:
    """Count per-case attributes anywhere in ``text``, including script bodies."""

    test_ids = sum(
        1 for match in _TEST_ID_VALUE_RE.finditer(text) if any(group and group.strip() for group in match.groups())
    )
    markers = [match.group(1).lower() for match in _EXPECTED_RE.finditer(text)]
    return CaseCounts(
        attributes=len(_TEST_ID_ATTR_RE.findall(text)),
        test_ids=test_ids,
        violations=markers.count("violation"),
        passes=markers.count("pass"),
    )


class _PageParser(MarkupExtractor):
    def __init__(self) -> None:
        super().__init__()
        self.title: Optional[str] = None
        self.meta: Dict[str, str] = {}
        self.first_case_criterion: Optional[str] = None

    def on_start(self, tag: str, attrs: Dict[str, Optional[str]]) -> None:
        if tag == "title" and self.title is None:
            self.start_capture("title", "title")
        elif tag == "meta":
            name = (attrs.get("name") or "").strip().lower()
            if name in STRUCTURED_META and name not in self.meta:
                self.meta[name] = attrs.get("content") or ""
        if self.first_case_criterion is None:
            criterion = (attrs.get(ATTR_CRITERION) or "").strip()
            if criterion:
                self.first_case_criterion = criterion

    def on_capture(self, key: str, text: str) -> None:
        if key == "title":
            self.title = text


class PageMetadataExtractor:
    """Load a referenced page and resolve its metadata fields."""

    def load(self, descriptor: PageDescriptor, root: Path) -> Tuple[Optional[str], Optional[Diagnostic]]:
        filename = descriptor.filename
        path = resolve_within(root, filename)
        if path is None:
            return None, Diagnostic(
                kind="unsafe_path", filename=filename, message=f"{filename} resolves outside {root}"
            )
        if not path.is_file():
            return None, Diagnostic(kind="missing_file", filename=filename, message=f"{filename} not found")
        try:
            return path.read_text(encoding="utf-8"), None
        except (OSError, UnicodeDecodeError) as exc:
            return None, Diagnostic(
                kind="unreadable_file", filename=filename, message=f"{filename} cannot be read: {exc}"
            )

    def extract(self, descriptor: PageDescriptor, root: Path) -> Tuple[Optional[PageMetadata], Optional[Diagnostic]]:
        text, problem = self.load(descriptor, root)
        if problem is not None:
            LOGGER.warning("Skipping %s: %s", descriptor.filename, problem.message)
            return None, problem
        return self.parse(text or "", descriptor.filename), None

    def parse(self, text: str, filename: str) -> PageMetadata:
        parser = _PageParser()
        parser.feed_document(text)
        diagnostics: List[Diagnostic] = []

        def declared_count(name: str, field_name: str) -> Resolved[int]:
            if name not in parser.meta:
                return Resolved.missing()
            match = _COUNT_RE.match(parser.meta[name])
            if match is None:
                diagnostics.append(
                    Diagnostic(
                        kind="malformed_annotation",
                        filename=filename,
                        field=field_name,
                        message=f"{name} content {parser.meta[name]!r} is not a count; ignored",
                    )
                )
                return Resolved.missing()
            return Resolved.declared(int(match.group(1)))

        title: Resolved[str] = Resolved.missing()
        if parser.title:
            cleaned = clean_title(parser.title)
            if cleaned:
                title = Resolved.declared(cleaned)

        criteria: Resolved[Tuple[str, ...]] = Resolved.missing()
        declared_criteria = split_criteria(parser.meta.get(META_CRITERION, ""))
        if declared_criteria:
            criteria = Resolved.declared(declared_criteria)
        elif parser.first_case_criterion:
            criteria = Resolved.inferred((parser.first_case_criterion,))

        counts = count_cases(text)

        total_cases = declared_count(META_TOTAL_CASES, "totalCases")
        declared_total = total_cases.value
        if declared_total is not None:
            gap = declared_total - counts.test_ids
            if counts.test_ids and gap:
                diagnostics.append(
                    Diagnostic(
                        kind="count_discrepancy",
                        filename=filename,
                        field="totalCases",
                        message=(
                            f"declared {declared_total} cases but counted {counts.test_ids} "
                            f"{ATTR_TEST_ID} attributes ({abs(gap)}-case discrepancy); declared value kept"
                        ),
                    )
                )
        elif counts.test_ids:
            total_cases = Resolved.inferred(counts.test_ids)

        has_markers = bool(counts.violations or counts.passes)
        expected_violations = declared_count(META_EXPECTED_VIOLATIONS, "expectedViolations")
        expected_passes: Resolved[int] = Resolved.missing()
        declared_violations = expected_violations.value
        if declared_violations is None:
            if has_markers:
                expected_violations = Resolved.inferred(counts.violations)
                expected_passes = Resolved.inferred(counts.passes)
        elif has_markers and declared_violations != counts.violations:
            diagnostics.append(
                Diagnostic(
                    kind="count_discrepancy",
                    filename=filename,
                    field="expectedViolations",
                    message=(
                        f"declared {declared_violations} expected violations but counted "
                        f"{counts.violations} {ATTR_EXPECTED}=violation markers; declared value kept"
                    ),
                )
            )

        total = total_cases.value
        violations = expected_violations.value
        if total is not None and violations is not None:
            remainder = total - violations
            if remainder < 0:
                diagnostics.append(
                    Diagnostic(
                        kind="inconsistent_counts",
                        filename=filename,
                        field="expectedPasses",
                        message=(
                            f"{violations} expected violations exceed "
                            f"{total} total cases; expected passes left unset"
                        ),
                    )
                )
                expected_passes = Resolved.missing()
            elif not expected_passes.known:
                expected_passes = Resolved.inferred(remainder)
            elif expected_passes.value != remainder:
                diagnostics.append(
                    Diagnostic(
                        kind="inconsistent_counts",
                        filename=filename,
                        field="expectedPasses",
                        message=(
                            f"{violations} violations + {expected_passes.value} passes "
                            f"!= {total} total cases; expected passes left unset"
                        ),
                    )
                )
                expected_passes = Resolved.missing()

        for diagnostic in diagnostics:
            LOGGER.warning("%s: %s", filename, diagnostic.message)

        return PageMetadata(
            filename=filename,
            title=title,
            criteria=criteria,
            total_cases=total_cases,
            expected_violations=expected_violations,
            expected_passes=expected_passes,
            has_structured_meta_tags=any(
                value.provenance is Provenance.DECLARED
                for value in (criteria, total_cases, expected_violations)
            ),
            machine_readable=counts.attributes > 0,
            diagnostics=tuple(diagnostics),
        )
