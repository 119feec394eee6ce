"""Fixed lookup tables used to classify catalog entries.

Every table is read-only and built once at import time. Classification never
infers a level, category or layout outside these tables.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional, Tuple


class BadgeClass(NamedTuple):
    wcag_level: Optional[str]
    test_type: str


class CriterionInfo(NamedTuple):
    name: str
    level: str
    principle: str
    guideline: str


DEFAULT_BADGE = BadgeClass(wcag_level=None, test_type="basic")

BADGE_CLASSES: Mapping[str, BadgeClass] = MappingProxyType(
    {
        "a": BadgeClass("A", "basic"),
        "aa": BadgeClass("AA", "basic"),
        "aaa": BadgeClass("AAA", "basic"),
        "algorithm": BadgeClass("AA", "algorithm"),
        "legacy": BadgeClass("Multiple", "legacy"),
        "multiple": BadgeClass("Multiple", "integration"),
        "ai-test": BadgeClass(None, "ai-validation"),
    }
)

CRITERION_CATEGORIES: Mapping[str, str] = MappingProxyType(
    {
        "2.4.7": "Focus Visibility",
        "1.4.3": "Color Contrast",
        "1.4.11": "Color Contrast",
        "1.4.4": "Text and Content",
        "1.1.1": "Text and Content",
        "1.4.1": "Text and Content",
        "1.3.3": "Text and Content",
        "2.4.2": "Navigation and Page Structure",
        "3.1.1": "Navigation and Page Structure",
        "2.4.1": "Navigation and Page Structure",
        "2.4.4": "Navigation and Page Structure",
        "2.4.6": "Navigation and Page Structure",
        "3.1.2": "Navigation and Page Structure",
        "3.2.3": "Navigation and Page Structure",
        "3.2.4": "Navigation and Page Structure",
        "1.3.1": "Structure and Semantics",
        "4.1.2": "Structure and Semantics",
        "1.3.2": "Structure and Semantics",
        "3.3.1": "Forms and Input Validation",
        "3.3.3": "Forms and Input Validation",
        "1.3.5": "Forms and Input Validation",
        "3.3.2": "Forms and Input Validation",
        "2.1.1": "Keyboard and Input",
        "2.5.8": "Keyboard and Input",
        "2.5.3": "Keyboard and Input",
    }
)
UNMAPPED_CRITERION_CATEGORY = "Other"

# Checked in order against the filename when a page has no criteria.
FILENAME_CATEGORIES: Tuple[Tuple[str, str], ...] = (
    ("ai-interaction", "AI Browser Interaction Tests"),
)
FALLBACK_CATEGORY = "Comprehensive & Legacy Tests"

TEST_TYPE_LAYOUTS: Mapping[str, str] = MappingProxyType(
    {
        "ai-validation": "interactive",
        "algorithm": "independent-grid",
        "legacy": "mixed",
        "integration": "mixed",
    }
)
SIDE_BY_SIDE_CRITERIA = frozenset(
    {
        "1.1.1",
        "1.3.1",
        "1.3.2",
        "1.3.3",
        "1.4.1",
        "2.4.1",
        "2.4.4",
        "2.4.6",
        "3.1.2",
        "3.2.3",
        "3.2.4",
        "4.1.2",
        "3.3.1",
        "3.3.2",
        "2.1.1",
        "2.5.3",
    }
)
SIDE_BY_SIDE_LAYOUT = "side-by-side"
DEFAULT_LAYOUT = "independent-grid"

# Index criterion texts that label a page rather than name a criterion.
PLACEHOLDER_CRITERIA = frozenset({"Multiple", "General Interaction", "Complex Interaction"})

CRITERION_REGISTRY: Mapping[str, CriterionInfo] = MappingProxyType(
    {
        "1.1.1": CriterionInfo("Non-text Content", "A", "Perceivable", "1.1 Text Alternatives"),
        "1.3.1": CriterionInfo("Info and Relationships", "A", "Perceivable", "1.3 Adaptable"),
        "1.3.2": CriterionInfo("Meaningful Sequence", "A", "Perceivable", "1.3 Adaptable"),
        "1.3.3": CriterionInfo("Sensory Characteristics", "A", "Perceivable", "1.3 Adaptable"),
        "1.3.5": CriterionInfo("Identify Input Purpose", "AA", "Perceivable", "1.3 Adaptable"),
        "1.4.1": CriterionInfo("Use of Color", "A", "Perceivable", "1.4 Distinguishable"),
        "1.4.3": CriterionInfo("Contrast (Minimum)", "AA", "Perceivable", "1.4 Distinguishable"),
        "1.4.4": CriterionInfo("Resize Text", "AA", "Perceivable", "1.4 Distinguishable"),
        "1.4.11": CriterionInfo("Non-text Contrast", "AA", "Perceivable", "1.4 Distinguishable"),
        "2.1.1": CriterionInfo("Keyboard", "A", "Operable", "2.1 Keyboard Accessible"),
        "2.4.1": CriterionInfo("Bypass Blocks", "A", "Operable", "2.4 Navigable"),
        "2.4.2": CriterionInfo("Page Titled", "A", "Operable", "2.4 Navigable"),
        "2.4.4": CriterionInfo("Link Purpose (In Context)", "A", "Operable", "2.4 Navigable"),
        "2.4.6": CriterionInfo("Headings and Labels", "AA", "Operable", "2.4 Navigable"),
        "2.4.7": CriterionInfo("Focus Visible", "AA", "Operable", "2.4 Navigable"),
        "2.5.3": CriterionInfo("Label in Name", "A", "Operable", "2.5 Input Modalities"),
        "2.5.8": CriterionInfo("Target Size (Minimum)", "AA", "Operable", "2.5 Input Modalities"),
        "3.1.1": CriterionInfo("Language of Page", "A", "Understandable", "3.1 Readable"),
        "3.1.2": CriterionInfo("Language of Parts", "AA", "Understandable", "3.1 Readable"),
        "3.2.3": CriterionInfo("Consistent Navigation", "AA", "Understandable", "3.2 Predictable"),
        "3.2.4": CriterionInfo("Consistent Identification", "AA", "Understandable", "3.2 Predictable"),
        "3.3.1": CriterionInfo("Error Identification", "A", "Understandable", "3.3 Input Assistance"),
        "3.3.2": CriterionInfo("Labels or Instructions", "A", "Understandable", "3.3 Input Assistance"),
        "3.3.3": CriterionInfo("Error Suggestion", "AA", "Understandable", "3.3 Input Assistance"),
        "4.1.2": CriterionInfo("Name, Role, Value", "A", "Robust", "4.1 Compatible"),
    }
)


def classify_badge(token: Optional[str]) -> BadgeClass:
    if not token:
        return DEFAULT_BADGE
    return BADGE_CLASSES.get(token.strip().lower(), DEFAULT_BADGE)
