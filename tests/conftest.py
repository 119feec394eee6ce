from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterable, Optional, Sequence, Tuple

import pytest

from a11y_catalog.utils.logging import configure_logging

HEADER_ROW = """
  <div class="test-item header">
    <div>Test page</div>
    <div>Criterion</div>
    <div>Description</div>
  </div>"""

Case = Tuple[str, Optional[str], Optional[str]]


def index_item(
    filename: Optional[str],
    label: str = "Sample",
    criterion: Optional[str] = None,
    description: Optional[str] = None,
    badge: Optional[str] = None,
) -> str:
    link = f'<a href="{filename}">{label}</a>' if filename else f"<strong>{label}</strong>"
    parts = [f'    <div class="test-name">{link}</div>']
    if criterion is not None:
        parts.append(f'    <div class="test-criterion">{criterion}</div>')
    if description is not None:
        parts.append(f'    <div class="test-description">{description}</div>')
    if badge is not None:
        parts.append(f'    <div class="test-level"><span class="badge badge-{badge}">{badge.upper()}</span></div>')
    body = "\n".join(parts)
    return f'\n  <div class="test-item">\n{body}\n  </div>'


def index_html(items: Iterable[str], header: bool = True) -> str:
    rows = (HEADER_ROW if header else "") + "".join(items)
    return (
        "<!DOCTYPE html>\n<html lang=\"en\">\n<head><title>Accessibility Test Pages</title></head>\n"
        f"<body>\n<main>\n<div class=\"test-list\">{rows}\n</div>\n</main>\n</body>\n</html>\n"
    )


def page_html(
    title: Optional[str] = "WCAG 2.4.7 Focus Visible - Test Page",
    meta: Optional[Dict[str, str]] = None,
    cases: Sequence[Case] = (),
) -> str:
    """Build a test page; each case is (test id, expected result, criterion)."""

    head = [f"<title>{title}</title>"] if title is not None else []
    for name, content in (meta or {}).items():
        head.append(f'<meta name="{name}" content="{content}">')
    body = []
    for test_id, expected, criterion in cases:
        attrs = [f'data-test-id="{test_id}"']
        if expected is not None:
            attrs.append(f'data-expected-result="{expected}"')
        if criterion is not None:
            attrs.append(f'data-wcag-criterion="{criterion}"')
        body.append(f'<div class="test-case" {" ".join(attrs)}><button>Case {test_id}</button></div>')
    return (
        "<!DOCTYPE html>\n<html lang=\"en\">\n<head>\n"
        + "\n".join(head)
        + "\n</head>\n<body>\n"
        + "\n".join(body)
        + "\n</body>\n</html>\n"
    )


def cases(violations: int, passes: int, criterion: Optional[str] = None, prefix: str = "case") -> list[Case]:
    result: list[Case] = []
    for number in range(violations):
        result.append((f"{prefix}-v{number}", "violation", criterion))
    for number in range(passes):
        result.append((f"{prefix}-p{number}", "pass", criterion))
    return result


SiteBuilder = Callable[..., Path]


@pytest.fixture
def make_site(tmp_path: Path) -> SiteBuilder:
    """Write an index and pages under ``tmp_path/site`` and return the root."""

    def _make(items: Iterable[str], pages: Optional[Dict[str, str]] = None, header: bool = True) -> Path:
        root = tmp_path / "site"
        root.mkdir(exist_ok=True)
        (root / "index.html").write_text(index_html(items, header=header), encoding="utf-8")
        for name, content in (pages or {}).items():
            target = root / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def sample_site(make_site: SiteBuilder) -> Path:
    items = [
        index_item("focus-visible-test.html", "Focus Visible", "2.4.7", "Focus indicator examples", "aa"),
        index_item("contrast-algorithm-test.html", "Contrast Algorithm", "1.4.3, 1.4.11", "Contrast ratios", "algorithm"),
        index_item("missing-page-test.html", "Missing Page", "1.1.1", "Not on disk", "a"),
        index_item("ai-interaction-test.html", "AI Interaction", "Complex Interaction", "Agent flows", "ai-test"),
    ]
    pages = {
        "focus-visible-test.html": page_html(cases=cases(3, 3)),
        "contrast-algorithm-test.html": page_html(
            title="WCAG 1.4.3 Contrast Algorithm Test Page",
            meta={
                "test:wcag-criterion": "1.4.3, 1.4.11",
                "test:total-cases": "10",
                "test:expected-violations": "4",
            },
            cases=cases(4, 6, criterion="1.4.3"),
        ),
        "ai-interaction-test.html": page_html(title="AI Interaction Test Page"),
    }
    return make_site(items, pages)


@pytest.fixture(autouse=True)
def _quiet_logging() -> None:
    configure_logging("WARNING")
