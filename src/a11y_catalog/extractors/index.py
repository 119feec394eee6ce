"""Extract page descriptors from the master index document."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import IndexNotFoundError, IndexParseError
from ..schema import Diagnostic, PageDescriptor
from ..utils.logging import get_logger
from .base import MarkupExtractor, class_list

LOGGER = get_logger(__name__)

ITEM_CLASS = "test-item"
SKIPPED_ROW_CLASSES = frozenset({"header", "template"})
BADGE_PREFIX = "badge-"
PAGE_SUFFIX = ".html"


@dataclass
class _Block:
    ordinal: int
    skip: bool
    depth: int = 1
    href: Optional[str] = None
    label: Optional[str] = None
    criterion: Optional[str] = None
    description: Optional[str] = None
    badge: Optional[str] = None


@dataclass
class IndexScan:
    descriptors: List[PageDescriptor] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


class _IndexParser(MarkupExtractor):
    def __init__(self) -> None:
        super().__init__()
        self.scan = IndexScan()
        self._block: Optional[_Block] = None
        self._template_depth = 0
        self._ordinal = 0

    def on_start(self, tag: str, attrs: Dict[str, Optional[str]]) -> None:
        if tag == "template":
            self._template_depth += 1
            return
        classes = class_list(attrs)
        block = self._block
        if tag == "div":
            if block is not None:
                block.depth += 1
            elif ITEM_CLASS in classes:
                self._ordinal += 1
                skip = self._template_depth > 0 or bool(SKIPPED_ROW_CLASSES.intersection(classes))
                self._block = _Block(ordinal=self._ordinal, skip=skip)
                return
        if block is None or block.skip or self.capturing:
            return
        if tag == "a" and block.href is None:
            href = (attrs.get("href") or "").strip()
            if href.lower().endswith(PAGE_SUFFIX):
                block.href = href
                self.start_capture("a", "label")
        elif tag == "div" and "test-criterion" in classes:
            self.start_capture("div", "criterion")
        elif tag == "div" and "test-description" in classes:
            self.start_capture("div", "description")
        elif tag == "span" and "badge" in classes and block.badge is None:
            tokens = [name[len(BADGE_PREFIX):] for name in classes if name.startswith(BADGE_PREFIX)]
            if tokens and tokens[0]:
                block.badge = tokens[0]

    def on_capture(self, key: str, text: str) -> None:
        block = self._block
        if block is None or not text:
            return
        if getattr(block, key, None) is None:
            setattr(block, key, text)

    def on_end(self, tag: str) -> None:
        if tag == "template":
            self._template_depth = max(0, self._template_depth - 1)
            return
        if tag != "div" or self._block is None:
            return
        self._block.depth -= 1
        if self._block.depth == 0:
            self._finish(self._block)
            self._block = None

    def close(self) -> None:
        super().close()
        if self._block is not None:
            self._finish(self._block)
            self._block = None

    def _finish(self, block: _Block) -> None:
        if block.skip:
            return
        if not block.href or not block.label:
            message = f"listing item #{block.ordinal} has no page link and label; skipped"
            LOGGER.warning(message)
            self.scan.diagnostics.append(Diagnostic(kind="skipped_block", message=message))
            return
        self.scan.descriptors.append(
            PageDescriptor(
                filename=block.href,
                title=block.label,
                criterion_text=block.criterion,
                description=block.description,
                badge=block.badge,
                position=len(self.scan.descriptors),
            )
        )


class IndexDirectoryScanner:
    """Produce page descriptors in index-document order."""

    def parse(self, text: str) -> IndexScan:
        parser = _IndexParser()
        parser.feed_document(text)
        return parser.scan

    def scan(self, index_path: Path) -> IndexScan:
        if not index_path.is_file():
            raise IndexNotFoundError(f"Index document {index_path} does not exist")
        try:
            text = index_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise IndexNotFoundError(f"Index document {index_path} cannot be read: {exc}") from exc
        result = self.parse(text)
        if not result.descriptors:
            raise IndexParseError(f"Index document {index_path} contains no listing items")
        LOGGER.info("Found %s listing items in %s", len(result.descriptors), index_path.name)
        return result
