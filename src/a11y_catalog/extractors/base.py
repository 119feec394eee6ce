"""Streaming markup extraction shared by the index and page extractors."""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from html.parser import HTMLParser
from typing import Dict, List, Optional, Sequence, Tuple

_WHITESPACE_RE = re.compile(r"\s+")

Attrs = Sequence[Tuple[str, Optional[str]]]


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def class_list(attrs: Dict[str, Optional[str]]) -> List[str]:
    return (attrs.get("class") or "").split()


class MarkupExtractor(HTMLParser, ABC):
    """Single-pass tag and attribute extractor over trusted markup.

    Subclasses receive start/end events with attributes as a dict and can open
    a text capture that collects character data until the capturing element
    closes. No document tree is built.
    """

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._capture_tag: Optional[str] = None
        self._capture_depth = 0
        self._capture_chunks: List[str] = []
        self._capture_key: Optional[str] = None

    def feed_document(self, text: str) -> None:
        self.feed(text)
        self.close()

    # HTMLParser hooks -----------------------------------------------------
    def handle_starttag(self, tag: str, attrs: Attrs) -> None:  # type: ignore[override]
        if self._capture_tag == tag:
            self._capture_depth += 1
        self.on_start(tag, {name.lower(): value for name, value in attrs})

    def handle_endtag(self, tag: str) -> None:  # type: ignore[override]
        if self._capture_tag == tag:
            self._capture_depth -= 1
            if self._capture_depth == 0:
                key = self._capture_key
                text = collapse_whitespace("".join(self._capture_chunks))
                self._capture_tag = None
                self._capture_key = None
                self._capture_chunks = []
                self.on_capture(key or tag, text)
        self.on_end(tag)

    def handle_data(self, data: str) -> None:
        if self._capture_tag is not None:
            self._capture_chunks.append(data)

    # Subclass API ---------------------------------------------------------
    def start_capture(self, tag: str, key: str) -> None:
        """Collect text until the current ``tag`` element closes."""

        if self._capture_tag is not None:
            return
        self._capture_tag = tag
        self._capture_key = key
        self._capture_depth = 1
        self._capture_chunks = []

    @property
    def capturing(self) -> bool:
        return self._capture_tag is not None

    @abstractmethod
    def on_start(self, tag: str, attrs: Dict[str, Optional[str]]) -> None:
        """Handle an opening (or self-closing) tag."""

    def on_end(self, tag: str) -> None:
        """Handle a closing tag."""

    def on_capture(self, key: str, text: str) -> None:
        """Receive the whitespace-collapsed text of a finished capture."""
