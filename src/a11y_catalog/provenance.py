"""Resolved values tagged with the tier that produced them."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class Provenance(str, Enum):
    DECLARED = "declared"
    INFERRED = "inferred"
    INDEX = "index"
    MISSING = "missing"


@dataclass(frozen=True)
class Resolved(Generic[T]):
    """A field value together with the precedence tier that resolved it."""

    value: Optional[T]
    provenance: Provenance

    @classmethod
    def declared(cls, value: T) -> "Resolved[T]":
        return cls(value, Provenance.DECLARED)

    @classmethod
    def inferred(cls, value: T) -> "Resolved[T]":
        return cls(value, Provenance.INFERRED)

    @classmethod
    def from_index(cls, value: T) -> "Resolved[T]":
        return cls(value, Provenance.INDEX)

    @classmethod
    def missing(cls) -> "Resolved[T]":
        return cls(None, Provenance.MISSING)

    @property
    def known(self) -> bool:
        return self.provenance is not Provenance.MISSING


def first_known(*candidates: Resolved[T]) -> Resolved[T]:
    """Return the first resolved candidate, in precedence order."""

    for candidate in candidates:
        if candidate.known:
            return candidate
    return Resolved.missing()
