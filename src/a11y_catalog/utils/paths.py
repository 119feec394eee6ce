"""Path utility helpers."""
from __future__ import annotations

from pathlib import Path
from typing import Optional


def normalise_path(path: Path) -> Path:
    """Return a normalised absolute path handling Windows separators."""

    return Path(str(path).replace("\\", "/")).expanduser().resolve()


def resolve_within(root: Path, relative: str) -> Optional[Path]:
    """Resolve ``relative`` against ``root``; ``None`` if it escapes the root."""

    base = normalise_path(root)
    target = normalise_path(base / relative)
    if target != base and base not in target.parents:
        return None
    return target
