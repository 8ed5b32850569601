"""Metadata utilities for example groups and examples.

Metadata is a plain mapping of tag names to values. Groups merge their own tags
over their parent's merged metadata, and examples merge theirs over the owning
group's, so the closest declaration always wins on key collision.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from grove.errors import DeclarationError


_PACKAGE_DIR = Path(__file__).resolve().parent


@dataclass(frozen=True)
class DeclarationSite:
    """Where a group or example was declared."""

    file_path: str | None = None
    line_number: int | None = None


def _is_internal(filename: str) -> bool:
    try:
        return _PACKAGE_DIR in Path(filename).resolve().parents
    except (OSError, ValueError):
        return False


def find_declaration_site() -> DeclarationSite:
    """Return the first caller frame that lives outside the grove package."""
    frame = inspect.currentframe()
    try:
        while frame is not None:
            filename = frame.f_code.co_filename
            if not _is_internal(filename):
                return DeclarationSite(file_path=filename, line_number=frame.f_lineno)
            frame = frame.f_back
    finally:
        del frame
    return DeclarationSite()


def normalize_tags(tags: Mapping[str, Any] | None = None, **extra: Any) -> dict[str, Any]:
    """Combine a tag mapping and keyword tags into a fresh dict."""
    normalized: dict[str, Any] = {}
    for source in (tags or {}, extra):
        for key, value in source.items():
            if not isinstance(key, str) or not key:
                msg = f"Tag names must be non-empty strings, got {key!r}"
                raise DeclarationError(msg)
            normalized[key] = value
    return normalized


def merge_metadata(*maps: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge metadata mappings, later entries overriding earlier ones."""
    merged: dict[str, Any] = {}
    for data in maps:
        if not data:
            continue
        merged.update(data)
    return merged


def _label(part: Any) -> str:
    if isinstance(part, type):
        return part.__name__
    return str(part)


def parse_describe_args(args: tuple[Any, ...]) -> tuple[type | None, str, dict[str, Any]]:
    """Split ``describe`` positional arguments into (describes, description, tags).

    A type in first position is the described class. A trailing mapping holds
    tags. Everything else is joined into the description.
    """
    parts = list(args)
    tags: dict[str, Any] = {}
    if parts and isinstance(parts[-1], Mapping):
        tags = normalize_tags(parts.pop())

    describes = parts[0] if parts and isinstance(parts[0], type) else None
    description = " ".join(_label(part) for part in parts if part is not None)
    return describes, description, tags


__all__ = [
    "DeclarationSite",
    "find_declaration_site",
    "merge_metadata",
    "normalize_tags",
    "parse_describe_args",
]
