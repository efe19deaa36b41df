"""Shared utilities for refcheck."""

from __future__ import annotations

from fnmatch import fnmatchcase
from pathlib import Path, PurePath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


def matches_pattern(name: str, pattern: str) -> bool:
    """Return True when ``name`` matches the glob ``pattern`` in full.

    Matching is case-sensitive. ``*`` spans any characters, including the
    namespace separator, so ``Illuminate\\*`` covers every nested class.

    Examples:
        >>> matches_pattern("Illuminate\\\\Support\\\\Str", "Illuminate\\\\*")
        True
        >>> matches_pattern("admin.users.index", "admin.*")
        True
        >>> matches_pattern("Admin.users", "admin.*")
        False
    """
    return fnmatchcase(name, pattern)


def matches_any(name: str, patterns: Iterable[str] | None) -> bool:
    """Return True when ``name`` matches at least one of ``patterns``."""
    if not patterns:
        return False
    return any(matches_pattern(name, pattern) for pattern in patterns)


def path_matches(path: str | PurePath, pattern: str) -> bool:
    """Match an exclude pattern against a path.

    A pattern excludes a path when it is a substring of the POSIX path, when
    it globs the whole path, or when it globs any single path component.
    """
    posix = path.as_posix() if isinstance(path, PurePath) else str(path)
    posix = posix.replace("\\", "/")
    if pattern in posix:
        return True
    if fnmatchcase(posix, pattern):
        return True
    return any(fnmatchcase(part, pattern) for part in posix.split("/") if part)


def display_path(path: Path, base: Path | None) -> str:
    """Render ``path`` relative to ``base`` when possible."""
    if base is not None:
        try:
            return path.relative_to(base).as_posix()
        except ValueError:
            pass
    return path.as_posix()


__all__ = ["display_path", "matches_any", "matches_pattern", "path_matches"]
