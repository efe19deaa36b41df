"""Input path validation."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = structlog.get_logger(__name__)


class PathResolver:
    """Keep the input paths that exist, in input order.

    Relative paths are checked against ``base_path`` (the current directory
    when unset). Entries are returned as given; nothing is normalized.
    """

    def __init__(self, base_path: Path | None = None) -> None:
        self.base_path = base_path

    def absolute(self, path: str) -> Path:
        candidate = Path(path)
        if candidate.is_absolute() or self.base_path is None:
            return candidate
        return self.base_path / candidate

    def resolve(self, paths: Iterable[str]) -> list[str]:
        resolved: list[str] = []
        for path in paths:
            candidate = self.absolute(path)
            if candidate.is_file() or candidate.is_dir():
                resolved.append(path)
            else:
                logger.debug("skipping missing path", path=path)
        return resolved


__all__ = ["PathResolver"]
