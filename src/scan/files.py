"""File discovery for refcheck."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, cast

import structlog
from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

from contract.models import AnalysisTarget
from utils import display_path, path_matches

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

logger = structlog.get_logger(__name__)


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        root_resolved = root.resolve()
        path_resolved = path.resolve()
    except OSError:
        return False

    try:
        path_resolved.relative_to(root_resolved)
    except ValueError:
        return False

    return True


def _iter_gitignore_files(root: Path) -> list[Path]:
    """Return sorted list of .gitignore files under root (including root)."""
    gitignore_paths = [root / ".gitignore"]
    gitignore_paths.extend(root.rglob(".gitignore"))
    unique_paths = {path for path in gitignore_paths if path.is_file()}
    return sorted(unique_paths, key=lambda p: p.relative_to(root).as_posix())


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
) -> Callable[[str], bool] | None:
    if not nested_gitignore:
        gitignore_path = root / ".gitignore"
        if gitignore_path.is_file():
            return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
        return None

    gitignore_paths = _iter_gitignore_files(root)
    if not gitignore_paths:
        return None

    matchers = [parse_gitignore(path) for path in gitignore_paths]

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                continue
        return False

    return matches


class FileResolver:
    """Turn input paths into the sorted list of files to analyze.

    Args:
        extensions: File name endings eligible for analysis.
        excluded_suffixes: File name endings never analyzed, checked after
            ``extensions`` (class analysis skips ``.blade.php``).
        exclude: Path patterns; a match on substring, whole path or any
            path component excludes the file.
        base_path: Directory that relative input paths are resolved from.
        respect_gitignore: Skip files ignored by ``.gitignore``.
        nested_gitignore: Also honour ``.gitignore`` files below the root.
    """

    def __init__(
        self,
        extensions: Iterable[str] = (".php",),
        *,
        excluded_suffixes: Iterable[str] = (),
        exclude: Iterable[str] = (),
        base_path: Path | None = None,
        respect_gitignore: bool = False,
        nested_gitignore: bool = False,
    ) -> None:
        self.extensions = tuple(extensions)
        self.excluded_suffixes = tuple(excluded_suffixes)
        self.exclude = list(exclude)
        self.base_path = base_path
        self.respect_gitignore = respect_gitignore
        self.nested_gitignore = nested_gitignore

    def should_analyze(self, path: Path) -> bool:
        """Decide eligibility from the path string alone.

        Exclude patterns see the path relative to ``base_path`` when the file
        lies under it.
        """
        name = path.name
        if name.startswith("."):
            return False
        if not name.endswith(self.extensions):
            return False
        if self.excluded_suffixes and name.endswith(self.excluded_suffixes):
            return False
        shown = display_path(path, self.base_path)
        return not any(path_matches(shown, pattern) for pattern in self.exclude)

    def _absolute(self, path: str) -> Path:
        candidate = Path(path)
        if not candidate.is_absolute() and self.base_path is not None:
            candidate = self.base_path / candidate
        return candidate.absolute()

    def _walk_directory(self, directory: Path) -> Iterator[Path]:
        gitignore_matches = (
            _build_gitignore_matcher(directory, nested_gitignore=self.nested_gitignore)
            if self.respect_gitignore
            else None
        )

        for path in directory.rglob("*"):
            relative = path.relative_to(directory)
            if any(part.startswith(".") for part in relative.parts):
                continue
            if not path.is_file():
                continue
            if path.is_symlink() and not _is_within_root(path, directory):
                logger.debug("skipping symlink outside root", path=str(path))
                continue
            if not _is_within_root(path.parent, directory):
                continue
            if gitignore_matches is not None and gitignore_matches(str(path)):
                continue
            if self.should_analyze(path):
                yield path

    def get_files(self, paths: Iterable[str]) -> list[AnalysisTarget]:
        """Discover eligible files under ``paths``, de-duplicated and sorted."""
        found: dict[str, Path] = {}
        for entry in paths:
            path = self._absolute(entry)
            if path.is_file():
                if self.should_analyze(path):
                    found.setdefault(path.as_posix(), path)
            elif path.is_dir():
                for file_path in self._walk_directory(path):
                    found.setdefault(file_path.as_posix(), file_path)

        logger.debug("discovered files", files=len(found))
        return [AnalysisTarget(found[key]) for key in sorted(found)]


__all__ = ["FileResolver"]
