from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from scan.files import FileResolver, _build_gitignore_matcher

if TYPE_CHECKING:
    from pathlib import Path


def _relative(repo_root: Path, resolver: FileResolver) -> list[str]:
    return [
        target.path.relative_to(repo_root).as_posix()
        for target in resolver.get_files([str(repo_root)])
    ]


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_get_files_skips_symlinked_dirs(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    (repo_root / "app").mkdir()
    (repo_root / "app" / "Module.php").write_text("<?php\n", encoding="utf-8")

    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / "Leak.php").write_text("<?php\n", encoding="utf-8")

    symlink_dir = repo_root / "linked"
    symlink_dir.symlink_to(external_root, target_is_directory=True)

    results = _relative(repo_root, FileResolver())

    assert "app/Module.php" in results
    assert "linked/Leak.php" not in results


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_get_files_skips_symlinked_files_outside_root(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    (repo_root / "Inside.php").write_text("<?php\n", encoding="utf-8")
    (tmp_path / "Outside.php").write_text("<?php\n", encoding="utf-8")
    (repo_root / "Alias.php").symlink_to(tmp_path / "Outside.php")
    (repo_root / "Same.php").symlink_to(repo_root / "Inside.php")

    results = _relative(repo_root, FileResolver())

    assert results == ["Inside.php", "Same.php"]


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_nested_gitignore_skips_symlinked_gitignore(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    (repo_root / "app").mkdir()
    (repo_root / "app" / "Module.php").write_text("<?php\n", encoding="utf-8")
    (repo_root / ".gitignore").write_text("*.bin\n", encoding="utf-8")

    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / "outside.gitignore").write_text(
        "app/Module.php\n", encoding="utf-8"
    )

    symlink_gitignore = repo_root / "linked.gitignore"
    symlink_gitignore.symlink_to(external_root / "outside.gitignore")

    matcher = _build_gitignore_matcher(repo_root, nested_gitignore=True)
    assert matcher is not None
    assert matcher(str(repo_root / "app" / "Module.php")) is False
