"""The interface every analysis kind implements."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from parse.blade import compile_blade, is_blade_file

if TYPE_CHECKING:
    from contract.models import AnalysisResult, AnalysisTarget


@runtime_checkable
class AnalysisResolver(Protocol):
    """Extracts one kind of reference from a file and checks it.

    ``prepare`` builds registries and is called once per run on the calling
    thread, before any ``analyze`` call. ``analyze`` must not mutate shared
    state, so it can run on several workers at once.
    """

    extensions: tuple[str, ...]
    excluded_suffixes: tuple[str, ...]

    def prepare(self) -> None: ...

    def analyze(self, target: AnalysisTarget) -> AnalysisResult: ...

    def class_exists(self, name: str) -> bool: ...


def php_source(target: AnalysisTarget) -> str:
    """Return the PHP text of a target, compiling Blade templates first."""
    if is_blade_file(target.name):
        return compile_blade(target.content)
    return target.content


__all__ = ["AnalysisResolver", "php_source"]
