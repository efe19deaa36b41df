"""Missing class detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from contract.models import AnalysisResult
from errors import EmptyClassNameError, ParseError
from parse.blade import BLADE_SUFFIX
from parse.class_refs import extract_class_references
from utils import matches_any

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contract.models import AnalysisTarget, Reference
    from registry.classes import ClassRegistry

DEFAULT_IGNORE = ("Illuminate\\*", "Laravel\\*", "Symfony\\*")


class ClassAnalysisResolver:
    """Report class references that the registry cannot resolve.

    Ignored names stay in ``references`` but are never reported missing.

    Args:
        registry: Source of truth for class existence.
        ignore: Glob patterns over fully-qualified class names.
    """

    extensions = (".php",)
    excluded_suffixes = (BLADE_SUFFIX,)

    def __init__(
        self,
        registry: ClassRegistry,
        ignore: Iterable[str] = DEFAULT_IGNORE,
    ) -> None:
        self.registry = registry
        self.ignore = list(ignore)

    def prepare(self) -> None:
        build = getattr(self.registry, "build", None)
        if callable(build):
            build()

    def class_exists(self, name: str) -> bool:
        """Return True if ``name`` resolves to a class, interface, trait or enum.

        Raises:
            EmptyClassNameError: If ``name`` is empty.
        """
        if name.strip().lstrip("\\") in {"", "0"}:
            raise EmptyClassNameError
        return self.registry.exists(name)

    def analyze(self, target: AnalysisTarget) -> AnalysisResult:
        try:
            references = extract_class_references(target.content)
        except ParseError as e:
            return AnalysisResult.failed_with_error(target, str(e))

        missing: list[Reference] = []
        for reference in references:
            if matches_any(reference.name, self.ignore):
                continue
            if not self.class_exists(reference.name):
                missing.append(reference)

        return AnalysisResult.from_outcome(target, references, missing)


__all__ = ["DEFAULT_IGNORE", "ClassAnalysisResolver"]
