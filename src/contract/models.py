"""Analysis data model shared by extractors, resolvers and reporters."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from pathlib import Path

ReferenceKind = Literal["class", "route", "translation"]

WarningType = Literal[
    "dynamic_route",
    "dynamic_key",
    "empty_route",
    "empty_key",
    "missing_vendor_package",
]


class Reference(BaseModel):
    """A symbolic name found in a source file."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        description="Literal value, or the normalized expression for dynamic references"
    )
    line: int
    kind: ReferenceKind
    dynamic: bool = False
    call: str | None = Field(
        default=None, description="Call shape or syntax that produced the reference"
    )
    reason: str | None = Field(
        default=None, description="Why a dynamic reference cannot be verified"
    )


class AnalysisWarning(BaseModel):
    """A non-failing diagnostic attached to a result."""

    model_config = ConfigDict(frozen=True)

    type: WarningType
    line: int | None = None
    message: str
    call: str | None = None
    package: str | None = None


@dataclass(frozen=True)
class AnalysisTarget:
    """A file slated for analysis. Equality and hashing use the path only."""

    path: Path

    @cached_property
    def content(self) -> str:
        return self.path.read_text(encoding="utf-8")

    @property
    def name(self) -> str:
        return self.path.name

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of analyzing one target.

    ``references`` lists every reference considered, including ignored
    names. ``missing`` holds one entry per unresolved static occurrence.
    ``error`` is set when extraction itself failed; references and missing
    are then empty.
    """

    target: AnalysisTarget
    references: tuple[Reference, ...] = ()
    missing: tuple[Reference, ...] = ()
    success: bool = True
    warnings: tuple[AnalysisWarning, ...] = ()
    error: str | None = None

    @classmethod
    def passed(
        cls,
        target: AnalysisTarget,
        references: list[Reference],
        warnings: list[AnalysisWarning] | None = None,
    ) -> AnalysisResult:
        return cls(
            target=target,
            references=tuple(references),
            warnings=tuple(warnings or ()),
        )

    @classmethod
    def failure(
        cls,
        target: AnalysisTarget,
        references: list[Reference],
        missing: list[Reference],
        warnings: list[AnalysisWarning] | None = None,
    ) -> AnalysisResult:
        return cls(
            target=target,
            references=tuple(references),
            missing=tuple(missing),
            success=False,
            warnings=tuple(warnings or ()),
        )

    @classmethod
    def from_outcome(
        cls,
        target: AnalysisTarget,
        references: list[Reference],
        missing: list[Reference],
        warnings: list[AnalysisWarning] | None = None,
    ) -> AnalysisResult:
        if missing:
            return cls.failure(target, references, missing, warnings)
        return cls.passed(target, references, warnings)

    @classmethod
    def failed_with_error(cls, target: AnalysisTarget, message: str) -> AnalysisResult:
        return cls(target=target, success=False, error=message)

    @property
    def has_missing(self) -> bool:
        return bool(self.missing)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def missing_names(self) -> list[str]:
        """Unique missing names in first-seen order."""
        return list(dict.fromkeys(reference.name for reference in self.missing))

    @property
    def reference_names(self) -> list[str]:
        return [reference.name for reference in self.references]

    def snapshot(self) -> dict[str, Any]:
        """Return a JSON-ready view of the result, stable across runs."""
        return {
            "path": str(self.target.path),
            "success": self.success,
            "error": self.error,
            "references": [reference.model_dump() for reference in self.references],
            "missing": [reference.model_dump() for reference in self.missing],
            "warnings": [warning.model_dump() for warning in self.warnings],
        }


@dataclass
class RunSummary:
    """Aggregate counts over a run's results."""

    files: int = 0
    passed: int = 0
    failed: int = 0
    errors: int = 0
    references: int = 0
    missing: int = 0
    warnings: int = 0
    missing_by_name: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_results(cls, results: list[AnalysisResult]) -> RunSummary:
        summary = cls()
        for result in results:
            summary.add(result)
        return summary

    def add(self, result: AnalysisResult) -> None:
        self.files += 1
        if result.is_error:
            self.errors += 1
        elif result.success:
            self.passed += 1
        else:
            self.failed += 1
        self.references += len(result.references)
        self.missing += len(result.missing)
        self.warnings += len(result.warnings)
        for reference in result.missing:
            self.missing_by_name[reference.name] = (
                self.missing_by_name.get(reference.name, 0) + 1
            )


__all__ = [
    "AnalysisResult",
    "AnalysisTarget",
    "AnalysisWarning",
    "Reference",
    "ReferenceKind",
    "RunSummary",
    "WarningType",
]
