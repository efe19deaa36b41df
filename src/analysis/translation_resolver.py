"""Absent translation-key detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from analysis.resolver import php_source
from contract.models import AnalysisResult, AnalysisWarning
from errors import ParseError
from parse.translation_calls import extract_translation_calls, package_of
from utils import matches_any

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contract.models import AnalysisTarget, Reference
    from registry.translations import TranslationCatalog


class TranslationAnalysisResolver:
    """Report translation keys absent from every configured locale.

    Args:
        catalog: Translation keys per locale.
        report_dynamic: Emit a ``dynamic_key`` warning for each key that
            cannot be read statically.
        ignore: Keys matching these patterns are never reported missing.
        include_patterns: Allow-list. When set, only matching keys are
            checked; the rest are dropped from the result entirely.
    """

    extensions = (".php",)
    excluded_suffixes: tuple[str, ...] = ()

    def __init__(
        self,
        catalog: TranslationCatalog,
        *,
        report_dynamic: bool = True,
        ignore: Iterable[str] = (),
        include_patterns: Iterable[str] | None = None,
    ) -> None:
        self.catalog = catalog
        self.report_dynamic = report_dynamic
        self.ignore = list(ignore)
        self.include_patterns = (
            list(include_patterns) if include_patterns is not None else None
        )

    def prepare(self) -> None:
        self.catalog.load()

    def class_exists(self, name: str) -> bool:
        return True

    def translation_exists(self, key: str) -> bool:
        return self.catalog.has(key)

    def loaded_keys(self) -> list[str]:
        keys: set[str] = set()
        for locale_keys in self.catalog.load().values():
            keys.update(locale_keys)
        return sorted(keys)

    def analyze(self, target: AnalysisTarget) -> AnalysisResult:
        try:
            calls = extract_translation_calls(php_source(target))
        except ParseError as e:
            return AnalysisResult.failed_with_error(target, str(e))

        references: list[Reference] = []
        missing: list[Reference] = []
        warnings: list[AnalysisWarning] = []

        for call in calls:
            if call.dynamic:
                if self.report_dynamic:
                    warnings.append(
                        AnalysisWarning(
                            type="dynamic_key",
                            line=call.line,
                            message=call.reason or "dynamic",
                            call=call.call,
                        )
                    )
                continue

            key = call.name
            if self.include_patterns is not None and not matches_any(
                key, self.include_patterns
            ):
                continue
            references.append(call)

            if matches_any(key, self.ignore):
                continue

            if key == "":
                missing.append(call)
                warnings.append(
                    AnalysisWarning(
                        type="empty_key",
                        line=call.line,
                        message="Translation key is empty",
                        call=call.call,
                    )
                )
                continue

            package = package_of(key)
            if package is not None and not self.catalog.vendor_package_exists(package):
                warnings.append(
                    AnalysisWarning(
                        type="missing_vendor_package",
                        line=call.line,
                        message=f"Vendor package '{package}' has no lang directory",
                        call=call.call,
                        package=package,
                    )
                )

            if not self.translation_exists(key):
                missing.append(call)

        return AnalysisResult.from_outcome(target, references, missing, warnings)


__all__ = ["TranslationAnalysisResolver"]
