"""Undefined route-name detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from analysis.resolver import php_source
from contract.models import AnalysisResult, AnalysisWarning
from errors import ParseError
from parse.route_calls import extract_route_calls
from utils import matches_any

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contract.models import AnalysisTarget, Reference
    from registry.routes import RouteRegistry


class RouteAnalysisResolver:
    """Report route names used in code that no route file declares.

    Args:
        registry: Named routes parsed from the route files.
        report_dynamic: Emit a ``dynamic_route`` warning for each route name
            that cannot be read statically.
        include_patterns: Allow-list. When set, only matching names are
            checked; the rest are dropped from the result entirely.
        ignore_patterns: Deny-list applied after the allow-list. Matching
            names are kept as references but never reported missing.
    """

    extensions = (".php",)
    excluded_suffixes: tuple[str, ...] = ()

    def __init__(
        self,
        registry: RouteRegistry,
        *,
        report_dynamic: bool = True,
        include_patterns: Iterable[str] | None = None,
        ignore_patterns: Iterable[str] | None = None,
    ) -> None:
        self.registry = registry
        self.report_dynamic = report_dynamic
        self.include_patterns = (
            list(include_patterns) if include_patterns is not None else None
        )
        self.ignore_patterns = list(ignore_patterns or ())

    def prepare(self) -> None:
        self.registry.refresh()

    def class_exists(self, name: str) -> bool:
        return True

    def route_exists(self, name: str) -> bool:
        return self.registry.exists(name)

    def loaded_routes(self) -> list[str]:
        return sorted(self.registry.names())

    def analyze(self, target: AnalysisTarget) -> AnalysisResult:
        try:
            calls = extract_route_calls(php_source(target))
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
                            type="dynamic_route",
                            line=call.line,
                            message=call.reason or "dynamic",
                            call=call.call,
                        )
                    )
                continue

            if self.include_patterns is not None and not matches_any(
                call.name, self.include_patterns
            ):
                continue
            references.append(call)

            if matches_any(call.name, self.ignore_patterns):
                continue

            if call.name == "":
                missing.append(call)
                warnings.append(
                    AnalysisWarning(
                        type="empty_route",
                        line=call.line,
                        message="Route name is empty",
                        call=call.call,
                    )
                )
                continue

            if not self.route_exists(call.name):
                missing.append(call)

        return AnalysisResult.from_outcome(target, references, missing, warnings)


__all__ = ["RouteAnalysisResolver"]
