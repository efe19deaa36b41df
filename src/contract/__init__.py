"""Stable result contract for refcheck.

Extractors produce ``Reference`` values, resolvers produce ``AnalysisResult``
values and reporters consume them. Treat these exports as the boundary
between analysis and presentation.
"""

from contract.models import (
    AnalysisResult,
    AnalysisTarget,
    AnalysisWarning,
    Reference,
    ReferenceKind,
    RunSummary,
    WarningType,
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
