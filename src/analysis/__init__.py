"""Analysis orchestration: resolvers, processors and the analyzer."""

from analysis.analyzer import Analyzer, has_errors, has_failures
from analysis.class_resolver import ClassAnalysisResolver
from analysis.processors import (
    ParallelProcessor,
    SerialProcessor,
    detect_core_count,
    resolve_worker_count,
)
from analysis.resolver import AnalysisResolver
from analysis.route_resolver import RouteAnalysisResolver
from analysis.translation_resolver import TranslationAnalysisResolver

__all__ = [
    "AnalysisResolver",
    "Analyzer",
    "ClassAnalysisResolver",
    "ParallelProcessor",
    "RouteAnalysisResolver",
    "SerialProcessor",
    "TranslationAnalysisResolver",
    "detect_core_count",
    "has_errors",
    "has_failures",
    "resolve_worker_count",
]
