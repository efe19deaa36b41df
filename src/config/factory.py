"""Wire an ``AnalyzerConfig`` into a runnable ``Analyzer``."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Literal, get_args

from analysis.analyzer import Analyzer
from analysis.class_resolver import ClassAnalysisResolver
from analysis.processors import (
    ParallelProcessor,
    SerialProcessor,
    detect_core_count,
    resolve_worker_count,
)
from analysis.route_resolver import RouteAnalysisResolver
from analysis.translation_resolver import TranslationAnalysisResolver
from registry.classes import DeclaredClassRegistry
from registry.routes import RouteRegistry
from registry.translations import TranslationCatalog
from scan.files import FileResolver
from scan.paths import PathResolver

if TYPE_CHECKING:
    from collections.abc import Callable

    from analysis.processors import Processor
    from analysis.resolver import AnalysisResolver
    from config.loader import AnalyzerConfig
    from report.reporters import Reporter

AnalysisKind = Literal["classes", "routes", "translations"]

ANALYSIS_KINDS: tuple[str, ...] = get_args(AnalysisKind)


def build_resolver(
    kind: AnalysisKind, config: AnalyzerConfig, root: Path
) -> AnalysisResolver:
    if kind == "classes":
        composer = config.classes.composer
        registry = DeclaredClassRegistry(
            [root / source for source in config.classes.sources],
            composer_json=root / composer if composer else None,
        )
        return ClassAnalysisResolver(registry, ignore=config.ignore)

    if kind == "routes":
        routes = config.routes
        return RouteAnalysisResolver(
            RouteRegistry(root / routes.path, cache=routes.cache, ttl=routes.cache_ttl),
            report_dynamic=routes.report_dynamic,
            include_patterns=routes.include_patterns,
            ignore_patterns=routes.ignore_patterns,
        )

    if kind == "translations":
        translations = config.translations
        vendor = translations.vendor_path
        catalog = TranslationCatalog(
            root / translations.path,
            translations.locales,
            vendor_path=root / vendor if vendor else None,
        )
        return TranslationAnalysisResolver(
            catalog,
            report_dynamic=translations.report_dynamic,
            ignore=translations.ignore,
            include_patterns=translations.include_patterns,
        )

    msg = f"Unknown analysis kind: {kind!r}"
    raise ValueError(msg)


def build_processor(
    config: AnalyzerConfig, detect: Callable[[], int] = detect_core_count
) -> Processor:
    if config.processor == "serial":
        return SerialProcessor()
    return ParallelProcessor(resolve_worker_count(config.workers, detect))


def build_analyzer(
    kind: AnalysisKind,
    config: AnalyzerConfig,
    root: Path,
    *,
    reporter: Reporter | None = None,
    resolver: AnalysisResolver | None = None,
    detect: Callable[[], int] = detect_core_count,
) -> Analyzer:
    """Build an analyzer for ``kind`` rooted at ``root``.

    Pass ``resolver`` to reuse registries across runs (the determinism
    check does this so both runs see the same registry).
    """
    root = Path(root)
    resolver = resolver if resolver is not None else build_resolver(kind, config, root)
    file_resolver = FileResolver(
        resolver.extensions,
        excluded_suffixes=resolver.excluded_suffixes,
        exclude=config.exclude,
        base_path=root,
        respect_gitignore=config.respect_gitignore,
        nested_gitignore=config.nested_gitignore,
    )
    return Analyzer(
        paths=config.paths,
        path_resolver=PathResolver(base_path=root),
        file_resolver=file_resolver,
        resolver=resolver,
        processor=build_processor(config, detect),
        reporter=reporter,
    )


__all__ = [
    "ANALYSIS_KINDS",
    "AnalysisKind",
    "build_analyzer",
    "build_processor",
    "build_resolver",
]
