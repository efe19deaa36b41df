"""Top-level analysis run."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog

from contract.models import AnalysisResult
from report.reporters import NullReporter

if TYPE_CHECKING:
    from collections.abc import Iterable

    from analysis.processors import Processor
    from analysis.resolver import AnalysisResolver
    from contract.models import AnalysisTarget
    from report.reporters import Reporter
    from scan.files import FileResolver
    from scan.paths import PathResolver

logger = structlog.get_logger(__name__)


def has_failures(results: Iterable[AnalysisResult]) -> bool:
    """True if any result has missing references.

    Error results are not failures; see ``has_errors``.
    """
    return any(not result.success and not result.is_error for result in results)


def has_errors(results: Iterable[AnalysisResult]) -> bool:
    """True if any file could not be analyzed."""
    return any(result.is_error for result in results)


class Analyzer:
    """Run one analysis kind over a set of input paths.

    The run resolves and discovers files, prepares the resolver's
    registries on the calling thread, then hands files to the processor.
    A failure in one file becomes an error result for that file and never
    stops the run.
    """

    def __init__(
        self,
        *,
        paths: Iterable[str],
        path_resolver: PathResolver,
        file_resolver: FileResolver,
        resolver: AnalysisResolver,
        processor: Processor,
        reporter: Reporter | None = None,
    ) -> None:
        self.paths = list(paths)
        self.path_resolver = path_resolver
        self.file_resolver = file_resolver
        self.resolver = resolver
        self.processor = processor
        self.reporter = reporter if reporter is not None else NullReporter()

    def discover(self) -> list[AnalysisTarget]:
        paths = self.path_resolver.resolve(self.paths)
        return self.file_resolver.get_files(paths)

    def _step(self, target: AnalysisTarget) -> AnalysisResult:
        try:
            result = self.resolver.analyze(target)
        except Exception as e:
            logger.debug("analysis failed", path=str(target.path), exc_info=True)
            message = str(e) or type(e).__name__
            result = AnalysisResult.failed_with_error(target, message)
        self.reporter.progress(result)
        return result

    def analyze(self) -> list[AnalysisResult]:
        started = time.perf_counter()
        targets = self.discover()
        self.resolver.prepare()

        self.reporter.start(targets)
        results = self.processor.process(targets, self._step)
        self.reporter.finish(results)

        logger.info(
            "analysis finished",
            files=len(targets),
            failed=sum(1 for r in results if not r.success and not r.is_error),
            errors=sum(1 for r in results if r.is_error),
            seconds=round(time.perf_counter() - started, 3),
        )
        return results


__all__ = ["Analyzer", "has_errors", "has_failures"]
