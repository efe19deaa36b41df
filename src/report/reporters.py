"""Reporters receive ``start``, ``progress`` and ``finish`` calls from a run.

``progress`` may be called from several worker threads at once, so
reporters that keep counters guard them with a lock.
"""

from __future__ import annotations

import sys
import threading
from typing import TYPE_CHECKING, Protocol, TextIO

import orjson

from contract.models import RunSummary
from utils import display_path

if TYPE_CHECKING:
    from pathlib import Path

    from contract.models import AnalysisResult, AnalysisTarget


class Reporter(Protocol):
    def start(self, targets: list[AnalysisTarget]) -> None: ...

    def progress(self, result: AnalysisResult) -> None: ...

    def finish(self, results: list[AnalysisResult]) -> None: ...


class NullReporter:
    """Discards every event."""

    def start(self, targets: list[AnalysisTarget]) -> None:
        pass

    def progress(self, result: AnalysisResult) -> None:
        pass

    def finish(self, results: list[AnalysisResult]) -> None:
        pass


class CountingReporter:
    """Thread-safe progress counters shared by the concrete reporters."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.total = 0
        self.processed = 0
        self.failed = 0
        self.errors = 0

    def start(self, targets: list[AnalysisTarget]) -> None:
        with self._lock:
            self.total = len(targets)
            self.processed = 0
            self.failed = 0
            self.errors = 0

    def progress(self, result: AnalysisResult) -> None:
        with self._lock:
            self.processed += 1
            if result.is_error:
                self.errors += 1
            elif not result.success:
                self.failed += 1

    def finish(self, results: list[AnalysisResult]) -> None:
        pass


class TextReporter(CountingReporter):
    """Human-readable report: one block per failing file, then a summary.

    Args:
        stream: Where to write; stdout by default.
        base_path: Paths are shown relative to this directory.
        show_warnings: Include warnings (dynamic references and the like).
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        *,
        base_path: Path | None = None,
        show_warnings: bool = True,
    ) -> None:
        super().__init__()
        self.stream = stream if stream is not None else sys.stdout
        self.base_path = base_path
        self.show_warnings = show_warnings

    def _write(self, line: str = "") -> None:
        print(line, file=self.stream)

    def finish(self, results: list[AnalysisResult]) -> None:
        for result in results:
            self._write_result(result)

        summary = RunSummary.from_results(results)
        self._write(
            f"Analyzed {summary.files} file(s): {summary.passed} passed, "
            f"{summary.failed} failed, {summary.errors} error(s)."
        )
        if summary.missing:
            self._write(
                f"{summary.missing} missing reference(s) "
                f"across {len(summary.missing_by_name)} unique name(s)."
            )

    def _write_result(self, result: AnalysisResult) -> None:
        show_warnings = self.show_warnings and bool(result.warnings)
        if result.success and not show_warnings:
            return

        self._write(display_path(result.target.path, self.base_path))
        if result.error is not None:
            self._write(f"  error: {result.error}")
        for reference in result.missing:
            self._write(f"  line {reference.line}: missing {reference.name}")
        if show_warnings:
            for warning in result.warnings:
                where = f"line {warning.line}: " if warning.line is not None else ""
                call = f" [{warning.call}]" if warning.call else ""
                self._write(f"  {where}warning {warning.type}: {warning.message}{call}")
        self._write()


class JsonReporter(CountingReporter):
    """Write every result as one JSON document when the run finishes."""

    def __init__(
        self,
        stream: TextIO | None = None,
        *,
        base_path: Path | None = None,
    ) -> None:
        super().__init__()
        self.stream = stream if stream is not None else sys.stdout
        self.base_path = base_path

    def document(self, results: list[AnalysisResult]) -> dict:
        summary = RunSummary.from_results(results)
        files = []
        for result in results:
            entry = result.snapshot()
            entry["path"] = display_path(result.target.path, self.base_path)
            entry["missing_names"] = result.missing_names
            files.append(entry)
        return {
            "summary": {
                "files": summary.files,
                "passed": summary.passed,
                "failed": summary.failed,
                "errors": summary.errors,
                "references": summary.references,
                "missing": summary.missing,
                "warnings": summary.warnings,
            },
            "results": files,
        }

    def finish(self, results: list[AnalysisResult]) -> None:
        payload = orjson.dumps(self.document(results), option=orjson.OPT_INDENT_2)
        self.stream.write(payload.decode("utf-8") + "\n")


__all__ = [
    "CountingReporter",
    "JsonReporter",
    "NullReporter",
    "Reporter",
    "TextReporter",
]
