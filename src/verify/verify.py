"""Determinism verification for refcheck analysis runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import orjson

from config.factory import build_analyzer, build_resolver

if TYPE_CHECKING:
    from pathlib import Path

    from config.factory import AnalysisKind
    from config.loader import AnalyzerConfig
    from contract.models import AnalysisResult


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    mismatches: tuple[str, ...] = field(default_factory=tuple)
    missing: tuple[str, ...] = field(default_factory=tuple)
    extra: tuple[str, ...] = field(default_factory=tuple)
    order_matches: bool = True


def _snapshots(results: list[AnalysisResult]) -> dict[str, bytes]:
    return {
        str(result.target.path): orjson.dumps(
            result.snapshot(), option=orjson.OPT_SORT_KEYS
        )
        for result in results
    }


def verify_determinism(
    *, kind: AnalysisKind, config: AnalyzerConfig, root: Path
) -> DeterminismResult:
    """Verify that serial and parallel runs of an analysis agree.

    Runs the configured analysis once with the serial processor and once
    with the parallel processor, sharing one resolver so both runs see the
    same registry, and compares per-file result snapshots.

    Args:
        kind: Analysis kind to run.
        config: Analyzer configuration; its processor setting is overridden.
        root: Project root.

    Returns:
        DeterminismResult with ok status and the paths that are missing from
        the parallel run, extra in it, or analyzed differently.
    """
    resolver = build_resolver(kind, config, root)

    serial_results = build_analyzer(
        kind, config.serial(), root, resolver=resolver
    ).analyze()
    parallel_results = build_analyzer(
        kind, config.parallel(), root, resolver=resolver
    ).analyze()

    serial = _snapshots(serial_results)
    parallel = _snapshots(parallel_results)

    missing = sorted(set(serial) - set(parallel))
    extra = sorted(set(parallel) - set(serial))
    mismatches = sorted(
        path for path in set(serial) & set(parallel) if serial[path] != parallel[path]
    )
    order_matches = [str(r.target.path) for r in serial_results] == [
        str(r.target.path) for r in parallel_results
    ]

    ok = not missing and not extra and not mismatches
    return DeterminismResult(
        ok=ok,
        mismatches=tuple(mismatches),
        missing=tuple(missing),
        extra=tuple(extra),
        order_matches=order_matches,
    )


__all__ = ["DeterminismResult", "verify_determinism"]
