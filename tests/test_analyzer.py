from __future__ import annotations

from pathlib import Path

from analysis.analyzer import Analyzer, has_errors, has_failures
from analysis.class_resolver import ClassAnalysisResolver
from analysis.processors import ParallelProcessor, SerialProcessor
from config.factory import build_analyzer
from config.loader import AnalyzerConfig
from contract.models import AnalysisResult, AnalysisTarget, Reference
from registry.classes import StaticClassRegistry
from report.reporters import CountingReporter
from scan.files import FileResolver
from scan.paths import PathResolver


class _ExplodingResolver(ClassAnalysisResolver):
    """Fails on files named ``boom.php``."""

    def analyze(self, target: AnalysisTarget) -> AnalysisResult:
        if target.name == "boom.php":
            msg = "extractor exploded"
            raise RuntimeError(msg)
        return super().analyze(target)


def _write_project(root: Path) -> None:
    (root / "app").mkdir(parents=True)
    (root / "app" / "Good.php").write_text(
        "<?php\n\nnamespace App;\n\nclass Good extends Base {}\n", encoding="utf-8"
    )
    (root / "app" / "Bad.php").write_text(
        "<?php\n\nnamespace App;\n\nclass Bad extends Gone {}\n", encoding="utf-8"
    )
    (root / "app" / "boom.php").write_text("<?php\n", encoding="utf-8")


def _analyzer(
    root: Path,
    resolver: ClassAnalysisResolver,
    *,
    processor: SerialProcessor | ParallelProcessor | None = None,
    reporter: CountingReporter | None = None,
) -> Analyzer:
    return Analyzer(
        paths=["app", "missing"],
        path_resolver=PathResolver(base_path=root),
        file_resolver=FileResolver(base_path=root),
        resolver=resolver,
        processor=processor if processor is not None else SerialProcessor(),
        reporter=reporter,
    )


def test_failure_in_one_file_does_not_stop_the_run(tmp_path: Path) -> None:
    _write_project(tmp_path)
    reporter = CountingReporter()
    resolver = _ExplodingResolver(StaticClassRegistry({"App\\Base"}))

    results = _analyzer(tmp_path, resolver, reporter=reporter).analyze()

    by_name = {result.target.name: result for result in results}
    assert [result.target.name for result in results] == [
        "Bad.php",
        "Good.php",
        "boom.php",
    ]
    assert by_name["boom.php"].error == "extractor exploded"
    assert by_name["Good.php"].success
    assert by_name["Bad.php"].missing_names == ["App\\Gone"]
    assert (reporter.total, reporter.processed) == (3, 3)
    assert (reporter.failed, reporter.errors) == (1, 1)
    assert has_failures(results)
    assert has_errors(results)


def test_error_results_are_not_failures(tmp_path: Path) -> None:
    target = AnalysisTarget(tmp_path / "x.php")
    errored = AnalysisResult.failed_with_error(target, "Syntax error")
    missing = Reference(name="App\\Gone", line=1, kind="class")

    assert not has_failures([errored])
    assert has_errors([errored])
    assert has_failures([AnalysisResult.failure(target, [missing], [missing])])
    assert not has_failures([AnalysisResult.passed(target, [])])
    assert not has_failures([])


def test_repeated_runs_give_identical_results(tmp_path: Path) -> None:
    _write_project(tmp_path)
    resolver = ClassAnalysisResolver(StaticClassRegistry({"App\\Base"}))

    first = _analyzer(tmp_path, resolver).analyze()
    second = _analyzer(tmp_path, resolver, processor=ParallelProcessor(2)).analyze()

    assert [r.snapshot() for r in first] == [r.snapshot() for r in second]


def test_fully_resolvable_file_passes(tmp_path: Path) -> None:
    _write_project(tmp_path)
    resolver = ClassAnalysisResolver(
        StaticClassRegistry({"App\\Base", "App\\Gone"})
    )

    results = _analyzer(tmp_path, resolver).analyze()

    assert all(result.success and result.missing == () for result in results)
    assert not has_failures(results)


def test_no_existing_paths_is_an_empty_run(tmp_path: Path) -> None:
    analyzer = Analyzer(
        paths=["nowhere"],
        path_resolver=PathResolver(base_path=tmp_path),
        file_resolver=FileResolver(base_path=tmp_path),
        resolver=ClassAnalysisResolver(StaticClassRegistry()),
        processor=ParallelProcessor(4),
    )

    assert analyzer.analyze() == []


def test_unicode_paths_and_catalog_keys(tmp_path: Path) -> None:
    root = tmp_path / "übersetzung"
    (root / "lang" / "en").mkdir(parents=True)
    (root / "lang" / "en" / "nachrichten.php").write_text(
        "<?php\n\nreturn ['schließen' => 'Schließen'];\n", encoding="utf-8"
    )
    (root / "app" / "Ansichten").mkdir(parents=True)
    (root / "app" / "Ansichten" / "Dialog.php").write_text(
        "<?php\n\n__('nachrichten.schließen');\n__('nachrichten.öffnen');\n",
        encoding="utf-8",
    )
    config = AnalyzerConfig().with_paths(["app"]).serial()

    results = build_analyzer("translations", config, root).analyze()

    assert [result.target.path for result in results] == [
        root / "app" / "Ansichten" / "Dialog.php"
    ]
    assert results[0].reference_names == [
        "nachrichten.schließen",
        "nachrichten.öffnen",
    ]
    assert results[0].missing_names == ["nachrichten.öffnen"]
