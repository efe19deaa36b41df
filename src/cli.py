"""Command-line interface for refcheck."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import structlog

from analysis.analyzer import has_errors, has_failures
from config.factory import ANALYSIS_KINDS, build_analyzer
from config.loader import load_config
from errors import AnalyzerError
from logging_config import configure_logging
from report.reporters import JsonReporter, TextReporter
from verify.verify import verify_determinism

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_CONFIG_ERROR = 2


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project root (default: .)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Config file (default: <root>/analyzer.toml when present)",
    )
    parser.add_argument(
        "--path",
        dest="paths",
        action="append",
        default=None,
        help="Path to analyze, relative to the root (repeatable; default: config)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads, 0 for one per CPU (default: config)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for debug)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="refcheck",
        description="Find missing classes, routes and translation keys in PHP code.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for kind in ANALYSIS_KINDS:
        kind_parser = subparsers.add_parser(kind, help=f"Check {kind} references")
        _add_common_arguments(kind_parser)
        kind_parser.add_argument(
            "--serial",
            action="store_true",
            help="Analyze files one at a time on the main thread",
        )
        kind_parser.add_argument(
            "--format",
            choices=("text", "json"),
            default="text",
            help="Report format (default: text)",
        )

    verify_parser = subparsers.add_parser(
        "verify", help="Check that serial and parallel runs agree"
    )
    _add_common_arguments(verify_parser)
    verify_parser.add_argument(
        "--kind",
        choices=ANALYSIS_KINDS,
        default="classes",
        help="Analysis kind to verify (default: classes)",
    )

    return parser


def _handle_analyze(args: argparse.Namespace, root: Path) -> int:
    config = load_config(root, Path(args.config) if args.config else None)
    if args.paths:
        config = config.with_paths(args.paths)
    if args.workers is not None:
        config = config.with_workers(args.workers)
    if args.serial:
        config = config.serial()

    reporter = (
        JsonReporter(base_path=root)
        if args.format == "json"
        else TextReporter(base_path=root)
    )
    analyzer = build_analyzer(args.command, config, root, reporter=reporter)
    results = analyzer.analyze()

    if has_failures(results):
        return EXIT_FAILURES
    if config.fail_on_error and has_errors(results):
        return EXIT_FAILURES
    return EXIT_OK


def _handle_verify(args: argparse.Namespace, root: Path) -> int:
    config = load_config(root, Path(args.config) if args.config else None)
    if args.paths:
        config = config.with_paths(args.paths)
    if args.workers is not None:
        config = config.with_workers(args.workers)

    result = verify_determinism(kind=args.kind, config=config, root=root)
    if not result.ok:
        for label, paths in (
            ("missing", result.missing),
            ("extra", result.extra),
            ("mismatches", result.mismatches),
        ):
            for path in paths:
                sys.stderr.write(f"{label}: {path}\n")
        return EXIT_FAILURES
    if not result.order_matches:
        sys.stderr.write("order: serial and parallel result order differ\n")
        return EXIT_FAILURES
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    root = Path(args.root).expanduser().resolve()

    try:
        if args.command == "verify":
            return _handle_verify(args, root)
        return _handle_analyze(args, root)
    except AnalyzerError as exc:
        logger.debug("run aborted", exc_info=True)
        sys.stderr.write(f"error: {exc}\n")
        return EXIT_CONFIG_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
