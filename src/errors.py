"""Exception hierarchy for refcheck."""

from __future__ import annotations


class AnalyzerError(Exception):
    """Base class for every error refcheck raises on purpose."""


class ConfigError(AnalyzerError):
    """Configuration could not be read or failed validation."""


class InvalidWorkerCountError(AnalyzerError, ValueError):
    """A parallel processor was given fewer than one worker."""

    def __init__(self, workers: int) -> None:
        super().__init__(f"Workers must be at least 1, got {workers}.")
        self.workers = workers


class EmptyClassNameError(AnalyzerError, ValueError):
    """A class-existence check was asked about an empty name."""

    def __init__(self) -> None:
        super().__init__("The class name must be non-empty.")


class ParseError(AnalyzerError):
    """A source file could not be parsed.

    Raised per file and captured as an error result by the analyzer.
    """

    def __init__(self, message: str, line: int | None = None) -> None:
        super().__init__(message)
        self.line = line


__all__ = [
    "AnalyzerError",
    "ConfigError",
    "EmptyClassNameError",
    "InvalidWorkerCountError",
    "ParseError",
]
