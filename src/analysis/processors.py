"""Work distribution strategies for per-file analysis."""

from __future__ import annotations

import math
import os
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Protocol, TypeVar

import structlog

from errors import InvalidWorkerCountError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

logger = structlog.get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_CORE_COUNT = 4


class Processor(Protocol):
    def process(self, targets: Sequence[T], step: Callable[[T], R]) -> list[R]: ...


class SerialProcessor:
    """Apply ``step`` to each target in input order on the calling thread."""

    def process(self, targets: Sequence[T], step: Callable[[T], R]) -> list[R]:
        return [step(target) for target in targets]


def chunk(targets: Sequence[T], workers: int) -> list[list[T]]:
    """Split ``targets`` into contiguous chunks of ``ceil(len / workers)``.

    Examples:
        >>> chunk([1, 2, 3, 4, 5], 2)
        [[1, 2, 3], [4, 5]]
        >>> chunk([], 3)
        []
    """
    if not targets:
        return []
    size = math.ceil(len(targets) / workers)
    return [list(targets[i : i + size]) for i in range(0, len(targets), size)]


class ParallelProcessor:
    """Process contiguous chunks of targets on a thread pool.

    Each chunk runs on one worker, in order. Chunk results are joined in
    chunk order, so the output order matches ``SerialProcessor``.

    Raises:
        InvalidWorkerCountError: If ``workers`` is less than 1.
    """

    def __init__(self, workers: int = DEFAULT_CORE_COUNT) -> None:
        if workers < 1:
            raise InvalidWorkerCountError(workers)
        self.workers = workers

    def process(self, targets: Sequence[T], step: Callable[[T], R]) -> list[R]:
        chunks = chunk(targets, self.workers)
        if not chunks:
            return []

        def run(items: list[T]) -> list[R]:
            return [step(item) for item in items]

        logger.debug(
            "dispatching chunks",
            targets=len(targets),
            chunks=len(chunks),
            workers=self.workers,
        )
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = [executor.submit(run, items) for items in chunks]
            results: list[R] = []
            for future in futures:
                results.extend(future.result())
        return results


def detect_core_count() -> int:
    """Return the number of CPUs, falling back to 4 when unknown."""
    count = os.cpu_count()
    if count is None:
        return DEFAULT_CORE_COUNT
    return max(1, count)


def resolve_worker_count(
    workers: int, detect: Callable[[], int] = detect_core_count
) -> int:
    """Map ``0`` (auto) to the detected core count; other values pass through."""
    if workers == 0:
        return max(1, detect())
    return workers


__all__ = [
    "DEFAULT_CORE_COUNT",
    "ParallelProcessor",
    "Processor",
    "SerialProcessor",
    "chunk",
    "detect_core_count",
    "resolve_worker_count",
]
