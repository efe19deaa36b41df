"""Registry of named routes declared in route-definition files."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from errors import ParseError
from parse.route_definitions import extract_route_definitions

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

logger = structlog.get_logger(__name__)

Fingerprint = tuple[tuple[str, int], ...]


@dataclass(frozen=True)
class CacheEntry:
    """A built registry and when it was built."""

    value: frozenset[str]
    built_at: float
    fingerprint: Fingerprint = ()

    def is_fresh(self, now: float, ttl: float, fingerprint: Fingerprint) -> bool:
        return now - self.built_at < ttl and fingerprint == self.fingerprint


def route_files(routes_path: Path) -> list[Path]:
    """Return every ``*.php`` file under ``routes_path``, sorted by path."""
    if not routes_path.is_dir():
        return []
    return sorted(
        (path for path in routes_path.rglob("*.php") if path.is_file()),
        key=lambda path: path.as_posix(),
    )


def load_route_names(routes_path: Path) -> frozenset[str]:
    """Parse all route files under ``routes_path`` into a set of route names.

    An absent directory yields an empty set. Files that fail to parse are
    logged and skipped.
    """
    started = time.perf_counter()
    names: set[str] = set()
    files = route_files(routes_path)
    for path in files:
        try:
            definitions = extract_route_definitions(path.read_bytes())
        except (OSError, ParseError) as e:
            logger.warning("failed to load route file", path=str(path), error=str(e))
            continue
        names.update(definition.name for definition in definitions)

    logger.info(
        "route registry built",
        routes_path=str(routes_path),
        files=len(files),
        routes=len(names),
        seconds=round(time.perf_counter() - started, 3),
    )
    return frozenset(names)


class RouteRegistry:
    """Named routes under a directory, with optional TTL caching.

    With ``cache`` enabled, ``refresh()`` reuses the last build while it is
    younger than ``ttl`` seconds and no route file has changed. Without it,
    every ``refresh()`` rebuilds. ``names()`` reads the current build.

    Args:
        routes_path: Directory holding route-definition files.
        cache: Reuse builds across refreshes.
        ttl: Cache lifetime in seconds.
        clock: Time source, injectable for tests.
        loader: Builds the name set from a directory.
    """

    def __init__(
        self,
        routes_path: Path,
        *,
        cache: bool = True,
        ttl: float = 3600,
        clock: Callable[[], float] = time.monotonic,
        loader: Callable[[Path], frozenset[str]] = load_route_names,
    ) -> None:
        self.routes_path = routes_path
        self.cache = cache
        self.ttl = ttl
        self._clock = clock
        self._loader = loader
        self._entry: CacheEntry | None = None
        self._lock = threading.Lock()

    @property
    def entry(self) -> CacheEntry | None:
        return self._entry

    def fingerprint(self) -> Fingerprint:
        return tuple(
            (path.as_posix(), path.stat().st_mtime_ns)
            for path in route_files(self.routes_path)
        )

    def refresh(self) -> frozenset[str]:
        """Return the current route names, rebuilding when the cache allows."""
        with self._lock:
            now = self._clock()
            fingerprint = self.fingerprint() if self.cache else ()
            entry = self._entry
            if (
                self.cache
                and entry is not None
                and entry.is_fresh(now, self.ttl, fingerprint)
            ):
                return entry.value

            value = self._loader(self.routes_path)
            self._entry = CacheEntry(value=value, built_at=now, fingerprint=fingerprint)
            return value

    def names(self) -> frozenset[str]:
        """Return route names, building them on first use."""
        entry = self._entry
        if entry is not None:
            return entry.value
        return self.refresh()

    def exists(self, name: str) -> bool:
        return name in self.names()


__all__ = [
    "CacheEntry",
    "RouteRegistry",
    "load_route_names",
    "route_files",
]
