"""Translation catalogs read from Laravel ``lang`` directories."""

from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING

import orjson
import structlog

from errors import ParseError
from parse.php_arrays import flatten_keys, returned_array

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

logger = structlog.get_logger(__name__)


def _php_files(directory: Path) -> list[Path]:
    return sorted(
        (path for path in directory.rglob("*.php") if path.is_file()),
        key=lambda path: path.as_posix(),
    )


def load_php_catalog(directory: Path, namespace: str | None = None) -> set[str]:
    """Load every ``*.php`` group file under ``directory`` as flattened keys.

    ``lang/en/auth.php`` contributes ``auth.<key>``; a nested
    ``lang/en/admin/users.php`` contributes ``admin/users.<key>``. With a
    ``namespace`` the group is prefixed ``namespace::``.
    """
    keys: set[str] = set()
    if not directory.is_dir():
        return keys

    for path in _php_files(directory):
        group = path.relative_to(directory).with_suffix("").as_posix()
        if namespace is not None:
            group = f"{namespace}::{group}"
        try:
            values = returned_array(path.read_bytes())
        except (OSError, ParseError) as e:
            logger.warning(
                "failed to load translation file", path=str(path), error=str(e)
            )
            continue
        keys.update(flatten_keys(values, group))
    return keys


def load_json_catalog(path: Path) -> set[str]:
    """Load the flat keys of a ``<locale>.json`` catalog."""
    try:
        data = orjson.loads(path.read_bytes())
    except FileNotFoundError:
        return set()
    except (OSError, orjson.JSONDecodeError) as e:
        logger.warning("failed to load translation file", path=str(path), error=str(e))
        return set()
    if not isinstance(data, dict):
        return set()
    return set(data)


class TranslationCatalog:
    """Merged translation keys for a set of locales.

    Sources per locale, in load order:

    - ``<lang_path>/<locale>/**/*.php``
    - ``<lang_path>/<locale>.json``
    - ``<lang_path>/../resources/lang/<locale>/**/*.php`` (pre-Laravel 9 layout)
    - ``<vendor_path>/<package>/lang/<locale>/*.php`` as ``package::group.key``

    Catalogs load once, on first use, and are read-only afterwards.
    """

    def __init__(
        self,
        lang_path: Path,
        locales: Iterable[str] = ("en",),
        vendor_path: Path | None = None,
    ) -> None:
        self.lang_path = lang_path
        self.locales = list(locales)
        self.vendor_path = vendor_path
        self._keys: dict[str, frozenset[str]] | None = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._keys is not None

    def load(self) -> dict[str, frozenset[str]]:
        """Load all configured locales. Later calls return the memoised catalog."""
        with self._lock:
            if self._keys is None:
                started = time.perf_counter()
                self._keys = {
                    locale: frozenset(self._load_locale(locale))
                    for locale in self.locales
                }
                logger.info(
                    "translation catalog built",
                    lang_path=str(self.lang_path),
                    locales=self.locales,
                    keys=sum(len(keys) for keys in self._keys.values()),
                    seconds=round(time.perf_counter() - started, 3),
                )
            return self._keys

    def _load_locale(self, locale: str) -> set[str]:
        keys = load_php_catalog(self.lang_path / locale)
        keys |= load_json_catalog(self.lang_path / f"{locale}.json")
        keys |= load_php_catalog(self.lang_path.parent / "resources" / "lang" / locale)

        if self.vendor_path is not None and self.vendor_path.is_dir():
            for package in sorted(self.vendor_path.iterdir()):
                if package.is_dir():
                    keys |= load_php_catalog(
                        package / "lang" / locale, namespace=package.name
                    )
        return keys

    def keys(self, locale: str) -> frozenset[str]:
        return self.load().get(locale, frozenset())

    def has(self, key: str) -> bool:
        """True if ``key`` exists in at least one configured locale."""
        return any(key in keys for keys in self.load().values())

    def vendor_package_exists(self, package: str) -> bool:
        if self.vendor_path is None:
            return False
        return (self.vendor_path / package / "lang").is_dir()


__all__ = [
    "TranslationCatalog",
    "load_json_catalog",
    "load_php_catalog",
]
