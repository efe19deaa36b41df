"""Class-existence registries.

PHP answers "does this class exist" by autoloading. Without a PHP runtime
the same question is answered from three static sources: classes declared
in the scanned source roots, composer PSR-4 autoload mappings, and PHP's
built-in classes. Lookups are case-insensitive, like PHP's.
"""

from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import orjson
import structlog

from parse.blade import is_blade_file
from parse.php import parse_php, walk

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

logger = structlog.get_logger(__name__)

_DECLARATION_TYPES = frozenset(
    {
        "class_declaration",
        "interface_declaration",
        "trait_declaration",
        "enum_declaration",
    }
)

BUILTIN_CLASSES = frozenset(
    name.lower()
    for name in (
        "stdClass",
        "Closure",
        "Generator",
        "WeakMap",
        "WeakReference",
        "Fiber",
        "Attribute",
        "ReturnTypeWillChange",
        "AllowDynamicProperties",
        "SensitiveParameter",
        "Override",
        "Traversable",
        "Iterator",
        "IteratorAggregate",
        "ArrayAccess",
        "Countable",
        "Serializable",
        "Stringable",
        "JsonSerializable",
        "UnitEnum",
        "BackedEnum",
        "Throwable",
        "Exception",
        "Error",
        "ErrorException",
        "TypeError",
        "ValueError",
        "ArithmeticError",
        "DivisionByZeroError",
        "ArgumentCountError",
        "AssertionError",
        "CompileError",
        "ParseError",
        "UnhandledMatchError",
        "JsonException",
        "LogicException",
        "BadFunctionCallException",
        "BadMethodCallException",
        "DomainException",
        "InvalidArgumentException",
        "LengthException",
        "OutOfRangeException",
        "RuntimeException",
        "OutOfBoundsException",
        "OverflowException",
        "RangeException",
        "UnderflowException",
        "UnexpectedValueException",
        "ArrayObject",
        "ArrayIterator",
        "RecursiveArrayIterator",
        "IteratorIterator",
        "RecursiveIteratorIterator",
        "FilterIterator",
        "CallbackFilterIterator",
        "LimitIterator",
        "CachingIterator",
        "AppendIterator",
        "MultipleIterator",
        "InfiniteIterator",
        "NoRewindIterator",
        "EmptyIterator",
        "RecursiveIterator",
        "OuterIterator",
        "SeekableIterator",
        "SplObjectStorage",
        "SplStack",
        "SplQueue",
        "SplDoublyLinkedList",
        "SplFixedArray",
        "SplHeap",
        "SplMinHeap",
        "SplMaxHeap",
        "SplPriorityQueue",
        "SplFileInfo",
        "SplFileObject",
        "SplTempFileObject",
        "SplObserver",
        "SplSubject",
        "DirectoryIterator",
        "FilesystemIterator",
        "RecursiveDirectoryIterator",
        "GlobIterator",
        "DateTime",
        "DateTimeImmutable",
        "DateTimeInterface",
        "DateTimeZone",
        "DateInterval",
        "DatePeriod",
        "PDO",
        "PDOStatement",
        "PDOException",
        "Reflection",
        "ReflectionClass",
        "ReflectionObject",
        "ReflectionMethod",
        "ReflectionProperty",
        "ReflectionFunction",
        "ReflectionNamedType",
        "ReflectionParameter",
        "ReflectionEnum",
        "ReflectionException",
        "SimpleXMLElement",
        "DOMDocument",
        "DOMElement",
        "DOMNode",
        "DOMXPath",
        "XMLReader",
        "XMLWriter",
        "Random\\Randomizer",
    )
)


@runtime_checkable
class ClassRegistry(Protocol):
    """Answers whether a fully-qualified class name can be loaded."""

    def exists(self, name: str) -> bool: ...


def _normalize(name: str) -> str:
    return name.strip().lstrip("\\").lower()


class StaticClassRegistry:
    """A fixed set of known classes, optionally backed by a predicate.

    Examples:
        >>> registry = StaticClassRegistry({"App\\\\Models\\\\User"})
        >>> registry.exists("\\\\app\\\\models\\\\user")
        True
    """

    def __init__(
        self,
        names: Iterable[str] = (),
        predicate: Callable[[str], bool] | None = None,
    ) -> None:
        self._names = frozenset(_normalize(name) for name in names)
        self._predicate = predicate

    def exists(self, name: str) -> bool:
        if _normalize(name) in self._names:
            return True
        if self._predicate is not None:
            return self._predicate(name.strip().lstrip("\\"))
        return False


def declared_classes(content: str | bytes) -> list[str]:
    """Return fully-qualified names of classes declared in a PHP file.

    Files with syntax errors are read as far as the parser recovered.
    """
    php = parse_php(content, strict=False)
    namespace = ""
    names: list[str] = []
    for node in walk(php.root):
        if node.type == "namespace_definition":
            name = node.child_by_field_name("name")
            namespace = php.text(name).strip("\\") if name is not None else ""
        elif node.type in _DECLARATION_TYPES:
            name = node.child_by_field_name("name")
            if name is None:
                continue
            short = php.text(name)
            names.append(f"{namespace}\\{short}" if namespace else short)
    return names


def load_psr4_map(composer_json: Path) -> dict[str, list[Path]]:
    """Read ``autoload`` and ``autoload-dev`` PSR-4 prefixes from composer.json.

    Returns a mapping of namespace prefix (with trailing backslash) to the
    directories it autoloads from. A missing or unreadable file yields an
    empty map.
    """
    try:
        data = orjson.loads(composer_json.read_bytes())
    except FileNotFoundError:
        return {}
    except (OSError, orjson.JSONDecodeError) as e:
        logger.warning(
            "failed to read composer.json", path=str(composer_json), error=str(e)
        )
        return {}

    base = composer_json.parent
    mapping: dict[str, list[Path]] = {}
    if not isinstance(data, dict):
        return {}
    for section in ("autoload", "autoload-dev"):
        psr4 = data.get(section, {}).get("psr-4", {})
        for prefix, dirs in psr4.items():
            entries = dirs if isinstance(dirs, list) else [dirs]
            mapping.setdefault(prefix, []).extend(base / entry for entry in entries)
    return mapping


class DeclaredClassRegistry:
    """Class registry built from the project's own files.

    Args:
        sources: Directories (or files) whose declarations are registered.
        composer_json: Optional composer.json whose PSR-4 mappings are used
            for names not found among the declarations.
        include_builtins: Treat PHP's built-in classes as existing.
    """

    def __init__(
        self,
        sources: Iterable[Path] = (),
        composer_json: Path | None = None,
        *,
        include_builtins: bool = True,
    ) -> None:
        self.sources = list(sources)
        self.composer_json = composer_json
        self.include_builtins = include_builtins
        self._declared: frozenset[str] | None = None
        self._psr4: dict[str, list[Path]] = {}
        self._lock = threading.Lock()

    def build(self) -> None:
        """Scan sources once. Safe to call repeatedly and from any thread."""
        with self._lock:
            if self._declared is not None:
                return
            started = time.perf_counter()
            declared: set[str] = set()
            for path in self._source_files():
                try:
                    content = path.read_bytes()
                except OSError as e:
                    logger.warning(
                        "failed to read source", path=str(path), error=str(e)
                    )
                    continue
                declared.update(_normalize(name) for name in declared_classes(content))

            if self.composer_json is not None:
                psr4 = load_psr4_map(self.composer_json)
                self._psr4 = {prefix.lower(): dirs for prefix, dirs in psr4.items()}
            self._declared = frozenset(declared)
            logger.info(
                "class registry built",
                declared=len(declared),
                psr4_prefixes=len(self._psr4),
                seconds=round(time.perf_counter() - started, 3),
            )

    def _source_files(self) -> list[Path]:
        files: set[Path] = set()
        for source in self.sources:
            if source.is_file():
                files.add(source)
            elif source.is_dir():
                files.update(
                    path
                    for path in source.rglob("*.php")
                    if path.is_file() and not is_blade_file(path.name)
                )
        return sorted(files, key=lambda path: path.as_posix())

    def _autoloadable(self, name: str) -> bool:
        lowered = name.lower()
        for prefix, dirs in self._psr4.items():
            if not lowered.startswith(prefix):
                continue
            relative = name[len(prefix) :].replace("\\", "/") + ".php"
            if any((directory / relative).is_file() for directory in dirs):
                return True
        return False

    def exists(self, name: str) -> bool:
        if self._declared is None:
            self.build()

        normalized = _normalize(name)
        if normalized in (self._declared or ()):
            return True
        if self.include_builtins and normalized in BUILTIN_CLASSES:
            return True
        return self._autoloadable(name.strip().lstrip("\\"))


__all__ = [
    "BUILTIN_CLASSES",
    "ClassRegistry",
    "DeclaredClassRegistry",
    "StaticClassRegistry",
    "declared_classes",
    "load_psr4_map",
]
