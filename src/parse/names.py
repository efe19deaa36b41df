"""PHP namespace and import-alias name resolution."""

from __future__ import annotations

from dataclasses import dataclass, field

# Names that never refer to a class, whatever namespace they appear in.
SPECIAL_CLASS_NAMES = frozenset({"self", "static", "parent"})

# Type keywords accepted in PHP type declarations.
BUILTIN_TYPES = frozenset(
    {
        "array",
        "bool",
        "callable",
        "false",
        "float",
        "int",
        "iterable",
        "mixed",
        "never",
        "null",
        "object",
        "string",
        "true",
        "void",
    }
)


@dataclass
class NameContext:
    """Namespace and ``use`` aliases in effect at a point of a PHP file.

    Aliases are keyed by lower-cased alias because PHP class names are
    case-insensitive.
    """

    namespace: str = ""
    aliases: dict[str, str] = field(default_factory=dict)

    def enter_namespace(self, namespace: str) -> None:
        self.namespace = namespace.strip("\\")
        self.aliases = {}

    def add_alias(self, name: str, alias: str | None = None) -> str:
        """Register ``use name [as alias]`` and return the imported name."""
        fully_qualified = name.strip().lstrip("\\")
        local = alias or fully_qualified.rsplit("\\", 1)[-1]
        self.aliases[local.lower()] = fully_qualified
        return fully_qualified

    def resolve(self, name: str) -> str:
        """Resolve a class name as written in source to its fully-qualified form.

        Examples:
            >>> ctx = NameContext("App\\\\Http")
            >>> ctx.add_alias("Illuminate\\\\Http\\\\Request")
            'Illuminate\\\\Http\\\\Request'
            >>> ctx.resolve("Request")
            'Illuminate\\\\Http\\\\Request'
            >>> ctx.resolve("Controllers\\\\Home")
            'App\\\\Http\\\\Controllers\\\\Home'
            >>> ctx.resolve("\\\\Exception")
            'Exception'
        """
        name = name.strip()
        if name.startswith("\\"):
            return name[1:]

        if name.lower().startswith("namespace\\"):
            return self._prefix(name[len("namespace\\") :])

        head, sep, rest = name.partition("\\")
        imported = self.aliases.get(head.lower())
        if imported is not None:
            return f"{imported}{sep}{rest}" if sep else imported

        return self._prefix(name)

    def _prefix(self, name: str) -> str:
        if not self.namespace:
            return name
        return f"{self.namespace}\\{name}"


def is_class_like(name: str) -> bool:
    """Return False for names that can never be class references."""
    lowered = name.strip().lstrip("\\").lower()
    if not lowered:
        return False
    return lowered not in SPECIAL_CLASS_NAMES and lowered not in BUILTIN_TYPES


__all__ = ["BUILTIN_TYPES", "NameContext", "SPECIAL_CLASS_NAMES", "is_class_like"]
