"""Class names referenced by PHPDoc type annotations."""

from __future__ import annotations

import re

_TAG_PATTERN = re.compile(
    r"@(?:psalm-|phpstan-)?"
    r"(?P<tag>param|return|var|throws|property-read|property-write|property"
    r"|method|mixin|template-covariant|template-contravariant|template)\b"
    r"(?P<rest>.*)$"
)

_QUOTED = re.compile(r"'[^']*'|\"[^\"]*\"")

_TYPE_NAME = re.compile(r"(?<![\w$\\:-])\\?[^\W\d][\w-]*(?:\\[^\W\d][\w-]*)*")

_TEMPLATE_NAME = re.compile(r"^\s*([^\W\d]\w*)")

_INT_RANGE = re.compile(r"\bint\s*<[^<>]*>")

_CONDITIONAL = re.compile(r"\(\s*\$?[\w\\]+\s+is\s+(?:not\s+)?")

_CONDITIONAL_ARM = re.compile(r"\s+[?:]\s+")

PSEUDO_TYPES = frozenset(
    {
        "array",
        "bool",
        "boolean",
        "callable",
        "double",
        "false",
        "float",
        "int",
        "integer",
        "iterable",
        "list",
        "mixed",
        "never",
        "noreturn",
        "null",
        "numeric",
        "object",
        "parent",
        "resource",
        "scalar",
        "self",
        "static",
        "string",
        "true",
        "void",
    }
)

_OPENERS = {"<": ">", "{": "}", "(": ")", "[": "]"}
_CLOSERS = frozenset(_OPENERS.values())


def _doc_lines(comment: str) -> list[str]:
    body = comment
    if body.startswith("/**"):
        body = body[3:]
    if body.endswith("*/"):
        body = body[:-2]
    lines = []
    for line in body.split("\n"):
        stripped = line.strip()
        if stripped.startswith("*"):
            stripped = stripped[1:]
        lines.append(stripped.strip())
    return lines


def _read_type(text: str) -> str:
    """Read one type expression, allowing whitespace inside brackets."""
    text = text.lstrip()
    depth = 0
    for index, char in enumerate(text):
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth = max(0, depth - 1)
        elif char.isspace() and depth == 0:
            return text[:index]
    return text


def _read_method_signature(text: str) -> str:
    """Read ``[static] ReturnType name(params)`` up to the closing parenthesis."""
    start = text.find("(")
    if start == -1:
        return text
    depth = 0
    for index in range(start, len(text)):
        if text[index] == "(":
            depth += 1
        elif text[index] == ")":
            depth -= 1
            if depth == 0:
                return text[: index + 1]
    return text


def _closing_paren(text: str, start: int) -> int:
    depth = 1
    for index in range(start, len(text)):
        if text[index] == "(":
            depth += 1
        elif text[index] == ")":
            depth -= 1
            if depth == 0:
                return index
    return len(text)


def _flatten_conditionals(text: str) -> str:
    """Rewrite ``($x is T ? A : B)`` as the union ``(T|A|B)``.

    Examples:
        >>> _flatten_conditionals("($n is positive-int ? Foo : null)")
        '(positive-int|Foo|null)'
    """
    match = _CONDITIONAL.search(text)
    while match is not None:
        end = _closing_paren(text, match.end())
        body = _CONDITIONAL_ARM.sub("|", text[match.end() : end])
        text = f"{text[: match.start()]}({body}{text[end:]}"
        match = _CONDITIONAL.search(text)
    return text


def type_names(type_expr: str, templates: frozenset[str] = frozenset()) -> list[str]:
    """Extract candidate class names from a PHPDoc type expression.

    Examples:
        >>> type_names("array<int, Foo>|null")
        ['Foo']
        >>> type_names("array{id: int, user: User}")
        ['User']
        >>> type_names("non-empty-string|\\\\Bar\\\\Baz[]")
        ['\\\\Bar\\\\Baz']
        >>> type_names("int<0, max>|int<min, -1>")
        []
    """
    cleaned = _QUOTED.sub(" ", type_expr)
    cleaned = _INT_RANGE.sub("int", cleaned)
    cleaned = _flatten_conditionals(cleaned)
    names: list[str] = []
    for match in _TYPE_NAME.finditer(cleaned):
        token = match.group(0)
        tail = cleaned[match.end() :].lstrip()

        if "-" in token:
            continue
        if tail.startswith(":") and not tail.startswith("::"):
            continue
        if tail.startswith("("):
            continue

        bare = token.lstrip("\\")
        if bare.lower() in PSEUDO_TYPES or bare in templates:
            continue
        names.append(token)
    return names


def doc_type_names(comment: str) -> list[tuple[str, int]]:
    """Return ``(name, line_offset)`` pairs for class names in a doc comment.

    ``line_offset`` is relative to the first line of the comment. Names are
    returned as written; callers resolve them against the file's namespace.
    """
    if not comment.startswith("/**"):
        return []

    lines = _doc_lines(comment)
    templates: set[str] = set()
    tagged: list[tuple[str, str, int]] = []

    for offset, line in enumerate(lines):
        match = _TAG_PATTERN.search(line)
        if match is None:
            continue
        tag = match.group("tag")
        rest = match.group("rest")
        if tag.startswith("template"):
            name_match = _TEMPLATE_NAME.match(rest)
            if name_match is not None:
                templates.add(name_match.group(1))
                bound = rest[name_match.end() :].strip()
                if bound.startswith(("of ", "as ")):
                    tagged.append(("bound", bound[3:], offset))
            continue
        tagged.append((tag, rest, offset))

    frozen_templates = frozenset(templates)
    results: list[tuple[str, int]] = []
    for tag, rest, offset in tagged:
        if tag == "method":
            signature = _read_method_signature(rest)
            expr = re.sub(r"^\s*static\s+", "", signature)
        else:
            expr = _read_type(rest)
        if not expr or expr.startswith("$"):
            continue
        results.extend((name, offset) for name in type_names(expr, frozen_templates))
    return results


__all__ = ["PSEUDO_TYPES", "doc_type_names", "type_names"]
