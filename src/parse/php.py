"""Tree-sitter helpers shared by the PHP reference extractors."""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tree_sitter import Language, Node, Parser, Tree
from tree_sitter_php import language_php

from errors import ParseError

if TYPE_CHECKING:
    from collections.abc import Iterator

_LOCAL = threading.local()

_WHITESPACE_RUN = re.compile(r"\s+")

_SINGLE_QUOTED_ESCAPES = re.compile(r"\\([\\'])")
_DOUBLE_QUOTED_ESCAPES = re.compile(r"\\([nrtvef\\$\"0])")
_DOUBLE_QUOTED_MAP = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "e": "\x1b",
    "f": "\f",
    "\\": "\\",
    "$": "$",
    '"': '"',
    "0": "\0",
}

# Children of a double-quoted string that keep it a compile-time literal.
_LITERAL_STRING_PARTS = frozenset({"string_content", "string_value", "escape_sequence"})

CALL_TYPES = frozenset(
    {
        "function_call_expression",
        "member_call_expression",
        "nullsafe_member_call_expression",
        "scoped_call_expression",
    }
)


@dataclass(frozen=True)
class PhpSource:
    """A parsed PHP document and the bytes it was parsed from."""

    source: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        return node_text(self.source, node)


def _get_parser() -> Parser:
    """Return this thread's tree-sitter parser for PHP.

    Parsers are not safe to share between threads, so each worker keeps its
    own instance.
    """
    parser = getattr(_LOCAL, "parser", None)
    if parser is None:
        parser = Parser(Language(language_php()))
        _LOCAL.parser = parser
    return parser


def _first_error(node: Node) -> Node | None:
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = _first_error(child)
        if found is not None:
            return found
    return node


def parse_php(source: str | bytes, *, strict: bool = True) -> PhpSource:
    """Parse PHP source text.

    Args:
        source: PHP source (text or UTF-8 bytes), including the ``<?php`` tag.
        strict: Raise ParseError when tree-sitter had to recover from a
            syntax error. When False the partial tree is returned.

    Raises:
        ParseError: On syntax errors in strict mode.
    """
    source_bytes = source.encode("utf-8") if isinstance(source, str) else source
    tree = _get_parser().parse(source_bytes)

    if strict and tree.root_node.has_error:
        error_node = _first_error(tree.root_node)
        line = error_node.start_point[0] + 1 if error_node is not None else None
        msg = f"Syntax error, unexpected input on line {line}"
        raise ParseError(msg, line=line)

    return PhpSource(source=source_bytes, tree=tree)


def node_text(source: bytes, node: Node) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def node_line(node: Node) -> int:
    return node.start_point[0] + 1


def normalize_expr(raw_expr: str) -> str:
    """Collapse whitespace runs so expressions read well in diagnostics."""
    return _WHITESPACE_RUN.sub(" ", raw_expr.strip())


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and its descendants in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def unwrap_parens(node: Node) -> Node:
    while node.type == "parenthesized_expression" and node.named_child_count == 1:
        node = node.named_children[0]
    return node


def string_literal_value(source: bytes, node: Node) -> str | None:
    """Return the value of a literal string node, or None if not a literal.

    Single-quoted strings are always literal; double-quoted strings are
    literal only when they contain no interpolation.
    """
    node = unwrap_parens(node)
    text = node_text(source, node)

    if node.type == "string":
        if text[:1] in {"b", "B"}:
            text = text[1:]
        if len(text) < 2 or text[0] != "'" or text[-1] != "'":
            return None
        return _SINGLE_QUOTED_ESCAPES.sub(r"\1", text[1:-1])

    if node.type == "encapsed_string":
        parts = node.named_children
        if any(child.type not in _LITERAL_STRING_PARTS for child in parts):
            return None
        if text[:1] in {"b", "B"}:
            text = text[1:]
        if len(text) < 2 or text[0] != '"' or text[-1] != '"':
            return None
        return _DOUBLE_QUOTED_ESCAPES.sub(
            lambda match: _DOUBLE_QUOTED_MAP[match.group(1)], text[1:-1]
        )

    return None


def fold_string(source: bytes, node: Node) -> str | None:
    """Evaluate literal strings joined with ``.`` at parse time.

    ``'admin.' . 'users'`` folds to ``admin.users``; anything involving a
    variable or call returns None.
    """
    node = unwrap_parens(node)
    if node.type == "binary_expression" and binary_operator(source, node) == ".":
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        if left is None or right is None:
            return None
        left_value = fold_string(source, left)
        right_value = fold_string(source, right)
        if left_value is None or right_value is None:
            return None
        return left_value + right_value
    return string_literal_value(source, node)


def binary_operator(source: bytes, node: Node) -> str | None:
    operator = node.child_by_field_name("operator")
    if operator is None:
        return None
    return node_text(source, operator).strip()


def call_arguments(node: Node) -> list[Node]:
    """Return the value expressions of a call's arguments, in order."""
    arguments = node.child_by_field_name("arguments")
    if arguments is None:
        return []
    values: list[Node] = []
    for argument in arguments.named_children:
        if argument.type != "argument":
            continue
        if argument.named_child_count == 0:
            continue
        values.append(argument.named_children[-1])
    return values


def first_argument(node: Node) -> Node | None:
    values = call_arguments(node)
    return values[0] if values else None


def call_name(source: bytes, node: Node) -> str | None:
    """Return the called function or method name of a call node."""
    if node.type == "function_call_expression":
        function = node.child_by_field_name("function")
        if function is None or function.type not in {"name", "qualified_name"}:
            return None
        return node_text(source, function).lstrip("\\")

    name = node.child_by_field_name("name")
    if name is None or name.type != "name":
        return None
    return node_text(source, name)


def scope_name(source: bytes, node: Node) -> str | None:
    """Return the class name a static call is made on (``Route`` in ``Route::has``)."""
    scope = node.child_by_field_name("scope")
    if scope is None or scope.type not in {"name", "qualified_name"}:
        return None
    return node_text(source, scope).lstrip("\\")


def is_class_alias(name: str | None, short_name: str) -> bool:
    """Match a facade by short name or by any namespaced name ending with it."""
    if name is None:
        return False
    return name == short_name or name.endswith("\\" + short_name)


def dynamic_reason(source: bytes, node: Node, subject: str) -> str:
    """Describe why an argument expression is not a literal."""
    node = unwrap_parens(node)

    if node.type in {"variable_name", "dynamic_variable_name"}:
        return f"Variable used as {subject}"
    if node.type == "binary_expression":
        operator = binary_operator(source, node)
        if operator == ".":
            return "String concatenation"
        if operator == "??":
            return "Null coalescing operator"
    if node.type == "function_call_expression":
        return f"Function call used as {subject}"
    if node.type in CALL_TYPES:
        return f"Method call used as {subject}"
    if node.type == "conditional_expression":
        return "Ternary operator"
    if node.type == "encapsed_string":
        return "String interpolation"
    return "dynamic"


def argument_value(
    source: bytes, node: Node, subject: str
) -> tuple[str, bool, str | None]:
    """Classify a call argument as ``(value, dynamic, reason)``.

    Literal strings yield their value. Anything else yields the normalized
    expression text, flagged dynamic, with the reason it cannot be checked.
    """
    value = string_literal_value(source, node)
    if value is not None:
        return value, False, None
    return (
        normalize_expr(node_text(source, node)),
        True,
        dynamic_reason(source, node, subject),
    )


__all__ = [
    "CALL_TYPES",
    "ParseError",
    "PhpSource",
    "argument_value",
    "binary_operator",
    "call_arguments",
    "call_name",
    "dynamic_reason",
    "first_argument",
    "fold_string",
    "is_class_alias",
    "node_line",
    "node_text",
    "normalize_expr",
    "parse_php",
    "scope_name",
    "string_literal_value",
    "unwrap_parens",
    "walk",
]
