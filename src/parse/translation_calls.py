"""Translation-key references at PHP call sites."""

from __future__ import annotations

from typing import TYPE_CHECKING

from contract.models import Reference
from parse.php import (
    argument_value,
    call_name,
    first_argument,
    is_class_alias,
    node_line,
    parse_php,
    scope_name,
    string_literal_value,
    walk,
)

if TYPE_CHECKING:
    from tree_sitter import Node

    from parse.php import PhpSource

TRANSLATION_FUNCTIONS = frozenset({"__", "trans", "trans_choice"})

LANG_FACADE_METHODS = frozenset({"get", "has", "choice"})


def _is_translator_instance(php: PhpSource, node: Node | None) -> bool:
    """Match ``app('translator')``, the receiver compiled from ``@lang``."""
    if node is None or node.type != "function_call_expression":
        return False
    if call_name(php.source, node) != "app":
        return False
    argument = first_argument(node)
    if argument is None:
        return False
    return string_literal_value(php.source, argument) == "translator"


def translation_call_shape(php: PhpSource, node: Node) -> str | None:
    """Return the call shape if ``node`` looks up a translation key."""
    name = call_name(php.source, node)
    if name is None:
        return None

    if node.type == "function_call_expression":
        return name if name in TRANSLATION_FUNCTIONS else None

    if node.type == "scoped_call_expression":
        if name in LANG_FACADE_METHODS and is_class_alias(
            scope_name(php.source, node), "Lang"
        ):
            return f"Lang::{name}"
        return None

    if node.type == "member_call_expression" and name == "get":
        if _is_translator_instance(php, node.child_by_field_name("object")):
            return "translator::get"

    return None


def package_of(key: str) -> str | None:
    """Return the vendor package of a ``package::group.key`` key."""
    if "::" not in key:
        return None
    return key.split("::", 1)[0]


def extract_translation_calls(content: str | bytes) -> list[Reference]:
    """Extract translation-key references from PHP source, in document order.

    Keys are kept exactly as written, including non-ASCII characters.

    Raises:
        ParseError: If the source has a syntax error.
    """
    php = parse_php(content)
    references: list[Reference] = []

    for node in walk(php.root):
        shape = translation_call_shape(php, node)
        if shape is None:
            continue
        argument = first_argument(node)
        if argument is None:
            continue

        value, dynamic, reason = argument_value(php.source, argument, "key")
        references.append(
            Reference(
                name=value,
                line=node_line(node),
                kind="translation",
                dynamic=dynamic,
                call=shape,
                reason=reason,
            )
        )

    return references


__all__ = [
    "LANG_FACADE_METHODS",
    "TRANSLATION_FUNCTIONS",
    "extract_translation_calls",
    "package_of",
    "translation_call_shape",
]
