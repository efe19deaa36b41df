"""Named-route references at PHP call sites.

Recognized call shapes::

    route('users.index')
    to_route('users.index')
    Route::has('users.index')
    URL::route('users.index')
    redirect()->route('users.index')    # any ``<expr>->route(...)``
"""

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
    walk,
)

if TYPE_CHECKING:
    from tree_sitter import Node

    from parse.php import PhpSource

ROUTE_FUNCTIONS = frozenset({"route", "to_route"})

_MEMBER_CALLS = frozenset({"member_call_expression", "nullsafe_member_call_expression"})


def _member_call_shape(php: PhpSource, node: Node) -> str:
    """Describe the receiver of ``->route()``, e.g. ``redirect()->route``."""
    receiver = node.child_by_field_name("object")
    if receiver is not None:
        if receiver.type == "function_call_expression":
            function = call_name(php.source, receiver)
            if function is not None:
                return f"{function}()->route"
        elif receiver.type == "variable_name":
            return f"{php.text(receiver)}->route"
    return "method()->route"


def route_call_shape(php: PhpSource, node: Node) -> str | None:
    """Return the call shape if ``node`` references a route by name."""
    name = call_name(php.source, node)
    if name is None:
        return None

    if node.type == "function_call_expression":
        return name if name in ROUTE_FUNCTIONS else None

    if node.type == "scoped_call_expression":
        scope = scope_name(php.source, node)
        if name == "has" and is_class_alias(scope, "Route"):
            return "Route::has"
        if name == "route" and is_class_alias(scope, "URL"):
            return "URL::route"
        return None

    if node.type in _MEMBER_CALLS and name == "route":
        return _member_call_shape(php, node)

    return None


def extract_route_calls(content: str | bytes) -> list[Reference]:
    """Extract route-name references from PHP source, in document order.

    Literal first arguments produce static references. Any other first
    argument produces a dynamic reference whose name is the normalized
    expression text.

    Raises:
        ParseError: If the source has a syntax error.
    """
    php = parse_php(content)
    references: list[Reference] = []

    for node in walk(php.root):
        shape = route_call_shape(php, node)
        if shape is None:
            continue
        argument = first_argument(node)
        if argument is None:
            continue

        value, dynamic, reason = argument_value(php.source, argument, "route name")
        references.append(
            Reference(
                name=value,
                line=node_line(node),
                kind="route",
                dynamic=dynamic,
                call=shape,
                reason=reason,
            )
        )

    return references


__all__ = ["ROUTE_FUNCTIONS", "extract_route_calls", "route_call_shape"]
