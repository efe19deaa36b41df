"""Named routes declared in Laravel route-definition files.

Route files are evaluated statically: method chains on ``Route`` (or a
router variable) are decomposed and their name-bearing calls folded in
declaration order, so a route nested in
``Route::name('api.')->group(...)`` registers as ``api.<name>``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from parse.php import (
    call_arguments,
    fold_string,
    node_line,
    parse_php,
    unwrap_parens,
)
from parse.php_arrays import UNKNOWN, as_list, evaluate

if TYPE_CHECKING:
    from tree_sitter import Node

    from parse.php import PhpSource

logger = structlog.get_logger(__name__)

ROUTE_VERBS = frozenset(
    {
        "get",
        "post",
        "put",
        "patch",
        "delete",
        "options",
        "any",
        "match",
        "view",
        "redirect",
        "permanentRedirect",
        "fallback",
    }
)

RESOURCE_METHODS = ("index", "create", "store", "show", "edit", "update", "destroy")
API_RESOURCE_METHODS = ("index", "store", "show", "update", "destroy")

_RESOURCE_CALLS = {
    "resource": RESOURCE_METHODS,
    "apiResource": API_RESOURCE_METHODS,
}
_RESOURCES_CALLS = {
    "resources": RESOURCE_METHODS,
    "apiResources": API_RESOURCE_METHODS,
}

_NAME_CALLS = frozenset({"name", "as"})

_MEMBER_CALLS = frozenset({"member_call_expression", "nullsafe_member_call_expression"})

_CLOSURES = frozenset(
    {"anonymous_function", "anonymous_function_creation_expression", "arrow_function"}
)


@dataclass(frozen=True)
class RouteDefinition:
    """A route name as registered, with where it was declared."""

    name: str
    line: int


@dataclass(frozen=True)
class _Call:
    name: str
    node: Node

    @property
    def arguments(self) -> list[Node]:
        return call_arguments(self.node)


def _call_chain(php: PhpSource, node: Node) -> list[_Call]:
    """Decompose ``A::b()->c()->d()`` into calls in evaluation order."""
    calls: list[_Call] = []
    current = unwrap_parens(node)
    while current.type in _MEMBER_CALLS:
        name = current.child_by_field_name("name")
        if name is None or name.type != "name":
            return []
        calls.append(_Call(php.text(name), current))
        receiver = current.child_by_field_name("object")
        if receiver is None:
            return []
        current = unwrap_parens(receiver)

    if current.type == "scoped_call_expression":
        name = current.child_by_field_name("name")
        if name is None or name.type != "name":
            return []
        calls.append(_Call(php.text(name), current))
    elif not calls:
        return []

    calls.reverse()
    return calls


def _string_argument(php: PhpSource, call: _Call, index: int = 0) -> str | None:
    arguments = call.arguments
    if len(arguments) <= index:
        return None
    return fold_string(php.source, arguments[index])


def _array_argument(php: PhpSource, call: _Call, index: int) -> Any:
    arguments = call.arguments
    if len(arguments) <= index:
        return UNKNOWN
    return evaluate(php.source, arguments[index])


def _string_values(php: PhpSource, call: _Call) -> list[str]:
    """Read ``->only(['a', 'b'])`` or variadic ``->only('a', 'b')``."""
    values: list[str] = []
    for argument in call.arguments:
        value = evaluate(php.source, argument)
        values.extend(item for item in as_list(value) if isinstance(item, str))
    return values


@dataclass
class _Resource:
    name: str
    methods: tuple[str, ...]
    only: list[str] | None = None
    except_: list[str] | None = None
    names: dict[str, str] | None = None
    base: str | None = None
    prefix: str = ""

    def apply_options(self, options: Any) -> None:
        if not isinstance(options, dict):
            return
        if "only" in options:
            self.only = [v for v in as_list(options["only"]) if isinstance(v, str)]
        if "except" in options:
            self.except_ = [v for v in as_list(options["except"]) if isinstance(v, str)]
        if "names" in options:
            self.set_names(options["names"])
        if isinstance(options.get("as"), str):
            self.prefix = options["as"]

    def set_names(self, names: Any) -> None:
        if isinstance(names, str):
            self.base = names
        elif isinstance(names, dict):
            explicit = {k: v for k, v in names.items() if isinstance(v, str)}
            self.names = {**(self.names or {}), **explicit}

    def route_names(self) -> list[str]:
        methods = list(self.methods)
        if self.only is not None:
            methods = [method for method in methods if method in self.only]
        if self.except_ is not None:
            methods = [method for method in methods if method not in self.except_]

        resource = self.base or self.name.rsplit("/", 1)[-1]
        prefix = f"{self.prefix}." if self.prefix else ""
        names: list[str] = []
        for method in methods:
            if self.names and method in self.names:
                names.append(self.names[method])
            else:
                names.append(f"{prefix}{resource}.{method}".strip("."))
        return names


class _RouteFileVisitor:
    def __init__(self, php: PhpSource) -> None:
        self.php = php
        self.definitions: list[RouteDefinition] = []

    def visit(self, node: Node, prefix: str) -> None:
        if node.type == "expression_statement" and node.named_child_count:
            expression = node.named_children[0]
            chain = _call_chain(self.php, expression)
            if chain:
                self.visit_chain(chain, prefix, node_line(expression))
                return
        for child in node.named_children:
            self.visit(child, prefix)

    def visit_closure(self, closure: Node, prefix: str) -> None:
        body = closure.child_by_field_name("body")
        if body is None:
            return
        if closure.type == "arrow_function":
            chain = _call_chain(self.php, body)
            if chain:
                self.visit_chain(chain, prefix, node_line(body))
            return
        self.visit(body, prefix)

    def visit_chain(self, chain: list[_Call], prefix: str, line: int) -> None:
        head = chain[0].name
        if head in _RESOURCE_CALLS:
            self.visit_resource(chain, prefix, line)
            return
        if head in _RESOURCES_CALLS:
            registrations = _array_argument(self.php, chain[0], 0)
            if isinstance(registrations, dict):
                for name in registrations:
                    if isinstance(name, str):
                        resource = _Resource(name, _RESOURCES_CALLS[head])
                        self.add_resource(resource, prefix, line)
            return

        name_parts: list[str] = []
        is_route = False
        for call in chain:
            if call.name in _NAME_CALLS:
                part = _string_argument(self.php, call)
                if part is None:
                    logger.debug("dynamic route name skipped", line=line)
                    return
                name_parts.append(part)
            elif call.name == "group":
                self.visit_group(call, prefix + "".join(name_parts))
                return
            elif call.name in ROUTE_VERBS:
                is_route = True
                action_as = self.action_name(call)
                if action_as is not None:
                    name_parts.append(action_as)

        if is_route and name_parts:
            self.add(prefix + "".join(name_parts), line)

    def action_name(self, call: _Call) -> str | None:
        """Return ``as`` from an action array: ``Route::get('/', ['as' => 'home'])``."""
        for argument in call.arguments[1:]:
            if unwrap_parens(argument).type != "array_creation_expression":
                continue
            action = evaluate(self.php.source, argument)
            if isinstance(action, dict) and isinstance(action.get("as"), str):
                return action["as"]
        return None

    def visit_group(self, call: _Call, prefix: str) -> None:
        for argument in call.arguments:
            argument = unwrap_parens(argument)
            if argument.type == "array_creation_expression":
                attributes = evaluate(self.php.source, argument)
                if isinstance(attributes, dict):
                    group_as = attributes.get("as")
                    if isinstance(group_as, str):
                        prefix += group_as
            elif argument.type in _CLOSURES:
                self.visit_closure(argument, prefix)

    def visit_resource(self, chain: list[_Call], prefix: str, line: int) -> None:
        head = chain[0]
        name = _string_argument(self.php, head)
        if name is None:
            logger.debug("dynamic resource name skipped", line=line)
            return

        resource = _Resource(name, _RESOURCE_CALLS[head.name])
        resource.apply_options(_array_argument(self.php, head, 2))
        for call in chain[1:]:
            if call.name == "only":
                resource.only = _string_values(self.php, call)
            elif call.name == "except":
                resource.except_ = _string_values(self.php, call)
            elif call.name == "names":
                resource.set_names(_array_argument(self.php, call, 0))
            elif call.name == "name" and len(call.arguments) >= 2:
                method = _string_argument(self.php, call, 0)
                route_name = _string_argument(self.php, call, 1)
                if method is not None and route_name is not None:
                    resource.set_names({method: route_name})
        self.add_resource(resource, prefix, line)

    def add_resource(self, resource: _Resource, prefix: str, line: int) -> None:
        for route_name in resource.route_names():
            self.add(prefix + route_name, line)

    def add(self, name: str, line: int) -> None:
        self.definitions.append(RouteDefinition(name=name, line=line))


def extract_route_definitions(content: str | bytes) -> list[RouteDefinition]:
    """Return every named route a route file registers, in declaration order.

    Raises:
        ParseError: If the file has a syntax error.
    """
    php = parse_php(content)
    visitor = _RouteFileVisitor(php)
    visitor.visit(php.root, "")
    return visitor.definitions


__all__ = [
    "API_RESOURCE_METHODS",
    "RESOURCE_METHODS",
    "ROUTE_VERBS",
    "RouteDefinition",
    "extract_route_definitions",
]
