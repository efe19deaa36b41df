"""Static evaluation of PHP array literals.

Translation catalogs (``return ['key' => 'value', ...];``) and route options
(``['as' => 'admin.', 'only' => ['index']]``) are plain literals, so they can
be read without running PHP. Any value that is not a literal evaluates to
``UNKNOWN``. Array entries keep their literal key with an ``UNKNOWN`` value,
so a translation whose text is computed still counts as defined.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from parse.php import fold_string, parse_php, unwrap_parens

if TYPE_CHECKING:
    from tree_sitter import Node


class _Unknown:
    def __repr__(self) -> str:
        return "UNKNOWN"

    def __bool__(self) -> bool:
        return False


UNKNOWN: Any = _Unknown()

_SCALARS = {"true": True, "false": False, "null": None}


def _array_elements(node: Node) -> list[Node]:
    return [
        child
        for child in node.named_children
        if child.type == "array_element_initializer"
    ]


def evaluate(source: bytes, node: Node) -> Any:
    """Evaluate a literal expression to a Python value, or return UNKNOWN.

    Arrays with only sequential keys still map to dicts; use ``as_list`` to
    read list-shaped arrays.
    """
    node = unwrap_parens(node)
    node_type = node.type

    if node_type == "array_creation_expression":
        result: dict[Any, Any] = {}
        next_index = 0
        for element in _array_elements(node):
            children = element.named_children
            if len(children) == 2:
                key = evaluate(source, children[0])
                if key is UNKNOWN or isinstance(key, (dict, bool)) or key is None:
                    continue
                value = evaluate(source, children[1])
                if isinstance(key, int):
                    next_index = max(next_index, key + 1)
            elif len(children) == 1 and children[0].type != "variadic_unpacking":
                key = next_index
                next_index += 1
                value = evaluate(source, children[0])
            else:
                continue
            result[key] = value
        return result

    if node_type in {"string", "encapsed_string", "binary_expression"}:
        folded = fold_string(source, node)
        return UNKNOWN if folded is None else folded

    text = source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")
    if node_type == "integer":
        try:
            return int(text.replace("_", ""), 0)
        except ValueError:
            return UNKNOWN
    if node_type == "float":
        try:
            return float(text.replace("_", ""))
        except ValueError:
            return UNKNOWN
    if node_type in {"boolean", "null"}:
        return _SCALARS.get(text.lower(), UNKNOWN)
    if node_type == "unary_op_expression" and text.startswith("-"):
        operand = evaluate(source, node.named_children[-1])
        if isinstance(operand, (int, float)) and not isinstance(operand, bool):
            return -operand

    return UNKNOWN


def as_list(value: Any) -> list[Any]:
    """Return the values of an evaluated array, or wrap a scalar."""
    if value is UNKNOWN or value is None:
        return []
    if isinstance(value, dict):
        return list(value.values())
    return [value]


def returned_array(content: str | bytes) -> dict[Any, Any]:
    """Return the literal array a PHP file ``return``s at top level.

    Files that return anything else, or nothing, yield an empty dict.

    Raises:
        ParseError: If the file has a syntax error.
    """
    php = parse_php(content)
    for node in php.root.named_children:
        if node.type != "return_statement" or node.named_child_count == 0:
            continue
        value = evaluate(php.source, node.named_children[0])
        return value if isinstance(value, dict) else {}
    return {}


def flatten_keys(values: dict[Any, Any], prefix: str = "") -> list[str]:
    """Flatten nested arrays into dot-joined keys of their leaf values.

    Non-literal values, including ``UNKNOWN``, are leaves.

    Examples:
        >>> flatten_keys({"a": {"b": "x", "c": "y"}, "d": "z"}, "msg")
        ['msg.a.b', 'msg.a.c', 'msg.d']
    """
    keys: list[str] = []
    for key, value in values.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            keys.extend(flatten_keys(value, full_key))
        else:
            keys.append(full_key)
    return keys


__all__ = ["UNKNOWN", "as_list", "evaluate", "flatten_keys", "returned_array"]
