"""Class reference extraction from PHP source."""

from __future__ import annotations

from typing import TYPE_CHECKING

from contract.models import Reference
from parse.docblocks import doc_type_names
from parse.names import NameContext, is_class_like
from parse.php import node_line, parse_php, walk

if TYPE_CHECKING:
    from tree_sitter import Node

    from parse.php import PhpSource

_NAME_TYPES = frozenset({"name", "qualified_name"})

# Nodes whose direct name children are class references, and the call
# shape recorded for each.
_DIRECT_NAME_CONTEXTS = {
    "named_type": "type",
    "base_clause": "extends",
    "class_interface_clause": "implements",
    "use_declaration": "trait",
    "object_creation_expression": "new",
    "attribute": "attribute",
}

_SCOPED_CONTEXTS = frozenset(
    {
        "class_constant_access_expression",
        "scoped_call_expression",
        "scoped_property_access_expression",
    }
)

_USE_CLAUSE_TYPES = frozenset({"namespace_use_clause", "namespace_use_group_clause"})


def _use_kind(node: Node) -> str | None:
    """Return ``function`` or ``const`` for non-class imports, else None."""
    kind = node.child_by_field_name("type")
    if kind is not None:
        return kind.type
    for child in node.children:
        if not child.is_named and child.type in {"function", "const"}:
            return child.type
    return None


def _clause_alias(php: PhpSource, clause: Node) -> str | None:
    alias = clause.child_by_field_name("alias")
    if alias is not None:
        return php.text(alias)
    for child in clause.named_children:
        if child.type == "namespace_aliasing_clause":
            for grandchild in child.named_children:
                if grandchild.type == "name":
                    return php.text(grandchild)
    return None


def _clause_target(php: PhpSource, clause: Node) -> str | None:
    for child in clause.named_children:
        if child.type in {"name", "qualified_name", "namespace_name"}:
            return php.text(child)
    return None


def _use_clauses(declaration: Node) -> tuple[Node | None, list[Node]]:
    """Return the group prefix node (if any) and the import clause nodes."""
    prefix = None
    clauses: list[Node] = []
    for child in declaration.named_children:
        if child.type == "namespace_name" and prefix is None:
            prefix = child
        elif child.type in _USE_CLAUSE_TYPES:
            clauses.append(child)
        elif child.type == "namespace_use_group":
            clauses.extend(
                grandchild
                for grandchild in child.named_children
                if grandchild.type in _USE_CLAUSE_TYPES
            )
    return prefix, clauses


class _ClassReferenceCollector:
    def __init__(self, php: PhpSource) -> None:
        self.php = php
        self.context = NameContext()
        self.references: list[Reference] = []

    def add(self, written: str, line: int, call: str) -> None:
        if not is_class_like(written):
            return
        self.references.append(
            Reference(
                name=self.context.resolve(written),
                line=line,
                kind="class",
                call=call,
            )
        )

    def add_node(self, node: Node, call: str) -> None:
        if node.type in _NAME_TYPES:
            self.add(self.php.text(node), node_line(node), call)

    def collect(self) -> list[Reference]:
        for node in walk(self.php.root):
            node_type = node.type

            if node_type == "namespace_definition":
                name = node.child_by_field_name("name")
                self.context.enter_namespace(self.php.text(name) if name else "")
            elif node_type == "namespace_use_declaration":
                self._collect_use(node)
            elif node_type in _DIRECT_NAME_CONTEXTS:
                call = _DIRECT_NAME_CONTEXTS[node_type]
                for child in node.named_children:
                    self.add_node(child, call)
            elif node_type in _SCOPED_CONTEXTS:
                scope = node.child_by_field_name("scope")
                if scope is None and node.named_child_count:
                    scope = node.named_children[0]
                if scope is not None:
                    self.add_node(scope, "static")
            elif node_type == "binary_expression":
                operator = node.child_by_field_name("operator")
                if operator is not None and operator.type == "instanceof":
                    right = node.child_by_field_name("right")
                    if right is not None:
                        self.add_node(right, "instanceof")
            elif node_type == "comment":
                self._collect_doc(node)

        return self.references

    def _collect_use(self, declaration: Node) -> None:
        if _use_kind(declaration) is not None:
            return

        prefix_node, clauses = _use_clauses(declaration)
        prefix = self.php.text(prefix_node).strip("\\") if prefix_node else ""

        for clause in clauses:
            if _use_kind(clause) is not None:
                continue
            target = _clause_target(self.php, clause)
            if target is None:
                continue
            if prefix:
                target = prefix + "\\" + target.lstrip("\\")
            imported = self.context.add_alias(target, _clause_alias(self.php, clause))
            self.references.append(
                Reference(
                    name=imported, line=node_line(clause), kind="class", call="use"
                )
            )

    def _collect_doc(self, comment: Node) -> None:
        text = self.php.text(comment)
        if not text.startswith("/**"):
            return
        start = node_line(comment)
        for written, offset in doc_type_names(text):
            self.add(written, start + offset, "doc")


def extract_class_references(content: str | bytes) -> list[Reference]:
    """Extract class references from PHP source, in document order.

    Every name is resolved to its fully-qualified form using the namespace
    and ``use`` imports in effect where it appears.

    Raises:
        ParseError: If the source has a syntax error.
    """
    return _ClassReferenceCollector(parse_php(content)).collect()


__all__ = ["extract_class_references"]
