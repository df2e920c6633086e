"""
Type Alias Declarations

Classifies xtype/alias/alternateClassName/type values into widget
declarations, and finds widget names a component references from nested
configuration (items, dockedItems, layout, ...).
"""

import re

from extmodel.ast.literals import property_key
from extmodel.ast.models import WidgetDeclaration
from extmodel.ast.nodes import NodeKind, SyntaxNode
from extmodel.configs.constants import KIND_ALIAS, KIND_TYPE, KIND_XTYPE, TYPE_NAMESPACES, XTYPE_NAMESPACE
from extmodel.exceptions import UnexpectedShapeError

_ALIAS_RE = re.compile(r"(.+)\.(.+)")


def split_alias(value: str) -> tuple[str, str]:
    """
    Split "namespace.name" at its last dot.

    Returns:
        (namespace, name); namespace is "" when there is no dot
    """
    match = _ALIAS_RE.match(value)
    if not match:
        return "", value
    return match.group(1), match.group(2)


def classify_declaration(key: str, value: str, node: SyntaxNode, component_class: str) -> WidgetDeclaration:
    """
    Build the declaration for one string value of a type alias key.

    `xtype` values are xtypes and `type` values are types. `alias` and
    `alternateClassName` values resolve to an xtype under the widget
    namespace, to a type under store/layout, and otherwise stay aliases
    carrying the full value and its namespace.
    """
    start, end = node.start, node.end

    if key == "xtype":
        return WidgetDeclaration(name=value, start=start, end=end, component_class=component_class, kind=KIND_XTYPE)
    if key == "type":
        return WidgetDeclaration(name=value, start=start, end=end, component_class=component_class, kind=KIND_TYPE)

    namespace, name = split_alias(value)
    if namespace == XTYPE_NAMESPACE:
        return WidgetDeclaration(
            name=name, start=start, end=end, component_class=component_class, kind=KIND_XTYPE, namespace=namespace
        )
    if namespace in TYPE_NAMESPACES:
        return WidgetDeclaration(
            name=name, start=start, end=end, component_class=component_class, kind=KIND_TYPE, namespace=namespace
        )
    return WidgetDeclaration(
        name=value, start=start, end=end, component_class=component_class, kind=KIND_ALIAS, namespace=namespace
    )


def declaration_strings(key: str, value: SyntaxNode) -> list[SyntaxNode]:
    """
    String literal nodes of a string or string-array value.

    Raises:
        UnexpectedShapeError: If the value is neither
    """
    if value.kind == NodeKind.STRING:
        return [value]
    if value.kind == NodeKind.ARRAY:
        return [item for item in value.named_children if item.kind == NodeKind.STRING]
    raise UnexpectedShapeError(f"'{key}' must be a string or an array of strings", key=key, line=value.start.line)


def classify_declarations(key: str, value: SyntaxNode, component_class: str) -> list[WidgetDeclaration]:
    return [
        classify_declaration(key, node.string_value(), node, component_class)
        for node in declaration_strings(key, value)
    ]


def find_widget_references(body: SyntaxNode, component_class: str, kind: str) -> list[WidgetDeclaration]:
    """
    Every string-valued `xtype` (or `type`) property anywhere under `body`.

    Each reference records the nearest enclosing property as its
    `parent_property` ("" at the top level).
    """
    found: list[WidgetDeclaration] = []

    def _scan(node: SyntaxNode, parent_property: str) -> None:
        for child in node.named_children:
            if child.kind == NodeKind.PAIR:
                key = property_key(child)
                value = child.field("value")
                if value is None:
                    continue
                if key == kind and value.kind == NodeKind.STRING:
                    found.append(
                        WidgetDeclaration(
                            name=value.string_value(),
                            start=value.start,
                            end=value.end,
                            component_class=component_class,
                            kind=kind,
                            parent_property=parent_property,
                        )
                    )
                else:
                    _scan(value, key or parent_property)
            else:
                _scan(child, parent_property)

    _scan(body, "")
    return found


def referenced_widgets(
    body: SyntaxNode,
    component_class: str,
    own_xtypes: list[WidgetDeclaration],
    own_types: list[WidgetDeclaration],
) -> list[WidgetDeclaration]:
    """Referenced xtypes then types, minus the component's own declarations."""
    own_xtype_names = {x.name for x in own_xtypes}
    own_type_names = {t.name for t in own_types}

    widgets = [w for w in find_widget_references(body, component_class, KIND_XTYPE) if w.name not in own_xtype_names]
    widgets.extend(w for w in find_widget_references(body, component_class, KIND_TYPE) if w.name not in own_type_names)
    return widgets

