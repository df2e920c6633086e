"""
Literal Rendering

Converts initializer nodes into plain Python values for property and config
value blocks. Only literal data is rendered; expressions yield None.
"""

from typing import Any, Optional

from extmodel.ast.nodes import NodeKind, SyntaxNode

_UNRENDERED = object()


def property_key(pair: SyntaxNode) -> Optional[str]:
    """
    Name of an object pair's key.

    Identifiers, quoted strings and numbers are accepted; computed keys
    return None.
    """
    key = pair.field("key")
    if key is None:
        return None
    if key.kind in (NodeKind.PROPERTY_NAME, NodeKind.IDENTIFIER):
        return key.text
    if key.kind == NodeKind.STRING:
        return key.string_value()
    if key.kind == NodeKind.NUMBER:
        return key.text
    return None


def _render(node: SyntaxNode) -> Any:
    node = node.unwrap_parens()
    kind = node.kind

    if kind == NodeKind.STRING:
        return node.string_value()
    if kind == NodeKind.TEMPLATE:
        if any(c.grammar_type == "template_substitution" for c in node.named_children):
            return _UNRENDERED
        return node.text[1:-1]
    if kind == NodeKind.NUMBER:
        return _number(node.text)
    if kind == NodeKind.TRUE:
        return True
    if kind == NodeKind.FALSE:
        return False
    if kind == NodeKind.NULL:
        return None

    if kind == NodeKind.ARRAY:
        items = []
        for child in node.named_children:
            if child.kind == NodeKind.COMMENT:
                continue
            value = _render(child)
            if value is _UNRENDERED:
                return _UNRENDERED
            items.append(value)
        return items

    if kind == NodeKind.OBJECT:
        rendered = {}
        for child in node.named_children:
            if child.kind == NodeKind.COMMENT:
                continue
            if child.kind != NodeKind.PAIR:
                return _UNRENDERED
            name = property_key(child)
            value_node = child.field("value")
            if name is None or value_node is None:
                return _UNRENDERED
            value = _render(value_node)
            if value is _UNRENDERED:
                return _UNRENDERED
            rendered[name] = value
        return rendered

    return _UNRENDERED


def _number(text: str) -> Any:
    cleaned = text.replace("_", "")
    try:
        if cleaned.lower().startswith(("0x", "0o", "0b")):
            return int(cleaned, 0)
        if any(c in cleaned for c in ".eE"):
            return float(cleaned)
        return int(cleaned)
    except ValueError:
        return text


def literal_value(node: Optional[SyntaxNode]) -> Any:
    """
    Render a literal initializer.

    Strings, numbers, booleans, null, and arrays/objects of those are
    rendered; anything else returns None.
    """
    if node is None:
        return None
    value = _render(node)
    return None if value is _UNRENDERED else value
