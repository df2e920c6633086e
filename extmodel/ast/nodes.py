"""
Neutral Syntax Node Abstraction

Wraps tree-sitter nodes so extractors discriminate on a small NodeKind
enum instead of grammar-specific type names. Every grammar name the
extractors care about is mapped in GRAMMAR_KINDS; anything else is OTHER.
"""

from enum import Enum
from typing import Iterator, Optional

from tree_sitter import Node

from extmodel.ast.models import Position


class NodeKind(Enum):
    CALL = "call"
    NEW = "new"
    MEMBER = "member"
    IDENTIFIER = "identifier"
    STRING = "string"
    TEMPLATE = "template"
    NUMBER = "number"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"
    THIS = "this"
    OBJECT = "object"
    PAIR = "pair"
    ARRAY = "array"
    FUNCTION = "function"
    METHOD = "method"
    ARROW = "arrow"
    SPREAD = "spread"
    AWAIT = "await"
    ASSIGNMENT = "assignment"
    VARIABLE_DECLARATION = "variable_declaration"
    DECLARATOR = "declarator"
    EXPRESSION_STATEMENT = "expression_statement"
    RETURN = "return"
    BLOCK = "block"
    COMMENT = "comment"
    PARAMETERS = "parameters"
    PARAMETER = "parameter"
    PROPERTY_NAME = "property_name"
    COMPUTED_NAME = "computed_name"
    ARGUMENTS = "arguments"
    SUBSCRIPT = "subscript"
    PARENTHESIZED = "parenthesized"
    PROGRAM = "program"
    ERROR = "error"
    OTHER = "other"


# Grammar node type -> NodeKind
GRAMMAR_KINDS = {
    "call_expression": NodeKind.CALL,
    "new_expression": NodeKind.NEW,
    "member_expression": NodeKind.MEMBER,
    "identifier": NodeKind.IDENTIFIER,
    "shorthand_property_identifier": NodeKind.IDENTIFIER,
    "string": NodeKind.STRING,
    "template_string": NodeKind.TEMPLATE,
    "number": NodeKind.NUMBER,
    "true": NodeKind.TRUE,
    "false": NodeKind.FALSE,
    "null": NodeKind.NULL,
    "this": NodeKind.THIS,
    "object": NodeKind.OBJECT,
    "pair": NodeKind.PAIR,
    "array": NodeKind.ARRAY,
    "function_expression": NodeKind.FUNCTION,
    "function": NodeKind.FUNCTION,  # Older grammar releases
    "method_definition": NodeKind.METHOD,
    "arrow_function": NodeKind.ARROW,
    "spread_element": NodeKind.SPREAD,
    "await_expression": NodeKind.AWAIT,
    "assignment_expression": NodeKind.ASSIGNMENT,
    "variable_declaration": NodeKind.VARIABLE_DECLARATION,
    "lexical_declaration": NodeKind.VARIABLE_DECLARATION,
    "variable_declarator": NodeKind.DECLARATOR,
    "expression_statement": NodeKind.EXPRESSION_STATEMENT,
    "return_statement": NodeKind.RETURN,
    "statement_block": NodeKind.BLOCK,
    "comment": NodeKind.COMMENT,
    "formal_parameters": NodeKind.PARAMETERS,
    "required_parameter": NodeKind.PARAMETER,
    "optional_parameter": NodeKind.PARAMETER,
    "property_identifier": NodeKind.PROPERTY_NAME,
    "computed_property_name": NodeKind.COMPUTED_NAME,
    "arguments": NodeKind.ARGUMENTS,
    "subscript_expression": NodeKind.SUBSCRIPT,
    "parenthesized_expression": NodeKind.PARENTHESIZED,
    "program": NodeKind.PROGRAM,
    "ERROR": NodeKind.ERROR,
}

FUNCTION_KINDS = (NodeKind.FUNCTION, NodeKind.ARROW, NodeKind.METHOD)

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


def _decode_escape(sequence: str) -> str:
    """Decode one backslash escape sequence from a string literal."""
    body = sequence[1:]
    if not body:
        return ""
    if body[0] in ("u", "x"):
        digits = body[1:].strip("{}")
        try:
            return chr(int(digits, 16))
        except ValueError:
            return sequence
    if body[0] in ("\n", "\r"):
        return ""  # Line continuation
    return _ESCAPES.get(body[0], body[0])


class SyntaxNode:
    """
    A tree-sitter node paired with the source bytes it was parsed from.

    Positions are reported with 1-based lines and 0-based character columns.
    """

    __slots__ = ("_node", "_source", "kind")

    def __init__(self, node: Node, source: bytes):
        self._node = node
        self._source = source
        self.kind = GRAMMAR_KINDS.get(node.type, NodeKind.OTHER)

    def __repr__(self) -> str:
        return f"SyntaxNode({self.kind.name}, {self.start.line}:{self.start.column})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, SyntaxNode):
            return NotImplemented
        return self._node == other._node

    def __hash__(self) -> int:
        return hash((self._node.start_byte, self._node.end_byte, self._node.type))

    def _wrap(self, node: Optional[Node]) -> Optional["SyntaxNode"]:
        if node is None:
            return None
        return SyntaxNode(node, self._source)

    # --- Structure ---

    @property
    def grammar_type(self) -> str:
        return self._node.type

    @property
    def is_named(self) -> bool:
        return self._node.is_named

    @property
    def children(self) -> list["SyntaxNode"]:
        return [SyntaxNode(c, self._source) for c in self._node.children]

    @property
    def named_children(self) -> list["SyntaxNode"]:
        return [SyntaxNode(c, self._source) for c in self._node.named_children]

    @property
    def parent(self) -> Optional["SyntaxNode"]:
        return self._wrap(self._node.parent)

    @property
    def prev_sibling(self) -> Optional["SyntaxNode"]:
        return self._wrap(self._node.prev_sibling)

    def field(self, name: str) -> Optional["SyntaxNode"]:
        """Child stored under a grammar field name (function, arguments, key, ...)."""
        return self._wrap(self._node.child_by_field_name(name))

    def children_of_kind(self, *kinds: NodeKind) -> list["SyntaxNode"]:
        return [child for child in self.named_children if child.kind in kinds]

    def first_named_child(self) -> Optional["SyntaxNode"]:
        named = self._node.named_children
        return SyntaxNode(named[0], self._source) if named else None

    def walk(self) -> Iterator["SyntaxNode"]:
        """Pre-order traversal including this node."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find_all(self, kind: NodeKind) -> list["SyntaxNode"]:
        return [node for node in self.walk() if node.kind == kind]

    # --- Errors ---

    @property
    def has_error(self) -> bool:
        return self._node.has_error

    @property
    def is_missing(self) -> bool:
        return self._node.is_missing

    def first_error(self) -> Optional["SyntaxNode"]:
        """First ERROR or MISSING node in document order."""
        for node in self.walk():
            if node.kind == NodeKind.ERROR or node.is_missing:
                return node
        return None

    # --- Source ranges ---

    def _position(self, point, byte_offset: int) -> Position:
        row, byte_column = point
        line_start = byte_offset - byte_column
        column = len(self._source[line_start:byte_offset].decode("utf-8", errors="replace"))
        return Position(line=row + 1, column=column)

    @property
    def start(self) -> Position:
        return self._position(self._node.start_point, self._node.start_byte)

    @property
    def end(self) -> Position:
        return self._position(self._node.end_point, self._node.end_byte)

    @property
    def text(self) -> str:
        return self._source[self._node.start_byte:self._node.end_byte].decode("utf-8", errors="replace")

    # --- Literal helpers ---

    def string_value(self) -> Optional[str]:
        """Value of a quoted string literal, or None for any other node."""
        if self.kind != NodeKind.STRING:
            return None
        parts = []
        for child in self.named_children:
            if child.grammar_type == "escape_sequence":
                parts.append(_decode_escape(child.text))
            else:
                parts.append(child.text)
        return "".join(parts)

    def identifier_name(self) -> Optional[str]:
        """Name of a plain identifier (or property name), else None."""
        if self.kind in (NodeKind.IDENTIFIER, NodeKind.PROPERTY_NAME):
            return self.text
        return None

    def unwrap_parens(self) -> "SyntaxNode":
        node = self
        while node.kind == NodeKind.PARENTHESIZED:
            inner = node.first_named_child()
            if inner is None:
                break
            node = inner
        return node


def leading_comments(node: SyntaxNode) -> list[SyntaxNode]:
    """
    Comments immediately preceding a node, in source order.

    A comment that starts on the line where the previous declaration ends
    is a trailing comment of that declaration and is not included.
    """
    comments = []
    sibling = node.prev_sibling
    while sibling is not None and sibling.kind == NodeKind.COMMENT:
        comments.append(sibling)
        sibling = sibling.prev_sibling

    if not comments:
        return []

    boundary = sibling
    while boundary is not None and not boundary.is_named:
        boundary = boundary.prev_sibling
    if boundary is not None:
        boundary_line = boundary.end.line
        comments = [c for c in comments if c.start.line != boundary_line]

    comments.reverse()
    return comments


def comment_value(comment: SyntaxNode) -> str:
    """Comment text without its delimiters."""
    text = comment.text
    if text.startswith("/*"):
        text = text[2:]
        if text.endswith("*/"):
            text = text[:-2]
        return text
    if text.startswith("//"):
        return text[2:]
    return text


def leading_comment_text(node: SyntaxNode) -> str:
    """Concatenated leading comments of a node ("" if none)."""
    return "\n".join(comment_value(c) for c in leading_comments(node))
