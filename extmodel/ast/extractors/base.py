"""
Base Extractor

Shared configuration and traversal helpers for the component and method
extractors.
"""

from typing import Optional

from extmodel.ast.literals import property_key
from extmodel.ast.models import Doc, Position
from extmodel.ast.nodes import FUNCTION_KINDS, NodeKind, SyntaxNode, leading_comment_text
from extmodel.configs.runtime import get_full_config
from extmodel.exceptions import UnexpectedShapeError
from extmodel.jsdoc import JsDocParser


class Extractor:
    """
    Base class for extractors working on SyntaxNode trees.

    Holds the runtime settings (factory namespace, instantiation selectors,
    ...) and the doc parser every member's leading comment goes through.
    """

    def __init__(self, config: Optional[dict] = None, doc_parser: Optional[JsDocParser] = None):
        self.config = config if config is not None else get_full_config()
        self.doc_parser = doc_parser or JsDocParser(
            max_lines=self.config["doc_max_lines"],
            control_markers=tuple(self.config["doc_control_markers"]),
        )

    # Helper methods for tree traversal

    def member_doc(
        self,
        node: SyntaxNode,
        name: str,
        p_type: str,
        component_class: str,
        is_private: bool = False,
        is_static: bool = False,
        is_singleton: bool = False,
    ) -> Doc:
        """Doc built from the comments leading a declaration (default Doc if none)."""
        comment = leading_comment_text(node)
        return self.doc_parser.parse(name, p_type, component_class, is_private, is_static, is_singleton, comment)

    def object_entries(self, obj: SyntaxNode) -> list[SyntaxNode]:
        """Pairs, shorthand methods and spreads of an object literal."""
        return obj.children_of_kind(NodeKind.PAIR, NodeKind.METHOD, NodeKind.SPREAD)

    def find_pair(self, obj: SyntaxNode, key: str) -> Optional[SyntaxNode]:
        """First pair of an object literal with the given key."""
        for pair in obj.children_of_kind(NodeKind.PAIR):
            if property_key(pair) == key:
                return pair
        return None

    def pair_value(self, pair: SyntaxNode) -> Optional[SyntaxNode]:
        value = pair.field("value")
        return value.unwrap_parens() if value is not None else None

    def is_function(self, node: Optional[SyntaxNode]) -> bool:
        return node is not None and node.kind in FUNCTION_KINDS

    def call_arguments(self, call: SyntaxNode) -> list[SyntaxNode]:
        """Argument expressions of a call or new expression, comments excluded."""
        arguments = call.field("arguments")
        if arguments is None:
            return []
        return [arg for arg in arguments.named_children if arg.kind != NodeKind.COMMENT]

    def require(self, condition: bool, message: str, key: str, node: SyntaxNode) -> None:
        """Raise UnexpectedShapeError unless the declaration has the expected form."""
        if not condition:
            raise UnexpectedShapeError(message, key=key, line=node.start.line)

    def body_span(self, function: SyntaxNode) -> tuple[Optional[Position], Optional[Position]]:
        body = function.field("body")
        if body is None:
            return None, None
        return body.start, body.end
