"""
Syntax Tree Analysis

Tree-sitter based extraction of component models from class definition
files written as `Ext.define("Name", { ... })` calls.
"""

from extmodel.ast.models import (
    BlockMember,
    Component,
    Config,
    Doc,
    DocParam,
    Method,
    ObjectRange,
    Parameter,
    Position,
    Property,
    Reference,
    ReferenceBlock,
    TextEdit,
    ValueRange,
    Variable,
    WidgetDeclaration,
)
from extmodel.ast.nodes import NodeKind, SyntaxNode
from extmodel.ast.parser import ParsedSource, SourceParser, get_parser

__all__ = [
    # Models
    "BlockMember",
    "Component",
    "Config",
    "Doc",
    "DocParam",
    "Method",
    "ObjectRange",
    "Parameter",
    "Position",
    "Property",
    "Reference",
    "ReferenceBlock",
    "TextEdit",
    "ValueRange",
    "Variable",
    "WidgetDeclaration",
    # Nodes
    "NodeKind",
    "SyntaxNode",
    # Parser
    "ParsedSource",
    "SourceParser",
    "get_parser",
]
